"""Shared type definitions for exchange models.

These types are used by the notification and snapshot models.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from exchange.constants import UINT256_MAX

_ADDRESS_RE = re.compile(r"0x[a-fA-F0-9]{40}")


def validate_uint256(value: Any) -> str:
    """Validate that a value is a valid uint256 and return it as a decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid uint256 as decimal string

    Raises:
        ValueError: If value is not a valid non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a boolean")

    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if int_value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")

    return str(int_value)


# Ethereum-style address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# 256-bit unsigned integer as decimal string (validated)
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]


def is_valid_address(address: str) -> bool:
    """Check whether a string is a 0x-prefixed, 40 hex character address."""
    if not isinstance(address, str):
        return False
    return _ADDRESS_RE.fullmatch(address) is not None


def normalize_address(address: str) -> str:
    """Validate an address and return its lowercase form.

    Raises:
        ValueError: If the address is malformed
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid address: {address!r}")
    return address.lower()


def address_to_bytes(address: str) -> bytes:
    """Convert a validated address into its 20 raw bytes."""
    return bytes.fromhex(normalize_address(address)[2:])
