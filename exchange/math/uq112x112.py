"""UQ112x112 fixed-point math for the price oracle.

Prices are unsigned binary fixed-point numbers with 112 integer bits and
112 fractional bits, stored as integers scaled by 2^112. A spot price
built from two 112-bit reserves always fits in 224 bits, so a price
multiplied by a 32-bit block count always fits in 256 bits.

Cumulative prices live in 256-bit words and wrap modulo 2^256. Readers
must difference two observations with wrapping subtraction; the absolute
accumulator value carries no meaning.
"""

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar

from exchange.constants import Q112, UINT256_MODULUS

__all__ = [
    # Classes
    "UQ112x112",
    # Errors
    "FixedPointError",
    "FixedPointOverflow",
    "FixedPointDivisionByZero",
    # Functions
    "accumulate",
    "wrapping_sub",
    "average_price",
]

# =============================================================================
# Constants
# =============================================================================

RESOLUTION = 112


# =============================================================================
# Error classes
# =============================================================================


class FixedPointError(ArithmeticError):
    """Base error for fixed-point operations."""

    pass


class FixedPointOverflow(FixedPointError):
    """Operand or result exceeds its fixed width."""

    pass


class FixedPointDivisionByZero(FixedPointError, ZeroDivisionError):
    """Fixed-point division by zero."""

    pass


def _require_width(value: int, bits: int, what: str) -> int:
    if value < 0 or value >> bits:
        raise FixedPointOverflow(f"{what} does not fit in uint{bits}: {value}")
    return value


# =============================================================================
# Value class
# =============================================================================


class UQ112x112:
    """Unsigned 112.112 fixed-point number stored as int.

    Example: 1.5 is stored as 3 * 2^111.
    """

    ONE: ClassVar[int] = Q112

    __slots__ = ("value",)
    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    def __init__(self, value: int) -> None:
        """Create from raw scaled value."""
        self.value = _require_width(value, 224, "UQ112x112")

    @classmethod
    def encode(cls, y: int) -> UQ112x112:
        """Encode a uint112 as a fixed-point number (y * 2^112)."""
        return cls(_require_width(y, 112, "encode operand") * Q112)

    @classmethod
    def fraction(cls, numerator: int, denominator: int) -> UQ112x112:
        """Ratio of two uint112 values, floored to 112 fractional bits.

        fraction(reserve1, reserve0) is the spot price of asset0 in asset1.
        """
        return cls.encode(numerator).uqdiv(denominator)

    def uqdiv(self, y: int) -> UQ112x112:
        """Divide by a uint112, flooring the result."""
        _require_width(y, 112, "uqdiv divisor")
        if y == 0:
            raise FixedPointDivisionByZero("UQ112x112 division by zero")
        return UQ112x112(self.value // y)

    def mul_uint(self, y: int) -> int:
        """Multiply by an unsigned integer, returning a raw 256-bit word.

        Raises:
            FixedPointOverflow: If the product exceeds 256 bits
        """
        if y < 0:
            raise FixedPointOverflow(f"Multiplier cannot be negative: {y}")
        return _require_width(self.value * y, 256, "UQ112x112 product")

    def decode(self) -> int:
        """Integer part, truncating the fraction."""
        return self.value >> RESOLUTION

    def to_decimal(self) -> Decimal:
        """Convert to Decimal for display."""
        return Decimal(self.value) / Decimal(self.ONE)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UQ112x112):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, UQ112x112):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, UQ112x112):
            return NotImplemented
        return self.value <= other.value

    def __repr__(self) -> str:
        return f"UQ112x112({self.value})"

    def __str__(self) -> str:
        return str(self.to_decimal())


# =============================================================================
# Accumulator helpers
# =============================================================================


def accumulate(cumulative: int, price: UQ112x112, elapsed: int) -> int:
    """Add price * elapsed to a 256-bit accumulator, wrapping modulo 2^256."""
    _require_width(cumulative, 256, "cumulative price")
    return (cumulative + price.mul_uint(elapsed)) % UINT256_MODULUS


def wrapping_sub(later: int, earlier: int) -> int:
    """Difference of two accumulator readings, modulo 2^256."""
    return (later - earlier) % UINT256_MODULUS


def average_price(cumulative_start: int, cumulative_end: int, elapsed: int) -> UQ112x112:
    """Time-weighted average price between two accumulator observations.

    Args:
        cumulative_start: Accumulator reading at the earlier block
        cumulative_end: Accumulator reading at the later block
        elapsed: Blocks between the two readings

    Returns:
        The average spot price over the window as UQ112x112

    Raises:
        ValueError: If elapsed is not positive
    """
    if elapsed <= 0:
        raise ValueError(f"Averaging window must be positive, got {elapsed}")
    return UQ112x112(wrapping_sub(cumulative_end, cumulative_start) // elapsed)
