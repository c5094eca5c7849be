"""Configuration for exchange pricing and share issuance."""

import os
from dataclasses import dataclass

from exchange.constants import FEE_DENOMINATOR, FEE_NUMERATOR, MINIMUM_LOCKED_LIQUIDITY


@dataclass(frozen=True)
class ExchangeConfig:
    """Centralized configuration for an exchange pool.

    Attributes:
        fee_numerator: Priced share of every input unit (default: 997)
        fee_denominator: Fee scale (default: 1000, so 997/1000 is a 0.3% fee)
        minimum_locked_liquidity: Shares minted to the zero address on the
            first deposit and never redeemable (default: 0)
    """

    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR
    minimum_locked_liquidity: int = MINIMUM_LOCKED_LIQUIDITY

    def __post_init__(self) -> None:
        if self.fee_denominator <= 0:
            raise ValueError(f"fee_denominator must be positive: {self.fee_denominator}")
        if not (0 < self.fee_numerator <= self.fee_denominator):
            raise ValueError(
                f"fee_numerator must be in (0, {self.fee_denominator}]: {self.fee_numerator}"
            )
        if self.minimum_locked_liquidity < 0:
            raise ValueError(
                f"minimum_locked_liquidity cannot be negative: {self.minimum_locked_liquidity}"
            )

    @property
    def fee_complement(self) -> int:
        """Unpriced share of every input unit (3 for a 997/1000 fee)."""
        return self.fee_denominator - self.fee_numerator

    @classmethod
    def from_env(cls) -> "ExchangeConfig":
        """Build a configuration from environment variables.

        Configuration via environment variables:
        - EXCHANGE_FEE_NUMERATOR (default: 997)
        - EXCHANGE_FEE_DENOMINATOR (default: 1000)
        - EXCHANGE_MINIMUM_LOCKED_LIQUIDITY (default: 0)

        Raises:
            ValueError: If a variable is not an integer or the result is invalid
        """
        return cls(
            fee_numerator=_env_int("EXCHANGE_FEE_NUMERATOR", FEE_NUMERATOR),
            fee_denominator=_env_int("EXCHANGE_FEE_DENOMINATOR", FEE_DENOMINATOR),
            minimum_locked_liquidity=_env_int(
                "EXCHANGE_MINIMUM_LOCKED_LIQUIDITY", MINIMUM_LOCKED_LIQUIDITY
            ),
        )


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as err:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from err


# Default configuration instance
DEFAULT_EXCHANGE_CONFIG = ExchangeConfig()
