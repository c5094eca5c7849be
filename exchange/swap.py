"""Constant-product swap pricing.

Pricing uses the constant product formula x * y = k with the fee taken
from the input side:

    amount_out = (amount_in * 997 * reserve_out) / (reserve_in * 1000 + amount_in * 997)

All arithmetic is exact integer math (Python ints are unbounded, so the
224-bit numerator cannot overflow) with floor division.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from exchange.config import DEFAULT_EXCHANGE_CONFIG, ExchangeConfig
from exchange.errors import InsufficientLiquidity, InvalidReserves, InvariantViolation
from exchange.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapQuote:
    """Priced swap against a reserve pair, before any transfer happens."""

    amount_in: int
    amount_out: int
    reserve_in: int
    reserve_out: int


class SwapEngine:
    """Fee-inclusive pricing and the post-trade invariant guard.

    The engine is stateless apart from its fee configuration; the pool
    supplies reserves and freshly observed balances on every call.
    """

    def __init__(self, config: ExchangeConfig = DEFAULT_EXCHANGE_CONFIG) -> None:
        self.config = config

    def get_input_price(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate the output for an exact input.

        Args:
            amount_in: Input asset amount (>= 0)
            reserve_in: Reserve of the input asset
            reserve_out: Reserve of the output asset

        Returns:
            Output asset amount, rounded down

        Raises:
            InvalidReserves: If either reserve is zero
            ValueError: If any argument is negative
        """
        _require_non_negative(amount_in=amount_in, reserve_in=reserve_in, reserve_out=reserve_out)
        if reserve_in == 0 or reserve_out == 0:
            raise InvalidReserves(f"Reserves must be positive: ({reserve_in}, {reserve_out})")

        amount_in_with_fee = S(amount_in) * self.config.fee_numerator
        numerator = amount_in_with_fee * reserve_out
        denominator = S(reserve_in) * self.config.fee_denominator + amount_in_with_fee

        return (numerator // denominator).value

    def get_output_price(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate the minimal input that buys at least amount_out.

        Formula: amount_in = (res_in * out * 1000) / ((res_out - out) * 997) + 1

        Raises:
            InvalidReserves: If either reserve is zero
            InsufficientLiquidity: If amount_out meets or exceeds reserve_out
            ValueError: If any argument is negative
        """
        _require_non_negative(
            amount_out=amount_out, reserve_in=reserve_in, reserve_out=reserve_out
        )
        if reserve_in == 0 or reserve_out == 0:
            raise InvalidReserves(f"Reserves must be positive: ({reserve_in}, {reserve_out})")
        if amount_out >= reserve_out:
            raise InsufficientLiquidity(
                f"Output {amount_out} would drain reserve {reserve_out}"
            )

        numerator = S(reserve_in) * amount_out * self.config.fee_denominator
        denominator = (S(reserve_out) - amount_out) * self.config.fee_numerator

        return ((numerator // denominator) + 1).value

    def quote_swap(self, amount_in: int, reserve_in: int, reserve_out: int) -> SwapQuote:
        """Price a swap and reject outputs the pool cannot pay.

        Raises:
            InsufficientLiquidity: If the output is zero or would drain the pool
        """
        amount_out = self.get_input_price(amount_in, reserve_in, reserve_out)
        if amount_out == 0 or amount_out >= reserve_out:
            raise InsufficientLiquidity(
                f"Output {amount_out} for input {amount_in} not payable from reserve {reserve_out}"
            )
        return SwapQuote(
            amount_in=amount_in,
            amount_out=amount_out,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
        )

    def check_constant_product(
        self,
        balances: tuple[int, int],
        amounts_out: tuple[int, int],
        reserves: tuple[int, int],
    ) -> tuple[int, int]:
        """Verify the fee-adjusted constant product did not decrease.

        The input credited to each side is whatever the balance gained over
        the reserve left after paying out, so extra balance landing during a
        reentrant transfer is charged the fee like any other input:

            amount_in_i = max(0, balance_i - (reserve_i - amount_out_i))
            adjusted_i  = balance_i * 1000 - amount_in_i * 3
            adjusted_0 * adjusted_1 >= reserve_0 * reserve_1 * 1000^2

        Args:
            balances: Freshly observed post-transfer balances
            amounts_out: Amounts paid out of each side
            reserves: Reserves committed before the swap

        Returns:
            The (amount0_in, amount1_in) credited by the check

        Raises:
            InvariantViolation: If the fee-adjusted product decreased
        """
        scale = self.config.fee_denominator
        fee = self.config.fee_complement

        amounts_in = tuple(
            S(balance).saturating_sub(S(reserve).saturating_sub(amount_out)).value
            for balance, reserve, amount_out in zip(balances, reserves, amounts_out, strict=True)
        )
        adjusted0 = S(balances[0]) * scale - S(amounts_in[0]) * fee
        adjusted1 = S(balances[1]) * scale - S(amounts_in[1]) * fee

        if adjusted0 * adjusted1 < S(reserves[0]) * reserves[1] * scale * scale:
            logger.warning(
                "constant_product_violated",
                balances=balances,
                reserves=reserves,
                amounts_in=amounts_in,
                amounts_out=amounts_out,
            )
            raise InvariantViolation(
                f"Constant product decreased: balances={balances} reserves={reserves}"
            )
        return amounts_in[0], amounts_in[1]


def _require_non_negative(**values: int) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValueError(f"{name} cannot be negative: {value}")


# Singleton instance
swap_engine = SwapEngine()


def get_input_price(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """Output for an exact input under the default 0.3% fee."""
    return swap_engine.get_input_price(amount_in, reserve_in, reserve_out)


def get_output_price(amount_out: int, reserve_in: int, reserve_out: int) -> int:
    """Minimal input for an exact output under the default 0.3% fee."""
    return swap_engine.get_output_price(amount_out, reserve_in, reserve_out)


__all__ = [
    "SwapEngine",
    "SwapQuote",
    "swap_engine",
    "get_input_price",
    "get_output_price",
]
