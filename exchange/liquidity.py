"""Proportional share issuance and redemption.

Shares are minted against the surplus of both assets over the cached
reserves and redeemed against the pool's actual balances:

    first deposit:  shares = floor(sqrt(amount0 * amount1)) - locked
    later deposits: shares = min(amount0 * supply / reserve0, amount1 * supply / reserve1)
    redemption:     amount_i = shares * balance_i / supply

Every division floors, so rounding always favors the pool.
"""

from __future__ import annotations

from dataclasses import dataclass

from exchange.config import DEFAULT_EXCHANGE_CONFIG, ExchangeConfig
from exchange.errors import InsufficientInitialLiquidity, InvalidReserves, ZeroLiquidityMinted
from exchange.safe_int import S


@dataclass(frozen=True)
class MintPlan:
    """Shares to issue for a deposit.

    Attributes:
        amount0: Deposited surplus of asset0
        amount1: Deposited surplus of asset1
        liquidity: Shares credited to the depositor
        locked: Shares minted to the zero address (first deposit only)
    """

    amount0: int
    amount1: int
    liquidity: int
    locked: int = 0


class LiquidityAccountant:
    """Computes share amounts; never touches ledgers or reserves."""

    def __init__(self, config: ExchangeConfig = DEFAULT_EXCHANGE_CONFIG) -> None:
        self.config = config

    def initial_liquidity(self, amount0: int, amount1: int) -> int:
        """Shares for the first deposit, net of the locked minimum.

        Raises:
            InsufficientInitialLiquidity: If the deposit does not exceed the locked minimum
        """
        root = (S(amount0) * amount1).sqrt()
        locked = self.config.minimum_locked_liquidity
        if root <= locked:
            raise InsufficientInitialLiquidity(
                f"sqrt({amount0} * {amount1}) = {root.value} does not exceed locked {locked}"
            )
        return (root - locked).value

    def proportional_liquidity(
        self,
        amount0: int,
        amount1: int,
        reserve0: int,
        reserve1: int,
        total_supply: int,
    ) -> int:
        """Shares for a deposit into a funded pool.

        The smaller of the two ratios wins; the excess of the other asset
        stays in the pool and accrues to existing holders.

        Raises:
            InvalidReserves: If either reserve is zero while shares exist
        """
        if reserve0 == 0 or reserve1 == 0:
            raise InvalidReserves(
                f"Cannot price a deposit against reserves ({reserve0}, {reserve1})"
            )
        by_asset0 = (S(amount0) * total_supply) // reserve0
        by_asset1 = (S(amount1) * total_supply) // reserve1
        return by_asset0.min(by_asset1).value

    def plan_mint(
        self,
        balances: tuple[int, int],
        reserves: tuple[int, int],
        total_supply: int,
    ) -> MintPlan:
        """Plan a deposit from freshly observed balances.

        Raises:
            InsufficientInitialLiquidity: On an undersized first deposit
            ZeroLiquidityMinted: If the deposit would mint zero shares
        """
        amount0 = S(balances[0]).saturating_sub(reserves[0]).value
        amount1 = S(balances[1]).saturating_sub(reserves[1]).value

        if total_supply == 0:
            liquidity = self.initial_liquidity(amount0, amount1)
            locked = self.config.minimum_locked_liquidity
        else:
            liquidity = self.proportional_liquidity(
                amount0, amount1, reserves[0], reserves[1], total_supply
            )
            locked = 0

        if liquidity == 0:
            raise ZeroLiquidityMinted(
                f"Deposit ({amount0}, {amount1}) mints no shares against supply {total_supply}"
            )
        return MintPlan(amount0=amount0, amount1=amount1, liquidity=liquidity, locked=locked)

    def burn_amounts(
        self,
        liquidity: int,
        balances: tuple[int, int],
        total_supply: int,
    ) -> tuple[int, int]:
        """Assets redeemed by burning shares, pro rata to actual balances.

        Returns (0, 0) when there is nothing to redeem against.
        """
        if total_supply == 0 or liquidity == 0:
            return 0, 0
        amount0 = (S(liquidity) * balances[0]) // total_supply
        amount1 = (S(liquidity) * balances[1]) // total_supply
        return amount0.value, amount1.value


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Amount of asset B matching amount_a at the current reserve ratio.

    Raises:
        ValueError: If amount_a is not positive
        InvalidReserves: If either reserve is zero
    """
    if amount_a <= 0:
        raise ValueError(f"Quote amount must be positive: {amount_a}")
    if reserve_a == 0 or reserve_b == 0:
        raise InvalidReserves(f"Reserves must be positive: ({reserve_a}, {reserve_b})")
    return ((S(amount_a) * reserve_b) // reserve_a).value


__all__ = ["LiquidityAccountant", "MintPlan", "quote"]
