"""Two-asset constant-product exchange.

The exchange is simultaneously a market maker and the fungible token for
its own shares. Every state-changing operation follows the same shape:

1. Read both asset balances held at the exchange address.
2. Derive amounts from the surplus over the cached reserves, so callers
   push assets (or shares) to the exchange first and then call it.
3. Pay out, re-read balances, validate.
4. Stage the next reserve/oracle record, then commit it in one assignment.

Each operation runs inside a host transaction; any error restores the
exchange, its share ledger and both of its assets.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from exchange.chain import Chain, Journaled
from exchange.config import DEFAULT_EXCHANGE_CONFIG, ExchangeConfig
from exchange.constants import ZERO_ADDRESS
from exchange.errors import ExchangeError, NoInputProvided, ZeroLiquidityBurned
from exchange.ledger import FungibleAsset, LedgerSnapshot, ShareLedger
from exchange.liquidity import LiquidityAccountant
from exchange.models.events import (
    Event,
    LiquidityBurned,
    LiquidityMinted,
    ReservesUpdated,
    Swap,
)
from exchange.models.snapshot import PoolSnapshot
from exchange.models.types import normalize_address
from exchange.safe_int import S
from exchange.state import PoolState
from exchange.swap import SwapEngine

logger = structlog.get_logger()

ExchangeSnapshot = tuple[PoolState, LedgerSnapshot]


class Exchange:
    """Reserves, oracle and shares for one asset pair.

    Args:
        chain: Host providing the block index and transactions
        token0: Asset0 collaborator
        token1: Asset1 collaborator
        address: Address the exchange holds assets under (also its share token address)
        config: Fee and share-issuance configuration
    """

    def __init__(
        self,
        chain: Chain,
        token0: FungibleAsset,
        token1: FungibleAsset,
        address: str,
        config: ExchangeConfig = DEFAULT_EXCHANGE_CONFIG,
    ) -> None:
        if normalize_address(token0.address) == normalize_address(token1.address):
            raise ValueError(f"Exchange needs two distinct assets, got {token0.address} twice")

        self.address = normalize_address(address)
        self.token0 = token0
        self.token1 = token1
        self.config = config
        self.events: list[Event] = []

        self._chain = chain
        self._engine = SwapEngine(config)
        self._accountant = LiquidityAccountant(config)
        self._state = PoolState()
        self._shares = ShareLedger(self.address, self.events)

        # Assets are journaled with the exchange so a failed operation also
        # undoes their transfers. Foreign assets without snapshots are skipped.
        assets = [token for token in (token0, token1) if isinstance(token, Journaled)]
        chain.register(self, *assets)

    # --- Read accessors ---

    @property
    def state(self) -> PoolState:
        return self._state

    @property
    def reserve0(self) -> int:
        return self._state.reserve0

    @property
    def reserve1(self) -> int:
        return self._state.reserve1

    @property
    def block_number_last(self) -> int:
        return self._state.block_number_last

    @property
    def price0_cumulative_last(self) -> int:
        return self._state.price0_cumulative_last

    @property
    def price1_cumulative_last(self) -> int:
        return self._state.price1_cumulative_last

    @property
    def total_supply(self) -> int:
        return self._shares.total_supply

    def balance_of(self, holder: str) -> int:
        return self._shares.balance_of(holder)

    def get_reserves(self) -> tuple[int, int, int]:
        """Return (reserve0, reserve1, block_number_last)."""
        return self._state.get_reserves()

    def get_input_price(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Output for an exact input under this exchange's fee."""
        return self._engine.get_input_price(amount_in, reserve_in, reserve_out)

    def get_output_price(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Minimal input for an exact output under this exchange's fee."""
        return self._engine.get_output_price(amount_out, reserve_in, reserve_out)

    def snapshot_model(self) -> PoolSnapshot:
        state = self._state
        return PoolSnapshot(
            address=self.address,
            token0=self.token0.address,
            token1=self.token1.address,
            reserve0=state.reserve0,
            reserve1=state.reserve1,
            block_number_last=state.block_number_last,
            price0_cumulative_last=state.price0_cumulative_last,
            price1_cumulative_last=state.price1_cumulative_last,
            total_supply=self._shares.total_supply,
        )

    # --- Share token ---

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        """Move shares between holders (e.g. to this exchange before a burn)."""
        with self._operation("transfer"):
            return self._shares.transfer(sender, to, amount)

    # --- Liquidity ---

    def mint_liquidity(self, to: str, *, sender: str) -> int:
        """Issue shares for the assets deposited since the last commit.

        Returns:
            Shares credited to `to`

        Raises:
            InsufficientInitialLiquidity: On an undersized first deposit
            ZeroLiquidityMinted: If the deposit mints no shares
            ReserveOverflow: If a balance no longer fits in 112 bits
        """
        to, sender = normalize_address(to), normalize_address(sender)
        with self._operation("mint_liquidity"):
            balances = self._balances()
            plan = self._accountant.plan_mint(
                balances, self._state.reserves, self._shares.total_supply
            )

            # Staged first: a reserve overflow aborts before any share moves
            staged = self._stage(*balances)
            if plan.locked:
                self._shares.mint(ZERO_ADDRESS, plan.locked)
            self._shares.mint(to, plan.liquidity)
            self._commit(staged)
            self.events.append(
                LiquidityMinted(minter=sender, amount0=plan.amount0, amount1=plan.amount1)
            )

        logger.info(
            "liquidity_minted",
            pool=self.address,
            to=to,
            amount0=plan.amount0,
            amount1=plan.amount1,
            liquidity=plan.liquidity,
            total_supply=self._shares.total_supply,
        )
        return plan.liquidity

    def burn_liquidity(self, to: str, *, sender: str) -> tuple[int, int]:
        """Redeem every share held at the exchange address for both assets.

        Returns:
            (amount0, amount1) paid to `to`

        Raises:
            ZeroLiquidityBurned: If the burn would return nothing
        """
        to, sender = normalize_address(to), normalize_address(sender)
        with self._operation("burn_liquidity"):
            liquidity = self._shares.balance_of(self.address)
            amount0, amount1 = self._accountant.burn_amounts(
                liquidity, self._balances(), self._shares.total_supply
            )
            if amount0 == 0 and amount1 == 0:
                raise ZeroLiquidityBurned(
                    f"Burning {liquidity} of {self._shares.total_supply} shares returns nothing"
                )

            self._shares.burn(self.address, liquidity)
            self.token0.transfer(self.address, to, amount0)
            self.token1.transfer(self.address, to, amount1)

            self._commit(self._stage(*self._balances()))
            self.events.append(
                LiquidityBurned(burner=sender, to=to, amount0=amount0, amount1=amount1)
            )

        logger.info(
            "liquidity_burned",
            pool=self.address,
            to=to,
            liquidity=liquidity,
            amount0=amount0,
            amount1=amount1,
            total_supply=self._shares.total_supply,
        )
        return amount0, amount1

    # --- Swaps ---

    def swap0(self, to: str, *, sender: str) -> int:
        """Sell the asset0 surplus for asset1, paid to `to`."""
        return self._swap(0, to, sender)

    def swap1(self, to: str, *, sender: str) -> int:
        """Sell the asset1 surplus for asset0, paid to `to`."""
        return self._swap(1, to, sender)

    def _swap(self, index_in: int, to: str, sender: str) -> int:
        to, sender = normalize_address(to), normalize_address(sender)
        index_out = 1 - index_in
        tokens = (self.token0, self.token1)
        token_in, token_out = tokens[index_in], tokens[index_out]

        with self._operation(f"swap{index_in}"):
            reserves = self._state.reserves
            reserve_in, reserve_out = reserves[index_in], reserves[index_out]

            amount_in = S(token_in.balance_of(self.address)).saturating_sub(reserve_in).value
            if amount_in == 0:
                raise NoInputProvided(f"No {token_in.address} surplus over reserve {reserve_in}")

            quote = self._engine.quote_swap(amount_in, reserve_in, reserve_out)
            token_out.transfer(self.address, to, quote.amount_out)

            balances = self._balances()
            amounts_out = (0, quote.amount_out) if index_in == 0 else (quote.amount_out, 0)
            self._engine.check_constant_product(balances, amounts_out, reserves)

            self._commit(self._stage(*balances))
            self.events.append(
                Swap(
                    sender=sender,
                    to=to,
                    asset_in=normalize_address(token_in.address),
                    amount_in=amount_in,
                    amount_out=quote.amount_out,
                )
            )

        logger.info(
            "swap_executed",
            pool=self.address,
            asset_in=token_in.address,
            amount_in=amount_in,
            amount_out=quote.amount_out,
            reserve0=self._state.reserve0,
            reserve1=self._state.reserve1,
        )
        return quote.amount_out

    # --- Oracle ---

    def sync(self, *, sender: str | None = None) -> None:
        """Commit current balances as reserves and advance the oracle."""
        with self._operation("sync"):
            self._commit(self._stage(*self._balances()))

        logger.debug(
            "reserves_synced",
            pool=self.address,
            sender=sender,
            reserve0=self._state.reserve0,
            reserve1=self._state.reserve1,
            block_number_last=self._state.block_number_last,
        )

    # --- Internals ---

    def _balances(self) -> tuple[int, int]:
        return self.token0.balance_of(self.address), self.token1.balance_of(self.address)

    def _stage(self, balance0: int, balance1: int) -> PoolState:
        """Build the next record from the live state, without committing it.

        Reads the live state rather than a copy taken at operation start,
        so a reentrant commit earlier in the same block is not double-counted.
        """
        return self._state.advance(balance0, balance1, self._chain.block_number)

    def _commit(self, staged: PoolState) -> None:
        self._state = staged
        self.events.append(ReservesUpdated(reserve0=staged.reserve0, reserve1=staged.reserve1))

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        with self._chain.transaction():
            try:
                yield
            except ExchangeError as err:
                logger.warning(
                    "operation_failed",
                    pool=self.address,
                    operation=name,
                    error_type=type(err).__name__,
                    detail=str(err),
                )
                raise

    def snapshot(self) -> ExchangeSnapshot:
        return self._state, self._shares.snapshot()

    def restore(self, snapshot: ExchangeSnapshot) -> None:
        state, shares = snapshot
        self._state = state
        self._shares.restore(shares)


__all__ = ["Exchange"]
