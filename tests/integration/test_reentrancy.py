"""Tests for reentrant calls and all-or-nothing rollback.

Asset transfers may call back into the exchange before the outer
operation commits. These tests drive such callbacks through HookedToken
and a hostile TaxedToken.
"""

import pytest

from exchange.chain import Chain
from exchange.errors import InvariantViolation, NoInputProvided
from exchange.ledger import Token
from exchange.models.events import ReservesUpdated, Swap
from exchange.pool import Exchange
from tests.helpers import (
    OTHER,
    POOL,
    Q112,
    TOKEN0,
    TOKEN1,
    TOTAL_SUPPLY,
    WALLET,
    TaxedToken,
    add_liquidity,
)
from tests.helpers import expand_to_18_decimals as e18

SWAP0_OUT = 1662497915624478906


class TestReentrantSync:
    """Tests for a sync issued from inside a swap payout."""

    def test_oracle_ticks_once(self, exchange, chain, token0, token1, provide_liquidity):
        provide_liquidity(e18(5), e18(10))
        chain.mine()
        token1.on_transfer = lambda sender, to, amount: exchange.sync(sender=to)

        token0.transfer(WALLET, POOL, e18(1))
        amount_out = exchange.swap0(WALLET, sender=WALLET)

        assert amount_out == SWAP0_OUT
        # Price at the (5, 10) reserves, counted for one block only
        assert exchange.price0_cumulative_last == 2 * Q112
        assert exchange.price1_cumulative_last == Q112 // 2
        assert exchange.get_reserves() == (e18(6), e18(10) - SWAP0_OUT, 2)

    def test_both_commits_are_logged(self, exchange, token0, token1, provide_liquidity):
        provide_liquidity(e18(5), e18(10))
        token1.on_transfer = lambda sender, to, amount: exchange.sync()

        token0.transfer(WALLET, POOL, e18(1))
        exchange.swap0(WALLET, sender=WALLET)

        post = ReservesUpdated(reserve0=e18(6), reserve1=e18(10) - SWAP0_OUT)
        assert exchange.events[-3:] == [
            post,
            post,
            Swap(
                sender=WALLET,
                to=WALLET,
                asset_in=TOKEN0,
                amount_in=e18(1),
                amount_out=SWAP0_OUT,
            ),
        ]


class TestReentrantSwap:
    """Tests for a swap issued from inside a swap payout."""

    def test_double_spend_of_input_reverts_everything(
        self, exchange, token0, token1, provide_liquidity
    ):
        """The inner swap sees the same surplus and fails the invariant check."""
        provide_liquidity(e18(5), e18(10))
        token0.transfer(WALLET, POOL, e18(1))
        state_before = exchange.state
        events_before = list(exchange.events)
        token1_events_before = list(token1.events)

        token1.on_transfer = lambda sender, to, amount: exchange.swap0(OTHER, sender=OTHER)
        with pytest.raises(InvariantViolation):
            exchange.swap0(WALLET, sender=WALLET)

        assert exchange.state == state_before
        assert exchange.events == events_before
        assert token1.events == token1_events_before
        assert token1.balance_of(OTHER) == 0
        assert token1.balance_of(WALLET) == TOTAL_SUPPLY - e18(10)
        assert token1.balance_of(POOL) == e18(10)

    def test_failed_inner_call_leaves_outer_intact(
        self, exchange, token0, token1, provide_liquidity
    ):
        """An inner revert caught by the caller only undoes the inner frame."""
        provide_liquidity(e18(5), e18(10))
        failures: list[Exception] = []

        def reenter(sender: str, to: str, amount: int) -> None:
            try:
                exchange.swap1(OTHER, sender=OTHER)
            except NoInputProvided as err:
                failures.append(err)

        token1.on_transfer = reenter
        token0.transfer(WALLET, POOL, e18(1))
        amount_out = exchange.swap0(WALLET, sender=WALLET)

        assert len(failures) == 1
        assert amount_out == SWAP0_OUT
        assert token1.balance_of(WALLET) == TOTAL_SUPPLY - e18(10) + SWAP0_OUT
        assert exchange.get_reserves()[:2] == (e18(6), e18(10) - SWAP0_OUT)


class TestHostileAsset:
    """Tests for an asset that skims the exchange on every payout."""

    @staticmethod
    def build(tax: int) -> Exchange:
        """Exchange over assets the caller never registered with the chain."""
        chain = Chain()
        token0 = Token(TOKEN0, initial_holder=WALLET, initial_supply=TOTAL_SUPPLY)
        token1 = TaxedToken(
            TOKEN1,
            source=POOL,
            tax=tax,
            initial_holder=WALLET,
            initial_supply=TOTAL_SUPPLY,
        )
        exchange = Exchange(chain, token0, token1, POOL)
        add_liquidity(exchange, e18(5), e18(10))
        return exchange

    @pytest.fixture
    def taxed_exchange(self) -> Exchange:
        return self.build(tax=e18(1))

    def test_invariant_violation_rolls_back(self, taxed_exchange):
        exchange = taxed_exchange
        token0, token1 = exchange.token0, exchange.token1
        token0.transfer(WALLET, POOL, e18(1))

        state_before = exchange.state
        events_before = list(exchange.events)
        supply1_before = token1.total_supply
        token1_events_before = list(token1.events)

        with pytest.raises(InvariantViolation):
            exchange.swap0(WALLET, sender=WALLET)

        assert exchange.state == state_before
        assert exchange.events == events_before
        assert token1.total_supply == supply1_before
        assert token1.events == token1_events_before
        assert token1.balance_of(POOL) == e18(10)
        assert token1.balance_of(WALLET) == TOTAL_SUPPLY - e18(10)
        # The pushed input is still a claimable surplus
        assert token0.balance_of(POOL) == e18(6)

    def test_small_tax_payout_is_undone(self):
        """Balances match reserves again once the payout is reverted."""
        exchange = self.build(tax=10**17)
        token0, token1 = exchange.token0, exchange.token1
        token0.transfer(WALLET, POOL, e18(1))
        supply1_before = token1.total_supply

        with pytest.raises(InvariantViolation):
            exchange.swap0(WALLET, sender=WALLET)

        assert token1.balance_of(POOL) == exchange.reserve1 == e18(10)
        assert token1.total_supply == supply1_before
        assert token1.balance_of(WALLET) == TOTAL_SUPPLY - e18(10)


class TestFailingPayout:
    """Tests for an asset transfer that raises mid-operation."""

    def test_burn_reverts_when_payout_fails(self, exchange, token0, token1, provide_liquidity):
        liquidity = provide_liquidity(e18(3), e18(3))
        exchange.transfer(WALLET, POOL, liquidity)
        events_before = list(exchange.events)

        def explode(sender: str, to: str, amount: int) -> None:
            raise RuntimeError("payout rejected")

        token1.on_transfer = explode
        with pytest.raises(RuntimeError, match="payout rejected"):
            exchange.burn_liquidity(WALLET, sender=WALLET)

        assert exchange.balance_of(POOL) == liquidity
        assert exchange.total_supply == liquidity
        assert exchange.events == events_before
        assert token0.balance_of(POOL) == e18(3)
        assert token1.balance_of(POOL) == e18(3)

        # The same shares can still be redeemed once the asset behaves
        assert exchange.burn_liquidity(WALLET, sender=WALLET) == (e18(3), e18(3))

