"""Pytest configuration and fixtures."""

from collections.abc import Callable

import pytest

from exchange.chain import Chain
from exchange.config import ExchangeConfig
from exchange.ledger import Token
from exchange.pool import Exchange
from tests.helpers import POOL, TOKEN0, TOKEN1, TOTAL_SUPPLY, WALLET, HookedToken, add_liquidity

# =============================================================================
# Host and assets
# =============================================================================


@pytest.fixture
def chain() -> Chain:
    """A fresh chain at block 1."""
    return Chain()


@pytest.fixture
def token0(chain: Chain) -> HookedToken:
    """Asset0, fully held by WALLET and journaled by the chain."""
    token = HookedToken(TOKEN0, symbol="TK0", initial_holder=WALLET, initial_supply=TOTAL_SUPPLY)
    chain.register(token)
    return token


@pytest.fixture
def token1(chain: Chain) -> HookedToken:
    """Asset1, fully held by WALLET and journaled by the chain."""
    token = HookedToken(TOKEN1, symbol="TK1", initial_holder=WALLET, initial_supply=TOTAL_SUPPLY)
    chain.register(token)
    return token


# =============================================================================
# Exchange
# =============================================================================


@pytest.fixture
def exchange(chain: Chain, token0: Token, token1: Token) -> Exchange:
    """An empty exchange with the default 0.3% fee and no locked shares."""
    return Exchange(chain, token0, token1, POOL)


@pytest.fixture
def make_exchange(chain: Chain, token0: Token, token1: Token) -> Callable[[ExchangeConfig], Exchange]:
    """Build an exchange over the shared assets with a custom configuration."""

    def _make(config: ExchangeConfig) -> Exchange:
        return Exchange(chain, token0, token1, POOL, config)

    return _make


@pytest.fixture
def provide_liquidity(exchange: Exchange) -> Callable[[int, int], int]:
    """Deposit into the default exchange: provide_liquidity(amount0, amount1)."""

    def _provide(amount0: int, amount1: int) -> int:
        return add_liquidity(exchange, amount0, amount1)

    return _provide
