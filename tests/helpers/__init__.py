"""Test helpers module for shared test utilities.

- constants: Account and contract addresses, common amounts
- tokens: Asset doubles with transfer hooks
- pools: Push-then-call helpers for driving an exchange
"""

from tests.helpers.constants import (
    OTHER,
    POOL,
    Q112,
    TOKEN0,
    TOKEN1,
    TOTAL_SUPPLY,
    WALLET,
    ZERO,
    expand_to_18_decimals,
)
from tests.helpers.pools import add_liquidity, remove_liquidity, swap_exact_input
from tests.helpers.tokens import HookedToken, TaxedToken

__all__ = [
    # Constants
    "WALLET",
    "OTHER",
    "ZERO",
    "POOL",
    "TOKEN0",
    "TOKEN1",
    "TOTAL_SUPPLY",
    "Q112",
    "expand_to_18_decimals",
    # Tokens
    "HookedToken",
    "TaxedToken",
    # Pools
    "add_liquidity",
    "remove_liquidity",
    "swap_exact_input",
]
