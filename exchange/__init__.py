"""Two-asset constant-product exchange with a block-weighted price oracle."""

from exchange.chain import Chain
from exchange.config import DEFAULT_EXCHANGE_CONFIG, ExchangeConfig
from exchange.ledger import FungibleAsset, ShareLedger, Token
from exchange.pool import Exchange
from exchange.state import PoolState
from exchange.swap import get_input_price, get_output_price

__version__ = "0.1.0"
__all__ = [
    "Chain",
    "Exchange",
    "ExchangeConfig",
    "DEFAULT_EXCHANGE_CONFIG",
    "FungibleAsset",
    "PoolState",
    "ShareLedger",
    "Token",
    "get_input_price",
    "get_output_price",
    "__version__",
]
