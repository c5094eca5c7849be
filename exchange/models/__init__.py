"""Pydantic models for exchange notifications and snapshots."""

from exchange.models.events import (
    Event,
    LiquidityBurned,
    LiquidityMinted,
    ReservesUpdated,
    Swap,
    Transfer,
)
from exchange.models.snapshot import (
    ErrorResponse,
    InputQuoteRequest,
    InputQuoteResponse,
    OutputQuoteRequest,
    OutputQuoteResponse,
    PoolSnapshot,
)
from exchange.models.types import Address, Uint256, normalize_address

__all__ = [
    # Types
    "Address",
    "Uint256",
    "normalize_address",
    # Notifications
    "Event",
    "Transfer",
    "ReservesUpdated",
    "LiquidityMinted",
    "LiquidityBurned",
    "Swap",
    # Read surface
    "PoolSnapshot",
    "InputQuoteRequest",
    "InputQuoteResponse",
    "OutputQuoteRequest",
    "OutputQuoteResponse",
    "ErrorResponse",
]
