"""API endpoints for the exchange."""

import structlog
from fastapi import APIRouter, Depends

from exchange.chain import Chain
from exchange.config import ExchangeConfig
from exchange.ledger import Token
from exchange.models.snapshot import (
    InputQuoteRequest,
    InputQuoteResponse,
    OutputQuoteRequest,
    OutputQuoteResponse,
    PoolSnapshot,
)
from exchange.pool import Exchange

logger = structlog.get_logger()

router = APIRouter()

# Addresses of the default in-memory pool served when nothing is injected
DEFAULT_POOL_ADDRESS = "0x" + "ee" * 20
DEFAULT_TOKEN0_ADDRESS = "0x" + "a0" * 20
DEFAULT_TOKEN1_ADDRESS = "0x" + "b1" * 20

_default_exchange: Exchange | None = None


def get_default_exchange() -> Exchange:
    """Lazily build an empty exchange over two in-memory assets."""
    global _default_exchange
    if _default_exchange is None:
        chain = Chain()
        token0 = Token(DEFAULT_TOKEN0_ADDRESS, symbol="TK0")
        token1 = Token(DEFAULT_TOKEN1_ADDRESS, symbol="TK1")
        _default_exchange = Exchange(
            chain, token0, token1, DEFAULT_POOL_ADDRESS, ExchangeConfig.from_env()
        )
        logger.info("default_exchange_created", pool=_default_exchange.address)
    return _default_exchange


def get_exchange() -> Exchange:
    """Dependency provider for the exchange instance.

    Override this in tests to inject a seeded exchange:
        app.dependency_overrides[get_exchange] = lambda: exchange

    Returns:
        The exchange to serve.
    """
    return get_default_exchange()


@router.get("/pool", response_model_by_alias=True)
async def pool_state(exchange: Exchange = Depends(get_exchange)) -> PoolSnapshot:
    """Current reserves, oracle accumulators and share supply."""
    return exchange.snapshot_model()


@router.post("/quote/input", response_model_by_alias=True)
async def quote_input(
    request: InputQuoteRequest,
    exchange: Exchange = Depends(get_exchange),
) -> InputQuoteResponse:
    """Output amount for an exact input against the given reserves.

    Error Handling:
        - Zero reserve: 422 with error "InvalidReserves"
    """
    amount_out = exchange.get_input_price(
        int(request.amount_in), int(request.reserve_in), int(request.reserve_out)
    )
    logger.debug("input_quoted", amount_in=request.amount_in, amount_out=amount_out)
    return InputQuoteResponse(amount_out=amount_out)


@router.post("/quote/output", response_model_by_alias=True)
async def quote_output(
    request: OutputQuoteRequest,
    exchange: Exchange = Depends(get_exchange),
) -> OutputQuoteResponse:
    """Minimal input for an exact output against the given reserves.

    Error Handling:
        - Zero reserve: 422 with error "InvalidReserves"
        - Output at or above reserve_out: 422 with error "InsufficientLiquidity"
    """
    amount_in = exchange.get_output_price(
        int(request.amount_out), int(request.reserve_in), int(request.reserve_out)
    )
    logger.debug("output_quoted", amount_out=request.amount_out, amount_in=amount_in)
    return OutputQuoteResponse(amount_in=amount_in)
