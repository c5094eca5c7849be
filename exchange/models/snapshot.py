"""Pydantic models for the read-only exchange surface."""

from pydantic import BaseModel, Field

from exchange.models.types import Address, Uint256


class PoolSnapshot(BaseModel):
    """Point-in-time view of an exchange's reserves, oracle and share supply."""

    address: Address = Field(description="Pool address (also the share token address)")
    token0: Address = Field(description="Asset0 address")
    token1: Address = Field(description="Asset1 address")
    reserve0: Uint256
    reserve1: Uint256
    block_number_last: int = Field(alias="blockNumberLast", ge=0)
    price0_cumulative_last: Uint256 = Field(alias="price0CumulativeLast")
    price1_cumulative_last: Uint256 = Field(alias="price1CumulativeLast")
    total_supply: Uint256 = Field(alias="totalSupply")

    model_config = {"populate_by_name": True}


class InputQuoteRequest(BaseModel):
    """Price an exact input against explicit reserves."""

    amount_in: Uint256 = Field(alias="amountIn")
    reserve_in: Uint256 = Field(alias="reserveIn")
    reserve_out: Uint256 = Field(alias="reserveOut")

    model_config = {"populate_by_name": True}


class InputQuoteResponse(BaseModel):
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class OutputQuoteRequest(BaseModel):
    """Price an exact output against explicit reserves."""

    amount_out: Uint256 = Field(alias="amountOut")
    reserve_in: Uint256 = Field(alias="reserveIn")
    reserve_out: Uint256 = Field(alias="reserveOut")

    model_config = {"populate_by_name": True}


class OutputQuoteResponse(BaseModel):
    amount_in: Uint256 = Field(alias="amountIn")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Body returned when an exchange error is mapped to HTTP."""

    detail: str
    error: str
