"""Pydantic models for the notifications an exchange emits.

Each notification is appended to the exchange's ordered event log and can
be ABI-encoded the way a log's data field would carry it.
"""

from abc import ABC, abstractmethod
from typing import Annotated, ClassVar, Literal

from eth_abi import encode  # type: ignore[attr-defined]
from pydantic import BaseModel, ConfigDict, Discriminator, Field

from exchange.constants import UINT256_MAX
from exchange.models.types import Address, address_to_bytes

# Token amount carried by a notification
Amount = Annotated[int, Field(ge=0, le=UINT256_MAX)]


class _Notification(BaseModel, ABC):
    """Shared behavior for exchange notifications."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # ABI types of the fields returned by abi_values(), in order
    ABI_TYPES: ClassVar[tuple[str, ...]] = ()

    @property
    def signature(self) -> str:
        """Canonical event signature, e.g. Transfer(address,address,uint256)."""
        return f"{self.name}({','.join(self.ABI_TYPES)})"  # type: ignore[attr-defined]

    @abstractmethod
    def abi_values(self) -> list[object]:
        """Field values in ABI_TYPES order."""

    def abi_encode(self) -> str:
        """ABI-encode all fields as 0x-prefixed hex."""
        return "0x" + encode(list(self.ABI_TYPES), self.abi_values()).hex()


class Transfer(_Notification):
    """Share-token movement; mints come from and burns go to the zero address."""

    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "address", "uint256")

    name: Literal["Transfer"] = "Transfer"
    sender: Address = Field(alias="from")
    to: Address
    amount: Amount

    def abi_values(self) -> list[object]:
        return [address_to_bytes(self.sender), address_to_bytes(self.to), self.amount]


class ReservesUpdated(_Notification):
    """Emitted on every commit with the newly cached reserves."""

    ABI_TYPES: ClassVar[tuple[str, ...]] = ("uint112", "uint112")

    name: Literal["ReservesUpdated"] = "ReservesUpdated"
    reserve0: Amount
    reserve1: Amount

    def abi_values(self) -> list[object]:
        return [self.reserve0, self.reserve1]


class LiquidityMinted(_Notification):
    """A deposit of both assets was converted into shares."""

    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "uint256", "uint256")

    name: Literal["LiquidityMinted"] = "LiquidityMinted"
    minter: Address
    amount0: Amount
    amount1: Amount

    def abi_values(self) -> list[object]:
        return [address_to_bytes(self.minter), self.amount0, self.amount1]


class LiquidityBurned(_Notification):
    """Shares held by the pool were redeemed for both assets."""

    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "address", "uint256", "uint256")

    name: Literal["LiquidityBurned"] = "LiquidityBurned"
    burner: Address
    to: Address
    amount0: Amount
    amount1: Amount

    def abi_values(self) -> list[object]:
        return [
            address_to_bytes(self.burner),
            address_to_bytes(self.to),
            self.amount0,
            self.amount1,
        ]


class Swap(_Notification):
    """One asset was sold into the pool for the other.

    Amounts are keyed by direction rather than by asset index: asset_in names
    the side that was sold, amount_in is what the pool received and amount_out
    is what it paid in the other asset. There are no amount0/amount1 pairs.
    """

    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "address", "address", "uint256", "uint256")

    name: Literal["Swap"] = "Swap"
    sender: Address
    to: Address
    asset_in: Address = Field(alias="assetIn")
    amount_in: Amount = Field(alias="amountIn")
    amount_out: Amount = Field(alias="amountOut")

    def abi_values(self) -> list[object]:
        return [
            address_to_bytes(self.sender),
            address_to_bytes(self.to),
            address_to_bytes(self.asset_in),
            self.amount_in,
            self.amount_out,
        ]


Event = Annotated[
    Transfer | ReservesUpdated | LiquidityMinted | LiquidityBurned | Swap,
    Discriminator("name"),
]
