"""Fungible balance ledgers.

FungibleAsset is the narrow capability the exchange needs from each
underlying asset. Ledger is an in-memory implementation of it; ShareLedger
is the exchange's own share token, and Token is a standalone asset.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import structlog

from exchange.constants import ZERO_ADDRESS
from exchange.errors import InsufficientBalance
from exchange.models.events import Event, Transfer
from exchange.models.types import normalize_address
from exchange.safe_int import S

logger = structlog.get_logger()


@runtime_checkable
class FungibleAsset(Protocol):
    """Capability interface for an asset held by the exchange.

    Every call may run arbitrary code (including calls back into the
    exchange), so callers must re-read balances after any transfer.
    """

    @property
    def address(self) -> str: ...

    @property
    def total_supply(self) -> int: ...

    def balance_of(self, holder: str) -> int: ...

    def transfer(self, sender: str, to: str, amount: int) -> bool: ...


LedgerSnapshot = tuple[dict[str, int], int, int]


class Ledger:
    """Supply and per-holder balances with Transfer notifications.

    Journaled: snapshot()/restore() let a host transaction revert it.
    """

    def __init__(self, address: str, events: list[Event] | None = None) -> None:
        self.address = normalize_address(address)
        self.events: list[Event] = events if events is not None else []
        self._balances: dict[str, int] = {}
        self._total_supply = 0

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, holder: str) -> int:
        return self._balances.get(normalize_address(holder), 0)

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        """Move amount from sender to to.

        Raises:
            InsufficientBalance: If sender holds less than amount
        """
        sender, to = normalize_address(sender), normalize_address(to)
        self._debit(sender, amount)
        self._credit(to, amount)
        self.events.append(Transfer(sender=sender, to=to, amount=amount))
        return True

    def mint(self, to: str, amount: int) -> None:
        to = normalize_address(to)
        total_supply = (S(self._total_supply) + amount).to_uint256()
        self._credit(to, amount)
        self._total_supply = total_supply
        self.events.append(Transfer(sender=ZERO_ADDRESS, to=to, amount=amount))

    def burn(self, holder: str, amount: int) -> None:
        """Destroy amount of holder's balance.

        Raises:
            InsufficientBalance: If holder holds less than amount
        """
        holder = normalize_address(holder)
        self._debit(holder, amount)
        self._total_supply = (S(self._total_supply) - amount).value
        self.events.append(Transfer(sender=holder, to=ZERO_ADDRESS, amount=amount))

    def _debit(self, holder: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Amount cannot be negative: {amount}")
        balance = self._balances.get(holder, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"{holder} holds {balance} of {self.address}, needs {amount}"
            )
        self._balances[holder] = balance - amount

    def _credit(self, holder: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Amount cannot be negative: {amount}")
        self._balances[holder] = self._balances.get(holder, 0) + amount

    def snapshot(self) -> LedgerSnapshot:
        return dict(self._balances), self._total_supply, len(self.events)

    def restore(self, snapshot: LedgerSnapshot) -> None:
        balances, total_supply, event_count = snapshot
        self._balances = dict(balances)
        self._total_supply = total_supply
        del self.events[event_count:]


class ShareLedger(Ledger):
    """The exchange's own share token.

    Shares live at the exchange's address and log into the exchange's
    event list, so share movements interleave with pool notifications.
    """


class Token(Ledger):
    """Standalone in-memory asset, minted once to an initial holder."""

    def __init__(
        self,
        address: str,
        *,
        symbol: str = "",
        initial_holder: str | None = None,
        initial_supply: int = 0,
    ) -> None:
        super().__init__(address)
        self.symbol = symbol
        if initial_holder is not None and initial_supply > 0:
            self.mint(initial_holder, initial_supply)
            logger.debug(
                "token_created",
                token=self.address,
                symbol=symbol,
                initial_supply=initial_supply,
            )


__all__ = ["FungibleAsset", "Ledger", "ShareLedger", "Token"]
