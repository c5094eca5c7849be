"""Host environment: block index and all-or-nothing transactions.

Operations run strictly one at a time, but an asset transfer may call
back into the exchange before the outer operation commits. Each
transaction therefore snapshots every registered participant on entry
and restores them all if the body raises, including for nested
(reentrant) transactions.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol, runtime_checkable

import structlog

logger = structlog.get_logger()


@runtime_checkable
class Journaled(Protocol):
    """State that can be captured and put back by a host transaction."""

    def snapshot(self) -> Any: ...

    def restore(self, snapshot: Any) -> None: ...


class Chain:
    """Block clock plus the transaction journal.

    Usage:
        chain = Chain()
        exchange = Exchange(chain, token0, token1, address)  # registers all three

        with chain.transaction():
            ...  # any exception reverts every registered participant

        chain.mine()  # next block
    """

    def __init__(self, block_number: int = 1) -> None:
        if block_number < 0:
            raise ValueError(f"Block number cannot be negative: {block_number}")
        self._block_number = block_number
        self._participants: list[Journaled] = []
        self._depth = 0

    @property
    def block_number(self) -> int:
        return self._block_number

    @property
    def depth(self) -> int:
        """Number of transactions currently open (more than 1 means reentry)."""
        return self._depth

    def mine(self, blocks: int = 1) -> int:
        """Advance the block index and return the new value."""
        if blocks < 1:
            raise ValueError(f"Must mine at least one block, got {blocks}")
        self._block_number += blocks
        return self._block_number

    def register(self, *participants: Journaled) -> None:
        for participant in participants:
            if not isinstance(participant, Journaled):
                raise TypeError(f"{type(participant).__name__} does not support snapshot/restore")
            if not any(p is participant for p in self._participants):
                self._participants.append(participant)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        snapshots = [(p, p.snapshot()) for p in self._participants]
        self._depth += 1
        try:
            yield
        except Exception as err:
            for participant, snapshot in reversed(snapshots):
                participant.restore(snapshot)
            logger.debug(
                "transaction_reverted",
                block_number=self._block_number,
                depth=self._depth,
                error_type=type(err).__name__,
            )
            raise
        finally:
            self._depth -= 1


__all__ = ["Chain", "Journaled"]
