"""Pool reserve and price-oracle record.

PoolState is immutable: every commit builds the next record with
advance() and swaps it in only after all validation has passed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

import structlog

from exchange.constants import UINT32_MODULUS, UINT112_MAX
from exchange.errors import ReserveOverflow
from exchange.math.uq112x112 import UQ112x112, accumulate

logger = structlog.get_logger()

_MASK112 = (1 << 112) - 1
_MASK32 = (1 << 32) - 1


@dataclass(frozen=True)
class PoolState:
    """Cached reserves plus the cumulative-price oracle.

    Attributes:
        reserve0: Committed holdings of asset0 (uint112)
        reserve1: Committed holdings of asset1 (uint112)
        block_number_last: Block of the last commit, stored modulo 2^32
        price0_cumulative_last: Sum of UQ112x112 price of asset0 (in asset1) per block, mod 2^256
        price1_cumulative_last: Sum of UQ112x112 price of asset1 (in asset0) per block, mod 2^256
    """

    reserve0: int = 0
    reserve1: int = 0
    block_number_last: int = 0
    price0_cumulative_last: int = 0
    price1_cumulative_last: int = 0

    @property
    def reserves(self) -> tuple[int, int]:
        return self.reserve0, self.reserve1

    def get_reserves(self) -> tuple[int, int, int]:
        """Return (reserve0, reserve1, block_number_last)."""
        return self.reserve0, self.reserve1, self.block_number_last

    def blocks_elapsed(self, block_number: int) -> int:
        """Blocks since the last commit, using 32-bit wraparound."""
        return (block_number - self.block_number_last) % UINT32_MODULUS

    def advance(self, balance0: int, balance1: int, block_number: int) -> PoolState:
        """Build the next record for a commit at block_number.

        The oracle is weighted with the reserves that were in force since
        the last commit, once per block: a second commit in the same block
        sees zero elapsed blocks and adds nothing.

        Args:
            balance0: Freshly observed balance of asset0
            balance1: Freshly observed balance of asset1
            block_number: Current block index

        Returns:
            A new PoolState; self is left untouched

        Raises:
            ReserveOverflow: If either balance exceeds uint112
        """
        if not (0 <= balance0 <= UINT112_MAX and 0 <= balance1 <= UINT112_MAX):
            raise ReserveOverflow(f"Balances ({balance0}, {balance1}) exceed uint112")

        elapsed = self.blocks_elapsed(block_number)
        price0_cumulative = self.price0_cumulative_last
        price1_cumulative = self.price1_cumulative_last

        if elapsed > 0 and self.reserve0 != 0 and self.reserve1 != 0:
            price0_cumulative = accumulate(
                price0_cumulative, UQ112x112.fraction(self.reserve1, self.reserve0), elapsed
            )
            price1_cumulative = accumulate(
                price1_cumulative, UQ112x112.fraction(self.reserve0, self.reserve1), elapsed
            )
            logger.debug(
                "oracle_advanced",
                blocks_elapsed=elapsed,
                reserve0=self.reserve0,
                reserve1=self.reserve1,
            )

        return replace(
            self,
            reserve0=balance0,
            reserve1=balance1,
            block_number_last=block_number % UINT32_MODULUS,
            price0_cumulative_last=price0_cumulative,
            price1_cumulative_last=price1_cumulative,
        )

    def to_storage_slots(self) -> tuple[int, int, int]:
        """Pack into three 256-bit words.

        Slot 0 holds reserve0 in bits 0-111, reserve1 in bits 112-223 and
        block_number_last in bits 224-255; slots 1 and 2 hold the
        accumulators.
        """
        packed = self.reserve0 | (self.reserve1 << 112) | (self.block_number_last << 224)
        return packed, self.price0_cumulative_last, self.price1_cumulative_last

    @classmethod
    def from_storage_slots(cls, slots: tuple[int, int, int]) -> PoolState:
        """Inverse of to_storage_slots()."""
        packed, price0_cumulative, price1_cumulative = slots
        return cls(
            reserve0=packed & _MASK112,
            reserve1=(packed >> 112) & _MASK112,
            block_number_last=(packed >> 224) & _MASK32,
            price0_cumulative_last=price0_cumulative,
            price1_cumulative_last=price1_cumulative,
        )


__all__ = ["PoolState"]
