"""Mathematical utilities for the exchange.

This package provides the fixed-point primitives used by the price oracle:
- UQ112x112: 112.112-bit unsigned fixed-point arithmetic
"""

from exchange.math.uq112x112 import (
    UQ112x112,
    accumulate,
    average_price,
    wrapping_sub,
)

__all__ = ["UQ112x112", "accumulate", "average_price", "wrapping_sub"]
