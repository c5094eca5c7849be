"""Tests for UQ112x112 fixed-point oracle math."""

from decimal import Decimal

import pytest

from exchange.constants import Q112, UINT112_MAX, UINT256_MAX
from exchange.math.uq112x112 import (
    FixedPointDivisionByZero,
    FixedPointOverflow,
    UQ112x112,
    accumulate,
    average_price,
    wrapping_sub,
)

UINT224_MAX = 2**224 - 1


class TestEncoding:
    """Tests for encode/decode."""

    def test_encode_scales_by_q112(self):
        assert UQ112x112.encode(3).value == 3 * Q112

    def test_encode_max_uint112(self):
        assert UQ112x112.encode(UINT112_MAX).value == UINT112_MAX * Q112

    def test_encode_rejects_wide_operand(self):
        with pytest.raises(FixedPointOverflow):
            UQ112x112.encode(UINT112_MAX + 1)

    def test_raw_value_limited_to_224_bits(self):
        assert UQ112x112(UINT224_MAX).value == UINT224_MAX
        with pytest.raises(FixedPointOverflow):
            UQ112x112(UINT224_MAX + 1)

    def test_decode_truncates(self):
        assert UQ112x112(5 * Q112 + Q112 // 2).decode() == 5

    def test_to_decimal(self):
        assert UQ112x112(3 * Q112 // 2).to_decimal() == Decimal("1.5")


class TestFraction:
    """Tests for spot-price construction."""

    def test_equal_reserves_is_one(self):
        reserve = 3 * 10**18
        assert UQ112x112.fraction(reserve, reserve).value == Q112

    def test_fraction_floors(self):
        """1/3 keeps 112 fractional bits, rounded down."""
        assert UQ112x112.fraction(1, 3).value == Q112 // 3

    def test_fraction_by_zero_raises(self):
        with pytest.raises(FixedPointDivisionByZero):
            UQ112x112.fraction(1, 0)

    def test_division_by_zero_is_zero_division_error(self):
        """Callers catching ZeroDivisionError still see the fixed-point error."""
        with pytest.raises(ZeroDivisionError):
            UQ112x112.encode(1).uqdiv(0)

    def test_extreme_ratio_fits(self):
        """The widest price, uint112 max over 1, fits in 224 bits."""
        assert UQ112x112.fraction(UINT112_MAX, 1).value == UINT112_MAX * Q112


class TestAccumulate:
    """Tests for accumulator helpers."""

    def test_accumulate_adds_price_times_blocks(self):
        price = UQ112x112.encode(2)
        assert accumulate(10, price, 3) == 10 + 6 * Q112

    def test_accumulate_wraps_modulo_2_256(self):
        price = UQ112x112.encode(1)
        assert accumulate(UINT256_MAX, price, 1) == Q112 - 1

    def test_product_overflow_raises(self):
        """A product wider than 256 bits is rejected rather than truncated."""
        price = UQ112x112(UINT224_MAX)
        with pytest.raises(FixedPointOverflow):
            price.mul_uint(2**33)

    def test_widest_price_times_32_bit_elapsed_fits(self):
        price = UQ112x112(UINT224_MAX)
        assert price.mul_uint(2**32 - 1) == UINT224_MAX * (2**32 - 1)


class TestAveragePrice:
    """Tests for TWAP readers."""

    def test_average_over_window(self):
        start = 5 * Q112
        end = start + 2 * Q112 + 4 * Q112
        assert average_price(start, end, 2).value == 3 * Q112

    def test_average_across_wraparound(self):
        """Wrapping subtraction recovers the true difference."""
        start = UINT256_MAX - Q112 + 1
        end = accumulate(start, UQ112x112.encode(2), 2)
        assert end < start
        assert wrapping_sub(end, start) == 4 * Q112
        assert average_price(start, end, 2).value == 2 * Q112

    def test_zero_window_raises(self):
        with pytest.raises(ValueError):
            average_price(0, Q112, 0)
