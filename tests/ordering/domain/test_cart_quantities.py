"""Tests for cart quantity coercion."""

import pytest

from ordering.cart.aggregator import clamp_qty
from ordering.cart.schemas import MAX_LINE_QTY


class TestClampQty:
    @pytest.mark.parametrize("raw", ["abc", "", None, "1.5x", "-3", 0, -1, True])
    def test_unusable_input_uses_default(self, raw):
        assert clamp_qty(raw) == 1

    def test_custom_default(self):
        assert clamp_qty("nope", default=2) == 2

    def test_numeric_string(self):
        assert clamp_qty(" 7 ") == 7

    def test_int(self):
        assert clamp_qty(3) == 3

    def test_upper_bound(self):
        assert clamp_qty("5000") == MAX_LINE_QTY

    def test_bound_itself(self):
        assert clamp_qty(MAX_LINE_QTY) == MAX_LINE_QTY
