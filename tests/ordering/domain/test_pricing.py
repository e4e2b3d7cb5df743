"""Tests for currency arithmetic used by cart lines and order totals."""

from decimal import Decimal

import pytest
from ordering.order.pricing import compute_total, format_money, line_total, to_money
from protean.exceptions import ValidationError


class TestToMoney:
    def test_rounds_to_cents(self):
        assert to_money(10.005) == Decimal("10.01")

    def test_accepts_strings(self):
        assert to_money("25.50") == Decimal("25.50")

    def test_accepts_comma_decimal_separator(self):
        assert to_money("25,50") == Decimal("25.50")

    def test_float_noise_is_absorbed(self):
        assert to_money(0.1 + 0.2) == Decimal("0.30")

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_value_is_rejected(self, value):
        with pytest.raises(ValidationError) as exc:
            to_money(value)
        assert "total" in exc.value.messages

    def test_garbage_is_rejected_under_given_field(self):
        with pytest.raises(ValidationError) as exc:
            to_money("abc", field="troco")
        assert "troco" in exc.value.messages

    def test_infinity_is_rejected(self):
        with pytest.raises(ValidationError):
            to_money("Infinity")


class TestTotals:
    def test_line_total(self):
        assert line_total(10.1, 3) == Decimal("30.30")

    def test_compute_total_for_two_lines(self):
        lines = [{"price": 10.00, "quantity": 2}, {"price": 5.50, "quantity": 1}]
        assert compute_total(lines) == Decimal("25.50")

    def test_compute_total_of_nothing_is_zero(self):
        assert compute_total([]) == Decimal("0.00")

    def test_format_money_pads_cents(self):
        assert format_money(25.5) == "25.50"
        assert format_money(Decimal("20")) == "20.00"
