"""
tests/test_formatting.py
─────────────────────────
Tests unitarios para services/formatting.py
"""

from datetime import date, datetime

import pytest

from services.formatting import format_date, format_money


class TestFormatMoney:
    def test_zero(self):
        assert format_money(0) == "0 đ"

    def test_groups_of_three(self):
        assert format_money(1234567) == "1,234,567 đ"

    def test_no_separator_below_thousand(self):
        assert format_money(999) == "999 đ"

    def test_exact_thousand(self):
        assert format_money(1000) == "1,000 đ"

    @pytest.mark.parametrize("n", [0, 7, 10, 120000, 50000000, 10**12 + 1])
    def test_stripping_separators_recovers_value(self, n):
        text = format_money(n)
        assert not text.startswith(",")
        assert int(text.removesuffix(" đ").replace(",", "")) == n


class TestFormatDate:
    def test_zero_padded(self):
        assert format_date(date(2026, 1, 5)) == "05/01"

    def test_accepts_datetime(self):
        assert format_date(datetime(2026, 12, 20, 23, 59)) == "20/12"
