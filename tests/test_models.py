"""
tests/test_models.py
─────────────────────
Tests unitarios para database/models.py
"""

from datetime import datetime, timedelta, timezone

import pytest

from database.models import CATEGORIES, ExpenseRecord, PaymentMethod


class TestPaymentMethod:
    def test_cash_label(self):
        assert PaymentMethod.from_label("💵 Tiền mặt") is PaymentMethod.CASH

    def test_cash_marker_anywhere(self):
        assert PaymentMethod.from_label("Tiền mặt (ví)") is PaymentMethod.CASH

    def test_everything_else_is_online(self):
        assert PaymentMethod.from_label("💳 Online") is PaymentMethod.ONLINE
        assert PaymentMethod.from_label("Chuyển khoản") is PaymentMethod.ONLINE
        assert PaymentMethod.from_label("") is PaymentMethod.ONLINE


class TestCategories:
    def test_registry_order(self):
        assert list(CATEGORIES) == ["🍜", "🍽️", "🎉", "🛍️", "📦"]
        assert CATEGORIES["🍜"] == "Ăn uống"


class TestExpenseRecord:
    def test_to_row(self):
        record = ExpenseRecord(
            timestamp=datetime(2026, 10, 19, 7, 0, tzinfo=timezone.utc),
            sender_id="g1",
            payment="💵 Tiền mặt",
            category="Ăn uống",
            amount=120000,
        )
        assert record.to_row() == [
            "2026-10-19T07:00:00+00:00", "g1", "💵 Tiền mặt", "Ăn uống", 120000, "",
        ]

    def test_from_row(self):
        row = ["2026-10-19T07:00:00.000Z", "g1", "💳 Online", "Mua đồ", "50000", "áo"]
        record = ExpenseRecord.from_row(row)
        assert record.timestamp == datetime(2026, 10, 19, 7, 0, tzinfo=timezone.utc)
        assert record.amount == 50000
        assert record.note == "áo"

    def test_from_row_without_note_cell(self):
        # Sheets omite las celdas vacías al final de la fila
        record = ExpenseRecord.from_row(["2026-10-19T07:00:00Z", "g1", "💳 Online", "Mua đồ", "50000"])
        assert record.note == ""

    def test_from_row_grouped_amount(self):
        record = ExpenseRecord.from_row(["2026-10-19T07:00:00Z", "g1", "x", "y", "1,200,000"])
        assert record.amount == 1200000

    def test_naive_timestamp_uses_given_zone(self):
        tz = timezone(timedelta(hours=7))
        record = ExpenseRecord.from_row(["2026-10-19 08:00:00", "g1", "x", "y", "1"], tz)
        assert record.timestamp == datetime(2026, 10, 19, 1, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("row", [
        [],
        ["2026-10-19T07:00:00Z", "g1", "x", "y"],
        ["no es fecha", "g1", "x", "y", "100"],
        ["2026-10-19T07:00:00Z", "g1", "x", "y", "abc"],
        ["2026-10-19T07:00:00Z", "g1", "x", "y", ""],
        ["2026-10-19T07:00:00Z", "g1", "x", "y", "-5"],
        ["2026-10-19T07:00:00Z", "g1", "x", "y", "nan"],
    ])
    def test_from_row_malformed(self, row):
        with pytest.raises(ValueError):
            ExpenseRecord.from_row(row)
