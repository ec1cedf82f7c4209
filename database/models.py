"""
database/models.py
──────────────────
Modelos de datos (dataclasses) que representan las filas de la hoja.
Sirven como contratos entre capas, sin ORM pesado.

Hoja esperada en Google Sheets (una fila por gasto):
  Timestamp | GroupID | Payment | Category | Amount | Note
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum

from dateutil.parser import isoparse

# ─────────────────────────────────────────────
#  Medios de pago
# ─────────────────────────────────────────────

CASH_MARKER = "Tiền mặt"


class PaymentMethod(str, Enum):
    CASH = "💵 Tiền mặt"
    ONLINE = "💳 Online"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> "PaymentMethod":
        """
        Clasifica una etiqueta guardada en la hoja.
        Todo lo que no contenga el marcador de efectivo cuenta como online.
        """
        if CASH_MARKER in (label or ""):
            return cls.CASH
        return cls.ONLINE


# ─────────────────────────────────────────────
#  Categorías
# ─────────────────────────────────────────────

# Orden fijo: es el orden en que aparecen en el menú.
CATEGORIES: dict[str, str] = {
    "🍜": "Ăn uống",
    "🍽️": "Ăn ngoài",
    "🎉": "Vui chơi",
    "🛍️": "Mua đồ",
    "📦": "Đồ dùng khác",
}

CUSTOM_CATEGORY_KEY = "CUSTOM"


# ─────────────────────────────────────────────
#  Gastos
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class ExpenseRecord:
    timestamp: datetime
    sender_id: str
    payment: str                 # etiqueta tal como se eligió
    category: str
    amount: int                  # unidad mínima, nunca negativo
    note: str = ""

    @classmethod
    def from_row(cls, row: list, tz: tzinfo | None = None) -> "ExpenseRecord":
        """
        Parsea una fila cruda de la hoja (todas las celdas como string).

        Args:
            row: [timestamp, sender_id, payment, category, amount, note]
            tz:  zona para timestamps sin offset. None = zona local.

        Raises:
            ValueError: si la fila está incompleta o el timestamp/monto
                        no se pueden interpretar.
        """
        if len(row) < 5:
            raise ValueError(f"Fila incompleta: {row!r}")

        raw_ts, sender_id, payment, category, raw_amount = (str(c) for c in row[:5])
        note = str(row[5]) if len(row) > 5 else ""

        try:
            timestamp = isoparse(raw_ts.strip())
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Timestamp inválido: {raw_ts!r}") from e
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=tz) if tz else timestamp.astimezone()

        return cls(
            timestamp=timestamp,
            sender_id=sender_id,
            payment=payment,
            category=category,
            amount=_parse_stored_amount(raw_amount),
            note=note,
        )

    def to_row(self) -> list:
        """Fila en el orden de columnas de la hoja."""
        return [
            self.timestamp.isoformat(),
            self.sender_id,
            self.payment,
            self.category,
            self.amount,
            self.note,
        ]


def _parse_stored_amount(raw: str) -> int:
    """Monto guardado → int. Acepta "120000", "120,000" y "120000.0"."""
    cleaned = raw.replace(",", "").replace(" ", "").strip()
    try:
        value = float(cleaned)
    except ValueError as e:
        raise ValueError(f"Monto inválido: {raw!r}") from e
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"Monto inválido: {raw!r}")
    return int(value)
