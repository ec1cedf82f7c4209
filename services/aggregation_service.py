"""
services/aggregation_service.py
────────────────────────────────
Suma de gastos por medio de pago y por categoría sobre el historial
completo de la hoja. No hay índices ni totales incrementales: cada
consulta recorre todas las filas.
"""

from __future__ import annotations

import calendar
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import NamedTuple

from dateutil.relativedelta import relativedelta

from database.models import ExpenseRecord, PaymentMethod
from services.exceptions import ValidationError

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_DAY_MONTH_RE = re.compile(r"(\d{1,2})/(\d{1,2})")

INVALID_DATE_MESSAGE = (
    "❌ Định dạng ngày không đúng!\n\n"
    "Vui lòng nhập theo format: DD/MM\n"
    "Ví dụ: 01/01 hoặc 15/12"
)


# ─────────────────────────────────────────────
#  Ventanas de tiempo
# ─────────────────────────────────────────────

class Period(str, Enum):
    TODAY = "TODAY"
    SEVEN_DAYS = "7DAYS"
    MONTH = "MONTH"
    ALL = "ALL"


class DayMonth(NamedTuple):
    day: int
    month: int


@dataclass(frozen=True)
class Window:
    start: datetime
    end: datetime | None = None      # None = sin límite superior

    def contains(self, instant: datetime) -> bool:
        if instant < self.start:
            return False
        return self.end is None or instant <= self.end


# ─────────────────────────────────────────────
#  Resultado
# ─────────────────────────────────────────────

@dataclass
class CategoryTotals:
    cash: int = 0
    online: int = 0

    @property
    def total(self) -> int:
        return self.cash + self.online


@dataclass
class Summary:
    total_cash: int = 0
    total_online: int = 0
    # orden de aparición en la hoja
    by_category: dict[str, CategoryTotals] = field(default_factory=dict)
    matched: int = 0

    @property
    def total(self) -> int:
        return self.total_cash + self.total_online

    def add(self, record: ExpenseRecord) -> None:
        bucket = self.by_category.setdefault(record.category, CategoryTotals())
        if PaymentMethod.from_label(record.payment) is PaymentMethod.CASH:
            self.total_cash += record.amount
            bucket.cash += record.amount
        else:
            self.total_online += record.amount
            bucket.online += record.amount
        self.matched += 1


class AggregationService:
    """Calcula resúmenes y las ventanas de tiempo que los delimitan."""

    # ── Agregación ────────────────────────────────────────

    @classmethod
    def aggregate(
        cls,
        rows: list[list[str]],
        sender_id: str,
        window: Window,
        tz=None,
    ) -> Summary:
        """
        Suma los gastos de `sender_id` dentro de `window`.

        Las filas mal formadas se ignoran (no suman ni generan categoría).
        Sin coincidencias el resultado es un Summary en cero, no un error.

        Args:
            rows:      filas crudas tal como las devuelve ExpenseRepo.fetch_all().
            sender_id: grupo o usuario; comparación exacta.
            window:    inicio inclusivo, fin inclusivo u abierto.
            tz:        zona para timestamps guardados sin offset.
        """
        summary = Summary()
        for index, row in enumerate(rows):
            try:
                record = ExpenseRecord.from_row(row, tz)
            except ValueError as e:
                logger.debug("Fila %d ignorada: %s", index, e)
                continue
            if record.sender_id != sender_id or not window.contains(record.timestamp):
                continue
            summary.add(record)
        return summary

    # ── Ventanas fijas ────────────────────────────────────

    @staticmethod
    def standing_window(period: Period, now: datetime) -> Window:
        """
        Ventana relativa a `now` (datetime con zona):
          TODAY  → medianoche local .. now
          7DAYS  → now - 7×24h .. now
          MONTH  → día 1 del mes local .. now
          ALL    → epoch .. sin límite
        """
        if period is Period.TODAY:
            return Window(now.replace(hour=0, minute=0, second=0, microsecond=0), now)
        if period is Period.SEVEN_DAYS:
            return Window(now - timedelta(days=7), now)
        if period is Period.MONTH:
            return Window(now.replace(day=1, hour=0, minute=0, second=0, microsecond=0), now)
        return Window(EPOCH)

    # ── Rango personalizado ───────────────────────────────

    @staticmethod
    def parse_day_month(text: str) -> DayMonth:
        """
        Extrae "D[D]/M[M]" del texto del usuario.

        Raises:
            ValidationError: si no hay fecha o el día no existe en ese mes
                             (29/02 se acepta; se ajusta según el año).
        """
        match = _DAY_MONTH_RE.search(text or "")
        if not match:
            raise ValidationError(INVALID_DATE_MESSAGE)
        day, month = int(match.group(1)), int(match.group(2))
        # 2000 es bisiesto: valida contra el mes más largo posible
        if not 1 <= month <= 12 or not 1 <= day <= calendar.monthrange(2000, month)[1]:
            raise ValidationError(INVALID_DATE_MESSAGE)
        return DayMonth(day, month)

    @classmethod
    def custom_window(cls, start: DayMonth, end: DayMonth, now: datetime) -> Window:
        """
        Ventana [start 00:00:00, end 23:59:59] en el año de `now`.
        Si el fin queda antes del inicio (ej. 20/12 → 05/01), el fin pasa
        al año siguiente.
        """
        year = now.year
        start_at = cls._at(year, start, now.tzinfo)
        end_at = cls._at(year, end, now.tzinfo).replace(hour=23, minute=59, second=59)
        if end_at < start_at:
            end_at = cls._at(year + 1, end, now.tzinfo).replace(hour=23, minute=59, second=59)
        return Window(start_at, end_at)

    @staticmethod
    def _at(year: int, value: DayMonth, tz) -> datetime:
        # 29/02 en año no bisiesto → 28/02
        first = datetime(year, value.month, 1, tzinfo=tz)
        return first + relativedelta(day=value.day)
