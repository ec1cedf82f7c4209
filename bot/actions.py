"""
bot/actions.py
───────────────
Acciones de los botones (callback_data).
Se decodifican una sola vez al entrar a la conversación; el resto del
código trabaja con `Action`, nunca con el string crudo.

Formato en el cable:  "KIND"  o  "KIND:argumento"
  - CAT:🍜        → categoría fija
  - CAT:CUSTOM    → categoría escrita a mano
  - SUM:7DAYS     → suma de un período fijo
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from database.models import CUSTOM_CATEGORY_KEY, PaymentMethod
from services.aggregation_service import Period


class ActionKind(str, Enum):
    # ── Globales (válidas desde cualquier paso) ──
    MENU = "MENU"
    CANCEL = "CONFIRM_CANCEL"
    NEW_EXPENSE = "NEW_EXPENSE"
    SUM = "SUM"
    SUM_CUSTOM = "SUM_CUSTOM"

    # ── Ligadas a un paso ──
    PAY_CASH = "PAY_CASH"
    PAY_ONLINE = "PAY_ONLINE"
    CATEGORY = "CAT"
    NOTE_SKIP = "NOTE_SKIP"
    SAVE = "CONFIRM_SAVE"


# SUM sin argumento abre el menú de períodos; con argumento calcula la suma.
_WITH_ARG = {"CAT", "SUM"}


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    category_key: str | None = None
    period: Period | None = None

    @property
    def is_period_sum(self) -> bool:
        return self.kind is ActionKind.SUM and self.period is not None

    @property
    def payment(self) -> PaymentMethod | None:
        if self.kind is ActionKind.PAY_CASH:
            return PaymentMethod.CASH
        if self.kind is ActionKind.PAY_ONLINE:
            return PaymentMethod.ONLINE
        return None

    # ── Cable ────────────────────────────────────────────

    def encode(self) -> str:
        if self.kind is ActionKind.CATEGORY:
            return f"{ActionKind.CATEGORY.value}:{self.category_key}"
        if self.period is not None:
            return f"{ActionKind.SUM.value}:{self.period.value}"
        return self.kind.value

    @classmethod
    def decode(cls, data: str | None) -> "Action | None":
        """
        callback_data → Action. Retorna None si el dato no corresponde
        a ninguna acción conocida (la conversación lo trata como desconocido).
        """
        if not data:
            return None
        name, sep, arg = data.partition(":")

        if sep and name in _WITH_ARG:
            if name == ActionKind.CATEGORY.value and arg:
                return cls(ActionKind.CATEGORY, category_key=arg)
            if name == ActionKind.SUM.value:
                try:
                    return cls(ActionKind.SUM, period=Period(arg))
                except ValueError:
                    return None
            return None

        if sep or name == ActionKind.CATEGORY.value:
            return None
        try:
            return cls(ActionKind(name))
        except ValueError:
            return None


# ─────────────────────────────────────────────
#  Constructores de conveniencia
# ─────────────────────────────────────────────

MENU = Action(ActionKind.MENU)
CANCEL = Action(ActionKind.CANCEL)
NEW_EXPENSE = Action(ActionKind.NEW_EXPENSE)
SUM = Action(ActionKind.SUM)
SUM_CUSTOM = Action(ActionKind.SUM_CUSTOM)
PAY_CASH = Action(ActionKind.PAY_CASH)
PAY_ONLINE = Action(ActionKind.PAY_ONLINE)
NOTE_SKIP = Action(ActionKind.NOTE_SKIP)
SAVE = Action(ActionKind.SAVE)
CUSTOM_CATEGORY = Action(ActionKind.CATEGORY, category_key=CUSTOM_CATEGORY_KEY)


def category(key: str) -> Action:
    return Action(ActionKind.CATEGORY, category_key=key)


def sum_period(period: Period) -> Action:
    return Action(ActionKind.SUM, period=period)
