"""
bot/states.py
──────────────
Pasos de la conversación de registro y de suma personalizada.
Mantiene todos los estados en un único lugar para evitar colisiones.
"""

from enum import Enum


class Step(str, Enum):
    MENU = "MENU"

    # ── Registro de gasto ─────────────────────────
    PAYMENT = "PAYMENT"
    CATEGORY = "CATEGORY"
    CUSTOM_CAT = "CUSTOM_CAT"
    AMOUNT = "AMOUNT"
    NOTE = "NOTE"
    CONFIRM = "CONFIRM"

    # ── Suma con rango personalizado ──────────────
    CUSTOM_DATE_START = "CUSTOM_DATE_START"
    CUSTOM_DATE_END = "CUSTOM_DATE_END"
