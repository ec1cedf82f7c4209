"""
services/formatting.py
───────────────────────
Formato de montos y fechas para los mensajes del bot.
"""

from __future__ import annotations

from datetime import date

CURRENCY_SUFFIX = " đ"


def format_money(amount: int) -> str:
    """
    Agrupa los dígitos de a tres con coma y agrega el sufijo de moneda.

        >>> format_money(1234567)
        '1,234,567 đ'
    """
    return f"{amount:,}{CURRENCY_SUFFIX}"


def format_date(value: date) -> str:
    """DD/MM con ceros a la izquierda, sin año."""
    return f"{value.day:02d}/{value.month:02d}"
