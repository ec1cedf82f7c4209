"""
bot/keyboards.py
─────────────────
Traduce las opciones de un `Reply` a teclados inline de Telegram.
El texto del botón es la etiqueta y callback_data la acción codificada.
"""

from __future__ import annotations

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from bot.events import Choice

BUTTONS_PER_ROW = 2


def choices_keyboard(choices: tuple[Choice, ...]) -> InlineKeyboardMarkup | None:
    """Dos botones por fila; sin opciones no hay teclado."""
    if not choices:
        return None
    buttons = []
    row = []
    for choice in choices:
        row.append(InlineKeyboardButton(choice.label, callback_data=choice.value))
        if len(row) == BUTTONS_PER_ROW:
            buttons.append(row)
            row = []
    if row:
        buttons.append(row)
    return InlineKeyboardMarkup(buttons)
