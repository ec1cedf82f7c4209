"""
bot/handlers/start.py
──────────────────────
Comandos /start, /menu y /cancel.
Los tres descartan el borrador en curso; se traducen a las mismas
acciones que los botones "Menu" y "Hủy".
"""

from telegram import Update
from telegram.ext import CommandHandler, ContextTypes

from bot import actions
from bot.events import EventKind, InboundEvent
from bot.handlers.common import dispatch, sender_id_of


async def _as_choice(update: Update, context: ContextTypes.DEFAULT_TYPE, action: actions.Action) -> None:
    await dispatch(
        InboundEvent(
            kind=EventKind.MENU_CHOICE,
            sender_id=sender_id_of(update),
            reply_target=update.effective_message,
            payload=action.encode(),
        ),
        context,
    )


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _as_choice(update, context, actions.MENU)


async def cancel(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _as_choice(update, context, actions.CANCEL)


start_handler = CommandHandler(["start", "menu"], start)
cancel_handler = CommandHandler(["cancel", "huy"], cancel)
