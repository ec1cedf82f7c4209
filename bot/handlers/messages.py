"""
bot/handlers/messages.py
─────────────────────────
Handler de mensajes de texto libre. El significado del texto depende
del paso en que esté la conversación (monto, nota, fecha...).
"""

from telegram import Update
from telegram.ext import ContextTypes, MessageHandler, filters

from bot.events import EventKind, InboundEvent
from bot.handlers.common import dispatch, sender_id_of


async def handle_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    message = update.message
    await dispatch(
        InboundEvent(
            kind=EventKind.TEXT,
            sender_id=sender_id_of(update),
            reply_target=message,
            payload=message.text or "",
        ),
        context,
    )


# Las ediciones no reingresan al flujo: solo mensajes nuevos
message_handler = MessageHandler(
    filters.UpdateType.MESSAGE & filters.TEXT & ~filters.COMMAND,
    handle_text,
)
