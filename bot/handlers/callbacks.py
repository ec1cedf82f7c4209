"""
bot/handlers/callbacks.py
──────────────────────────
Handler de los botones inline. Todo callback_data se entrega a la
conversación como evento menuChoice; ella decide si lo reconoce.
"""

from telegram import Message, Update
from telegram.ext import CallbackQueryHandler, ContextTypes

from bot.events import EventKind, InboundEvent
from bot.handlers.common import dispatch, sender_id_of


async def handle_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query = update.callback_query
    await query.answer()

    # Mensajes viejos llegan como InaccessibleMessage: no se puede responder
    target = query.message if isinstance(query.message, Message) else None

    await dispatch(
        InboundEvent(
            kind=EventKind.MENU_CHOICE,
            sender_id=sender_id_of(update),
            reply_target=target,
            payload=query.data or "",
        ),
        context,
    )


callback_handler = CallbackQueryHandler(handle_callback)
