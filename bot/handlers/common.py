"""
bot/handlers/common.py
───────────────────────
Puente entre Telegram y la conversación: identifica al remitente,
entrega el evento a ConversationService y envía la respuesta.
"""

from __future__ import annotations

import asyncio
import logging

from telegram import Update
from telegram.constants import ChatType
from telegram.error import RetryAfter, TelegramError
from telegram.ext import ContextTypes

from bot.events import InboundEvent, Reply
from bot.keyboards import choices_keyboard

logger = logging.getLogger(__name__)

# Clave de bot_data donde app.py deja la instancia de ConversationService
CONVERSATION_KEY = "conversation"

_GROUP_CHATS = (ChatType.GROUP, ChatType.SUPERGROUP)


def sender_id_of(update: Update) -> str | None:
    """
    En grupos el remitente es el grupo (un libro compartido);
    en chats privados, el usuario.
    """
    chat = update.effective_chat
    if chat is not None and chat.type in _GROUP_CHATS:
        return str(chat.id)
    if update.effective_user is not None:
        return str(update.effective_user.id)
    if chat is not None:
        return str(chat.id)
    return None


async def _send_safe(message, text: str, **kwargs) -> None:
    """Envía un mensaje respetando el flood control de Telegram (hasta 3 reintentos)."""
    for attempt in range(3):
        try:
            await message.reply_text(text, **kwargs)
            return
        except RetryAfter as e:
            wait = _seconds(e.retry_after) + 2
            logger.warning("Flood control (intento %d): esperando %ds...", attempt + 1, wait)
            await asyncio.sleep(wait)
        except TelegramError as e:
            logger.error("Error enviando mensaje (intento %d): %s - %s", attempt + 1, type(e).__name__, e)
            await asyncio.sleep(2)
    logger.error("No se pudo enviar el mensaje después de 3 intentos")


def _seconds(retry_after) -> int:
    # retry_after es int o timedelta según la versión de python-telegram-bot
    if hasattr(retry_after, "total_seconds"):
        return int(retry_after.total_seconds())
    return int(retry_after)


async def deliver(reply: Reply) -> None:
    await _send_safe(
        reply.reply_target,
        reply.text,
        reply_markup=choices_keyboard(reply.choices),
    )


async def dispatch(event: InboundEvent, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Procesa un evento y envía la respuesta, si la hay."""
    conversation = context.application.bot_data[CONVERSATION_KEY]
    reply = await conversation.handle(event)
    if reply is not None:
        await deliver(reply)
