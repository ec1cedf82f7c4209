"""
bot/app.py
───────────
Construye y configura la aplicación de python-telegram-bot.
Registra todos los handlers en el orden correcto y deja la
conversación compartida en bot_data.
"""

import logging
from zoneinfo import ZoneInfo

from telegram import Update
from telegram.ext import Application, ContextTypes

from bot.handlers import callback_handler, cancel_handler, message_handler, start_handler
from bot.handlers.common import CONVERSATION_KEY
from config import TELEGRAM_BOT_TOKEN, TIMEZONE
from database.repositories import ExpenseRepo
from services.conversation_service import ConversationService

logger = logging.getLogger(__name__)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Captura cualquier excepción no manejada y responde al usuario sin caerse."""
    logger.error("Excepción no manejada:", exc_info=context.error)
    try:
        if isinstance(update, Update) and update.effective_message:
            await update.effective_message.reply_text(
                "⚠️ Đã xảy ra lỗi. Vui lòng thử lại."
            )
    except Exception:
        logger.debug("No se pudo avisar al usuario del error", exc_info=True)


def build_conversation() -> ConversationService:
    tz = ZoneInfo(TIMEZONE) if TIMEZONE else None
    return ConversationService(repo=ExpenseRepo, tz=tz)


def create_app() -> Application:
    """
    Crea y configura la aplicación Telegram.

    Los updates se procesan en paralelo; ConversationService serializa
    los que llegan del mismo remitente.

    Returns:
        Application lista para ejecutar.
    """
    app = (
        Application.builder()
        .token(TELEGRAM_BOT_TOKEN)
        .concurrent_updates(True)
        .build()
    )
    app.bot_data[CONVERSATION_KEY] = build_conversation()

    # ── Comandos ──────────────────────────────────────────
    app.add_handler(start_handler)
    app.add_handler(cancel_handler)

    # ── Botones inline ────────────────────────────────────
    app.add_handler(callback_handler)

    # ── Texto libre — siempre al final ───────────────────
    app.add_handler(message_handler)

    # ── Error handler global ──────────────────────────────
    app.add_error_handler(error_handler)

    logger.info("✅ Bot configurado con %d handlers", len(app.handlers[0]))
    return app
