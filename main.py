"""
main.py
────────
Punto de entrada del bot de gastos.
Inicializa el logging, prepara la hoja, crea la aplicación y lanza
el polling (o el webhook si WEBHOOK_URL está configurado).

Uso:
    python main.py
"""

import logging
import logging.handlers
import sys

from bot.app import create_app
from config import ENV, LOG_LEVEL, PORT, WEBHOOK_URL
from database.repositories import ExpenseRepo, StoreUnavailable

ALLOWED_UPDATES = ["message", "callback_query"]


def setup_logging() -> None:
    """Configura el sistema de logging con rotación automática de archivos."""
    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    formatter = logging.Formatter(fmt)

    # Handler a archivo con rotación: máx 5 MB por archivo, mantiene 3 backups
    file_handler = logging.handlers.RotatingFileHandler(
        "bot.log",
        maxBytes=5 * 1024 * 1024,  # 5 MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    # Handler a consola
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    try:
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    except AttributeError:
        pass

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(file_handler)
    root.addHandler(console_handler)

    # Reducir verbosidad de librerías externas
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("telegram").setLevel(logging.WARNING)
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.WARNING)


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)

    logger.info("🚀 Iniciando bot de gastos (ENV=%s)...", ENV)

    try:
        ExpenseRepo.ensure_headers()
    except StoreUnavailable:
        # El bot arranca igual; cada guardado/suma reportará el fallo al usuario
        logger.warning("⚠️ Google Sheets no disponible al iniciar")

    app = create_app()

    try:
        if WEBHOOK_URL:
            logger.info("✅ Bot en línea (webhook en puerto %d)", PORT)
            app.run_webhook(
                listen="0.0.0.0",
                port=PORT,
                url_path="webhook",
                webhook_url=f"{WEBHOOK_URL.rstrip('/')}/webhook",
                allowed_updates=ALLOWED_UPDATES,
                drop_pending_updates=True,
            )
        else:
            logger.info("✅ Bot en línea. Escuchando mensajes...")
            app.run_polling(
                drop_pending_updates=True,
                allowed_updates=ALLOWED_UPDATES,
            )
    except Exception as e:
        logger.critical("💥 Bot detenido por excepción inesperada: %s", e, exc_info=True)
        raise


if __name__ == "__main__":
    main()
