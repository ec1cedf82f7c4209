"""
config.py
─────────
Carga y valida todas las variables de entorno del proyecto.
Centraliza la configuración para que ningún otro módulo
acceda directamente a os.environ.
"""

import os
from dotenv import load_dotenv

# Carga .env si existe (útil en desarrollo)
load_dotenv()


def _require(key: str) -> str:
    """Retorna el valor de una variable de entorno obligatoria."""
    value = os.getenv(key)
    if not value:
        raise EnvironmentError(
            f"Variable de entorno requerida no encontrada: '{key}'. "
            f"Revisa tu archivo .env"
        )
    return value


# ── Telegram ──────────────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = _require("TELEGRAM_BOT_TOKEN")
WEBHOOK_URL: str = os.getenv("WEBHOOK_URL", "")
PORT: int = int(os.getenv("PORT", "3000"))

# ── Google Sheets ─────────────────────────────────────────
GOOGLE_SHEETS_SPREADSHEET_ID: str = _require("GOOGLE_SHEETS_SPREADSHEET_ID")
GOOGLE_SHEETS_SHEET_NAME: str = os.getenv("GOOGLE_SHEETS_SHEET_NAME", "Sheet1")
GOOGLE_SERVICE_ACCOUNT_FILE: str = os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE", "service_account.json")

# Credenciales inline (alternativa al archivo). La clave privada suele
# venir con "\n" literales cuando se carga desde el panel del hosting.
GOOGLE_SERVICE_EMAIL: str = os.getenv("GOOGLE_SERVICE_EMAIL", "")
GOOGLE_PRIVATE_KEY: str = os.getenv("GOOGLE_PRIVATE_KEY", "").replace("\\n", "\n")

STORE_TIMEOUT_SECONDS: float = float(os.getenv("STORE_TIMEOUT_SECONDS", "10"))

# ── General ───────────────────────────────────────────────
TIMEZONE: str = os.getenv("TIMEZONE", "")
ENV: str = os.getenv("ENV", "development")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
