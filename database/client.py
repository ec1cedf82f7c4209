"""
database/client.py
──────────────────
Singleton del servicio de Google Sheets.
Todos los módulos del proyecto deben obtener la hoja desde aquí.

Uso:
    from database.client import get_client

    sheet = get_client()
    result = sheet.values().get(spreadsheetId=..., range="Sheet1!A:F").execute()
"""

import httplib2
from google.oauth2.service_account import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build

from config import (
    GOOGLE_PRIVATE_KEY,
    GOOGLE_SERVICE_ACCOUNT_FILE,
    GOOGLE_SERVICE_EMAIL,
    STORE_TIMEOUT_SECONDS,
)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

_client = None


def _load_credentials() -> Credentials:
    """Credenciales inline si están completas; si no, el archivo JSON."""
    if GOOGLE_SERVICE_EMAIL and GOOGLE_PRIVATE_KEY:
        return Credentials.from_service_account_info(
            {
                "type": "service_account",
                "client_email": GOOGLE_SERVICE_EMAIL,
                "private_key": GOOGLE_PRIVATE_KEY,
                "token_uri": TOKEN_URI,
            },
            scopes=SCOPES,
        )
    return Credentials.from_service_account_file(GOOGLE_SERVICE_ACCOUNT_FILE, scopes=SCOPES)


def get_client():
    """
    Retorna la instancia única de `spreadsheets()` (patrón singleton).
    Cada request lleva el timeout de STORE_TIMEOUT_SECONDS.
    """
    global _client
    if _client is None:
        http = AuthorizedHttp(
            _load_credentials(),
            http=httplib2.Http(timeout=STORE_TIMEOUT_SECONDS),
        )
        service = build("sheets", "v4", http=http, cache_discovery=False)
        _client = service.spreadsheets()
    return _client


def reset_client() -> None:
    """Descarta el singleton; la próxima llamada reconstruye la conexión."""
    global _client
    _client = None
