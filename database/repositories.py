"""
database/repositories.py
─────────────────────────
Capa de acceso a datos (Repository Pattern) sobre Google Sheets.
La hoja es append-only: no existen update ni delete.

Uso:
    from database.repositories import ExpenseRepo

    ExpenseRepo.append(record)
    rows = ExpenseRepo.fetch_all()
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from config import GOOGLE_SHEETS_SHEET_NAME, GOOGLE_SHEETS_SPREADSHEET_ID
from database.client import get_client, reset_client
from database.exceptions import StoreUnavailable
from database.models import ExpenseRecord

logger = logging.getLogger(__name__)

__all__ = ["COLUMNS", "ExpenseRepo", "RecordStore", "StoreUnavailable"]

COLUMNS = ["Timestamp", "GroupID", "Payment", "Category", "Amount", "Note"]

# Errores de transporte/autenticación que se reportan como StoreUnavailable.
# ValueError cubre claves privadas mal formadas al construir credenciales.
_STORE_ERRORS = (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError, ValueError)


class RecordStore(Protocol):
    """Contrato mínimo que la conversación necesita del almacenamiento."""

    def append(self, record: ExpenseRecord) -> None: ...

    def fetch_all(self) -> list[list[str]]: ...


# ─────────────────────────────────────────────
#  ExpenseRepo
# ─────────────────────────────────────────────

class ExpenseRepo:
    SPREADSHEET_ID = GOOGLE_SHEETS_SPREADSHEET_ID
    SHEET = GOOGLE_SHEETS_SHEET_NAME

    # httplib2.Http no es thread-safe y las llamadas llegan desde to_thread()
    _io_lock = threading.Lock()

    @classmethod
    def _range(cls, range_str: str) -> str:
        return f"{cls.SHEET}!{range_str}"

    @classmethod
    def _execute(cls, build_request):
        """Ejecuta un request de la API traduciendo los errores a StoreUnavailable."""
        with cls._io_lock:
            try:
                return build_request(get_client()).execute()
            except _STORE_ERRORS as e:
                logger.error("Google Sheets no disponible: %s", e, exc_info=True)
                reset_client()
                raise StoreUnavailable(str(e)) from e

    @classmethod
    def ensure_headers(cls) -> None:
        """Escribe la fila de encabezados si la hoja está vacía."""
        result = cls._execute(lambda sheet: sheet.values().get(
            spreadsheetId=cls.SPREADSHEET_ID,
            range=cls._range("A1:F1"),
        ))
        values = result.get("values", [])
        if not values:
            cls._execute(lambda sheet: sheet.values().update(
                spreadsheetId=cls.SPREADSHEET_ID,
                range=cls._range("A1"),
                valueInputOption="RAW",
                body={"values": [COLUMNS]},
            ))
            logger.info("Encabezados escritos en '%s'", cls.SHEET)
        elif values[0] != COLUMNS:
            logger.warning("La primera fila de '%s' no es el encabezado esperado: %s", cls.SHEET, values[0])

    @classmethod
    def append(cls, record: ExpenseRecord) -> None:
        """
        Agrega una fila al final de la hoja.
        RAW evita que Sheets convierta el timestamp ISO en fecha serial.
        """
        cls._execute(lambda sheet: sheet.values().append(
            spreadsheetId=cls.SPREADSHEET_ID,
            range=cls._range("A:F"),
            valueInputOption="RAW",
            insertDataOption="INSERT_ROWS",
            body={"values": [record.to_row()]},
        ))
        logger.info("Gasto guardado: sender=%s amount=%d", record.sender_id, record.amount)

    @classmethod
    def fetch_all(cls) -> list[list[str]]:
        """Todas las filas en orden de inserción, sin encabezado ni paginación."""
        result = cls._execute(lambda sheet: sheet.values().get(
            spreadsheetId=cls.SPREADSHEET_ID,
            range=cls._range("A:F"),
        ))
        values = result.get("values", [])
        if values and values[0] == COLUMNS:
            return values[1:]
        return values
