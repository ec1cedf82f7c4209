"""
tests/conftest.py
──────────────────
Configuración global de pytest.
Las variables de entorno se inyectan aquí ANTES de que
cualquier módulo del proyecto sea importado.
"""

import os
from datetime import timezone

# ── Inyectar variables de entorno mínimas ─────────────────
#    Se hace a nivel de módulo para que estén disponibles
#    antes de la primera importación de config.py
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "1234567890:AAFakeTokenForTestingPurposesOnly")
os.environ.setdefault("GOOGLE_SHEETS_SPREADSHEET_ID", "fake-spreadsheet-id")
os.environ.setdefault("GOOGLE_SHEETS_SHEET_NAME", "Sheet1")
os.environ.setdefault("GOOGLE_SERVICE_ACCOUNT_FILE", "/nonexistent/service_account.json")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from services.conversation_service import ConversationService
from tests.fakes import NOW, InMemoryRepo


@pytest.fixture
def repo() -> InMemoryRepo:
    return InMemoryRepo()


@pytest.fixture
def conversation(repo) -> ConversationService:
    return ConversationService(repo=repo, tz=timezone.utc, clock=lambda: NOW)
