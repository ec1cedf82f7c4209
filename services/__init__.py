"""
services/__init__.py
─────────────────────
Expone los servicios de negocio del proyecto.
ConversationService se importa desde su módulo: depende de bot/, que a
su vez usa Period de aggregation_service.
"""

from .aggregation_service import AggregationService
from .conversation_store import ConversationStore

__all__ = ["AggregationService", "ConversationStore"]
