"""
services/conversation_store.py
───────────────────────────────
Estado de conversación por remitente (grupo o usuario), solo en memoria.
Un reinicio del proceso pierde las conversaciones en curso.

Cada remitente tiene su propio asyncio.Lock: la lectura-modificación-
escritura de un mismo remitente es atómica; remitentes distintos avanzan
en paralelo.

Uso:
    async with store.lock(sender_id):
        state = store.get(sender_id)
        ...
        store.set(sender_id, new_state)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace

from bot.states import Step
from services.aggregation_service import DayMonth


@dataclass(frozen=True)
class ConversationState:
    step: Step = Step.MENU
    payment: str | None = None
    category: str | None = None
    amount: int | None = None
    note: str | None = None              # "" = omitida a propósito
    custom_start: DayMonth | None = None

    @property
    def is_idle(self) -> bool:
        return self == ConversationState()

    def advance(self, step: Step, **changes) -> "ConversationState":
        return replace(self, step=step, **changes)


class ConversationStore:
    """Mapa remitente → ConversationState con un lock por remitente."""

    def __init__(self) -> None:
        self._states: dict[str, ConversationState] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def lock(self, sender_id: str) -> asyncio.Lock:
        if sender_id not in self._locks:
            self._locks[sender_id] = asyncio.Lock()
        return self._locks[sender_id]

    def get(self, sender_id: str) -> ConversationState:
        """Estado actual; un remitente sin estado está en MENU."""
        return self._states.get(sender_id, ConversationState())

    def set(self, sender_id: str, state: ConversationState) -> None:
        if state.is_idle:
            self.delete(sender_id)
        else:
            self._states[sender_id] = state

    def delete(self, sender_id: str) -> None:
        self._states.pop(sender_id, None)

    def __contains__(self, sender_id: str) -> bool:
        return sender_id in self._states

    def __len__(self) -> int:
        return len(self._states)
