"""
bot/events.py
──────────────
Contratos entre la conversación y la plataforma de mensajería:
eventos entrantes y respuestas salientes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from bot.actions import Action


class EventKind(str, Enum):
    TEXT = "text"
    MENU_CHOICE = "menuChoice"


@dataclass(frozen=True)
class InboundEvent:
    kind: EventKind
    sender_id: str | None
    reply_target: Any             # opaco: lo interpreta solo la capa de Telegram
    payload: str = ""

    @property
    def is_addressable(self) -> bool:
        return bool(self.sender_id) and self.reply_target is not None


@dataclass(frozen=True)
class Choice:
    label: str
    value: str                    # Action codificada

    @classmethod
    def of(cls, label: str, action: Action) -> "Choice":
        return cls(label, action.encode())


@dataclass(frozen=True)
class Prompt:
    """Texto + botones, independiente de a quién se responde."""
    text: str
    choices: tuple[Choice, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Reply:
    reply_target: Any
    text: str
    choices: tuple[Choice, ...] = ()

    @classmethod
    def to(cls, reply_target: Any, prompt: Prompt) -> "Reply":
        return cls(reply_target, prompt.text, prompt.choices)
