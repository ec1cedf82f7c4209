"""
tests/test_handlers.py
───────────────────────
Tests del puente Telegram → conversación (bot/handlers, bot/keyboards).
Usa objetos mínimos en lugar de Updates reales.
"""

from __future__ import annotations

from datetime import timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from telegram import InlineKeyboardMarkup, Message
from telegram.constants import ChatType
from telegram.error import RetryAfter, TimedOut

from bot import actions
from bot.events import Choice
from bot.handlers.callbacks import handle_callback
from bot.handlers.common import CONVERSATION_KEY, _send_safe, sender_id_of
from bot.handlers.messages import handle_text
from bot.handlers.start import cancel, start
from bot.keyboards import choices_keyboard
from bot.states import Step
from services.conversation_service import ConversationService
from services.conversation_store import ConversationState
from tests.fakes import NOW, InMemoryRepo


class DummyMessage:
    """Minimal stand-in for a Telegram message used in handlers."""

    def __init__(self, text: str | None = None) -> None:
        self.text = text
        self.reply_text = AsyncMock()


def _update(*, chat_type=ChatType.PRIVATE, chat_id=42, user_id=42, message=None, query=None):
    return SimpleNamespace(
        effective_chat=SimpleNamespace(id=chat_id, type=chat_type),
        effective_user=SimpleNamespace(id=user_id) if user_id is not None else None,
        message=message,
        effective_message=message,
        callback_query=query,
    )


def _context(conversation: ConversationService):
    return SimpleNamespace(application=SimpleNamespace(bot_data={CONVERSATION_KEY: conversation}))


@pytest.fixture
def conversation() -> ConversationService:
    return ConversationService(repo=InMemoryRepo(), tz=timezone.utc, clock=lambda: NOW)


class TestSenderId:
    def test_private_chat_uses_user(self):
        assert sender_id_of(_update(chat_id=99, user_id=42)) == "42"

    @pytest.mark.parametrize("chat_type", [ChatType.GROUP, ChatType.SUPERGROUP])
    def test_group_uses_chat(self, chat_type):
        assert sender_id_of(_update(chat_type=chat_type, chat_id=-100123, user_id=42)) == "-100123"

    def test_channel_without_user(self):
        assert sender_id_of(_update(chat_type=ChatType.CHANNEL, chat_id=-5, user_id=None)) == "-5"


class TestTextHandler:
    @pytest.mark.asyncio
    async def test_text_in_amount_step(self, conversation):
        conversation.store.set("42", ConversationState(step=Step.AMOUNT, payment="x", category="y"))
        message = DummyMessage("50.000")

        await handle_text(_update(message=message), _context(conversation))

        assert conversation.store.get("42").amount == 50000
        text = message.reply_text.call_args.args[0]
        assert "ghi chú" in text
        markup = message.reply_text.call_args.kwargs["reply_markup"]
        assert isinstance(markup, InlineKeyboardMarkup)

    @pytest.mark.asyncio
    async def test_group_members_share_draft(self, conversation):
        conversation.store.set("-7", ConversationState(step=Step.AMOUNT, payment="x", category="y"))
        message = DummyMessage("1000")
        await handle_text(
            _update(chat_type=ChatType.GROUP, chat_id=-7, user_id=1, message=message),
            _context(conversation),
        )
        assert conversation.store.get("-7").step is Step.NOTE


class TestCallbackHandler:
    @pytest.mark.asyncio
    async def test_choice_answers_and_replies(self, conversation):
        message = MagicMock(spec=Message)
        query = SimpleNamespace(data=actions.NEW_EXPENSE.encode(), message=message, answer=AsyncMock())

        await handle_callback(_update(query=query), _context(conversation))

        query.answer.assert_awaited_once()
        message.reply_text.assert_awaited_once()
        assert conversation.store.get("42").step is Step.PAYMENT

    @pytest.mark.asyncio
    async def test_inaccessible_message_is_ignored(self, conversation):
        query = SimpleNamespace(data=actions.NEW_EXPENSE.encode(), message=None, answer=AsyncMock())
        await handle_callback(_update(query=query), _context(conversation))
        assert "42" not in conversation.store


class TestCommands:
    @pytest.mark.asyncio
    async def test_start_discards_draft(self, conversation):
        conversation.store.set("42", ConversationState(step=Step.NOTE, amount=1))
        message = DummyMessage("/start")
        await start(_update(message=message), _context(conversation))
        assert "42" not in conversation.store
        assert "Menu chính" in message.reply_text.call_args.args[0]

    @pytest.mark.asyncio
    async def test_cancel(self, conversation):
        conversation.store.set("42", ConversationState(step=Step.PAYMENT))
        await cancel(_update(message=DummyMessage("/cancel")), _context(conversation))
        assert "42" not in conversation.store


class TestDelivery:
    @pytest.mark.asyncio
    async def test_flood_control_retry(self):
        message = DummyMessage()
        message.reply_text.side_effect = [RetryAfter(1), None]
        with patch("bot.handlers.common.asyncio.sleep", new=AsyncMock()) as sleep:
            await _send_safe(message, "hola")
        assert message.reply_text.await_count == 2
        sleep.assert_awaited_once_with(3)

    @pytest.mark.asyncio
    async def test_gives_up_after_three_attempts(self):
        message = DummyMessage()
        message.reply_text.side_effect = TimedOut()
        with patch("bot.handlers.common.asyncio.sleep", new=AsyncMock()):
            await _send_safe(message, "hola")
        assert message.reply_text.await_count == 3


class TestKeyboards:
    def test_two_per_row(self):
        markup = choices_keyboard((
            Choice("a", "A"), Choice("b", "B"), Choice("c", "C"),
        ))
        rows = markup.inline_keyboard
        assert [len(r) for r in rows] == [2, 1]
        assert rows[0][0].callback_data == "A"
        assert rows[1][0].text == "c"

    def test_no_choices_no_keyboard(self):
        assert choices_keyboard(()) is None
