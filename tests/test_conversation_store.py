"""
tests/test_conversation_store.py
─────────────────────────────────
Tests para services/conversation_store.py
"""

import asyncio

import pytest

from bot.states import Step
from services.conversation_store import ConversationState, ConversationStore


class TestConversationState:
    def test_default_is_idle_menu(self):
        state = ConversationState()
        assert state.step is Step.MENU
        assert state.is_idle

    def test_advance_keeps_draft(self):
        state = ConversationState(step=Step.CATEGORY, payment="💵 Tiền mặt")
        nxt = state.advance(Step.AMOUNT, category="Ăn uống")
        assert nxt.payment == "💵 Tiền mặt"
        assert nxt.category == "Ăn uống"
        assert state.step is Step.CATEGORY  # inmutable


class TestConversationStore:
    def test_absent_sender_is_menu(self):
        store = ConversationStore()
        assert store.get("g1") == ConversationState()
        assert "g1" not in store

    def test_set_get_delete(self):
        store = ConversationStore()
        store.set("g1", ConversationState(step=Step.PAYMENT))
        assert store.get("g1").step is Step.PAYMENT
        store.delete("g1")
        assert "g1" not in store

    def test_idle_state_is_not_stored(self):
        store = ConversationStore()
        store.set("g1", ConversationState())
        assert len(store) == 0

    def test_senders_are_isolated(self):
        store = ConversationStore()
        store.set("g1", ConversationState(step=Step.AMOUNT))
        assert store.get("g2").step is Step.MENU

    def test_lock_per_sender(self):
        store = ConversationStore()
        assert store.lock("g1") is store.lock("g1")
        assert store.lock("g1") is not store.lock("g2")

    @pytest.mark.asyncio
    async def test_same_sender_is_serialized(self):
        store = ConversationStore()
        order = []

        async def worker(name):
            async with store.lock("g1"):
                order.append(f"{name}-in")
                await asyncio.sleep(0.01)
                order.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))
        assert order in (["a-in", "a-out", "b-in", "b-out"], ["b-in", "b-out", "a-in", "a-out"])
