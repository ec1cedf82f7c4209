"""
services/conversation_service.py
─────────────────────────────────
Máquina de estados de la conversación.
Flujo de registro: pago → categoría → monto → nota → confirmar
Flujo de suma:     período fijo, o fecha inicio → fecha fin

Cada evento entrante se resuelve contra tres tablas, en este orden:
  1. acciones globales (menú, cancelar, nuevo gasto, sumas)
  2. acciones ligadas al paso actual (botones)
  3. texto libre según el paso actual
Lo que no encaja en ninguna cae en la transición por defecto: mostrar
el menú principal sin tocar el estado.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime, timezone, tzinfo
from typing import Awaitable, Callable, Optional

from bot import prompts
from bot.actions import Action, ActionKind
from bot.events import EventKind, InboundEvent, Prompt, Reply
from bot.states import Step
from database.exceptions import StoreUnavailable
from database.models import CATEGORIES, CUSTOM_CATEGORY_KEY, ExpenseRecord
from services.aggregation_service import AggregationService
from services.conversation_store import ConversationState, ConversationStore
from services.exceptions import ValidationError

logger = logging.getLogger(__name__)

# (respuesta, nuevo estado). None como estado = conversación terminada.
Outcome = tuple[Prompt, Optional[ConversationState]]
Handler = Callable[[str, ConversationState, object], Awaitable[Outcome]]

_AMOUNT_SEPARATORS = re.compile(r"[.,\s]")
_DIGITS = re.compile(r"[0-9]+")

INVALID_AMOUNT_MESSAGE = "❌ Số tiền không hợp lệ!\nVui lòng chỉ nhập số.\n\nVí dụ: 50000"
UNKNOWN_CATEGORY_MESSAGE = "❌ Danh mục không hợp lệ!\n\n📂 Chọn danh mục (hoặc nhập tay):"
EMPTY_CATEGORY_MESSAGE = "❌ Danh mục không được để trống!\n\n✍️ Nhập danh mục của bạn:"


def parse_amount(text: str) -> int:
    """
    "50.000", "50,000" y " 50000 " → 50000. Cero es válido.

    Raises:
        ValidationError: si queda algo que no sea dígito (o nada).
    """
    cleaned = _AMOUNT_SEPARATORS.sub("", text or "")
    if not _DIGITS.fullmatch(cleaned):
        raise ValidationError(INVALID_AMOUNT_MESSAGE)
    return int(cleaned)


class ConversationService:
    """Procesa un evento por vez por remitente y construye la respuesta."""

    def __init__(
        self,
        repo,
        store: ConversationStore | None = None,
        tz: tzinfo | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Args:
            repo:  almacenamiento con append(record) y fetch_all() (ver RecordStore).
            store: estados por remitente; uno nuevo si no se pasa.
            tz:    zona para "hoy", "este mes" y rangos personalizados.
                   None = zona local del proceso.
            clock: fuente de "ahora" (tests); debe devolver datetime con zona.
        """
        self._repo = repo
        self._store = store or ConversationStore()
        self._tz = tz
        self._clock = clock

        self._global_actions: dict[ActionKind, Handler] = {
            ActionKind.MENU: self._reset,
            ActionKind.CANCEL: self._reset,
            ActionKind.NEW_EXPENSE: self._start_expense,
            ActionKind.SUM: self._sum,
            ActionKind.SUM_CUSTOM: self._start_custom_range,
        }
        self._step_actions: dict[tuple[Step, ActionKind], Handler] = {
            (Step.PAYMENT, ActionKind.PAY_CASH): self._choose_payment,
            (Step.PAYMENT, ActionKind.PAY_ONLINE): self._choose_payment,
            (Step.CATEGORY, ActionKind.CATEGORY): self._choose_category,
            (Step.NOTE, ActionKind.NOTE_SKIP): self._skip_note,
            (Step.CONFIRM, ActionKind.SAVE): self._save,
        }
        self._text_handlers: dict[Step, Handler] = {
            Step.CUSTOM_CAT: self._enter_custom_category,
            Step.AMOUNT: self._enter_amount,
            Step.NOTE: self._enter_note,
            Step.CUSTOM_DATE_START: self._enter_custom_start,
            Step.CUSTOM_DATE_END: self._enter_custom_end,
        }

    @property
    def store(self) -> ConversationStore:
        return self._store

    def now(self) -> datetime:
        if self._clock is not None:
            return self._clock()
        if self._tz is not None:
            return datetime.now(self._tz)
        return datetime.now().astimezone()

    # ── Entrada ───────────────────────────────────────────

    async def handle(self, event: InboundEvent) -> Reply | None:
        """
        Procesa un evento y retorna la respuesta a enviar.
        Retorna None si el evento no tiene remitente o destino de respuesta.
        Nunca propaga excepciones.
        """
        if not event.is_addressable:
            logger.debug("Evento ignorado (sin remitente o destino): %s", event.kind)
            return None

        sender_id = event.sender_id
        async with self._store.lock(sender_id):
            state = self._store.get(sender_id)
            handler, arg = self.resolve(state.step, event)
            try:
                prompt, new_state = await handler(sender_id, state, arg)
            except ValidationError as e:
                return Reply.to(event.reply_target, self._retry_prompt(state.step, e.message))
            except Exception:
                logger.exception("Error procesando evento de %s en %s", sender_id, state.step.value)
                return Reply.to(event.reply_target, prompts.main_menu())

            if new_state is None:
                self._store.delete(sender_id)
            else:
                self._store.set(sender_id, new_state)

        return Reply.to(event.reply_target, prompt)

    def resolve(self, step: Step, event: InboundEvent) -> tuple[Handler, object]:
        """Tabla de transiciones: (paso, evento) → (handler, argumento)."""
        if event.kind is EventKind.MENU_CHOICE:
            action = Action.decode(event.payload)
            if action is None:
                return self._show_menu, None
            if action.kind in self._global_actions:
                return self._global_actions[action.kind], action
            handler = self._step_actions.get((step, action.kind))
            if handler is not None:
                return handler, action
            return self._show_menu, None

        handler = self._text_handlers.get(step)
        if handler is not None:
            return handler, (event.payload or "").strip()
        return self._show_menu, None

    @staticmethod
    def _retry_prompt(step: Step, message: str) -> Prompt:
        if step is Step.CATEGORY:
            return prompts.ask_category(message)
        return prompts.retry(message)

    # ── Transiciones globales ─────────────────────────────

    async def _show_menu(self, sender_id: str, state: ConversationState, _) -> Outcome:
        return prompts.main_menu(), state

    async def _reset(self, sender_id: str, state: ConversationState, _) -> Outcome:
        return prompts.main_menu(), None

    async def _start_expense(self, sender_id: str, state: ConversationState, _) -> Outcome:
        return prompts.ask_payment(), ConversationState(step=Step.PAYMENT)

    async def _sum(self, sender_id: str, state: ConversationState, action: Action) -> Outcome:
        if not action.is_period_sum:
            return prompts.ask_sum_period(), state

        now = self.now()
        window = AggregationService.standing_window(action.period, now)
        try:
            rows = await asyncio.to_thread(self._repo.fetch_all)
        except StoreUnavailable:
            logger.warning("Suma %s fallida para %s: hoja no disponible", action.period.value, sender_id)
            return prompts.sum_failed(), state

        summary = AggregationService.aggregate(rows, sender_id, window, self._tz)
        logger.info("Suma %s para %s: %d filas", action.period.value, sender_id, summary.matched)
        header = prompts.period_header(action.period, window, now)
        return prompts.summary_result(header, summary), state

    async def _start_custom_range(self, sender_id: str, state: ConversationState, _) -> Outcome:
        return prompts.ask_custom_start(), ConversationState(step=Step.CUSTOM_DATE_START)

    # ── Registro de gasto ─────────────────────────────────

    async def _choose_payment(self, sender_id: str, state: ConversationState, action: Action) -> Outcome:
        return prompts.ask_category(), state.advance(Step.CATEGORY, payment=action.payment.label)

    async def _choose_category(self, sender_id: str, state: ConversationState, action: Action) -> Outcome:
        key = action.category_key
        if key == CUSTOM_CATEGORY_KEY:
            return prompts.ask_custom_category(), state.advance(Step.CUSTOM_CAT)
        if key not in CATEGORIES:
            raise ValidationError(UNKNOWN_CATEGORY_MESSAGE)
        return prompts.ask_amount(), state.advance(Step.AMOUNT, category=CATEGORIES[key])

    async def _enter_custom_category(self, sender_id: str, state: ConversationState, text: str) -> Outcome:
        # Sin validar contra CATEGORIES: cada texto distinto es su propia categoría
        if not text:
            raise ValidationError(EMPTY_CATEGORY_MESSAGE)
        return prompts.ask_amount(), state.advance(Step.AMOUNT, category=text)

    async def _enter_amount(self, sender_id: str, state: ConversationState, text: str) -> Outcome:
        amount = parse_amount(text)
        return prompts.ask_note(), state.advance(Step.NOTE, amount=amount)

    async def _enter_note(self, sender_id: str, state: ConversationState, text: str) -> Outcome:
        return self._confirm(state.advance(Step.CONFIRM, note=text))

    async def _skip_note(self, sender_id: str, state: ConversationState, _) -> Outcome:
        return self._confirm(state.advance(Step.CONFIRM, note=""))

    @staticmethod
    def _confirm(state: ConversationState) -> Outcome:
        return prompts.confirm(state.payment, state.category, state.amount, state.note), state

    async def _save(self, sender_id: str, state: ConversationState, _) -> Outcome:
        record = ExpenseRecord(
            timestamp=self.now().astimezone(timezone.utc),
            sender_id=sender_id,
            payment=state.payment,
            category=state.category,
            amount=state.amount,
            note=state.note or "",
        )
        try:
            await asyncio.to_thread(self._repo.append, record)
        except StoreUnavailable:
            # El borrador queda intacto en CONFIRM
            logger.warning("No se pudo guardar el gasto de %s", sender_id)
            return prompts.save_failed(), state
        return prompts.saved(), None

    # ── Suma con rango personalizado ──────────────────────

    async def _enter_custom_start(self, sender_id: str, state: ConversationState, text: str) -> Outcome:
        start = AggregationService.parse_day_month(text)
        return prompts.ask_custom_end(), state.advance(Step.CUSTOM_DATE_END, custom_start=start)

    async def _enter_custom_end(self, sender_id: str, state: ConversationState, text: str) -> Outcome:
        end = AggregationService.parse_day_month(text)
        window = AggregationService.custom_window(state.custom_start, end, self.now())
        try:
            rows = await asyncio.to_thread(self._repo.fetch_all)
        except StoreUnavailable:
            logger.warning("Suma personalizada fallida para %s: hoja no disponible", sender_id)
            return prompts.custom_sum_failed(), None

        summary = AggregationService.aggregate(rows, sender_id, window, self._tz)
        logger.info(
            "Suma personalizada para %s (%s → %s): %d filas",
            sender_id, window.start.date(), window.end.date(), summary.matched,
        )
        return prompts.summary_result(prompts.custom_header(window), summary, custom=True), None

