"""
bot/prompts.py
───────────────
Mensajes y botones de cada paso de la conversación.
Funciones puras: no envían nada, solo construyen `Prompt`.
"""

from __future__ import annotations

from datetime import datetime

from bot import actions
from bot.events import Choice, Prompt
from database.models import CATEGORIES
from services.aggregation_service import Period, Summary, Window
from services.formatting import format_date, format_money

BACK_TO_MENU = Choice.of("↩️ Menu", actions.MENU)

_AFTER_RESULT = (
    Choice.of("➕ Nhập mới", actions.NEW_EXPENSE),
    Choice.of("🧮 Tính tổng", actions.SUM),
)


# ─────────────────────────────────────────────
#  Menú principal
# ─────────────────────────────────────────────

def main_menu() -> Prompt:
    return Prompt("📋 Menu chính:", _AFTER_RESULT)


# ─────────────────────────────────────────────
#  Registro de gasto
# ─────────────────────────────────────────────

def ask_payment() -> Prompt:
    return Prompt("💰 Chọn loại thanh toán:", (
        Choice.of("💵 Tiền mặt cùi", actions.PAY_CASH),
        Choice.of("💳 Online xịn", actions.PAY_ONLINE),
        BACK_TO_MENU,
    ))


def ask_category(text: str = "📂 Chọn danh mục (hoặc nhập tay):") -> Prompt:
    choices = [Choice.of(f"{key} {label}", actions.category(key)) for key, label in CATEGORIES.items()]
    choices.append(Choice.of("✍️ Nhập tay", actions.CUSTOM_CATEGORY))
    choices.append(BACK_TO_MENU)
    return Prompt(text, tuple(choices))


def ask_custom_category() -> Prompt:
    return Prompt("✍️ Nhập danh mục của bạn:\n\n(Ví dụ: Xăng xe, Thuốc, Quà...)", (BACK_TO_MENU,))


def ask_amount() -> Prompt:
    return Prompt("💵 Nhập số tiền (chỉ số):\n\nVí dụ: 120000", (BACK_TO_MENU,))


def ask_note() -> Prompt:
    return Prompt("📝 Nhập ghi chú (hoặc bấm Bỏ qua):", (
        Choice.of("⏭️ Bỏ qua", actions.NOTE_SKIP),
        BACK_TO_MENU,
    ))


def confirm(payment: str, category: str, amount: int, note: str) -> Prompt:
    text = (
        "📋 Xác nhận:\n\n"
        f"💰 {payment}\n"
        f"📂 {category}\n"
        f"💵 {format_money(amount)}\n"
        f"📝 {note or '(không có)'}"
    )
    return Prompt(text, (
        Choice.of("✅ Lưu", actions.SAVE),
        Choice.of("❌ Hủy", actions.CANCEL),
    ))


def saved() -> Prompt:
    return Prompt("✅ Đã lưu thành công!", _AFTER_RESULT)


def save_failed() -> Prompt:
    """El borrador se conserva: se vuelven a ofrecer Guardar / Cancelar."""
    return Prompt("❌ Lưu thất bại! Vui lòng thử lại sau.", (
        Choice.of("✅ Lưu", actions.SAVE),
        Choice.of("❌ Hủy", actions.CANCEL),
    ))


def retry(message: str) -> Prompt:
    """Re-pregunta del mismo paso tras una entrada inválida."""
    return Prompt(message, (BACK_TO_MENU,))


# ─────────────────────────────────────────────
#  Sumas
# ─────────────────────────────────────────────

def ask_sum_period() -> Prompt:
    return Prompt("🧮 Bạn muốn tính tổng phạm vi nào?", (
        Choice.of("📅 Hôm nay", actions.sum_period(Period.TODAY)),
        Choice.of("📆 7 ngày", actions.sum_period(Period.SEVEN_DAYS)),
        Choice.of("🗓️ Tháng này", actions.sum_period(Period.MONTH)),
        Choice.of("♾️ Tất cả", actions.sum_period(Period.ALL)),
        Choice.of("🧾 Tùy chọn", actions.SUM_CUSTOM),
        BACK_TO_MENU,
    ))


def ask_custom_start() -> Prompt:
    return Prompt(
        "🧾 Tính tổng tùy chọn\n\n📅 Nhập ngày bắt đầu (DD/MM):\n\nVí dụ: 01/01 hoặc 15/12",
        (BACK_TO_MENU,),
    )


def ask_custom_end() -> Prompt:
    return Prompt("📅 Nhập ngày kết thúc (DD/MM):\n\nVí dụ: 15/01", (BACK_TO_MENU,))


def period_header(period: Period, window: Window, now: datetime) -> str:
    if period is Period.TODAY:
        return f"📅 Tổng kết hôm nay ({format_date(now)})"
    if period is Period.SEVEN_DAYS:
        return f"📆 Tổng kết 7 ngày ({format_date(window.start)} → {format_date(now)})"
    if period is Period.MONTH:
        return f"🗓️ Tổng kết tháng này ({format_date(window.start)} → {format_date(now)})"
    return "♾️ Tổng kết tất cả"


def custom_header(window: Window) -> str:
    return f"🧾 Tổng kết tùy chọn\n({format_date(window.start)} → {format_date(window.end)})"


def summary_result(header: str, summary: Summary, custom: bool = False) -> Prompt:
    lines = [
        f"{header}\n",
        "💰 Tổng quan:",
        f"Tổng chi: {format_money(summary.total)}",
        f"Tiền mặt: {format_money(summary.total_cash)}",
        f"Online: {format_money(summary.total_online)}",
    ]

    if summary.by_category:
        lines.append("\n📊 Chi tiết theo danh mục:")
        for label, totals in summary.by_category.items():
            lines.append(
                f"{label}: cash {format_money(totals.cash)} | "
                f"online {format_money(totals.online)} | {format_money(totals.total)}"
            )
    elif custom:
        lines.append("\n📊 Chưa có dữ liệu trong khoảng thời gian này.")
    else:
        lines.append("\n📊 Chưa có dữ liệu.")

    return Prompt("\n".join(lines), _AFTER_RESULT)


def sum_failed() -> Prompt:
    return Prompt("❌ Lỗi tính tổng!", _AFTER_RESULT)


def custom_sum_failed() -> Prompt:
    return Prompt(
        "❌ Lỗi tính tổng tùy chọn!\n\nVui lòng kiểm tra định dạng ngày (DD/MM)",
        _AFTER_RESULT,
    )
