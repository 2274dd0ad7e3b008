from html import escape
from typing import Iterable, List
from aiogram import types

from storefront.models.store import Store
from storefront.services.projections import AdminStats, CategoryView, ProductView

TELEGRAM_MESSAGE_LIMIT = 4096


def format_price(price: float, currency: str) -> str:
    """12.5 -> '12.5 MAD', 10.0 -> '10 MAD'"""
    amount = f"{price:.2f}".rstrip("0").rstrip(".")
    return f"{amount} {currency}"


def format_visibility(is_visible: bool) -> str:
    return "👁" if is_visible else "🚫"


def format_store_card(store: Store) -> str:
    return (
        f"🏪 <b>{escape(store.store_name)}</b>\n"
        f"📍 {escape(store.city)} - {escape(store.district)}\n"
        f"📞 {escape(store.phone)}"
    )


def format_category_line(category: CategoryView) -> str:
    return (
        f"{format_visibility(category.is_visible)} {category.name} "
        f"({category.products_count} منتج)"
    )


def format_product_line(product: ProductView, currency: str, show_visibility: bool = False) -> str:
    line = f"{product.name} - {format_price(product.price, currency)} · {product.category_name}"
    if show_visibility:
        line = f"{format_visibility(product.is_visible)} {line}"
    return line


def format_lines(lines: Iterable[str], empty: str) -> str:
    lines = list(lines)
    return "\n".join(lines) if lines else empty


def format_stats(stats: AdminStats) -> str:
    return (
        "📊 <b>إحصائيات المنصة</b>\n\n"
        f"المتاجر: {stats.total_stores} ({stats.active_stores} نشط)\n"
        f"الفئات: {stats.total_categories}\n"
        f"المنتجات: {stats.total_products}\n"
        f"الصور: {stats.total_images} ({stats.active_images} نشطة)\n"
        f"معدل النشاط: {stats.activity_rate}%"
    )


def _telegram_length(text: str) -> int:
    # Telegram считает длину в единицах UTF-16
    return len(text.encode("utf-16-le")) // 2


def split_message(text: str, limit: int = TELEGRAM_MESSAGE_LIMIT) -> List[str]:
    """
    Делит текст на части не длиннее limit по границам строк.
    Строка длиннее limit режется на куски.
    """
    chunks = []
    current = ""
    for line in text.split("\n"):
        while _telegram_length(line) > limit:
            cut = limit
            excess = _telegram_length(line[:cut]) - limit
            while excess > 0:
                cut -= max(1, excess // 2)
                excess = _telegram_length(line[:cut]) - limit
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:cut])
            line = line[cut:]

        candidate = f"{current}\n{line}" if current else line
        if current and _telegram_length(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate

    if current or not chunks:
        chunks.append(current)
    return chunks


async def answer_long(message: types.Message, text: str, reply_markup=None):
    """Отправляет текст несколькими сообщениями, клавиатура уходит с последним"""
    chunks = split_message(text)
    for chunk in chunks[:-1]:
        await message.answer(chunk)
    await message.answer(chunks[-1], reply_markup=reply_markup)
