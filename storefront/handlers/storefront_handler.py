import logging
from typing import Optional
from aiogram import F, Router, types
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from sqlalchemy.exc import SQLAlchemyError

from storefront.core.database import get_session
from storefront.core.states import StorefrontStates
from storefront.services.storefront_service import StorefrontService, StorefrontView
from storefront.utils.formatting import (
    answer_long,
    format_lines,
    format_product_line,
    format_store_card,
)
from storefront.utils.menu import (
    ALL_PRODUCTS_BUTTON,
    get_choice_keyboard,
    get_command_args,
    get_unique_choices,
)

router = Router()
logger = logging.getLogger(__name__)

STORE_BLOCKED_TEXT = "هذا المتجر غير نشط حالياً أو رقم المتجر غير صحيح"
LOAD_ERROR_TEXT = "حدث خطأ أثناء تحميل بيانات المتجر"
NO_PRODUCTS_TEXT = "لا توجد منتجات"


async def _load(message: types.Message, store_code: str) -> Optional[StorefrontView]:
    try:
        async with get_session() as session:
            view = await StorefrontService(session).load_storefront(store_code)
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки витрины %s", store_code)
        await message.answer(LOAD_ERROR_TEXT)
        return None

    if view.is_blocked:
        await message.answer(STORE_BLOCKED_TEXT)
        return None
    return view


def _products_text(
    view: StorefrontView, category_id: Optional[int] = None, query: Optional[str] = None
) -> str:
    currency = view.store.currency
    return format_lines(
        (format_product_line(p, currency) for p in view.narrow(category_id, query)),
        NO_PRODUCTS_TEXT,
    )


def _category_choices(view: StorefrontView) -> dict:
    return get_unique_choices(view.categories)


def _categories_keyboard(view: StorefrontView):
    return get_choice_keyboard(_category_choices(view), extra=ALL_PRODUCTS_BUTTON)


@router.message(Command("store"))
async def cmd_store(message: types.Message, state: FSMContext):
    """Витрина магазина по публичному коду"""
    store_code = get_command_args(message)
    if store_code:
        await open_store(message, state, store_code)
        return

    await state.set_state(StorefrontStates.waiting_store_id)
    await message.answer("أدخل رقم المتجر:")


@router.message(StorefrontStates.waiting_store_id)
async def process_store_id(message: types.Message, state: FSMContext):
    await state.set_state(None)
    await open_store(message, state, (message.text or "").strip())


async def open_store(message: types.Message, state: FSMContext, store_code: str):
    view = await _load(message, store_code)
    if view is None:
        return

    await state.update_data(store_code=store_code, selected_category=None)
    await state.set_state(StorefrontStates.browsing)

    await message.answer(
        f"{format_store_card(view.store)}\n✅ متجر نشط",
        parse_mode="HTML",
        reply_markup=_categories_keyboard(view),
    )
    await answer_long(
        message, "اختر فئة أو اكتب اسم منتج للبحث:\n\n" + _products_text(view)
    )


@router.message(Command("all"))
async def cmd_all_products(message: types.Message, state: FSMContext):
    data = await state.get_data()
    store_code = data.get("store_code")
    if not store_code:
        await message.answer("أدخل رقم المتجر عبر الأمر /store")
        return

    view = await _load(message, store_code)
    if view is None:
        return

    await state.update_data(selected_category=None)
    await state.set_state(StorefrontStates.browsing)
    await answer_long(
        message, _products_text(view), reply_markup=_categories_keyboard(view)
    )


@router.message(StorefrontStates.browsing, F.text, ~F.text.startswith("/"))
async def process_browsing(message: types.Message, state: FSMContext):
    """
    Кнопка категории сужает выдачу до этой категории,
    кнопка «все товары» сбрасывает выбор, любой другой текст ищет по названию
    в пределах выбранной категории.
    """
    data = await state.get_data()
    view = await _load(message, data.get("store_code", ""))
    if view is None:
        await state.set_state(None)
        return

    text = message.text.strip()
    selected = data.get("selected_category")
    if view.find_category(selected) is None:
        selected = None

    if text == ALL_PRODUCTS_BUTTON:
        await state.update_data(selected_category=None)
        await answer_long(message, _products_text(view))
        return

    category = view.find_category(_category_choices(view).get(text))
    if category:
        await state.update_data(selected_category=category.id)
        await answer_long(
            message, f"{category.name}:\n\n" + _products_text(view, category.id)
        )
        return

    await answer_long(message, _products_text(view, selected, text))
