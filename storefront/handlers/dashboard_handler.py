import logging
from operator import attrgetter
from typing import Optional
from aiogram import Router, types
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from sqlalchemy.exc import SQLAlchemyError

from storefront.core.database import get_session
from storefront.core.exceptions import (
    CatalogValidationError,
    StoreNotFoundError,
    StorefrontError,
)
from storefront.core.states import (
    DashboardStates,
    CreateCategoryStates,
    CreateProductStates,
    ToggleCategoryStates,
    ToggleProductStates,
)
from storefront.services.catalog_service import CatalogService, CatalogSnapshot
from storefront.utils.formatting import (
    answer_long,
    format_category_line,
    format_lines,
    format_product_line,
    format_store_card,
)
from storefront.utils.menu import (
    NO_IMAGE_BUTTON,
    get_choice_keyboard,
    get_command_args,
    get_main_keyboard,
    get_menu_text,
    get_unique_choices,
)
from storefront.utils.validators import validate_price

router = Router()
logger = logging.getLogger(__name__)

STORE_NOT_FOUND_TEXT = "متجر غير موجود: لم يتم العثور على متجر بهذا الرقم"
LOAD_ERROR_TEXT = "حدث خطأ أثناء تحميل بيانات المتجر"
SAVE_ERROR_TEXT = "حدث خطأ أثناء حفظ التغييرات. يرجى المحاولة مرة أخرى."
LOGIN_REQUIRED_TEXT = "يرجى الدخول أولاً عبر الأمر /dashboard"


async def _merchant_id(message: types.Message, state: FSMContext) -> Optional[str]:
    data = await state.get_data()
    merchant_id = data.get("merchant_id")
    if not merchant_id:
        await message.answer(LOGIN_REQUIRED_TEXT)
    return merchant_id


def _overview_text(snapshot: CatalogSnapshot) -> str:
    store = snapshot.store
    visible_products = sum(1 for p in snapshot.products if p.is_visible)
    return (
        f"{format_store_card(store)}\n\n"
        f"رقم المتجر: {store.store_id}\n"
        f"الفئات: {len(snapshot.categories)}\n"
        f"المنتجات: {len(snapshot.products)} ({visible_products} ظاهر)\n"
        f"العملة: {store.currency}"
    )


@router.message(Command("dashboard"))
async def cmd_dashboard(message: types.Message, state: FSMContext):
    """Вход в панель продавца по merchant_id"""
    merchant_id = get_command_args(message)
    if merchant_id:
        await open_dashboard(message, state, merchant_id)
        return

    await state.set_state(DashboardStates.waiting_merchant_id)
    await message.answer("أدخل رقم التاجر:")


@router.message(DashboardStates.waiting_merchant_id)
async def process_merchant_id(message: types.Message, state: FSMContext):
    await state.set_state(None)
    await open_dashboard(message, state, (message.text or "").strip())


async def open_dashboard(message: types.Message, state: FSMContext, merchant_id: str):
    try:
        async with get_session() as session:
            snapshot = await CatalogService(session).load_dashboard(merchant_id)
    except StoreNotFoundError:
        logger.info("Панель продавца: магазин %s не найден", merchant_id)
        await message.answer(STORE_NOT_FOUND_TEXT)
        return
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки панели продавца %s", merchant_id)
        await message.answer(LOAD_ERROR_TEXT)
        return

    await state.update_data(merchant_id=merchant_id)
    await message.answer(
        _overview_text(snapshot),
        parse_mode="HTML",
        reply_markup=get_main_keyboard("merchant"),
    )
    await message.answer(get_menu_text("merchant"), parse_mode="HTML")


@router.message(Command("categories"))
async def cmd_categories(message: types.Message, state: FSMContext):
    """Список категорий с количеством товаров"""
    merchant_id = await _merchant_id(message, state)
    if not merchant_id:
        return

    try:
        async with get_session() as session:
            snapshot = await CatalogService(session).load_dashboard(merchant_id)
    except StoreNotFoundError:
        await message.answer(STORE_NOT_FOUND_TEXT)
        return
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки категорий %s", merchant_id)
        await message.answer(LOAD_ERROR_TEXT)
        return

    await answer_long(
        message,
        format_lines(
            (format_category_line(c) for c in snapshot.category_views),
            "لا توجد فئات بعد. أضف فئة عبر /addcategory",
        ),
    )


@router.message(Command("products"))
async def cmd_products(message: types.Message, state: FSMContext):
    merchant_id = await _merchant_id(message, state)
    if not merchant_id:
        return

    try:
        async with get_session() as session:
            snapshot = await CatalogService(session).load_dashboard(merchant_id)
    except StoreNotFoundError:
        await message.answer(STORE_NOT_FOUND_TEXT)
        return
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки товаров %s", merchant_id)
        await message.answer(LOAD_ERROR_TEXT)
        return

    currency = snapshot.store.currency
    await answer_long(
        message,
        format_lines(
            (
                format_product_line(p, currency, show_visibility=True)
                for p in snapshot.product_views
            ),
            "لا توجد منتجات بعد. أضف منتجاً عبر /addproduct",
        ),
    )


@router.message(Command("addcategory"))
async def cmd_add_category(message: types.Message, state: FSMContext):
    if not await _merchant_id(message, state):
        return
    await message.answer("أدخل اسم الفئة (مثال: مشروبات):")
    await state.set_state(CreateCategoryStates.waiting_name)


@router.message(CreateCategoryStates.waiting_name)
async def process_category_name(message: types.Message, state: FSMContext):
    name = (message.text or "").strip()
    if not name:
        await message.answer("اسم الفئة مطلوب:")
        return

    data = await state.get_data()
    await state.set_state(None)

    try:
        async with get_session() as session:
            service = CatalogService(session)
            snapshot = await service.load_dashboard(data.get("merchant_id"))
            category = await service.create_category(snapshot, name)
    except StoreNotFoundError:
        await message.answer(STORE_NOT_FOUND_TEXT)
        return
    except (SQLAlchemyError, StorefrontError):
        logger.exception("Ошибка добавления категории %s", name)
        await message.answer(SAVE_ERROR_TEXT)
        return

    await message.answer(
        f'✅ تم إضافة فئة "{category.name}" إلى متجرك',
        reply_markup=get_main_keyboard("merchant"),
    )


@router.message(Command("addproduct"))
async def cmd_add_product(message: types.Message, state: FSMContext):
    """Добавление товара: категория, название, цена, изображение"""
    merchant_id = await _merchant_id(message, state)
    if not merchant_id:
        return

    try:
        async with get_session() as session:
            snapshot = await CatalogService(session).load_dashboard(merchant_id)
    except StoreNotFoundError:
        await message.answer(STORE_NOT_FOUND_TEXT)
        return
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки категорий %s", merchant_id)
        await message.answer(LOAD_ERROR_TEXT)
        return

    if not snapshot.categories:
        await message.answer("أضف فئة أولاً عبر /addcategory")
        return

    category_choices = get_unique_choices(snapshot.categories)
    await state.update_data(
        category_choices=category_choices,
        image_choices=get_unique_choices(
            snapshot.images, value=attrgetter("image_url"), detail=attrgetter("category")
        ),
    )
    await message.answer(
        "اختر الفئة:", reply_markup=get_choice_keyboard(category_choices)
    )
    await state.set_state(CreateProductStates.waiting_category)


@router.message(CreateProductStates.waiting_category)
async def process_product_category(message: types.Message, state: FSMContext):
    data = await state.get_data()
    category_id = data.get("category_choices", {}).get((message.text or "").strip())
    if category_id is None:
        await message.answer("اختر فئة من القائمة:")
        return

    await state.update_data(category_id=category_id)
    await message.answer("أدخل اسم المنتج:", reply_markup=types.ReplyKeyboardRemove())
    await state.set_state(CreateProductStates.waiting_name)


@router.message(CreateProductStates.waiting_name)
async def process_product_name(message: types.Message, state: FSMContext):
    name = (message.text or "").strip()
    if not name:
        await message.answer("اسم المنتج مطلوب:")
        return

    await state.update_data(product_name=name)
    await message.answer("أدخل السعر (مثال: 12.50):")
    await state.set_state(CreateProductStates.waiting_price)


@router.message(CreateProductStates.waiting_price)
async def process_product_price(message: types.Message, state: FSMContext):
    price_text = (message.text or "").strip()
    try:
        validate_price(price_text)
    except CatalogValidationError:
        await message.answer("السعر غير صحيح. أدخل رقماً موجباً (مثال: 12.50):")
        return

    data = await state.get_data()
    await state.update_data(price=price_text)
    await message.answer(
        "اختر صورة من المكتبة أو أرسل رابط صورة:",
        reply_markup=get_choice_keyboard(
            data.get("image_choices", {}).keys(), extra=NO_IMAGE_BUTTON
        ),
    )
    await state.set_state(CreateProductStates.waiting_image)


@router.message(CreateProductStates.waiting_image)
async def process_product_image(message: types.Message, state: FSMContext):
    choice = (message.text or "").strip()
    data = await state.get_data()

    if choice == NO_IMAGE_BUTTON:
        image_url = None
    elif choice in data.get("image_choices", {}):
        image_url = data["image_choices"][choice]
    elif choice.startswith(("http://", "https://")):
        image_url = choice
    else:
        await message.answer("اختر صورة من القائمة أو أرسل رابطاً صحيحاً:")
        return

    await state.set_state(None)

    try:
        async with get_session() as session:
            service = CatalogService(session)
            snapshot = await service.load_dashboard(data.get("merchant_id"))
            product = await service.create_product(
                snapshot,
                name=data.get("product_name", ""),
                category_id=data.get("category_id"),
                price=data.get("price", ""),
                image_url=image_url,
            )
    except StoreNotFoundError:
        await message.answer(STORE_NOT_FOUND_TEXT)
        return
    except (SQLAlchemyError, StorefrontError):
        logger.exception("Ошибка добавления товара")
        await message.answer(SAVE_ERROR_TEXT, reply_markup=get_main_keyboard("merchant"))
        return

    await message.answer(
        f'✅ تم إضافة منتج "{product.name}" إلى فئة {product.category_name}',
        reply_markup=get_main_keyboard("merchant"),
    )


@router.message(Command("togglecategory"))
async def cmd_toggle_category(message: types.Message, state: FSMContext):
    merchant_id = await _merchant_id(message, state)
    if not merchant_id:
        return

    try:
        async with get_session() as session:
            snapshot = await CatalogService(session).load_dashboard(merchant_id)
    except StoreNotFoundError:
        await message.answer(STORE_NOT_FOUND_TEXT)
        return
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки категорий %s", merchant_id)
        await message.answer(LOAD_ERROR_TEXT)
        return

    if not snapshot.categories:
        await message.answer("لا توجد فئات بعد")
        return

    category_choices = get_unique_choices(snapshot.categories)
    await state.update_data(category_choices=category_choices)
    await message.answer(
        "اختر الفئة لإظهارها أو إخفائها:",
        reply_markup=get_choice_keyboard(category_choices),
    )
    await state.set_state(ToggleCategoryStates.waiting_category)


@router.message(ToggleCategoryStates.waiting_category)
async def process_toggle_category(message: types.Message, state: FSMContext):
    data = await state.get_data()
    category_id = data.get("category_choices", {}).get((message.text or "").strip())
    if category_id is None:
        await message.answer("اختر فئة من القائمة:")
        return

    await state.set_state(None)

    try:
        async with get_session() as session:
            service = CatalogService(session)
            snapshot = await service.load_dashboard(data.get("merchant_id"))
            category = await service.toggle_category_visibility(snapshot, category_id)
    except StoreNotFoundError:
        await message.answer(STORE_NOT_FOUND_TEXT)
        return
    except (SQLAlchemyError, StorefrontError):
        logger.exception("Ошибка обновления категории %s", category_id)
        await message.answer(SAVE_ERROR_TEXT, reply_markup=get_main_keyboard("merchant"))
        return

    action = "إظهار" if category.is_visible else "إخفاء"
    await message.answer(
        f"تم {action} الفئة {category.name}",
        reply_markup=get_main_keyboard("merchant"),
    )


@router.message(Command("toggleproduct"))
async def cmd_toggle_product(message: types.Message, state: FSMContext):
    merchant_id = await _merchant_id(message, state)
    if not merchant_id:
        return

    try:
        async with get_session() as session:
            snapshot = await CatalogService(session).load_dashboard(merchant_id)
    except StoreNotFoundError:
        await message.answer(STORE_NOT_FOUND_TEXT)
        return
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки товаров %s", merchant_id)
        await message.answer(LOAD_ERROR_TEXT)
        return

    if not snapshot.products:
        await message.answer("لا توجد منتجات بعد")
        return

    product_choices = get_unique_choices(
        snapshot.product_views, detail=attrgetter("category_name")
    )
    await state.update_data(product_choices=product_choices)
    await message.answer(
        "اختر المنتج لإظهاره أو إخفائه:",
        reply_markup=get_choice_keyboard(product_choices),
    )
    await state.set_state(ToggleProductStates.waiting_product)


@router.message(ToggleProductStates.waiting_product)
async def process_toggle_product(message: types.Message, state: FSMContext):
    data = await state.get_data()
    product_id = data.get("product_choices", {}).get((message.text or "").strip())
    if product_id is None:
        await message.answer("اختر منتجاً من القائمة:")
        return

    await state.set_state(None)

    try:
        async with get_session() as session:
            service = CatalogService(session)
            snapshot = await service.load_dashboard(data.get("merchant_id"))
            product = await service.toggle_product_visibility(snapshot, product_id)
    except StoreNotFoundError:
        await message.answer(STORE_NOT_FOUND_TEXT)
        return
    except (SQLAlchemyError, StorefrontError):
        logger.exception("Ошибка обновления товара %s", product_id)
        await message.answer(SAVE_ERROR_TEXT, reply_markup=get_main_keyboard("merchant"))
        return

    action = "إظهار" if product.is_visible else "إخفاء"
    await message.answer(
        f"تم {action} المنتج {product.name}",
        reply_markup=get_main_keyboard("merchant"),
    )
