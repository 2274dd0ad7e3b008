import logging
from aiogram import Router, types
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from sqlalchemy.exc import SQLAlchemyError

from storefront.core.database import get_session
from storefront.core.exceptions import AdminNotFoundError, RecordNotFoundError, StorefrontError
from storefront.core.states import AddImageStates, AdminAuthStates, DeleteStoreStates
from storefront.services.admin_service import AdminService
from storefront.services.image_library_service import ImageLibraryService
from storefront.services.store_service import StoreService
from storefront.utils.formatting import answer_long, format_lines, format_stats
from storefront.utils.menu import (
    CANCEL_BUTTON,
    CONFIRM_BUTTON,
    get_choice_keyboard,
    get_command_args,
    get_main_keyboard,
    get_menu_text,
)
from storefront.utils.permissions import has_admin_access, is_admin_chat

router = Router()
logger = logging.getLogger(__name__)

NO_RIGHTS_TEXT = "ليست لديك صلاحيات الإدارة. استخدم الأمر /admin"
LOAD_ERROR_TEXT = "حدث خطأ أثناء تحميل بيانات لوحة التحكم"
SAVE_ERROR_TEXT = "حدث خطأ أثناء تنفيذ العملية. يرجى المحاولة مرة أخرى."
STORE_NOT_FOUND_TEXT = "لم يتم العثور على متجر بهذا الرقم"


async def _grant(message: types.Message, state: FSMContext, admin_name: str):
    await state.update_data(is_admin=True, admin_name=admin_name)
    await message.answer(
        f"✅ مرحباً {admin_name}", reply_markup=get_main_keyboard("admin")
    )
    await message.answer(get_menu_text("admin"), parse_mode="HTML")


@router.message(Command("admin"))
async def cmd_admin(message: types.Message, state: FSMContext):
    """Вход в панель администратора: по ADMIN_CHAT_IDS или по admin_id"""
    await state.set_state(None)

    admin_id = get_command_args(message)
    if not admin_id and is_admin_chat(message.chat.id):
        await _grant(message, state, "المدير")
        return

    if not admin_id:
        await state.set_state(AdminAuthStates.waiting_admin_id)
        await message.answer("أدخل رقم لوحة التحكم:")
        return

    await check_admin_id(message, state, admin_id)


@router.message(AdminAuthStates.waiting_admin_id)
async def process_admin_id(message: types.Message, state: FSMContext):
    await state.set_state(None)
    await check_admin_id(message, state, (message.text or "").strip())


async def check_admin_id(message: types.Message, state: FSMContext, admin_id: str):
    try:
        async with get_session() as session:
            admin = await AdminService(session).get_admin(admin_id)
    except AdminNotFoundError:
        logger.info("Панель администратора %s не найдена", admin_id)
        await message.answer("لوحة تحكم غير موجودة: لم يتم العثور على لوحة تحكم بهذا الرقم")
        return
    except SQLAlchemyError:
        logger.exception("Ошибка проверки admin_id %s", admin_id)
        await message.answer(LOAD_ERROR_TEXT)
        return

    logger.info("Администратор %s вошёл в панель %s", admin.name, admin_id)
    await _grant(message, state, admin.name)


@router.message(Command("stats"))
async def cmd_stats(message: types.Message, state: FSMContext):
    if not await has_admin_access(message.chat.id, state):
        await message.answer(NO_RIGHTS_TEXT)
        return

    try:
        async with get_session() as session:
            overview = await AdminService(session).load_overview()
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки статистики")
        await message.answer(LOAD_ERROR_TEXT)
        return

    await message.answer(format_stats(overview.stats), parse_mode="HTML")


@router.message(Command("stores"))
async def cmd_stores(message: types.Message, state: FSMContext):
    """Список магазинов с поиском по названию, городу или коду"""
    if not await has_admin_access(message.chat.id, state):
        await message.answer(NO_RIGHTS_TEXT)
        return

    try:
        async with get_session() as session:
            overview = await AdminService(session).load_overview()
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки списка магазинов")
        await message.answer(LOAD_ERROR_TEXT)
        return

    lines = []
    for store in overview.search(get_command_args(message)):
        categories, products = overview.store_catalog_size(store)
        status = "✅" if store.is_active else "⛔"
        lines.append(
            f"{status} {store.store_name} ({store.city}) · {store.store_id} / "
            f"{store.merchant_id} · {categories} فئة · {products} منتج"
        )

    await answer_long(message, format_lines(lines, "لا توجد متاجر"))


@router.message(Command("togglestore"))
async def cmd_toggle_store(message: types.Message, state: FSMContext):
    if not await has_admin_access(message.chat.id, state):
        await message.answer(NO_RIGHTS_TEXT)
        return

    store_code = get_command_args(message)
    if not store_code:
        await message.answer("الاستخدام: /togglestore رقم_المتجر")
        return

    try:
        async with get_session() as session:
            service = StoreService(session)
            store = await service.get_by_store_code(store_code)
            if not store:
                await message.answer(STORE_NOT_FOUND_TEXT)
                return
            store = await service.toggle_active(store)
    except (SQLAlchemyError, StorefrontError):
        logger.exception("Ошибка смены активности магазина %s", store_code)
        await message.answer(SAVE_ERROR_TEXT)
        return

    action = "تفعيل" if store.is_active else "إلغاء تفعيل"
    await message.answer(f"تم {action} المتجر {store.store_name}")


@router.message(Command("deletestore"))
async def cmd_delete_store(message: types.Message, state: FSMContext):
    if not await has_admin_access(message.chat.id, state):
        await message.answer(NO_RIGHTS_TEXT)
        return

    store_code = get_command_args(message)
    if not store_code:
        await message.answer("الاستخدام: /deletestore رقم_المتجر")
        return

    try:
        async with get_session() as session:
            store = await StoreService(session).get_by_store_code(store_code)
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки магазина %s", store_code)
        await message.answer(LOAD_ERROR_TEXT)
        return

    if not store:
        await message.answer(STORE_NOT_FOUND_TEXT)
        return

    await state.update_data(delete_store_code=store_code)
    await state.set_state(DeleteStoreStates.waiting_confirmation)
    await message.answer(
        f"هل أنت متأكد من حذف المتجر {store.store_name}؟ سيتم حذف جميع البيانات المرتبطة به.",
        reply_markup=get_choice_keyboard([CONFIRM_BUTTON, CANCEL_BUTTON]),
    )


@router.message(DeleteStoreStates.waiting_confirmation)
async def process_delete_confirmation(message: types.Message, state: FSMContext):
    data = await state.get_data()
    store_code = data.get("delete_store_code")
    await state.set_state(None)
    await state.update_data(delete_store_code=None)

    if (message.text or "").strip() != CONFIRM_BUTTON:
        await message.answer("تم إلغاء الحذف", reply_markup=get_main_keyboard("admin"))
        return

    try:
        async with get_session() as session:
            service = StoreService(session)
            store = await service.get_by_store_code(store_code)
            if not store:
                await message.answer(STORE_NOT_FOUND_TEXT)
                return
            await service.delete_store(store)
    except (SQLAlchemyError, StorefrontError):
        logger.exception("Ошибка удаления магазина %s", store_code)
        await message.answer(SAVE_ERROR_TEXT, reply_markup=get_main_keyboard("admin"))
        return

    await message.answer(
        "تم حذف المتجر وجميع البيانات المرتبطة به",
        reply_markup=get_main_keyboard("admin"),
    )


@router.message(Command("images"))
async def cmd_images(message: types.Message, state: FSMContext):
    if not await has_admin_access(message.chat.id, state):
        await message.answer(NO_RIGHTS_TEXT)
        return

    try:
        async with get_session() as session:
            images = await ImageLibraryService(session).list_images()
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки библиотеки изображений")
        await message.answer(LOAD_ERROR_TEXT)
        return

    await answer_long(
        message,
        format_lines(
            (
                f"{'✅' if i.is_active else '⛔'} #{i.id} {i.name} · {i.category}"
                for i in images
            ),
            "مكتبة الصور فارغة",
        ),
    )


@router.message(Command("addimage"))
async def cmd_add_image(message: types.Message, state: FSMContext):
    if not await has_admin_access(message.chat.id, state):
        await message.answer(NO_RIGHTS_TEXT)
        return

    await message.answer("أدخل اسم الصورة:")
    await state.set_state(AddImageStates.waiting_name)


@router.message(AddImageStates.waiting_name)
async def process_image_name(message: types.Message, state: FSMContext):
    name = (message.text or "").strip()
    if not name:
        await message.answer("اسم الصورة مطلوب:")
        return
    await state.update_data(image_name=name)
    await message.answer("أدخل فئة الصورة (مثال: ألبان):")
    await state.set_state(AddImageStates.waiting_category)


@router.message(AddImageStates.waiting_category)
async def process_image_category(message: types.Message, state: FSMContext):
    category = (message.text or "").strip()
    if not category:
        await message.answer("فئة الصورة مطلوبة:")
        return
    await state.update_data(image_category=category)
    await message.answer("أدخل رابط الصورة:")
    await state.set_state(AddImageStates.waiting_url)


@router.message(AddImageStates.waiting_url)
async def process_image_url(message: types.Message, state: FSMContext):
    image_url = (message.text or "").strip()
    if not image_url:
        await message.answer("رابط الصورة مطلوب:")
        return

    data = await state.get_data()
    await state.set_state(None)

    try:
        async with get_session() as session:
            image = await ImageLibraryService(session).add_image(
                data.get("image_name", ""), data.get("image_category", ""), image_url
            )
    except (SQLAlchemyError, StorefrontError):
        logger.exception("Ошибка добавления изображения")
        await message.answer(SAVE_ERROR_TEXT)
        return

    await message.answer(f'✅ تم إضافة صورة "{image.name}" إلى المكتبة')


@router.message(Command("toggleimage"))
async def cmd_toggle_image(message: types.Message, state: FSMContext):
    if not await has_admin_access(message.chat.id, state):
        await message.answer(NO_RIGHTS_TEXT)
        return

    args = get_command_args(message).lstrip("#")
    if not args.isdigit():
        await message.answer("الاستخدام: /toggleimage رقم_الصورة")
        return

    try:
        async with get_session() as session:
            image = await ImageLibraryService(session).toggle_image(int(args))
    except RecordNotFoundError:
        await message.answer("لم يتم العثور على الصورة")
        return
    except (SQLAlchemyError, StorefrontError):
        logger.exception("Ошибка обновления изображения %s", args)
        await message.answer(SAVE_ERROR_TEXT)
        return

    action = "تفعيل" if image.is_active else "إلغاء تفعيل"
    await message.answer(f"تم {action} الصورة {image.name}")
