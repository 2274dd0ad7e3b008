import logging
from aiogram import Router, types
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from sqlalchemy.exc import SQLAlchemyError

from storefront.core.database import get_session
from storefront.core.exceptions import CatalogValidationError, StorefrontError
from storefront.core.states import RegisterStates
from storefront.services.store_service import StoreService
from storefront.utils.menu import get_currency_keyboard, get_main_keyboard

router = Router()
logger = logging.getLogger(__name__)

REGISTER_ERROR_TEXT = "حدث خطأ أثناء إنشاء المتجر. يرجى المحاولة مرة أخرى."
REGISTER_FIELDS = ("store_name", "city", "district", "phone")


@router.message(Command("register"))
async def cmd_register(message: types.Message, state: FSMContext):
    """Регистрация нового магазина"""
    await _reset(state)
    await message.answer("أدخل اسم المتجر (مثال: بقالة الحي):")
    await state.set_state(RegisterStates.waiting_store_name)


async def _reset(state: FSMContext):
    """Сбрасывает анкету регистрации, не трогая коды продавца и администратора"""
    data = await state.get_data()
    await state.set_state(None)
    await state.set_data({k: v for k, v in data.items() if k not in REGISTER_FIELDS})


async def _ask_next(
    message: types.Message, state: FSMContext, field: str, next_state, prompt: str, **kwargs
):
    value = (message.text or "").strip()
    if not value:
        await message.answer("هذا الحقل مطلوب، يرجى إدخال قيمة:")
        return
    await state.update_data(**{field: value})
    await message.answer(prompt, **kwargs)
    await state.set_state(next_state)


@router.message(RegisterStates.waiting_store_name)
async def process_store_name(message: types.Message, state: FSMContext):
    await _ask_next(
        message, state, "store_name", RegisterStates.waiting_city, "المدينة (مثال: الرباط):"
    )


@router.message(RegisterStates.waiting_city)
async def process_city(message: types.Message, state: FSMContext):
    await _ask_next(
        message, state, "city", RegisterStates.waiting_district, "الحي (مثال: أكدال):"
    )


@router.message(RegisterStates.waiting_district)
async def process_district(message: types.Message, state: FSMContext):
    await _ask_next(
        message,
        state,
        "district",
        RegisterStates.waiting_phone,
        "رقم الهاتف (مثال: 0612345678):",
    )


@router.message(RegisterStates.waiting_phone)
async def process_phone(message: types.Message, state: FSMContext):
    await _ask_next(
        message,
        state,
        "phone",
        RegisterStates.waiting_currency,
        "اختر العملة:",
        reply_markup=get_currency_keyboard(),
    )


@router.message(RegisterStates.waiting_currency)
async def process_currency(message: types.Message, state: FSMContext):
    data = await state.get_data()

    try:
        async with get_session() as session:
            store = await StoreService(session).register_store(
                store_name=data.get("store_name", ""),
                city=data.get("city", ""),
                district=data.get("district", ""),
                phone=data.get("phone", ""),
                currency=message.text or "",
            )
    except CatalogValidationError as e:
        logger.info("Регистрация отклонена: %s", e)
        await message.answer(
            "العملة غير مدعومة، اختر MAD أو XOF أو MRU:",
            reply_markup=get_currency_keyboard(),
        )
        return
    except (SQLAlchemyError, StorefrontError):
        logger.exception("Ошибка регистрации магазина")
        await message.answer(REGISTER_ERROR_TEXT)
        await _reset(state)
        return

    await _reset(state)
    await state.update_data(merchant_id=store.merchant_id)

    await message.answer(
        "✅ تم إنشاء متجرك الإلكتروني بنجاح! احفظ الأرقام التالية:\n\n"
        f"رقم التاجر (للوحة التحكم): {store.merchant_id}\n"
        f"رقم المتجر (للعملاء): {store.store_id}",
        reply_markup=get_main_keyboard("merchant"),
    )
