from aiogram import Router, types
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from storefront.utils.menu import get_menu_text, get_main_keyboard
from storefront.utils.permissions import get_role, is_admin_chat
import logging

router = Router()
logger = logging.getLogger(__name__)


@router.message(Command("start"))
async def cmd_start(message: types.Message, state: FSMContext):
    # /start сбрасывает все коды, введённые в этом чате
    await state.clear()

    role = None
    if is_admin_chat(message.chat.id):
        role = "admin"
        await state.update_data(is_admin=True)
        logger.info("Администратор вошёл по chat_id %s", message.chat.id)

    await message.answer(
        get_menu_text(role), parse_mode="HTML", reply_markup=get_main_keyboard(role)
    )


@router.message(Command("help"))
async def cmd_help(message: types.Message, state: FSMContext):
    role = await get_role(message.chat.id, state)

    await message.answer(
        get_menu_text(role), parse_mode="HTML", reply_markup=get_main_keyboard(role)
    )
