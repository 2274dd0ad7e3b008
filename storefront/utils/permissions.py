from typing import Optional
from aiogram.fsm.context import FSMContext

from storefront.core.config import ADMIN_CHAT_IDS


def is_admin_chat(chat_id: int) -> bool:
    """Чат указан в ADMIN_CHAT_IDS (.env)"""
    return chat_id in ADMIN_CHAT_IDS


async def has_admin_access(chat_id: int, state: FSMContext) -> bool:
    """
    Проверяет доступ к панели администратора:
    - либо chat_id присутствует в ADMIN_CHAT_IDS
    - либо в этом чате уже введён действующий admin_id (флаг is_admin в FSM)
    """
    if is_admin_chat(chat_id):
        return True
    data = await state.get_data()
    return bool(data.get("is_admin"))


async def get_role(chat_id: int, state: FSMContext) -> Optional[str]:
    """
    Роль для меню. Доступы администратора и продавца хранятся
    под разными ключами и не вытесняют друг друга.
    """
    if await has_admin_access(chat_id, state):
        return "admin"
    data = await state.get_data()
    if data.get("merchant_id"):
        return "merchant"
    return None
