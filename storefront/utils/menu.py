from collections import Counter
from operator import attrgetter
from typing import Any, Callable, Dict, Iterable, Optional, Sequence
from aiogram import types
from aiogram.utils.keyboard import ReplyKeyboardBuilder

from storefront.models.store import Currency

ALL_PRODUCTS_BUTTON = "كل المنتجات"
NO_IMAGE_BUTTON = "بدون صورة"
CONFIRM_BUTTON = "نعم"
CANCEL_BUTTON = "إلغاء"

ADMIN_MENU_TEXT = """
🛡 <b>لوحة تحكم الإدارة</b>

الأوامر المتاحة:
/stats - إحصائيات المنصة
/stores - قائمة المتاجر (/stores نص للبحث)
/togglestore - تفعيل أو إيقاف متجر (/togglestore رقم_المتجر)
/deletestore - حذف متجر مع جميع بياناته (/deletestore رقم_المتجر)
/images - مكتبة الصور
/addimage - إضافة صورة إلى المكتبة
/toggleimage - تفعيل أو إيقاف صورة (/toggleimage رقم_الصورة)
/help - عرض هذه الرسالة
"""

MERCHANT_MENU_TEXT = """
🏪 <b>لوحة تحكم التاجر</b>

الأوامر المتاحة:
/categories - الفئات وعدد المنتجات
/products - المنتجات
/addcategory - إضافة فئة
/addproduct - إضافة منتج
/togglecategory - إظهار أو إخفاء فئة
/toggleproduct - إظهار أو إخفاء منتج
/help - عرض هذه الرسالة

احتفظ برقم التاجر، فهو مفتاح الدخول إلى لوحة التحكم.
"""

GUEST_MENU_TEXT = """
👋 <b>مرحباً بك في المتجر الإلكتروني</b>

الأوامر المتاحة:
/store - زيارة متجر برقم المتجر
/register - إنشاء متجر جديد
/dashboard - دخول لوحة التحكم برقم التاجر
/admin - دخول لوحة الإدارة
/help - عرض هذه الرسالة
"""


def get_main_keyboard(role: str = None):
    """Создает клавиатуру в зависимости от роли пользователя"""
    builder = ReplyKeyboardBuilder()

    if role == "admin":
        builder.row(
            types.KeyboardButton(text="/stats"), types.KeyboardButton(text="/stores")
        )
        builder.row(
            types.KeyboardButton(text="/images"),
            types.KeyboardButton(text="/addimage"),
        )
        builder.row(types.KeyboardButton(text="/help"))
    elif role == "merchant":
        builder.row(
            types.KeyboardButton(text="/categories"),
            types.KeyboardButton(text="/products"),
        )
        builder.row(
            types.KeyboardButton(text="/addcategory"),
            types.KeyboardButton(text="/addproduct"),
        )
        builder.row(
            types.KeyboardButton(text="/togglecategory"),
            types.KeyboardButton(text="/toggleproduct"),
        )
        builder.row(types.KeyboardButton(text="/help"))
    else:
        builder.row(
            types.KeyboardButton(text="/store"), types.KeyboardButton(text="/register")
        )
        builder.row(
            types.KeyboardButton(text="/dashboard"), types.KeyboardButton(text="/help")
        )

    return builder.as_markup(resize_keyboard=True)


def get_menu_text(role: str = None):
    """Возвращает текст меню в зависимости от роли пользователя"""
    if role == "admin":
        return ADMIN_MENU_TEXT
    elif role == "merchant":
        return MERCHANT_MENU_TEXT
    else:
        return GUEST_MENU_TEXT


def get_choice_keyboard(labels: Iterable[str], extra: Optional[str] = None, columns: int = 2):
    """Клавиатура выбора из списка вариантов"""
    kb = ReplyKeyboardBuilder()
    for label in labels:
        kb.button(text=label)
    if extra:
        kb.button(text=extra)
    kb.adjust(columns)
    return kb.as_markup(resize_keyboard=True)


def get_unique_choices(
    items: Sequence,
    label: Callable = attrgetter("name"),
    value: Callable = attrgetter("id"),
    detail: Optional[Callable] = None,
) -> Dict[str, Any]:
    """
    Подписи кнопок выбора -> значение.

    Совпадающие названия дополняются деталью и id записи,
    чтобы каждая запись оставалась доступной: "1L · حليب #2".
    """
    counts = Counter(label(item) for item in items)
    choices = {}
    for item in items:
        text = label(item)
        if counts[text] > 1:
            text = f"{text} · {detail(item)} #{item.id}" if detail else f"{text} #{item.id}"
        choices[text] = value(item)
    return choices


def get_currency_keyboard():
    return get_choice_keyboard([currency.value for currency in Currency], columns=3)


def get_command_args(message: types.Message) -> str:
    """Текст после команды: '/store S123' -> 'S123'"""
    parts = (message.text or "").split(maxsplit=1)
    return parts[1].strip() if len(parts) > 1 else ""
