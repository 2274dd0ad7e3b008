import math
import re
import logging
from typing import Union

from storefront.core.exceptions import CatalogValidationError
from storefront.models.store import Currency

logger = logging.getLogger(__name__)


def validate_price(price: Union[str, int, float, None]) -> float:
    """
    Валидирует цену товара и преобразует её в число.

    Args:
        price: Цена строкой (допускается запятая как разделитель) или числом

    Returns:
        float: Цена в виде числа с плавающей точкой

    Raises:
        CatalogValidationError: Если цена пустая, не число, бесконечна или отрицательная
    """
    if isinstance(price, bool):
        raise CatalogValidationError("Цена должна быть числом")

    if isinstance(price, (int, float)):
        if not math.isfinite(price):
            raise CatalogValidationError("Цена должна быть конечным числом")
        if price < 0:
            raise CatalogValidationError("Цена не может быть отрицательной")
        return float(price)

    if not price or not price.strip():
        raise CatalogValidationError("Цена не может быть пустой")

    # Заменяем запятую на точку для корректного парсинга
    price_str = price.strip().replace(",", ".")

    if price_str.startswith("-"):
        raise CatalogValidationError("Цена не может быть отрицательной")

    if not re.match(r"^[0-9]+(\.[0-9]+)?$", price_str):
        raise CatalogValidationError(
            f"Неверный формат цены: {price}. Используйте только цифры и точку/запятую."
        )

    value = float(price_str)
    if not math.isfinite(value):
        raise CatalogValidationError("Цена должна быть конечным числом")
    return value


def require_text(value: str, field: str) -> str:
    """
    Проверяет обязательное текстовое поле и возвращает его без пробелов по краям.

    Raises:
        CatalogValidationError: Если значение пустое
    """
    cleaned = (value or "").strip()
    if not cleaned:
        raise CatalogValidationError(f"Поле {field} обязательно")
    return cleaned


def validate_currency(currency: str) -> str:
    """Проверяет, что валюта входит в список поддерживаемых"""
    code = (currency or "").strip().upper()
    try:
        return Currency(code).value
    except ValueError:
        logger.warning(f"Неподдерживаемая валюта: {currency}")
        raise CatalogValidationError(f"Неподдерживаемая валюта: {currency}")
