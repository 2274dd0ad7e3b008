"""
Модели данных витрины: магазины, категории, товары, библиотека изображений
и панели администраторов.
"""

from .store import Store, Currency
from .category import Category
from .product import Product
from .image_library import ImageLibraryItem
from .admin_panel import AdminPanel

__all__ = [
    "Store",
    "Currency",
    "Category",
    "Product",
    "ImageLibraryItem",
    "AdminPanel",
]
