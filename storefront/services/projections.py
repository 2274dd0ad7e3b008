"""
Производные представления каталога.

Все функции чистые: принимают текущие коллекции записей и каждый раз
пересчитывают результат целиком. Ничего не сохраняется и не кэшируется.
"""

import math
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

UNSPECIFIED_CATEGORY = "غير محدد"


@dataclass(frozen=True)
class CategoryView:
    id: int
    store_id: str
    name: str
    sort_order: int
    is_visible: bool
    products_count: int = 0


@dataclass(frozen=True)
class ProductView:
    id: int
    category_id: int
    store_id: str
    name: str
    price: float
    image_url: Optional[str]
    sort_order: int
    is_visible: bool
    category_name: str = UNSPECIFIED_CATEGORY


@dataclass(frozen=True)
class AdminStats:
    total_stores: int
    active_stores: int
    total_categories: int
    total_products: int
    total_images: int
    active_images: int
    activity_rate: int


def categories_with_counts(categories: Iterable, products: Iterable) -> List[CategoryView]:
    """Категории с числом товаров, у которых category_id совпадает с id категории"""
    counts = Counter(product.category_id for product in products)
    return [
        CategoryView(
            id=category.id,
            store_id=category.store_id,
            name=category.name,
            sort_order=category.sort_order,
            is_visible=category.is_visible,
            products_count=counts.get(category.id, 0),
        )
        for category in categories
    ]


def products_with_category_names(products: Iterable, categories: Iterable) -> List[ProductView]:
    """
    Товары с названием своей категории.

    Висячая ссылка на категорию не ошибка: подставляется UNSPECIFIED_CATEGORY.
    """
    names = {category.id: category.name for category in categories}
    return [
        ProductView(
            id=product.id,
            category_id=product.category_id,
            store_id=product.store_id,
            name=product.name,
            price=product.price,
            image_url=product.image_url,
            sort_order=product.sort_order,
            is_visible=product.is_visible,
            category_name=names.get(product.category_id, UNSPECIFIED_CATEGORY),
        )
        for product in products
    ]


def activity_rate(active: int, total: int) -> int:
    """Процент активных магазинов, половина округляется вверх"""
    if total == 0:
        return 0
    return math.floor(active / total * 100 + 0.5)


def admin_stats(
    stores: Sequence, categories: Sequence, products: Sequence, images: Sequence
) -> AdminStats:
    active_stores = sum(1 for store in stores if store.is_active)
    return AdminStats(
        total_stores=len(stores),
        active_stores=active_stores,
        total_categories=len(categories),
        total_products=len(products),
        total_images=len(images),
        active_images=sum(1 for image in images if image.is_active),
        activity_rate=activity_rate(active_stores, len(stores)),
    )


def filter_stores(stores: Sequence, query: Optional[str]) -> list:
    """Поиск магазинов по названию, городу или коду без учёта регистра"""
    if not query or not query.strip():
        return list(stores)
    needle = query.strip().lower()
    return [
        store
        for store in stores
        if needle in store.store_name.lower()
        or needle in store.city.lower()
        or needle in store.store_id.lower()
    ]


def search_products(products: Iterable, query: Optional[str]) -> list:
    """Подстрока в названии товара без учёта регистра"""
    if not query:
        return list(products)
    needle = query.lower()
    return [product for product in products if needle in product.name.lower()]
