import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import CatalogValidationError, StoreNotFoundError
from storefront.models.category import Category
from storefront.models.image_library import ImageLibraryItem
from storefront.models.product import Product
from storefront.models.store import Store
from storefront.repositories.category_repository import CategoryRepository
from storefront.repositories.image_library_repository import ImageLibraryRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.store_repository import StoreRepository
from storefront.services.projections import (
    CategoryView,
    ProductView,
    categories_with_counts,
    products_with_category_names,
)
from storefront.utils.validators import require_text, validate_price

logger = logging.getLogger(__name__)


@dataclass
class CatalogSnapshot:
    """
    Каталог магазина в том виде, в каком его последний раз загрузили.

    Хранит только записи; счётчики и названия категорий пересчитываются
    при каждом обращении к category_views / product_views.
    """

    store: Store
    categories: List[Category] = field(default_factory=list)
    products: List[Product] = field(default_factory=list)
    images: List[ImageLibraryItem] = field(default_factory=list)

    @property
    def category_views(self) -> List[CategoryView]:
        return categories_with_counts(self.categories, self.products)

    @property
    def product_views(self) -> List[ProductView]:
        return products_with_category_names(self.products, self.categories)

    def find_category(self, category_id: int) -> Optional[Category]:
        return next((c for c in self.categories if c.id == category_id), None)

    def find_product(self, product_id: int) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)


class CatalogService:
    """Правила каталога магазина: создание, видимость, привязка к магазину."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.store_repo = StoreRepository(session)
        self.category_repo = CategoryRepository(session)
        self.product_repo = ProductRepository(session)
        self.image_repo = ImageLibraryRepository(session)

    async def load_dashboard(self, merchant_id: str) -> CatalogSnapshot:
        """
        Загружает каталог магазина для панели продавца.

        Raises:
            StoreNotFoundError: Если магазина с таким merchant_id нет
        """
        store = await self.store_repo.get_by_merchant_id(merchant_id)
        if not store:
            raise StoreNotFoundError(merchant_id)

        categories = await self.category_repo.list_for_store(store.store_id)
        products = await self.product_repo.list_for_store(store.store_id)
        images = await self.image_repo.list(
            where={"is_active": True}, order_by="category"
        )
        return CatalogSnapshot(
            store=store,
            categories=list(categories),
            products=list(products),
            images=list(images),
        )

    async def _ensure_store(self, snapshot: CatalogSnapshot) -> Store:
        store = await self.store_repo.get_by_store_code(snapshot.store.store_id)
        if not store:
            raise StoreNotFoundError(snapshot.store.store_id)
        return store

    async def create_category(self, snapshot: CatalogSnapshot, name: str) -> CategoryView:
        name = require_text(name, "name")
        store = await self._ensure_store(snapshot)

        # порядковый номер из текущего числа категорий, без блокировок
        sort_order = await self.category_repo.count(store_id=store.store_id)
        category = await self.category_repo.create(
            store_id=store.store_id,
            name=name,
            sort_order=sort_order,
            is_visible=True,
        )
        snapshot.categories.append(category)
        logger.info(
            "Категория %s добавлена в магазин %s (sort_order=%s)",
            name,
            store.store_id,
            sort_order,
        )
        return next(v for v in snapshot.category_views if v.id == category.id)

    async def create_product(
        self,
        snapshot: CatalogSnapshot,
        name: str,
        category_id: int,
        price: Union[str, float],
        image_url: Optional[str] = None,
    ) -> ProductView:
        """
        Создаёт товар в категории магазина.

        Args:
            snapshot: Загруженный каталог магазина
            name: Название товара
            category_id: id категории того же магазина
            price: Цена строкой или числом, неотрицательная
            image_url: Ссылка на изображение, пустая строка означает отсутствие

        Returns:
            ProductView: Товар с названием категории

        Raises:
            CatalogValidationError: Пустое название, неверная цена или чужая категория
            StoreNotFoundError: Магазин был удалён
        """
        name = require_text(name, "name")
        if category_id in (None, ""):
            raise CatalogValidationError("Категория не выбрана")
        price_value = validate_price(price)
        store = await self._ensure_store(snapshot)

        category = await self.category_repo.get_by_id(category_id)
        if not category or category.store_id != store.store_id:
            logger.warning(
                "Категория %s не принадлежит магазину %s", category_id, store.store_id
            )
            raise CatalogValidationError("Категория не принадлежит магазину")

        sort_order = await self.product_repo.count(store_id=store.store_id)
        product = await self.product_repo.create(
            store_id=store.store_id,
            category_id=category.id,
            name=name,
            price=price_value,
            image_url=(image_url or "").strip() or None,
            sort_order=sort_order,
            is_visible=True,
        )
        snapshot.products.append(product)
        logger.info(
            "Товар %s добавлен в категорию %s магазина %s",
            name,
            category.name,
            store.store_id,
        )
        return next(v for v in snapshot.product_views if v.id == product.id)

    async def toggle_category_visibility(
        self, snapshot: CatalogSnapshot, category_id: int
    ) -> Category:
        """Скрыть или показать категорию. Флаги её товаров не меняются."""
        if not snapshot.find_category(category_id):
            raise CatalogValidationError("Категория не принадлежит магазину")
        category = await self.category_repo.toggle(category_id, "is_visible")
        snapshot.categories = [
            category if c.id == category.id else c for c in snapshot.categories
        ]
        return category

    async def toggle_product_visibility(
        self, snapshot: CatalogSnapshot, product_id: int
    ) -> Product:
        if not snapshot.find_product(product_id):
            raise CatalogValidationError("Товар не принадлежит магазину")
        product = await self.product_repo.toggle(product_id, "is_visible")
        snapshot.products = [
            product if p.id == product.id else p for p in snapshot.products
        ]
        return product
