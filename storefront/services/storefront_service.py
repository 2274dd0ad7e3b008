import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.store import Store
from storefront.repositories.category_repository import CategoryRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.store_repository import StoreRepository
from storefront.services.projections import (
    CategoryView,
    ProductView,
    categories_with_counts,
    products_with_category_names,
    search_products,
)

logger = logging.getLogger(__name__)


class StorefrontStatus(str, enum.Enum):
    LOADING = "loading"
    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    READY = "ready"


@dataclass
class StorefrontView:
    """Что видит покупатель на странице магазина"""

    status: StorefrontStatus = StorefrontStatus.LOADING
    store: Optional[Store] = None
    categories: List[CategoryView] = field(default_factory=list)
    products: List[ProductView] = field(default_factory=list)

    @property
    def is_blocked(self) -> bool:
        return self.status in (StorefrontStatus.NOT_FOUND, StorefrontStatus.INACTIVE)

    def find_category(self, category_id: Optional[int]) -> Optional[CategoryView]:
        return next((c for c in self.categories if c.id == category_id), None)

    def narrow(
        self, category_id: Optional[int] = None, query: Optional[str] = None
    ) -> List[ProductView]:
        """
        Сужает видимые товары: выбранная категория И подстрока в названии.

        Выбрать можно только видимую категорию; неизвестный id даёт пустой список.
        """
        products = self.products
        if category_id is not None:
            if not self.find_category(category_id):
                return []
            products = [p for p in products if p.category_id == category_id]
        return search_products(products, query)


class StorefrontService:
    def __init__(self, session: AsyncSession):
        self.store_repo = StoreRepository(session)
        self.category_repo = CategoryRepository(session)
        self.product_repo = ProductRepository(session)

    async def load_storefront(self, store_code: str) -> StorefrontView:
        store = await self.store_repo.get_by_store_code(store_code)
        if not store:
            logger.info("Витрина %s: магазин не найден", store_code)
            return StorefrontView(status=StorefrontStatus.NOT_FOUND)
        if not store.is_active:
            logger.info("Витрина %s: магазин не активен", store_code)
            return StorefrontView(status=StorefrontStatus.INACTIVE, store=store)

        categories = await self.category_repo.list_for_store(
            store.store_id, visible_only=True
        )
        # видимость товара не зависит от видимости его категории
        products = await self.product_repo.list_for_store(
            store.store_id, visible_only=True
        )

        return StorefrontView(
            status=StorefrontStatus.READY,
            store=store,
            categories=categories_with_counts(categories, products),
            products=products_with_category_names(products, categories),
        )
