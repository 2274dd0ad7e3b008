import logging
from dataclasses import dataclass, field
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import AdminNotFoundError
from storefront.models.admin_panel import AdminPanel
from storefront.models.category import Category
from storefront.models.image_library import ImageLibraryItem
from storefront.models.product import Product
from storefront.models.store import Store
from storefront.repositories.admin_repository import AdminPanelRepository
from storefront.repositories.category_repository import CategoryRepository
from storefront.repositories.image_library_repository import ImageLibraryRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.store_repository import StoreRepository
from storefront.services.projections import AdminStats, admin_stats, filter_stores

logger = logging.getLogger(__name__)


@dataclass
class AdminOverview:
    stores: List[Store] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    products: List[Product] = field(default_factory=list)
    images: List[ImageLibraryItem] = field(default_factory=list)

    @property
    def stats(self) -> AdminStats:
        return admin_stats(self.stores, self.categories, self.products, self.images)

    def search(self, query: Optional[str]) -> List[Store]:
        return filter_stores(self.stores, query)

    def store_catalog_size(self, store: Store) -> tuple:
        """Число категорий и товаров магазина"""
        categories = sum(1 for c in self.categories if c.store_id == store.store_id)
        products = sum(1 for p in self.products if p.store_id == store.store_id)
        return categories, products


class AdminService:
    def __init__(self, session: AsyncSession):
        self.repo = AdminPanelRepository(session)
        self.store_repo = StoreRepository(session)
        self.category_repo = CategoryRepository(session)
        self.product_repo = ProductRepository(session)
        self.image_repo = ImageLibraryRepository(session)

    async def get_admin(self, admin_id: str) -> AdminPanel:
        """
        Получает панель администратора по admin_id.

        Raises:
            AdminNotFoundError: Если такого admin_id нет
        """
        admin = await self.repo.get_by_admin_id(admin_id)
        if not admin:
            raise AdminNotFoundError(admin_id)
        return admin

    async def load_overview(self) -> AdminOverview:
        """Все магазины, категории, товары и изображения системы"""
        return AdminOverview(
            stores=list(
                await self.store_repo.list(order_by="created_at", descending=True)
            ),
            categories=list(
                await self.category_repo.list(order_by="created_at", descending=True)
            ),
            products=list(
                await self.product_repo.list(order_by="created_at", descending=True)
            ),
            images=list(await self.image_repo.list(order_by="category")),
        )
