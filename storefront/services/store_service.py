from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from storefront.core.config import DEFAULT_CURRENCY
from storefront.core.exceptions import StoreNotFoundError, StorefrontError
from storefront.repositories.store_repository import StoreRepository
from storefront.repositories.category_repository import CategoryRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.models.store import Store
from storefront.utils.identifiers import generate_merchant_id, generate_store_id
from storefront.utils.validators import require_text, validate_currency
import logging

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 5


class StoreService:
    def __init__(self, session: AsyncSession):
        self.repo = StoreRepository(session)
        self.category_repo = CategoryRepository(session)
        self.product_repo = ProductRepository(session)

    async def register_store(
        self,
        store_name: str,
        city: str,
        district: str,
        phone: str,
        currency: str = DEFAULT_CURRENCY,
    ) -> Store:
        """
        Регистрирует новый магазин и выдаёт ему пару кодов.

        Args:
            store_name: Название магазина
            city: Город
            district: Район
            phone: Телефон
            currency: Валюта магазина (MAD, XOF, MRU)

        Returns:
            Store: Созданный магазин с merchant_id и store_id

        Raises:
            CatalogValidationError: Если обязательное поле пустое или валюта не поддерживается
        """
        fields = {
            "store_name": require_text(store_name, "store_name"),
            "city": require_text(city, "city"),
            "district": require_text(district, "district"),
            "phone": require_text(phone, "phone"),
            "currency": validate_currency(currency),
        }

        merchant_id, store_code = await self._issue_codes()
        store = await self.repo.create(
            merchant_id=merchant_id, store_id=store_code, **fields
        )
        logger.info(
            "Зарегистрирован магазин %s (%s / %s)",
            store.store_name,
            store.merchant_id,
            store.store_id,
        )
        return store

    async def _issue_codes(self):
        for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
            merchant_id, store_code = generate_merchant_id(), generate_store_id()
            if not await self.repo.codes_taken(merchant_id, store_code):
                return merchant_id, store_code
            logger.warning("Коллизия кодов магазина, попытка %s", attempt)
        raise StorefrontError("Не удалось выдать уникальные коды магазина")

    async def list_stores(self) -> List[Store]:
        return await self.repo.list(order_by="created_at", descending=True)

    async def get_by_merchant_id(self, merchant_id: str) -> Store:
        """Получить магазин по коду продавца"""
        store = await self.repo.get_by_merchant_id(merchant_id)
        if not store:
            raise StoreNotFoundError(merchant_id)
        return store

    async def get_by_store_code(self, store_code: str) -> Optional[Store]:
        """Получить магазин по публичному коду"""
        return await self.repo.get_by_store_code(store_code)

    async def get_by_id(self, row_id: int) -> Optional[Store]:
        return await self.repo.get_by_id(row_id)

    async def toggle_active(self, store: Store) -> Store:
        """Включить или выключить магазин. Категории и товары не меняются."""
        logger.info(
            "Смена активности магазина %s: %s -> %s",
            store.store_id,
            store.is_active,
            not store.is_active,
        )
        return await self.repo.toggle(store.id, "is_active")

    async def delete_store(self, store: Store) -> None:
        """
        Удаляет магазин вместе с каталогом:
        - удаляет все товары с store_id магазина
        - удаляет все категории с store_id магазина
        - удаляет сам магазин
        Отката нет: при сбое на последнем шаге каталог уже удалён.
        """

        store_code = store.store_id

        products_deleted = await self.product_repo.delete_by_store(store_code)
        categories_deleted = await self.category_repo.delete_by_store(store_code)
        # при сбое коммита каталог откатывается, магазин не трогается
        await self.product_repo._commit()

        await self.repo.delete(store.id)

        logger.info(
            "Магазин %s удалён: товаров %s, категорий %s",
            store_code,
            products_deleted,
            categories_deleted,
        )
