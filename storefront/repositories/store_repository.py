from typing import Optional
from sqlalchemy.future import select
from storefront.models.store import Store
from storefront.repositories.base import BaseRepository


class StoreRepository(BaseRepository):
    model = Store

    async def get_by_merchant_id(self, merchant_id: str) -> Optional[Store]:
        result = await self.session.execute(
            select(Store).filter_by(merchant_id=merchant_id).limit(1)
        )
        return result.scalars().first()

    async def get_by_store_code(self, store_code: str) -> Optional[Store]:
        result = await self.session.execute(
            select(Store).filter_by(store_id=store_code).limit(1)
        )
        return result.scalars().first()

    async def codes_taken(self, merchant_id: str, store_code: str) -> bool:
        """Проверить, занят ли хотя бы один из кодов"""
        merchant = await self.get_by_merchant_id(merchant_id)
        if merchant:
            return True
        return await self.get_by_store_code(store_code) is not None
