from typing import List
from sqlalchemy import delete
from storefront.models.product import Product
from storefront.repositories.base import BaseRepository


class ProductRepository(BaseRepository):
    model = Product

    async def list_for_store(self, store_code: str, visible_only: bool = False) -> List[Product]:
        where = {"store_id": store_code}
        if visible_only:
            where["is_visible"] = True
        return await self.list(where=where, order_by="sort_order")

    async def delete_by_store(self, store_code: str) -> int:
        """Удалить все товары магазина, без коммита"""
        result = await self.session.execute(
            delete(Product).where(Product.store_id == store_code)
        )
        return result.rowcount
