from typing import List
from sqlalchemy import delete
from storefront.models.category import Category
from storefront.repositories.base import BaseRepository


class CategoryRepository(BaseRepository):
    model = Category

    async def list_for_store(self, store_code: str, visible_only: bool = False) -> List[Category]:
        where = {"store_id": store_code}
        if visible_only:
            where["is_visible"] = True
        return await self.list(where=where, order_by="sort_order")

    async def delete_by_store(self, store_code: str) -> int:
        """Удалить все категории магазина, без коммита"""
        result = await self.session.execute(
            delete(Category).where(Category.store_id == store_code)
        )
        return result.rowcount
