from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from storefront.models.image_library import ImageLibraryItem
from storefront.repositories.image_library_repository import ImageLibraryRepository
from storefront.utils.validators import require_text
import logging

logger = logging.getLogger(__name__)


class ImageLibraryService:
    def __init__(self, session: AsyncSession):
        self.repo = ImageLibraryRepository(session)

    async def add_image(self, name: str, category: str, image_url: str) -> ImageLibraryItem:
        """Добавить изображение в общую библиотеку"""
        image = await self.repo.create(
            name=require_text(name, "name"),
            category=require_text(category, "category"),
            image_url=require_text(image_url, "image_url"),
            is_active=True,
        )
        logger.info("Изображение %s добавлено в библиотеку (%s)", image.name, image.category)
        return image

    async def toggle_image(self, image_id: int) -> ImageLibraryItem:
        """Включить или выключить изображение"""
        return await self.repo.toggle(image_id, "is_active")

    async def list_images(self) -> List[ImageLibraryItem]:
        return await self.repo.list(order_by="category")

    async def list_active_images(self) -> List[ImageLibraryItem]:
        """Изображения, из которых продавцы выбирают картинку товара"""
        return await self.repo.list(where={"is_active": True}, order_by="category")
