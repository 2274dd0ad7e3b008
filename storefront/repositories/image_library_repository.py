from storefront.models.image_library import ImageLibraryItem
from storefront.repositories.base import BaseRepository


class ImageLibraryRepository(BaseRepository):
    model = ImageLibraryItem
