from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from storefront.core.database import Base


class ImageLibraryItem(Base):
    __tablename__ = "images_library"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    image_url = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
