from sqlalchemy import Column, Integer, String, DateTime, func
from storefront.core.database import Base


class AdminPanel(Base):
    __tablename__ = "admin_panel"

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
