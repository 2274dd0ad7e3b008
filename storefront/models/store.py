import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from storefront.core.database import Base


class Currency(str, enum.Enum):
    MAD = "MAD"
    XOF = "XOF"
    MRU = "MRU"


class Store(Base):
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    merchant_id = Column(String, unique=True, nullable=False, index=True)
    store_id = Column(String, unique=True, nullable=False, index=True)
    store_name = Column(String, nullable=False)
    city = Column(String, nullable=False)
    district = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    currency = Column(String, nullable=False, default=Currency.MAD.value)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
