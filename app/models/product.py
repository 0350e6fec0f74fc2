"""Product model, read by the cart for display data"""

from sqlalchemy import Column, String, Numeric, Integer

from .base import Base, TimestampedModel, UUIDModel, StatusModel

class Product(Base, TimestampedModel, UUIDModel, StatusModel):
    """Catalog product"""

    __tablename__ = "products"

    name = Column(String(255), nullable=False, index=True)
    category = Column(String(100), nullable=True, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    image = Column(String(500), nullable=True)
    stock = Column(Integer, default=0, nullable=False)
