"""
Product schemas
"""

from pydantic import BaseModel
from typing import Optional
from decimal import Decimal

class ProductSnapshot(BaseModel):
    """Display data for a product at read time"""
    id: str
    name: str
    image: Optional[str] = None
    price: Decimal

    class Config:
        from_attributes = True
