"""Models package initialization"""

from .base import Base, table_names
from .cart import Cart
from .product import Product

__all__ = [
    "Base",
    "Cart",
    "Product",
    "table_names",
]
