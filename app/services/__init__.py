"""Services package"""

from .cart_cache import CartCache
from .cart_service import CartService
from .cart_store import CartStore
from .identity import IdentityResolver, ResolvedIdentity
from .product_catalog import ProductCatalog, ProductEnricher

__all__ = [
    "CartCache",
    "CartService",
    "CartStore",
    "IdentityResolver",
    "ResolvedIdentity",
    "ProductCatalog",
    "ProductEnricher",
]
