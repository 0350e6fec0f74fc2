"""
Product lookups for cart display
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Dict, Optional
import logging

from app.core.cache import RedisCache, cache as default_cache
from app.core.config import settings
from app.core.exceptions import CacheDegraded
from app.models import Product
from app.schemas.cart import Cart, CartResponse
from app.schemas.product import ProductSnapshot

logger = logging.getLogger(__name__)

class ProductCatalog:
    """Read-through product lookup cached under product:<id>"""

    def __init__(
        self,
        db: AsyncSession,
        backend: Optional[RedisCache] = None,
        ttl: Optional[int] = None,
    ):
        self.db = db
        self.backend = backend if backend is not None else default_cache
        self.ttl = ttl if ttl is not None else settings.CACHE_PRODUCT_TTL

    async def get_product(self, product_id: str) -> Optional[ProductSnapshot]:
        key = f"product:{product_id}"
        try:
            cached = await self.backend.get(key)
        except CacheDegraded as e:
            logger.warning(f"Product cache read failed for {key}: {e}")
            cached = None
        if cached is not None:
            return ProductSnapshot.model_validate(cached)

        result = await self.db.execute(
            select(Product).where(Product.id == product_id, Product.status == Product.ACTIVE)
        )
        product = result.scalar_one_or_none()
        if product is None:
            return None

        snapshot = ProductSnapshot.model_validate(product)
        try:
            await self.backend.set(key, snapshot.model_dump(mode="json"), expire=self.ttl)
        except CacheDegraded as e:
            logger.warning(f"Product cache write failed for {key}: {e}")
        return snapshot

class ProductEnricher:
    """
    Attaches current product data to cart lines.

    Best effort: a line whose product cannot be looked up is returned without
    a product rather than failing the whole cart.
    """

    def __init__(self, catalog):
        self.catalog = catalog

    async def enrich(self, cart: Cart) -> CartResponse:
        products: Dict[str, Optional[ProductSnapshot]] = {}

        for item in cart.items:
            if item.product_id in products:
                continue
            try:
                products[item.product_id] = await self.catalog.get_product(item.product_id)
            except Exception as e:
                logger.warning(f"Product lookup failed for {item.product_id}: {e}")
                products[item.product_id] = None
            if products[item.product_id] is None:
                logger.info(f"Cart line for product {item.product_id} left unenriched")

        return CartResponse.from_cart(cart, products)
