"""
Common dependencies for FastAPI
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import RedisCache, cache
from app.core.database import get_db
from app.services import CartCache, CartService, CartStore, ProductCatalog, ProductEnricher

def get_cache_backend() -> RedisCache:
    """Shared cache manager; overridden in tests"""
    return cache

async def get_cart_service(
    db: AsyncSession = Depends(get_db),
    backend: RedisCache = Depends(get_cache_backend),
) -> CartService:
    """Cart service bound to the request's database session"""
    return CartService(
        store=CartStore(db),
        cache=CartCache(backend),
        enricher=ProductEnricher(ProductCatalog(db, backend)),
    )
