"""
Startup and shutdown of the cart service
"""

from fastapi import FastAPI
import logging
from contextlib import asynccontextmanager

from .database import init_db, close_db
from .cache import cache
from .logging import setup_logging
from .config import settings

logger = logging.getLogger(__name__)

async def _connect_cache() -> None:
    await cache.connect()
    if cache.backend == "redis":
        logger.info("Cart cache on redis")
    elif not settings.CART_CACHE_ENABLED:
        logger.info("Cart cache disabled by configuration")
    elif settings.WORKERS > 1:
        logger.warning(
            f"Redis unavailable and {settings.WORKERS} workers configured; "
            "carts are served from the database only"
        )
    else:
        logger.warning("Redis unavailable; caching carts in process memory")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Tables are created outside tests; the cache degrades rather than failing startup"""
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} {settings.APP_VERSION} ({settings.ENVIRONMENT})")

    try:
        if settings.ENVIRONMENT != "test":
            await init_db()
        await _connect_cache()

        yield

    finally:
        await close_db()
        await cache.disconnect()
        logger.info(f"{settings.APP_NAME} stopped")
