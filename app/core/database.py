"""
Cart store database
Async SQLAlchemy engine and the per-request session the cart store works in
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from typing import AsyncGenerator
import logging

from .config import settings

logger = logging.getLogger(__name__)

def _engine_options() -> dict:
    if settings.is_sqlite:
        # One file, no server: a pool only holds locks open
        return {"poolclass": NullPool}
    return {
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_timeout": settings.DATABASE_POOL_TIMEOUT,
        "pool_pre_ping": True,
    }

engine = create_async_engine(
    settings.database_url_async,
    echo=settings.DATABASE_ECHO,
    **_engine_options(),
)

# The cart store flushes explicitly and the cart service commits once per operation
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Session for one cart request.
    Anything the request flushed but did not commit is rolled back on failure.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise

async def init_db() -> None:
    """Create the carts and products tables if they are missing"""
    from app.models import Base, table_names

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Database tables ready: {', '.join(table_names())}")

async def close_db() -> None:
    await engine.dispose()
    logger.info("Database connections closed")
