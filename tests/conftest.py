"""
Shared fixtures

Service-level tests run against an in-memory SQLite database and the cache
manager's in-memory backend. HTTP tests run the real application through
TestClient against a temporary SQLite file.
"""
import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("WORKERS", "1")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool, StaticPool

from app.core.cache import RedisCache
from app.models import Base
from app.services import CartCache, CartService, CartStore, ProductCatalog, ProductEnricher
from tests.factories import product_rows

async def _memory_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine

@pytest.fixture
async def engine_factory():
    """Build isolated in-memory databases; several may be used in one test"""
    engines = []

    async def build():
        engine = await _memory_engine()
        engines.append(engine)
        return engine

    yield build

    for engine in engines:
        await engine.dispose()

@pytest.fixture
async def engine(engine_factory):
    return await engine_factory()

@pytest.fixture
async def db(engine):
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        session.add_all(product_rows())
        await session.commit()
        yield session

@pytest.fixture
def cache_backend():
    # Never connected, so it serves from the in-memory fallback
    return RedisCache()

@pytest.fixture
def cart_cache(cache_backend):
    return CartCache(cache_backend, session_ttl=3600, enabled=True)

@pytest.fixture
def store(db):
    return CartStore(db)

@pytest.fixture
def service(store, cart_cache, db, cache_backend):
    return CartService(store, cart_cache, ProductEnricher(ProductCatalog(db, cache_backend)))

@pytest.fixture
def client(tmp_path):
    """TestClient over the real app, backed by a throwaway SQLite file"""
    from fastapi.testclient import TestClient

    from app.core.database import get_db
    from app.main import app
    from app.utils.dependencies import get_cache_backend

    db_path = tmp_path / "cart.db"

    sync_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(sync_engine)
    with Session(sync_engine) as session:
        session.add_all(product_rows())
        session.commit()
    sync_engine.dispose()

    async_engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    session_factory = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    backend = RedisCache()

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache_backend] = lambda: backend

    yield TestClient(app)

    app.dependency_overrides.clear()
