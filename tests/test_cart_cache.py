"""Cart cache tests"""
from app.core.cache import RedisCache
from app.core.exceptions import CacheDegraded
from app.schemas.cart import Cart, CartIdentity
from app.services import CartCache
from tests.factories import P1, SESSION_ID, USER_ID, line

USER = CartIdentity.user(USER_ID)
GUEST = CartIdentity.session(SESSION_ID)

class BrokenBackend(RedisCache):
    async def get(self, key):
        raise CacheDegraded("timeout")

    async def set(self, key, value, expire=None):
        raise CacheDegraded("timeout")

    async def delete(self, *keys):
        raise CacheDegraded("timeout")

class TestKeys:
    def test_key_scheme(self):
        assert USER.cache_key == f"cart:user:{USER_ID}"
        assert GUEST.cache_key == f"cart:session:{SESSION_ID}"

    async def test_user_entries_never_expire(self, cart_cache, cache_backend):
        await cart_cache.set(USER, Cart(user_id=USER_ID))

        assert await cache_backend.ttl(USER.cache_key) == -1

    async def test_session_entries_expire(self, cart_cache, cache_backend):
        await cart_cache.set(GUEST, Cart(session_id=SESSION_ID))

        ttl = await cache_backend.ttl(GUEST.cache_key)
        assert 0 < ttl <= 3600

class TestReadWrite:
    """
    Validates:
    - Entries read back as the cart that was written
    - Unreadable entries are discarded
    - Invalidation removes every named key
    """

    async def test_round_trip(self, cart_cache):
        cart = Cart(id="c1", session_id=SESSION_ID, items=[line(P1, 2, "M", "red")])

        await cart_cache.set(GUEST, cart)
        cached = await cart_cache.get(GUEST)

        assert cached == cart

    async def test_miss_is_none(self, cart_cache):
        assert await cart_cache.get(USER) is None

    async def test_unreadable_entry_is_dropped(self, cart_cache, cache_backend):
        await cache_backend.set(GUEST.cache_key, {"items": "not-a-list"})

        assert await cart_cache.get(GUEST) is None
        assert await cache_backend.exists(GUEST.cache_key) is False

    async def test_invalidate_removes_all_keys(self, cart_cache, cache_backend):
        await cart_cache.set(USER, Cart(user_id=USER_ID))
        await cart_cache.set(GUEST, Cart(session_id=SESSION_ID))

        await cart_cache.invalidate(USER, GUEST)

        assert await cache_backend.exists(USER.cache_key) is False
        assert await cache_backend.exists(GUEST.cache_key) is False

class TestDegraded:
    """Cache failures read as misses and never raise"""

    async def test_failing_backend_is_a_miss(self):
        cart_cache = CartCache(BrokenBackend(), session_ttl=60, enabled=True)

        await cart_cache.set(GUEST, Cart(session_id=SESSION_ID))
        assert await cart_cache.get(GUEST) is None
        await cart_cache.invalidate(GUEST)

    async def test_disabled_cache_neither_reads_nor_writes(self, cache_backend):
        cart_cache = CartCache(cache_backend, session_ttl=60, enabled=False)
        await cache_backend.set(GUEST.cache_key, Cart(session_id=SESSION_ID).model_dump(mode="json"))

        assert await cart_cache.get(GUEST) is None
        await cart_cache.set(USER, Cart(user_id=USER_ID))
        assert await cache_backend.exists(USER.cache_key) is False

class TestWorkerProcesses:
    """
    Validates:
    - The per-process memory fallback is only used by a single worker
    - A shared redis is used whatever the worker count
    """

    async def test_memory_fallback_is_skipped_with_several_workers(self, cache_backend):
        cart_cache = CartCache(cache_backend, session_ttl=60, enabled=True, workers=4)

        await cart_cache.set(USER, Cart(user_id=USER_ID))

        assert cart_cache.active is False
        assert await cache_backend.exists(USER.cache_key) is False
        assert await cart_cache.get(USER) is None

    async def test_memory_fallback_is_used_by_a_single_worker(self, cache_backend):
        cart_cache = CartCache(cache_backend, session_ttl=60, enabled=True, workers=1)

        await cart_cache.set(USER, Cart(user_id=USER_ID))

        assert cart_cache.active is True
        assert await cart_cache.get(USER) == Cart(user_id=USER_ID)

    def test_redis_is_used_with_several_workers(self):
        backend = RedisCache()
        backend._use_redis = True

        assert CartCache(backend, enabled=True, workers=4).active is True

    def test_disabled_cache_stays_off_on_redis(self):
        backend = RedisCache()
        backend._use_redis = True

        assert CartCache(backend, enabled=False, workers=1).active is False
