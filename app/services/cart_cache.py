"""
Cart cache
Best-effort accelerator in front of the cart store. Nothing here can fail a
cart operation: every cache error is logged and treated as a miss.
"""

from pydantic import ValidationError
from typing import Optional
import logging

from app.core.cache import RedisCache, cache as default_cache
from app.core.config import settings
from app.core.exceptions import CacheDegraded
from app.schemas.cart import Cart, CartIdentity

logger = logging.getLogger(__name__)

class CartCache:
    """
    Keys are cart:user:<user_id> and cart:session:<session_id>. User carts
    never expire; session carts live for CART_SESSION_TTL seconds.

    The in-memory fallback is private to one process, so it is only used when
    the service runs a single worker. With several workers and no redis the
    cache is skipped entirely.
    """

    def __init__(
        self,
        backend: Optional[RedisCache] = None,
        session_ttl: Optional[int] = None,
        enabled: Optional[bool] = None,
        workers: Optional[int] = None,
    ):
        self.backend = backend if backend is not None else default_cache
        self.session_ttl = session_ttl if session_ttl is not None else settings.CART_SESSION_TTL
        self.enabled = settings.CART_CACHE_ENABLED if enabled is None else enabled
        self.workers = workers if workers is not None else settings.WORKERS

    @property
    def active(self) -> bool:
        if not self.enabled:
            return False
        return self.backend.backend == "redis" or self.workers <= 1

    def ttl_for(self, identity: CartIdentity) -> Optional[int]:
        return None if identity.is_user else self.session_ttl

    async def get(self, identity: CartIdentity) -> Optional[Cart]:
        if not self.active:
            return None
        key = identity.cache_key
        try:
            payload = await self.backend.get(key)
        except CacheDegraded as e:
            logger.warning(f"Cart cache read failed for {key}, using store: {e}")
            return None
        if payload is None:
            return None

        try:
            return Cart.model_validate(payload)
        except ValidationError:
            logger.warning(f"Discarding unreadable cart cache entry {key}")
            await self.invalidate(identity)
            return None

    async def set(self, identity: CartIdentity, cart: Cart) -> None:
        if not self.active:
            return
        key = identity.cache_key
        try:
            await self.backend.set(key, cart.model_dump(mode="json"), expire=self.ttl_for(identity))
        except CacheDegraded as e:
            logger.warning(f"Cart cache write failed for {key}: {e}")

    async def invalidate(self, *identities: CartIdentity) -> None:
        if not self.active or not identities:
            return
        keys = [identity.cache_key for identity in identities]
        try:
            await self.backend.delete(*keys)
        except CacheDegraded as e:
            logger.warning(f"Cart cache invalidation failed for {keys}: {e}")
