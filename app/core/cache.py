"""
Redis cache configuration and utilities
Provides a JSON cache manager with an in-memory fallback
"""

import redis.asyncio as redis
from redis.exceptions import RedisError
from typing import Optional, Any, Union
import json
from datetime import timedelta, datetime
import logging

from .config import settings
from .exceptions import CacheDegraded

logger = logging.getLogger(__name__)

def _seconds(expire: Optional[Union[int, timedelta]]) -> Optional[int]:
    if isinstance(expire, timedelta):
        return int(expire.total_seconds())
    return expire

class RedisCache:
    """
    Redis cache manager with in-memory fallback

    Values are stored as JSON. Redis failures are raised as CacheDegraded so
    that callers decide whether a failure matters to them.
    """

    def __init__(self, url: Optional[str] = None):
        self.url = url or settings.REDIS_URL
        self.redis_client: Optional[redis.Redis] = None
        self._fallback_cache: dict = {}  # In-memory fallback for development and tests
        self._use_redis = False

    @property
    def backend(self) -> str:
        return "redis" if self._use_redis else "memory"

    async def connect(self):
        """Initialize Redis connection"""
        try:
            self.redis_client = redis.from_url(
                self.url,
                encoding="utf-8",
                decode_responses=True,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
                socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
            )
            await self.redis_client.ping()
            logger.info("Redis connection established")
            self._use_redis = True
        except (RedisError, OSError) as e:
            logger.warning(f"Failed to connect to Redis, using in-memory fallback: {e}")
            self._use_redis = False

    async def disconnect(self):
        """Close Redis connection"""
        if self.redis_client:
            await self.redis_client.aclose()
            logger.info("Redis connection closed")
        self._use_redis = False

    async def ping(self) -> bool:
        if not self._use_redis:
            return True
        try:
            return bool(await self.redis_client.ping())
        except RedisError as e:
            raise CacheDegraded(f"ping failed: {e}") from e

    def _fallback_item(self, key: str) -> Optional[dict]:
        cache_item = self._fallback_cache.get(key)
        if cache_item and cache_item.get("expires_at"):
            if datetime.now() > cache_item["expires_at"]:
                del self._fallback_cache[key]
                return None
        return cache_item

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        if not self._use_redis:
            cache_item = self._fallback_item(key)
            return cache_item["value"] if cache_item else None

        try:
            value = await self.redis_client.get(key)
        except RedisError as e:
            raise CacheDegraded(f"get {key} failed: {e}") from e
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise CacheDegraded(f"get {key} returned a corrupt payload") from e

    async def set(
        self,
        key: str,
        value: Any,
        expire: Optional[Union[int, timedelta]] = None
    ) -> bool:
        """Set value in cache with optional expiration"""
        expire = _seconds(expire)

        if not self._use_redis:
            # Round-trip through JSON so both backends hand back the same shapes
            cache_item = {"value": json.loads(json.dumps(value))}
            if expire:
                cache_item["expires_at"] = datetime.now() + timedelta(seconds=expire)
            self._fallback_cache[key] = cache_item
            return True

        try:
            payload = json.dumps(value)
            if expire:
                return bool(await self.redis_client.setex(key, expire, payload))
            return bool(await self.redis_client.set(key, payload))
        except RedisError as e:
            raise CacheDegraded(f"set {key} failed: {e}") from e

    async def delete(self, *keys: str) -> int:
        """Delete keys from cache"""
        if not self._use_redis:
            removed = 0
            for key in keys:
                if self._fallback_cache.pop(key, None) is not None:
                    removed += 1
            return removed

        try:
            return await self.redis_client.delete(*keys)
        except RedisError as e:
            raise CacheDegraded(f"delete {keys} failed: {e}") from e

    async def exists(self, key: str) -> bool:
        """Check if key exists in cache"""
        if not self._use_redis:
            return self._fallback_item(key) is not None

        try:
            return bool(await self.redis_client.exists(key))
        except RedisError as e:
            raise CacheDegraded(f"exists {key} failed: {e}") from e

    async def ttl(self, key: str) -> int:
        """
        Remaining time to live in seconds, following redis conventions:
        -1 when the key has no expiry, -2 when it does not exist
        """
        if not self._use_redis:
            cache_item = self._fallback_item(key)
            if cache_item is None:
                return -2
            if not cache_item.get("expires_at"):
                return -1
            return max(0, int((cache_item["expires_at"] - datetime.now()).total_seconds()))

        try:
            return await self.redis_client.ttl(key)
        except RedisError as e:
            raise CacheDegraded(f"ttl {key} failed: {e}") from e

    def clear_fallback(self):
        self._fallback_cache.clear()

# Global cache instance
cache = RedisCache()
