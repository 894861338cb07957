"""
Redis cache for the public catalog listings.

Listings are stored as plain JSON (they are already serialized with floats) under
"{prefix}:{scope}:{module}:{key}". Every Redis failure degrades to a cache miss;
checkout never reads from here.
"""

import json
import logging
from typing import Any, Callable, Optional

import redis
from redis.exceptions import RedisError
from flask import Flask

logger = logging.getLogger(__name__)


class CacheService:
    """Redis-backed listing cache that turns itself off when Redis is unreachable."""

    def __init__(self, app: Optional[Flask] = None, client: Optional[redis.Redis] = None):
        self.client = client
        self.prefix = 'storefront'
        self.default_ttl = 60
        if app:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        self.prefix = app.config.get('CACHE_KEY_PREFIX', 'storefront')
        self.default_ttl = app.config.get('CACHE_DEFAULT_TTL', 60)

        if not app.config.get('CACHE_ENABLED', True):
            logger.info("[CACHE] Disabled via config")
            self.client = None
            return

        if self.client is None:
            redis_url = app.config.get('REDIS_URL', 'redis://redis:6379/0')
            try:
                self.client = redis.from_url(
                    redis_url, decode_responses=True, socket_connect_timeout=3, socket_timeout=3
                )
                self.client.ping()
                logger.info(f"[CACHE] Redis connected: {redis_url}")
            except RedisError as e:
                logger.warning(f"[CACHE] Redis unavailable ({e}), listings served from the database")
                self.client = None

    def is_available(self) -> bool:
        if self.client is None:
            return False
        try:
            return bool(self.client.ping())
        except RedisError:
            return False

    def key(self, scope: str, module: str, key: str) -> str:
        return f"{self.prefix}:{scope}:{module}:{key}"

    def get(self, scope: str, module: str, key: str) -> Optional[Any]:
        if self.client is None:
            return None
        try:
            raw = self.client.get(self.key(scope, module, key))
        except RedisError as e:
            logger.warning(f"[CACHE] Read failed: {e}")
            return None
        return json.loads(raw) if raw is not None else None

    def set(self, scope: str, module: str, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        if self.client is None:
            return False
        try:
            self.client.setex(self.key(scope, module, key), ttl or self.default_ttl, json.dumps(value))
            return True
        except RedisError as e:
            logger.warning(f"[CACHE] Write failed: {e}")
            return False

    def memoize(self, scope: str, module: str, key: str, loader: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        """Return the cached value, or load it and store it for next time."""
        cached = self.get(scope, module, key)
        if cached is not None:
            return cached
        value = loader()
        self.set(scope, module, key, value, ttl)
        return value

    def invalidate_module(self, scope: str, module: str) -> int:
        """Drop every key cached for a module; returns how many were removed."""
        if self.client is None:
            return 0
        try:
            keys = list(self.client.scan_iter(match=self.key(scope, module, '*'), count=100))
            if keys:
                self.client.delete(*keys)
                logger.info(f"[CACHE] Invalidated {scope}:{module} ({len(keys)} keys)")
            return len(keys)
        except RedisError as e:
            logger.warning(f"[CACHE] Invalidate failed: {e}")
            return 0


_cache_service: Optional[CacheService] = None


def init_cache(app: Flask) -> None:
    global _cache_service
    _cache_service = CacheService(app)
    app.extensions['cache'] = _cache_service


def get_cache() -> CacheService:
    if _cache_service is None:
        raise RuntimeError("Cache not initialized.")
    return _cache_service
