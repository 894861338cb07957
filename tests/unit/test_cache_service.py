"""
Unit tests for the catalog listing cache.
"""

import fnmatch

from flask import Flask
from redis.exceptions import ConnectionError as RedisConnectionError

from storefront.services.cache_service import CacheService


class InMemoryRedis:
    """Just enough of the redis client API for the cache service."""

    def __init__(self):
        self.store = {}
        self.ttls = {}

    def ping(self):
        return True

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl

    def scan_iter(self, match, count=None):
        return [key for key in list(self.store) if fnmatch.fnmatch(key, match)]

    def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)


class DownRedis(InMemoryRedis):

    def ping(self):
        raise RedisConnectionError('connection refused')

    def get(self, key):
        raise RedisConnectionError('connection refused')


def _cache(client, **config):
    app = Flask(__name__)
    app.config.update({'CACHE_ENABLED': True, 'CACHE_KEY_PREFIX': 'shop', 'CACHE_DEFAULT_TTL': 45, **config})
    return CacheService(app, client=client)


class TestCacheService:

    def test_memoize_loads_once(self):
        client = InMemoryRedis()
        cache = _cache(client)
        calls = []

        def load():
            calls.append(1)
            return [{'id': 1, 'price': 19.99}]

        assert cache.memoize('catalog', 'products', 'all', load) == [{'id': 1, 'price': 19.99}]
        assert cache.memoize('catalog', 'products', 'all', load) == [{'id': 1, 'price': 19.99}]
        assert len(calls) == 1
        assert client.ttls['shop:catalog:products:all'] == 45

    def test_invalidate_module_only_drops_that_module(self):
        client = InMemoryRedis()
        cache = _cache(client)
        cache.set('catalog', 'products', 'all', [1])
        cache.set('catalog', 'products', 'category:3', [2])
        cache.set('catalog', 'categories', 'all', [3])

        assert cache.invalidate_module('catalog', 'products') == 2
        assert cache.get('catalog', 'products', 'all') is None
        assert cache.get('catalog', 'categories', 'all') == [3]

    def test_disabled_cache_always_loads(self):
        cache = _cache(InMemoryRedis(), CACHE_ENABLED=False)

        assert cache.is_available() is False
        assert cache.memoize('catalog', 'products', 'all', lambda: ['fresh']) == ['fresh']
        assert cache.invalidate_module('catalog', 'products') == 0

    def test_redis_errors_degrade_to_a_miss(self):
        cache = _cache(DownRedis())

        assert cache.is_available() is False
        assert cache.get('catalog', 'products', 'all') is None
        assert cache.memoize('catalog', 'products', 'all', lambda: ['from db']) == ['from db']
