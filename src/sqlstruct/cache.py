"""
Caching for schema conversion.

A result set's metadata is converted once per query shape: schemas are cached
keyed by table name, the column descriptors and the numeric mapping flag.
Uses cachetools TTLCache for automatic expiration.
"""
import functools
import logging
import threading

import cachetools

logger = logging.getLogger(__name__)


class Cache:
    """Cache manager for the sqlstruct package.

    Thread-safe singleton that manages all TTL caches.
    """

    _instance = None
    _caches: dict[str, cachetools.TTLCache] = {}
    _lock = threading.RLock()

    @classmethod
    def get_instance(cls) -> 'Cache':
        """Get singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def get_cache(self, name: str, maxsize: int = 100, ttl: int = 300) -> cachetools.TTLCache:
        """Get or create a TTL cache with the given name.

        Args:
            name: Name of the cache
            maxsize: Maximum cache size
            ttl: Time-to-live in seconds

        Returns
            TTLCache instance
        """
        if name not in self._caches:
            with self._lock:
                if name not in self._caches:
                    self._caches[name] = cachetools.TTLCache(maxsize=maxsize, ttl=ttl)
        return self._caches[name]

    def clear_all(self) -> None:
        """Clear all managed caches."""
        with self._lock:
            for cache in self._caches.values():
                cache.clear()

    def clear_cache(self, name: str) -> None:
        """Clear a specific cache by name."""
        with self._lock:
            if name in self._caches:
                self._caches[name].clear()

    def clear_for_table(self, table_name: str) -> None:
        """Clear all cache entries related to a specific table.

        Args:
            table_name: Name of the table to clear cache entries for
        """
        with self._lock:
            for cache in self._caches.values():
                keys_to_clear = [key for key in list(cache.keys()) if key[0] == table_name]
                for key in keys_to_clear:
                    cache.pop(key, None)
                    logger.debug(f'Cleared cache entry for table {table_name}')


def cacheable_schema(cache_name: str, ttl: int = 600, maxsize: int = 128):
    """Decorator caching schema conversion results per query shape.

    The wrapped function takes (table_name, columns, map_numerics). Respects a
    bypass_cache keyword to skip the cache lookup.

    Args:
        cache_name: Name of the cache
        ttl: Time-to-live in seconds
        maxsize: Maximum cache size
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(table_name, columns, map_numerics=False, bypass_cache=False):
            columns = tuple(columns)
            if bypass_cache:
                logger.debug(f'Bypassing cache for {func.__name__}({table_name})')
                return func(table_name, columns, map_numerics)

            cache = Cache.get_instance().get_cache(cache_name, ttl=ttl, maxsize=maxsize)
            key = (table_name, columns, bool(map_numerics))

            with Cache._lock:
                if key in cache:
                    logger.debug(f'Cache hit for {func.__name__}({table_name})')
                    return cache[key]

            logger.debug(f'Cache miss for {func.__name__}({table_name})')
            result = func(table_name, columns, map_numerics)
            with Cache._lock:
                cache[key] = result
            return result

        return wrapper
    return decorator
