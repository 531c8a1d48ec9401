"""
Caching utilities for the Resource Sharing marketplace.
"""

import logging
from django.core.cache import cache
from typing import Any

logger = logging.getLogger('apps.common')


class CacheKeys:
    """Cache key constants for the marketplace."""

    ITEM_DETAIL = "item:detail:{item_id}"
    ITEM_LOCATIONS = "items:locations"

    # Cache timeouts (in seconds)
    DEFAULT_TIMEOUT = 300  # 5 minutes
    ITEM_TIMEOUT = 600     # 10 minutes


class CacheManager:
    """Centralized cache management for the marketplace."""

    @staticmethod
    def get(key: str, default: Any = None) -> Any:
        """Get value from cache."""
        try:
            return cache.get(key, default)
        except Exception as e:
            logger.error(f"Cache get error for key {key}: {e}")
            return default

    @staticmethod
    def set(key: str, value: Any, timeout: int = CacheKeys.DEFAULT_TIMEOUT) -> bool:
        """Set value in cache."""
        try:
            cache.set(key, value, timeout)
            logger.debug(f"Cache set for key: {key}")
            return True
        except Exception as e:
            logger.error(f"Cache set error for key {key}: {e}")
            return False

    @staticmethod
    def delete(key: str) -> bool:
        """Delete key from cache."""
        try:
            cache.delete(key)
            logger.debug(f"Cache deleted for key: {key}")
            return True
        except Exception as e:
            logger.error(f"Cache delete error for key {key}: {e}")
            return False


class ItemCache:
    """Cache management for item listings."""

    @staticmethod
    def get_item_detail(item_id: int):
        """Get cached item."""
        key = CacheKeys.ITEM_DETAIL.format(item_id=item_id)
        return CacheManager.get(key)

    @staticmethod
    def set_item_detail(item_id: int, item):
        """Cache item."""
        key = CacheKeys.ITEM_DETAIL.format(item_id=item_id)
        return CacheManager.set(key, item, CacheKeys.ITEM_TIMEOUT)

    @staticmethod
    def invalidate_item_detail(item_id: int):
        """Invalidate item cache."""
        key = CacheKeys.ITEM_DETAIL.format(item_id=item_id)
        return CacheManager.delete(key)

    @staticmethod
    def get_locations():
        """Get cached list of distinct item locations."""
        return CacheManager.get(CacheKeys.ITEM_LOCATIONS)

    @staticmethod
    def set_locations(locations):
        """Cache list of distinct item locations."""
        return CacheManager.set(CacheKeys.ITEM_LOCATIONS, locations, CacheKeys.ITEM_TIMEOUT)

    @staticmethod
    def invalidate_locations():
        """Invalidate location list cache."""
        return CacheManager.delete(CacheKeys.ITEM_LOCATIONS)

    @staticmethod
    def invalidate_item_related_caches(item_id: int):
        """Invalidate all caches related to an item."""
        ItemCache.invalidate_item_detail(item_id)
        ItemCache.invalidate_locations()
