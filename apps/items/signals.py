"""
Django signals for cache invalidation on item changes.
"""

import logging
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from apps.common.cache_utils import ItemCache
from .models import Item

logger = logging.getLogger('apps.items')


@receiver(post_save, sender=Item)
def invalidate_item_cache_on_save(sender, instance, created, **kwargs):
    """
    Invalidate the item detail and location caches when an item is created
    or updated, including status flips made by the borrow-request lifecycle.
    """
    ItemCache.invalidate_item_related_caches(instance.id)

    action = "created" if created else "updated"
    logger.debug(f"Item {instance.id} {action} - invalidated related caches (status: {instance.status})")


@receiver(post_delete, sender=Item)
def invalidate_item_cache_on_delete(sender, instance, **kwargs):
    ItemCache.invalidate_item_related_caches(instance.id)
    logger.debug(f"Item {instance.id} deleted - invalidated related caches")
