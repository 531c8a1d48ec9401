from typing import Optional, Dict, Any, List
import logging
from django.contrib.auth import get_user_model
from apps.common.cache_utils import ItemCache
from apps.common.exception_handler import log_lifecycle_event
from apps.common.exceptions import (
    RolePermissionError, ItemNotFoundError, UnauthorizedItemAccessError, InvalidItemStateError
)
from .repositories import ItemRepository
from .models import Item, CATEGORIES

User = get_user_model()
logger = logging.getLogger('apps.items')


class ItemService:
    def __init__(self):
        self.item_repo = ItemRepository()

    def list_items(self, category: Optional[str] = None, status: Optional[str] = None,
                   location: Optional[str] = None) -> List[Item]:
        items = self.item_repo.filter_items(category=category, status=status, location=location)
        logger.debug(f"Listing items (category={category!r}, status={status!r}, location={location!r})")
        return items

    def get_item(self, item_id: int) -> Item:
        cached_item = ItemCache.get_item_detail(item_id)
        if cached_item is not None:
            logger.debug(f"Retrieved item {item_id} from cache")
            return cached_item

        item = self.item_repo.get_item_by_id(item_id)
        if not item:
            raise ItemNotFoundError()

        ItemCache.set_item_detail(item_id, item)
        return item

    def create_item(self, seller: User, item_data: Dict[str, Any]) -> Item:
        if seller.role != User.SELLER:
            raise RolePermissionError("Only sellers can create items")

        item = self.item_repo.create_item(seller=seller, status=Item.AVAILABLE, **item_data)

        log_lifecycle_event(
            event_type='ITEM_LISTED',
            user_id=seller.id,
            reference_id=f'item_{item.id}',
            details={'category': item.category, 'duration': item.duration}
        )
        return item

    def update_item(self, item_id: int, user: User, item_data: Dict[str, Any]) -> Item:
        item = self._get_owned_item(item_id, user, "You can only update your own items")
        item = self.item_repo.update_item(item, **item_data)
        logger.info(f"Item {item.id} updated by seller {user.id}")
        return item

    def delete_item(self, item_id: int, user: User) -> None:
        item = self._get_owned_item(item_id, user, "You can only delete your own items")

        if self.item_repo.has_active_loan(item):
            raise InvalidItemStateError("Item is currently lent out and cannot be deleted")

        self.item_repo.delete_item(item)
        log_lifecycle_event(
            event_type='ITEM_DELETED',
            user_id=user.id,
            reference_id=f'item_{item_id}'
        )

    def get_items_by_seller(self, user: User) -> List[Item]:
        if user.role != User.SELLER:
            raise RolePermissionError("Only sellers can view their items")
        return self.item_repo.get_items_by_seller(user)

    def get_categories(self) -> List[str]:
        return list(CATEGORIES)

    def get_locations(self) -> List[str]:
        cached_locations = ItemCache.get_locations()
        if cached_locations is not None:
            return cached_locations

        locations = self.item_repo.get_distinct_locations()
        ItemCache.set_locations(locations)
        return locations

    def _get_owned_item(self, item_id: int, user: User, message: str) -> Item:
        item = self.item_repo.get_item_by_id(item_id)
        if not item:
            raise ItemNotFoundError()
        if item.seller_id != user.id:
            raise UnauthorizedItemAccessError(message)
        return item
