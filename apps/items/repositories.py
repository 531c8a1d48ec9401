from typing import Optional, List
from django.contrib.auth import get_user_model
from .models import Item

User = get_user_model()


class ItemRepository:
    @staticmethod
    def create_item(seller: User, **kwargs) -> Item:
        item = Item.objects.create(seller=seller, **kwargs)
        return item

    @staticmethod
    def get_item_by_id(item_id: int, for_update: bool = False) -> Optional[Item]:
        items = Item.objects.select_related('seller')
        if for_update:
            items = items.select_for_update()
        try:
            return items.get(id=item_id)
        except Item.DoesNotExist:
            return None

    @staticmethod
    def filter_items(category: str = None, status: str = None, location: str = None) -> List[Item]:
        items = Item.objects.select_related('seller')
        if category:
            items = items.filter(category=category)
        if status:
            items = items.filter(status=status)
        if location:
            items = items.filter(location__icontains=location)
        return items.order_by('-created_at', '-id')

    @staticmethod
    def get_items_by_seller(seller: User) -> List[Item]:
        return Item.objects.filter(seller=seller).select_related('seller').order_by('-created_at', '-id')

    @staticmethod
    def update_item(item: Item, **kwargs) -> Item:
        for field, value in kwargs.items():
            setattr(item, field, value)
        item.save()
        return item

    @staticmethod
    def delete_item(item: Item) -> None:
        item.delete()

    @staticmethod
    def get_distinct_locations() -> List[str]:
        locations = (
            Item.objects.exclude(location='')
            .values_list('location', flat=True)
            .distinct()
        )
        return sorted(set(locations))

    @staticmethod
    def has_active_loan(item: Item) -> bool:
        return item.borrow_requests.filter(status='approved').exists()
