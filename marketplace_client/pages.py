"""
Page-level operations of the marketplace: browse, my items, new item,
my requests and incoming requests.
"""

import logging
from typing import List, Optional

from .api import ApiClient
from .filters import CATEGORIES, SearchFilters, location_options
from .forms import BorrowForm, ItemForm
from .models import AVAILABLE, BUYER, SELLER, BorrowRequest, Item
from .session import AuthSession

logger = logging.getLogger('marketplace_client')


class MarketplaceClient:
    def __init__(self, api: Optional[ApiClient] = None, session: Optional[AuthSession] = None):
        self.api = api or ApiClient()
        self.session = session or AuthSession(self.api)

    # Browse

    def browse(self, filters: Optional[SearchFilters] = None) -> List[Item]:
        params = {'status': AVAILABLE}
        if filters is not None:
            params.update(filters.apply())
        logger.debug(f"Fetching items with params: {params}")
        return [Item.from_json(data) for data in self.api.get('/api/items', params=params) or []]

    def item(self, item_id: int) -> Item:
        return Item.from_json(self.api.get(f'/api/items/{item_id}'))

    def categories(self) -> List[str]:
        return self.api.get('/api/items/categories') or list(CATEGORIES)

    def locations(self) -> List[str]:
        return self.api.get('/api/items/locations') or []

    def location_options(self) -> List[str]:
        return location_options(self.locations())

    # Seller pages

    def my_items(self) -> List[Item]:
        self.session.require_role(SELLER)
        return [Item.from_json(data) for data in self.api.get('/api/my-items') or []]

    def create_item(self, form: ItemForm) -> Item:
        self.session.require_role(SELLER)
        item = Item.from_json(self.api.post('/api/items', json=form.to_payload()))
        logger.info(f"Listed item {item.id}: {item.title}")
        return item

    def update_item(self, item_id: int, form: ItemForm) -> Item:
        self.session.require_role(SELLER)
        return Item.from_json(self.api.put(f'/api/items/{item_id}', json=form.to_payload()))

    def delete_item(self, item_id: int) -> None:
        self.session.require_role(SELLER)
        self.api.delete(f'/api/items/{item_id}')
        logger.info(f"Deleted item {item_id}")

    def incoming_requests(self) -> List[BorrowRequest]:
        self.session.require_role(SELLER)
        return [BorrowRequest.from_json(data) for data in self.api.get('/api/my-items/requests') or []]

    def approve(self, request_id: int) -> BorrowRequest:
        return self._decide(request_id, 'approve')

    def deny(self, request_id: int) -> BorrowRequest:
        return self._decide(request_id, 'deny')

    def mark_returned(self, request_id: int) -> BorrowRequest:
        return self._decide(request_id, 'return')

    # Buyer pages

    def request_borrow(self, form: BorrowForm) -> BorrowRequest:
        self.session.require_role(BUYER)
        data = self.api.post('/api/borrow-requests', json=form.to_payload())
        borrow_request = BorrowRequest.from_json(data)
        logger.info(f"Borrow request {borrow_request.id} sent for item {form.item_id}")
        return borrow_request

    def my_requests(self) -> List[BorrowRequest]:
        self.session.require_role(BUYER)
        return [BorrowRequest.from_json(data) for data in self.api.get('/api/my-requests') or []]

    def _decide(self, request_id: int, action: str) -> BorrowRequest:
        self.session.require_role(SELLER)
        data = self.api.put(f'/api/borrow-requests/{request_id}/{action}')
        logger.info(f"Borrow request {request_id}: {action}")
        return BorrowRequest.from_json(data)
