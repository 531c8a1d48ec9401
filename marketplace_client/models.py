"""
Client-side views of the API payloads.

Parsing is lenient: every field also accepts its capitalised spelling
(``id``/``ID``, ``itemId``/``ItemID``...) and falls back to the same
defaults the listing pages used when a field is missing.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from dateutil.parser import isoparse

SELLER = 'seller'
BUYER = 'buyer'
ROLES = (SELLER, BUYER)

AVAILABLE = 'available'
BORROWED = 'borrowed'

PENDING = 'pending'
APPROVED = 'approved'
DENIED = 'denied'
RETURNED = 'returned'

DEFAULT_DURATION_DAYS = 7

STATUS_DESCRIPTIONS = {
    PENDING: "Your request is pending approval from the owner.",
    APPROVED: "Your request has been approved! You can now borrow this item.",
    DENIED: "Your request has been denied by the owner.",
    RETURNED: "You have returned this item.",
}


def pick(data: Dict[str, Any], *names, default=None):
    """Return the first truthy value stored under any of ``names``."""
    for name in names:
        value = data.get(name)
        if value:
            return value
    return default


def parse_datetime(value) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return isoparse(value)


def describe_status(status: str) -> str:
    return STATUS_DESCRIPTIONS.get(status, "Unknown status")


@dataclass
class User:
    id: int = 0
    email: str = ''
    name: str = ''
    role: str = ''
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> 'User':
        data = data or {}
        return cls(
            id=pick(data, 'id', 'ID', default=0),
            email=pick(data, 'email', 'Email', default=''),
            name=pick(data, 'name', 'Name', default=''),
            role=pick(data, 'role', 'Role', default=''),
            created_at=parse_datetime(pick(data, 'createdAt', 'CreatedAt')),
            updated_at=parse_datetime(pick(data, 'updatedAt', 'UpdatedAt')),
        )

    @property
    def is_seller(self) -> bool:
        return self.role == SELLER

    @property
    def is_buyer(self) -> bool:
        return self.role == BUYER


@dataclass
class Item:
    id: int = 0
    title: str = ''
    description: str = ''
    category: str = ''
    image_url: str = ''
    status: str = AVAILABLE
    location: str = ''
    duration: int = DEFAULT_DURATION_DAYS
    seller_id: int = 0
    seller: User = field(default_factory=lambda: User(name='Unknown'))
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> 'Item':
        data = data or {}
        seller = pick(data, 'seller', 'Seller')
        return cls(
            id=pick(data, 'id', 'ID', default=0),
            title=pick(data, 'title', 'Title', default=''),
            description=pick(data, 'description', 'Description', default=''),
            category=pick(data, 'category', 'Category', default=''),
            image_url=pick(data, 'imageUrl', 'ImageURL', default=''),
            status=pick(data, 'status', 'Status', default=AVAILABLE),
            location=pick(data, 'location', 'Location', default=''),
            duration=pick(data, 'duration', 'Duration', default=DEFAULT_DURATION_DAYS),
            seller_id=pick(data, 'sellerId', 'SellerID', default=0),
            seller=User.from_json(seller) if seller else User(name='Unknown'),
            created_at=parse_datetime(pick(data, 'createdAt', 'CreatedAt')),
            updated_at=parse_datetime(pick(data, 'updatedAt', 'UpdatedAt')),
        )

    @property
    def is_available(self) -> bool:
        return self.status == AVAILABLE


@dataclass
class BorrowRequest:
    id: int = 0
    item_id: int = 0
    buyer_id: int = 0
    status: str = ''
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    message: str = ''
    item: Optional[Item] = None
    buyer: Optional[User] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> 'BorrowRequest':
        data = data or {}
        item = pick(data, 'item', 'Item')
        buyer = pick(data, 'buyer', 'Buyer')
        return cls(
            id=pick(data, 'id', 'ID', default=0),
            item_id=pick(data, 'itemId', 'ItemID', default=0),
            buyer_id=pick(data, 'buyerId', 'BuyerID', default=0),
            status=pick(data, 'status', 'Status', default=''),
            start_date=parse_datetime(pick(data, 'startDate', 'StartDate')),
            end_date=parse_datetime(pick(data, 'endDate', 'EndDate')),
            message=pick(data, 'message', 'Message', default=''),
            item=Item.from_json(item) if item else None,
            buyer=User.from_json(buyer) if buyer else None,
            created_at=parse_datetime(pick(data, 'createdAt', 'CreatedAt')),
            updated_at=parse_datetime(pick(data, 'updatedAt', 'UpdatedAt')),
        )

    @property
    def is_pending(self) -> bool:
        return self.status == PENDING

    @property
    def description(self) -> str:
        return describe_status(self.status)
