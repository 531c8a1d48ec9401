"""
Client-side forms: the borrow request form and the new listing form.

Both validate before anything is sent, so obviously bad input never
costs a round trip. The server repeats every check.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, List, Optional

from .exceptions import FormValidationError
from .filters import CATEGORIES
from .models import DEFAULT_DURATION_DAYS, Item


def to_iso(day: date) -> str:
    """Midnight UTC of ``day`` as an ISO-8601 string."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc).isoformat().replace('+00:00', 'Z')


@dataclass
class BorrowForm:
    item_id: Optional[int]
    duration: int = DEFAULT_DURATION_DAYS
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    message: str = ''

    def __post_init__(self):
        self.duration = self.duration or DEFAULT_DURATION_DAYS
        if self.start_date is None:
            self.start_date = date.today()
        if self.end_date is None:
            self.end_date = self.start_date + timedelta(days=self.duration)

    @classmethod
    def for_item(cls, item: Item, today: Optional[date] = None, **kwargs) -> 'BorrowForm':
        return cls(item_id=item.id or None, duration=item.duration, start_date=today, **kwargs)

    def errors(self) -> List[str]:
        errors = []
        if not self.item_id:
            errors.append("Invalid item data. Missing item ID.")
        if self.start_date is None or self.end_date is None:
            errors.append("Start date and end date are required")
            return errors
        if self.start_date > self.end_date:
            errors.append("Start date must be before end date")
        elif (self.end_date - self.start_date).days > self.duration:
            errors.append(f"Borrow period cannot exceed {self.duration} days for this item")
        return errors

    def validate(self) -> None:
        errors = self.errors()
        if errors:
            raise FormValidationError(errors)

    def to_payload(self) -> Dict[str, Any]:
        self.validate()
        return {
            'itemId': int(self.item_id),
            'startDate': to_iso(self.start_date),
            'endDate': to_iso(self.end_date),
            'message': self.message,
        }


@dataclass
class ItemForm:
    title: str = ''
    description: str = ''
    category: str = ''
    image_url: str = ''
    location: str = ''
    duration: int = DEFAULT_DURATION_DAYS
    categories: List[str] = field(default_factory=lambda: list(CATEGORIES))

    @classmethod
    def from_item(cls, item: Item) -> 'ItemForm':
        return cls(
            title=item.title,
            description=item.description,
            category=item.category,
            image_url=item.image_url,
            location=item.location,
            duration=item.duration,
        )

    def errors(self) -> List[str]:
        errors = []
        if not self.title.strip():
            errors.append("Title is required")
        if not self.category:
            errors.append("Category is required")
        elif self.category not in self.categories:
            errors.append(f"Unknown category: {self.category}")
        try:
            if int(self.duration) < 1:
                errors.append("Duration must be at least 1 day")
        except (TypeError, ValueError):
            errors.append("Duration must be a number of days")
        return errors

    def validate(self) -> None:
        errors = self.errors()
        if errors:
            raise FormValidationError(errors)

    def to_payload(self) -> Dict[str, Any]:
        self.validate()
        return {
            'title': self.title.strip(),
            'description': self.description,
            'category': self.category,
            'imageUrl': self.image_url,
            'location': self.location,
            'duration': int(self.duration),
        }
