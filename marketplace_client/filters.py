"""
Search filters for the browse listing.
"""

from dataclasses import dataclass
from typing import Dict, Mapping
from urllib.parse import urlencode

ALL_CATEGORIES = 'All Categories'
ALL_LOCATIONS = 'All Locations'

CATEGORIES = [
    'Tools',
    'Electronics',
    'Books',
    'Sports',
    'Outdoor',
    'Kitchen',
    'Furniture',
    'Clothing',
    'Other',
]

CATEGORY_OPTIONS = [ALL_CATEGORIES] + CATEGORIES

DEFAULT_LOCATIONS = ['Downtown', 'Westside', 'Eastside', 'Northside', 'Southside']


@dataclass
class SearchFilters:
    category: str = ''
    location: str = ''

    def set(self, name: str, value: str) -> None:
        if name not in ('category', 'location'):
            raise ValueError(f"Unknown filter: {name}")
        setattr(self, name, value or '')

    def apply(self) -> Dict[str, str]:
        """Query parameters for the listing; the catch-all choices are left out."""
        params = {}
        if self.category and self.category != ALL_CATEGORIES:
            params['category'] = self.category
        if self.location and self.location != ALL_LOCATIONS:
            params['location'] = self.location
        return params

    def query_string(self) -> str:
        return urlencode(self.apply())

    def reset(self) -> None:
        self.category = ''
        self.location = ''

    @property
    def is_active(self) -> bool:
        return bool(self.apply())

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> 'SearchFilters':
        return cls(category=params.get('category') or '', location=params.get('location') or '')


def location_options(locations) -> list:
    """Choices for the location filter, falling back to the stock neighbourhoods."""
    return [ALL_LOCATIONS] + (list(locations) or DEFAULT_LOCATIONS)
