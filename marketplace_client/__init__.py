"""
Python client for the Resource Sharing marketplace API.
"""

from .api import ApiClient
from .exceptions import (
    ApiConnectionError, ApiError, ClientError, FormValidationError, RoleError, UnauthorizedError
)
from .filters import ALL_CATEGORIES, ALL_LOCATIONS, CATEGORIES, SearchFilters
from .forms import BorrowForm, ItemForm
from .models import BorrowRequest, Item, User, describe_status
from .pages import MarketplaceClient
from .session import AuthSession
from .storage import FileTokenStore, MemoryTokenStore

__all__ = [
    'ApiClient',
    'ApiConnectionError',
    'ApiError',
    'AuthSession',
    'BorrowForm',
    'BorrowRequest',
    'ClientError',
    'FileTokenStore',
    'FormValidationError',
    'Item',
    'ItemForm',
    'MarketplaceClient',
    'MemoryTokenStore',
    'RoleError',
    'SearchFilters',
    'UnauthorizedError',
    'User',
    'describe_status',
    'ALL_CATEGORIES',
    'ALL_LOCATIONS',
    'CATEGORIES',
]
