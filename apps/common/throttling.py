"""
Custom throttling classes for the Resource Sharing marketplace.
"""

from rest_framework.throttling import UserRateThrottle


class AuthOperationsThrottle(UserRateThrottle):
    """
    Throttle for authentication operations like login, register.
    """
    scope = 'auth_operations'


class ListingThrottle(UserRateThrottle):
    """
    Throttle for creating, updating and deleting item listings.
    """
    scope = 'listing_operations'


class BorrowRequestThrottle(UserRateThrottle):
    """
    Throttle for filing borrow requests and deciding on them.
    """
    scope = 'borrow_operations'
