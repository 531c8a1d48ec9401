"""
Domain-specific exceptions for the Resource Sharing marketplace.
"""

from rest_framework import status


class MarketplaceError(Exception):
    """Base exception for all marketplace errors."""
    default_message = "An error occurred in the marketplace"
    error_code = "MARKETPLACE_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message=None, error_code=None):
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        super().__init__(self.message)


class InvalidInputError(MarketplaceError):
    """Raised when a request payload fails a business rule."""
    default_message = "The request is invalid"
    error_code = "INVALID_INPUT"
    status_code = status.HTTP_400_BAD_REQUEST


class UserAlreadyExistsError(MarketplaceError):
    """Raised when registering an email that is already taken."""
    default_message = "User with this email already exists"
    error_code = "USER_EXISTS"
    status_code = status.HTTP_409_CONFLICT


class InvalidCredentialsError(MarketplaceError):
    """Raised when login credentials do not match an active account."""
    default_message = "Invalid email or password"
    error_code = "INVALID_CREDENTIALS"
    status_code = status.HTTP_401_UNAUTHORIZED


class RolePermissionError(MarketplaceError):
    """Raised when user's role doesn't allow the operation."""
    default_message = "Your role does not allow this operation"
    error_code = "ROLE_PERMISSION_ERROR"
    status_code = status.HTTP_403_FORBIDDEN


class ItemNotFoundError(MarketplaceError):
    """Raised when an item is not found."""
    default_message = "Item not found"
    error_code = "ITEM_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedItemAccessError(MarketplaceError):
    """Raised when user tries to modify an item they don't own."""
    default_message = "You can only modify your own items"
    error_code = "UNAUTHORIZED_ITEM_ACCESS"
    status_code = status.HTTP_403_FORBIDDEN


class InvalidItemStateError(MarketplaceError):
    """Raised when an item's status does not allow the operation."""
    default_message = "Item is not available for borrowing"
    error_code = "INVALID_ITEM_STATE"
    status_code = status.HTTP_409_CONFLICT


class BorrowRequestNotFoundError(MarketplaceError):
    """Raised when a borrow request is not found."""
    default_message = "Borrow request not found"
    error_code = "BORROW_REQUEST_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedRequestAccessError(MarketplaceError):
    """Raised when a user acts on a borrow request for an item they don't own."""
    default_message = "You can only manage borrow requests for your own items"
    error_code = "UNAUTHORIZED_REQUEST_ACCESS"
    status_code = status.HTTP_403_FORBIDDEN


class InvalidRequestStateError(MarketplaceError):
    """Raised when a borrow request transition is not allowed from its current status."""
    default_message = "Cannot perform this operation on the request in its current state"
    error_code = "INVALID_REQUEST_STATE"
    status_code = status.HTTP_409_CONFLICT


class DuplicateBorrowRequestError(MarketplaceError):
    """Raised when a buyer already has a pending request on the item."""
    default_message = "You already have a pending request for this item"
    error_code = "DUPLICATE_BORROW_REQUEST"
    status_code = status.HTTP_409_CONFLICT
