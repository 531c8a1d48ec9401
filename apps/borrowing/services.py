from typing import Dict, Any, List
from datetime import timedelta
import logging
from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django.contrib.auth import get_user_model
from apps.common.exception_handler import log_lifecycle_event
from apps.common.exceptions import (
    RolePermissionError, InvalidInputError, ItemNotFoundError, InvalidItemStateError,
    BorrowRequestNotFoundError, UnauthorizedRequestAccessError, InvalidRequestStateError,
    DuplicateBorrowRequestError
)
from apps.items.models import Item
from apps.items.repositories import ItemRepository
from .repositories import BorrowRequestRepository
from .models import BorrowRequest

User = get_user_model()
logger = logging.getLogger('apps.borrowing')


class BorrowRequestService:
    """
    Owns the borrow-request lifecycle.

    pending -> approved -> returned, or pending -> denied. Only the buyer
    files a request; only the seller who owns the item moves it forward.
    """

    def __init__(self):
        self.request_repo = BorrowRequestRepository()
        self.item_repo = ItemRepository()

    def create_request(self, buyer: User, request_data: Dict[str, Any]) -> BorrowRequest:
        if buyer.role != User.BUYER:
            raise RolePermissionError("Only buyers can create borrow requests")

        start_date = request_data['start_date']
        end_date = request_data['end_date']

        # The item row lock serializes concurrent requests for the same item.
        with transaction.atomic():
            item = self.item_repo.get_item_by_id(request_data['item_id'], for_update=True)
            if not item:
                raise ItemNotFoundError()

            if end_date - start_date > timedelta(days=item.duration):
                raise InvalidInputError(f"Borrow period cannot exceed {item.duration} days for this item")

            if item.status != Item.AVAILABLE:
                logger.info(f"Item {item.id} status is {item.status}, not available")
                raise InvalidItemStateError("Item is not available for borrowing")

            if item.seller_id == buyer.id:
                raise InvalidInputError("You cannot borrow your own item")

            if self.request_repo.has_pending_request(item, buyer):
                raise DuplicateBorrowRequestError()

            borrow_request = self.request_repo.create_request(
                item=item,
                buyer=buyer,
                status=BorrowRequest.PENDING,
                start_date=start_date,
                end_date=end_date,
                message=request_data.get('message', '')
            )

        log_lifecycle_event(
            event_type='BORROW_REQUESTED',
            user_id=buyer.id,
            reference_id=f'borrow_request_{borrow_request.id}',
            details={
                'item_id': item.id,
                'start_date': start_date.isoformat(),
                'end_date': end_date.isoformat()
            }
        )
        return borrow_request

    def approve_request(self, request_id: int, seller: User) -> BorrowRequest:
        with transaction.atomic():
            borrow_request = self._get_managed_request(request_id, seller, "approve")

            if borrow_request.status != BorrowRequest.PENDING:
                raise InvalidRequestStateError("Only pending requests can be approved")

            item = borrow_request.item
            if item.status != Item.AVAILABLE:
                raise InvalidItemStateError("Item is already lent out")

            self.request_repo.update_request(borrow_request, status=BorrowRequest.APPROVED)
            self.item_repo.update_item(item, status=Item.BORROWED)

            # Competing requests for the same period can no longer be honoured.
            overlapping = list(self.request_repo.get_overlapping_pending_requests(
                item, borrow_request.start_date, borrow_request.end_date, exclude_id=borrow_request.id
            ))
            auto_denied = [other.id for other in overlapping]
            for other in overlapping:
                self.request_repo.update_request(other, status=BorrowRequest.DENIED)

        log_lifecycle_event(
            event_type='BORROW_APPROVED',
            user_id=seller.id,
            reference_id=f'borrow_request_{borrow_request.id}',
            details={
                'item_id': item.id,
                'buyer_id': borrow_request.buyer_id,
                'auto_denied': auto_denied
            }
        )
        return borrow_request

    def deny_request(self, request_id: int, seller: User) -> BorrowRequest:
        with transaction.atomic():
            borrow_request = self._get_managed_request(request_id, seller, "deny")

            if borrow_request.status != BorrowRequest.PENDING:
                raise InvalidRequestStateError("Only pending requests can be denied")

            self.request_repo.update_request(borrow_request, status=BorrowRequest.DENIED)

        log_lifecycle_event(
            event_type='BORROW_DENIED',
            user_id=seller.id,
            reference_id=f'borrow_request_{borrow_request.id}',
            details={'item_id': borrow_request.item_id, 'buyer_id': borrow_request.buyer_id}
        )
        return borrow_request

    def mark_returned(self, request_id: int, seller: User) -> BorrowRequest:
        with transaction.atomic():
            borrow_request = self._get_managed_request(request_id, seller, "mark as returned")

            if borrow_request.status != BorrowRequest.APPROVED:
                raise InvalidRequestStateError("Only approved requests can be marked returned")

            self.request_repo.update_request(borrow_request, status=BorrowRequest.RETURNED)
            self.item_repo.update_item(borrow_request.item, status=Item.AVAILABLE)

        log_lifecycle_event(
            event_type='BORROW_RETURNED',
            user_id=seller.id,
            reference_id=f'borrow_request_{borrow_request.id}',
            details={'item_id': borrow_request.item_id, 'buyer_id': borrow_request.buyer_id}
        )
        return borrow_request

    def get_my_requests(self, buyer: User) -> List[BorrowRequest]:
        return self.request_repo.get_requests_by_buyer(buyer)

    def get_requests_for_my_items(self, seller: User) -> List[BorrowRequest]:
        requests = self.request_repo.get_requests_for_seller(seller)
        logger.debug(f"Found {len(requests)} borrow requests for seller {seller.id}")
        return requests

    def expire_stale_requests(self, now=None) -> List[int]:
        """Deny pending requests whose start date passed more than the grace period ago."""
        now = now or timezone.now()
        cutoff = now - timedelta(hours=settings.BORROW_REQUEST_EXPIRY_GRACE_HOURS)

        expired = []
        with transaction.atomic():
            for borrow_request in self.request_repo.get_stale_pending_requests(cutoff):
                self.request_repo.update_request(borrow_request, status=BorrowRequest.DENIED)
                expired.append(borrow_request.id)
                logger.warning(
                    f"Borrow request {borrow_request.id} for item {borrow_request.item_id} expired "
                    f"(start date {borrow_request.start_date.isoformat()})"
                )
        return expired

    def _get_managed_request(self, request_id: int, seller: User, action: str) -> BorrowRequest:
        borrow_request = self.request_repo.get_request_by_id(request_id, for_update=True)
        if not borrow_request:
            raise BorrowRequestNotFoundError()

        if borrow_request.item.seller_id != seller.id:
            logger.info(f"User {seller.id} is not the seller of item {borrow_request.item_id}")
            raise UnauthorizedRequestAccessError(
                f"You can only {action} borrow requests for your own items"
            )
        return borrow_request
