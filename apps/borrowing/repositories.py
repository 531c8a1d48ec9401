from typing import Optional, List, Dict
from django.contrib.auth import get_user_model
from django.db.models import Count
from apps.items.models import Item
from .models import BorrowRequest

User = get_user_model()


class BorrowRequestRepository:
    @staticmethod
    def create_request(item: Item, buyer: User, **kwargs) -> BorrowRequest:
        borrow_request = BorrowRequest.objects.create(item=item, buyer=buyer, **kwargs)
        return borrow_request

    @staticmethod
    def get_request_by_id(request_id: int, for_update: bool = False) -> Optional[BorrowRequest]:
        requests = BorrowRequest.objects.select_related('item', 'item__seller', 'buyer')
        if for_update:
            requests = requests.select_for_update()
        try:
            return requests.get(id=request_id)
        except BorrowRequest.DoesNotExist:
            return None

    @staticmethod
    def get_requests_by_buyer(buyer: User) -> List[BorrowRequest]:
        return BorrowRequest.objects.filter(buyer=buyer).select_related(
            'item', 'item__seller', 'buyer'
        ).order_by('-created_at', '-id')

    @staticmethod
    def get_requests_for_seller(seller: User) -> List[BorrowRequest]:
        return BorrowRequest.objects.filter(item__seller=seller).select_related(
            'item', 'item__seller', 'buyer'
        ).order_by('-created_at', '-id')

    @staticmethod
    def has_pending_request(item: Item, buyer: User) -> bool:
        return BorrowRequest.objects.filter(item=item, buyer=buyer, status=BorrowRequest.PENDING).exists()

    @staticmethod
    def get_overlapping_pending_requests(item: Item, start_date, end_date, exclude_id: int = None) -> List[BorrowRequest]:
        requests = BorrowRequest.objects.filter(
            item=item,
            status=BorrowRequest.PENDING,
            start_date__lte=end_date,
            end_date__gte=start_date
        )
        if exclude_id is not None:
            requests = requests.exclude(id=exclude_id)
        return requests

    @staticmethod
    def get_stale_pending_requests(cutoff) -> List[BorrowRequest]:
        return BorrowRequest.objects.filter(
            status=BorrowRequest.PENDING,
            start_date__lt=cutoff
        ).select_related('item', 'buyer')

    @staticmethod
    def update_request(borrow_request: BorrowRequest, **kwargs) -> BorrowRequest:
        for field, value in kwargs.items():
            setattr(borrow_request, field, value)
        borrow_request.save()
        return borrow_request

    @staticmethod
    def count_by_status() -> Dict[str, int]:
        counts = {status: 0 for status, _ in BorrowRequest.STATUS_CHOICES}
        for row in BorrowRequest.objects.values('status').annotate(total=Count('id')):
            counts[row['status']] = row['total']
        return counts
