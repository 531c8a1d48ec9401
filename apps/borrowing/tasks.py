"""
Celery tasks for borrow-request housekeeping and reporting.
"""

import logging
from typing import Dict, Any
from celery import shared_task
from django.db.models import Count
from django.utils import timezone
from apps.items.models import Item
from .repositories import BorrowRequestRepository
from .services import BorrowRequestService

logger = logging.getLogger('apps.borrowing')


@shared_task(bind=True)
def expire_stale_requests(self) -> Dict[str, Any]:
    """
    Hourly task that denies pending requests nobody decided on in time.

    A request is stale once its start date lies further in the past than
    BORROW_REQUEST_EXPIRY_GRACE_HOURS.
    """
    task_id = self.request.id
    logger.info(f"Starting stale borrow request check task {task_id}")

    try:
        expired = BorrowRequestService().expire_stale_requests()

        logger.info(f"Stale borrow request check completed. Requests expired: {len(expired)}")
        return {
            'task_id': task_id,
            'status': 'completed',
            'requests_expired': len(expired),
            'expired_request_ids': expired,
            'timestamp': timezone.now().isoformat()
        }

    except Exception as e:
        logger.error(f"Error in stale borrow request check task {task_id}: {str(e)}")
        return {
            'task_id': task_id,
            'status': 'failed',
            'error': str(e),
            'timestamp': timezone.now().isoformat()
        }


@shared_task(bind=True)
def borrow_request_summary_report(self) -> Dict[str, Any]:
    """
    Daily task to generate a summary of request and item statuses.
    """
    task_id = self.request.id
    logger.info(f"Starting borrow request summary report task {task_id}")

    try:
        request_counts = BorrowRequestRepository.count_by_status()

        item_counts = {status: 0 for status, _ in Item.STATUS_CHOICES}
        for row in Item.objects.values('status').annotate(total=Count('id')):
            item_counts[row['status']] = row['total']

        total_requests = sum(request_counts.values())
        decided = request_counts['approved'] + request_counts['denied'] + request_counts['returned']
        approval_rate = (
            (request_counts['approved'] + request_counts['returned']) / decided * 100
        ) if decided > 0 else 0

        report = {
            'task_id': task_id,
            'status': 'completed',
            'timestamp': timezone.now().isoformat(),
            'request_status_counts': request_counts,
            'item_status_counts': item_counts,
            'metrics': {
                'total_requests': total_requests,
                'total_items': sum(item_counts.values()),
                'approval_rate': round(approval_rate, 2)
            }
        }

        logger.info(f"Borrow request summary report completed: {report}")
        return report

    except Exception as e:
        logger.error(f"Error in borrow request summary report task {task_id}: {str(e)}")
        return {
            'task_id': task_id,
            'status': 'failed',
            'error': str(e),
            'timestamp': timezone.now().isoformat()
        }
