"""
Tests for the item cache and the Celery housekeeping tasks working together
with the borrow-request lifecycle.

Usage:
    python manage.py test test_cache_and_celery
"""

import os
import django

# Setup Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'resource_sharing.settings')
django.setup()

from datetime import timedelta
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from apps.borrowing.models import BorrowRequest
from apps.borrowing.services import BorrowRequestService
from apps.borrowing.tasks import expire_stale_requests, borrow_request_summary_report
from apps.common.cache_utils import ItemCache
from apps.items.models import Item
from apps.items.services import ItemService

User = get_user_model()


class CacheAndCeleryTest(TestCase):
    def setUp(self):
        cache.clear()
        self.seller = User.objects.create_user(
            username='cache_seller@example.com', email='cache_seller@example.com',
            password='testpass123', name='Cache Seller', role=User.SELLER
        )
        self.buyer = User.objects.create_user(
            username='cache_buyer@example.com', email='cache_buyer@example.com',
            password='testpass123', name='Cache Buyer', role=User.BUYER
        )
        self.item = Item.objects.create(seller=self.seller, title='Projector', category='Electronics',
                                        location='Downtown', duration=4)
        self.item_service = ItemService()
        self.borrow_service = BorrowRequestService()

    def test_basic_cache_operations(self):
        ItemCache.set_locations(['Downtown', 'Uptown'])
        self.assertEqual(ItemCache.get_locations(), ['Downtown', 'Uptown'])

        ItemCache.invalidate_locations()
        self.assertIsNone(ItemCache.get_locations())

    def test_cache_invalidated_by_lifecycle_transitions(self):
        start = timezone.now() + timedelta(days=1)
        borrow_request = self.borrow_service.create_request(self.buyer, {
            'item_id': self.item.id,
            'start_date': start,
            'end_date': start + timedelta(days=2)
        })

        self.assertEqual(self.item_service.get_item(self.item.id).status, Item.AVAILABLE)
        self.borrow_service.approve_request(borrow_request.id, self.seller)
        self.assertIsNone(ItemCache.get_item_detail(self.item.id))
        self.assertEqual(self.item_service.get_item(self.item.id).status, Item.BORROWED)

        self.borrow_service.mark_returned(borrow_request.id, self.seller)
        self.assertEqual(self.item_service.get_item(self.item.id).status, Item.AVAILABLE)

    def test_cache_invalidated_on_new_item(self):
        self.assertEqual(self.item_service.get_locations(), ['Downtown'])
        Item.objects.create(seller=self.seller, title='Screen', category='Electronics', location='Uptown')
        self.assertIsNone(ItemCache.get_locations())

    def test_celery_tasks(self):
        now = timezone.now()
        BorrowRequest.objects.create(item=self.item, buyer=self.buyer,
                                     start_date=now - timedelta(days=5), end_date=now - timedelta(days=3))

        result = expire_stale_requests.apply().get()
        self.assertEqual(result['status'], 'completed')
        self.assertEqual(result['requests_expired'], 1)

        report = borrow_request_summary_report.apply().get()
        self.assertEqual(report['request_status_counts']['denied'], 1)
        self.assertEqual(report['metrics']['total_items'], 1)
        self.assertEqual(report['metrics']['approval_rate'], 0)
