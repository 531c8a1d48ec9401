from datetime import timedelta
from unittest.mock import patch
from django.test import TestCase, override_settings
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APITestCase
from rest_framework import status
from rest_framework.authtoken.models import Token
from apps.common.exceptions import (
    RolePermissionError, InvalidInputError, ItemNotFoundError, InvalidItemStateError,
    BorrowRequestNotFoundError, UnauthorizedRequestAccessError, InvalidRequestStateError,
    DuplicateBorrowRequestError
)
from apps.items.models import Item
from apps.items.repositories import ItemRepository
from .models import BorrowRequest
from .services import BorrowRequestService
from .tasks import expire_stale_requests, borrow_request_summary_report

User = get_user_model()


def make_user(email, role):
    return User.objects.create_user(username=email, email=email, password='testpass123', name=email.split('@')[0], role=role)


class BorrowTestMixin:
    def setUp(self):
        cache.clear()
        self.seller = make_user('seller@example.com', User.SELLER)
        self.other_seller = make_user('other@example.com', User.SELLER)
        self.buyer = make_user('buyer@example.com', User.BUYER)
        self.second_buyer = make_user('buyer2@example.com', User.BUYER)
        self.item = Item.objects.create(
            seller=self.seller, title='Ladder', category='Tools', location='Eastside', duration=7
        )
        self.now = timezone.now()

    def period(self, start_offset=1, days=3):
        start = self.now + timedelta(days=start_offset)
        return start, start + timedelta(days=days)


class BorrowRequestModelTest(BorrowTestMixin, TestCase):
    def test_overlaps_is_inclusive(self):
        start, end = self.period(days=3)
        borrow_request = BorrowRequest.objects.create(
            item=self.item, buyer=self.buyer, start_date=start, end_date=end
        )
        self.assertTrue(borrow_request.overlaps(end, end + timedelta(days=1)))
        self.assertTrue(borrow_request.overlaps(start - timedelta(days=2), start))
        self.assertFalse(borrow_request.overlaps(end + timedelta(seconds=1), end + timedelta(days=1)))
        self.assertEqual(borrow_request.status, BorrowRequest.PENDING)


class BorrowRequestServiceTest(BorrowTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.service = BorrowRequestService()

    def _request(self, buyer=None, item=None, start_offset=1, days=3, message=''):
        start, end = self.period(start_offset, days)
        return self.service.create_request(buyer or self.buyer, {
            'item_id': (item or self.item).id,
            'start_date': start,
            'end_date': end,
            'message': message
        })

    def test_create_request(self):
        borrow_request = self._request(message='Need it for the weekend')
        self.assertEqual(borrow_request.status, BorrowRequest.PENDING)
        self.assertEqual(borrow_request.buyer, self.buyer)
        self.assertEqual(borrow_request.message, 'Need it for the weekend')

    def test_seller_cannot_request(self):
        with self.assertRaises(RolePermissionError):
            self._request(buyer=self.other_seller)

    def test_missing_item(self):
        start, end = self.period()
        with self.assertRaises(ItemNotFoundError):
            self.service.create_request(self.buyer, {'item_id': 9999, 'start_date': start, 'end_date': end})

    def test_period_longer_than_item_duration(self):
        with self.assertRaises(InvalidInputError) as ctx:
            self._request(days=8)
        self.assertEqual(ctx.exception.message, 'Borrow period cannot exceed 7 days for this item')

    def test_period_equal_to_item_duration(self):
        self.assertEqual(self._request(days=7).status, BorrowRequest.PENDING)

    def test_item_not_available(self):
        self.item.status = Item.BORROWED
        self.item.save()
        with self.assertRaises(InvalidItemStateError):
            self._request()

    def test_duplicate_pending_request(self):
        self._request()
        with self.assertRaises(DuplicateBorrowRequestError):
            self._request(start_offset=5)

    def test_create_request_locks_item(self):
        with patch.object(ItemRepository, 'get_item_by_id', wraps=ItemRepository.get_item_by_id) as get_item:
            self._request()
        get_item.assert_called_once_with(self.item.id, for_update=True)

    def test_rejected_request_leaves_nothing_behind(self):
        self._request()
        with self.assertRaises(DuplicateBorrowRequestError):
            self._request(start_offset=5)
        self.assertEqual(BorrowRequest.objects.filter(item=self.item, buyer=self.buyer).count(), 1)

    def test_approve_request(self):
        borrow_request = self._request()
        approved = self.service.approve_request(borrow_request.id, self.seller)

        self.assertEqual(approved.status, BorrowRequest.APPROVED)
        self.item.refresh_from_db()
        self.assertEqual(self.item.status, Item.BORROWED)

    def test_approve_denies_overlapping_pending_requests(self):
        first = self._request(start_offset=1, days=3)
        overlapping = self._request(buyer=self.second_buyer, start_offset=4, days=2)
        third_buyer = make_user('buyer3@example.com', User.BUYER)
        later = self._request(buyer=third_buyer, start_offset=10, days=2)

        self.service.approve_request(first.id, self.seller)

        overlapping.refresh_from_db()
        later.refresh_from_db()
        self.assertEqual(overlapping.status, BorrowRequest.DENIED)
        self.assertEqual(later.status, BorrowRequest.PENDING)

    def test_approve_when_already_lent_out(self):
        first = self._request()
        second = self._request(buyer=self.second_buyer, start_offset=20, days=2)
        self.service.approve_request(first.id, self.seller)

        with self.assertRaises(InvalidItemStateError):
            self.service.approve_request(second.id, self.seller)

    def test_approve_not_owner(self):
        borrow_request = self._request()
        with self.assertRaises(UnauthorizedRequestAccessError) as ctx:
            self.service.approve_request(borrow_request.id, self.other_seller)
        self.assertEqual(ctx.exception.message, 'You can only approve borrow requests for your own items')

    def test_approve_missing_request(self):
        with self.assertRaises(BorrowRequestNotFoundError):
            self.service.approve_request(9999, self.seller)

    def test_deny_request(self):
        borrow_request = self._request()
        denied = self.service.deny_request(borrow_request.id, self.seller)
        self.assertEqual(denied.status, BorrowRequest.DENIED)
        self.item.refresh_from_db()
        self.assertEqual(self.item.status, Item.AVAILABLE)

        with self.assertRaises(InvalidRequestStateError):
            self.service.approve_request(borrow_request.id, self.seller)

    def test_mark_returned(self):
        borrow_request = self._request()

        with self.assertRaises(InvalidRequestStateError):
            self.service.mark_returned(borrow_request.id, self.seller)

        self.service.approve_request(borrow_request.id, self.seller)
        returned = self.service.mark_returned(borrow_request.id, self.seller)

        self.assertEqual(returned.status, BorrowRequest.RETURNED)
        self.item.refresh_from_db()
        self.assertEqual(self.item.status, Item.AVAILABLE)

    def test_request_listings(self):
        mine = self._request()
        other_item = Item.objects.create(seller=self.other_seller, title='Kayak', category='Outdoor')
        self._request(buyer=self.second_buyer, item=other_item)

        self.assertEqual([r.id for r in self.service.get_my_requests(self.buyer)], [mine.id])
        self.assertEqual([r.id for r in self.service.get_requests_for_my_items(self.seller)], [mine.id])

    @override_settings(BORROW_REQUEST_EXPIRY_GRACE_HOURS=24)
    def test_expire_stale_requests(self):
        stale = BorrowRequest.objects.create(
            item=self.item, buyer=self.buyer,
            start_date=self.now - timedelta(days=2), end_date=self.now + timedelta(days=1)
        )
        recent = BorrowRequest.objects.create(
            item=self.item, buyer=self.second_buyer,
            start_date=self.now - timedelta(hours=2), end_date=self.now + timedelta(days=1)
        )

        expired = self.service.expire_stale_requests(now=self.now)

        self.assertEqual(expired, [stale.id])
        stale.refresh_from_db()
        recent.refresh_from_db()
        self.assertEqual(stale.status, BorrowRequest.DENIED)
        self.assertEqual(recent.status, BorrowRequest.PENDING)


class BorrowingTasksTest(BorrowTestMixin, TestCase):
    def test_expire_stale_requests_task(self):
        BorrowRequest.objects.create(
            item=self.item, buyer=self.buyer,
            start_date=self.now - timedelta(days=3), end_date=self.now - timedelta(days=1)
        )
        result = expire_stale_requests.apply().get()

        self.assertEqual(result['status'], 'completed')
        self.assertEqual(result['requests_expired'], 1)

    def test_expire_stale_requests_task_failure(self):
        with patch.object(BorrowRequestService, 'expire_stale_requests', side_effect=RuntimeError('db down')):
            result = expire_stale_requests.apply().get()

        self.assertEqual(result['status'], 'failed')
        self.assertEqual(result['error'], 'db down')

    def test_summary_report(self):
        start, end = self.period()
        BorrowRequest.objects.create(item=self.item, buyer=self.buyer, status=BorrowRequest.APPROVED,
                                     start_date=start, end_date=end)
        BorrowRequest.objects.create(item=self.item, buyer=self.second_buyer, status=BorrowRequest.DENIED,
                                     start_date=start, end_date=end)
        BorrowRequest.objects.create(item=self.item, buyer=self.second_buyer,
                                     start_date=start, end_date=end)
        self.item.status = Item.BORROWED
        self.item.save()

        result = borrow_request_summary_report.apply().get()

        self.assertEqual(result['status'], 'completed')
        self.assertEqual(result['request_status_counts']['pending'], 1)
        self.assertEqual(result['request_status_counts']['returned'], 0)
        self.assertEqual(result['item_status_counts'], {'available': 0, 'borrowed': 1})
        self.assertEqual(result['metrics']['total_requests'], 3)
        self.assertEqual(result['metrics']['approval_rate'], 50.0)


class BorrowRequestAPITest(BorrowTestMixin, APITestCase):
    def setUp(self):
        super().setUp()
        self.seller_token = Token.objects.create(user=self.seller)
        self.buyer_token = Token.objects.create(user=self.buyer)

    def _auth(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token.key}')

    def _payload(self, **overrides):
        start, end = self.period()
        data = {
            'itemId': self.item.id,
            'startDate': start.isoformat(),
            'endDate': end.isoformat(),
            'message': 'Painting the porch'
        }
        data.update(overrides)
        return data

    def test_create_borrow_request(self):
        self._auth(self.buyer_token)
        response = self.client.post('/api/borrow-requests', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['itemId'], self.item.id)
        self.assertEqual(response.data['buyerId'], self.buyer.id)
        self.assertEqual(response.data['item']['title'], 'Ladder')

    def test_create_missing_item_id(self):
        self._auth(self.buyer_token)
        payload = self._payload()
        del payload['itemId']
        response = self.client.post('/api/borrow-requests', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Item ID is required')

    def test_create_start_after_end(self):
        self._auth(self.buyer_token)
        start, end = self.period()
        payload = self._payload(startDate=end.isoformat(), endDate=start.isoformat())
        response = self.client.post('/api/borrow-requests', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Start date must be before end date')

    def test_create_as_seller(self):
        self._auth(self.seller_token)
        response = self.client.post('/api/borrow-requests', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_for_borrowed_item(self):
        self.item.status = Item.BORROWED
        self.item.save()
        self._auth(self.buyer_token)
        response = self.client.post('/api/borrow-requests', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error_code'], 'INVALID_ITEM_STATE')
        self.assertEqual(response.data['message'], 'Item is not available for borrowing')

    def test_approve_and_return(self):
        self._auth(self.buyer_token)
        request_id = self.client.post('/api/borrow-requests', self._payload(), format='json').data['id']

        self._auth(self.seller_token)
        response = self.client.put(f'/api/borrow-requests/{request_id}/approve')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'approved')
        self.assertEqual(self.client.get(f'/api/items/{self.item.id}').data['status'], 'borrowed')

        response = self.client.put(f'/api/borrow-requests/{request_id}/approve')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['message'], 'Only pending requests can be approved')

        response = self.client.put(f'/api/borrow-requests/{request_id}/return')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'returned')
        self.assertEqual(self.client.get(f'/api/items/{self.item.id}').data['status'], 'available')

    def test_deny_by_buyer_is_forbidden(self):
        self._auth(self.buyer_token)
        request_id = self.client.post('/api/borrow-requests', self._payload(), format='json').data['id']

        response = self.client.put(f'/api/borrow-requests/{request_id}/deny')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error_code'], 'UNAUTHORIZED_REQUEST_ACCESS')

        self._auth(self.seller_token)
        response = self.client.put(f'/api/borrow-requests/{request_id}/deny')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'denied')

    def test_transition_missing_request(self):
        self._auth(self.seller_token)
        response = self.client.put('/api/borrow-requests/9999/approve')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error_code'], 'BORROW_REQUEST_NOT_FOUND')

    def test_request_listings(self):
        self._auth(self.buyer_token)
        self.client.post('/api/borrow-requests', self._payload(), format='json')

        response = self.client.get('/api/my-requests')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['item']['seller']['email'], 'seller@example.com')

        self._auth(self.seller_token)
        response = self.client.get('/api/my-items/requests')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['buyer']['email'], 'buyer@example.com')

    def test_listings_require_authentication(self):
        self.assertEqual(self.client.get('/api/my-requests').status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(self.client.get('/api/my-items/requests').status_code, status.HTTP_401_UNAUTHORIZED)
