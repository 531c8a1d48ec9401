"""
Tests for the marketplace_client package.

The unit tests run against a mocked requests.Session; the end-to-end test
drives the real API through Django's live server.

Usage:
    python manage.py test test_client
"""

import json
import os
import tempfile
import django

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'resource_sharing.settings')
django.setup()

from datetime import date, datetime, timedelta, timezone
from unittest import mock
import requests
from django.core.cache import cache
from django.test import LiveServerTestCase, SimpleTestCase
from marketplace_client import (
    ALL_CATEGORIES, ALL_LOCATIONS, ApiClient, ApiConnectionError, ApiError, AuthSession,
    BorrowForm, BorrowRequest, FileTokenStore, FormValidationError, Item, ItemForm,
    MarketplaceClient, MemoryTokenStore, RoleError, SearchFilters, UnauthorizedError, User,
    describe_status
)
from marketplace_client.filters import DEFAULT_LOCATIONS, location_options


def make_response(status_code, body=None):
    response = requests.Response()
    response.status_code = status_code
    response.reason = 'Reason'
    response._content = json.dumps(body).encode() if body is not None else b''
    return response


class SearchFiltersTest(SimpleTestCase):
    def test_catch_all_choices_are_omitted(self):
        filters = SearchFilters(category=ALL_CATEGORIES, location=ALL_LOCATIONS)
        self.assertEqual(filters.apply(), {})
        self.assertFalse(filters.is_active)

    def test_apply_and_reset(self):
        filters = SearchFilters()
        filters.set('category', 'Tools')
        filters.set('location', 'Downtown')
        self.assertEqual(filters.apply(), {'category': 'Tools', 'location': 'Downtown'})
        self.assertEqual(filters.query_string(), 'category=Tools&location=Downtown')

        filters.reset()
        self.assertEqual(filters.apply(), {})

    def test_from_query(self):
        filters = SearchFilters.from_query({'category': 'Books'})
        self.assertEqual(filters.category, 'Books')
        self.assertEqual(filters.location, '')

    def test_unknown_filter(self):
        with self.assertRaises(ValueError):
            SearchFilters().set('colour', 'red')

    def test_location_options_fall_back(self):
        self.assertEqual(location_options([]), [ALL_LOCATIONS] + DEFAULT_LOCATIONS)
        self.assertEqual(location_options(['Harbor']), [ALL_LOCATIONS, 'Harbor'])


class BorrowFormTest(SimpleTestCase):
    def test_defaults_from_item(self):
        item = Item(id=3, duration=5)
        form = BorrowForm.for_item(item, today=date(2024, 3, 1))
        self.assertEqual(form.start_date, date(2024, 3, 1))
        self.assertEqual(form.end_date, date(2024, 3, 6))

    def test_default_duration_when_unset(self):
        form = BorrowForm(item_id=3, duration=0, start_date=date(2024, 3, 1))
        self.assertEqual(form.end_date, date(2024, 3, 8))

    def test_missing_item_id(self):
        form = BorrowForm.for_item(Item())
        with self.assertRaises(FormValidationError) as ctx:
            form.validate()
        self.assertIn('Invalid item data. Missing item ID.', ctx.exception.errors)

    def test_start_after_end(self):
        form = BorrowForm(item_id=1, start_date=date(2024, 3, 5), end_date=date(2024, 3, 1))
        self.assertEqual(form.errors(), ['Start date must be before end date'])

    def test_period_too_long(self):
        form = BorrowForm(item_id=1, duration=2, start_date=date(2024, 3, 1), end_date=date(2024, 3, 4))
        self.assertEqual(form.errors(), ['Borrow period cannot exceed 2 days for this item'])

    def test_payload(self):
        form = BorrowForm(item_id=9, start_date=date(2024, 3, 1), end_date=date(2024, 3, 3), message='hi')
        self.assertEqual(form.to_payload(), {
            'itemId': 9,
            'startDate': '2024-03-01T00:00:00Z',
            'endDate': '2024-03-03T00:00:00Z',
            'message': 'hi'
        })


class ItemFormTest(SimpleTestCase):
    def test_validation(self):
        form = ItemForm(title='  ', category='Spaceships', duration=0)
        self.assertEqual(form.errors(), [
            'Title is required',
            'Unknown category: Spaceships',
            'Duration must be at least 1 day',
        ])

    def test_payload(self):
        form = ItemForm(title=' Drill ', category='Tools', image_url='http://img', location='Downtown')
        self.assertEqual(form.to_payload(), {
            'title': 'Drill',
            'description': '',
            'category': 'Tools',
            'imageUrl': 'http://img',
            'location': 'Downtown',
            'duration': 7,
        })


class ModelsTest(SimpleTestCase):
    def test_item_accepts_capitalised_keys(self):
        item = Item.from_json({
            'ID': 4, 'Title': 'Kayak', 'ImageURL': 'http://kayak', 'SellerID': 2,
            'Seller': {'ID': 2, 'Name': 'Sam'}, 'CreatedAt': '2024-01-02T03:04:05Z'
        })
        self.assertEqual(item.id, 4)
        self.assertEqual(item.image_url, 'http://kayak')
        self.assertEqual(item.seller.name, 'Sam')
        self.assertEqual(item.created_at, datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))

    def test_item_defaults(self):
        item = Item.from_json({'id': 1, 'title': 'Saw'})
        self.assertEqual(item.status, 'available')
        self.assertEqual(item.duration, 7)
        self.assertEqual(item.seller.name, 'Unknown')
        self.assertTrue(item.is_available)

    def test_borrow_request(self):
        borrow_request = BorrowRequest.from_json({
            'id': 8, 'itemId': 4, 'status': 'pending',
            'startDate': '2024-03-01T00:00:00Z', 'endDate': '2024-03-03T00:00:00+00:00',
            'item': {'id': 4, 'title': 'Kayak'}, 'buyer': {'id': 5, 'role': 'buyer'}
        })
        self.assertEqual(borrow_request.item.title, 'Kayak')
        self.assertTrue(borrow_request.buyer.is_buyer)
        self.assertEqual(borrow_request.end_date - borrow_request.start_date, timedelta(days=2))
        self.assertEqual(borrow_request.description, 'Your request is pending approval from the owner.')

    def test_describe_status(self):
        self.assertEqual(describe_status('denied'), 'Your request has been denied by the owner.')
        self.assertEqual(describe_status('lost'), 'Unknown status')


class TokenStoreTest(SimpleTestCase):
    def test_file_token_store(self):
        with tempfile.TemporaryDirectory() as tmp:
            store = FileTokenStore(os.path.join(tmp, 'nested', 'token.json'))
            self.assertIsNone(store.get())
            store.set('abc123')
            self.assertEqual(FileTokenStore(store.path).get(), 'abc123')
            store.clear()
            self.assertIsNone(store.get())
            store.clear()

    def test_token_file_is_owner_only(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'token.json')
            with open(path, 'w') as fh:
                fh.write('{}')
            os.chmod(path, 0o644)

            FileTokenStore(path).set('abc123')
            self.assertEqual(os.stat(path).st_mode & 0o777, 0o600)

            os.remove(path)
            FileTokenStore(path).set('def456')
            self.assertEqual(os.stat(path).st_mode & 0o777, 0o600)
            self.assertEqual(FileTokenStore(path).get(), 'def456')


class ApiClientTest(SimpleTestCase):
    def setUp(self):
        self.session = mock.MagicMock()
        self.store = MemoryTokenStore('tok')
        self.api = ApiClient('http://api.test/', token_store=self.store, session=self.session)

    def test_bearer_token_is_sent(self):
        self.session.request.return_value = make_response(200, [{'id': 1}])

        self.assertEqual(self.api.get('/api/items', params={'status': 'available'}), [{'id': 1}])
        self.session.request.assert_called_once_with(
            'GET', 'http://api.test/api/items', params={'status': 'available'}, json=None,
            headers={'Authorization': 'Bearer tok'}, timeout=10
        )

    def test_no_token(self):
        self.store.clear()
        self.session.request.return_value = make_response(200, [])
        self.api.get('/api/items')
        self.assertEqual(self.session.request.call_args[1]['headers'], {})

    def test_unauthorized_clears_token(self):
        self.session.request.return_value = make_response(401, {'message': 'Invalid token.'})
        with self.assertRaises(UnauthorizedError):
            self.api.get('/api/me')
        self.assertIsNone(self.store.get())

    def test_error_envelope(self):
        self.session.request.return_value = make_response(409, {
            'success': False, 'error_code': 'INVALID_ITEM_STATE',
            'message': 'Item is not available for borrowing', 'details': None
        })
        with self.assertRaises(ApiError) as ctx:
            self.api.post('/api/borrow-requests', json={})
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(ctx.exception.error_code, 'INVALID_ITEM_STATE')
        self.assertEqual(ctx.exception.message, 'Item is not available for borrowing')
        self.assertEqual(self.store.get(), 'tok')

    def test_no_content(self):
        self.session.request.return_value = make_response(204)
        self.assertIsNone(self.api.delete('/api/items/1'))

    def test_connection_error(self):
        self.session.request.side_effect = requests.ConnectionError('refused')
        with self.assertRaises(ApiConnectionError):
            self.api.get('/api/items')


class AuthSessionTest(SimpleTestCase):
    def test_restore_drops_rejected_token(self):
        api = mock.MagicMock()
        api.token_store = MemoryTokenStore('stale')
        api.get.side_effect = UnauthorizedError('Invalid token.', status_code=401)

        session = AuthSession(api)
        self.assertIsNone(session.restore())
        self.assertIsNone(api.token_store.get())
        self.assertFalse(session.is_loading)

    def test_restore_without_token(self):
        api = mock.MagicMock()
        api.token_store = MemoryTokenStore()
        self.assertIsNone(AuthSession(api).restore())
        api.get.assert_not_called()

    def test_role_checks_happen_before_any_request(self):
        api = mock.MagicMock()
        session = AuthSession(api)
        session.user = User(id=1, role='buyer')
        client = MarketplaceClient(api=api, session=session)

        with self.assertRaises(RoleError):
            client.create_item(ItemForm(title='Drill', category='Tools'))
        with self.assertRaises(RoleError):
            client.approve(1)
        api.post.assert_not_called()
        api.put.assert_not_called()


class ClientEndToEndTest(LiveServerTestCase):
    """Drives the whole borrowing flow through the client against a live server"""

    def setUp(self):
        cache.clear()

    def _client(self):
        return MarketplaceClient(api=ApiClient(self.live_server_url, token_store=MemoryTokenStore()))

    def test_browse_with_expired_token(self):
        seller = self._client()
        seller.session.register('lender@example.com', 'testpass123', 'Lee Lender', 'seller')
        seller.create_item(ItemForm(title='Canoe', category='Outdoor', location='Lakeside'))

        visitor = MarketplaceClient(api=ApiClient(self.live_server_url, token_store=MemoryTokenStore('expired')))
        self.assertEqual([i.title for i in visitor.browse()], ['Canoe'])
        self.assertEqual(visitor.location_options(), [ALL_LOCATIONS, 'Lakeside'])
        self.assertIn('Outdoor', visitor.categories())

    def test_borrowing_flow(self):
        seller = self._client()
        seller.session.register('owner@example.com', 'testpass123', 'Olive Owner', 'seller')
        self.assertTrue(seller.session.is_seller)

        item = seller.create_item(ItemForm(
            title='Sewing Machine', category='Other', location='Harbor', duration=3
        ))
        self.assertEqual(item.seller.name, 'Olive Owner')
        self.assertEqual(seller.location_options(), [ALL_LOCATIONS, 'Harbor'])

        buyer = self._client()
        buyer.session.register('borrower@example.com', 'testpass123', 'Bea Borrower', 'buyer')

        listed = buyer.browse(SearchFilters(category='Other', location=ALL_LOCATIONS))
        self.assertEqual([i.id for i in listed], [item.id])
        self.assertEqual(buyer.browse(SearchFilters(category='Books')), [])

        too_long = BorrowForm(item_id=item.id, duration=10, start_date=date.today() + timedelta(days=1))
        with self.assertRaises(ApiError) as ctx:
            buyer.request_borrow(too_long)
        self.assertEqual(ctx.exception.status_code, 400)

        form = BorrowForm.for_item(listed[0], today=date.today() + timedelta(days=1), message='Hemming curtains')
        borrow_request = buyer.request_borrow(form)
        self.assertTrue(borrow_request.is_pending)

        incoming = seller.incoming_requests()
        self.assertEqual(incoming[0].buyer.name, 'Bea Borrower')
        self.assertEqual(seller.approve(borrow_request.id).status, 'approved')
        self.assertEqual(buyer.browse(), [])

        self.assertEqual(buyer.my_requests()[0].description,
                         'Your request has been approved! You can now borrow this item.')

        seller.mark_returned(borrow_request.id)
        self.assertTrue(seller.item(item.id).is_available)

        # A fresh session restores from the stored token
        restored = AuthSession(buyer.api)
        self.assertEqual(restored.restore().email, 'borrower@example.com')

        buyer.session.logout()
        with self.assertRaises(RoleError):
            buyer.my_requests()
