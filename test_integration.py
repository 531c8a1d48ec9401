"""
Integration tests for the complete resource sharing workflow.
Tests the full happy path from registration and listing to the item's return.

Usage:
    # Run with Django test runner (recommended):
    python manage.py test test_integration
"""

import os
import django

# Setup Django environment before importing models
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'resource_sharing.settings')
django.setup()

from datetime import timedelta
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APITestCase
from rest_framework import status
from apps.borrowing.models import BorrowRequest
from apps.items.models import Item


class ResourceSharingIntegrationTest(APITestCase):
    """
    Complete integration test for the marketplace.
    Tests the full workflow: register -> list item -> browse -> request -> approve -> return
    """

    def setUp(self):
        cache.clear()
        self.today = timezone.now().replace(hour=0, minute=0, second=0, microsecond=0)

    def _register(self, email, name, role):
        response = self.client.post('/api/register', {
            'email': email,
            'password': 'testpass123',
            'name': name,
            'role': role
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data['token']

    def _as(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

    def _borrow(self, item_id, start_offset, days, message=''):
        start = self.today + timedelta(days=start_offset)
        return self.client.post('/api/borrow-requests', {
            'itemId': item_id,
            'startDate': start.isoformat(),
            'endDate': (start + timedelta(days=days)).isoformat(),
            'message': message
        }, format='json')

    def test_complete_borrowing_lifecycle(self):
        """Test the complete borrowing lifecycle"""

        # Step 1: Seller and two buyers sign up
        print("Step 1: Accounts register")
        seller_token = self._register('sarah@example.com', 'Sarah Seller', 'seller')
        buyer_token = self._register('ben@example.com', 'Ben Buyer', 'buyer')
        rival_token = self._register('rita@example.com', 'Rita Rival', 'buyer')
        print("✓ Registered one seller and two buyers")

        # Step 2: Seller lists an item
        print("\nStep 2: Seller lists an item")
        self._as(seller_token)
        response = self.client.post('/api/items', {
            'title': 'Pressure Washer',
            'description': '2000 PSI electric',
            'category': 'Tools',
            'location': 'Southside',
            'duration': 5
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        item_id = response.data['id']
        print(f"✓ Item listed with ID: {item_id}")

        # Step 3: Anyone can browse and filter
        print("\nStep 3: Browse with filters")
        self.client.credentials()
        response = self.client.get('/api/items', {'status': 'available', 'category': 'Tools', 'location': 'south'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([i['id'] for i in response.data], [item_id])
        self.assertEqual(self.client.get('/api/items/locations').data, ['Southside'])
        print(f"✓ Found {len(response.data)} matching item(s)")

        # Step 4: Both buyers request overlapping periods
        print("\nStep 4: Buyers file borrow requests")
        self._as(buyer_token)
        response = self._borrow(item_id, 1, 3, 'Cleaning the driveway')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        request_id = response.data['id']

        response = self._borrow(item_id, 1, 6)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self._as(rival_token)
        response = self._borrow(item_id, 2, 2)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        rival_request_id = response.data['id']
        print(f"✓ Requests {request_id} and {rival_request_id} pending")

        # Step 5: Seller sees incoming requests and approves one
        print("\nStep 5: Seller approves a request")
        self._as(seller_token)
        response = self.client.get('/api/my-items/requests')
        self.assertEqual(len(response.data), 2)

        response = self.client.put(f'/api/borrow-requests/{request_id}/approve')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'approved')
        self.assertEqual(BorrowRequest.objects.get(id=rival_request_id).status, BorrowRequest.DENIED)
        self.assertEqual(Item.objects.get(id=item_id).status, Item.BORROWED)
        print("✓ Request approved, overlapping request denied, item borrowed")

        # Step 6: The borrowed item drops out of the available listing
        print("\nStep 6: Item no longer available")
        response = self.client.get('/api/items', {'status': 'available'})
        self.assertEqual(response.data, [])

        self._as(rival_token)
        response = self._borrow(item_id, 10, 2)
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        print("✓ New requests rejected while lent out")

        # Step 7: Buyer sees the decision
        print("\nStep 7: Buyer checks their requests")
        self._as(buyer_token)
        response = self.client.get('/api/my-requests')
        self.assertEqual(response.data[0]['status'], 'approved')
        self.assertEqual(response.data[0]['item']['seller']['name'], 'Sarah Seller')

        # Step 8: Seller deletes are blocked until the item comes back
        print("\nStep 8: Item returned")
        self._as(seller_token)
        response = self.client.delete(f'/api/items/{item_id}')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        response = self.client.put(f'/api/borrow-requests/{request_id}/return')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'returned')
        self.assertEqual(self.client.get(f'/api/items/{item_id}').data['status'], 'available')

        response = self.client.delete(f'/api/items/{item_id}')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        print("✓ Item returned and removed")

        print("\nCOMPLETE BORROWING LIFECYCLE TEST PASSED")
