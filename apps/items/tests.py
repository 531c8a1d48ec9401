from datetime import timedelta
from django.test import TestCase
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APITestCase
from rest_framework import status
from rest_framework.authtoken.models import Token
from apps.borrowing.models import BorrowRequest
from apps.common.cache_utils import ItemCache
from apps.common.exceptions import (
    RolePermissionError, ItemNotFoundError, UnauthorizedItemAccessError, InvalidItemStateError
)
from .models import Item, CATEGORIES
from .services import ItemService

User = get_user_model()


def make_user(email, role, name='Test User'):
    return User.objects.create_user(username=email, email=email, password='testpass123', name=name, role=role)


class ItemModelTest(TestCase):
    def test_defaults(self):
        seller = make_user('seller@example.com', User.SELLER)
        item = Item.objects.create(seller=seller, title='Drill', category='Tools')
        self.assertEqual(item.status, Item.AVAILABLE)
        self.assertEqual(item.duration, 7)
        self.assertTrue(item.is_available)


class ItemServiceTest(TestCase):
    def setUp(self):
        cache.clear()
        self.service = ItemService()
        self.seller = make_user('seller@example.com', User.SELLER)
        self.other_seller = make_user('other@example.com', User.SELLER)
        self.buyer = make_user('buyer@example.com', User.BUYER)

    def _create(self, **overrides):
        data = {
            'title': 'Cordless Drill',
            'description': '18V with two batteries',
            'category': 'Tools',
            'image_url': '',
            'location': 'Downtown',
            'duration': 5
        }
        data.update(overrides)
        return self.service.create_item(self.seller, data)

    def test_create_item(self):
        item = self._create()
        self.assertEqual(item.seller, self.seller)
        self.assertEqual(item.status, Item.AVAILABLE)
        self.assertEqual(item.duration, 5)

    def test_buyer_cannot_create_item(self):
        with self.assertRaises(RolePermissionError):
            self.service.create_item(self.buyer, {'title': 'X', 'category': 'Tools', 'duration': 3})

    def test_filter_items(self):
        self._create(title='Drill', category='Tools', location='Downtown')
        self._create(title='Novel', category='Books', location='Westside')
        borrowed = self._create(title='Tent', category='Outdoor', location='downtown east')
        borrowed.status = Item.BORROWED
        borrowed.save()

        self.assertEqual([i.title for i in self.service.list_items(category='Books')], ['Novel'])
        self.assertEqual(
            [i.title for i in self.service.list_items(location='DOWNTOWN')],
            ['Tent', 'Drill']
        )
        self.assertEqual(
            [i.title for i in self.service.list_items(status=Item.AVAILABLE)],
            ['Novel', 'Drill']
        )

    def test_get_missing_item(self):
        with self.assertRaises(ItemNotFoundError):
            self.service.get_item(9999)

    def test_get_item_is_cached_and_invalidated_on_save(self):
        item = self._create()
        self.service.get_item(item.id)
        self.assertIsNotNone(ItemCache.get_item_detail(item.id))

        item.title = 'Hammer Drill'
        item.save()
        self.assertIsNone(ItemCache.get_item_detail(item.id))
        self.assertEqual(self.service.get_item(item.id).title, 'Hammer Drill')

    def test_update_item_owner_only(self):
        item = self._create()
        with self.assertRaises(UnauthorizedItemAccessError):
            self.service.update_item(item.id, self.other_seller, {'title': 'Mine now'})

        updated = self.service.update_item(item.id, self.seller, {'title': 'Impact Drill', 'duration': 3})
        self.assertEqual(updated.title, 'Impact Drill')
        self.assertEqual(updated.duration, 3)

    def test_delete_item(self):
        item = self._create()
        self.service.delete_item(item.id, self.seller)
        self.assertFalse(Item.objects.filter(id=item.id).exists())

    def test_delete_lent_out_item(self):
        item = self._create()
        now = timezone.now()
        BorrowRequest.objects.create(
            item=item, buyer=self.buyer, status=BorrowRequest.APPROVED,
            start_date=now, end_date=now + timedelta(days=2)
        )
        with self.assertRaises(InvalidItemStateError):
            self.service.delete_item(item.id, self.seller)

    def test_items_by_seller_requires_seller(self):
        self._create()
        self.assertEqual(len(self.service.get_items_by_seller(self.seller)), 1)
        self.assertEqual(len(self.service.get_items_by_seller(self.other_seller)), 0)
        with self.assertRaises(RolePermissionError):
            self.service.get_items_by_seller(self.buyer)

    def test_locations_refresh_after_new_item(self):
        self._create(location='Westside')
        self.assertEqual(self.service.get_locations(), ['Westside'])
        self._create(location='Downtown')
        self._create(location='')
        self.assertEqual(self.service.get_locations(), ['Downtown', 'Westside'])


class ItemAPITest(APITestCase):
    def setUp(self):
        cache.clear()
        self.seller = make_user('seller@example.com', User.SELLER, name='Sam Seller')
        self.buyer = make_user('buyer@example.com', User.BUYER)
        self.seller_token = Token.objects.create(user=self.seller)
        self.buyer_token = Token.objects.create(user=self.buyer)
        self.item_data = {
            'title': 'Camping Tent',
            'description': 'Sleeps four',
            'category': 'Outdoor',
            'imageUrl': 'https://example.com/tent.jpg',
            'location': 'Northside',
            'duration': 10
        }

    def _auth(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token.key}')

    def test_create_item(self):
        self._auth(self.seller_token)
        response = self.client.post('/api/items', self.item_data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'available')
        self.assertEqual(response.data['imageUrl'], 'https://example.com/tent.jpg')
        self.assertEqual(response.data['sellerId'], self.seller.id)
        self.assertEqual(response.data['seller']['name'], 'Sam Seller')

    def test_create_item_as_buyer(self):
        self._auth(self.buyer_token)
        response = self.client.post('/api/items', self.item_data, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error_code'], 'ROLE_PERMISSION_ERROR')

    def test_create_item_requires_authentication(self):
        response = self.client.post('/api/items', self.item_data, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_item_missing_fields(self):
        self._auth(self.seller_token)
        response = self.client.post('/api/items', {'description': 'no title'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Title, category, and duration are required')

    def test_create_item_zero_duration(self):
        self._auth(self.seller_token)
        response = self.client.post('/api/items', dict(self.item_data, duration=0), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Duration must be at least 1 day')

    def test_create_item_long_duration(self):
        self._auth(self.seller_token)
        response = self.client.post('/api/items', dict(self.item_data, duration=400), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['duration'], 400)

    def test_public_reads_ignore_stale_token(self):
        item = Item.objects.create(seller=self.seller, title='Drill', category='Tools', location='Downtown')
        self.client.credentials(HTTP_AUTHORIZATION='Bearer deadbeef')

        for url in ['/api/items', f'/api/items/{item.id}', '/api/items/categories', '/api/items/locations']:
            with self.subTest(url=url):
                self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)

        response = self.client.post('/api/items', self.item_data, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        response = self.client.delete(f'/api/items/{item.id}')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_items_is_public(self):
        Item.objects.create(seller=self.seller, title='Drill', category='Tools', location='Downtown')
        Item.objects.create(seller=self.seller, title='Book', category='Books', status=Item.BORROWED)

        response = self.client.get('/api/items')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

        response = self.client.get('/api/items', {'status': 'available', 'location': 'down'})
        self.assertEqual([i['title'] for i in response.data], ['Drill'])

    def test_list_items_unknown_status(self):
        Item.objects.create(seller=self.seller, title='Drill', category='Tools')
        response = self.client.get('/api/items', {'status': 'lost'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_get_item(self):
        item = Item.objects.create(seller=self.seller, title='Drill', category='Tools')
        response = self.client.get(f'/api/items/{item.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['title'], 'Drill')

        response = self.client.get('/api/items/9999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error_code'], 'ITEM_NOT_FOUND')

    def test_update_item(self):
        item = Item.objects.create(seller=self.seller, title='Drill', category='Tools')
        self._auth(self.seller_token)
        response = self.client.put(f'/api/items/{item.id}', self.item_data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['title'], 'Camping Tent')
        self.assertEqual(response.data['duration'], 10)

    def test_update_item_not_owner(self):
        other = make_user('other@example.com', User.SELLER)
        item = Item.objects.create(seller=other, title='Drill', category='Tools')
        self._auth(self.seller_token)
        response = self.client.put(f'/api/items/{item.id}', self.item_data, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error_code'], 'UNAUTHORIZED_ITEM_ACCESS')

    def test_delete_item(self):
        item = Item.objects.create(seller=self.seller, title='Drill', category='Tools')
        self._auth(self.seller_token)
        response = self.client.delete(f'/api/items/{item.id}')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Item.objects.filter(id=item.id).exists())

    def test_my_items(self):
        Item.objects.create(seller=self.seller, title='Drill', category='Tools')
        self._auth(self.seller_token)
        response = self.client.get('/api/my-items')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

        self._auth(self.buyer_token)
        response = self.client.get('/api/my-items')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_categories(self):
        response = self.client.get('/api/items/categories')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, CATEGORIES)

    def test_locations(self):
        Item.objects.create(seller=self.seller, title='Drill', category='Tools', location='Westside')
        Item.objects.create(seller=self.seller, title='Saw', category='Tools', location='Downtown')
        Item.objects.create(seller=self.seller, title='Tent', category='Outdoor', location='Westside')
        response = self.client.get('/api/items/locations')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, ['Downtown', 'Westside'])
