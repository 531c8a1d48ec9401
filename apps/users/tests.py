from django.test import TestCase
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APITestCase
from rest_framework import status
from rest_framework.authtoken.models import Token
from apps.common.exceptions import UserAlreadyExistsError, InvalidCredentialsError
from .services import UserService

User = get_user_model()


class UserModelTest(TestCase):
    def test_create_user(self):
        user = User.objects.create_user(
            username='test@example.com',
            email='test@example.com',
            password='testpass123',
            name='Test User',
            role=User.BUYER
        )
        self.assertEqual(user.email, 'test@example.com')
        self.assertEqual(user.name, 'Test User')
        self.assertTrue(user.is_buyer)
        self.assertFalse(user.is_seller)
        self.assertTrue(user.check_password('testpass123'))
        self.assertNotEqual(user.password, 'testpass123')


class UserServiceTest(TestCase):
    def setUp(self):
        self.service = UserService()

    def test_register_creates_user_and_token(self):
        result = self.service.register_user({
            'email': 'seller@example.com',
            'password': 'pass1234',
            'name': 'Sam Seller',
            'role': User.SELLER
        })
        self.assertEqual(result['user'].role, User.SELLER)
        self.assertEqual(Token.objects.get(user=result['user']).key, result['token'])

    def test_register_duplicate_email(self):
        data = {'email': 'dup@example.com', 'password': 'pass1234', 'name': 'Dup', 'role': User.BUYER}
        self.service.register_user(dict(data))
        with self.assertRaises(UserAlreadyExistsError):
            self.service.register_user(dict(data, email='DUP@example.com'))

    def test_authenticate_wrong_password(self):
        self.service.register_user({
            'email': 'buyer@example.com', 'password': 'pass1234', 'name': 'Bo', 'role': User.BUYER
        })
        with self.assertRaises(InvalidCredentialsError):
            self.service.authenticate_user('buyer@example.com', 'wrong')

    def test_authenticate_returns_same_token(self):
        registered = self.service.register_user({
            'email': 'buyer@example.com', 'password': 'pass1234', 'name': 'Bo', 'role': User.BUYER
        })
        first = self.service.authenticate_user('buyer@example.com', 'pass1234')
        second = self.service.authenticate_user('buyer@example.com', 'pass1234')
        self.assertEqual(first['token'], registered['token'])
        self.assertEqual(first['token'], second['token'])


class UserAPITest(APITestCase):
    def setUp(self):
        cache.clear()

    def test_user_registration(self):
        data = {
            'email': 'NewUser@Example.com',
            'password': 'newpass123',
            'name': 'John Doe',
            'role': 'buyer'
        }
        response = self.client.post('/api/register', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('token', response.data)
        self.assertEqual(response.data['user']['email'], 'newuser@example.com')
        self.assertEqual(response.data['user']['role'], 'buyer')
        self.assertNotIn('password', response.data['user'])
        self.assertIn('createdAt', response.data['user'])
        self.assertEqual(User.objects.count(), 1)

    def test_registration_missing_fields(self):
        response = self.client.post('/api/register', {'email': 'a@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['error_code'], 'VALIDATION_ERROR')
        self.assertEqual(response.data['message'], 'Email, password, and name are required')

    def test_registration_invalid_role(self):
        data = {'email': 'a@example.com', 'password': 'pass1234', 'name': 'A', 'role': 'admin'}
        response = self.client.post('/api/register', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], "Role must be either 'seller' or 'buyer'")

    def test_registration_duplicate_email(self):
        data = {'email': 'a@example.com', 'password': 'pass1234', 'name': 'A', 'role': 'seller'}
        self.client.post('/api/register', data, format='json')
        response = self.client.post('/api/register', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error_code'], 'USER_EXISTS')

    def test_user_login(self):
        User.objects.create_user(
            username='test@example.com',
            email='test@example.com',
            password='testpass123',
            name='Tess',
            role=User.SELLER
        )
        data = {'email': 'test@example.com', 'password': 'testpass123'}
        response = self.client.post('/api/login', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('token', response.data)
        self.assertEqual(response.data['user']['role'], 'seller')

    def test_login_invalid_credentials(self):
        data = {'email': 'nobody@example.com', 'password': 'whatever'}
        response = self.client.post('/api/login', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error_code'], 'INVALID_CREDENTIALS')
        self.assertEqual(response.data['message'], 'Invalid email or password')

    def test_me_with_bearer_token(self):
        user = User.objects.create_user(
            username='test@example.com',
            email='test@example.com',
            password='testpass123',
            name='Tess',
            role=User.BUYER
        )
        token = Token.objects.create(user=user)
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token.key}')

        response = self.client.get('/api/me')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], user.id)
        self.assertEqual(response.data['name'], 'Tess')

    def test_me_requires_authentication(self):
        response = self.client.get('/api/me')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_me_rejects_unknown_token(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-real-token')
        response = self.client.get('/api/me')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
