"""
Test for the user API
"""

from django.test import TestCase
from django.contrib.auth import get_user_model
from django.urls import reverse

from rest_framework.test import APIClient
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken

from core.models import User

TOKEN_URL = reverse("user:token")

TOKEN_REFRESH_URL = reverse("user:token_refresh")

ME_URL = reverse("user:me")


def create_user(**params):
    """Create and return new user"""
    return get_user_model().objects.create_user(**params)


class PublicCustomUserTests(TestCase):
    """Test the user API (public)"""

    def setUp(self):
        self.client = APIClient()

    def test_create_token(self):
        """Test creating a new token"""
        user_data = {
            "email": "test@example.com",
            "password": "testpass123",
            "name": "Test Name",
        }
        create_user(**user_data)

        payload = {
            'email': user_data["email"],
            "password": user_data["password"],
        }
        res = self.client.post(TOKEN_URL, payload)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIn('refresh', res.data)
        self.assertIn('access', res.data)
        self.assertEqual(res.data['user'], user_data['email'])
        self.assertEqual(res.data['role'], User.ROLE_ASESOR)

    def test_token_carries_role_claim(self):
        """Test the access token includes the user role"""
        create_user(email="admin@example.com", password="testpass123", role=User.ROLE_ADMIN)

        res = self.client.post(TOKEN_URL, {"email": "admin@example.com", "password": "testpass123"})

        token = AccessToken(res.data['access'])
        self.assertEqual(token['role'], User.ROLE_ADMIN)

    def test_refresh_token(self):
        create_user(email="test@example.com", password="testpass123")
        res = self.client.post(TOKEN_URL, {"email": "test@example.com", "password": "testpass123"})

        refresh = self.client.post(TOKEN_REFRESH_URL, {"refresh": res.data['refresh']})

        self.assertEqual(refresh.status_code, status.HTTP_200_OK)
        self.assertIn('access', refresh.data)

    def test_create_token_invalid_credentials(self):
        """Test that token is invalid"""
        create_user(email="test@example.com", password="goodPassword", name="Test Name")

        payload = {
            "email": "test@example.com",
            "password": "wrongpassword",
        }
        res = self.client.post(TOKEN_URL, payload)
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertNotIn('refresh', res.data)
        self.assertNotIn('access', res.data)

    def test_create_token_inactive_user(self):
        """Test that inactive users do not get a token"""
        create_user(email="test@example.com", password="testpass123", is_active=False)

        res = self.client.post(TOKEN_URL, {"email": "test@example.com", "password": "testpass123"})

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertNotIn('access', res.data)

    def test_create_token_no_password(self):
        """Test that token is not created"""
        payload = {
            "email": "test@example.com",
            "password": "",
        }
        res = self.client.post(TOKEN_URL, payload)
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertNotIn('access', res.data)

    def test_retrieve_user_unauthorised(self):
        """Test authentication is required for users"""
        res = self.client.get(ME_URL)
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)


class PrivateUserApiTests(TestCase):
    """Test API requests that require authentication"""

    def setUp(self):
        self.user = create_user(
            email="test@example.com",
            password="testpass123",
            name="Test Name",
            role=User.ROLE_REVISOR,
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_retrieve_profile_success(self):
        """Test retrieving profile for logged in user"""
        res = self.client.get(ME_URL)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data['email'], self.user.email)
        self.assertEqual(res.data['name'], self.user.name)
        self.assertEqual(res.data['role'], User.ROLE_REVISOR)
        self.assertNotIn('password', res.data)
