"""
Unit tests for authentication (services/auth.py, views/auth.py).

Tests:
- SessionAuth: token decoding, expiry, login/logout
- login_view: successful login, API rejection, next redirect
- logout_view
- profile_view
"""
import json
import time
from unittest import mock

import jwt
from django.test import SimpleTestCase, TestCase, Client
from django.urls import reverse

from storefront.entities import UserProfile
from storefront.services.api import ApiError
from storefront.services.auth import SESSION_TOKEN_KEY, SessionAuth, unwrap_token


def make_token(user=None, expires_in=3600):
    payload = {
        'User': user if user is not None else {'id': 'u1', 'name': 'Asha', 'email': 'asha@example.com'},
        'exp': int(time.time()) + expires_in,
    }
    return jwt.encode(payload, 'test-secret', algorithm='HS256')


class SessionAuthTests(SimpleTestCase):
    def test_anonymous(self):
        auth = SessionAuth({})
        self.assertFalse(auth.is_logged_in())
        self.assertIsNone(auth.user)
        self.assertIsNone(auth.get_user_id())

    def test_valid_token(self):
        auth = SessionAuth({SESSION_TOKEN_KEY: make_token()})
        self.assertTrue(auth.is_logged_in())
        self.assertEqual(auth.get_user_id(), 'u1')
        self.assertEqual(auth.user.display_name, 'Asha')

    def test_expired_token(self):
        auth = SessionAuth({SESSION_TOKEN_KEY: make_token(expires_in=-60)})
        self.assertFalse(auth.is_logged_in())

    def test_garbage_token(self):
        auth = SessionAuth({SESSION_TOKEN_KEY: 'not-a-jwt'})
        self.assertFalse(auth.is_logged_in())

    def test_token_without_user_claim(self):
        auth = SessionAuth({SESSION_TOKEN_KEY: make_token(user={})})
        self.assertTrue(auth.is_logged_in())
        self.assertIsNone(auth.get_user_id())

    def test_login_and_logout(self):
        session = {}
        auth = SessionAuth(session)
        auth.login(make_token())
        self.assertEqual(auth.get_user_id(), 'u1')
        auth.logout()
        self.assertNotIn(SESSION_TOKEN_KEY, session)
        self.assertFalse(auth.is_logged_in())

    def test_unwrap_token(self):
        self.assertEqual(unwrap_token(json.dumps({'token': 'abc'})), 'abc')
        self.assertEqual(unwrap_token(' abc '), 'abc')
        self.assertEqual(unwrap_token(None), '')


class AuthViewTests(TestCase):
    def setUp(self):
        self.client = Client()
        self.api = mock.Mock()
        patcher = mock.patch('storefront.views.auth.get_shop_api', return_value=self.api)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_login_page(self):
        response = self.client.get(reverse('login'))
        self.assertEqual(response.status_code, 200)
        self.assertIn('form', response.context)

    def test_login_success_redirects_to_next(self):
        self.api.login.return_value = make_token()
        response = self.client.post(reverse('login'), {
            'email': 'asha@example.com',
            'password': 'secret',
            'next': reverse('checkout'),
        })
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response['Location'], reverse('checkout'))
        self.assertTrue(self.client.session[SESSION_TOKEN_KEY])

    def test_login_ignores_external_next(self):
        self.api.login.return_value = make_token()
        response = self.client.post(reverse('login'), {
            'email': 'asha@example.com',
            'password': 'secret',
            'next': 'https://evil.example.com/',
        })
        self.assertRedirects(response, reverse('home'))

    def test_login_rejected(self):
        self.api.login.side_effect = ApiError("Invalid credentials", status_code=401)
        response = self.client.post(reverse('login'), {'email': 'asha@example.com', 'password': 'bad'})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Invalid credentials')
        self.assertNotIn(SESSION_TOKEN_KEY, self.client.session)

    def test_logout(self):
        session = self.client.session
        session[SESSION_TOKEN_KEY] = make_token()
        session.save()
        response = self.client.post(reverse('logout'))
        self.assertRedirects(response, reverse('home'))
        self.assertNotIn(SESSION_TOKEN_KEY, self.client.session)

    def test_profile_requires_login(self):
        response = self.client.get(reverse('profile'))
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response['Location'].startswith(reverse('login')))

    def test_profile(self):
        self.api.fetch_user_profile.return_value = UserProfile(user_id='u1', name='Asha', phone='9999999999')
        session = self.client.session
        session[SESSION_TOKEN_KEY] = make_token()
        session.save()
        response = self.client.get(reverse('profile'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, '9999999999')
