# apps/core/tests/test_auth.py

from datetime import timedelta

import jwt
from django.conf import settings
from django.test import TestCase
from django.utils import timezone

from apps.core.auth_service import AuthenticationFailed, auth_service, parse_duration
from apps.core.models import User

from .helpers import ApiClientMixin, make_user


class RegisterTestCase(ApiClientMixin, TestCase):
    """ Account registration. """

    url = '/api/auth/register'

    def test_register_returns_token_and_user(self):
        response = self.send_json('post', self.url, {
            'email': '  New.User@Example.com ',
            'password': 'secret123',
            'name': ' New User ',
        })

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['message'], 'User registered successfully')
        self.assertEqual(body['data']['user']['email'], 'new.user@example.com')
        self.assertEqual(body['data']['user']['name'], 'New User')
        self.assertNotIn('password', body['data']['user'])

        claims = auth_service.decode_token(body['data']['token'])
        self.assertEqual(claims['email'], 'new.user@example.com')
        self.assertEqual(claims['id'], body['data']['user']['id'])

    def test_password_is_hashed(self):
        self.send_json('post', self.url, {'email': 'a@example.com', 'password': 'secret123', 'name': 'A'})

        user = User.objects.get(email='a@example.com')
        self.assertNotEqual(user.password, 'secret123')
        self.assertTrue(user.check_password('secret123'))

    def test_duplicate_email_in_any_case_is_rejected(self):
        make_user(email='taken@example.com')

        response = self.send_json('post', self.url, {
            'email': 'TAKEN@example.com', 'password': 'secret123', 'name': 'Other',
        })

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json(), {
            'success': False,
            'message': 'User with this email already exists',
        })
        self.assertEqual(User.objects.count(), 1)

    def test_missing_fields(self):
        response = self.send_json('post', self.url, {'email': 'a@example.com', 'password': 'secret123'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Please provide email, password, and name')

    def test_short_password(self):
        response = self.send_json('post', self.url, {'email': 'a@example.com', 'password': '12345', 'name': 'A'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Password must be at least 6 characters')

    def test_invalid_email(self):
        response = self.send_json('post', self.url, {'email': 'not-an-email', 'password': 'secret123', 'name': 'A'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Please provide a valid email')

    def test_non_string_values_are_rejected(self):
        response = self.send_json('post', self.url, {'email': ['x@y.co'], 'password': 'secret1', 'name': 'X'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Please provide a valid email')

        response = self.send_json('post', self.url, {'email': 'x@y.co', 'password': 1234567, 'name': 'X'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Password must be a string')
        self.assertFalse(User.objects.exists())

    def test_invalid_json(self):
        response = self.send_json('post', self.url, '{"email": ')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'success': False, 'message': 'Invalid JSON body'})

    def test_get_not_allowed(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 405)
        self.assertFalse(response.json()['success'])
        self.assertEqual(response['Allow'], 'POST')


class LoginTestCase(ApiClientMixin, TestCase):
    """ Login with email and password. """

    url = '/api/auth/login'

    def setUp(self) -> None:
        self.user = make_user(email='john@example.com', password='secret123', name='John')

    def test_login_success(self):
        response = self.send_json('post', self.url, {'email': 'JOHN@example.com', 'password': 'secret123'})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['message'], 'Login successful')
        self.assertEqual(body['data']['user'], {'id': str(self.user.pk), 'email': 'john@example.com', 'name': 'John'})
        self.assertEqual(auth_service.decode_token(body['data']['token'])['id'], str(self.user.pk))

        self.user.refresh_from_db()
        self.assertIsNotNone(self.user.last_login)

    def test_wrong_password(self):
        response = self.send_json('post', self.url, {'email': 'john@example.com', 'password': 'wrong-password'})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['message'], 'Invalid credentials')

    def test_unknown_email_gives_same_answer(self):
        response = self.send_json('post', self.url, {'email': 'nobody@example.com', 'password': 'secret123'})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['message'], 'Invalid credentials')

    def test_missing_credentials(self):
        response = self.send_json('post', self.url, {'email': 'john@example.com'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Please provide email and password')


class MeTestCase(ApiClientMixin, TestCase):
    """ Current user endpoint. """

    url = '/api/auth/me'

    def setUp(self) -> None:
        self.user = make_user()

    def test_me(self):
        response = self.get_json(self.url, user=self.user)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['data']['user']['email'], self.user.email)
        self.assertEqual(response['X-Authenticated-User'], str(self.user.pk))

    def test_without_token(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {'success': False, 'message': 'Unauthorized'})

    def test_malformed_header(self):
        response = self.client.get(self.url, HTTP_AUTHORIZATION='Token abc')

        self.assertEqual(response.status_code, 401)

    def test_tampered_token(self):
        token = auth_service.issue_token(self.user) + 'x'

        response = self.client.get(self.url, HTTP_AUTHORIZATION=f'Bearer {token}')

        self.assertEqual(response.status_code, 401)

    def test_expired_token(self):
        past = timezone.now() - timedelta(hours=2)
        token = jwt.encode(
            {'id': str(self.user.pk), 'email': self.user.email, 'iat': past, 'exp': past + timedelta(hours=1)},
            settings.JWT_SECRET,
            algorithm='HS256',
        )

        response = self.client.get(self.url, HTTP_AUTHORIZATION=f'Bearer {token}')

        self.assertEqual(response.status_code, 401)

    def test_deleted_user(self):
        headers = self.auth_headers(self.user)
        self.user.delete()

        response = self.client.get(self.url, **headers)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['message'], 'User not found')


class AuthServiceTestCase(TestCase):
    """ Token helpers. """

    def test_parse_duration(self):
        self.assertEqual(parse_duration('7d'), timedelta(days=7))
        self.assertEqual(parse_duration('12h'), timedelta(hours=12))
        self.assertEqual(parse_duration('30m'), timedelta(minutes=30))
        self.assertEqual(parse_duration('3600'), timedelta(seconds=3600))

    def test_token_signed_with_other_secret_is_rejected(self):
        user = make_user()
        token = jwt.encode({'id': str(user.pk), 'exp': timezone.now() + timedelta(hours=1)}, 'other', algorithm='HS256')

        with self.assertRaises(AuthenticationFailed):
            auth_service.decode_token(token)

    def test_claims_without_valid_id(self):
        self.assertIsNone(auth_service.user_from_claims({'id': 'not-a-uuid'}))
        self.assertIsNone(auth_service.user_from_claims(None))
