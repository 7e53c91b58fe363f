"""
Tests for accounts: password hashing, login and user CRUD.
"""
from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import Account
from accounts.services import authenticate, INVALID_CREDENTIALS, ACCOUNT_INACTIVE
from core.result import ErrorKind


class AuthenticateTestCase(TestCase):

    def setUp(self):
        self.account = Account(email='shop@example.com', business_name='Shop')
        self.account.set_password('secret123')
        self.account.save()

    def test_password_is_hashed(self):
        self.assertNotEqual(self.account.password_hash, 'secret123')
        self.assertTrue(self.account.check_password('secret123'))
        self.assertFalse(self.account.check_password('wrong'))

    def test_valid_credentials(self):
        result = authenticate('shop@example.com', 'secret123')

        self.assertTrue(result.ok)
        self.assertEqual(result.data, self.account)

    def test_email_match_is_case_insensitive(self):
        self.assertTrue(authenticate('Shop@Example.com', 'secret123').ok)

    def test_wrong_password_and_unknown_email_share_message(self):
        wrong_password = authenticate('shop@example.com', 'nope')
        unknown = authenticate('ghost@example.com', 'secret123')

        self.assertEqual(wrong_password.kind, ErrorKind.AUTHENTICATION)
        self.assertEqual(wrong_password.message, INVALID_CREDENTIALS)
        self.assertEqual(unknown.message, INVALID_CREDENTIALS)

    def test_inactive_account(self):
        self.account.is_active = False
        self.account.save()

        result = authenticate('shop@example.com', 'secret123')

        self.assertEqual(result.message, ACCOUNT_INACTIVE)


class AccountApiTestCase(TestCase):

    def setUp(self):
        self.client = APIClient()

    def create(self, **overrides):
        body = {
            'email': 'new@example.com',
            'password': 'secret123',
            'business_name': 'New Garage',
            **overrides,
        }
        return self.client.post('/api/users', body, format='json').json()

    def test_create_hides_password(self):
        body = self.create()

        self.assertIsNone(body['error'])
        self.assertEqual(body['data']['role'], 'user')
        self.assertNotIn('password', body['data'])
        self.assertNotIn('password_hash', body['data'])
        self.assertTrue(Account.objects.get(email='new@example.com').check_password('secret123'))

    def test_create_requires_password(self):
        body = self.client.post('/api/users', {'email': 'a@example.com'}, format='json').json()

        self.assertIsNone(body['data'])
        self.assertIn('password', body['error'])

    def test_duplicate_email_rejected(self):
        self.create()
        body = self.create()

        self.assertIsNone(body['data'])
        self.assertIn('email', body['error'])

    def test_patch_rehashes_password(self):
        account_id = self.create()['data']['id']

        body = self.client.patch(
            f'/api/users/{account_id}',
            {'password': 'another456', 'is_active': False},
            format='json'
        ).json()

        self.assertFalse(body['data']['is_active'])
        account = Account.objects.get(id=account_id)
        self.assertTrue(account.check_password('another456'))

    def test_delete(self):
        account_id = self.create()['data']['id']

        response = self.client.delete(f'/api/users/{account_id}')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'data': {'success': True}, 'error': None})
        self.assertFalse(Account.objects.filter(id=account_id).exists())

    def test_login_endpoint(self):
        self.create()

        ok = self.client.post(
            '/api/auth/login', {'email': 'new@example.com', 'password': 'secret123'}, format='json'
        ).json()
        bad = self.client.post(
            '/api/auth/login', {'email': 'new@example.com', 'password': 'wrong'}, format='json'
        ).json()

        self.assertEqual(ok['data']['email'], 'new@example.com')
        self.assertIsNone(ok['error'])
        self.assertEqual(bad, {'data': None, 'error': INVALID_CREDENTIALS})
