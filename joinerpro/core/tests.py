"""
Test suite for the Core module
Tests: authentication, create_admin command, localized decimals, error handler, audit log
"""
from decimal import Decimal
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import IntegrityError
from django.db.models import ProtectedError
from django.test import TestCase
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from joinerpro.core.exceptions import AlreadySettledError, joinerpro_exception_handler
from joinerpro.core.fields import LocalizedDecimalField, parse_localized_decimal
from joinerpro.core.models import AuditLog
from joinerpro.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from joinerpro.core.utils import create_audit_log

User = get_user_model()


class LocalizedDecimalTests(TestCase):
    """Test parsing of numbers typed into forms"""

    def test_plain_and_brazilian_notation(self):
        self.assertEqual(parse_localized_decimal('1234.56'), Decimal('1234.56'))
        self.assertEqual(parse_localized_decimal('1.234,56'), Decimal('1234.56'))
        self.assertEqual(parse_localized_decimal('10,5'), Decimal('10.5'))
        self.assertEqual(parse_localized_decimal(' 2.500.000,00 '), Decimal('2500000.00'))

    def test_numbers_pass_through(self):
        self.assertEqual(parse_localized_decimal(7), Decimal('7'))
        self.assertEqual(parse_localized_decimal(0.1), Decimal('0.1'))
        self.assertEqual(parse_localized_decimal(Decimal('3.30')), Decimal('3.30'))

    def test_rejects_garbage(self):
        """Test malformed input is rejected instead of becoming zero"""
        for value in ('', 'abc', '1,2,3', '12.34,5.6', 'NaN', None, True, [1]):
            with self.assertRaises(ValueError, msg=repr(value)):
                parse_localized_decimal(value)

    def test_serializer_field(self):
        field = LocalizedDecimalField(max_digits=12, decimal_places=2)
        self.assertEqual(field.to_internal_value('1.234,50'), Decimal('1234.50'))
        with self.assertRaises(ValidationError):
            field.to_internal_value('twelve')


class CreateAdminCommandTests(TestCase):
    """Test the create_admin management command"""

    def test_creates_active_admin(self):
        out = StringIO()
        call_command('create_admin', 'boss', 's3cret-pass', '--email', 'boss@example.com', stdout=out)
        user = User.objects.get(username='boss')
        self.assertTrue(user.is_active)
        self.assertTrue(user.is_admin)
        self.assertTrue(user.check_password('s3cret-pass'))
        self.assertIn('Administrator created', out.getvalue())

    def test_existing_username_fails(self):
        TestDataFactory.create_user(username='boss')
        with self.assertRaises(CommandError):
            call_command('create_admin', 'boss', 'whatever', stdout=StringIO())
        self.assertEqual(User.objects.filter(username='boss').count(), 1)


class AuthAPITests(TestCase):
    """Test JWT login and the current-user endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='carpenter', password='testpass123')
        self.client = APIClient()

    def test_login_returns_tokens_and_user(self):
        response = self.client.post(
            '/api/v1/auth/login/', {'username': 'carpenter', 'password': 'testpass123'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['username'], 'carpenter')

    def test_login_wrong_password(self):
        response = self.client.post(
            '/api/v1/auth/login/', {'username': 'carpenter', 'password': 'nope'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh(self):
        login = self.client.post(
            '/api/v1/auth/login/', {'username': 'carpenter', 'password': 'testpass123'}, format='json'
        )
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_me(self):
        client = AuthenticatedAPIClient()
        client.authenticate_user(self.user)
        response = client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'carpenter')

    def test_me_requires_token(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ExceptionHandlerTests(TestCase):
    """Test the project-wide error rendering"""

    def test_integrity_error_is_conflict(self):
        response = joinerpro_exception_handler(IntegrityError('duplicate key'), {})
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('message', response.data)

    def test_protected_error_is_conflict(self):
        response = joinerpro_exception_handler(ProtectedError('blocked', set()), {})
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_domain_conflict_keeps_message(self):
        response = joinerpro_exception_handler(AlreadySettledError(), {})
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data, {'message': 'This account has already been settled.'})

    def test_validation_error_has_message_and_errors(self):
        response = joinerpro_exception_handler(ValidationError({'name': ['Name is required.']}), {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Name is required.')
        self.assertIn('name', response.data['errors'])

    def test_unknown_error_is_generic_500(self):
        with self.assertLogs('joinerpro.core', level='ERROR'):
            response = joinerpro_exception_handler(RuntimeError('secret detail'), {})
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'message': 'Internal server error.'})


class AuditLogTests(TestCase):
    """Test audit log creation and listing"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_skips_incomplete_entries(self):
        self.assertIsNone(create_audit_log(action='create', model_name='Client'))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_records_user(self):
        log = create_audit_log(action='delete', model_name='Client', object_id=5, user=self.user, object_name='Ana')
        self.assertEqual(log.user, self.user)
        self.assertEqual(log.object_id, '5')

    def test_list_filters(self):
        create_audit_log(action='delete', model_name='Client', object_id=1, user=self.user)
        create_audit_log(action='settle', model_name='PayableAccount', object_id=2, user=self.user)
        response = self.client.get('/api/v1/audit-logs/?action=settle')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['model_name'], 'PayableAccount')
