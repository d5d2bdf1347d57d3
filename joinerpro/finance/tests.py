"""
Test suite for the Finance module
Tests: installment planning, ledger expansion, atomicity, settlement, month filter, overdue marking
"""
from datetime import date, timedelta
from decimal import Decimal
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.db import DatabaseError
from django.test import TestCase
from rest_framework import status

from joinerpro.core.exceptions import AlreadySettledError
from joinerpro.core.models import AuditLog
from joinerpro.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from joinerpro.finance.installments import add_months, plan_installments, split_amount
from joinerpro.finance.models import PayableAccount, ReceivableAccount
from joinerpro.finance.services import (
    PAYABLE, RECEIVABLE, LedgerEntryRequest, create_ledger_entries, mark_overdue, settle_account,
)


class InstallmentPlanTests(TestCase):
    """Test the pure installment arithmetic"""

    def test_split_sums_to_total(self):
        """Test the last installment absorbs the remainder"""
        amounts = split_amount(Decimal('1000.00'), 3)
        self.assertEqual(amounts, [Decimal('333.33'), Decimal('333.33'), Decimal('333.34')])
        self.assertEqual(sum(amounts), Decimal('1000.00'))

    def test_split_small_amount_never_negative(self):
        """Test cents that do not divide evenly still add up"""
        amounts = split_amount(Decimal('0.05'), 3)
        self.assertEqual(amounts, [Decimal('0.01'), Decimal('0.01'), Decimal('0.03')])

    def test_split_even(self):
        self.assertEqual(split_amount(Decimal('300'), 3), [Decimal('100.00')] * 3)

    def test_split_rejects_zero_count(self):
        with self.assertRaises(ValueError):
            split_amount(Decimal('100'), 0)

    def test_add_months_clamps_to_month_end(self):
        """Test Jan 31 + 1 month lands on the last day of February"""
        self.assertEqual(add_months(date(2024, 1, 31), 1), date(2024, 2, 29))
        self.assertEqual(add_months(date(2023, 1, 31), 1), date(2023, 2, 28))
        self.assertEqual(add_months(date(2024, 11, 15), 2), date(2025, 1, 15))

    def test_plan_dates_and_numbers(self):
        plan = plan_installments(Decimal('1200.00'), date(2024, 1, 10), 4)
        self.assertEqual([row.number for row in plan], [1, 2, 3, 4])
        self.assertEqual(
            [row.due_date for row in plan],
            [date(2024, 1, 10), date(2024, 2, 10), date(2024, 3, 10), date(2024, 4, 10)],
        )
        self.assertTrue(all(row.count == 4 for row in plan))
        self.assertTrue(all(row.amount == Decimal('300.00') for row in plan))


class LedgerServiceTests(TestCase):
    """Test ledger expansion and settlement without HTTP"""

    def test_single_payment_is_settled(self):
        """Test one installment creates a single settled row"""
        entry = LedgerEntryRequest(
            description='Plywood order',
            amount=Decimal('450.00'),
            due_date=date(2024, 3, 5),
            payment_method='pix',
        )
        accounts = create_ledger_entries(PAYABLE, entry)
        self.assertEqual(len(accounts), 1)
        account = accounts[0]
        self.assertEqual(account.status, PayableAccount.STATUS_PAID)
        self.assertIsNotNone(account.settled_at)
        self.assertEqual(account.due_date, date(2024, 3, 5))
        self.assertEqual(account.description, 'Plywood order (Single payment - Pix)')

    def test_single_payment_defaults_to_cash(self):
        entry = LedgerEntryRequest(description='Glue', amount=Decimal('30'), due_date=date(2024, 3, 5))
        account = create_ledger_entries(PAYABLE, entry)[0]
        self.assertEqual(account.payment_method, 'cash')
        self.assertEqual(account.description, 'Glue (Single payment - Cash)')

    def test_installments_are_pending(self):
        """Test N installments are created pending, one month apart"""
        entry = LedgerEntryRequest(
            description='Kitchen cabinets',
            amount=Decimal('1000.00'),
            due_date=date(2024, 1, 31),
            installments=3,
        )
        accounts = create_ledger_entries(PAYABLE, entry)
        self.assertEqual(PayableAccount.objects.count(), 3)
        self.assertEqual(sum(a.amount for a in accounts), Decimal('1000.00'))
        self.assertEqual(
            [a.due_date for a in accounts],
            [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)],
        )
        self.assertEqual(
            [a.description for a in accounts],
            ['Kitchen cabinets (1/3)', 'Kitchen cabinets (2/3)', 'Kitchen cabinets (3/3)'],
        )
        for account in accounts:
            self.assertEqual(account.status, PayableAccount.STATUS_PENDING)
            self.assertIsNone(account.settled_at)
            self.assertEqual(account.installment_count, 3)

    def test_receivable_installments_carry_project(self):
        project = TestDataFactory.create_project()
        entry = LedgerEntryRequest(
            description='Wardrobe',
            amount=Decimal('900.00'),
            due_date=date(2024, 5, 1),
            installments=3,
            project=project,
        )
        create_ledger_entries(RECEIVABLE, entry)
        self.assertEqual(ReceivableAccount.objects.filter(project=project).count(), 3)

    def test_failure_on_kth_insert_rolls_back_everything(self):
        """Test a failing third insert leaves no installment behind"""
        original_save = PayableAccount.save
        calls = {'count': 0}

        def failing_save(instance, *args, **kwargs):
            calls['count'] += 1
            if calls['count'] == 3:
                raise DatabaseError('simulated failure')
            return original_save(instance, *args, **kwargs)

        entry = LedgerEntryRequest(
            description='Hardware',
            amount=Decimal('500.00'),
            due_date=date(2024, 6, 1),
            installments=5,
        )
        with patch.object(PayableAccount, 'save', autospec=True, side_effect=failing_save):
            with self.assertRaises(DatabaseError):
                create_ledger_entries(PAYABLE, entry)

        self.assertEqual(calls['count'], 3)
        self.assertEqual(PayableAccount.objects.count(), 0)

    def test_settle_pending(self):
        account = TestDataFactory.create_payable()
        settled = settle_account(PAYABLE, account.id)
        self.assertEqual(settled.status, PayableAccount.STATUS_PAID)
        self.assertIsNotNone(settled.settled_at)

    def test_settle_overdue_receivable(self):
        account = TestDataFactory.create_receivable(status=ReceivableAccount.STATUS_OVERDUE)
        settled = settle_account(RECEIVABLE, account.id)
        self.assertEqual(settled.status, ReceivableAccount.STATUS_RECEIVED)

    def test_settle_twice_is_rejected(self):
        account = TestDataFactory.create_payable()
        first = settle_account(PAYABLE, account.id)
        with self.assertRaises(AlreadySettledError):
            settle_account(PAYABLE, account.id)
        account.refresh_from_db()
        self.assertEqual(account.settled_at, first.settled_at)

    def test_unknown_kind(self):
        with self.assertRaises(ValueError):
            settle_account('invoice', 1)

    def test_mark_overdue(self):
        today = date(2024, 5, 10)
        late = TestDataFactory.create_payable(due_date=date(2024, 5, 9))
        due_today = TestDataFactory.create_payable(due_date=today)
        paid = TestDataFactory.create_payable(due_date=date(2024, 5, 1), status=PayableAccount.STATUS_PAID)

        self.assertEqual(mark_overdue(PAYABLE, today), 1)
        late.refresh_from_db()
        due_today.refresh_from_db()
        paid.refresh_from_db()
        self.assertEqual(late.status, PayableAccount.STATUS_OVERDUE)
        self.assertEqual(due_today.status, PayableAccount.STATUS_PENDING)
        self.assertEqual(paid.status, PayableAccount.STATUS_PAID)

    def test_mark_overdue_command(self):
        TestDataFactory.create_payable(due_date=date(2024, 1, 1))
        TestDataFactory.create_receivable(due_date=date(2024, 1, 1))
        out = StringIO()
        call_command('mark_overdue_accounts', '--date', '2024-02-01', stdout=out)
        self.assertEqual(PayableAccount.objects.filter(status='overdue').count(), 1)
        self.assertEqual(ReceivableAccount.objects.filter(status='overdue').count(), 1)
        self.assertIn('payable: 1', out.getvalue())


class PayableAPITests(TestCase):
    """Test payable endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/payables/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_installments(self):
        """Test creating a payable in installments"""
        data = {
            'description': 'MDF boards',
            'amount': '1.000,00',
            'due_date': '2024-01-31',
            'installments': 3,
            'payment_method': 'bank_slip',
        }
        response = self.client.post('/api/v1/payables/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data), 3)
        self.assertEqual(response.data[1]['due_date'], '2024-02-29')
        self.assertEqual(response.data[2]['amount'], Decimal('333.34'))
        self.assertEqual(AuditLog.objects.filter(action='installments_create').count(), 3)

    def test_create_single_payment(self):
        data = {'description': 'Screws', 'amount': '80.50', 'due_date': '2024-02-10', 'payment_method': 'debit_card'}
        response = self.client.post('/api/v1/payables/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['status'], 'paid')
        self.assertIsNotNone(response.data[0]['settled_at'])
        self.assertEqual(response.data[0]['description'], 'Screws (Single payment - Debit card)')

    def test_create_missing_fields(self):
        response = self.client.post('/api/v1/payables/', {'description': 'No amount'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data['errors'])
        self.assertIn('due_date', response.data['errors'])
        self.assertEqual(PayableAccount.objects.count(), 0)

    def test_create_malformed_amount(self):
        data = {'description': 'Bad', 'amount': 'abc', 'due_date': '2024-02-10'}
        response = self.client.post('/api/v1/payables/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(PayableAccount.objects.count(), 0)

    def test_create_too_many_installments(self):
        data = {'description': 'Long', 'amount': '100', 'due_date': '2024-02-10', 'installments': 61}
        response = self.client.post('/api/v1/payables/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(PayableAccount.objects.count(), 0)

    def test_create_amount_too_small_for_installments(self):
        """Test an amount that cannot give every installment a cent is rejected"""
        data = {'description': 'Tiny', 'amount': '0.02', 'due_date': '2024-02-10', 'installments': 3}
        response = self.client.post('/api/v1/payables/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data['errors'])
        self.assertEqual(PayableAccount.objects.count(), 0)

    def test_create_one_cent_per_installment(self):
        data = {'description': 'Tiny', 'amount': '0.03', 'due_date': '2024-02-10', 'installments': 3}
        response = self.client.post('/api/v1/payables/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual([row['amount'] for row in response.data], [Decimal('0.01')] * 3)

    def test_list_ordered_by_due_date(self):
        TestDataFactory.create_payable(description='later', due_date=date(2024, 5, 1))
        TestDataFactory.create_payable(description='sooner', due_date=date(2024, 4, 1))
        response = self.client.get('/api/v1/payables/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['description'] for row in response.data], ['sooner', 'later'])

    def test_month_filter(self):
        TestDataFactory.create_payable(description='march', due_date=date(2024, 3, 15))
        TestDataFactory.create_payable(description='april', due_date=date(2024, 4, 1))
        response = self.client.get('/api/v1/payables/?month=2024-03')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['description'] for row in response.data], ['march'])

    def test_invalid_month_filter(self):
        for value in ('2024-13', 'march', '2024-3'):
            response = self.client.get(f'/api/v1/payables/?month={value}')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, value)

    def test_status_filter(self):
        TestDataFactory.create_payable(description='open')
        TestDataFactory.create_payable(description='done', status=PayableAccount.STATUS_PAID)
        response = self.client.get('/api/v1/payables/?status=paid')
        self.assertEqual([row['description'] for row in response.data], ['done'])

    def test_settle_with_put(self):
        """Test the settle-only PUT endpoint"""
        account = TestDataFactory.create_payable()
        response = self.client.put('/api/v1/payables/', {'id': account.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'paid')
        self.assertTrue(AuditLog.objects.filter(action='settle', object_id=str(account.id)).exists())

    def test_settle_twice_conflict(self):
        account = TestDataFactory.create_payable()
        self.client.put('/api/v1/payables/', {'id': account.id}, format='json')
        response = self.client.put('/api/v1/payables/', {'id': account.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('message', response.data)

    def test_settle_unknown(self):
        response = self.client.put('/api/v1/payables/', {'id': 9999}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_settle_action(self):
        account = TestDataFactory.create_payable()
        response = self.client.post(f'/api/v1/payables/{account.id}/settle/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        account.refresh_from_db()
        self.assertTrue(account.is_settled)

    def test_patch_settled_without_date_rejected(self):
        account = TestDataFactory.create_payable()
        response = self.client.patch(
            f'/api/v1/payables/{account.id}/', {'status': 'paid'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_patch_reopen_clears_date(self):
        account = TestDataFactory.create_payable(status=PayableAccount.STATUS_PAID)
        response = self.client.patch(
            f'/api/v1/payables/{account.id}/', {'status': 'pending'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['settled_at'])

    def test_patch_amount(self):
        account = TestDataFactory.create_payable()
        response = self.client.patch(
            f'/api/v1/payables/{account.id}/', {'amount': '250,75'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        account.refresh_from_db()
        self.assertEqual(account.amount, Decimal('250.75'))

    def test_delete(self):
        account = TestDataFactory.create_payable()
        response = self.client.delete(f'/api/v1/payables/{account.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(PayableAccount.objects.filter(id=account.id).exists())

    def test_get_unknown(self):
        response = self.client.get('/api/v1/payables/9999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('message', response.data)


class ReceivableAPITests(TestCase):
    """Test receivable endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.project = TestDataFactory.create_project(name='Dining table')

    def test_create_with_project(self):
        data = {
            'description': 'Dining table',
            'amount': '3000',
            'due_date': '2024-03-10',
            'installments': 2,
            'project': self.project.id,
        }
        response = self.client.post('/api/v1/receivables/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data), 2)
        for row in response.data:
            self.assertEqual(row['project'], self.project.id)
            self.assertEqual(row['status'], 'pending')

    def test_create_with_unknown_project(self):
        """Test a dangling project reference is a validation error"""
        data = {
            'description': 'Ghost',
            'amount': '100',
            'due_date': '2024-03-10',
            'installments': 2,
            'project': 9999,
        }
        response = self.client.post('/api/v1/receivables/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('project', response.data['errors'])
        self.assertEqual(ReceivableAccount.objects.count(), 0)

    def test_detail_embeds_project(self):
        account = TestDataFactory.create_receivable(project=self.project)
        response = self.client.get(f'/api/v1/receivables/{account.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['project_detail'], {'id': self.project.id, 'name': 'Dining table'})

    def test_filter_by_project(self):
        TestDataFactory.create_receivable(project=self.project)
        TestDataFactory.create_receivable()
        response = self.client.get(f'/api/v1/receivables/?project={self.project.id}')
        self.assertEqual(len(response.data), 1)

    def test_settle_marks_received(self):
        account = TestDataFactory.create_receivable()
        response = self.client.put('/api/v1/receivables/', {'id': account.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'received')

    def test_settle_received_conflict(self):
        account = TestDataFactory.create_receivable(status=ReceivableAccount.STATUS_RECEIVED)
        response = self.client.post(f'/api/v1/receivables/{account.id}/settle/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_project_deletion_keeps_receivables(self):
        account = TestDataFactory.create_receivable(project=self.project)
        self.project.delete()
        account.refresh_from_db()
        self.assertIsNone(account.project)

    def test_month_filter_uses_due_date(self):
        TestDataFactory.create_receivable(due_date=date(2024, 2, 29))
        TestDataFactory.create_receivable(due_date=date(2024, 2, 29) + timedelta(days=1))
        response = self.client.get('/api/v1/receivables/?month=2024-02')
        self.assertEqual(len(response.data), 1)
