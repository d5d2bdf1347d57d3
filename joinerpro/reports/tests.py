"""
Test suite for the Reports module
Tests: financial summary, dashboard, spreadsheet exports
"""
from datetime import date, timedelta
from decimal import Decimal
from io import BytesIO

from django.test import TestCase
from django.utils import timezone
from openpyxl import load_workbook
from rest_framework import status

from joinerpro.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from joinerpro.finance.models import PayableAccount, ReceivableAccount
from joinerpro.projects.models import Project
from joinerpro.reports.exports import XLSX_CONTENT_TYPE
from joinerpro.reports.summaries import dashboard, financial_summary


class FinancialSummaryTests(TestCase):
    """Test accrual and cash totals"""

    def setUp(self):
        TestDataFactory.create_payable(amount=Decimal('100.00'), due_date=date(2024, 3, 1), status=PayableAccount.STATUS_PAID)
        TestDataFactory.create_payable(amount=Decimal('50.00'), due_date=date(2024, 3, 20))
        TestDataFactory.create_payable(amount=Decimal('70.00'), due_date=date(2024, 4, 2), status=PayableAccount.STATUS_OVERDUE)
        TestDataFactory.create_receivable(amount=Decimal('400.00'), due_date=date(2024, 3, 5), status=ReceivableAccount.STATUS_RECEIVED)
        TestDataFactory.create_receivable(amount=Decimal('300.00'), due_date=date(2024, 3, 25))

    def test_totals_all_time(self):
        summary = financial_summary()
        self.assertIsNone(summary['period'])
        self.assertEqual(summary['payables']['total'], Decimal('220.00'))
        self.assertEqual(summary['payables']['settled'], Decimal('100.00'))
        self.assertEqual(summary['payables']['overdue_count'], 1)
        self.assertEqual(summary['receivables']['total'], Decimal('700.00'))
        self.assertEqual(summary['real_balance'], Decimal('300.00'))
        self.assertEqual(summary['accrual_balance'], Decimal('480.00'))

    def test_totals_for_month(self):
        summary = financial_summary(2024, 3)
        self.assertEqual(summary['period'], '2024-03')
        self.assertEqual(summary['payables']['total'], Decimal('150.00'))
        self.assertEqual(summary['payables']['pending_count'], 1)
        self.assertEqual(summary['payables']['overdue_count'], 0)
        self.assertEqual(summary['receivables']['open'], Decimal('300.00'))

    def test_empty_month(self):
        summary = financial_summary(2023, 1)
        self.assertEqual(summary['payables']['total'], Decimal('0.00'))
        self.assertEqual(summary['real_balance'], Decimal('0.00'))


class DashboardTests(TestCase):
    """Test dashboard figures"""

    def test_dashboard(self):
        today = date(2024, 6, 10)
        TestDataFactory.create_project(status=Project.STATUS_IN_PRODUCTION, production_started_at=timezone.now())
        TestDataFactory.create_project()
        TestDataFactory.create_stock_item(quantity_on_hand=Decimal('2'), reorder_threshold=Decimal('2'), unit_cost=Decimal('10.00'))
        TestDataFactory.create_stock_item(quantity_on_hand=Decimal('1'), reorder_threshold=Decimal('0'), unit_cost=Decimal('5.00'))
        TestDataFactory.create_payable(amount=Decimal('80.00'), due_date=today + timedelta(days=3))
        TestDataFactory.create_payable(amount=Decimal('20.00'), due_date=today + timedelta(days=7))
        TestDataFactory.create_payable(amount=Decimal('999.00'), due_date=today + timedelta(days=8))
        TestDataFactory.create_payable(amount=Decimal('40.00'), due_date=today, status=PayableAccount.STATUS_PAID)

        figures = dashboard(today)
        self.assertEqual(figures['active_projects'], 1)
        self.assertEqual(figures['low_stock_count'], 1)
        self.assertEqual(figures['stock_valuation'], Decimal('25.00'))
        self.assertEqual(figures['payables_due_soon']['count'], 2)
        self.assertEqual(figures['payables_due_soon']['total'], Decimal('100.00'))


class ReportsAPITests(TestCase):
    """Test report endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def _workbook(self, response):
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], XLSX_CONTENT_TYPE)
        self.assertIn('attachment', response['Content-Disposition'])
        return load_workbook(BytesIO(response.content))

    def test_financial_summary(self):
        response = self.client.get('/api/v1/reports/financial-summary/?month=2024-03')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['period'], '2024-03')

    def test_financial_summary_bad_month(self):
        response = self.client.get('/api/v1/reports/financial-summary/?month=03-2024')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_dashboard(self):
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('payables_due_soon', response.data)

    def test_clients_export(self):
        client = TestDataFactory.create_client(name='Ana', email='ana@example.com')
        TestDataFactory.create_project(client=client)
        wb = self._workbook(self.client.get('/api/v1/reports/clients/export/'))
        ws = wb['Clients']
        self.assertEqual(ws['A1'].value, 'Name')
        self.assertEqual(ws['A2'].value, 'Ana')
        self.assertEqual(ws['E2'].value, 1)

    def test_stock_export(self):
        TestDataFactory.create_stock_item(name='Hinge', quantity_on_hand=Decimal('2'), reorder_threshold=Decimal('5'),
                                          unit_cost=Decimal('3.00'))
        wb = self._workbook(self.client.get('/api/v1/reports/stock/export/'))
        ws = wb['Stock']
        self.assertEqual(ws['A2'].value, 'Hinge')
        self.assertEqual(ws['H2'].value, 6)
        self.assertEqual(ws['I2'].value, 'Low stock')

    def test_projects_export(self):
        project = TestDataFactory.create_project(name='Wardrobe')
        item = TestDataFactory.create_stock_item(unit_cost=Decimal('10.00'))
        TestDataFactory.create_material(project=project, stock_item=item, quantity_used=Decimal('4'))
        wb = self._workbook(self.client.get('/api/v1/reports/projects/export/'))
        ws = wb['Projects']
        self.assertEqual(ws['A2'].value, 'Wardrobe')
        self.assertEqual(ws['G2'].value, 40)

    def test_finance_export_has_two_sheets(self):
        project = TestDataFactory.create_project(name='Bookshelf')
        TestDataFactory.create_payable(description='Paint')
        TestDataFactory.create_receivable(description='Deposit', project=project)
        wb = self._workbook(self.client.get('/api/v1/reports/finance/export/'))
        self.assertEqual(wb.sheetnames, ['Payables', 'Receivables'])
        self.assertEqual(wb['Payables']['A2'].value, 'Paint')
        self.assertEqual(wb['Receivables']['B2'].value, 'Bookshelf')

    def test_export_empty(self):
        wb = self._workbook(self.client.get('/api/v1/reports/stock/export/'))
        self.assertEqual(wb['Stock'].max_row, 1)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/reports/finance/export/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
