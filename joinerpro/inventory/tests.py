"""
Test suite for the Inventory module
Tests: low-stock predicate, valuation, stock item and category endpoints
"""
from decimal import Decimal
from types import SimpleNamespace
from django.test import TestCase
from rest_framework import status
from joinerpro.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from joinerpro.inventory.models import StockCategory, StockItem
from joinerpro.inventory.valuation import is_low_stock, stock_status, stock_valuation, summarize_stock


class StockValuationTests(TestCase):
    """Test the stock predicate and valuation helpers"""

    def test_low_boundary(self):
        """Test equality with the threshold counts as low"""
        self.assertTrue(is_low_stock(Decimal('5'), Decimal('5')))
        self.assertTrue(is_low_stock(Decimal('4.999'), Decimal('5')))
        self.assertFalse(is_low_stock(Decimal('5.001'), Decimal('5')))

    def test_status_labels(self):
        low = SimpleNamespace(quantity_on_hand=Decimal('2'), reorder_threshold=Decimal('2'))
        ok = SimpleNamespace(quantity_on_hand=Decimal('3'), reorder_threshold=Decimal('2'))
        self.assertEqual(stock_status(low), 'low')
        self.assertEqual(stock_status(ok), 'ok')

    def test_valuation_empty(self):
        self.assertEqual(stock_valuation([]), Decimal('0'))

    def test_valuation(self):
        items = [
            SimpleNamespace(quantity_on_hand=Decimal('2'), unit_cost=Decimal('10.00')),
            SimpleNamespace(quantity_on_hand=Decimal('1'), unit_cost=Decimal('5.00')),
        ]
        self.assertEqual(stock_valuation(items), Decimal('25.00'))

    def test_model_predicate_matches_queryset(self):
        category = TestDataFactory.create_category()
        at = TestDataFactory.create_stock_item(category=category, quantity_on_hand=Decimal('3'), reorder_threshold=Decimal('3'))
        above = TestDataFactory.create_stock_item(category=category, quantity_on_hand=Decimal('4'), reorder_threshold=Decimal('3'))
        self.assertTrue(at.is_low)
        self.assertFalse(above.is_low)
        self.assertEqual(list(StockItem.objects.low()), [at])

    def test_summary_groups_by_category(self):
        boards = TestDataFactory.create_category(name='Boards')
        hardware = TestDataFactory.create_category(name='Hardware')
        TestDataFactory.create_stock_item(category=boards, quantity_on_hand=Decimal('2'), reorder_threshold=Decimal('5'), unit_cost=Decimal('10'))
        TestDataFactory.create_stock_item(category=hardware, quantity_on_hand=Decimal('1'), reorder_threshold=Decimal('0'), unit_cost=Decimal('5'))
        summary = summarize_stock(StockItem.objects.with_category())
        self.assertEqual(summary['item_count'], 2)
        self.assertEqual(summary['low_count'], 1)
        self.assertEqual(summary['valuation'], Decimal('25'))
        self.assertEqual([g['category_name'] for g in summary['categories']], ['Boards', 'Hardware'])


class StockItemAPITests(TestCase):
    """Test stock item endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.category = TestDataFactory.create_category(name='Boards')

    def test_create_item(self):
        data = {
            'name': 'MDF 15mm',
            'category': self.category.id,
            'unit': 'M2',
            'quantity_on_hand': '12,5',
            'reorder_threshold': '5',
            'unit_cost': '1.234,50',
        }
        response = self.client.post('/api/v1/stock/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        item = StockItem.objects.get(id=response.data['id'])
        self.assertEqual(item.quantity_on_hand, Decimal('12.5'))
        self.assertEqual(item.unit_cost, Decimal('1234.50'))
        self.assertEqual(response.data['status'], 'ok')
        self.assertEqual(response.data['category_name'], 'Boards')

    def test_create_with_unknown_category(self):
        data = {'name': 'Ghost', 'category': 9999, 'unit': 'UN'}
        response = self.client.post('/api/v1/stock/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('category', response.data['errors'])

    def test_create_rejects_malformed_quantity(self):
        data = {'name': 'Bad', 'category': self.category.id, 'unit': 'UN', 'quantity_on_hand': 'lots'}
        response = self.client.post('/api/v1/stock/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters(self):
        TestDataFactory.create_stock_item(name='Hinge', category=self.category, quantity_on_hand=Decimal('1'), reorder_threshold=Decimal('5'))
        TestDataFactory.create_stock_item(name='Screw', category=self.category, quantity_on_hand=Decimal('100'), reorder_threshold=Decimal('5'))
        response = self.client.get('/api/v1/stock/?low=true')
        self.assertEqual([i['name'] for i in response.data], ['Hinge'])
        response = self.client.get('/api/v1/stock/?search=scr')
        self.assertEqual([i['name'] for i in response.data], ['Screw'])
        response = self.client.get(f'/api/v1/stock/?category={self.category.id}')
        self.assertEqual(len(response.data), 2)

    def test_low_endpoint(self):
        TestDataFactory.create_stock_item(name='Varnish', quantity_on_hand=Decimal('2'), reorder_threshold=Decimal('2'))
        response = self.client.get('/api/v1/stock/low/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['status'], 'low')

    def test_summary_endpoint(self):
        TestDataFactory.create_stock_item(quantity_on_hand=Decimal('2'), unit_cost=Decimal('10.00'))
        TestDataFactory.create_stock_item(quantity_on_hand=Decimal('1'), unit_cost=Decimal('5.00'))
        response = self.client.get('/api/v1/stock/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['valuation'], Decimal('25.00'))

    def test_patch_item(self):
        item = TestDataFactory.create_stock_item(category=self.category)
        response = self.client.patch(f'/api/v1/stock/{item.id}/', {'quantity_on_hand': '0'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'low')

    def test_delete_item_used_in_project(self):
        item = TestDataFactory.create_stock_item(category=self.category)
        TestDataFactory.create_material(stock_item=item)
        response = self.client.delete(f'/api/v1/stock/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_delete_item(self):
        item = TestDataFactory.create_stock_item(category=self.category)
        response = self.client.delete(f'/api/v1/stock/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class StockCategoryAPITests(TestCase):
    """Test stock category endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_and_duplicate(self):
        response = self.client.post('/api/v1/stock/categories/', {'name': 'Hardware'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post('/api/v1/stock/categories/', {'name': 'hardware'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(StockCategory.objects.count(), 1)

    def test_rename_category(self):
        category = TestDataFactory.create_category(name='Hardwre')
        response = self.client.patch(f'/api/v1/stock/categories/{category.id}/', {'name': 'Hardware'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        category.refresh_from_db()
        self.assertEqual(category.name, 'Hardware')

    def test_rename_category_to_taken_name_conflict(self):
        TestDataFactory.create_category(name='Boards')
        category = TestDataFactory.create_category(name='Finishing')
        response = self.client.patch(f'/api/v1/stock/categories/{category.id}/', {'name': 'BOARDS'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        category.refresh_from_db()
        self.assertEqual(category.name, 'Finishing')

    def test_rename_category_case_only(self):
        category = TestDataFactory.create_category(name='boards')
        response = self.client.patch(f'/api/v1/stock/categories/{category.id}/', {'name': 'Boards'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_delete_referenced_category_conflict(self):
        """Test a category with items cannot be deleted"""
        category = TestDataFactory.create_category()
        TestDataFactory.create_stock_item(category=category)
        response = self.client.delete(f'/api/v1/stock/categories/{category.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('Remove the items first', response.data['message'])
        self.assertTrue(StockCategory.objects.filter(id=category.id).exists())

    def test_delete_empty_category(self):
        category = TestDataFactory.create_category()
        response = self.client.delete(f'/api/v1/stock/categories/{category.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_list_with_item_count(self):
        category = TestDataFactory.create_category(name='Finishing')
        TestDataFactory.create_stock_item(category=category)
        response = self.client.get('/api/v1/stock/categories/')
        self.assertEqual(response.data[0]['item_count'], 1)
