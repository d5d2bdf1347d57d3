"""
Test suite for the Projects module
Tests: delivery deadline, production start rule, bill of materials cost, project endpoints
"""
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from joinerpro.core.models import AuditLog
from joinerpro.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from joinerpro.projects.deadlines import deadline_status
from joinerpro.projects.models import Project, ProjectMaterial

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=dt_timezone.utc)


class DeadlineTests(TestCase):
    """Test the delivery countdown"""

    def test_days_remaining(self):
        started = NOW - timedelta(days=14)
        result = deadline_status(Project.STATUS_IN_PRODUCTION, 30, started, now=NOW)
        self.assertEqual(result.state, 'on_track')
        self.assertEqual(result.days, 16)
        self.assertEqual(result.label, '16 days remaining')

    def test_days_overdue(self):
        started = NOW - timedelta(days=40)
        result = deadline_status(Project.STATUS_IN_PRODUCTION, 30, started, now=NOW)
        self.assertEqual(result.state, 'overdue')
        self.assertEqual(result.days, 10)
        self.assertEqual(result.label, '10 days overdue')

    def test_due_soon(self):
        started = NOW - timedelta(days=25)
        result = deadline_status(Project.STATUS_IN_PRODUCTION, 30, started, now=NOW)
        self.assertEqual(result.state, 'due_soon')
        self.assertEqual(result.days, 5)

    def test_partial_day_rounds_up(self):
        started = NOW - timedelta(days=14, hours=6)
        result = deadline_status(Project.STATUS_IN_PRODUCTION, 30, started, now=NOW)
        self.assertEqual(result.days, 16)

    def test_not_started(self):
        result = deadline_status(Project.STATUS_QUOTE, 30, None, now=NOW)
        self.assertEqual(result.state, 'not_started')
        self.assertEqual(result.label, 'not started')
        self.assertIsNone(result.days)

    def test_in_production_without_start(self):
        result = deadline_status(Project.STATUS_IN_PRODUCTION, 30, None, now=NOW)
        self.assertEqual(result.state, 'not_started')

    def test_finished_project_has_no_countdown(self):
        result = deadline_status(Project.STATUS_DONE, 30, NOW - timedelta(days=100), now=NOW)
        self.assertEqual(result.state, 'not_started')

    def test_zero_window_defaults_to_thirty(self):
        started = NOW - timedelta(days=14)
        result = deadline_status(Project.STATUS_IN_PRODUCTION, 0, started, now=NOW)
        self.assertEqual(result.days, 16)


class ProjectModelTests(TestCase):
    """Test Project model methods"""

    def test_production_start_set_once(self):
        project = TestDataFactory.create_project()
        self.assertTrue(project.apply_status(Project.STATUS_IN_PRODUCTION, now=NOW))
        self.assertEqual(project.production_started_at, NOW)

        project.apply_status(Project.STATUS_DONE)
        later = NOW + timedelta(days=3)
        self.assertFalse(project.apply_status(Project.STATUS_IN_PRODUCTION, now=later))
        self.assertEqual(project.production_started_at, NOW)

    def test_material_cost_reads_live_unit_cost(self):
        """Test BOM cost follows the stock item's current unit cost"""
        project = TestDataFactory.create_project()
        item = TestDataFactory.create_stock_item(unit_cost=Decimal('10.00'))
        TestDataFactory.create_material(project=project, stock_item=item, quantity_used=Decimal('4'))
        self.assertEqual(project.get_material_cost(), Decimal('40.00'))

        item.unit_cost = Decimal('12.50')
        item.save()
        self.assertEqual(project.get_material_cost(), Decimal('50.00'))

    def test_material_cost_empty(self):
        project = TestDataFactory.create_project()
        self.assertEqual(project.get_material_cost(), Decimal('0'))


class ProjectAPITests(TestCase):
    """Test Project API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_client(name='Ana')

    def test_create_forces_quote(self):
        data = {
            'client': self.customer.id,
            'name': 'Kitchen',
            'total_value': '15.000,00',
            'status': 'in_production',
        }
        response = self.client.post('/api/v1/projects/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'quote')
        self.assertIsNone(response.data['production_started_at'])
        self.assertEqual(response.data['delivery_days'], 30)
        self.assertEqual(response.data['client_detail']['name'], 'Ana')
        self.assertEqual(response.data['deadline']['state'], 'not_started')

    def test_create_zero_delivery_days_defaults(self):
        data = {'client': self.customer.id, 'name': 'Desk', 'total_value': '100', 'delivery_days': 0}
        response = self.client.post('/api/v1/projects/', data, format='json')
        self.assertEqual(response.data['delivery_days'], 30)

    def test_create_with_unknown_client(self):
        data = {'client': 9999, 'name': 'Ghost', 'total_value': '100'}
        response = self.client.post('/api/v1/projects/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('client', response.data['errors'])

    def test_start_production_stamps_once(self):
        project = TestDataFactory.create_project(client=self.customer)
        response = self.client.patch(f'/api/v1/projects/{project.id}/', {'status': 'in_production'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        project.refresh_from_db()
        first_start = project.production_started_at
        self.assertIsNotNone(first_start)
        self.assertEqual(response.data['deadline']['state'], 'on_track')
        self.assertEqual(AuditLog.objects.filter(action='production_start').count(), 1)

        self.client.patch(f'/api/v1/projects/{project.id}/', {'status': 'done'}, format='json')
        self.client.patch(f'/api/v1/projects/{project.id}/', {'status': 'in_production'}, format='json')
        project.refresh_from_db()
        self.assertEqual(project.production_started_at, first_start)
        self.assertEqual(AuditLog.objects.filter(action='production_start').count(), 1)

    def test_patch_cannot_set_start_directly(self):
        project = TestDataFactory.create_project(client=self.customer)
        self.client.patch(
            f'/api/v1/projects/{project.id}/',
            {'production_started_at': '2020-01-01T00:00:00Z'},
            format='json',
        )
        project.refresh_from_db()
        self.assertIsNone(project.production_started_at)

    def test_list_filters(self):
        TestDataFactory.create_project(client=self.customer, name='Quote one')
        TestDataFactory.create_project(client=self.customer, name='Running', status=Project.STATUS_IN_PRODUCTION,
                                       production_started_at=timezone.now())
        response = self.client.get('/api/v1/projects/?status=in_production')
        self.assertEqual([p['name'] for p in response.data], ['Running'])
        response = self.client.get(f'/api/v1/projects/?client={self.customer.id}')
        self.assertEqual(len(response.data), 2)

    def test_detail_embeds_materials_and_cost(self):
        project = TestDataFactory.create_project(client=self.customer)
        item = TestDataFactory.create_stock_item(unit_cost=Decimal('10.00'))
        TestDataFactory.create_material(project=project, stock_item=item, quantity_used=Decimal('4'))
        response = self.client.get(f'/api/v1/projects/{project.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['materials']), 1)
        self.assertEqual(response.data['material_cost'], Decimal('40.00'))

    def test_delete_with_materials_conflict(self):
        project = TestDataFactory.create_project(client=self.customer)
        TestDataFactory.create_material(project=project)
        response = self.client.delete(f'/api/v1/projects/{project.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Project.objects.filter(id=project.id).exists())

    def test_delete(self):
        project = TestDataFactory.create_project(client=self.customer)
        response = self.client.delete(f'/api/v1/projects/{project.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class ProjectMaterialAPITests(TestCase):
    """Test bill of materials endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.project = TestDataFactory.create_project()
        self.item = TestDataFactory.create_stock_item(unit_cost=Decimal('10.00'))

    def test_add_and_list(self):
        response = self.client.post(
            f'/api/v1/projects/{self.project.id}/materials/',
            {'stock_item': self.item.id, 'quantity_used': '4'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['line_cost'], Decimal('40.00'))

        response = self.client.get(f'/api/v1/projects/{self.project.id}/materials/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['material_cost'], Decimal('40.00'))

    def test_listing_reflects_new_unit_cost(self):
        TestDataFactory.create_material(project=self.project, stock_item=self.item, quantity_used=Decimal('4'))
        self.item.unit_cost = Decimal('12.50')
        self.item.save()
        response = self.client.get(f'/api/v1/projects/{self.project.id}/materials/')
        self.assertEqual(response.data['material_cost'], Decimal('50.00'))

    def test_add_unknown_stock_item(self):
        response = self.client.post(
            f'/api/v1/projects/{self.project.id}/materials/',
            {'stock_item': 9999, 'quantity_used': '1'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(ProjectMaterial.objects.count(), 0)

    def test_add_to_unknown_project(self):
        response = self.client.post(
            '/api/v1/projects/9999/materials/',
            {'stock_item': self.item.id, 'quantity_used': '1'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_quantity_must_be_positive(self):
        response = self.client.post(
            f'/api/v1/projects/{self.project.id}/materials/',
            {'stock_item': self.item.id, 'quantity_used': '0'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_remove_line(self):
        line = TestDataFactory.create_material(project=self.project, stock_item=self.item)
        response = self.client.delete(f'/api/v1/projects/{self.project.id}/materials/{line.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ProjectMaterial.objects.filter(id=line.id).exists())

    def test_remove_line_of_other_project(self):
        other = TestDataFactory.create_project()
        line = TestDataFactory.create_material(project=other, stock_item=self.item)
        response = self.client.delete(f'/api/v1/projects/{self.project.id}/materials/{line.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
