"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from joinerpro.clients.models import Client
from joinerpro.finance.models import PayableAccount, ReceivableAccount
from joinerpro.inventory.models import StockCategory, StockItem
from joinerpro.projects.models import Project, ProjectMaterial
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='staff', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_client(name=None, email=None, phone='11999990000', address=''):
        """Create a test client"""
        if not name:
            name = f'Client_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{TestDataFactory.random_string(8).lower()}@test.com'
        return Client.objects.create(name=name, email=email, phone=phone, address=address)

    @staticmethod
    def create_category(name=None):
        """Create a test stock category"""
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        return StockCategory.objects.create(name=name)

    @staticmethod
    def create_stock_item(name=None, category=None, unit='UN', quantity_on_hand=Decimal('10'),
                          reorder_threshold=Decimal('2'), unit_cost=Decimal('5.00')):
        """Create a test stock item"""
        if not name:
            name = f'Item_{TestDataFactory.random_string(6)}'
        if not category:
            category = TestDataFactory.create_category()
        return StockItem.objects.create(
            name=name,
            category=category,
            unit=unit,
            quantity_on_hand=quantity_on_hand,
            reorder_threshold=reorder_threshold,
            unit_cost=unit_cost
        )

    @staticmethod
    def create_project(client=None, name=None, total_value=Decimal('1000.00'), status=Project.STATUS_QUOTE,
                       delivery_days=30, production_started_at=None):
        """Create a test project"""
        if not client:
            client = TestDataFactory.create_client()
        if not name:
            name = f'Project_{TestDataFactory.random_string(6)}'
        return Project.objects.create(
            client=client,
            name=name,
            total_value=total_value,
            status=status,
            delivery_days=delivery_days,
            production_started_at=production_started_at
        )

    @staticmethod
    def create_material(project=None, stock_item=None, quantity_used=Decimal('1')):
        """Create a bill of materials line"""
        if not project:
            project = TestDataFactory.create_project()
        if not stock_item:
            stock_item = TestDataFactory.create_stock_item()
        return ProjectMaterial.objects.create(project=project, stock_item=stock_item, quantity_used=quantity_used)

    @staticmethod
    def create_payable(description='Supplier bill', amount=Decimal('100.00'), due_date=None,
                       status=PayableAccount.STATUS_PENDING, settled_at=None):
        """Create a payable row"""
        if due_date is None:
            due_date = timezone.localdate()
        if status == PayableAccount.STATUS_PAID and settled_at is None:
            settled_at = timezone.now()
        return PayableAccount.objects.create(
            description=description,
            amount=amount,
            due_date=due_date,
            status=status,
            settled_at=settled_at
        )

    @staticmethod
    def create_receivable(description='Project instalment', amount=Decimal('100.00'), due_date=None,
                          status=ReceivableAccount.STATUS_PENDING, settled_at=None, project=None):
        """Create a receivable row"""
        if due_date is None:
            due_date = timezone.localdate()
        if status == ReceivableAccount.STATUS_RECEIVED and settled_at is None:
            settled_at = timezone.now()
        return ReceivableAccount.objects.create(
            description=description,
            amount=amount,
            due_date=due_date,
            status=status,
            settled_at=settled_at,
            project=project
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
