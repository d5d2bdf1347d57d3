from django.conf import settings
from django.db import models
from django.utils import timezone
from decimal import Decimal
from joinerpro.clients.models import Client
from joinerpro.inventory.models import StockItem


class ProjectQuerySet(models.QuerySet):
    def with_client(self):
        return self.select_related('client')

    def with_materials(self):
        return self.prefetch_related('materials__stock_item')

    def in_production(self):
        return self.filter(status=Project.STATUS_IN_PRODUCTION)


class Project(models.Model):
    """Furniture project commissioned by a client"""
    STATUS_QUOTE = 'quote'
    STATUS_IN_PRODUCTION = 'in_production'
    STATUS_DONE = 'done'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_QUOTE, 'Quote'),
        (STATUS_IN_PRODUCTION, 'In production'),
        (STATUS_DONE, 'Done'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    client = models.ForeignKey(Client, on_delete=models.PROTECT, related_name='projects')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    total_value = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_QUOTE)
    delivery_days = models.PositiveIntegerField(default=30)
    production_started_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProjectQuerySet.as_manager()

    def __str__(self):
        return self.name

    @property
    def effective_delivery_days(self):
        return self.delivery_days or settings.JOINERPRO_DEFAULT_DELIVERY_DAYS

    def apply_status(self, new_status, now=None):
        """
        Move the project to ``new_status``.

        The production start is stamped only on the first transition into
        in_production and is never overwritten afterwards. Returns True when
        the stamp was set by this call.
        """
        started = (
            new_status == self.STATUS_IN_PRODUCTION
            and self.status != self.STATUS_IN_PRODUCTION
            and self.production_started_at is None
        )
        self.status = new_status
        if started:
            self.production_started_at = now or timezone.now()
        return started

    def get_material_cost(self):
        """Bill of materials cost at the stock items' current unit cost"""
        return sum(
            (line.get_line_cost() for line in self.materials.select_related('stock_item')),
            Decimal('0.00'),
        )

    class Meta:
        db_table = 'projects'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_project_status'),
            models.Index(fields=['client', 'status'], name='idx_project_client_status'),
        ]


class ProjectMaterial(models.Model):
    """Bill of materials line: a stock item consumed by a project"""
    project = models.ForeignKey(Project, on_delete=models.PROTECT, related_name='materials')
    stock_item = models.ForeignKey(StockItem, on_delete=models.PROTECT, related_name='project_materials')
    quantity_used = models.DecimalField(max_digits=12, decimal_places=3)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.project} - {self.stock_item} x {self.quantity_used}"

    def get_line_cost(self):
        """Line cost at the stock item's current unit cost (not snapshotted)"""
        return self.quantity_used * self.stock_item.unit_cost

    class Meta:
        db_table = 'project_materials'
        ordering = ['-created_at', '-id']
