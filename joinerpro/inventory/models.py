from django.db import models
from decimal import Decimal


class StockCategory(models.Model):
    """Stock categories (boards, hardware, finishing...)"""
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'stock_categories'
        ordering = ['name']
        verbose_name_plural = 'stock categories'


class StockItemQuerySet(models.QuerySet):
    def with_category(self):
        return self.select_related('category')

    def low(self):
        """Items whose quantity on hand fell to or below the reorder threshold"""
        return self.filter(quantity_on_hand__lte=models.F('reorder_threshold'))


class StockItem(models.Model):
    """Raw materials kept in stock and consumed by projects"""
    UNIT_CHOICES = [
        ('UN', 'Unit'),
        ('M', 'Linear metre'),
        ('M2', 'Square metre'),
        ('KG', 'Kilogram'),
        ('L', 'Litre'),
        ('CX', 'Box'),
    ]

    name = models.CharField(max_length=200, db_index=True)
    description = models.TextField(blank=True)
    category = models.ForeignKey(StockCategory, on_delete=models.PROTECT, related_name='items')
    unit = models.CharField(max_length=5, choices=UNIT_CHOICES, default='UN')
    quantity_on_hand = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    reorder_threshold = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    unit_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = StockItemQuerySet.as_manager()

    def __str__(self):
        return self.name

    @property
    def is_low(self):
        # Equality counts as low
        return self.quantity_on_hand <= self.reorder_threshold

    def get_stock_value(self):
        """Value of the quantity on hand at the current unit cost"""
        return self.quantity_on_hand * self.unit_cost

    class Meta:
        db_table = 'stock_items'
        ordering = ['name']
        indexes = [
            models.Index(fields=['category', 'name'], name='idx_stockitem_category_name'),
        ]
