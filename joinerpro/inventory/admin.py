from django.contrib import admin
from .models import StockCategory, StockItem


@admin.register(StockCategory)
class StockCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']
    ordering = ['name']


@admin.register(StockItem)
class StockItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'unit', 'quantity_on_hand', 'reorder_threshold', 'unit_cost', 'is_low', 'updated_at']
    list_filter = ['category', 'unit']
    search_fields = ['name', 'description']
    ordering = ['name']
    readonly_fields = ['created_at', 'updated_at']

    @admin.display(boolean=True, description='Low stock')
    def is_low(self, obj):
        return obj.is_low
