from django.contrib import admin
from .models import PayableAccount, ReceivableAccount


@admin.register(PayableAccount)
class PayableAccountAdmin(admin.ModelAdmin):
    list_display = ['description', 'amount', 'due_date', 'status', 'payment_method', 'settled_at']
    list_filter = ['status', 'payment_method', 'due_date']
    search_fields = ['description']
    ordering = ['due_date']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(ReceivableAccount)
class ReceivableAccountAdmin(admin.ModelAdmin):
    list_display = ['description', 'amount', 'due_date', 'status', 'project', 'payment_method', 'settled_at']
    list_filter = ['status', 'payment_method', 'due_date']
    search_fields = ['description', 'project__name']
    ordering = ['due_date']
    readonly_fields = ['created_at', 'updated_at']
