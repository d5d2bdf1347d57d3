from django.urls import path
from .views import (
    stock_item_list_create, stock_item_detail, stock_low, stock_summary,
    stock_category_list_create, stock_category_detail,
)

urlpatterns = [
    # StockItem endpoints
    path('stock/', stock_item_list_create, name='stock-item-list-create'),
    path('stock/<int:pk>/', stock_item_detail, name='stock-item-detail'),
    path('stock/low/', stock_low, name='stock-low'),
    path('stock/summary/', stock_summary, name='stock-summary'),

    # StockCategory endpoints
    path('stock/categories/', stock_category_list_create, name='stock-category-list-create'),
    path('stock/categories/<int:pk>/', stock_category_detail, name='stock-category-detail'),
]
