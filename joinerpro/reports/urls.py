from django.urls import path
from . import views

urlpatterns = [
    path('reports/financial-summary/', views.financial_summary_report, name='financial-summary'),
    path('reports/dashboard/', views.dashboard_report, name='dashboard'),

    # Spreadsheet downloads
    path('reports/clients/export/', views.clients_export, name='clients-export'),
    path('reports/stock/export/', views.stock_export, name='stock-export'),
    path('reports/projects/export/', views.projects_export, name='projects-export'),
    path('reports/finance/export/', views.finance_export, name='finance-export'),
]
