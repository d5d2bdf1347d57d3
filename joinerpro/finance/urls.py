from django.urls import path
from .views import (
    payable_list_create, payable_detail, payable_settle,
    receivable_list_create, receivable_detail, receivable_settle,
)

urlpatterns = [
    # PayableAccount endpoints
    path('payables/', payable_list_create, name='payable-list-create'),
    path('payables/<int:pk>/', payable_detail, name='payable-detail'),
    path('payables/<int:pk>/settle/', payable_settle, name='payable-settle'),

    # ReceivableAccount endpoints
    path('receivables/', receivable_list_create, name='receivable-list-create'),
    path('receivables/<int:pk>/', receivable_detail, name='receivable-detail'),
    path('receivables/<int:pk>/settle/', receivable_settle, name='receivable-settle'),
]
