"""
URL configuration for the Joiner PRO backend.

Every resource family is mounted under /api/v1/ by its own app urls module.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Joiner PRO Administration"
admin.site.site_title = "Joiner PRO Admin"
admin.site.index_title = "Joiner PRO management"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('joinerpro.core.urls')),
    path('api/v1/', include('joinerpro.clients.urls')),
    path('api/v1/', include('joinerpro.inventory.urls')),
    path('api/v1/', include('joinerpro.projects.urls')),
    path('api/v1/', include('joinerpro.finance.urls')),
    path('api/v1/', include('joinerpro.reports.urls')),
]
