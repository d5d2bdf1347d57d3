from django.urls import path
from .views import (
    project_list_create, project_detail,
    project_material_list_create, project_material_detail,
)

urlpatterns = [
    # Project endpoints
    path('projects/', project_list_create, name='project-list-create'),
    path('projects/<int:pk>/', project_detail, name='project-detail'),

    # Bill of materials endpoints
    path('projects/<int:pk>/materials/', project_material_list_create, name='project-material-list-create'),
    path('projects/<int:pk>/materials/<int:material_id>/', project_material_detail, name='project-material-detail'),
]
