from django.contrib import admin
from .models import Project, ProjectMaterial


class ProjectMaterialInline(admin.TabularInline):
    model = ProjectMaterial
    extra = 1
    readonly_fields = ['created_at']


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ['name', 'client', 'status', 'total_value', 'delivery_days', 'production_started_at', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['name', 'client__name', 'description']
    ordering = ['-created_at']
    inlines = [ProjectMaterialInline]
    readonly_fields = ['production_started_at', 'created_at', 'updated_at']
