from django.db import models


class ClientQuerySet(models.QuerySet):
    def with_project_count(self):
        return self.annotate(project_count=models.Count('projects'))


class Client(models.Model):
    """Customers who commission furniture projects"""
    name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ClientQuerySet.as_manager()

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'clients'
        ordering = ['name']
