from rest_framework import serializers
from .models import Client
from joinerpro.projects.models import Project


class ClientSerializer(serializers.ModelSerializer):
    project_count = serializers.SerializerMethodField()

    class Meta:
        model = Client
        fields = ['id', 'name', 'email', 'phone', 'address', 'project_count', 'created_at', 'updated_at']
        # Duplicate e-mails are reported as 409 by the view, not as a 400 field error
        extra_kwargs = {'email': {'validators': []}}

    def get_project_count(self, obj):
        count = getattr(obj, 'project_count', None)
        if count is None:
            count = obj.projects.count()
        return count

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required.')
        return value

    def validate_email(self, value):
        return value.strip().lower()


class ClientProjectSerializer(serializers.ModelSerializer):
    class Meta:
        model = Project
        fields = ['id', 'name', 'status', 'total_value', 'delivery_days', 'production_started_at', 'created_at']


class ClientDetailSerializer(ClientSerializer):
    projects = serializers.SerializerMethodField()

    class Meta(ClientSerializer.Meta):
        fields = ClientSerializer.Meta.fields + ['projects']

    def get_projects(self, obj):
        projects = obj.projects.order_by('-created_at', '-id')
        return ClientProjectSerializer(projects, many=True).data
