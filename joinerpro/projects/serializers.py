from decimal import Decimal
from django.conf import settings
from rest_framework import serializers
from .deadlines import project_deadline
from .models import Project, ProjectMaterial
from joinerpro.clients.models import Client
from joinerpro.core.fields import LocalizedDecimalField


class ProjectClientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = ['id', 'name', 'email', 'phone']


class ProjectSerializer(serializers.ModelSerializer):
    client_detail = ProjectClientSerializer(source='client', read_only=True)
    total_value = LocalizedDecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    delivery_days = serializers.IntegerField(min_value=0, required=False)
    deadline = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = [
            'id', 'client', 'client_detail', 'name', 'description', 'total_value',
            'status', 'delivery_days', 'production_started_at', 'deadline',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['production_started_at', 'created_at', 'updated_at']
        extra_kwargs = {
            'client': {'error_messages': {'does_not_exist': 'The selected client does not exist.'}},
        }

    def get_deadline(self, obj):
        return project_deadline(obj).as_dict()

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required.')
        return value

    def validate_delivery_days(self, value):
        return value or settings.JOINERPRO_DEFAULT_DELIVERY_DAYS

    def create(self, validated_data):
        # New projects always start as a quote with no production start
        validated_data.pop('status', None)
        validated_data['status'] = Project.STATUS_QUOTE
        return super().create(validated_data)

    def update(self, instance, validated_data):
        new_status = validated_data.pop('status', None)
        self.production_started = False
        if new_status:
            self.production_started = instance.apply_status(new_status)
        return super().update(instance, validated_data)


class ProjectMaterialSerializer(serializers.ModelSerializer):
    stock_item_name = serializers.CharField(source='stock_item.name', read_only=True)
    unit = serializers.CharField(source='stock_item.unit', read_only=True)
    unit_cost = serializers.DecimalField(source='stock_item.unit_cost', max_digits=12, decimal_places=2, read_only=True)
    quantity_used = LocalizedDecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.001'))
    line_cost = serializers.SerializerMethodField()

    class Meta:
        model = ProjectMaterial
        fields = ['id', 'project', 'stock_item', 'stock_item_name', 'unit', 'unit_cost', 'quantity_used', 'line_cost', 'created_at']
        read_only_fields = ['project', 'created_at']
        extra_kwargs = {
            'stock_item': {'error_messages': {'does_not_exist': 'The selected stock item does not exist.'}},
        }

    def get_line_cost(self, obj):
        return obj.get_line_cost()


class ProjectDetailSerializer(ProjectSerializer):
    materials = serializers.SerializerMethodField()
    material_cost = serializers.SerializerMethodField()

    class Meta(ProjectSerializer.Meta):
        fields = ProjectSerializer.Meta.fields + ['materials', 'material_cost']

    def get_materials(self, obj):
        lines = obj.materials.select_related('stock_item')
        return ProjectMaterialSerializer(lines, many=True).data

    def get_material_cost(self, obj):
        return obj.get_material_cost()
