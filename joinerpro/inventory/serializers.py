from decimal import Decimal
from rest_framework import serializers
from .models import StockCategory, StockItem
from .valuation import stock_status
from joinerpro.core.fields import LocalizedDecimalField


class StockCategorySerializer(serializers.ModelSerializer):
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = StockCategory
        fields = ['id', 'name', 'item_count', 'created_at']
        # Duplicate names are reported as 409 by the view
        extra_kwargs = {'name': {'validators': []}}

    def get_item_count(self, obj):
        return obj.items.count()

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("The 'name' field is required.")
        return value


class StockItemSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True)
    quantity_on_hand = LocalizedDecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0'), required=False)
    reorder_threshold = LocalizedDecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0'), required=False)
    unit_cost = LocalizedDecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False)
    status = serializers.SerializerMethodField()
    stock_value = serializers.SerializerMethodField()

    class Meta:
        model = StockItem
        fields = [
            'id', 'name', 'description', 'category', 'category_name', 'unit',
            'quantity_on_hand', 'reorder_threshold', 'unit_cost',
            'status', 'stock_value', 'created_at', 'updated_at'
        ]
        extra_kwargs = {
            'category': {'error_messages': {'does_not_exist': 'The selected category does not exist.'}},
            'unit': {'required': True},
        }

    def get_status(self, obj):
        return stock_status(obj)

    def get_stock_value(self, obj):
        return obj.get_stock_value()

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required.')
        return value
