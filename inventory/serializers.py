from rest_framework import serializers

from .models import Material


class MaterialSerializer(serializers.ModelSerializer):
    """Stock row with warehouse, item and unit names."""
    warehouse = serializers.SerializerMethodField()
    material_name = serializers.CharField(source='item_name', read_only=True)
    unit_name = serializers.SerializerMethodField()
    is_medicine = serializers.BooleanField(read_only=True)

    class Meta:
        model = Material
        fields = [
            'id', 'warehouse_id', 'warehouse', 'material_name_id', 'medicine_id',
            'material_name', 'is_medicine', 'unit_id', 'unit_name',
            'opening_balance', 'purchases', 'sales', 'consumption', 'manufacturing',
            'current_balance', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_warehouse(self, obj):
        return {'name': obj.warehouse.name, 'farm_name': obj.warehouse.farm.name}

    def get_unit_name(self, obj):
        return obj.unit.unit_name if obj.unit_id else None


class MaterialCreateSerializer(serializers.Serializer):
    warehouse_id = serializers.UUIDField()
    material_name_id = serializers.UUIDField(required=False, allow_null=True)
    medicine_id = serializers.UUIDField(required=False, allow_null=True)
    unit_id = serializers.UUIDField(required=False, allow_null=True)
    opening_balance = serializers.DecimalField(max_digits=14, decimal_places=2, default=0)


class MaterialUpdateSerializer(serializers.Serializer):
    unit_id = serializers.UUIDField(required=False, allow_null=True)
    opening_balance = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    purchases = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    sales = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    consumption = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    manufacturing = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
