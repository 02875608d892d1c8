from rest_framework import serializers

from .models import ManufacturingInvoice, ManufacturingInvoiceItem


class ManufacturingInvoiceSerializer(serializers.ModelSerializer):
    """Batch with warehouse {name, farm_name}, output material and unit names."""
    warehouse = serializers.SerializerMethodField()
    material_name = serializers.SerializerMethodField()
    unit_name = serializers.SerializerMethodField()

    class Meta:
        model = ManufacturingInvoice
        fields = [
            'id', 'invoice_number', 'warehouse_id', 'warehouse', 'blend_name',
            'material_name_id', 'material_name', 'unit_id', 'unit_name', 'quantity',
            'output_added', 'manufacturing_date', 'manufacturing_time',
            'total_expenses_value', 'notes', 'created_at', 'updated_at',
        ]

    def get_warehouse(self, obj):
        if not obj.warehouse_id:
            return None
        return {'name': obj.warehouse.name, 'farm_name': obj.warehouse.farm.name}

    def get_material_name(self, obj):
        return obj.material_name.material_name if obj.material_name_id else None

    def get_unit_name(self, obj):
        return obj.unit.unit_name if obj.unit_id else None


class ManufacturingInvoiceCreateSerializer(serializers.Serializer):
    invoice_number = serializers.CharField()
    warehouse_id = serializers.UUIDField()
    blend_name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    material_name_id = serializers.UUIDField(required=False, allow_null=True)
    unit_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, default=0)
    manufacturing_date = serializers.DateField()
    manufacturing_time = serializers.TimeField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ManufacturingItemSerializer(serializers.ModelSerializer):
    material_name = serializers.SerializerMethodField()
    unit_name = serializers.SerializerMethodField()

    class Meta:
        model = ManufacturingInvoiceItem
        fields = [
            'id', 'manufacturing_invoice_id', 'material_name_id', 'material_name',
            'unit_id', 'unit_name', 'quantity', 'blend_count', 'weight', 'created_at',
        ]

    def get_material_name(self, obj):
        return obj.material_name.material_name if obj.material_name_id else None

    def get_unit_name(self, obj):
        return obj.unit.unit_name if obj.unit_id else None


class ManufacturingItemCreateSerializer(serializers.Serializer):
    material_name_id = serializers.UUIDField()
    unit_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    blend_count = serializers.IntegerField(min_value=1, default=1)
    weight = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
