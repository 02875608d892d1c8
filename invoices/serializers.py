from rest_framework import serializers

from .models import Invoice, InvoiceAttachment, InvoiceExpense, InvoiceItem


class WarehouseSummaryMixin:
    def get_warehouse(self, obj):
        if not obj.warehouse_id:
            return None
        return {'name': obj.warehouse.name, 'farm_name': obj.warehouse.farm.name}


class InvoiceSerializer(WarehouseSummaryMixin, serializers.ModelSerializer):
    """Invoice with warehouse {name, farm_name} and client {name, type}."""
    warehouse = serializers.SerializerMethodField()
    client = serializers.SerializerMethodField()

    class Meta:
        model = Invoice
        fields = [
            'id', 'invoice_type', 'invoice_number', 'invoice_date', 'invoice_time',
            'warehouse_id', 'warehouse', 'client_id', 'client',
            'total_items_value', 'total_expenses_value', 'net_value',
            'checked', 'notes', 'created_at', 'updated_at',
        ]

    def get_client(self, obj):
        if not obj.client_id:
            return None
        return {'name': obj.client.name, 'type': obj.client.type}


class InvoiceCreateSerializer(serializers.Serializer):
    invoice_type = serializers.ChoiceField(choices=Invoice.InvoiceType.choices)
    invoice_number = serializers.CharField()
    invoice_date = serializers.DateField()
    invoice_time = serializers.TimeField(required=False, allow_null=True)
    warehouse_id = serializers.UUIDField(required=False, allow_null=True)
    client_id = serializers.UUIDField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class InvoiceUpdateSerializer(serializers.Serializer):
    invoice_type = serializers.ChoiceField(choices=Invoice.InvoiceType.choices, required=False)
    invoice_number = serializers.CharField(required=False)
    invoice_date = serializers.DateField(required=False)
    invoice_time = serializers.TimeField(required=False, allow_null=True)
    warehouse_id = serializers.UUIDField(required=False, allow_null=True)
    client_id = serializers.UUIDField(required=False, allow_null=True)
    checked = serializers.BooleanField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class InvoiceItemSerializer(serializers.ModelSerializer):
    material_name = serializers.SerializerMethodField()
    medicine_name = serializers.SerializerMethodField()
    medicine_day_of_age = serializers.SerializerMethodField()
    unit_name = serializers.SerializerMethodField()
    egg_weight = serializers.SerializerMethodField()

    class Meta:
        model = InvoiceItem
        fields = [
            'id', 'invoice_id', 'material_name_id', 'material_name', 'medicine_id',
            'medicine_name', 'medicine_day_of_age', 'unit_id', 'unit_name',
            'egg_weight_id', 'egg_weight', 'quantity', 'weight', 'price', 'value',
        ]

    def get_material_name(self, obj):
        return obj.material_name.material_name if obj.material_name_id else None

    def get_medicine_name(self, obj):
        return obj.medicine.name if obj.medicine_id else None

    def get_medicine_day_of_age(self, obj):
        return obj.medicine.day_of_age if obj.medicine_id else None

    def get_unit_name(self, obj):
        return obj.unit.unit_name if obj.unit_id else None

    def get_egg_weight(self, obj):
        return obj.egg_weight.weight_range if obj.egg_weight_id else None


class InvoiceItemCreateSerializer(serializers.Serializer):
    material_name_id = serializers.UUIDField(required=False, allow_null=True)
    medicine_id = serializers.UUIDField(required=False, allow_null=True)
    unit_id = serializers.UUIDField(required=False, allow_null=True)
    egg_weight_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    weight = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)


class InvoiceItemUpdateSerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)
    weight = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)


