from rest_framework import serializers

from core.serializers import ExpenseWriteSerializer

from .models import MedicationAlert, MedicineConsumptionInvoice, MedicineConsumptionItem


class MedicineInvoiceSerializer(serializers.ModelSerializer):
    warehouse = serializers.SerializerMethodField()
    poultry_status = serializers.SerializerMethodField()

    class Meta:
        model = MedicineConsumptionInvoice
        fields = [
            'id', 'invoice_number', 'invoice_date', 'invoice_time', 'warehouse_id',
            'poultry_status_id', 'total_value', 'notes', 'created_at', 'updated_at',
            'warehouse', 'poultry_status',
        ]

    def get_warehouse(self, obj):
        if not obj.warehouse_id:
            return None
        warehouse = obj.warehouse
        farm_name = warehouse.farm.name if warehouse.farm_id else None
        return {'name': warehouse.name or 'Unknown', 'farm_name': farm_name or 'Unknown farm'}

    def get_poultry_status(self, obj):
        if not obj.poultry_status_id:
            return None
        return {'status_name': obj.poultry_status.batch_name or 'Unknown'}


class MedicineItemSerializer(serializers.ModelSerializer):
    medicine_name = serializers.SerializerMethodField()
    unit_name = serializers.SerializerMethodField()

    class Meta:
        model = MedicineConsumptionItem
        fields = [
            'id', 'consumption_invoice_id', 'medicine_id', 'medicine_name', 'unit_id', 'unit_name',
            'administration_day', 'administration_date', 'quantity', 'price', 'value', 'created_at',
        ]

    def get_medicine_name(self, obj):
        return obj.medicine.name if obj.medicine_id else None

    def get_unit_name(self, obj):
        return obj.unit.unit_name if obj.unit_id else None


class MedicineItemCreateSerializer(serializers.Serializer):
    medicine_id = serializers.UUIDField()
    unit_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, default=0)
    administration_day = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    administration_date = serializers.DateField(required=False, allow_null=True)


class MedicineInvoiceWriteSerializer(serializers.Serializer):
    invoice_number = serializers.CharField()
    invoice_date = serializers.DateField()
    invoice_time = serializers.TimeField(required=False, allow_null=True)
    warehouse_id = serializers.UUIDField()
    poultry_status_id = serializers.UUIDField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class FarmerMedicineInvoiceSerializer(MedicineInvoiceWriteSerializer):
    items = MedicineItemCreateSerializer(many=True, required=False)
    expenses = ExpenseWriteSerializer(many=True, required=False)


class MedicationAlertSerializer(serializers.ModelSerializer):
    medicine_name = serializers.CharField(source='medicine.name', read_only=True)

    class Meta:
        model = MedicationAlert
        fields = [
            'id', 'farm_id', 'poultry_status_id', 'medicine_id', 'medicine_name',
            'scheduled_day', 'scheduled_date', 'alert_date', 'is_administered',
            'administered_at', 'notes', 'created_at', 'updated_at',
        ]


class AlertNotesSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
