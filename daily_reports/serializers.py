from rest_framework import serializers

from .models import DailyReport

QUANTITY = dict(max_digits=14, decimal_places=2, min_value=0, default=0)


class DailyReportSerializer(serializers.ModelSerializer):
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True)
    farm_name = serializers.CharField(source='warehouse.farm.name', read_only=True)

    class Meta:
        model = DailyReport
        fields = [
            'id', 'warehouse_id', 'warehouse_name', 'farm_name', 'report_date', 'report_time',
            'production_eggs_healthy', 'production_eggs_deformed', 'production_eggs', 'production_egg_rate',
            'eggs_sold', 'eggs_gift', 'previous_eggs_balance', 'current_eggs_balance', 'carton_consumption',
            'chicks_before', 'chicks_dead', 'chicks_after',
            'feed_daily_kg', 'feed_monthly_kg', 'feed_ratio', 'production_droppings',
            'notes', 'checked', 'created_at', 'updated_at',
        ]


class DailyReportWriteSerializer(serializers.ModelSerializer):
    """Plain create/update; every figure is taken as sent."""
    warehouse_id = serializers.UUIDField(required=False)

    class Meta:
        model = DailyReport
        fields = [
            'warehouse_id', 'report_date', 'report_time',
            'production_eggs_healthy', 'production_eggs_deformed', 'production_eggs', 'production_egg_rate',
            'eggs_sold', 'eggs_gift', 'previous_eggs_balance', 'current_eggs_balance', 'carton_consumption',
            'chicks_before', 'chicks_dead', 'chicks_after',
            'feed_daily_kg', 'feed_monthly_kg', 'feed_ratio', 'production_droppings',
            'notes', 'checked',
        ]
        extra_kwargs = {'report_date': {'required': False}}


class EggSaleItemSerializer(serializers.Serializer):
    egg_weight_id = serializers.UUIDField(required=False, allow_null=True)
    unit_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)


class EggSaleInvoiceSerializer(serializers.Serializer):
    client_id = serializers.UUIDField(required=False, allow_null=True)
    items = EggSaleItemSerializer(many=True)


class DroppingsSaleSerializer(serializers.Serializer):
    unit_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    client_id = serializers.UUIDField(required=False, allow_null=True)


class MedicineConsumptionLineSerializer(serializers.Serializer):
    medicine_id = serializers.UUIDField()
    unit_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, default=0)


class IntegratedDailyReportSerializer(serializers.Serializer):
    warehouse_id = serializers.UUIDField()
    report_date = serializers.DateField()
    report_time = serializers.TimeField(required=False, allow_null=True)
    production_eggs_healthy = serializers.DecimalField(**QUANTITY)
    production_eggs_deformed = serializers.DecimalField(**QUANTITY)
    eggs_sold = serializers.DecimalField(**QUANTITY)
    eggs_gift = serializers.DecimalField(**QUANTITY)
    previous_eggs_balance = serializers.DecimalField(**QUANTITY)
    carton_consumption = serializers.DecimalField(**QUANTITY)
    chicks_dead = serializers.IntegerField(min_value=0, default=0)
    feed_daily_kg = serializers.DecimalField(**QUANTITY)
    feed_ratio = serializers.DecimalField(**QUANTITY)
    production_droppings = serializers.DecimalField(**QUANTITY)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    poultry_status_id = serializers.UUIDField(required=False, allow_null=True)

    egg_sale_invoices = EggSaleInvoiceSerializer(many=True, required=False)
    droppings_sale_invoice = DroppingsSaleSerializer(required=False, allow_null=True)
    medicine_consumption_items = MedicineConsumptionLineSerializer(many=True, required=False)
