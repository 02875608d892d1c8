from rest_framework import serializers

from .models import Client, EggWeight, ExpenseType, MaterialName, MeasurementUnit, Medicine


class MaterialNameSerializer(serializers.ModelSerializer):
    class Meta:
        model = MaterialName
        fields = ['id', 'material_name', 'created_at', 'updated_at']


class MeasurementUnitSerializer(serializers.ModelSerializer):
    class Meta:
        model = MeasurementUnit
        fields = ['id', 'unit_name', 'created_at', 'updated_at']


class EggWeightSerializer(serializers.ModelSerializer):
    class Meta:
        model = EggWeight
        fields = ['id', 'weight_range', 'created_at', 'updated_at']


class ExpenseTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = ExpenseType
        fields = ['id', 'name', 'created_at', 'updated_at']


class MedicineSerializer(serializers.ModelSerializer):
    class Meta:
        model = Medicine
        fields = ['id', 'name', 'description', 'day_of_age', 'created_at', 'updated_at']


class ClientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = ['id', 'name', 'type', 'created_at', 'updated_at']
