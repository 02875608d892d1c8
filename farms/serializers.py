from rest_framework import serializers

from .models import Farm, PoultryStatus, Warehouse


class FarmSerializer(serializers.ModelSerializer):
    """Farm enriched with its farmer, warehouse and poultry batch."""
    user = serializers.SerializerMethodField()
    warehouse = serializers.SerializerMethodField()
    poultry_status = serializers.SerializerMethodField()

    class Meta:
        model = Farm
        fields = [
            'id', 'name', 'location', 'is_active', 'user_id', 'user',
            'warehouse', 'poultry_status', 'created_at', 'updated_at',
        ]

    def get_user(self, obj):
        if not obj.user_id:
            return None
        return {'full_name': obj.user.full_name, 'email': obj.user.email}

    def get_warehouse(self, obj):
        warehouse = getattr(obj, 'warehouse', None)
        if warehouse is None:
            return None
        return {'id': warehouse.id, 'name': warehouse.name}

    def get_poultry_status(self, obj):
        batch = getattr(obj, 'poultry_status', None)
        if batch is None:
            return None
        return {'id': batch.id, 'batch_name': batch.batch_name, 'remaining_chicks': batch.remaining_chicks}


class FarmWriteSerializer(serializers.Serializer):
    name = serializers.CharField()
    location = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    is_active = serializers.BooleanField(required=False, default=True)
    user_id = serializers.UUIDField(required=False, allow_null=True)


class WarehouseSerializer(serializers.ModelSerializer):
    farm_name = serializers.CharField(source='farm.name', read_only=True)

    class Meta:
        model = Warehouse
        fields = ['id', 'name', 'farm_id', 'farm_name', 'created_at', 'updated_at']


class WarehouseWriteSerializer(serializers.Serializer):
    name = serializers.CharField()
    farm_id = serializers.UUIDField()


class PoultryStatusSerializer(serializers.ModelSerializer):
    farm_name = serializers.CharField(source='farm.name', read_only=True)

    class Meta:
        model = PoultryStatus
        fields = [
            'id', 'farm_id', 'farm_name', 'batch_name', 'opening_chicks',
            'dead_chicks', 'remaining_chicks', 'chick_birth_date',
            'created_at', 'updated_at',
        ]


class PoultryCreateSerializer(serializers.Serializer):
    farm_id = serializers.UUIDField()
    batch_name = serializers.CharField()
    opening_chicks = serializers.IntegerField()
    chick_birth_date = serializers.DateField(required=False, allow_null=True)


class PoultryUpdateSerializer(serializers.Serializer):
    batch_name = serializers.CharField(required=False)
    opening_chicks = serializers.IntegerField(required=False)
    dead_chicks = serializers.IntegerField(required=False)
    chick_birth_date = serializers.DateField(required=False, allow_null=True)


class SimpleFarmSerializer(serializers.ModelSerializer):
    class Meta:
        model = Farm
        fields = ['id', 'name', 'location', 'is_active']


# =============================================================================
# FARM SETUP
# =============================================================================

class SetupUserSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    full_name = serializers.CharField(required=False, allow_blank=True, default='')


class SetupFarmSerializer(serializers.Serializer):
    name = serializers.CharField()
    location = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    is_active = serializers.BooleanField(required=False, default=True)


class SetupWarehouseSerializer(serializers.Serializer):
    name = serializers.CharField()


class SetupPoultrySerializer(serializers.Serializer):
    batch_name = serializers.CharField()
    opening_chicks = serializers.IntegerField()
    chick_birth_date = serializers.DateField(required=False, allow_null=True)


class FarmSetupSerializer(serializers.Serializer):
    """
    Opening stock rows are passed through untouched; the setup service
    skips any row it cannot create.
    """
    user = SetupUserSerializer()
    farm = SetupFarmSerializer()
    warehouse = SetupWarehouseSerializer()
    poultry = SetupPoultrySerializer()
    materials = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    medicines = serializers.ListField(child=serializers.DictField(), required=False, default=list)
