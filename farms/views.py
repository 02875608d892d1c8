"""
Farm Management Views

Admin endpoints (sub admins read):
- /api/farms/                          list, create
- /api/farms/{id}/                     read, update, delete
- /api/farms/available-users/          farmers without a farm
- /api/farms/warehouses/               list, create
- /api/farms/warehouses/{id}/          read, update, delete
- /api/farms/warehouses/available-farms/
- /api/farms/poultry/                  list, create
- /api/farms/poultry/{id}/             read, update, delete
- /api/farms/poultry/available-farms/
- /api/farms/setup/                    complete farm setup (admin)

Farmer endpoints:
- /api/farms/my-warehouses/
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import AdminWriteSubAdminRead, IsAdmin, IsAdminOrSubAdmin, IsFarmer
from accounts.serializers import UserSerializer
from core.actions import action_response

from .serializers import (
    FarmSerializer,
    FarmSetupSerializer,
    FarmWriteSerializer,
    PoultryCreateSerializer,
    PoultryStatusSerializer,
    PoultryUpdateSerializer,
    SimpleFarmSerializer,
    WarehouseSerializer,
    WarehouseWriteSerializer,
)
from .services import FarmService, FarmSetupService, PoultryService, WarehouseService


def _invalid(serializer):
    return Response({'success': False, 'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)


# =============================================================================
# FARMS
# =============================================================================

class FarmListView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request):
        return action_response(FarmService.list_farms(), FarmSerializer, many=True)

    def post(self, request):
        serializer = FarmWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer)
        result = FarmService.create_farm(**serializer.validated_data)
        return action_response(result, FarmSerializer, success_status=status.HTTP_201_CREATED)


class FarmDetailView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request, farm_id):
        return action_response(FarmService.get_farm(farm_id), FarmSerializer)

    def patch(self, request, farm_id):
        serializer = FarmWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return _invalid(serializer)
        return action_response(FarmService.update_farm(farm_id, **serializer.validated_data), FarmSerializer)

    def delete(self, request, farm_id):
        return action_response(FarmService.delete_farm(farm_id))


class AvailableUsersView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get(self, request):
        return action_response(FarmService.users_without_farms(), UserSerializer, many=True)


# =============================================================================
# WAREHOUSES
# =============================================================================

class WarehouseListView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request):
        return action_response(WarehouseService.list_warehouses(), WarehouseSerializer, many=True)

    def post(self, request):
        serializer = WarehouseWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer)
        result = WarehouseService.create_warehouse(**serializer.validated_data)
        return action_response(result, WarehouseSerializer, success_status=status.HTTP_201_CREATED)


class WarehouseDetailView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request, warehouse_id):
        return action_response(WarehouseService.get_warehouse(warehouse_id), WarehouseSerializer)

    def patch(self, request, warehouse_id):
        serializer = WarehouseWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return _invalid(serializer)
        result = WarehouseService.update_warehouse(warehouse_id, **serializer.validated_data)
        return action_response(result, WarehouseSerializer)

    def delete(self, request, warehouse_id):
        return action_response(WarehouseService.delete_warehouse(warehouse_id))


class FarmsWithoutWarehouseView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get(self, request):
        return action_response(WarehouseService.farms_without_warehouses(), SimpleFarmSerializer, many=True)


class FarmerWarehousesView(APIView):
    """GET /api/farms/my-warehouses/ - the signed-in farmer's warehouses."""
    permission_classes = [IsFarmer]

    def get(self, request):
        return action_response(WarehouseService.farmer_warehouses(request.user), WarehouseSerializer, many=True)


# =============================================================================
# POULTRY BATCHES
# =============================================================================

class PoultryListView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request):
        return action_response(PoultryService.list_poultry(), PoultryStatusSerializer, many=True)

    def post(self, request):
        serializer = PoultryCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer)
        result = PoultryService.create_poultry(**serializer.validated_data)
        return action_response(result, PoultryStatusSerializer, success_status=status.HTTP_201_CREATED)


class PoultryDetailView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request, poultry_id):
        return action_response(PoultryService.get_poultry(poultry_id), PoultryStatusSerializer)

    def patch(self, request, poultry_id):
        serializer = PoultryUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer)
        result = PoultryService.update_poultry(poultry_id, **serializer.validated_data)
        return action_response(result, PoultryStatusSerializer)

    def delete(self, request, poultry_id):
        return action_response(PoultryService.delete_poultry(poultry_id))


class FarmsWithoutPoultryView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get(self, request):
        return action_response(PoultryService.available_farms_for_poultry(), SimpleFarmSerializer, many=True)


# =============================================================================
# FARM SETUP
# =============================================================================

class FarmSetupView(APIView):
    """
    POST /api/farms/setup/

    Request Body:
    {
        "user": {"email": "...", "password": "...", "full_name": "..."},
        "farm": {"name": "...", "location": "..."},
        "warehouse": {"name": "..."},
        "poultry": {"batch_name": "...", "opening_chicks": 5000},
        "materials": [{"material_name_id": "...", "unit_id": "...", "opening_balance": 100}],
        "medicines": [{"medicine_id": "...", "unit_id": "...", "opening_balance": 10}]
    }
    """
    permission_classes = [IsAdmin]

    def post(self, request):
        serializer = FarmSetupSerializer(data=request.data)
        if not serializer.is_valid():
            return _invalid(serializer)
        result = FarmSetupService.create_complete_farm_setup(**serializer.validated_data)
        return action_response(result, success_status=status.HTTP_201_CREATED)
