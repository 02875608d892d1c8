"""
Inventory Views

Materials (admin):
- GET    /api/inventory/materials/                     list (?warehouse_id=)
- POST   /api/inventory/materials/                     create stock row
- GET    /api/inventory/materials/aggregated/          totals across warehouses
- GET    /api/inventory/materials/summary/             stock counts
- GET    /api/inventory/materials/warehouses/          warehouses for the picker
- GET    /api/inventory/materials/balance/             ?warehouse_id=&item_id=
- PATCH  /api/inventory/materials/{id}/                edit movement columns
- DELETE /api/inventory/materials/{id}/

Inventory report (admin, sub admin):
- GET /api/inventory/report/                           (?warehouse_id=)
- GET /api/inventory/report/summary/
- GET /api/inventory/report/by-warehouse/
- GET /api/inventory/report/export/                    .xlsx download
"""

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import AdminWriteSubAdminRead, IsAdminOrSubAdmin
from core.actions import action_response

from .exports import export_inventory
from .reports import InventoryReportService
from .serializers import MaterialCreateSerializer, MaterialSerializer, MaterialUpdateSerializer
from .services import MaterialService


class MaterialListView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request):
        result = MaterialService.list_materials(request.query_params.get('warehouse_id'))
        return action_response(result, MaterialSerializer, many=True)

    def post(self, request):
        serializer = MaterialCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'success': False, 'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        result = MaterialService.create_material(**serializer.validated_data)
        return action_response(result, MaterialSerializer, success_status=status.HTTP_201_CREATED)


class MaterialDetailView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request, material_id):
        return action_response(MaterialService.get_material(material_id), MaterialSerializer)

    def patch(self, request, material_id):
        serializer = MaterialUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'success': False, 'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        result = MaterialService.update_material(material_id, **serializer.validated_data)
        return action_response(result, MaterialSerializer)

    def delete(self, request, material_id):
        return action_response(MaterialService.delete_material(material_id))


class AggregatedMaterialsView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get(self, request):
        return action_response(MaterialService.aggregated_materials())


class MaterialsSummaryView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get(self, request):
        return action_response(MaterialService.materials_summary())


class MaterialWarehousesView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return action_response(MaterialService.warehouses_for_materials())


class MaterialBalanceView(APIView):
    """Current balance of one item; used by invoice and manufacturing forms."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        result = MaterialService.material_inventory(
            request.query_params.get('warehouse_id'),
            request.query_params.get('item_id'),
        )
        return action_response(result)


class InventoryReportView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get(self, request):
        return action_response(InventoryReportService.inventory_report(request.query_params.get('warehouse_id')))


class InventorySummaryView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get(self, request):
        return action_response(InventoryReportService.inventory_summary())


class InventoryByWarehouseView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get(self, request):
        return action_response(InventoryReportService.inventory_by_warehouse())


class InventoryExportView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get(self, request):
        result = InventoryReportService.inventory_report(request.query_params.get('warehouse_id'))
        if not result.success:
            return action_response(result)
        return export_inventory(result.data)
