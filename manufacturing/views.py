"""
Manufacturing Views

- GET/POST      /api/manufacturing/                       (farmers see their own farm)
- GET           /api/manufacturing/export/                .xlsx download
- GET/DELETE    /api/manufacturing/{id}/
- POST          /api/manufacturing/{id}/add-output/
- POST          /api/manufacturing/{id}/rollback/
- GET/POST      /api/manufacturing/{id}/items/
- DELETE        /api/manufacturing/items/{item_id}/
- GET/POST      /api/manufacturing/{id}/expenses/
- PATCH/DELETE  /api/manufacturing/expenses/{expense_id}/
- GET/POST      /api/manufacturing/{id}/attachments/
- DELETE        /api/manufacturing/attachments/{attachment_id}/
"""

from rest_framework import status
from rest_framework.views import APIView

from accounts.permissions import AdminWriteSubAdminRead, FarmScopedAccess, IsAdmin, IsAdminOrSubAdmin
from core.actions import action_response
from core.views import (
    AttachmentDetailView,
    AttachmentListView,
    ExpenseDetailView,
    ExpenseListView,
    invalid,
)

from .exports import export_manufacturing
from .models import ManufacturingInvoiceItem
from .serializers import (
    ManufacturingInvoiceCreateSerializer,
    ManufacturingInvoiceSerializer,
    ManufacturingItemCreateSerializer,
    ManufacturingItemSerializer,
)
from .services import (
    ManufacturingAttachmentService,
    ManufacturingExpenseService,
    ManufacturingItemService,
    ManufacturingService,
)


class ManufacturingListView(APIView):
    permission_classes = [FarmScopedAccess]

    def get(self, request):
        result = ManufacturingService.list(request.user)
        return action_response(result, ManufacturingInvoiceSerializer, many=True)

    def post(self, request):
        serializer = ManufacturingInvoiceCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = ManufacturingService.create(request.user, **serializer.validated_data)
        return action_response(result, ManufacturingInvoiceSerializer, success_status=status.HTTP_201_CREATED)


class ManufacturingExportView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get(self, request):
        result = ManufacturingService.list(request.user)
        if not result.success:
            return action_response(result)
        return export_manufacturing(result.data)


class ManufacturingDetailView(APIView):
    permission_classes = [FarmScopedAccess]

    def get_permissions(self):
        if self.request.method == 'DELETE':
            return [IsAdmin()]
        return super().get_permissions()

    def get(self, request, invoice_id):
        result = ManufacturingService.get(invoice_id, request.user)
        return action_response(result, ManufacturingInvoiceSerializer)

    def delete(self, request, invoice_id):
        return action_response(ManufacturingService.delete(invoice_id))


class ManufacturingAddOutputView(APIView):
    permission_classes = [FarmScopedAccess]

    def post(self, request, invoice_id):
        scoped = ManufacturingService.get(invoice_id, request.user)
        if not scoped.success:
            return action_response(scoped)
        return action_response(ManufacturingService.add_output_material_to_inventory(invoice_id))


class ManufacturingRollbackView(APIView):
    permission_classes = [FarmScopedAccess]

    def post(self, request, invoice_id):
        scoped = ManufacturingService.get(invoice_id, request.user)
        if not scoped.success:
            return action_response(scoped)
        return action_response(ManufacturingService.rollback(invoice_id))


class ManufacturingItemListView(APIView):
    permission_classes = [FarmScopedAccess]

    def get(self, request, invoice_id):
        scoped = ManufacturingService.get(invoice_id, request.user)
        if not scoped.success:
            return action_response(scoped)
        return action_response(ManufacturingItemService.list(invoice_id), ManufacturingItemSerializer, many=True)

    def post(self, request, invoice_id):
        scoped = ManufacturingService.get(invoice_id, request.user)
        if not scoped.success:
            return action_response(scoped)
        serializer = ManufacturingItemCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = ManufacturingItemService.create(invoice_id, **serializer.validated_data)
        return action_response(result, ManufacturingItemSerializer, success_status=status.HTTP_201_CREATED)


class ManufacturingItemDetailView(APIView):
    permission_classes = [FarmScopedAccess]

    def delete(self, request, item_id):
        invoice_id = (
            ManufacturingInvoiceItem.objects.filter(pk=item_id)
            .values_list('manufacturing_invoice_id', flat=True)
            .first()
        )
        if invoice_id is not None:
            scoped = ManufacturingService.get(invoice_id, request.user)
            if not scoped.success:
                return action_response(scoped)
        return action_response(ManufacturingItemService.delete(item_id))


class ManufacturingExpenseListView(ExpenseListView):
    permission_classes = [AdminWriteSubAdminRead]
    service = ManufacturingExpenseService


class ManufacturingExpenseDetailView(ExpenseDetailView):
    permission_classes = [AdminWriteSubAdminRead]
    service = ManufacturingExpenseService


class ManufacturingAttachmentListView(AttachmentListView):
    permission_classes = [AdminWriteSubAdminRead]
    service = ManufacturingAttachmentService


class ManufacturingAttachmentDetailView(AttachmentDetailView):
    permission_classes = [AdminWriteSubAdminRead]
    service = ManufacturingAttachmentService
