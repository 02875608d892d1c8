"""
Invoice Views (admin writes, sub admins read)

- GET/POST      /api/invoices/                         (?invoice_type=&warehouse_id=&checked=)
- GET           /api/invoices/export/                  .xlsx download
- GET/PATCH/DELETE /api/invoices/{id}/
- POST          /api/invoices/{id}/toggle-checked/
- GET/POST      /api/invoices/{id}/items/
- PATCH/DELETE  /api/invoices/items/{item_id}/
- GET/POST      /api/invoices/{id}/expenses/
- PATCH/DELETE  /api/invoices/expenses/{expense_id}/
- GET/POST      /api/invoices/{id}/attachments/
- DELETE        /api/invoices/attachments/{attachment_id}/
"""

from rest_framework import status
from rest_framework.views import APIView

from accounts.permissions import AdminWriteSubAdminRead, IsAdmin, IsAdminOrSubAdmin
from core.actions import action_response
from core.views import (
    AttachmentDetailView,
    AttachmentListView,
    ExpenseDetailView,
    ExpenseListView,
    invalid,
)

from .exports import export_invoices
from .serializers import (
    InvoiceCreateSerializer,
    InvoiceItemCreateSerializer,
    InvoiceItemSerializer,
    InvoiceItemUpdateSerializer,
    InvoiceSerializer,
    InvoiceUpdateSerializer,
)
from .services import (
    InvoiceAttachmentService,
    InvoiceExpenseService,
    InvoiceItemService,
    InvoiceService,
)


def _filters(params):
    checked = params.get('checked')
    return {
        'invoice_type': params.get('invoice_type'),
        'warehouse_id': params.get('warehouse_id'),
        'checked': None if checked in (None, '') else checked.lower() in ('true', '1'),
    }


class InvoiceListView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request):
        result = InvoiceService.list_invoices(**_filters(request.query_params))
        return action_response(result, InvoiceSerializer, many=True)

    def post(self, request):
        serializer = InvoiceCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = InvoiceService.create_invoice(**serializer.validated_data)
        return action_response(result, InvoiceSerializer, success_status=status.HTTP_201_CREATED)


class InvoiceExportView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get(self, request):
        result = InvoiceService.list_invoices(**_filters(request.query_params))
        if not result.success:
            return action_response(result)
        return export_invoices(result.data)


class InvoiceDetailView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request, invoice_id):
        return action_response(InvoiceService.get_invoice(invoice_id), InvoiceSerializer)

    def patch(self, request, invoice_id):
        serializer = InvoiceUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = InvoiceService.update_invoice(invoice_id, **serializer.validated_data)
        return action_response(result, InvoiceSerializer)

    def delete(self, request, invoice_id):
        return action_response(InvoiceService.delete_invoice(invoice_id))


class InvoiceToggleCheckedView(APIView):
    permission_classes = [IsAdmin]

    def post(self, request, invoice_id):
        return action_response(InvoiceService.toggle_checked(invoice_id), InvoiceSerializer)


class InvoiceItemListView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request, invoice_id):
        return action_response(InvoiceItemService.list(invoice_id), InvoiceItemSerializer, many=True)

    def post(self, request, invoice_id):
        serializer = InvoiceItemCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = InvoiceItemService.create(invoice_id, **serializer.validated_data)
        return action_response(result, InvoiceItemSerializer, success_status=status.HTTP_201_CREATED)


class InvoiceItemDetailView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def patch(self, request, item_id):
        serializer = InvoiceItemUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        return action_response(InvoiceItemService.update(item_id, **serializer.validated_data), InvoiceItemSerializer)

    def delete(self, request, item_id):
        return action_response(InvoiceItemService.delete(item_id))


class InvoiceExpenseListView(ExpenseListView):
    permission_classes = [AdminWriteSubAdminRead]
    service = InvoiceExpenseService


class InvoiceExpenseDetailView(ExpenseDetailView):
    permission_classes = [AdminWriteSubAdminRead]
    service = InvoiceExpenseService


class InvoiceAttachmentListView(AttachmentListView):
    permission_classes = [AdminWriteSubAdminRead]
    service = InvoiceAttachmentService


class InvoiceAttachmentDetailView(AttachmentDetailView):
    permission_classes = [AdminWriteSubAdminRead]
    service = InvoiceAttachmentService
