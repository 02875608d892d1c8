"""
Medication Management Views

Medicine consumption (admin writes, sub admins read):
- GET/POST      /api/medicine-consumption/
- GET/PUT/DELETE /api/medicine-consumption/{id}/
- GET/POST      /api/medicine-consumption/{id}/items/
- DELETE        /api/medicine-consumption/items/{item_id}/
- GET/POST      /api/medicine-consumption/{id}/expenses/
- PATCH/DELETE  /api/medicine-consumption/expenses/{expense_id}/
- GET/POST      /api/medicine-consumption/{id}/attachments/
- DELETE        /api/medicine-consumption/attachments/{attachment_id}/

Farmer:
- GET/POST      /api/medicine-consumption/farmer/
- GET           /api/medicine-consumption/farmer/{id}/

Plain JSON read:
- GET           /api/medicine-invoices/{id}/

Alerts:
- GET           /api/medication-alerts/                          (admin, ?farm_id=)
- GET           /api/medication-alerts/summary/                  (admin)
- GET           /api/medication-alerts/upcoming/                 (farmer)
- GET           /api/medication-alerts/chick-age/?birth_date=&reference_date=
- GET           /api/medication-alerts/farms/{farm_id}/          (?active=true&days_ahead=)
- GET           /api/medication-alerts/farms/{farm_id}/stats/
- GET/PATCH     /api/medication-alerts/{id}/                     PATCH updates notes
- POST          /api/medication-alerts/{id}/administer/
- POST          /api/medication-alerts/{id}/unadminister/
"""

import logging

from django.core.exceptions import ValidationError
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import AdminWriteSubAdminRead, IsAdminOrSubAdmin, IsFarmer
from core.actions import ActionResult, action_response
from core.views import (
    AttachmentDetailView,
    AttachmentListView,
    ExpenseDetailView,
    ExpenseListView,
    invalid,
)
from farms.models import Farm

from .models import MedicineConsumptionInvoice
from .serializers import (
    AlertNotesSerializer,
    FarmerMedicineInvoiceSerializer,
    MedicationAlertSerializer,
    MedicineInvoiceSerializer,
    MedicineInvoiceWriteSerializer,
    MedicineItemCreateSerializer,
    MedicineItemSerializer,
)
from .services import (
    MedicationAlertService,
    MedicineAttachmentService,
    MedicineExpenseService,
    MedicineInvoiceService,
    MedicineItemService,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CONSUMPTION INVOICES
# =============================================================================

class MedicineInvoiceListView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request):
        return action_response(MedicineInvoiceService.list(), MedicineInvoiceSerializer, many=True)

    def post(self, request):
        serializer = MedicineInvoiceWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = MedicineInvoiceService.create(**serializer.validated_data)
        return action_response(result, MedicineInvoiceSerializer, success_status=status.HTTP_201_CREATED)


class MedicineInvoiceDetailView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request, invoice_id):
        return action_response(MedicineInvoiceService.get(invoice_id), MedicineInvoiceSerializer)

    def put(self, request, invoice_id):
        serializer = MedicineInvoiceWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = MedicineInvoiceService.update(invoice_id, **serializer.validated_data)
        return action_response(result, MedicineInvoiceSerializer)

    def delete(self, request, invoice_id):
        return action_response(MedicineInvoiceService.delete(invoice_id))


class FarmerMedicineInvoiceListView(APIView):
    permission_classes = [IsFarmer]

    def get(self, request):
        result = MedicineInvoiceService.farmer_list(request.user)
        return action_response(result, MedicineInvoiceSerializer, many=True)

    def post(self, request):
        serializer = FarmerMedicineInvoiceSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = MedicineInvoiceService.farmer_create(request.user, **serializer.validated_data)
        return action_response(result, MedicineInvoiceSerializer, success_status=status.HTTP_201_CREATED)


class FarmerMedicineInvoiceDetailView(APIView):
    permission_classes = [IsFarmer]

    def get(self, request, invoice_id):
        result = MedicineInvoiceService.farmer_get(request.user, invoice_id)
        return action_response(result, MedicineInvoiceSerializer)


class MedicineInvoiceReadView(APIView):
    """
    Single invoice as plain JSON (no success/data envelope).

    Farmers only see invoices of their own farm's warehouse.
    """
    permission_classes = [permissions.IsAuthenticated]

    @staticmethod
    def find(invoice_id):
        try:
            return (
                MedicineConsumptionInvoice.objects.select_related('warehouse__farm', 'poultry_status')
                .filter(pk=invoice_id)
                .first()
            )
        except (ValidationError, ValueError):
            # Not a UUID
            return None

    def get(self, request, invoice_id):
        try:
            invoice = self.find(invoice_id)
            if invoice is not None and request.user.is_farmer:
                owned = invoice.warehouse_id and invoice.warehouse.farm.user_id == request.user.id
                invoice = invoice if owned else None
            if invoice is None:
                return Response({'error': 'Invoice not found'}, status=status.HTTP_404_NOT_FOUND)
            return Response(MedicineInvoiceSerializer(invoice).data)
        except Exception:
            logger.exception(f"Error reading medicine invoice {invoice_id}")
            return Response(
                {'error': 'An error occurred while processing the request'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )


class MedicineItemListView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request, invoice_id):
        return action_response(MedicineItemService.list(invoice_id), MedicineItemSerializer, many=True)

    def post(self, request, invoice_id):
        serializer = MedicineItemCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = MedicineItemService.create(invoice_id, **serializer.validated_data)
        return action_response(result, MedicineItemSerializer, success_status=status.HTTP_201_CREATED)


class MedicineItemDetailView(APIView):
    permission_classes = [AdminWriteSubAdminRead]

    def delete(self, request, item_id):
        return action_response(MedicineItemService.delete(item_id))


class MedicineExpenseListView(ExpenseListView):
    permission_classes = [AdminWriteSubAdminRead]
    service = MedicineExpenseService


class MedicineExpenseDetailView(ExpenseDetailView):
    permission_classes = [AdminWriteSubAdminRead]
    service = MedicineExpenseService


class MedicineAttachmentListView(AttachmentListView):
    permission_classes = [AdminWriteSubAdminRead]
    service = MedicineAttachmentService


class MedicineAttachmentDetailView(AttachmentDetailView):
    permission_classes = [AdminWriteSubAdminRead]
    service = MedicineAttachmentService


# =============================================================================
# ALERTS
# =============================================================================

def _can_view_farm(user, farm_id):
    if user.can_view_admin:
        return True
    return Farm.objects.filter(pk=farm_id, user=user).exists()


def _farm_denied():
    return action_response(ActionResult.fail('Unauthorized - Access denied', status_code=status.HTTP_403_FORBIDDEN))


class AdminAlertListView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get(self, request):
        return action_response(MedicationAlertService.all_alerts_for_admin(request.query_params.get('farm_id')))


class AlertsSummaryView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get(self, request):
        return action_response(MedicationAlertService.alerts_summary())


class UpcomingAlertsView(APIView):
    permission_classes = [IsFarmer]

    def get(self, request):
        return action_response(MedicationAlertService.upcoming_alerts_for_user(request.user))


class ChickAgeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        result = MedicationAlertService.calculate_chick_age(
            request.query_params.get('birth_date'), request.query_params.get('reference_date')
        )
        return action_response(result)


class FarmAlertsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, farm_id):
        if not _can_view_farm(request.user, farm_id):
            return _farm_denied()
        if request.query_params.get('active', '').lower() in ('true', '1'):
            result = MedicationAlertService.active_alerts_for_farm(farm_id, request.query_params.get('days_ahead'))
            return action_response(result)
        result = MedicationAlertService.all_alerts_for_farm(farm_id)
        return action_response(result, MedicationAlertSerializer, many=True)


class FarmAlertStatsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, farm_id):
        if not _can_view_farm(request.user, farm_id):
            return _farm_denied()
        return action_response(MedicationAlertService.farm_alert_stats(farm_id))


class _AlertOwnedView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def check_alert(self, request, alert_id):
        """Return a failed response unless the alert is visible to the user."""
        result = MedicationAlertService.get_alert(alert_id)
        if not result.success:
            return action_response(result)
        if not _can_view_farm(request.user, result.data.farm_id):
            return _farm_denied()
        return None


class AlertDetailView(_AlertOwnedView):

    def get(self, request, alert_id):
        denied = self.check_alert(request, alert_id)
        if denied is not None:
            return denied
        return action_response(MedicationAlertService.get_alert(alert_id), MedicationAlertSerializer)

    def patch(self, request, alert_id):
        denied = self.check_alert(request, alert_id)
        if denied is not None:
            return denied
        serializer = AlertNotesSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = MedicationAlertService.update_alert_notes(alert_id, serializer.validated_data.get('notes'))
        return action_response(result, MedicationAlertSerializer)


class AlertAdministerView(_AlertOwnedView):

    def post(self, request, alert_id):
        denied = self.check_alert(request, alert_id)
        if denied is not None:
            return denied
        serializer = AlertNotesSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        return action_response(
            MedicationAlertService.mark_alert_administered(alert_id, serializer.validated_data.get('notes'))
        )


class AlertUnadministerView(_AlertOwnedView):

    def post(self, request, alert_id):
        denied = self.check_alert(request, alert_id)
        if denied is not None:
            return denied
        return action_response(MedicationAlertService.unmark_alert_administered(alert_id))
