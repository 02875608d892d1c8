"""
Daily Report Views

- GET/POST    /api/daily-reports/                       (?warehouse_id=&page=&limit=) plain create
- POST        /api/daily-reports/integrated/            report + egg/droppings sales + medicine consumption
- GET         /api/daily-reports/monthly-feed/          ?warehouse_id=&report_date=&daily_feed=
- GET         /api/daily-reports/chicks-before/         ?warehouse_id= (farmer)
- GET         /api/daily-reports/medicines/             ?warehouse_id=[&medicine_id=]
- GET/PATCH/DELETE /api/daily-reports/{id}/
- POST        /api/daily-reports/{id}/toggle-status/
- GET/POST    /api/daily-reports/{id}/attachments/
- DELETE      /api/daily-reports/attachments/{attachment_id}/
"""

from rest_framework import permissions, status
from rest_framework.views import APIView

from accounts.permissions import IsFarmer
from core.actions import ActionResult, action_response
from core.views import AttachmentDetailView, AttachmentListView, invalid
from farms.models import Warehouse

from .models import DailyReport
from .serializers import DailyReportSerializer, DailyReportWriteSerializer, IntegratedDailyReportSerializer
from .services import DailyReportAttachmentService, DailyReportService

NOT_FOUND = ActionResult.fail('Daily report not found', status_code=status.HTTP_404_NOT_FOUND)


def _visible(user, report_id):
    """Farmers only reach reports of their own farm's warehouse."""
    if not user.is_farmer:
        return True
    return DailyReport.objects.filter(pk=report_id, warehouse__farm__user=user).exists()


class DailyReportListView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        params = request.query_params
        warehouse_id = params.get('warehouse_id')
        if request.user.is_farmer:
            warehouse_id = Warehouse.objects.filter(farm__user=request.user).values_list('id', flat=True).first()
            if warehouse_id is None:
                return action_response(ActionResult.fail('No warehouses found for your farm'))

        result = DailyReportService.list_daily_reports(
            warehouse_id, page=params.get('page', 1), limit=params.get('limit', 10)
        )
        return action_response(result, DailyReportSerializer, many=True)

    def post(self, request):
        serializer = DailyReportWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = DailyReportService.create_daily_report(request.user, serializer.validated_data)
        return action_response(result, DailyReportSerializer, success_status=status.HTTP_201_CREATED)


class IntegratedDailyReportView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = IntegratedDailyReportSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid(serializer)
        result = DailyReportService.create_integrated_daily_report(request.user, serializer.validated_data)
        return action_response(result, DailyReportSerializer, success_status=status.HTTP_201_CREATED)


class MonthlyFeedPreviewView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        params = request.query_params
        result = DailyReportService.monthly_feed_preview(
            params.get('warehouse_id'), params.get('report_date'), params.get('daily_feed', 0)
        )
        return action_response(result)


class ChicksBeforeView(APIView):
    permission_classes = [IsFarmer]

    def get(self, request):
        result = DailyReportService.chicks_before_for_new_report(request.user, request.query_params.get('warehouse_id'))
        return action_response(result)


class WarehouseMedicinesView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        warehouse_id = request.query_params.get('warehouse_id')
        medicine_id = request.query_params.get('medicine_id')
        if medicine_id:
            return action_response(DailyReportService.available_medicine_quantity(warehouse_id, medicine_id))
        return action_response(DailyReportService.warehouse_medicines(warehouse_id))


class DailyReportDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, report_id):
        if not _visible(request.user, report_id):
            return action_response(NOT_FOUND)
        return action_response(DailyReportService.get_daily_report(report_id), DailyReportSerializer)

    def patch(self, request, report_id):
        if not _visible(request.user, report_id):
            return action_response(NOT_FOUND)
        serializer = DailyReportWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return invalid(serializer)
        result = DailyReportService.update_daily_report(report_id, serializer.validated_data)
        return action_response(result, DailyReportSerializer)

    def delete(self, request, report_id):
        return action_response(DailyReportService.delete_daily_report(request.user, report_id))


class DailyReportToggleStatusView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, report_id):
        return action_response(DailyReportService.toggle_daily_report_status(request.user, report_id), DailyReportSerializer)


class DailyReportAttachmentListView(AttachmentListView):
    permission_classes = [permissions.IsAuthenticated]
    service = DailyReportAttachmentService


class DailyReportAttachmentDetailView(AttachmentDetailView):
    permission_classes = [permissions.IsAuthenticated]
    service = DailyReportAttachmentService
