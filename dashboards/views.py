"""
General Report API Views

All endpoints accept ?farm_id=&start_date=&end_date=&period=(today|week|month|custom)

- GET /api/reports/daily/        per-report summaries (?page=&limit=)
- GET /api/reports/weekly/       weekly totals, newest week first
- GET /api/reports/monthly/      monthly totals, newest month first
- GET /api/reports/overall/      totals and average daily production
- GET /api/reports/export/       .xlsx download of the filtered reports

Permission: admins and sub admins
"""

from rest_framework.views import APIView

from accounts.permissions import IsAdminOrSubAdmin
from core.actions import ActionError, ActionResult, action_response

from .exports import export_daily_reports
from .services import GeneralReportService, ReportFilters


class GeneralReportView(APIView):
    permission_classes = [IsAdminOrSubAdmin]

    def get_service(self, request):
        """Return (service, None) or (None, error response) for bad filters."""
        try:
            filters = ReportFilters.from_params(request.query_params)
        except ActionError as exc:
            return None, action_response(ActionResult.fail(exc.message))
        return GeneralReportService(filters), None


class DailySummariesView(GeneralReportView):

    def get(self, request):
        service, error = self.get_service(request)
        if error:
            return error
        params = request.query_params
        return action_response(service.daily_report_summaries(params.get('page', 1), params.get('limit', 10)))


class WeeklySummaryView(GeneralReportView):

    def get(self, request):
        service, error = self.get_service(request)
        if error:
            return error
        return action_response(service.weekly_summary())


class MonthlySummaryView(GeneralReportView):

    def get(self, request):
        service, error = self.get_service(request)
        if error:
            return error
        return action_response(service.monthly_summary())


class OverallStatisticsView(GeneralReportView):

    def get(self, request):
        service, error = self.get_service(request)
        if error:
            return error
        return action_response(service.overall_statistics())


class DailyReportExportView(GeneralReportView):

    def get(self, request):
        service, error = self.get_service(request)
        if error:
            return error
        return export_daily_reports(service.export_rows())
