"""
General report tests.

Green Valley files reports on Sun 5 May, Tue 7 May and Sun 12 May 2024;
Hill Top files one on Mon 6 May.
"""

from datetime import date
from decimal import Decimal

import pytest

from daily_reports.models import DailyReport
from dashboards.services import GeneralReportService, ReportFilters
from dashboards.services.general_report import rounded_average, week_number, week_start

pytestmark = pytest.mark.django_db


@pytest.fixture
def reports(warehouse, other_warehouse):
    def report(target, day, eggs, dead=0, feed=0, sold=0):
        return DailyReport.objects.create(
            warehouse=target,
            report_date=day,
            production_eggs=Decimal(eggs),
            eggs_sold=Decimal(sold),
            chicks_dead=dead,
            feed_daily_kg=Decimal(feed),
        )

    return [
        report(warehouse, date(2024, 5, 5), 100, dead=2, feed=10, sold=40),
        report(warehouse, date(2024, 5, 7), 150, dead=1, feed=12),
        report(warehouse, date(2024, 5, 12), 201, feed=11),
        report(other_warehouse, date(2024, 5, 6), 999),
    ]


class TestHelpers:

    def test_week_starts_on_sunday(self):
        assert week_start(date(2024, 5, 7)) == date(2024, 5, 5)
        assert week_start(date(2024, 5, 5)) == date(2024, 5, 5)
        assert week_start(date(2024, 5, 11)) == date(2024, 5, 5)

    def test_rounded_average_rounds_half_up(self):
        assert rounded_average(Decimal('5'), 2) == 3
        assert rounded_average(Decimal('0'), 0) == 0

    def test_week_number_counts_from_january(self):
        assert week_number(date(2023, 12, 31)) == 53
        assert week_number(date(2024, 1, 7)) == 2

    def test_invalid_period(self):
        from core.actions import ActionError

        with pytest.raises(ActionError):
            ReportFilters(period='year')


class TestGeneralReportService:

    def test_weekly_summary(self, reports, farm):
        result = GeneralReportService(ReportFilters(farm_id=farm.id)).weekly_summary()

        weeks = result.data
        assert [week['week_start'] for week in weeks] == [date(2024, 5, 12), date(2024, 5, 5)]
        assert weeks[1]['week_end'] == date(2024, 5, 11)
        assert weeks[1]['total_eggs_produced'] == Decimal('250')
        assert weeks[1]['daily_average_production'] == 125
        assert weeks[1]['total_mortality'] == 3
        assert weeks[1]['reports_count'] == 2

    def test_monthly_summary(self, reports, farm):
        months = GeneralReportService(ReportFilters(farm_id=farm.id)).monthly_summary().data

        assert len(months) == 1
        assert months[0]['month'] == 'May'
        assert months[0]['year'] == 2024
        assert months[0]['total_eggs_produced'] == Decimal('451')
        assert months[0]['total_feed_consumed'] == Decimal('33')
        assert months[0]['daily_average_production'] == 150

    def test_overall_covers_every_farm(self, reports):
        stats = GeneralReportService().overall_statistics().data

        assert stats['total_reports'] == 4
        assert stats['total_eggs_produced'] == Decimal('1450')
        assert stats['total_eggs_sold'] == Decimal('40')

    def test_custom_range(self, reports):
        filters = ReportFilters(start_date='2024-05-06', end_date='2024-05-10')

        stats = GeneralReportService(filters).overall_statistics().data

        assert stats['total_reports'] == 2

    def test_summaries_page_does_not_limit_totals(self, reports, farm):
        service = GeneralReportService(ReportFilters(farm_id=farm.id))

        page = service.daily_report_summaries(page=1, limit=1)

        assert len(page.data) == 1
        assert page.data[0]['report_date'] == date(2024, 5, 12)
        assert page.data[0]['farm_name'] == 'Green Valley'
        assert page.extra['pagination']['totalPages'] == 3
        assert service.overall_statistics().data['total_reports'] == 3


class TestGeneralReportEndpoints:

    def test_sub_admin_reads_weekly(self, sub_admin_client, reports):
        response = sub_admin_client.get('/api/reports/weekly/')

        assert response.status_code == 200
        assert response.data['success'] is True

    def test_farmer_forbidden(self, farmer_client):
        assert farmer_client.get('/api/reports/overall/').status_code == 403

    def test_invalid_period_rejected(self, admin_client):
        response = admin_client.get('/api/reports/daily/', {'period': 'decade'})

        assert response.status_code == 400
        assert response.data == {'success': False, 'error': 'Invalid period'}

    @pytest.mark.parametrize('start_date', ['2024-02-30', '30/02/2024'])
    def test_impossible_or_malformed_date_rejected(self, admin_client, start_date):
        response = admin_client.get('/api/reports/weekly/', {'start_date': start_date})

        assert response.status_code == 400
        assert response.data == {'success': False, 'error': 'Invalid date'}

    def test_daily_pagination(self, admin_client, reports, farm):
        response = admin_client.get('/api/reports/daily/', {'farm_id': str(farm.id), 'limit': 2})

        assert len(response.data['data']) == 2
        assert response.data['pagination'] == {'page': 1, 'limit': 2, 'total': 3, 'totalPages': 2}

    def test_export(self, admin_client, reports):
        response = admin_client.get('/api/reports/export/', {'start_date': '2024-05-01', 'end_date': '2024-05-31'})

        assert response.status_code == 200
        assert response['Content-Type'] == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        assert response['Content-Disposition'].startswith('attachment; filename="daily_reports_')
