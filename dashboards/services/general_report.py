"""
General Report Service

Production summaries over daily reports, used by the admin reports page:
- Paginated per-report summaries
- Weekly totals (weeks start on Sunday)
- Monthly totals
- Overall statistics

Every summary aggregates all reports matching the filters, not just the
page being displayed.
"""

import calendar
import math
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.utils import timezone
from django.utils.dateparse import parse_date

from core.actions import ActionError, ActionResult, action
from daily_reports.models import DailyReport

ZERO = Decimal('0')

TOTAL_FIELDS = (
    'total_eggs_produced',
    'total_eggs_sold',
    'total_feed_consumed',
    'total_droppings_sold',
    'total_mortality',
)


class ReportFilters:
    """farm_id, start_date, end_date and a period of today | week | month | custom."""

    PERIODS = ('today', 'week', 'month', 'custom')

    def __init__(self, farm_id=None, start_date=None, end_date=None, period=None):
        if period and period not in self.PERIODS:
            raise ActionError('Invalid period')
        self.farm_id = farm_id or None
        self.start_date, self.end_date = self._date_range(period, start_date, end_date)

    @staticmethod
    def _parse(value):
        if not value or hasattr(value, 'year'):
            return value or None
        try:
            parsed = parse_date(str(value))
        except ValueError:
            parsed = None
        if parsed is None:
            raise ActionError('Invalid date')
        return parsed

    def _date_range(self, period, start_date, end_date):
        today = timezone.localdate()
        if period == 'today':
            return today, today
        if period == 'week':
            return today - timedelta(days=6), today
        if period == 'month':
            return today.replace(day=1), today
        return self._parse(start_date), self._parse(end_date)

    @classmethod
    def from_params(cls, params):
        return cls(
            farm_id=params.get('farm_id'),
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
            period=params.get('period'),
        )

    def apply(self, queryset):
        if self.farm_id:
            queryset = queryset.filter(warehouse__farm_id=self.farm_id)
        if self.start_date:
            queryset = queryset.filter(report_date__gte=self.start_date)
        if self.end_date:
            queryset = queryset.filter(report_date__lte=self.end_date)
        return queryset


def report_summary(report):
    warehouse = report.warehouse
    return {
        'id': report.id,
        'report_date': report.report_date,
        'farm_name': warehouse.farm.name if warehouse else '-',
        'house_name': warehouse.name if warehouse else '-',
        'total_eggs_produced': report.production_eggs or ZERO,
        'total_eggs_sold': report.eggs_sold or ZERO,
        'total_feed_consumed': report.feed_daily_kg or ZERO,
        'total_droppings_sold': report.production_droppings or ZERO,
        'total_mortality': report.chicks_dead or 0,
        'notes': report.notes,
    }


def rounded_average(total, count):
    if not count:
        return 0
    return int((Decimal(total) / count).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def totals(summaries):
    result = {field: sum((row[field] for row in summaries), ZERO) for field in TOTAL_FIELDS}
    result['total_mortality'] = int(result['total_mortality'])
    return result


def week_start(day):
    """The Sunday on or before `day`."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_number(start):
    jan_first = start.replace(month=1, day=1)
    jan_first_weekday = (jan_first.weekday() + 1) % 7
    return math.ceil(((start - jan_first).days + jan_first_weekday + 1) / 7)


class GeneralReportService:
    """Service for the general production report."""

    def __init__(self, filters=None):
        self.filters = filters or ReportFilters()

    def _reports(self):
        reports = DailyReport.objects.select_related('warehouse__farm').order_by('-report_date', '-report_time')
        return self.filters.apply(reports)

    def _all_summaries(self):
        return [report_summary(report) for report in self._reports()]

    @action('Failed to fetch daily reports')
    def daily_report_summaries(self, page=1, limit=10):
        page = max(1, int(page or 1))
        limit = max(1, int(limit or 10))
        reports = self._reports()
        total = reports.count()
        offset = (page - 1) * limit
        return ActionResult.ok(
            [report_summary(report) for report in reports[offset:offset + limit]],
            pagination={
                'page': page,
                'limit': limit,
                'total': total,
                'totalPages': math.ceil(total / limit),
            },
        )

    @action('Failed to calculate weekly summary')
    def weekly_summary(self):
        weeks = {}
        for row in self._all_summaries():
            weeks.setdefault(week_start(row['report_date']), []).append(row)

        summaries = []
        for start, rows in weeks.items():
            week_totals = totals(rows)
            summaries.append({
                'week_start': start,
                'week_end': start + timedelta(days=6),
                'week_number': week_number(start),
                **week_totals,
                'daily_average_production': rounded_average(week_totals['total_eggs_produced'], len(rows)),
                'reports_count': len(rows),
            })
        summaries.sort(key=lambda row: row['week_start'], reverse=True)
        return summaries

    @action('Failed to calculate monthly summary')
    def monthly_summary(self):
        months = {}
        for row in self._all_summaries():
            day = row['report_date']
            months.setdefault((day.year, day.month), []).append(row)

        summaries = []
        for (year, month), rows in sorted(months.items(), reverse=True):
            month_totals = totals(rows)
            summaries.append({
                'month': calendar.month_name[month],
                'year': year,
                **month_totals,
                'daily_average_production': rounded_average(month_totals['total_eggs_produced'], len(rows)),
                'reports_count': len(rows),
            })
        return summaries

    @action('Failed to calculate statistics')
    def overall_statistics(self):
        rows = self._all_summaries()
        stats = totals(rows)
        stats['average_daily_production'] = rounded_average(stats['total_eggs_produced'], len(rows))
        stats['total_reports'] = len(rows)
        return stats

    def export_rows(self):
        return self._all_summaries()
