from django.contrib import admin

from .models import DailyReport, DailyReportAttachment


class DailyReportAttachmentInline(admin.TabularInline):
    model = DailyReportAttachment
    extra = 0
    readonly_fields = ('file_url', 'file_name', 'file_type', 'created_at')


@admin.register(DailyReport)
class DailyReportAdmin(admin.ModelAdmin):
    list_display = [
        'report_date', 'warehouse', 'production_eggs', 'production_egg_rate',
        'chicks_after', 'feed_daily_kg', 'checked',
    ]
    list_filter = ['checked', 'report_date']
    search_fields = ['warehouse__name', 'warehouse__farm__name', 'notes']
    date_hierarchy = 'report_date'
    readonly_fields = [
        'production_eggs', 'production_egg_rate', 'current_eggs_balance',
        'chicks_after', 'feed_monthly_kg', 'created_at', 'updated_at',
    ]
    inlines = [DailyReportAttachmentInline]
