"""
Admin interface for medicine consumption and medication alerts.
"""

from django.contrib import admin

from .models import (
    MedicationAlert,
    MedicineConsumptionAttachment,
    MedicineConsumptionExpense,
    MedicineConsumptionInvoice,
    MedicineConsumptionItem,
)


class MedicineItemInline(admin.TabularInline):
    model = MedicineConsumptionItem
    extra = 0
    readonly_fields = ('value',)


class MedicineExpenseInline(admin.TabularInline):
    model = MedicineConsumptionExpense
    extra = 0


class MedicineAttachmentInline(admin.TabularInline):
    model = MedicineConsumptionAttachment
    extra = 0
    readonly_fields = ('file_url', 'file_name', 'file_type', 'created_at')


@admin.register(MedicineConsumptionInvoice)
class MedicineConsumptionInvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'invoice_date', 'warehouse', 'poultry_status', 'total_value']
    list_filter = ['invoice_date']
    search_fields = ['invoice_number', 'warehouse__name']
    readonly_fields = ['total_value', 'created_at', 'updated_at']
    inlines = [MedicineItemInline, MedicineExpenseInline, MedicineAttachmentInline]


@admin.register(MedicationAlert)
class MedicationAlertAdmin(admin.ModelAdmin):
    list_display = ['medicine', 'farm', 'poultry_status', 'scheduled_day', 'scheduled_date', 'is_administered']
    list_filter = ['is_administered', 'scheduled_date']
    search_fields = ['medicine__name', 'farm__name', 'poultry_status__batch_name']
    readonly_fields = ['administered_at', 'created_at', 'updated_at']
