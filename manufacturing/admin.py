from django.contrib import admin

from .models import ManufacturingAttachment, ManufacturingExpense, ManufacturingInvoice, ManufacturingInvoiceItem


class ManufacturingItemInline(admin.TabularInline):
    model = ManufacturingInvoiceItem
    extra = 0


class ManufacturingExpenseInline(admin.TabularInline):
    model = ManufacturingExpense
    extra = 0


class ManufacturingAttachmentInline(admin.TabularInline):
    model = ManufacturingAttachment
    extra = 0
    readonly_fields = ('file_url', 'file_name', 'file_type', 'created_at')


@admin.register(ManufacturingInvoice)
class ManufacturingInvoiceAdmin(admin.ModelAdmin):
    list_display = [
        'invoice_number', 'manufacturing_date', 'warehouse', 'blend_name',
        'material_name', 'quantity', 'output_added', 'total_expenses_value',
    ]
    list_filter = ['output_added', 'manufacturing_date']
    search_fields = ['invoice_number', 'blend_name', 'warehouse__name']
    readonly_fields = ['output_added', 'total_expenses_value', 'created_at', 'updated_at']
    inlines = [ManufacturingItemInline, ManufacturingExpenseInline, ManufacturingAttachmentInline]
