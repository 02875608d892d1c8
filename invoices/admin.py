"""
Admin interface for buy and sell invoices.
"""

from django.contrib import admin

from .models import Invoice, InvoiceAttachment, InvoiceExpense, InvoiceItem


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0
    readonly_fields = ('value',)


class InvoiceExpenseInline(admin.TabularInline):
    model = InvoiceExpense
    extra = 0


class InvoiceAttachmentInline(admin.TabularInline):
    model = InvoiceAttachment
    extra = 0
    readonly_fields = ('file_url', 'file_name', 'file_type', 'created_at')


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = [
        'invoice_number', 'invoice_type', 'invoice_date', 'warehouse',
        'client', 'net_value', 'checked',
    ]
    list_filter = ['invoice_type', 'checked', 'invoice_date']
    search_fields = ['invoice_number', 'client__name', 'warehouse__name']
    readonly_fields = ['total_items_value', 'total_expenses_value', 'net_value', 'created_at', 'updated_at']
    inlines = [InvoiceItemInline, InvoiceExpenseInline, InvoiceAttachmentInline]
