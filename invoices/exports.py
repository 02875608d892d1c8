"""
Invoice list spreadsheet export.
"""

from core.exports import build_workbook, workbook_response

INVOICE_COLUMNS = [
    ('Invoice Number', 'invoice_number'),
    ('Type', 'invoice_type'),
    ('Date', 'invoice_date'),
    ('Warehouse', 'warehouse_name'),
    ('Farm', 'farm_name'),
    ('Client', 'client_name'),
    ('Items Value', 'total_items_value'),
    ('Expenses Value', 'total_expenses_value'),
    ('Net Value', 'net_value'),
    ('Checked', 'checked'),
    ('Notes', 'notes'),
]


def invoice_row(invoice):
    return {
        'invoice_number': invoice.invoice_number,
        'invoice_type': invoice.get_invoice_type_display(),
        'invoice_date': invoice.invoice_date,
        'warehouse_name': invoice.warehouse.name if invoice.warehouse_id else '',
        'farm_name': invoice.warehouse.farm.name if invoice.warehouse_id else '',
        'client_name': invoice.client.name if invoice.client_id else '',
        'total_items_value': invoice.total_items_value,
        'total_expenses_value': invoice.total_expenses_value,
        'net_value': invoice.net_value,
        'checked': 'Yes' if invoice.checked else 'No',
        'notes': invoice.notes,
    }


def export_invoices(invoices):
    wb = build_workbook('Invoices', INVOICE_COLUMNS, [invoice_row(invoice) for invoice in invoices])
    return workbook_response(wb, 'invoices')
