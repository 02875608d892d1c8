"""
Manufacturing list spreadsheet export.
"""

from core.exports import build_workbook, workbook_response

MANUFACTURING_COLUMNS = [
    ('Invoice Number', 'invoice_number'),
    ('Date', 'manufacturing_date'),
    ('Warehouse', 'warehouse_name'),
    ('Farm', 'farm_name'),
    ('Blend', 'blend_name'),
    ('Output Material', 'material_name'),
    ('Unit', 'unit_name'),
    ('Quantity', 'quantity'),
    ('Expenses', 'total_expenses_value'),
    ('Notes', 'notes'),
]


def export_manufacturing(invoices):
    rows = [
        {
            'invoice_number': invoice.invoice_number,
            'manufacturing_date': invoice.manufacturing_date,
            'warehouse_name': invoice.warehouse.name if invoice.warehouse_id else '',
            'farm_name': invoice.warehouse.farm.name if invoice.warehouse_id else '',
            'blend_name': invoice.blend_name,
            'material_name': invoice.material_name.material_name if invoice.material_name_id else '',
            'unit_name': invoice.unit.unit_name if invoice.unit_id else '',
            'quantity': invoice.quantity,
            'total_expenses_value': invoice.total_expenses_value,
            'notes': invoice.notes,
        }
        for invoice in invoices
    ]
    return workbook_response(build_workbook('Manufacturing', MANUFACTURING_COLUMNS, rows), 'manufacturing')
