"""
Inventory report spreadsheet export.
"""

from core.exports import build_workbook, workbook_response

INVENTORY_COLUMNS = [
    ('Warehouse', 'warehouse_name'),
    ('Farm', 'farm_name'),
    ('Item', 'material_name'),
    ('Unit', 'unit_name'),
    ('Opening Balance', 'opening_balance'),
    ('Purchases', 'purchases'),
    ('Sales', 'sales'),
    ('Consumption', 'consumption'),
    ('Manufacturing', 'manufacturing'),
    ('Current Balance', 'current_balance'),
    ('Status', 'status'),
]


def export_inventory(rows):
    wb = build_workbook('Inventory', INVENTORY_COLUMNS, rows)
    return workbook_response(wb, 'inventory_report')
