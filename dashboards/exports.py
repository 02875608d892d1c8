"""
General daily report spreadsheet export.
"""

from core.exports import build_workbook, workbook_response

DAILY_REPORT_COLUMNS = [
    ('Date', 'report_date'),
    ('Farm', 'farm_name'),
    ('House', 'house_name'),
    ('Eggs Produced', 'total_eggs_produced'),
    ('Eggs Sold', 'total_eggs_sold'),
    ('Feed Consumed (kg)', 'total_feed_consumed'),
    ('Droppings', 'total_droppings_sold'),
    ('Mortality', 'total_mortality'),
    ('Notes', 'notes'),
]


def export_daily_reports(rows):
    return workbook_response(build_workbook('Daily Reports', DAILY_REPORT_COLUMNS, rows), 'daily_reports')
