"""
Excel export helpers.

Builds single-sheet workbooks with a styled header row and returns them as
downloadable HTTP responses.
"""

import io
from decimal import Decimal

from django.http import HttpResponse
from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

HEADER_FONT = Font(bold=True, size=12, color='FFFFFF')
HEADER_FILL = PatternFill(start_color='2E7D32', end_color='2E7D32', fill_type='solid')
THIN_BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin'),
)


def _cell_value(value):
    if isinstance(value, Decimal):
        return float(value)
    if value is None:
        return ''
    return value


def build_workbook(title, columns, rows):
    """
    columns: list of (header, key) pairs
    rows: iterable of dicts
    """
    wb = Workbook()
    ws = wb.active
    ws.title = title[:31]

    for col_idx, (header, _key) in enumerate(columns, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.border = THIN_BORDER
        cell.alignment = Alignment(horizontal='center')

    for row_idx, row in enumerate(rows, start=2):
        for col_idx, (_header, key) in enumerate(columns, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=_cell_value(row.get(key)))
            cell.border = THIN_BORDER

    for col_idx, (header, _key) in enumerate(columns, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = max(12, len(header) + 4)

    return wb


def workbook_response(wb, filename_prefix):
    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)

    filename = f"{filename_prefix}_{timezone.now().strftime('%Y%m%d_%H%M')}.xlsx"
    response = HttpResponse(buffer.getvalue(), content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
