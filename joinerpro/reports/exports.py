"""
Spreadsheet building for the report downloads.

Workbooks are generated per request from fresh querysets and returned as
an attachment; nothing is written to disk.
"""
from dataclasses import dataclass, field
from io import BytesIO
from typing import List, Sequence, Tuple

from django.http import HttpResponse
from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

HEADER_FONT = Font(bold=True)


@dataclass
class SheetSpec:
    """One worksheet: title, (header, width) columns and row values"""
    title: str
    columns: List[Tuple[str, int]]
    rows: List[Sequence] = field(default_factory=list)


def build_workbook(sheets):
    wb = Workbook()
    wb.remove(wb.active)
    for sheet in sheets:
        ws = wb.create_sheet(title=sheet.title[:31])
        ws.append([header for header, _ in sheet.columns])
        for cell in ws[1]:
            cell.font = HEADER_FONT
        for index, (_, width) in enumerate(sheet.columns, start=1):
            ws.column_dimensions[get_column_letter(index)].width = width
        for row in sheet.rows:
            ws.append(list(row))
        ws.freeze_panes = 'A2'
    return wb


def workbook_bytes(sheets):
    buffer = BytesIO()
    build_workbook(sheets).save(buffer)
    return buffer.getvalue()


def spreadsheet_response(filename, sheets):
    response = HttpResponse(workbook_bytes(sheets), content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename={filename}'
    return response
