# catalog/excel_export.py
"""
XLSX export of extracted products.

One sheet ("Products"), one header row, then one row per product in
category / name / price order. Prices go in as the strings the user sees in
the grid ("7,50€"), never re-parsed into numbers.
"""

from __future__ import annotations

import io
from typing import Iterable, List

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from catalog.product_types import Product

EXPORT_FILENAME = "products.xlsx"
SHEET_TITLE = "Products"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

HEADERS = ["Catégorie", "Nom du produit", "Prix HT"]

_MAX_COL_WIDTH = 60


def build_workbook(products: Iterable[Product]) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append(HEADERS)
    bold = Font(bold=True)
    for cell in ws[1]:
        cell.font = bold

    widths: List[int] = [len(h) for h in HEADERS]
    for p in products:
        # OCR noise can carry C0 control chars, which xlsx cells cannot hold
        row = [ILLEGAL_CHARACTERS_RE.sub("", v) for v in p.as_row()]
        ws.append(row)
        # openpyxl stores "=..." strings as formulas; OCR text is always data.
        for cell in ws[ws.max_row]:
            cell.data_type = "s"
        widths = [max(w, len(v)) for w, v in zip(widths, row)]

    for i, w in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(i)].width = min(w + 2, _MAX_COL_WIDTH)

    return wb


def workbook_bytes(products: Iterable[Product]) -> bytes:
    wb = build_workbook(products)
    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()
