"""
XLSX export (catalog.excel_export).

Covers:
  - Single sheet titled "Products"
  - Header row: Catégorie / Nom du produit / Prix HT, bold
  - One data row per product, category / name / price order, input order kept
  - Prices stay strings ("7,50€", "8.50"), never numbers
  - Formula-looking OCR text stored as plain text
  - C0 control characters from OCR noise dropped instead of failing the export
  - Empty product list -> header-only sheet
  - Bytes load back with openpyxl
"""

from __future__ import annotations

import io

from openpyxl import load_workbook

from catalog.excel_export import (
    EXPORT_FILENAME,
    HEADERS,
    SHEET_TITLE,
    build_workbook,
    workbook_bytes,
)
from catalog.product_types import Product


PRODUCTS = [
    Product(name="Salade César", category="Entrées", price="7,50€"),
    Product(name="Club Sandwich", category="Snacks", price="8.50"),
    Product(name="Steak frites", category="Plats", price="15,00€"),
]


def _load(data: bytes):
    return load_workbook(io.BytesIO(data))


def _rows(ws):
    return [list(r) for r in ws.iter_rows(values_only=True)]


class TestWorkbookLayout:

    def test_sheet_title(self):
        wb = build_workbook(PRODUCTS)
        assert wb.sheetnames == [SHEET_TITLE]
        assert SHEET_TITLE == "Products"

    def test_header_labels(self):
        assert HEADERS == ["Catégorie", "Nom du produit", "Prix HT"]
        ws = build_workbook(PRODUCTS).active
        assert [c.value for c in ws[1]] == HEADERS

    def test_header_bold(self):
        ws = build_workbook(PRODUCTS).active
        assert all(c.font.bold for c in ws[1])

    def test_data_rows_in_order(self):
        ws = build_workbook(PRODUCTS).active
        assert _rows(ws)[1:] == [
            ["Entrées", "Salade César", "7,50€"],
            ["Snacks", "Club Sandwich", "8.50"],
            ["Plats", "Steak frites", "15,00€"],
        ]

    def test_empty_products_header_only(self):
        ws = build_workbook([]).active
        assert ws.max_row == 1
        assert _rows(ws) == [HEADERS]

    def test_filename(self):
        assert EXPORT_FILENAME == "products.xlsx"


class TestWorkbookBytes:

    def test_round_trip(self):
        ws = _load(workbook_bytes(PRODUCTS)).active
        assert ws.title == "Products"
        assert _rows(ws) == [HEADERS] + [p.as_row() for p in PRODUCTS]

    def test_prices_stay_strings(self):
        ws = _load(workbook_bytes(PRODUCTS)).active
        for row in ws.iter_rows(min_row=2):
            price = row[2]
            assert isinstance(price.value, str)
            assert price.data_type == "s"

    def test_formula_like_text_is_data(self):
        products = [Product(name="=SUM(A1:A2)", category="=1+1", price="3,00")]
        ws = _load(workbook_bytes(products)).active
        assert ws["A2"].value == "=1+1"
        assert ws["B2"].value == "=SUM(A1:A2)"
        assert ws["A2"].data_type == "s"

    def test_control_chars_stripped(self):
        products = [Product(name="Soupe\x07 du jour", category="Entr\x01ées", price="6,00€\x1b")]
        ws = _load(workbook_bytes(products)).active
        assert [c.value for c in ws[2]] == ["Entrées", "Soupe du jour", "6,00€"]

    def test_xlsx_magic(self):
        assert workbook_bytes([])[:2] == b"PK"
