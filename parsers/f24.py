"""
F24 (Farma 24) workbook parser.

- Base price: PRECIO MAYOR (Bs), converted to the reference currency later by the engine.
- Offer: PROMO(%) + OFERTA(%) + DA(%) added together.
- Some exports ship without a labeled price header; the price column is then
  inferred from the first data rows.
"""

from __future__ import annotations

from typing import Any, Sequence

from config import HEADER_SCAN_ROWS_F24
from domain.suppliers import Supplier
from fields.normalization import parse_percent_cell

from .headers import (
    BARCODE,
    DESCRIPTION,
    PRICE,
    STOCK,
    ColumnRule,
    HeaderLayout,
    contains_all,
    contains_any,
    either,
    equals_any,
)
from .spreadsheet import SpreadsheetParser, cell_at

PROMO = "discount_promo"
OFERTA = "discount_oferta"
DA = "discount_da"


class F24Parser(SpreadsheetParser):
    supplier = Supplier.F24
    SCAN_ROWS = HEADER_SCAN_ROWS_F24
    INFER_PRICE = True
    RULES = (
        ColumnRule(
            BARCODE,
            either(contains_any("barra", "ean"), equals_any("codigo", "cod")),
            "barra/ean/codigo",
        ),
        ColumnRule(PRICE, contains_all("precio", "mayor", "bs"), "precio mayor (bs)"),
        ColumnRule(PROMO, contains_all("promo", "%"), "promo(%)"),
        ColumnRule(OFERTA, contains_all("oferta", "%"), "oferta(%)"),
        ColumnRule(DA, contains_all("da", "%"), "da(%)"),
        ColumnRule(DESCRIPTION, contains_any("descripcion", "producto", "nombre", "articulo"), "descripcion"),
        ColumnRule(STOCK, contains_any("existencia", "stock", "exist", "cantidad", "disp"), "existencia/stock"),
    )

    def offer_pct(self, row: Sequence[Any], layout: HeaderLayout) -> float:
        total = 0.0
        for name in (PROMO, OFERTA, DA):
            if layout.has(name):
                total += parse_percent_cell(cell_at(row, layout.get(name)))
        return total
