"""
Nena workbook parser.

Very loose layouts: the barcode header is the only reliable anchor, the first
price-like header wins and may be missing altogether (inferred from data).
The discount is written as free text, e.g. "Dcto. nena del 7,00%".
Prices are in Bs.
"""

from __future__ import annotations

from typing import Any, Sequence

from config import HEADER_SCAN_ROWS_NENA
from domain.suppliers import Supplier
from fields.normalization import parse_embedded_discount

from .headers import (
    BARCODE,
    DESCRIPTION,
    DISCOUNT,
    PRICE,
    STOCK,
    ColumnRule,
    HeaderLayout,
    contains_any,
    either,
    equals_any,
)
from .spreadsheet import SpreadsheetParser, cell_at


class NenaParser(SpreadsheetParser):
    supplier = Supplier.NENA
    SCAN_ROWS = HEADER_SCAN_ROWS_NENA
    INFER_PRICE = True
    RULES = (
        ColumnRule(
            BARCODE,
            either(contains_any("barra", "ean", "upc"), equals_any("codigo", "cod")),
            "barra/ean/upc/codigo",
        ),
        ColumnRule(
            PRICE,
            contains_any("precio", "neto", "monto", "valor", "pvp", "costo"),
            "precio/neto/monto/valor/pvp/costo",
            keep_first=True,
        ),
        ColumnRule(DISCOUNT, contains_any("descuento", "dcto", "oferta", "promo"), "descuento/dcto/oferta/promo"),
        ColumnRule(DESCRIPTION, contains_any("descripcion", "producto", "nombre", "articulo"), "descripcion"),
        ColumnRule(STOCK, contains_any("existencia", "stock", "exist", "cantidad", "disp"), "existencia/stock"),
    )

    def offer_pct(self, row: Sequence[Any], layout: HeaderLayout) -> float:
        if not layout.has(DISCOUNT):
            return 0.0
        return parse_embedded_discount(cell_at(row, layout.get(DISCOUNT)))
