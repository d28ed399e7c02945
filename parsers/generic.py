"""
Generic workbook parser for 365 and any supplier without a dedicated schema.

Both barcode and price headers are mandatory; there is no price inference.
"""

from __future__ import annotations

from config import HEADER_SCAN_ROWS_GENERIC
from domain.suppliers import Supplier

from .headers import (
    BARCODE,
    DESCRIPTION,
    DISCOUNT,
    PRICE,
    STOCK,
    VAT,
    ColumnRule,
    contains_any,
    either,
    has_word,
)
from .spreadsheet import SpreadsheetParser

_CURRENCY_MARKER = contains_any("$", "usd")


def _is_price_header(text: str) -> bool:
    if "neto" in text and _CURRENCY_MARKER(text):
        return True
    return "precio" in text and (_CURRENCY_MARKER(text) or "final" in text or "referencial" in text)


class GenericExcelParser(SpreadsheetParser):
    SCAN_ROWS = HEADER_SCAN_ROWS_GENERIC
    RULES = (
        ColumnRule(BARCODE, contains_any("barra", "ean", "upc"), "barra/ean/upc"),
        ColumnRule(PRICE, _is_price_header, "neto + $/usd or precio + $/usd/final/referencial"),
        ColumnRule(DISCOUNT, either(contains_any("descuento", "dcto"), has_word("da")), "descuento/dcto"),
        ColumnRule(DESCRIPTION, contains_any("descripcion", "producto", "nombre", "articulo"), "descripcion"),
        ColumnRule(STOCK, contains_any("existencia", "stock", "disponible", "cantidad"), "existencia/stock"),
        ColumnRule(VAT, has_word("iva"), "iva"),
    )

    def __init__(self, supplier: Supplier = Supplier.P365):
        self.supplier = supplier
