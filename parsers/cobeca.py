"""
Cobeca workbook parser.

Header sits somewhere in the first 10 rows: Codigo_Barra, Precio_Referencial_Final,
Existencia, plus a description column. Prices are already in the reference currency.
"""

from __future__ import annotations

from config import HEADER_SCAN_ROWS_COBECA
from domain.suppliers import Supplier

from .headers import (
    BARCODE,
    DESCRIPTION,
    DISCOUNT,
    PRICE,
    STOCK,
    VAT,
    ColumnRule,
    contains_all,
    contains_any,
    has_word,
)
from .spreadsheet import SpreadsheetParser


class CobecaParser(SpreadsheetParser):
    supplier = Supplier.COBECA
    SCAN_ROWS = HEADER_SCAN_ROWS_COBECA
    RULES = (
        ColumnRule(BARCODE, contains_all("codigo", "barra"), "codigo + barra"),
        ColumnRule(
            PRICE,
            contains_any("precio_referencial_final", "precio referencial final"),
            "precio referencial final",
        ),
        # Any other "precio ... final" only counts when nothing better was seen.
        ColumnRule(PRICE, contains_all("precio", "final"), "precio + final", keep_first=True),
        ColumnRule(STOCK, contains_any("existencia", "exist"), "existencia"),
        ColumnRule(DESCRIPTION, contains_any("descripcion", "producto", "nombre"), "descripcion/producto/nombre"),
        ColumnRule(DISCOUNT, contains_any("descuento", "dcto"), "descuento/dcto"),
        ColumnRule(VAT, has_word("iva"), "iva"),
    )
