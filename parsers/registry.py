"""
Parser lookup keyed on supplier identity (and, for CSV suppliers, file type).
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Type

from config import EXCEL_SUFFIXES
from domain.suppliers import Supplier

from .base import SupplierParser
from .cobeca import CobecaParser
from .delimited import DroactivaParser, DromarkoParser
from .f24 import F24Parser
from .generic import GenericExcelParser
from .nena import NenaParser

_DELIMITED: Dict[Supplier, Type[SupplierParser]] = {
    Supplier.DROACTIVA: DroactivaParser,
    Supplier.DROMARKO: DromarkoParser,
}

_SPREADSHEET: Dict[Supplier, Type[SupplierParser]] = {
    Supplier.COBECA: CobecaParser,
    Supplier.F24: F24Parser,
    Supplier.NENA: NenaParser,
}


def parser_for(supplier: Supplier, path: Optional[Path] = None) -> SupplierParser:
    """
    CSV suppliers delivering a workbook instead fall back to the generic
    keyword-driven parser, as does any supplier without a dedicated schema.
    """
    suffix = Path(path).suffix.lower() if path is not None else ""

    if supplier in _DELIMITED and suffix not in EXCEL_SUFFIXES:
        return _DELIMITED[supplier]()
    if supplier in _SPREADSHEET:
        return _SPREADSHEET[supplier]()
    return GenericExcelParser(supplier)
