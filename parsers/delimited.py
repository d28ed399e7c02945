"""
Parsers for ';'-delimited supplier exports whose column names are fixed.

Droactiva: DESCRIPCION; BARRA; PRECIO(USD); EXISTENCIA; IVA; DA(%)
Dromarko:  DESCRIPCION; MARCA; CODIGO; EXISTENCIA; IVA; PRECIO(USD); PRECIO;
           DA(%); ...; NETO(USD); NETO; BARRA; TASA; FECHVENC
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from domain.records import RowOutcome
from domain.suppliers import Supplier
from fields.normalization import (
    clean_barcode,
    clean_description,
    parse_locale_decimal,
    parse_percent_cell,
    parse_stock,
)
from input_readers.delimited import read_delimited

from .base import ROW_ERRORS, SupplierParser, build_outcome
from .headers import BARCODE, DESCRIPTION, DISCOUNT, PRICE, STOCK, VAT, HeaderDetectionError

logger = logging.getLogger(__name__)

NET_PRICE = "net_price"


def _safe_get(cols: Sequence[str], idx: Optional[int]) -> str:
    if idx is None or idx < 0 or idx >= len(cols):
        return ""
    return cols[idx]


class DelimitedParser(SupplierParser):
    COLUMNS: Mapping[str, str] = {}
    MANDATORY: Sequence[str] = (BARCODE, PRICE)

    def resolve_columns(self, header: Sequence[str]) -> Dict[str, int]:
        positions = {name.strip().upper(): i for i, name in reversed(list(enumerate(header)))}
        resolved = {
            field: positions[name.upper()]
            for field, name in self.COLUMNS.items()
            if name.upper() in positions
        }
        missing = [self.COLUMNS[f] for f in self.MANDATORY if f not in resolved]
        if missing:
            raise HeaderDetectionError(
                f"{self.supplier.label} file is missing required column(s): {', '.join(missing)}. "
                f"Found: {', '.join(header)}"
            )
        return resolved

    def parse_outcomes(self, path: Path) -> List[RowOutcome]:
        header, rows = read_delimited(path)
        if not header:
            logger.warning("[%s] %s is empty", self.supplier.label, Path(path).name)
            return []

        columns = self.resolve_columns(header)
        logger.info("[%s] columns: %s", self.supplier.label, columns)

        outcomes: List[RowOutcome] = []
        for line_number, cols in enumerate(rows, start=2):
            try:
                outcome = self.extract_row(line_number, cols, columns)
            except ROW_ERRORS as e:
                outcome = RowOutcome.skipped(line_number, f"unexpected field content: {e}")
            self._log_skip(outcome)
            outcomes.append(outcome)
        return outcomes

    def extract_row(self, line_number: int, cols: Sequence[str], columns: Mapping[str, int]) -> RowOutcome:
        base_price, offer_pct = self.prices(cols, columns)
        return build_outcome(
            line_number,
            self.supplier,
            barcode=clean_barcode(_safe_get(cols, columns.get(BARCODE))),
            description=clean_description(_safe_get(cols, columns.get(DESCRIPTION))),
            base_price=base_price,
            offer_pct=offer_pct,
            stock=parse_stock(_safe_get(cols, columns.get(STOCK))),
            vat_pct=parse_percent_cell(_safe_get(cols, columns.get(VAT))),
        )

    def prices(self, cols: Sequence[str], columns: Mapping[str, int]) -> tuple[float, float]:
        """Return (base_price, offer_pct)."""
        base_price = parse_locale_decimal(_safe_get(cols, columns.get(PRICE)))
        offer_pct = parse_percent_cell(_safe_get(cols, columns.get(DISCOUNT)))
        return base_price, offer_pct


class DroactivaParser(DelimitedParser):
    supplier = Supplier.DROACTIVA
    COLUMNS = {
        DESCRIPTION: "DESCRIPCION",
        BARCODE: "BARRA",
        PRICE: "PRECIO(USD)",
        STOCK: "EXISTENCIA",
        VAT: "IVA",
        DISCOUNT: "DA(%)",
    }


class DromarkoParser(DelimitedParser):
    """
    Dromarko publishes both a list price and its own net price. The offer
    percentage is derived from the two so the published net figure is kept.
    """

    supplier = Supplier.DROMARKO
    COLUMNS = {
        DESCRIPTION: "DESCRIPCION",
        BARCODE: "BARRA",
        PRICE: "PRECIO(USD)",
        NET_PRICE: "NETO(USD)",
        STOCK: "EXISTENCIA",
        VAT: "IVA",
        DISCOUNT: "DA(%)",
    }
    MANDATORY = (BARCODE,)

    def resolve_columns(self, header: Sequence[str]) -> Dict[str, int]:
        resolved = super().resolve_columns(header)
        if PRICE not in resolved and NET_PRICE not in resolved:
            raise HeaderDetectionError(
                f"{self.supplier.label} file needs PRECIO(USD) or NETO(USD). Found: {', '.join(header)}"
            )
        return resolved

    def prices(self, cols: Sequence[str], columns: Mapping[str, int]) -> tuple[float, float]:
        list_price = parse_locale_decimal(_safe_get(cols, columns.get(PRICE)))
        net_price = parse_locale_decimal(_safe_get(cols, columns.get(NET_PRICE)))
        if list_price > 0 and net_price > 0:
            return list_price, max(0.0, (1.0 - net_price / list_price) * 100.0)
        if list_price > 0:
            return list_price, parse_percent_cell(_safe_get(cols, columns.get(DISCOUNT)))
        return net_price, 0.0
