"""
Workbook parser template.

Subclasses provide the header keyword table and scan window; this class reads
the first sheet, locates the header, optionally infers the price column and
extracts one outcome per data row.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence

from config import HEADER_SCAN_ROWS_GENERIC, MISSING_STOCK_DEFAULT
from domain.records import RowOutcome
from fields.normalization import (
    clean_barcode,
    clean_description,
    parse_locale_decimal,
    parse_percent_cell,
    parse_stock,
)
from input_readers.excel import Grid, cell_text, read_sheet_grid

from .base import ROW_ERRORS, SupplierParser, build_outcome
from .headers import (
    BARCODE,
    DESCRIPTION,
    DISCOUNT,
    PRICE,
    STOCK,
    VAT,
    ColumnRule,
    HeaderLayout,
    detect_header,
    infer_price_column,
)

logger = logging.getLogger(__name__)


def cell_at(row: Sequence[Any], col: Optional[int]) -> Any:
    if col is None or row is None or col >= len(row):
        return None
    return row[col]


def _is_blank_row(row: Sequence[Any]) -> bool:
    return not row or all(v is None or (isinstance(v, str) and not v.strip()) for v in row)


class SpreadsheetParser(SupplierParser):
    RULES: Sequence[ColumnRule] = ()
    MANDATORY: Sequence[str] = (BARCODE, PRICE)
    SCAN_ROWS: int = HEADER_SCAN_ROWS_GENERIC
    INFER_PRICE: bool = False

    def parse_outcomes(self, path: Path) -> List[RowOutcome]:
        grid = read_sheet_grid(path)
        layout = self.locate_header(grid)
        logger.info("[%s] %s", self.supplier.label, layout.describe())

        outcomes: List[RowOutcome] = []
        for r in range(layout.row_index + 1, len(grid)):
            row = grid[r]
            if _is_blank_row(row):
                continue
            try:
                outcome = self.extract_row(r + 1, row, layout)
            except ROW_ERRORS as e:
                outcome = RowOutcome.skipped(r + 1, f"unexpected cell content: {e}")
            self._log_skip(outcome)
            outcomes.append(outcome)
        return outcomes

    def locate_header(self, grid: Grid) -> HeaderLayout:
        layout = detect_header(
            grid,
            self.RULES,
            mandatory=self.MANDATORY,
            scan_rows=self.SCAN_ROWS,
            inferable=(PRICE,) if self.INFER_PRICE else (),
            source=f"{self.supplier.label} file",
        )
        if not layout.has(PRICE) and self.INFER_PRICE:
            col = infer_price_column(grid, layout)
            if col is None:
                logger.warning("[%s] no price column found in header or data rows", self.supplier.label)
            else:
                layout.columns[PRICE] = col
                layout.inferred.add(PRICE)
        return layout

    def extract_row(self, row_number: int, row: Sequence[Any], layout: HeaderLayout) -> RowOutcome:
        barcode = clean_barcode(cell_text(cell_at(row, layout.get(BARCODE))))
        base_price = parse_locale_decimal(cell_at(row, layout.get(PRICE)))
        description = clean_description(cell_text(cell_at(row, layout.get(DESCRIPTION))))
        if layout.has(STOCK):
            stock = parse_stock(cell_at(row, layout.get(STOCK)))
        else:
            stock = MISSING_STOCK_DEFAULT
        vat_pct = parse_percent_cell(cell_at(row, layout.get(VAT))) if layout.has(VAT) else 0.0

        return build_outcome(
            row_number,
            self.supplier,
            barcode=barcode,
            description=description,
            base_price=base_price,
            offer_pct=self.offer_pct(row, layout),
            stock=stock,
            vat_pct=vat_pct,
        )

    def offer_pct(self, row: Sequence[Any], layout: HeaderLayout) -> float:
        """Direct percentage column; 0 when the file has none."""
        if not layout.has(DISCOUNT):
            return 0.0
        return parse_percent_cell(cell_at(row, layout.get(DISCOUNT)))
