"""
Parser strategy interface and the shared row-building rules.

Contract: `parse(path)` returns the SupplierRecords of one supplier file, or
raises HeaderDetectionError when the file's layout cannot be recognised. Bad
rows never abort a file: they become skipped RowOutcomes, visible through
`parse_outcomes(path)` and dropped by `parse(path)`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from domain.records import RowOutcome, SupplierRecord
from domain.suppliers import Supplier

logger = logging.getLogger(__name__)

# Cell/type surprises inside a single row; anything else is a file-level problem.
ROW_ERRORS = (TypeError, ValueError, IndexError, AttributeError, KeyError)


def build_outcome(
    row_number: int,
    supplier: Supplier,
    barcode: str,
    description: str,
    base_price: float,
    offer_pct: float,
    stock: int,
    vat_pct: float = 0.0,
) -> RowOutcome:
    """Validate already-normalized fields and wrap them in a RowOutcome."""
    if not barcode:
        return RowOutcome.skipped(row_number, "empty barcode")
    if base_price <= 0:
        return RowOutcome.skipped(row_number, f"non-positive base price ({base_price})")

    record = SupplierRecord(
        barcode=barcode,
        description=description,
        base_price=base_price,
        offer_pct=max(offer_pct, 0.0),
        stock=max(stock, 0),
        supplier=supplier,
        vat_pct=vat_pct,
    )
    if record.net_price <= 0:
        return RowOutcome.skipped(row_number, f"non-positive net price (offer {offer_pct}%)")
    return RowOutcome.ok(row_number, record)


class SupplierParser(ABC):
    supplier: Supplier

    def parse(self, path: Path) -> List[SupplierRecord]:
        outcomes = self.parse_outcomes(Path(path))
        records = [o.record for o in outcomes if o.record is not None]
        logger.info(
            "[%s] parsed=%d skipped=%d from %s",
            self.supplier.label, len(records), len(outcomes) - len(records), Path(path).name,
        )
        return records

    @abstractmethod
    def parse_outcomes(self, path: Path) -> List[RowOutcome]:
        """Return one outcome per data row of the file."""

    def _log_skip(self, outcome: RowOutcome) -> None:
        if not outcome.parsed:
            logger.debug("[%s] row %d skipped: %s", self.supplier.label, outcome.row_number, outcome.skip_reason)
