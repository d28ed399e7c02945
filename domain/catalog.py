"""
CatalogEntry: the consolidated, per-barcode view of every supplier's offer.

Core responsibilities:
- Keep at most one SupplierRecord per supplier (latest write wins).
- Arbitrate the product description as records attach.
- Rank suppliers by net price and derive winner, loser, positions and DIF %.
- Simulate a resale price and margin on top of the best price.

Computed fields are a pure function of the attached records and the last
applied margin. Every mutation re-runs the computation; nothing is set directly.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from .records import SupplierRecord
from .suppliers import Supplier, is_priority_description

_INVALID_DESCRIPTION_TOKENS = {"true", "false", "null"}


def is_valid_description(text: Optional[str]) -> bool:
    """Reject blanks and literal boolean/null tokens leaked from spreadsheet cells."""
    if text is None or not text.strip():
        return False
    return text.strip().lower() not in _INVALID_DESCRIPTION_TOKENS


class CatalogEntry:
    def __init__(self, barcode: str, description: str = ""):
        if not barcode:
            raise ValueError("CatalogEntry requires a non-empty barcode")
        self.barcode = barcode
        self.description = description if is_valid_description(description) else ""
        self.description_source: Optional[Supplier] = None
        self.prices_by_supplier: Dict[Supplier, SupplierRecord] = {}

        self.ranked_suppliers: List[Tuple[Supplier, float]] = []
        self.position_by_supplier: Dict[Supplier, int] = {}
        self.winner: Optional[Supplier] = None
        self.loser: Optional[Supplier] = None
        self.diff_pct = 0.0
        self.simulated_sale_price = 0.0
        self.simulated_margin = 0.0
        self.margin_pct: Optional[float] = None

    def __repr__(self) -> str:
        return (
            f"CatalogEntry(barcode={self.barcode!r}, suppliers={len(self.prices_by_supplier)}, "
            f"winner={self.winner}, best_price={self.best_price:.4f})"
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def add_record(self, record: SupplierRecord) -> None:
        """Attach a supplier record, arbitrate the description, then recompute."""
        self.prices_by_supplier[record.supplier] = record
        self._arbitrate_description(record)
        self.compute_competitiveness()

    def _arbitrate_description(self, record: SupplierRecord) -> None:
        incoming = record.description
        if not is_valid_description(incoming):
            return

        if is_priority_description(record.supplier):
            self._set_description(incoming, record.supplier)
        elif not is_valid_description(self.description):
            self._set_description(incoming, record.supplier)
        elif len(incoming) > len(self.description) and not self._description_from_priority():
            self._set_description(incoming, record.supplier)

    def _description_from_priority(self) -> bool:
        return self.description_source is not None and is_priority_description(self.description_source)

    def _set_description(self, text: str, source: Optional[Supplier]) -> None:
        self.description = text
        self.description_source = source

    def fill_empty_description(self, fallback: Optional[str]) -> bool:
        """Adopt `fallback` only when the current description is invalid."""
        if is_valid_description(self.description) or not is_valid_description(fallback):
            return False
        self._set_description(fallback, None)
        return True

    # ------------------------------------------------------------------
    # Computation
    # ------------------------------------------------------------------
    def compute_competitiveness(self) -> None:
        priced = [
            (supplier, record.net_price)
            for supplier, record in self.prices_by_supplier.items()
            if record.net_price > 0
        ]
        priced.sort(key=lambda item: (item[1], item[0].order))

        self.ranked_suppliers = priced
        self.position_by_supplier = {supplier: i for i, (supplier, _) in enumerate(priced, start=1)}
        self.winner = priced[0][0] if priced else None
        self.loser = priced[-1][0] if len(priced) >= 2 else None

        if len(priced) >= 2:
            best, second = priced[0][1], priced[1][1]
            self.diff_pct = (second - best) / best * 100.0
        else:
            self.diff_pct = 0.0

        self.simulated_sale_price = 0.0
        self.simulated_margin = 0.0
        if self.margin_pct is not None:
            self.simulate_margin(self.margin_pct)

    def simulate_margin(self, margin_pct: float) -> None:
        self.margin_pct = margin_pct
        best = self.best_price
        if best <= 0:
            return
        self.simulated_sale_price = best * (1.0 + margin_pct / 100.0)
        self.simulated_margin = self.simulated_sale_price - best

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def best_price(self) -> float:
        return self.ranked_suppliers[0][1] if self.ranked_suppliers else 0.0

    @property
    def supplier_count(self) -> int:
        """Number of suppliers quoting a positive net price."""
        return len(self.ranked_suppliers)

    @property
    def suppliers(self) -> Iterable[Supplier]:
        return self.prices_by_supplier.keys()

    def record_for(self, supplier: Supplier) -> Optional[SupplierRecord]:
        return self.prices_by_supplier.get(supplier)

    def net_price_for(self, supplier: Supplier) -> float:
        record = self.prices_by_supplier.get(supplier)
        return record.net_price if record else 0.0

    def base_price_for(self, supplier: Supplier) -> float:
        record = self.prices_by_supplier.get(supplier)
        return record.base_price if record else 0.0

    def offer_pct_for(self, supplier: Supplier) -> float:
        record = self.prices_by_supplier.get(supplier)
        return record.offer_pct if record else 0.0

    def stock_for(self, supplier: Supplier) -> int:
        record = self.prices_by_supplier.get(supplier)
        return record.stock if record else 0

    def position_for(self, supplier: Supplier) -> int:
        """1-based rank, 0 when the supplier has no positive price for this product."""
        return self.position_by_supplier.get(supplier, 0)

    def best_discount_supplier(self) -> Optional[Supplier]:
        best: Optional[Supplier] = None
        best_pct = 0.0
        for supplier, record in self.prices_by_supplier.items():
            if record.offer_pct > best_pct:
                best_pct = record.offer_pct
                best = supplier
        return best
