"""
Consolidation engine: joins per-supplier records into catalogs and answers
competitiveness queries.

State machine: IDLE -> PARSED -> CONSOLIDATED -> ANALYZED -> SIMULATED.

Two catalogs are maintained:
- primary: built with the selected join strategy (anchor-centric or full outer join)
- universal: always the full outer join; source of truth for gap analysis and
  keyword search regardless of the primary strategy.

Raw per-supplier records are retained for the whole session so that
`recalculate()` can re-run consolidation with a new margin or join strategy
without re-parsing any file.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from domain.catalog import CatalogEntry, is_valid_description
from domain.records import SupplierRecord
from domain.suppliers import DEFAULT_ANCHOR_SUPPLIER, Supplier

from .analytics import CatalogAnalytics, compute_analytics
from .currency import convert_supplier_data

logger = logging.getLogger(__name__)

Catalog = Dict[str, CatalogEntry]
RawData = Mapping[Supplier, Sequence[SupplierRecord]]


class JoinStrategy(str, Enum):
    ANCHOR = "anchor"
    FULL_OUTER = "full_outer"


class EngineState(str, Enum):
    IDLE = "idle"
    PARSED = "parsed"
    CONSOLIDATED = "consolidated"
    ANALYZED = "analyzed"
    SIMULATED = "simulated"


class EngineStateError(RuntimeError):
    """Raised when an operation needs data that has not been processed yet."""
    pass


_STATE_ORDER = list(EngineState)


def _attach(catalog: Catalog, record: SupplierRecord) -> None:
    entry = catalog.get(record.barcode)
    if entry is None:
        entry = catalog[record.barcode] = CatalogEntry(record.barcode)
    entry.add_record(record)


def build_full_outer(raw_data: RawData) -> Catalog:
    """Every barcode from every supplier creates or joins an entry."""
    catalog: Catalog = {}
    for records in raw_data.values():
        for record in records:
            if record.barcode:
                _attach(catalog, record)
    return catalog


def build_anchor_centric(raw_data: RawData, anchor: Supplier) -> Catalog:
    """Only the anchor's barcodes create entries; other suppliers can only join them."""
    catalog: Catalog = {}
    for record in raw_data.get(anchor, ()):
        if record.barcode:
            _attach(catalog, record)

    for supplier, records in raw_data.items():
        if supplier == anchor:
            continue
        for record in records:
            entry = catalog.get(record.barcode) if record.barcode else None
            if entry is not None:
                entry.add_record(record)
    return catalog


class ConsolidationEngine:
    def __init__(self, anchor: Supplier = DEFAULT_ANCHOR_SUPPLIER):
        self.anchor = anchor
        self.reset()

    def reset(self) -> None:
        self.state = EngineState.IDLE
        self.raw_data: Dict[Supplier, List[SupplierRecord]] = {}
        self.catalog: Catalog = {}
        self.universal_catalog: Catalog = {}
        self.join_strategy: Optional[JoinStrategy] = None
        self.margin_pct: Optional[float] = None
        self._analytics: Optional[CatalogAnalytics] = None

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def load(self, raw_data: RawData, exchange_rate: Optional[float] = None) -> None:
        """
        Retain copies of the parsed records for the session and convert the copies'
        local-currency prices once. The caller's records are never modified, so the
        same raw data can be reprocessed at another rate.
        """
        self.reset()
        self.raw_data = {
            supplier: [replace(record) for record in records] for supplier, records in raw_data.items()
        }
        if exchange_rate is not None:
            convert_supplier_data(self.raw_data, exchange_rate)
        self.state = EngineState.PARSED

    def process(
        self,
        raw_data: RawData,
        margin_pct: float,
        join_strategy: JoinStrategy = JoinStrategy.FULL_OUTER,
        exchange_rate: Optional[float] = None,
    ) -> Catalog:
        """Run the whole chain once: load, consolidate, analyze, simulate."""
        self.load(raw_data, exchange_rate)
        return self.recalculate(margin_pct, join_strategy)

    def recalculate(self, margin_pct: float, join_strategy: JoinStrategy = JoinStrategy.FULL_OUTER) -> Catalog:
        """Re-run consolidation, analysis and simulation over the retained raw data."""
        self._require(EngineState.PARSED)
        self.consolidate(join_strategy)
        self.analyze()
        self.simulate_margin(margin_pct)
        return self.catalog

    def consolidate(self, join_strategy: JoinStrategy = JoinStrategy.FULL_OUTER) -> None:
        self._require(EngineState.PARSED)
        join_strategy = JoinStrategy(join_strategy)

        if join_strategy is JoinStrategy.ANCHOR:
            self.catalog = build_anchor_centric(self.raw_data, self.anchor)
        else:
            self.catalog = build_full_outer(self.raw_data)
        self.universal_catalog = build_full_outer(self.raw_data)
        self.join_strategy = join_strategy

        filled = self.backfill_descriptions()
        self._analytics = None
        self.state = EngineState.CONSOLIDATED
        logger.info(
            "Consolidated %d products (%s join, anchor %s), universal catalog %d, %d descriptions back-filled",
            len(self.catalog), join_strategy.value, self.anchor.label, len(self.universal_catalog), filled,
        )

    def backfill_descriptions(self) -> int:
        """Give entries with no valid description the longest valid one seen in any supplier's raw data."""
        longest: Dict[str, str] = {}
        for records in self.raw_data.values():
            for record in records:
                desc = record.description
                if is_valid_description(desc) and len(desc) > len(longest.get(record.barcode, "")):
                    longest[record.barcode] = desc

        filled = 0
        for catalog in (self.catalog, self.universal_catalog):
            for barcode, entry in catalog.items():
                if entry.fill_empty_description(longest.get(barcode)):
                    filled += 1
        return filled

    def analyze(self) -> CatalogAnalytics:
        self._require(EngineState.CONSOLIDATED)
        for entry in self._all_entries():
            entry.compute_competitiveness()
        self._analytics = compute_analytics(self.catalog.values())
        if self.state is EngineState.CONSOLIDATED:
            self.state = EngineState.ANALYZED
        return self._analytics

    def simulate_margin(self, margin_pct: float) -> None:
        """Apply a target margin to every entry's best price."""
        self._require(EngineState.ANALYZED)
        for entry in self._all_entries():
            entry.simulate_margin(margin_pct)
        self.margin_pct = margin_pct
        self.state = EngineState.SIMULATED

    def _all_entries(self) -> Iterable[CatalogEntry]:
        yield from self.catalog.values()
        yield from self.universal_catalog.values()

    def _require(self, minimum: EngineState) -> None:
        if _STATE_ORDER.index(self.state) < _STATE_ORDER.index(minimum):
            raise EngineStateError(f"Engine is {self.state.value}; {minimum.value} data required")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def analytics(self) -> CatalogAnalytics:
        self._require(EngineState.ANALYZED)
        if self._analytics is None:
            self._analytics = compute_analytics(self.catalog.values())
        return self._analytics

    def entries(self) -> List[CatalogEntry]:
        return list(self.catalog.values())

    @property
    def total_products(self) -> int:
        return len(self.catalog)

    @property
    def comparable_products(self) -> int:
        return sum(1 for entry in self.catalog.values() if entry.supplier_count >= 2)

    def average_price_by_supplier(self) -> Dict[Supplier, float]:
        return dict(self.analytics.average_net_price)

    def win_count_by_supplier(self) -> Dict[Supplier, int]:
        return dict(self.analytics.win_count)

    def loss_count_by_supplier(self) -> Dict[Supplier, int]:
        return dict(self.analytics.loss_count)

    def total_stock_by_supplier(self) -> Dict[Supplier, int]:
        return dict(self.analytics.total_stock)

    def offer_count_by_supplier(self) -> Dict[Supplier, int]:
        return dict(self.analytics.offer_count)

    def base_vs_net_by_supplier(self) -> Dict[Supplier, tuple]:
        return dict(self.analytics.base_vs_net)

    def supplier_with_most_wins(self) -> Optional[Supplier]:
        return self.analytics.supplier_with_most_wins

    def supplier_with_most_losses(self) -> Optional[Supplier]:
        return self.analytics.supplier_with_most_losses

    def supplier_with_best_avg_discount(self) -> Optional[Supplier]:
        return self.analytics.supplier_with_best_avg_discount

    def supplier_with_worst_avg_discount(self) -> Optional[Supplier]:
        return self.analytics.supplier_with_worst_avg_discount

    def gap_products(self, target: Optional[Supplier] = None) -> List[CatalogEntry]:
        """
        Universal-catalog entries the target cannot serve (no record or zero stock)
        while at least one other supplier has it priced and in stock.
        """
        self._require(EngineState.CONSOLIDATED)
        target = target or self.anchor
        gaps: List[CatalogEntry] = []
        for entry in self.universal_catalog.values():
            own = entry.record_for(target)
            if own is not None and own.has_stock:
                continue
            if any(
                supplier != target and record.has_stock and record.net_price > 0
                for supplier, record in entry.prices_by_supplier.items()
            ):
                gaps.append(entry)
        return gaps

    def gap_summary_by_supplier(self, target: Optional[Supplier] = None) -> Dict[Supplier, int]:
        """Stock units each non-target supplier holds across the gap products."""
        target = target or self.anchor
        summary: Dict[Supplier, int] = {}
        for entry in self.gap_products(target):
            for supplier, record in entry.prices_by_supplier.items():
                if supplier != target and record.has_stock and record.net_price > 0:
                    summary[supplier] = summary.get(supplier, 0) + record.stock
        return summary

    def cheapest_by_molecule(self, keyword: str) -> List[CatalogEntry]:
        """
        Universal-catalog entries whose description contains every keyword token
        (case-insensitive substring), cheapest first, unpriced entries last.
        """
        self._require(EngineState.CONSOLIDATED)
        tokens = (keyword or "").lower().split()
        if not tokens:
            return []
        matches = [
            entry for entry in self.universal_catalog.values()
            if all(token in entry.description.lower() for token in tokens)
        ]
        matches.sort(key=lambda e: (e.best_price <= 0, e.best_price))
        return matches
