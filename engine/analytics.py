"""
Aggregate analytics over a catalog, computed in a single pass.

Per supplier: average net price, win and loss counts, total stock, number of
discounted products, average base vs net price and average discount. The
"best of" selectors break ties by supplier declaration order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from domain.catalog import CatalogEntry
from domain.suppliers import Supplier


@dataclass
class CatalogAnalytics:
    total_products: int = 0
    comparable_products: int = 0
    average_net_price: Dict[Supplier, float] = field(default_factory=dict)
    win_count: Dict[Supplier, int] = field(default_factory=dict)
    loss_count: Dict[Supplier, int] = field(default_factory=dict)
    total_stock: Dict[Supplier, int] = field(default_factory=dict)
    offer_count: Dict[Supplier, int] = field(default_factory=dict)
    base_vs_net: Dict[Supplier, Tuple[float, float]] = field(default_factory=dict)
    average_discount: Dict[Supplier, float] = field(default_factory=dict)

    @property
    def supplier_with_most_wins(self) -> Optional[Supplier]:
        return _argmax(self.win_count)

    @property
    def supplier_with_most_losses(self) -> Optional[Supplier]:
        return _argmax(self.loss_count)

    @property
    def supplier_with_best_avg_discount(self) -> Optional[Supplier]:
        return _argmax(self.average_discount)

    @property
    def supplier_with_worst_avg_discount(self) -> Optional[Supplier]:
        if not self.average_discount:
            return None
        return min(self.average_discount, key=lambda s: (self.average_discount[s], s.order))


def _argmax(values: Dict[Supplier, float]) -> Optional[Supplier]:
    """Supplier with the highest strictly positive value, or None."""
    best: Optional[Supplier] = None
    for supplier in sorted(values, key=lambda s: s.order):
        if values[supplier] <= 0:
            continue
        if best is None or values[supplier] > values[best]:
            best = supplier
    return best


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def compute_analytics(entries: Iterable[CatalogEntry]) -> CatalogAnalytics:
    result = CatalogAnalytics(
        win_count={s: 0 for s in Supplier},
        loss_count={s: 0 for s in Supplier},
    )

    net_prices: Dict[Supplier, List[float]] = {}
    base_net_pairs: Dict[Supplier, List[Tuple[float, float]]] = {}
    discounts: Dict[Supplier, List[float]] = {}

    for entry in entries:
        result.total_products += 1
        if entry.supplier_count >= 2:
            result.comparable_products += 1
        if entry.winner is not None:
            result.win_count[entry.winner] += 1
        if entry.loser is not None:
            result.loss_count[entry.loser] += 1

        for supplier, record in entry.prices_by_supplier.items():
            net = record.net_price
            result.total_stock[supplier] = result.total_stock.get(supplier, 0) + record.stock
            discounts.setdefault(supplier, []).append(record.offer_pct)
            if record.has_discount:
                result.offer_count[supplier] = result.offer_count.get(supplier, 0) + 1
            if net > 0:
                net_prices.setdefault(supplier, []).append(net)
                if record.base_price > 0:
                    base_net_pairs.setdefault(supplier, []).append((record.base_price, net))

    result.average_net_price = {s: _mean(v) for s, v in net_prices.items()}
    result.base_vs_net = {
        s: (_mean([b for b, _ in pairs]), _mean([n for _, n in pairs]))
        for s, pairs in base_net_pairs.items()
    }
    result.average_discount = {s: _mean(v) for s, v in discounts.items()}
    return result
