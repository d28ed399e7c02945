"""
Tabular view of a catalog as a pandas DataFrame (UI tables, quick analysis).
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

import pandas as pd

from domain.catalog import CatalogEntry
from domain.suppliers import Supplier


def report_columns(suppliers: Iterable[Supplier]) -> List[str]:
    cols = ["Barcode", "Description", "# Suppliers"]
    for s in suppliers:
        cols += [f"{s.label} USD", f"{s.label} Stock"]
    cols += ["Best Price", "Winner", "DIF %", "Simulated Sale Price", "Margin USD"]
    return cols


def sorted_entries(catalog: Mapping[str, CatalogEntry]) -> List[CatalogEntry]:
    """Group by winning supplier (declaration order), then description."""
    return sorted(
        catalog.values(),
        key=lambda e: (
            e.winner is None,
            e.winner.order if e.winner is not None else 0,
            (e.description or "").lower(),
        ),
    )


def catalog_to_frame(
    catalog: Mapping[str, CatalogEntry],
    suppliers: Optional[Iterable[Supplier]] = None,
    sort: bool = True,
) -> pd.DataFrame:
    """One row per entry; `sort=False` keeps the mapping's own order (e.g. search results)."""
    suppliers = list(suppliers) if suppliers is not None else list(Supplier)
    entries = sorted_entries(catalog) if sort else list(catalog.values())
    rows = []
    for entry in entries:
        row = {
            "Barcode": entry.barcode,
            "Description": entry.description,
            "# Suppliers": entry.supplier_count,
        }
        for s in suppliers:
            price = entry.net_price_for(s)
            stock = entry.stock_for(s)
            row[f"{s.label} USD"] = price if price > 0 else None
            row[f"{s.label} Stock"] = stock if stock > 0 else None
        row["Best Price"] = entry.best_price if entry.best_price > 0 else None
        row["Winner"] = entry.winner.label if entry.winner else None
        row["DIF %"] = entry.diff_pct if entry.diff_pct > 0 else None
        row["Simulated Sale Price"] = entry.simulated_sale_price if entry.simulated_sale_price > 0 else None
        row["Margin USD"] = entry.simulated_margin if entry.simulated_margin > 0 else None
        rows.append(row)
    return pd.DataFrame(rows, columns=report_columns(suppliers))
