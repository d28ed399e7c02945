from __future__ import annotations

from domain.records import SupplierRecord
from domain.suppliers import Supplier


def record(
    supplier: Supplier,
    barcode: str,
    price: float,
    description: str = "",
    offer_pct: float = 0.0,
    stock: int = 10,
) -> SupplierRecord:
    return SupplierRecord(
        barcode=barcode,
        description=description,
        base_price=price,
        offer_pct=offer_pct,
        stock=stock,
        supplier=supplier,
    )
