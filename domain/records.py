"""
SupplierRecord and RowOutcome.

A SupplierRecord is one normalized row from one supplier file. The net price is
never stored: it is derived from the base price and the offer percentage, so it
stays correct after the one-time currency conversion rewrites the base price.

RowOutcome is the per-row result of a parser: either a record or the reason the
row was skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .suppliers import Supplier


@dataclass
class SupplierRecord:
    barcode: str
    description: str
    base_price: float
    offer_pct: float
    stock: int
    supplier: Supplier
    vat_pct: float = 0.0
    converted: bool = False

    @property
    def net_price(self) -> float:
        return self.base_price * (1.0 - self.offer_pct / 100.0)

    @property
    def has_stock(self) -> bool:
        return self.stock > 0

    @property
    def has_discount(self) -> bool:
        return self.offer_pct > 0

    def convert_to_reference(self, rate: float) -> bool:
        """
        Divide the base price by `rate` once. Returns True when the record changed.

        Rates of 1 or less are treated as "not configured" and ignored.
        """
        if self.converted or rate <= 1:
            return False
        self.base_price = self.base_price / rate
        self.converted = True
        return True


@dataclass(frozen=True)
class RowOutcome:
    row_number: int
    record: Optional[SupplierRecord] = None
    skip_reason: Optional[str] = None

    @property
    def parsed(self) -> bool:
        return self.record is not None

    @classmethod
    def ok(cls, row_number: int, record: SupplierRecord) -> "RowOutcome":
        return cls(row_number=row_number, record=record)

    @classmethod
    def skipped(cls, row_number: int, reason: str) -> "RowOutcome":
        return cls(row_number=row_number, skip_reason=reason)
