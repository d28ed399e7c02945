"""
Supplier identity table.

Each supplier is a plain identifier with a display label. Declaration order is
significant: it is the deterministic tie-breaker when two suppliers quote the
same net price. Presentation attributes (colours) live with the writers and UI,
never here.
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, List


class Supplier(str, Enum):
    DROACTIVA = "droactiva"
    DROMARKO = "dromarko"
    COBECA = "cobeca"
    NENA = "nena"
    F24 = "f24"
    P365 = "p365"

    @property
    def label(self) -> str:
        return SUPPLIER_LABELS[self]

    @property
    def order(self) -> int:
        return _DECLARATION_ORDER[self]

    @classmethod
    def from_label(cls, text: str) -> "Supplier":
        """Resolve either the identifier or the display label, case-insensitively."""
        key = (text or "").strip().lower()
        for s in cls:
            if key in (s.value, s.label.lower()):
                return s
        raise ValueError(f"Unknown supplier: {text!r}")


SUPPLIER_LABELS = {
    Supplier.DROACTIVA: "Droactiva",
    Supplier.DROMARKO: "Dromarko",
    Supplier.COBECA: "Cobeca",
    Supplier.NENA: "Nena",
    Supplier.F24: "F24",
    Supplier.P365: "365",
}

_DECLARATION_ORDER = {s: i for i, s in enumerate(Supplier)}

# Files from these suppliers quote prices in bolivares (Bs).
LOCAL_CURRENCY_SUPPLIERS: FrozenSet[Supplier] = frozenset({Supplier.NENA, Supplier.F24})

# Listings from these suppliers include the lab/brand in the description.
PRIORITY_DESCRIPTION_SUPPLIERS: FrozenSet[Supplier] = frozenset({Supplier.F24, Supplier.COBECA})

DEFAULT_ANCHOR_SUPPLIER = Supplier.DROACTIVA


def all_suppliers() -> List[Supplier]:
    return list(Supplier)


def is_local_currency(supplier: Supplier) -> bool:
    return supplier in LOCAL_CURRENCY_SUPPLIERS


def is_priority_description(supplier: Supplier) -> bool:
    return supplier in PRIORITY_DESCRIPTION_SUPPLIERS
