from .catalog import CatalogEntry, is_valid_description
from .records import RowOutcome, SupplierRecord
from .suppliers import (
    DEFAULT_ANCHOR_SUPPLIER,
    LOCAL_CURRENCY_SUPPLIERS,
    PRIORITY_DESCRIPTION_SUPPLIERS,
    SUPPLIER_LABELS,
    Supplier,
    all_suppliers,
    is_local_currency,
    is_priority_description,
)
