from .analytics import CatalogAnalytics, compute_analytics
from .consolidation import (
    Catalog,
    ConsolidationEngine,
    EngineState,
    EngineStateError,
    JoinStrategy,
    build_anchor_centric,
    build_full_outer,
)
from .currency import convert_records, convert_supplier_data
