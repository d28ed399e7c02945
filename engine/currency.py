"""
Local-currency to reference-currency conversion.

Applies to suppliers flagged as quoting in local currency (a fixed lookup, not
per row). Each record remembers that it was converted, so running the step
twice over the same records cannot divide twice.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from domain.records import SupplierRecord
from domain.suppliers import Supplier, is_local_currency

logger = logging.getLogger(__name__)


def convert_records(records: Iterable[SupplierRecord], rate: float) -> int:
    """
    Divide the base price of local-currency records by `rate`.

    A rate of 1 or less means "not configured yet" and leaves every record untouched.
    Returns the number of records converted.
    """
    if rate <= 1:
        return 0
    converted = 0
    for record in records:
        if is_local_currency(record.supplier) and record.convert_to_reference(rate):
            converted += 1
    return converted


def convert_supplier_data(raw_data: Mapping[Supplier, Sequence[SupplierRecord]], rate: float) -> int:
    total = 0
    for supplier, records in raw_data.items():
        if not is_local_currency(supplier):
            continue
        n = convert_records(records, rate)
        if n:
            logger.info("[%s] converted %d prices at rate %.4f", supplier.label, n, rate)
        total += n
    if rate <= 1 and any(is_local_currency(s) and recs for s, recs in raw_data.items()):
        logger.warning("Exchange rate %.4f is not configured; local-currency prices left as-is", rate)
    return total
