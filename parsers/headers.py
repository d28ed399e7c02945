"""
Keyword-based header detection for spreadsheet exports.

Supplier workbooks put titles, logos and blank lines above the real header, and
name the same column differently from one export to the next. Detection scans
the first rows of the sheet, folds every cell (lower-case, no accents) and
matches it against an ordered rule table. The first row holding all mandatory
columns is the header; scanning stops there.

When a schema allows it, the price column may be missing from the header and is
then inferred from the first data rows.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set

from config import PRICE_INFERENCE_MAX, PRICE_INFERENCE_MIN, PRICE_INFERENCE_ROWS
from fields.normalization import fold_accents
from input_readers.excel import Grid, cell_text, is_numeric_cell

Matcher = Callable[[str], bool]

BARCODE = "barcode"
PRICE = "price"
DESCRIPTION = "description"
STOCK = "stock"
DISCOUNT = "discount"
VAT = "vat"


class HeaderDetectionError(ValueError):
    """Raised when no header row (or mandatory column) can be located in a supplier file."""
    pass


def contains_any(*words: str) -> Matcher:
    return lambda text: any(w in text for w in words)


def contains_all(*words: str) -> Matcher:
    return lambda text: all(w in text for w in words)


def equals_any(*words: str) -> Matcher:
    return lambda text: text in words


def either(*matchers: Matcher) -> Matcher:
    return lambda text: any(m(text) for m in matchers)


def has_word(*words: str) -> Matcher:
    """Whole-word match, so "iva" does not fire on "droactiva"."""
    pattern = re.compile(r"\b(?:" + "|".join(re.escape(w) for w in words) + r")\b")
    return lambda text: pattern.search(text) is not None


@dataclass(frozen=True)
class ColumnRule:
    """
    One entry of a header keyword table.

    Rules are tried in order for every cell and the first matching rule claims
    the cell. A later cell matching the same field overwrites the earlier one,
    unless `keep_first` is set.
    """

    name: str
    matches: Matcher
    hint: str
    keep_first: bool = False


@dataclass
class HeaderLayout:
    row_index: int
    columns: Dict[str, int] = field(default_factory=dict)
    inferred: Set[str] = field(default_factory=set)

    def get(self, name: str) -> Optional[int]:
        return self.columns.get(name)

    def has(self, name: str) -> bool:
        return name in self.columns

    def claimed(self) -> Set[int]:
        return set(self.columns.values())

    def describe(self) -> str:
        parts = [f"{k}={v}" for k, v in sorted(self.columns.items(), key=lambda kv: kv[1])]
        suffix = f" (inferred: {', '.join(sorted(self.inferred))})" if self.inferred else ""
        return f"header row {self.row_index}: " + ", ".join(parts) + suffix


def _match_row(row: Sequence, rules: Sequence[ColumnRule]) -> Dict[str, int]:
    found: Dict[str, int] = {}
    for col, value in enumerate(row):
        text = fold_accents(cell_text(value))
        if not text:
            continue
        for rule in rules:
            if not rule.matches(text):
                continue
            if not (rule.keep_first and rule.name in found):
                found[rule.name] = col
            break
    return found


def _keywords_hint(rules: Sequence[ColumnRule], fields: Iterable[str]) -> str:
    wanted = set(fields)
    hints: List[str] = []
    for rule in rules:
        if rule.name in wanted and rule.hint not in hints:
            hints.append(rule.hint)
    return "; ".join(hints)


def detect_header(
    grid: Grid,
    rules: Sequence[ColumnRule],
    mandatory: Sequence[str] = (BARCODE, PRICE),
    scan_rows: int = 15,
    inferable: Sequence[str] = (),
    source: str = "supplier file",
) -> HeaderLayout:
    """
    Return the layout of the first row satisfying the mandatory columns.

    Columns listed in `inferable` may be absent from that row; the caller is
    expected to infer them afterwards.
    """
    required_now = [f for f in mandatory if f not in inferable]

    for r in range(min(scan_rows, len(grid))):
        row = grid[r]
        if not row:
            continue
        found = _match_row(row, rules)
        if all(f in found for f in mandatory):
            return HeaderLayout(row_index=r, columns=found)
        if inferable and all(f in found for f in required_now):
            return HeaderLayout(row_index=r, columns=found)

    raise HeaderDetectionError(
        f"Could not detect the header row of {source} in the first {scan_rows} rows. "
        f"Expected columns with keywords: {_keywords_hint(rules, mandatory)}"
    )


def infer_price_column(
    grid: Grid,
    layout: HeaderLayout,
    rows: int = PRICE_INFERENCE_ROWS,
) -> Optional[int]:
    """
    Adopt the first unclaimed column holding a plausible numeric price in the
    rows right below the header. Returns None when nothing qualifies.
    """
    claimed = layout.claimed()
    start = layout.row_index + 1
    for r in range(start, min(start + rows, len(grid))):
        row = grid[r] or ()
        for col, value in enumerate(row):
            if col in claimed or not is_numeric_cell(value):
                continue
            if PRICE_INFERENCE_MIN < value < PRICE_INFERENCE_MAX:
                return col
    return None
