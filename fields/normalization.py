"""
Field normalization for supplier price lists.

Every function here is total: malformed input degrades to a safe default
(0, 0.0 or "") instead of raising, because rows are parsed best-effort and a
single bad cell must never abort a file.

Supported numeric notations (Spanish/Venezuelan exports):
- "1.351,75" -> 1351.75   (comma decimal, dot thousands)
- "1,351.75" -> 1351.75   (dot decimal, comma thousands)
- "7,94"     -> 7.94      (comma only, <= 2 digits after it: decimal)
- "1,000"    -> 1000.0    (comma only, > 2 digits after it: thousands)
"""

from __future__ import annotations

import math
import re
import unicodedata
from typing import Any

_NON_ALNUM = re.compile(r"[^0-9a-zA-Z]")
_PADDED_NUMERIC = re.compile(r"^0+\d{6,}$")
_PIPES_AND_SPACES = re.compile(r"[|\s]")
_NON_STOCK_CHARS = re.compile(r"[^0-9-]")
_WHITESPACE_RUN = re.compile(r"\s+")
_PERCENT_PATTERN = re.compile(r"(\d+(?:[.,]\d+)?)\s*%")


def _as_text(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw)


def fold_accents(text: str) -> str:
    """Lower-case and strip diacritics: 'Descripción' -> 'descripcion'."""
    text = _as_text(text).strip().lower()
    text = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in text if not unicodedata.combining(ch))


def clean_barcode(raw: Any) -> str:
    """
    Keep only ASCII letters and digits.

    Zero-padded numeric codes (6+ significant digits) lose their leading zeros so
    that '0007591234567' and '7591234567' land on the same catalog entry.
    """
    cleaned = _NON_ALNUM.sub("", _as_text(raw).strip())
    if _PADDED_NUMERIC.match(cleaned):
        cleaned = cleaned.lstrip("0")
    return cleaned


def parse_locale_decimal(raw: Any) -> float:
    """Parse a price/percentage in any of the supported notations; 0.0 when unparseable."""
    if isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        return float(raw) if math.isfinite(raw) else 0.0

    cleaned = _PIPES_AND_SPACES.sub("", _as_text(raw))
    if not cleaned or cleaned == "-":
        return 0.0

    has_comma = "," in cleaned
    has_dot = "." in cleaned

    if has_comma and has_dot:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif has_comma:
        after_comma = cleaned[cleaned.rfind(",") + 1:]
        if len(after_comma) <= 2:
            cleaned = cleaned.replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")

    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def parse_stock(raw: Any) -> int:
    """Keep digits and minus signs only; 0 when nothing parseable remains."""
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else 0

    cleaned = _NON_STOCK_CHARS.sub("", _as_text(raw).strip())
    if not cleaned:
        return 0
    try:
        return int(cleaned)
    except ValueError:
        return 0


def clean_description(raw: Any) -> str:
    """Collapse whitespace runs and trim. Content is never rejected here."""
    return _WHITESPACE_RUN.sub(" ", _as_text(raw)).strip()


def parse_percent_cell(raw: Any) -> float:
    """Plain percentage cell such as "5", "5%" or "2,5 %"."""
    if isinstance(raw, str):
        raw = raw.replace("%", "")
    return parse_locale_decimal(raw)


def parse_embedded_discount(raw: Any) -> float:
    """
    Extract a discount embedded in free text, e.g. 'Dcto. nena del 7,00%' -> 7.0.

    Falls back to reading the whole cell as a bare number in [0, 100]; anything else is 0.
    """
    text = _as_text(raw)
    match = _PERCENT_PATTERN.search(text)
    if match:
        return parse_locale_decimal(match.group(1))

    value = parse_locale_decimal(raw)
    if 0 <= value <= 100:
        return value
    return 0.0
