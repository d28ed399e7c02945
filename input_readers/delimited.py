"""
DELIMITED TEXT READER
---------------------
Reads ';'-delimited supplier exports (UTF-8, header on the first line).
Rows keep every field, including trailing empty ones; blank lines are dropped.
Quote characters are plain text: fields split on the delimiter only.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import List, Tuple

from config import CSV_DELIMITER, CSV_ENCODING


def read_delimited(path: Path, delimiter: str = CSV_DELIMITER) -> Tuple[List[str], List[List[str]]]:
    """
    Returns:
        (header, rows) where header is the list of stripped column names.
        An empty file yields ([], []).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with path.open("r", encoding=CSV_ENCODING, errors="replace", newline="") as f:
        reader = csv.reader(f, delimiter=delimiter, quoting=csv.QUOTE_NONE)
        header: List[str] = []
        rows: List[List[str]] = []
        for raw in reader:
            if not header:
                if not any(cell.strip() for cell in raw):
                    continue
                header = [h.strip() for h in raw]
                continue
            if not any(cell.strip() for cell in raw):
                continue
            rows.append(raw)

    return header, rows
