from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Sequence

import pytest
from openpyxl import Workbook


@pytest.fixture
def make_xlsx(tmp_path: Path) -> Callable[..., Path]:
    """Write rows (lists of cell values) into the first sheet of a new workbook."""

    def _make(rows: Sequence[Sequence[Any]], name: str = "supplier.xlsx") -> Path:
        wb = Workbook()
        ws = wb.active
        for row in rows:
            ws.append(list(row))
        path = tmp_path / name
        wb.save(path)
        wb.close()
        return path

    return _make


@pytest.fixture
def make_csv(tmp_path: Path) -> Callable[..., Path]:
    def _make(lines: List[str], name: str = "supplier.csv") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _make

