"""
EXCEL WRITER
------------
Styled price-analysis report built with openpyxl.

Layout:
- row 1: title (merged across the table width)
- row 2: exchange rate and generation timestamp
- row 4: headers (base columns, per-supplier price/stock pairs, analytics)
- rows 5+: one row per catalog entry, winner price highlighted
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, Mapping, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from domain.catalog import CatalogEntry
from domain.suppliers import Supplier

from .frames import report_columns, sorted_entries
from .palette import HEADER_FILL, SUPPLIER_HEADER_FILL, TITLE_FILL, WINNER_FILL

SHEET_TITLE = "Análisis de Precio"
REPORT_TITLE = "ANÁLISIS COMPARATIVO DE PRECIOS - DROGUERÍAS"
PRICE_FORMAT = "#,##0.00"
PERCENT_FORMAT = "0.00%"
HEADER_ROW = 4


def _fill(hex_rgb: str) -> PatternFill:
    return PatternFill(start_color=hex_rgb, end_color=hex_rgb, fill_type="solid")


def report_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"Analisis_Precio_{now:%Y%m%d_%H%M}.xlsx"


def export_catalog(
    catalog: Mapping[str, CatalogEntry],
    exchange_rate: float,
    output_dir: Path,
    suppliers: Optional[Iterable[Supplier]] = None,
    now: Optional[datetime] = None,
) -> Path:
    """Write the report into `output_dir` and return its path."""
    suppliers = list(suppliers) if suppliers is not None else list(Supplier)
    now = now or datetime.now()
    headers = report_columns(suppliers)

    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.cell(row=1, column=1, value=REPORT_TITLE)
    ws.cell(row=1, column=1).font = Font(bold=True, size=14, color="FFFFFF")
    ws.cell(row=1, column=1).fill = _fill(TITLE_FILL)
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(headers))

    ws.cell(row=2, column=1, value=f"Exchange rate: {exchange_rate:.4f}")
    ws.cell(row=2, column=4, value=f"Generated: {now:%d/%m/%Y %H:%M}")

    base_count = 3
    supplier_span = range(base_count + 1, base_count + 1 + 2 * len(suppliers))
    for col, title in enumerate(headers, start=1):
        cell = ws.cell(row=HEADER_ROW, column=col, value=title)
        cell.font = Font(bold=True, color="FFFFFF", size=10 if col in supplier_span else 11)
        cell.fill = _fill(SUPPLIER_HEADER_FILL if col in supplier_span else HEADER_FILL)
        cell.alignment = Alignment(horizontal="center")
        cell.border = Border(bottom=Side(style="thin"))

    winner_font = Font(bold=True, color="FFFFFF")
    for r, entry in enumerate(sorted_entries(catalog), start=HEADER_ROW + 1):
        ws.cell(row=r, column=1, value=entry.barcode).alignment = Alignment(horizontal="left")
        ws.cell(row=r, column=2, value=entry.description or "").alignment = Alignment(horizontal="left")
        ws.cell(row=r, column=3, value=entry.supplier_count)

        col = base_count + 1
        for s in suppliers:
            price = entry.net_price_for(s)
            stock = entry.stock_for(s)
            if price > 0:
                cell = ws.cell(row=r, column=col, value=price)
                cell.number_format = PRICE_FORMAT
                if s == entry.winner:
                    cell.fill = _fill(WINNER_FILL)
                    cell.font = winner_font
            if stock > 0:
                ws.cell(row=r, column=col + 1, value=stock)
            col += 2

        if entry.best_price > 0:
            cell = ws.cell(row=r, column=col, value=entry.best_price)
            cell.number_format = PRICE_FORMAT
            cell.fill = _fill(WINNER_FILL)
            cell.font = winner_font
        if entry.winner is not None:
            ws.cell(row=r, column=col + 1, value=entry.winner.label)
        if entry.diff_pct > 0:
            ws.cell(row=r, column=col + 2, value=entry.diff_pct / 100.0).number_format = PERCENT_FORMAT
        if entry.simulated_sale_price > 0:
            ws.cell(row=r, column=col + 3, value=entry.simulated_sale_price).number_format = PRICE_FORMAT
        if entry.simulated_margin > 0:
            ws.cell(row=r, column=col + 4, value=entry.simulated_margin).number_format = PRICE_FORMAT

    for col, title in enumerate(headers, start=1):
        width = 45 if col == 2 else max(12, len(title) + 2)
        ws.column_dimensions[get_column_letter(col)].width = width
    ws.freeze_panes = ws.cell(row=HEADER_ROW + 1, column=3)

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / report_filename(now)
    wb.save(output_path)
    wb.close()
    return output_path
