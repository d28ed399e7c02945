from __future__ import annotations

from datetime import datetime

import pandas as pd
import pytest
from openpyxl import load_workbook

from domain.suppliers import Supplier
from engine import ConsolidationEngine
from writers import catalog_to_frame, export_catalog, report_columns, report_filename

from .factories import record


@pytest.fixture
def catalog():
    raw = {
        Supplier.DROACTIVA: [
            record(Supplier.DROACTIVA, "7591", 10.0, "ZINC", stock=3),
            record(Supplier.DROACTIVA, "7592", 4.0, "ACETAMINOFEN", stock=0),
        ],
        Supplier.COBECA: [record(Supplier.COBECA, "7591", 8.0, "ZINC 50MG", stock=1)],
    }
    engine = ConsolidationEngine()
    return engine.process(raw, 25.0)


def test_report_columns() -> None:
    cols = report_columns([Supplier.DROACTIVA, Supplier.P365])
    assert cols == [
        "Barcode", "Description", "# Suppliers",
        "Droactiva USD", "Droactiva Stock", "365 USD", "365 Stock",
        "Best Price", "Winner", "DIF %", "Simulated Sale Price", "Margin USD",
    ]


def test_catalog_to_frame(catalog) -> None:
    frame = catalog_to_frame(catalog, [Supplier.DROACTIVA, Supplier.COBECA])
    # Grouped by winner in declaration order: Droactiva wins 7592, Cobeca wins 7591.
    assert list(frame["Barcode"]) == ["7592", "7591"]

    zinc = frame.set_index("Barcode").loc["7591"]
    assert zinc["Description"] == "ZINC 50MG"
    assert zinc["Winner"] == "Cobeca"
    assert zinc["Best Price"] == pytest.approx(8.0)
    assert zinc["DIF %"] == pytest.approx(25.0)
    assert zinc["Simulated Sale Price"] == pytest.approx(10.0)
    assert zinc["Margin USD"] == pytest.approx(2.0)

    acetaminofen = frame.set_index("Barcode").loc["7592"]
    assert pd.isna(acetaminofen["Droactiva Stock"])
    assert pd.isna(acetaminofen["Cobeca USD"])


def test_catalog_to_frame_unsorted_keeps_mapping_order(catalog) -> None:
    ordered = {k: catalog[k] for k in ("7591", "7592")}
    frame = catalog_to_frame(ordered, sort=False)
    assert list(frame["Barcode"]) == ["7591", "7592"]
    assert len(frame.columns) == 3 + 2 * len(Supplier) + 5


def test_report_filename() -> None:
    assert report_filename(datetime(2024, 3, 7, 9, 5)) == "Analisis_Precio_20240307_0905.xlsx"


def test_export_catalog(catalog, tmp_path) -> None:
    now = datetime(2024, 3, 7, 9, 5)
    suppliers = [Supplier.DROACTIVA, Supplier.COBECA]
    path = export_catalog(catalog, 36.5, tmp_path / "reports", suppliers=suppliers, now=now)

    assert path == tmp_path / "reports" / "Analisis_Precio_20240307_0905.xlsx"
    wb = load_workbook(path)
    ws = wb.active
    try:
        assert "PRECIOS" in ws["A1"].value
        assert ws["A2"].value == "Exchange rate: 36.5000"
        assert [c.value for c in ws[4]] == report_columns(suppliers)
        assert ws.freeze_panes == "C5"

        # Row 5 is 7592 (Droactiva group), row 6 is 7591 (Cobeca group).
        assert ws["A5"].value == "7592"
        assert ws["D5"].value == pytest.approx(4.0)
        assert ws["E5"].value is None
        assert ws["F5"].value is None

        assert ws["A6"].value == "7591"
        assert ws["C6"].value == 2
        assert ws["F6"].value == pytest.approx(8.0)
        assert ws["F6"].fill.start_color.rgb.endswith("27AE60")
        assert ws["H6"].value == pytest.approx(8.0)
        assert ws["I6"].value == "Cobeca"
        assert ws["J6"].value == pytest.approx(0.25)
        assert ws["K6"].value == pytest.approx(10.0)
        assert ws["L6"].value == pytest.approx(2.0)
    finally:
        wb.close()
