"""
Central configuration for paths, parsing heuristics and pipeline defaults.

This module defines:
- Repository-relative output directory used by the export writer and UI.
- Header-detection scan windows per supplier schema.
- Price-inference window and the plausible price range used to adopt an unlabeled column.
- Defaults for the exchange rate and target margin.

All values are constants and should be imported where needed (no runtime logic here).
"""

from __future__ import annotations

from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]

OUTPUT_ROOT = PROJECT_ROOT / "price_reports"

DEFAULT_EXCHANGE_RATE = 1.0
DEFAULT_MARGIN_PCT = 30.0

HEADER_SCAN_ROWS_COBECA = 10
HEADER_SCAN_ROWS_F24 = 20
HEADER_SCAN_ROWS_NENA = 15
HEADER_SCAN_ROWS_GENERIC = 15

PRICE_INFERENCE_ROWS = 5
PRICE_INFERENCE_MIN = 0.01
PRICE_INFERENCE_MAX = 999_999

# Spreadsheets without a stock column still count the product as available.
MISSING_STOCK_DEFAULT = 1

CSV_DELIMITER = ";"
CSV_ENCODING = "utf-8-sig"

EXCEL_SUFFIXES = (".xlsx", ".xlsm", ".xltx", ".xltm")

ENV_EXCHANGE_RATE = "PRICE_INTEL_EXCHANGE_RATE"
ENV_MARGIN_PCT = "PRICE_INTEL_MARGIN_PCT"
