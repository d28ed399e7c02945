"""
Pipeline orchestration: rate -> parse -> convert -> consolidate -> analyze -> export.

Failure isolation:
- a supplier whose file cannot be parsed is reported through `on_error` and left
  out of the dataset; the run continues with the others
- a failed rate fetch falls back to the configured rate (warning if that is
  still the unconfigured default)
- anything escaping the orchestration itself aborts the run, is reported once
  as a fatal error, and the engine is reset so no partial catalog is published

The run is synchronous and sequential. Callers wanting a responsive surface run
`execute` on a worker thread.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol

from config import PipelineConfig
from domain.catalog import CatalogEntry
from domain.records import SupplierRecord
from domain.suppliers import Supplier, is_local_currency
from engine.consolidation import ConsolidationEngine, JoinStrategy
from parsers.registry import parser_for

from .exchange_rate import RateProvider

logger = logging.getLogger(__name__)

STAGE_RATE = "Exchange rate"
STAGE_GENERAL = "General"


class ProgressListener(Protocol):
    def on_progress(self, stage: str, percent: int) -> None: ...

    def on_error(self, stage: str, message: str) -> None: ...

    def on_complete(self, result: "SyncResult") -> None: ...


@dataclass
class SyncResult:
    engine: ConsolidationEngine
    config: PipelineConfig
    report_path: Optional[Path] = None
    failures: Dict[Supplier, str] = field(default_factory=dict)
    record_counts: Dict[Supplier, int] = field(default_factory=dict)

    @property
    def catalog(self) -> Dict[str, CatalogEntry]:
        return self.engine.catalog


class SyncOrchestrator:
    def __init__(
        self,
        engine: Optional[ConsolidationEngine] = None,
        listener: Optional[ProgressListener] = None,
        rate_provider: Optional[RateProvider] = None,
    ):
        self.engine = engine or ConsolidationEngine()
        self.listener = listener
        self.rate_provider = rate_provider

    def execute(
        self,
        supplier_files: Mapping[Supplier, Path],
        config: PipelineConfig,
        join_strategy: JoinStrategy = JoinStrategy.FULL_OUTER,
        fetch_rate: bool = False,
        output_dir: Optional[Path] = None,
    ) -> Optional[SyncResult]:
        """Run the full pipeline once. Returns None when the run aborted."""
        try:
            self._progress("Fetching exchange rate...", 5)
            if fetch_rate:
                config = self._refresh_rate(config)
            rate = config.exchange_rate
            self._progress(f"Exchange rate: {rate:.4f}", 10)

            raw_data, failures = self._parse_all(supplier_files)

            self._progress(f"Consolidating data ({JoinStrategy(join_strategy).value} join)...", 75)
            margin = config.margin_pct
            self.engine.process(raw_data, margin, join_strategy, exchange_rate=rate)

            self._progress(
                f"Analysis: {self.engine.total_products} products, "
                f"{self.engine.comparable_products} comparable",
                85,
            )

            report_path = None
            if output_dir is not None:
                from writers.excel_writer import export_catalog

                self._progress("Writing Excel report...", 90)
                report_path = export_catalog(self.engine.catalog, rate, Path(output_dir))

            self._progress("Report generated successfully!", 100)
            result = SyncResult(
                engine=self.engine,
                config=config,
                report_path=report_path,
                failures=failures,
                record_counts={s: len(r) for s, r in raw_data.items()},
            )
        except Exception as e:
            logger.exception("Pipeline aborted")
            self.engine.reset()
            self._error(STAGE_GENERAL, f"Critical error: {e}")
            return None

        if self.listener is not None:
            self.listener.on_complete(result)
        return result

    def _refresh_rate(self, config: PipelineConfig) -> PipelineConfig:
        rate: Optional[float] = None
        if self.rate_provider is not None:
            try:
                rate = float(self.rate_provider())
            except Exception as e:  # provider transport is outside our control
                logger.warning("Exchange rate fetch failed: %s", e)

        if rate is not None and rate > 0:
            return config.with_exchange_rate(rate)

        if not config.is_rate_configured:
            self._error(STAGE_RATE, "Could not fetch the exchange rate. Configure a manual rate.")
        else:
            self._progress(f"Using manual rate: {config.exchange_rate:.4f}", 10)
        return config

    def _parse_all(self, supplier_files: Mapping[Supplier, Path]):
        raw_data: Dict[Supplier, List[SupplierRecord]] = {}
        failures: Dict[Supplier, str] = {}
        total = len(supplier_files) or 1

        for idx, (supplier, path) in enumerate(supplier_files.items(), start=1):
            percent = 10 + idx * 60 // total
            self._progress(f"Processing {supplier.label}...", percent)
            try:
                records = parser_for(supplier, path).parse(Path(path))
            except Exception as e:  # one supplier's file never aborts the run
                logger.warning("[%s] parse failed: %s", supplier.label, e)
                failures[supplier] = str(e)
                self._error(supplier.label, f"Error: {e}")
                continue
            raw_data[supplier] = records
            note = " (prices in Bs, converted at consolidation)" if is_local_currency(supplier) else ""
            self._progress(f"{supplier.label}: {len(records)} products{note}", percent)

        return raw_data, failures

    def _progress(self, stage: str, percent: int) -> None:
        logger.info("%s (%d%%)", stage, percent)
        if self.listener is not None:
            self.listener.on_progress(stage, percent)

    def _error(self, stage: str, message: str) -> None:
        if self.listener is not None:
            self.listener.on_error(stage, message)
