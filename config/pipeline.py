"""
Immutable pipeline configuration snapshot.

The exchange rate and target margin are owned by the caller. Each pipeline
invocation receives a `PipelineConfig`; updates (manual edits, a completed rate
fetch) produce a new snapshot instead of mutating shared state.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv

from .settings import DEFAULT_EXCHANGE_RATE, DEFAULT_MARGIN_PCT, ENV_EXCHANGE_RATE, ENV_MARGIN_PCT

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip().replace(",", "."))
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


@dataclass(frozen=True)
class PipelineConfig:
    exchange_rate: float = DEFAULT_EXCHANGE_RATE
    margin_pct: float = DEFAULT_MARGIN_PCT

    @property
    def is_rate_configured(self) -> bool:
        """A rate of 1 or less means no real rate was ever supplied."""
        return self.exchange_rate > 1.0

    def with_exchange_rate(self, rate: float) -> "PipelineConfig":
        return replace(self, exchange_rate=float(rate))

    def with_margin(self, margin_pct: float) -> "PipelineConfig":
        return replace(self, margin_pct=float(margin_pct))

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Build a snapshot from environment variables (a local .env file is honoured)."""
        load_dotenv()
        return cls(
            exchange_rate=_env_float(ENV_EXCHANGE_RATE, DEFAULT_EXCHANGE_RATE),
            margin_pct=_env_float(ENV_MARGIN_PCT, DEFAULT_MARGIN_PCT),
        )
