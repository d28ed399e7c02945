"""
Exchange-rate provider interface.

Fetching the official rate (web scraping, APIs) happens outside the core. A
provider is any callable returning the rate as a float, raising RateFetchError
when it cannot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class RateFetchError(RuntimeError):
    """Raised by a provider that could not obtain a usable rate."""
    pass


class RateProvider(Protocol):
    def __call__(self) -> float: ...


@dataclass(frozen=True)
class StaticRateProvider:
    """Provider returning a fixed, manually entered rate."""

    rate: float

    def __call__(self) -> float:
        if self.rate <= 0:
            raise RateFetchError(f"Invalid manual rate: {self.rate}")
        return self.rate
