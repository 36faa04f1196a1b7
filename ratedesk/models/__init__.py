"""Pydantic domain models for the rate layer."""

from .constants import (
    CURRENCIES,
    CURRENCY_NAMES,
    is_valid,
    name_of,
    normalize_code,
)  # re-export
from .rates import RateSnapshot, CachedRecord, LatestOutcome, TimeseriesPoint
from .watchlist import WatchItem, FiredAlert, NO_TARGET
from .conversion import ConversionResult

__all__ = [
    "CURRENCIES",
    "CURRENCY_NAMES",
    "is_valid",
    "name_of",
    "normalize_code",
    "RateSnapshot",
    "CachedRecord",
    "LatestOutcome",
    "TimeseriesPoint",
    "WatchItem",
    "FiredAlert",
    "NO_TARGET",
    "ConversionResult",
]
