from __future__ import annotations

"""Rate provider abstraction and response normalization.

Every provider answers "rates for a base currency"; some also answer direct
conversions and day-by-day series. Normalization is shared so all providers
apply the same rules to the rate tables they return.
"""
from abc import ABC, abstractmethod
from datetime import date
import logging
import math
from typing import Any, Dict, List, Mapping

import httpx

from ratedesk.core.errors import ProviderError
from ratedesk.models.rates import TimeseriesPoint

logger = logging.getLogger("ratedesk.providers")

DATE_FMT = "%Y-%m-%d"


def coerce_rate(value: Any) -> float | None:
    """Return value as a positive finite float, or None when it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        v = float(value)
    elif isinstance(value, str):
        try:
            v = float(value)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(v) or v <= 0:
        return None
    return v


def normalize_rates(provider: str, raw: Mapping[str, Any]) -> Dict[str, float]:
    """Uppercase keys and drop entries that do not hold a usable rate.

    Invalid values are dropped rather than coerced to 0.0 so a bad entry can
    never end up as a divisor in a cross-rate.
    """
    out: Dict[str, float] = {}
    dropped = 0
    for code, value in raw.items():
        rate = coerce_rate(value)
        if not isinstance(code, str) or rate is None:
            dropped += 1
            continue
        out[code.strip().upper()] = rate
    if dropped:
        logger.debug("%s: dropped %d invalid rate entries", provider, dropped)
    return out


def extract_rates(provider: str, body: Mapping[str, Any]) -> Dict[str, float]:
    raw = body.get("rates")
    if not isinstance(raw, Mapping):
        raise ProviderError(provider, "response has no 'rates' mapping")
    rates = normalize_rates(provider, raw)
    if not rates:
        raise ProviderError(provider, "response 'rates' holds no usable values")
    return rates


def flatten_series(
    provider: str, body: Mapping[str, Any], quote: str
) -> List[TimeseriesPoint]:
    """Turn {"rates": {"yyyy-MM-dd": {CODE: rate}}} into points sorted by day."""
    raw = body.get("rates")
    if not isinstance(raw, Mapping):
        raise ProviderError(provider, "response has no per-day 'rates' mapping")
    points: List[TimeseriesPoint] = []
    for day_str, day_map in raw.items():
        if not isinstance(day_map, Mapping):
            continue
        rate = coerce_rate(day_map.get(quote))
        if rate is None:
            continue
        try:
            day = date.fromisoformat(str(day_str)[:10])
        except ValueError:
            continue
        points.append(TimeseriesPoint(day=day, rate=rate))
    if not points:
        raise ProviderError(provider, f"series holds no values for {quote}")
    points.sort(key=lambda p: p.day)
    return points


class RateProvider(ABC):
    name: str = "provider"

    def __init__(self, client: httpx.AsyncClient, base_url: str):
        self._client = client
        self.base_url = base_url.rstrip("/")

    @abstractmethod
    async def latest(self, base: str) -> Dict[str, float]:
        """Return units of each currency per 1 unit of base."""
        raise NotImplementedError
