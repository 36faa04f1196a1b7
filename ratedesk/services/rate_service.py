"""Exchange rate service with multi-provider fallback.

Three capabilities, each a provider chain:
- `latest(base)`: exchangerate.host -> frankfurter -> open.er-api
- `convert(from, to, amount)`: exchangerate.host convert -> frankfurter
  latest?to= -> our own `latest(from)` multiplied out
- `timeseries(base, quote, start, end)`: exchangerate.host -> frankfurter

Currency inputs are uppercased and checked against the static registry
before any request goes out. Each provider gets exactly one try per call.
"""

from __future__ import annotations
from datetime import date
from typing import Dict, List, Optional

import httpx

from ratedesk.core.config import Settings, get_settings
from ratedesk.core.errors import ProviderError
from ratedesk.models.constants import DEFAULT_BASE, normalize_code
from ratedesk.models.rates import TimeseriesPoint
from .rates.chain import try_providers
from .rates.providers import make_providers


class RateService:
    def __init__(self, client: httpx.AsyncClient, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self._xhost, self._frank, self._erapi = make_providers(client, settings)

    async def latest(self, base: str = DEFAULT_BASE) -> Dict[str, float]:
        base = normalize_code(base)
        return await try_providers(
            [
                lambda: self._xhost.latest(base),
                lambda: self._frank.latest(base),
                lambda: self._erapi.latest(base),
            ],
            label=f"latest[{base}]",
        )

    async def convert(self, from_code: str, to_code: str, amount: float) -> float:
        f, t = normalize_code(from_code), normalize_code(to_code)
        if f == t:
            return amount

        async def via_latest() -> float:
            rates = await self.latest(f)
            if t not in rates:
                raise ProviderError("latest", f"missing rate for {t}")
            return amount * rates[t]

        return await try_providers(
            [
                lambda: self._xhost.convert(f, t, amount),
                lambda: self._frank.convert(f, t, amount),
                via_latest,
            ],
            label=f"convert[{f}->{t}]",
        )

    async def timeseries(
        self, base: str, quote: str, start: date, end: date
    ) -> List[TimeseriesPoint]:
        b, q = normalize_code(base), normalize_code(quote)
        if start > end:
            raise ValueError("timeseries start must not be after end")
        return await try_providers(
            [
                lambda: self._xhost.timeseries(b, q, start, end),
                lambda: self._frank.timeseries(b, q, start, end),
            ],
            label=f"timeseries[{b}/{q}]",
        )
