from __future__ import annotations

"""Concrete HTTP rate providers.

Each provider owns its request shape and response envelope:
  - exchangerate.host: latest, convert (numeric 'result'), timeseries
  - frankfurter.app: latest, convert via latest?to=, date-range series
  - open.er-api.com: latest only, wrapped in a {"result": "success"} envelope
"""
from datetime import date
from typing import Any, Dict, List, Mapping

import httpx

from ratedesk.core.config import Settings
from ratedesk.core.errors import ProviderError
from ratedesk.models.rates import TimeseriesPoint
from ratedesk.services.http_client import get_json
from .base import DATE_FMT, RateProvider, coerce_rate, extract_rates, flatten_series


class ExchangeRateHostProvider(RateProvider):
    name = "exchangerate.host"

    async def latest(self, base: str) -> Dict[str, float]:
        body = await get_json(
            self._client, self.name, f"{self.base_url}/latest", params={"base": base}
        )
        return extract_rates(self.name, body)

    async def convert(self, from_code: str, to_code: str, amount: float) -> float:
        body = await get_json(
            self._client,
            self.name,
            f"{self.base_url}/convert",
            params={"from": from_code, "to": to_code, "amount": amount},
        )
        result = coerce_rate(body.get("result"))
        if result is None:
            raise ProviderError(self.name, "convert response has no numeric 'result'")
        return result

    async def timeseries(
        self, base: str, quote: str, start: date, end: date
    ) -> List[TimeseriesPoint]:
        body = await get_json(
            self._client,
            self.name,
            f"{self.base_url}/timeseries",
            params={
                "base": base,
                "symbols": quote,
                "start_date": start.strftime(DATE_FMT),
                "end_date": end.strftime(DATE_FMT),
            },
        )
        return flatten_series(self.name, body, quote)


class FrankfurterProvider(RateProvider):
    name = "frankfurter.app"

    async def latest(self, base: str) -> Dict[str, float]:
        body = await get_json(
            self._client, self.name, f"{self.base_url}/latest", params={"from": base}
        )
        return extract_rates(self.name, body)

    async def convert(self, from_code: str, to_code: str, amount: float) -> float:
        # With amount= the returned rates are already multiplied out.
        body = await get_json(
            self._client,
            self.name,
            f"{self.base_url}/latest",
            params={"amount": amount, "from": from_code, "to": to_code},
        )
        rates = extract_rates(self.name, body)
        if to_code not in rates:
            raise ProviderError(self.name, f"missing rate for {to_code}")
        return rates[to_code]

    async def timeseries(
        self, base: str, quote: str, start: date, end: date
    ) -> List[TimeseriesPoint]:
        window = f"{start.strftime(DATE_FMT)}..{end.strftime(DATE_FMT)}"
        body = await get_json(
            self._client,
            self.name,
            f"{self.base_url}/{window}",
            params={"from": base, "to": quote},
        )
        return flatten_series(self.name, body, quote)


class OpenErApiProvider(RateProvider):
    name = "open.er-api.com"

    def _check_envelope(self, body: Mapping[str, Any]) -> None:
        if body.get("result") != "success":
            raise ProviderError(
                self.name, f"result status {body.get('result')!r} is not success"
            )

    async def latest(self, base: str) -> Dict[str, float]:
        body = await get_json(self._client, self.name, f"{self.base_url}/latest/{base}")
        self._check_envelope(body)
        return extract_rates(self.name, body)


def make_providers(
    client: httpx.AsyncClient, settings: Settings
) -> tuple[ExchangeRateHostProvider, FrankfurterProvider, OpenErApiProvider]:
    return (
        ExchangeRateHostProvider(client, settings.xhost_base_url),
        FrankfurterProvider(client, settings.frankfurter_base_url),
        OpenErApiProvider(client, settings.erapi_base_url),
    )
