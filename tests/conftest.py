from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List

import pytest

from ratedesk.core.config import Settings
from ratedesk.core.errors import AllProvidersFailed
from ratedesk.db.store import KeyValueStore
from ratedesk.services.http_client import make_client
from ratedesk.services.rate_service import RateService
from ratedesk.services.rates.cache_service import RateCache

XHOST = "https://xhost.test"
FRANK = "https://frank.test"
ERAPI = "https://erapi.test/v6"

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeRateService:
    """Stands in for RateService; records calls and replays canned answers."""

    def __init__(self, latest: Dict[str, float] | None = None, convert: float | None = None):
        self.latest_rates = latest
        self.convert_result = convert
        self.calls: List[tuple] = []

    async def latest(self, base: str = "USD") -> Dict[str, float]:
        self.calls.append(("latest", base))
        if self.latest_rates is None:
            raise AllProvidersFailed(f"latest[{base}]", RuntimeError("down"))
        return dict(self.latest_rates)

    async def convert(self, from_code: str, to_code: str, amount: float) -> float:
        self.calls.append(("convert", from_code, to_code, amount))
        if self.convert_result is None:
            raise AllProvidersFailed("convert", RuntimeError("down"))
        return self.convert_result

    async def timeseries(self, base, quote, start, end):  # type: ignore[no-untyped-def]
        self.calls.append(("timeseries", base, quote, start, end))
        raise AllProvidersFailed("timeseries", RuntimeError("down"))


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    s = Settings(
        debug=False,
        data_dir=tmp_path,
        db_path=tmp_path / "test.sqlite3",
        xhost_base_url=XHOST,
        frankfurter_base_url=FRANK,
        erapi_base_url=ERAPI,
        http_timeout_seconds=2.0,
    )
    s.init_post_load()
    return s


@pytest.fixture
def store(settings: Settings) -> KeyValueStore:
    kv = KeyValueStore(settings.db_path)  # type: ignore[arg-type]
    kv.ensure_schema()
    return kv


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(store: KeyValueStore, clock: FakeClock) -> RateCache:
    return RateCache(store, max_age=timedelta(hours=24), clock=clock)


@pytest.fixture
def with_service(settings: Settings) -> Callable[[Callable[[RateService], Awaitable[Any]]], Any]:
    """Run fn(service) on a fresh event loop with a fresh AsyncClient."""

    def runner(fn: Callable[[RateService], Awaitable[Any]]) -> Any:
        async def main() -> Any:
            async with make_client(settings.http_timeout_seconds) as client:
                return await fn(RateService(client, settings))

        return asyncio.run(main())

    return runner
