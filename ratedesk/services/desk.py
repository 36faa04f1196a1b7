"""Rate desk: the operations a presentation layer calls.

Ties together the provider-backed RateService, the persistent RateCache and
the session's last rate table:

  - fetch_latest: live table, else cached snapshot (any age), else OfflineError
  - convert: cached/cross path first, network last
  - load_timeseries: ordered (day, rate) points
  - watchlist add/remove/list and check_watchlist_now

Currency codes are validated before any network or cache access.
"""

from __future__ import annotations
from datetime import date, timedelta
import logging
import math
from typing import List, Optional

from ratedesk.core.errors import AllProvidersFailed, OfflineError
from ratedesk.models.constants import TIMESERIES_RANGES_DAYS, USD, normalize_code
from ratedesk.models.conversion import ConversionResult
from ratedesk.models.rates import LatestOutcome, TimeseriesPoint
from ratedesk.models.watchlist import NO_TARGET, FiredAlert, WatchItem
from ratedesk.services.alerts import evaluate_watchlist
from ratedesk.services.rate_service import RateService
from ratedesk.services.rates.cache_service import RateCache
from ratedesk.services.rates.conversion import plan_conversion
from ratedesk.services.rates.session import RateSession

logger = logging.getLogger("ratedesk.desk")


class RateDesk:
    def __init__(
        self,
        rate_service: RateService,
        cache: RateCache,
        session: Optional[RateSession] = None,
    ):
        self.rates = rate_service
        self.cache = cache
        self.session = session or RateSession()

    def restore_session(self) -> bool:
        """Seed the session from the stored snapshot, ignoring its age."""
        record = self.cache.read(check_expiry=False)
        if record is None:
            return False
        self.session.remember_record(record)
        return True

    # Latest -----------------------------------------------------
    async def fetch_latest(self, base: Optional[str] = None) -> LatestOutcome:
        base = normalize_code(base) if base else self.cache.get_default_base()
        try:
            rates = await self.rates.latest(base)
        except AllProvidersFailed as e:
            logger.warning("live rates unavailable for %s: %s", base, e)
            record = self.cache.read(check_expiry=False)
            if record is None:
                raise OfflineError("no providers and no cached snapshot") from e
            self.session.remember_record(record)
            age = self.cache.age_seconds(record)
            logger.info(
                "serving cached %s snapshot from %s", record.base, record.timestamp
            )
            return LatestOutcome(
                snapshot=record.to_snapshot(), status="cached", cache_age_seconds=age
            )
        self.session.remember(base, rates)
        record = self.cache.store(base, rates)
        return LatestOutcome(snapshot=record.to_snapshot(), status="live")

    # Convert ----------------------------------------------------
    async def convert(
        self, from_code: str, to_code: str, amount: float
    ) -> ConversionResult:
        f, t = normalize_code(from_code), normalize_code(to_code)
        if not math.isfinite(amount) or amount <= 0:
            raise ValueError("Enter a valid amount")
        return await plan_conversion(f, t, amount, self.session, self.rates)

    # Timeseries -------------------------------------------------
    async def load_timeseries(
        self,
        base: str,
        quote: str,
        start: date,
        end: date,
    ) -> List[TimeseriesPoint]:
        return await self.rates.timeseries(base, quote, start, end)

    async def load_timeseries_range(
        self, base: str, quote: str, days: int, today: Optional[date] = None
    ) -> List[TimeseriesPoint]:
        if days not in TIMESERIES_RANGES_DAYS:
            raise ValueError(f"range must be one of {TIMESERIES_RANGES_DAYS}")
        end = today or date.today()
        return await self.load_timeseries(base, quote, end - timedelta(days=days), end)

    # Watchlist --------------------------------------------------
    def list_watch_items(self) -> List[WatchItem]:
        return self.cache.read_watchlist()

    def add_watch_item(
        self, base: str, quote: str, target: Optional[float] = None
    ) -> List[WatchItem]:
        item = WatchItem(
            base=normalize_code(base),
            quote=normalize_code(quote),
            target=NO_TARGET if target is None else target,
        )
        items = self.cache.read_watchlist()
        items.append(item)
        self.cache.save_watchlist(items)
        return items

    def remove_watch_item(self, index: int) -> List[WatchItem]:
        items = self.cache.read_watchlist()
        if not 0 <= index < len(items):
            raise IndexError(f"no watch item at position {index}")
        items.pop(index)
        self.cache.save_watchlist(items)
        return items

    async def check_watchlist_now(self) -> List[FiredAlert]:
        table = await self.rates.latest(USD)
        return evaluate_watchlist(table, self.cache.read_watchlist())
