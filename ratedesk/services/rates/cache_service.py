from __future__ import annotations

from datetime import datetime, timedelta, timezone
import json
import logging
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from ratedesk.core.config import get_settings
from ratedesk.db.store import KeyValueStore
from ratedesk.models.constants import DEFAULT_BASE, normalize_code
from ratedesk.models.rates import CachedRecord
from ratedesk.models.watchlist import WatchItem

"""Persistent rate cache.

Purpose:
    Keep the last successful rate table on disk so a session without working
    providers can still show (and convert with) the most recent data.

Design:
    - Exactly one snapshot is stored under RATES_KEY; store() overwrites it.
    - Expiry is a read-time filter: read(check_expiry=True) hides a record
      older than max_age, but the bytes stay until the next store().
    - read(check_expiry=False) is the last-resort path: stale beats nothing.
    - The watchlist is saved as a whole list on every mutation.
    - Default base and banner preference live in the same key/value store.
"""

RATES_KEY = "cached_rates_v1"
WATCHLIST_KEY = "watchlist_v1"
DEFAULT_BASE_KEY = "default_base"
SHOW_BANNER_KEY = "show_offline_banner"

logger = logging.getLogger("ratedesk.cache")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RateCache:
    """Single-slot snapshot cache plus watchlist and preference accessors."""

    def __init__(
        self,
        store: KeyValueStore,
        max_age: Optional[timedelta] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if max_age is None:
            max_age = timedelta(hours=get_settings().rates_cache_max_age_hours)
        self._store = store
        self._max_age = max_age
        self._clock = clock

    # Snapshot -------------------------------------------------
    def store(self, base: str, rates: Dict[str, float]) -> CachedRecord:
        record = CachedRecord(base=base.upper(), timestamp=self._clock(), rates=dict(rates))
        payload = {
            "base": record.base,
            "timestamp": record.timestamp.isoformat(),
            "rates": record.rates,
        }
        self._store.set(RATES_KEY, json.dumps(payload, separators=(",", ":")))
        logger.debug("cached %d rates for base %s", len(record.rates), record.base)
        return record

    def _load(self) -> Optional[CachedRecord]:
        raw = self._store.get(RATES_KEY)
        if raw is None:
            return None
        try:
            record = CachedRecord.model_validate_json(raw)
        except ValidationError:
            logger.warning("ignoring unreadable cached rate snapshot")
            return None
        if record.timestamp.tzinfo is None:
            record = record.model_copy(
                update={"timestamp": record.timestamp.replace(tzinfo=timezone.utc)}
            )
        return record

    def is_expired(self, record: CachedRecord) -> bool:
        return self._clock() - record.timestamp > self._max_age

    def age_seconds(self, record: CachedRecord) -> float:
        return (self._clock() - record.timestamp).total_seconds()

    def read(self, check_expiry: bool = True) -> Optional[CachedRecord]:
        record = self._load()
        if record is None:
            return None
        if check_expiry and self.is_expired(record):
            return None
        return record

    def last_updated(self) -> Optional[datetime]:
        record = self._load()
        return record.timestamp if record else None

    # Watchlist ------------------------------------------------
    def read_watchlist(self) -> List[WatchItem]:
        raw = self._store.get(WATCHLIST_KEY)
        if not raw:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("watchlist is not a list")
            return [WatchItem.model_validate(e) for e in data]
        except (ValueError, TypeError) as e:  # ValidationError is a ValueError
            logger.warning("stored watchlist unreadable, treating as empty: %s", e)
            return []

    def save_watchlist(self, items: List[WatchItem]) -> None:
        self._store.set(
            WATCHLIST_KEY,
            json.dumps([i.model_dump() for i in items], separators=(",", ":")),
        )

    # Preferences ----------------------------------------------
    def get_default_base(self) -> str:
        val = self._store.get(DEFAULT_BASE_KEY)
        if not val:
            return DEFAULT_BASE
        try:
            return normalize_code(val)
        except ValueError:
            return DEFAULT_BASE

    def set_default_base(self, code: str) -> str:
        code = normalize_code(code)
        self._store.set(DEFAULT_BASE_KEY, code)
        return code

    def get_show_banner(self) -> bool:
        return self._store.get_bool(SHOW_BANNER_KEY, True)

    def set_show_banner(self, value: bool) -> None:
        self._store.set_bool(SHOW_BANNER_KEY, value)
