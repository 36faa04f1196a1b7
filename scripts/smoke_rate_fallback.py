"""Smoke script for the provider chain and the disk cache.

Demonstrates against the real providers:
 1. latest(USD) through the fallback chain, stored in a temp cache.
 2. A cross conversion answered from that table without a network call.
 3. Forced provider outage (unreachable base URLs) falling back to the cached snapshot.

NOTE: This is a lightweight diagnostic and not a formal test.
"""

import asyncio
import os
import sys
import tempfile
from datetime import timedelta
from pathlib import Path
from pprint import pprint

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from ratedesk.core.config import Settings
from ratedesk.core.errors import OfflineError
from ratedesk.db.store import KeyValueStore
from ratedesk.services.desk import RateDesk
from ratedesk.services.http_client import make_client
from ratedesk.services.rate_service import RateService
from ratedesk.services.rates.cache_service import RateCache


async def run(d: str):
    out = {}
    store = KeyValueStore(Path(d) / "smoke.sqlite3")
    store.ensure_schema()
    cache = RateCache(store, max_age=timedelta(hours=24))

    live_settings = Settings(data_dir=Path(d), db_path=Path(d) / "smoke.sqlite3")
    async with make_client(live_settings.http_timeout_seconds) as client:
        desk = RateDesk(RateService(client, live_settings), cache)
        outcome = await desk.fetch_latest("USD")
        out["live"] = {
            "status": outcome.status,
            "rate_count": len(outcome.snapshot.rates),
            "PKR": outcome.snapshot.rates.get("PKR"),
        }
        conv = await desk.convert("EUR", "PKR", 10)
        out["convert"] = conv.model_dump()

    down = Settings(
        data_dir=Path(d),
        db_path=Path(d) / "smoke.sqlite3",
        xhost_base_url="http://127.0.0.1:9",
        frankfurter_base_url="http://127.0.0.1:9",
        erapi_base_url="http://127.0.0.1:9",
        http_timeout_seconds=2.0,
    )
    async with make_client(down.http_timeout_seconds) as client:
        desk = RateDesk(RateService(client, down), cache)
        try:
            outcome = await desk.fetch_latest("USD")
            out["outage"] = {
                "status": outcome.status,
                "cache_age_seconds": outcome.cache_age_seconds,
            }
        except OfflineError as e:
            out["outage"] = {"error": str(e)}

    pprint(out)


if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as d:
        asyncio.run(run(d))
