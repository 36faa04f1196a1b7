from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ratedesk.core.errors import InvalidCurrencyCode
from ratedesk.models.constants import CURRENCY_NAMES, TIMESERIES_RANGES_DAYS, name_of
from ratedesk.models.conversion import ConversionResult
from ratedesk.models.rates import TimeseriesPoint
from ratedesk.services.desk import RateDesk
from .deps import get_desk

"""Rates router.

Endpoints:
    - GET /currencies            -> supported ISO codes with display names
    - GET /rates/latest          -> live table, or cached snapshot with its age
    - GET /rates/convert         -> tagged conversion (identity/cached/live)
    - GET /rates/timeseries      -> ordered (day, rate) points for a pair
    - GET /rates/cache           -> stored snapshot metadata

Offline / provider failures are rendered by the app-level error handlers.
"""

router = APIRouter(tags=["rates"])


class LatestOut(BaseModel):
    base: str
    rates: Dict[str, float]
    fetched_at: datetime
    status: Literal["live", "cached"]
    cache_age_seconds: Optional[float] = None
    message: str


class TimeseriesOut(BaseModel):
    base: str
    quote: str
    days: int
    points: List[TimeseriesPoint]


class CacheStatusOut(BaseModel):
    base: Optional[str] = None
    last_updated: Optional[datetime] = None
    expired: Optional[bool] = None
    rate_count: int = 0


@router.get("/currencies", summary="List supported currency codes")
async def list_currencies() -> Dict[str, str]:
    return {code: name_of(code) for code in CURRENCY_NAMES}


@router.get("/rates/latest", response_model=LatestOut, summary="Latest rates for a base")
async def latest(
    base: Optional[str] = Query(None, description="Base currency (defaults to saved default)"),
    desk: RateDesk = Depends(get_desk),
):
    outcome = await desk.fetch_latest(base)
    snap = outcome.snapshot
    if outcome.status == "live":
        message = "Live rates updated"
    else:
        message = f"Service unavailable • cached from {snap.fetched_at.isoformat()}"
    return LatestOut(
        base=snap.base,
        rates=snap.rates,
        fetched_at=snap.fetched_at,
        status=outcome.status,
        cache_age_seconds=outcome.cache_age_seconds,
        message=message,
    )


@router.get(
    "/rates/convert", response_model=ConversionResult, summary="Convert an amount"
)
async def convert(
    from_: str = Query(..., alias="from"),
    to: str = Query(...),
    amount: float = Query(..., gt=0, allow_inf_nan=False),
    desk: RateDesk = Depends(get_desk),
):
    try:
        return await desk.convert(from_, to, amount)
    except InvalidCurrencyCode:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get(
    "/rates/timeseries", response_model=TimeseriesOut, summary="Daily rates for a pair"
)
async def timeseries(
    base: str = Query(...),
    quote: str = Query(...),
    days: int = Query(30, description=f"One of {TIMESERIES_RANGES_DAYS}"),
    desk: RateDesk = Depends(get_desk),
):
    try:
        points = await desk.load_timeseries_range(base, quote, days)
    except InvalidCurrencyCode:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return TimeseriesOut(
        base=base.strip().upper(), quote=quote.strip().upper(), days=days, points=points
    )


@router.get("/rates/cache", response_model=CacheStatusOut, summary="Cached snapshot status")
async def cache_status(desk: RateDesk = Depends(get_desk)):
    record = desk.cache.read(check_expiry=False)
    if record is None:
        return CacheStatusOut()
    return CacheStatusOut(
        base=record.base,
        last_updated=record.timestamp,
        expired=desk.cache.is_expired(record),
        rate_count=len(record.rates),
    )
