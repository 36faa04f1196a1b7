from __future__ import annotations
from datetime import date, datetime
from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RateSnapshot(BaseModel):
    """One fetched rate table tagged with its base currency and fetch time."""

    model_config = ConfigDict(frozen=True)

    base: str
    rates: Dict[str, float]
    fetched_at: datetime

    @field_validator("base")
    @classmethod
    def upper_base(cls, v: str) -> str:
        return v.upper()


class CachedRecord(BaseModel):
    """On-disk encoding of a snapshot: {"base", "timestamp", "rates"}."""

    base: str
    timestamp: datetime
    rates: Dict[str, float]

    def to_snapshot(self) -> RateSnapshot:
        return RateSnapshot(base=self.base, rates=self.rates, fetched_at=self.timestamp)


class LatestOutcome(BaseModel):
    snapshot: RateSnapshot
    status: Literal["live", "cached"]
    cache_age_seconds: Optional[float] = None


class TimeseriesPoint(BaseModel):
    day: date
    rate: float = Field(..., gt=0)
