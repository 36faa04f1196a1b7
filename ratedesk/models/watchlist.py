from __future__ import annotations
from pydantic import BaseModel, field_validator

from .constants import normalize_code

NO_TARGET = -1.0


class WatchItem(BaseModel):
    base: str
    quote: str
    target: float = NO_TARGET  # <= 0 means no alert configured

    @field_validator("base", "quote")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        return normalize_code(v)

    @field_validator("target", mode="before")
    @classmethod
    def target_or_sentinel(cls, v):  # type: ignore[no-untyped-def]
        if v is None:
            return NO_TARGET
        return v

    @field_validator("target")
    @classmethod
    def collapse_disabled_target(cls, v: float) -> float:
        return v if v > 0 else NO_TARGET

    @property
    def has_target(self) -> bool:
        return self.target > 0


class FiredAlert(BaseModel):
    item: WatchItem
    rate: float

    @property
    def message(self) -> str:
        it = self.item
        return f"{it.base}/{it.quote} ≥ {it.target} (now {self.rate:.4f})"
