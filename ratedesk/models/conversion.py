from __future__ import annotations
from typing import Literal

from pydantic import BaseModel

ConversionSource = Literal["identity", "cached", "live"]


class ConversionResult(BaseModel):
    from_currency: str
    to_currency: str
    amount: float
    result: float
    source: ConversionSource
