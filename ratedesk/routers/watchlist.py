from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ratedesk.models.watchlist import WatchItem
from ratedesk.services.desk import RateDesk
from .deps import get_desk

router = APIRouter(prefix="/watchlist", tags=["watchlist"])


class WatchItemIn(BaseModel):
    base: str = Field(..., description="Base currency, e.g. USD")
    quote: str = Field(..., description="Quote currency, e.g. PKR")
    target: Optional[float] = Field(
        None, description="Alert when rate >= target; omit or <= 0 for no alert"
    )


class FiredAlertOut(BaseModel):
    base: str
    quote: str
    target: float
    rate: float
    message: str


class CheckOut(BaseModel):
    alerts: List[FiredAlertOut]
    message: str


@router.get("", response_model=List[WatchItem], summary="List watched pairs")
async def list_items(desk: RateDesk = Depends(get_desk)):
    return desk.list_watch_items()


@router.post(
    "", response_model=List[WatchItem], status_code=201, summary="Add a watched pair"
)
async def add_item(payload: WatchItemIn, desk: RateDesk = Depends(get_desk)):
    return desk.add_watch_item(payload.base, payload.quote, payload.target)


@router.delete(
    "/{index}", response_model=List[WatchItem], summary="Remove a watched pair"
)
async def remove_item(index: int, desk: RateDesk = Depends(get_desk)):
    try:
        return desk.remove_watch_item(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.post("/check", response_model=CheckOut, summary="Check targets against live rates")
async def check_now(desk: RateDesk = Depends(get_desk)):
    fired = await desk.check_watchlist_now()
    alerts = [
        FiredAlertOut(
            base=f.item.base,
            quote=f.item.quote,
            target=f.item.target,
            rate=f.rate,
            message=f.message,
        )
        for f in fired
    ]
    return CheckOut(
        alerts=alerts, message="Alerts met." if alerts else "No alerts met."
    )
