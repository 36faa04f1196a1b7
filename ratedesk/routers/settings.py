from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ratedesk.services.desk import RateDesk
from .deps import get_desk

router = APIRouter(prefix="/settings", tags=["settings"])


class SettingsOut(BaseModel):
    default_base: str
    show_banner: bool


class SettingsIn(BaseModel):
    default_base: Optional[str] = None
    show_banner: Optional[bool] = None


def _current(desk: RateDesk) -> SettingsOut:
    return SettingsOut(
        default_base=desk.cache.get_default_base(),
        show_banner=desk.cache.get_show_banner(),
    )


@router.get("", response_model=SettingsOut, summary="Read preferences")
async def read_settings(desk: RateDesk = Depends(get_desk)):
    return _current(desk)


@router.put("", response_model=SettingsOut, summary="Update preferences")
async def update_settings(payload: SettingsIn, desk: RateDesk = Depends(get_desk)):
    if payload.default_base is not None:
        desk.cache.set_default_base(payload.default_base)
    if payload.show_banner is not None:
        desk.cache.set_show_banner(payload.show_banner)
    return _current(desk)
