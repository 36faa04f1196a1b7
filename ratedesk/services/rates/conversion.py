from __future__ import annotations

import logging
from typing import Dict, Protocol

from ratedesk.core.errors import AllProvidersFailed, ConversionFailed
from ratedesk.models.constants import USD
from ratedesk.models.conversion import ConversionResult
from .session import RateSession

"""Conversion planning.

Picks the cheapest correct way to answer (from, to, amount):
    1. identity when from == to
    2. direct hit: from is the session's last base and the table has `to`
    3. cross via USD: last base is USD and the table has both codes
    4. network convert through the provider chain

A zero USD rate for `from` skips step 3 instead of dividing by it.
"""

logger = logging.getLogger("ratedesk.conversion")


class SupportsConvert(Protocol):
    async def convert(self, from_code: str, to_code: str, amount: float) -> float: ...


def cached_conversion(
    from_code: str,
    to_code: str,
    amount: float,
    last_base: str,
    last_rates: Dict[str, float],
) -> float | None:
    """Return the converted amount from cached data, or None when not derivable."""
    if from_code == last_base:
        rate = last_rates.get(to_code)
        if rate is not None:
            return amount * rate
    if last_base == USD:
        usd_to_to = last_rates.get(to_code)
        usd_to_from = last_rates.get(from_code)
        if usd_to_to is not None and usd_to_from:
            return amount * (usd_to_to / usd_to_from)
    return None


async def plan_conversion(
    from_code: str,
    to_code: str,
    amount: float,
    session: RateSession,
    rate_service: SupportsConvert,
) -> ConversionResult:
    if from_code == to_code:
        return ConversionResult(
            from_currency=from_code,
            to_currency=to_code,
            amount=amount,
            result=amount,
            source="identity",
        )
    cached = cached_conversion(
        from_code, to_code, amount, session.last_base, session.last_rates
    )
    if cached is not None:
        return ConversionResult(
            from_currency=from_code,
            to_currency=to_code,
            amount=amount,
            result=cached,
            source="cached",
        )
    logger.debug("no cached path for %s->%s, converting live", from_code, to_code)
    try:
        live = await rate_service.convert(from_code, to_code, amount)
    except AllProvidersFailed as e:
        raise ConversionFailed(
            f"conversion {from_code}->{to_code} failed (no providers & no cache)"
        ) from e
    return ConversionResult(
        from_currency=from_code,
        to_currency=to_code,
        amount=amount,
        result=live,
        source="live",
    )
