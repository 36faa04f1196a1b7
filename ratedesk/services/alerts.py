"""Watchlist target evaluation.

Given a USD-based rate table, `evaluate_watchlist` reports every watch item
whose current rate has reached its target (inclusive, upward only). Items
without a target, or whose rate cannot be derived from the table, are
skipped. Nothing is mutated; alerts are not acknowledged or cleared.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional

from ratedesk.models.constants import USD
from ratedesk.models.watchlist import FiredAlert, WatchItem


def pair_rate(table: Dict[str, float], base: str, quote: str) -> Optional[float]:
    if base == USD:
        return table.get(quote)
    usd_to_base = table.get(base)
    usd_to_quote = table.get(quote)
    if not usd_to_base or usd_to_quote is None:
        return None
    return (1 / usd_to_base) * usd_to_quote


def evaluate_watchlist(
    table: Dict[str, float], items: Iterable[WatchItem]
) -> List[FiredAlert]:
    fired: List[FiredAlert] = []
    for item in items:
        if not item.has_target:
            continue
        rate = pair_rate(table, item.base, item.quote)
        if rate is None:
            continue
        if rate >= item.target:
            fired.append(FiredAlert(item=item, rate=rate))
    return fired


__all__ = ["evaluate_watchlist", "pair_rate"]
