from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from ratedesk.models.constants import DEFAULT_BASE
from ratedesk.models.rates import CachedRecord


@dataclass
class RateSession:
    """Last successful rate table held by one desk, discarded on restart."""

    last_base: str = DEFAULT_BASE
    last_rates: Dict[str, float] = field(default_factory=dict)

    def remember(self, base: str, rates: Dict[str, float]) -> None:
        self.last_base = base.upper()
        self.last_rates = dict(rates)

    def remember_record(self, record: CachedRecord) -> None:
        self.remember(record.base or DEFAULT_BASE, record.rates)
