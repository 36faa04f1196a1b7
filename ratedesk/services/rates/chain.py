from __future__ import annotations

"""Sequential provider fallback.

try_providers() runs attempts strictly in order and returns the first
success. Attempts after a success are never invoked; nothing is retried and
nothing runs in parallel. When every attempt fails the last error is kept
as the cause of AllProvidersFailed, earlier ones are only logged.
"""
import logging
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from ratedesk.core.errors import AllProvidersFailed

T = TypeVar("T")
Attempt = Callable[[], Awaitable[T]]

logger = logging.getLogger("ratedesk.providers")


async def try_providers(attempts: Sequence[Attempt[T]], label: str = "operation") -> T:
    last_err: Optional[Exception] = None
    for idx, attempt in enumerate(attempts, start=1):
        try:
            return await attempt()
        except Exception as e:  # any attempt failure moves on to the next one
            last_err = e
            logger.warning(
                "%s attempt %d/%d failed: %s",
                label,
                idx,
                len(attempts),
                e,
                extra={
                    "operation": label,
                    "attempt": idx,
                    "provider": getattr(e, "provider", "-"),
                },
            )
    raise AllProvidersFailed(label, last_err) from last_err
