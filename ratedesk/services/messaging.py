"""Optional push-registration hook.

Called once at startup and never awaited by the rate layer. When
`push_registration_url` is unset it does nothing; every failure is logged
and swallowed so a missing or broken push backend cannot affect rates.
"""

from __future__ import annotations
import logging

import httpx

from ratedesk.core.config import Settings

logger = logging.getLogger("ratedesk.messaging")


async def init_messaging(settings: Settings, client: httpx.AsyncClient) -> bool:
    url = settings.push_registration_url
    if not url:
        return False
    try:
        resp = await client.post(
            url,
            json={"app": settings.app_name, "version": settings.version},
        )
        resp.raise_for_status()
    except Exception as e:  # not configured / unreachable: ignore
        logger.debug("push registration skipped: %s", e)
        return False
    logger.info("push registration completed")
    return True
