from __future__ import annotations

"""Async HTTP helper for rate providers.

One GET per call, no retries: the provider chain decides what happens after
a failure. Every failure mode (transport error, timeout, non-2xx status,
undecodable or non-object JSON) becomes a ProviderError tagged with the
provider name.
"""
from typing import Any, Dict, Mapping, Optional

import httpx

from ratedesk.core.errors import ProviderError


def make_client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout), follow_redirects=True)


async def get_json(
    client: httpx.AsyncClient,
    provider: str,
    url: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    try:
        resp = await client.get(url, params=params)
    except httpx.HTTPError as e:  # covers timeouts and connection errors
        raise ProviderError(provider, f"request failed: {e!r}") from e
    if not resp.is_success:
        raise ProviderError(provider, f"HTTP {resp.status_code} for {resp.url}")
    try:
        body = resp.json()
    except ValueError as e:
        raise ProviderError(provider, "body is not valid JSON") from e
    if not isinstance(body, dict):
        raise ProviderError(provider, "body is not a JSON object")
    return body
