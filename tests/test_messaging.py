import asyncio

import httpx
import respx

from ratedesk.services.http_client import make_client
from ratedesk.services.messaging import init_messaging

PUSH_URL = "https://push.test/register"


def _run(settings):
    async def main():
        async with make_client(1.0) as client:
            return await init_messaging(settings, client)

    return asyncio.run(main())


def test_disabled_without_url(settings):
    assert _run(settings) is False


def test_registers_when_configured(settings):
    settings.push_registration_url = PUSH_URL
    with respx.mock() as router:
        route = router.post(PUSH_URL).mock(return_value=httpx.Response(204))
        assert _run(settings) is True
    assert route.call_count == 1


def test_failures_are_swallowed(settings):
    settings.push_registration_url = PUSH_URL
    with respx.mock() as router:
        router.post(PUSH_URL).mock(side_effect=httpx.ConnectError("no push backend"))
        assert _run(settings) is False
    with respx.mock() as router:
        router.post(PUSH_URL).mock(return_value=httpx.Response(500))
        assert _run(settings) is False
