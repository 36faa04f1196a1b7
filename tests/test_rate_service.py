from datetime import date

import httpx
import pytest
import respx

from conftest import ERAPI, FRANK, XHOST
from ratedesk.core.errors import AllProvidersFailed, InvalidCurrencyCode


@pytest.fixture
def api_mock():
    with respx.mock(assert_all_called=False) as router:
        yield router


# latest --------------------------------------------------------------------


def test_latest_uses_first_provider(api_mock, with_service):
    first = api_mock.get(f"{XHOST}/latest").mock(
        return_value=httpx.Response(200, json={"base": "USD", "rates": {"PKR": 280, "EUR": 0.92}})
    )
    second = api_mock.get(f"{FRANK}/latest")

    rates = with_service(lambda svc: svc.latest("usd"))

    assert rates == {"PKR": 280.0, "EUR": 0.92}
    assert first.calls.last.request.url.params["base"] == "USD"
    assert not second.called


def test_latest_falls_back_through_providers(api_mock, with_service):
    api_mock.get(f"{XHOST}/latest").mock(return_value=httpx.Response(500))
    frank = api_mock.get(f"{FRANK}/latest").mock(
        return_value=httpx.Response(200, json={"amount": 1.0, "base": "EUR"})
    )
    erapi = api_mock.get(f"{ERAPI}/latest/EUR").mock(
        return_value=httpx.Response(
            200, json={"result": "success", "base_code": "EUR", "rates": {"USD": 1.08}}
        )
    )

    rates = with_service(lambda svc: svc.latest("EUR"))

    assert rates == {"USD": 1.08}
    assert frank.calls.last.request.url.params["from"] == "EUR"
    assert erapi.call_count == 1


def test_latest_rejects_unsuccessful_envelope(api_mock, with_service):
    api_mock.get(f"{XHOST}/latest").mock(return_value=httpx.Response(200, text="<html>"))
    api_mock.get(f"{FRANK}/latest").mock(return_value=httpx.Response(200, json=["not", "object"]))
    api_mock.get(f"{ERAPI}/latest/USD").mock(
        return_value=httpx.Response(
            200, json={"result": "error", "rates": {"PKR": 280.0}}
        )
    )

    with pytest.raises(AllProvidersFailed):
        with_service(lambda svc: svc.latest("USD"))


def test_latest_transport_errors_fall_through(api_mock, with_service):
    api_mock.get(f"{XHOST}/latest").mock(side_effect=httpx.ConnectTimeout("slow"))
    api_mock.get(f"{FRANK}/latest").mock(side_effect=httpx.ConnectError("down"))
    api_mock.get(f"{ERAPI}/latest/USD").mock(
        return_value=httpx.Response(200, json={"result": "success", "rates": {"PKR": 281.5}})
    )

    assert with_service(lambda svc: svc.latest("USD")) == {"PKR": 281.5}


def test_latest_drops_invalid_entries(api_mock, with_service):
    api_mock.get(f"{XHOST}/latest").mock(
        return_value=httpx.Response(
            200,
            json={
                "rates": {
                    "pkr": "280.5",
                    "EUR": 0.92,
                    "BAD": "n/a",
                    "ZERO": 0,
                    "NEG": -3,
                    "NIL": None,
                    "FLAG": True,
                }
            },
        )
    )

    rates = with_service(lambda svc: svc.latest("USD"))

    assert rates == {"PKR": 280.5, "EUR": 0.92}


def test_latest_missing_rates_field_fails_attempt(api_mock, with_service):
    api_mock.get(f"{XHOST}/latest").mock(return_value=httpx.Response(200, json={"success": False}))
    api_mock.get(f"{FRANK}/latest").mock(
        return_value=httpx.Response(200, json={"rates": {"GBP": 0.79}})
    )

    assert with_service(lambda svc: svc.latest("USD")) == {"GBP": 0.79}


def test_invalid_code_never_hits_network(api_mock, with_service):
    route = api_mock.get(f"{XHOST}/latest")
    with pytest.raises(InvalidCurrencyCode):
        with_service(lambda svc: svc.latest("XYZ"))
    assert not route.called


# convert -------------------------------------------------------------------


def test_convert_identity_skips_network(api_mock, with_service):
    route = api_mock.get(f"{XHOST}/convert")
    assert with_service(lambda svc: svc.convert("eur", "EUR", 12.5)) == 12.5
    assert not route.called


def test_convert_direct_endpoint(api_mock, with_service):
    route = api_mock.get(f"{XHOST}/convert").mock(
        return_value=httpx.Response(200, json={"result": 2800.0})
    )

    assert with_service(lambda svc: svc.convert("usd", "pkr", 10)) == 2800.0
    params = route.calls.last.request.url.params
    assert (params["from"], params["to"]) == ("USD", "PKR")


def test_convert_frankfurter_fallback(api_mock, with_service):
    api_mock.get(f"{XHOST}/convert").mock(return_value=httpx.Response(200, json={"result": None}))
    route = api_mock.get(f"{FRANK}/latest").mock(
        return_value=httpx.Response(200, json={"amount": 10, "rates": {"GBP": 8.5}})
    )

    assert with_service(lambda svc: svc.convert("EUR", "GBP", 10)) == 8.5
    params = route.calls.last.request.url.params
    assert (params["from"], params["to"]) == ("EUR", "GBP")


def test_convert_falls_back_to_latest(api_mock, with_service):
    api_mock.get(f"{XHOST}/convert").mock(return_value=httpx.Response(503))
    # frankfurter /latest fails both for convert and for the inner latest()
    api_mock.get(f"{FRANK}/latest").mock(return_value=httpx.Response(404))
    api_mock.get(f"{XHOST}/latest").mock(return_value=httpx.Response(503))
    api_mock.get(f"{ERAPI}/latest/USD").mock(
        return_value=httpx.Response(200, json={"result": "success", "rates": {"PKR": 280.0}})
    )

    assert with_service(lambda svc: svc.convert("USD", "PKR", 2)) == pytest.approx(560.0)


def test_convert_all_failing(api_mock, with_service):
    api_mock.get(f"{XHOST}/convert").mock(return_value=httpx.Response(503))
    api_mock.get(f"{FRANK}/latest").mock(return_value=httpx.Response(503))
    api_mock.get(f"{XHOST}/latest").mock(return_value=httpx.Response(503))
    api_mock.get(f"{ERAPI}/latest/USD").mock(
        return_value=httpx.Response(200, json={"result": "success", "rates": {"EUR": 0.9}})
    )

    with pytest.raises(AllProvidersFailed):
        with_service(lambda svc: svc.convert("USD", "PKR", 2))


# timeseries ----------------------------------------------------------------


def test_timeseries_flattens_and_sorts(api_mock, with_service):
    route = api_mock.get(f"{XHOST}/timeseries").mock(
        return_value=httpx.Response(
            200,
            json={
                "rates": {
                    "2024-01-03": {"PKR": 281.0},
                    "2024-01-01": {"PKR": 279.5},
                    "2024-01-02": {"PKR": 280.25, "EUR": 0.91},
                    "2024-01-04": {"EUR": 0.9},
                }
            },
        )
    )

    points = with_service(
        lambda svc: svc.timeseries("usd", "pkr", date(2024, 1, 1), date(2024, 1, 4))
    )

    assert [(p.day, p.rate) for p in points] == [
        (date(2024, 1, 1), 279.5),
        (date(2024, 1, 2), 280.25),
        (date(2024, 1, 3), 281.0),
    ]
    params = route.calls.last.request.url.params
    assert params["start_date"] == "2024-01-01"
    assert params["end_date"] == "2024-01-04"
    assert params["symbols"] == "PKR"


def test_timeseries_frankfurter_window_path(api_mock, with_service):
    api_mock.get(f"{XHOST}/timeseries").mock(return_value=httpx.Response(200, json={"rates": {}}))
    route = api_mock.get(f"{FRANK}/2024-02-01..2024-02-02").mock(
        return_value=httpx.Response(
            200,
            json={"rates": {"2024-02-02": {"GBP": 0.86}, "2024-02-01": {"GBP": 0.85}}},
        )
    )

    points = with_service(
        lambda svc: svc.timeseries("EUR", "GBP", date(2024, 2, 1), date(2024, 2, 2))
    )

    assert [p.rate for p in points] == [0.85, 0.86]
    assert route.calls.last.request.url.params["to"] == "GBP"


def test_timeseries_rejects_inverted_window(with_service):
    with pytest.raises(ValueError):
        with_service(
            lambda svc: svc.timeseries("USD", "PKR", date(2024, 2, 2), date(2024, 2, 1))
        )
