from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from geolookup import (
    Coordinates,
    FetchStatusError,
    FetchTimeoutError,
    FetchTransportError,
    LookupSettings,
    MalformedResponseError,
    NominatimFetcher,
    ReverseGeocoder,
)

KEY = Coordinates(39.8283, -98.5795)


def run_async(coro):
    return asyncio.run(coro)


def make_fetcher(handler) -> tuple[NominatimFetcher, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return NominatimFetcher(LookupSettings(), client=client), client


def test_fetch_sends_reverse_query_and_returns_display_name():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"display_name": "Smith County, Kansas"})

    async def scenario() -> None:
        fetcher, client = make_fetcher(handler)
        assert await fetcher.fetch(KEY) == "Smith County, Kansas"
        await fetcher.aclose()
        assert not client.is_closed
        await client.aclose()

    run_async(scenario())

    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/reverse"
    assert request.url.host == "nominatim.openstreetmap.org"
    assert dict(request.url.params) == {
        "format": "json",
        "lat": "39.8283",
        "lon": "-98.5795",
        "zoom": "18",
        "addressdetails": "0",
    }
    assert request.headers["User-Agent"] == "map-picker/1.0"


@pytest.mark.parametrize("body", [{}, {"display_name": ""}, {"error": "Unable to geocode"}])
def test_missing_display_name_is_no_value_not_failure(body):
    async def scenario() -> None:
        fetcher, client = make_fetcher(lambda request: httpx.Response(200, json=body))
        assert await fetcher.fetch(KEY) is None
        await client.aclose()

    run_async(scenario())


def test_non_success_status_raises_status_error():
    async def scenario() -> None:
        fetcher, client = make_fetcher(lambda request: httpx.Response(429, text="slow down"))
        with pytest.raises(FetchStatusError) as exc_info:
            await fetcher.fetch(KEY)
        assert exc_info.value.status_code == 429
        assert exc_info.value.key == KEY
        await client.aclose()

    run_async(scenario())


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, content=b"<html>not json</html>"),
        httpx.Response(200, json=["not", "an", "object"]),
        httpx.Response(200, json={"display_name": 42}),
    ],
)
def test_malformed_body_raises(response):
    async def scenario() -> None:
        fetcher, client = make_fetcher(lambda request: response)
        with pytest.raises(MalformedResponseError):
            await fetcher.fetch(KEY)
        await client.aclose()

    run_async(scenario())


def test_transport_errors_are_mapped():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    def stall(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    async def scenario() -> None:
        fetcher, client = make_fetcher(refuse)
        with pytest.raises(FetchTransportError):
            await fetcher.fetch(KEY)
        await client.aclose()

        fetcher, client = make_fetcher(stall)
        with pytest.raises(FetchTimeoutError):
            await fetcher.fetch(KEY)
        await client.aclose()

    run_async(scenario())


def test_reverse_geocoder_end_to_end_over_mock_transport():
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url.params["lat"]))
        return httpx.Response(200, json={"display_name": "Smith County, Kansas"})

    async def scenario() -> None:
        fetcher, client = make_fetcher(handler)
        async with ReverseGeocoder(
            LookupSettings(quiet_window_s=0.01), fetcher=fetcher
        ) as geocoder:
            assert await geocoder.get_address(39.8283, -98.5795) == "Smith County, Kansas"
            assert await geocoder.get_address(39.8283, -98.5795) == "Smith County, Kansas"
            assert geocoder.get_stats()["fetch_count"] == 1
        await client.aclose()

    run_async(scenario())
    assert calls == ["39.8283"]


def test_malformed_body_is_logged_as_warning(caplog):
    async def scenario() -> None:
        fetcher, client = make_fetcher(lambda request: httpx.Response(200, json=[1, 2]))
        with pytest.raises(MalformedResponseError):
            await fetcher.fetch(KEY)
        await client.aclose()

    with caplog.at_level(logging.WARNING, logger="geolookup.fetchers.nominatim"):
        run_async(scenario())

    assert any(
        record.levelno == logging.WARNING and "instead of an object" in record.getMessage()
        for record in caplog.records
    )
