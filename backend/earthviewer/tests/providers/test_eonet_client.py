from __future__ import annotations

import asyncio
from datetime import date

import httpx
import pytest

from earthviewer.domain.models import FilterState
from earthviewer.providers.cancellation import CancellationToken, FetchCancelled
from earthviewer.providers.eonet.base import FeedParseError, FeedTransportError
from earthviewer.providers.eonet.client import EonetClient

BASE = "https://eonet.test/api/v3"


def _state(category_id=None) -> FilterState:
    return FilterState(date_start=date(2024, 1, 1), date_end=date(2024, 1, 31), category_id=category_id)


def _run(handler, call):
    async def scenario():
        client = EonetClient(BASE, transport=httpx.MockTransport(handler))
        try:
            return await call(client)
        finally:
            await client.aclose()

    return asyncio.run(scenario())


def test_fetch_events_issues_single_get_with_filters():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"events": [{"id": "EONET_1"}]})

    events = _run(handler, lambda client: client.fetch_events(_state("wildfires")))
    assert events == [{"id": "EONET_1"}]
    assert len(seen) == 1
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/api/v3/events"
    assert dict(request.url.params) == {
        "status": "open",
        "start": "2024-01-01",
        "end": "2024-01-31",
        "category": "wildfires",
        "limit": "250",
    }


def test_fetch_categories_parses_records():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v3/categories"
        return httpx.Response(
            200,
            json={
                "categories": [
                    {"id": "wildfires", "title": "Wildfires", "description": "Wildland fires"},
                    {"id": 8, "title": "Floods"},
                ]
            },
        )

    categories = _run(handler, lambda client: client.fetch_categories())
    assert [(c.id, c.title) for c in categories] == [("wildfires", "Wildfires"), ("8", "Floods")]
    assert categories[0].description == "Wildland fires"


def test_non_2xx_is_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(FeedTransportError) as excinfo:
        _run(handler, lambda client: client.fetch_events(_state()))
    assert excinfo.value.status_code == 503
    assert str(excinfo.value) == "HTTP 503"


def test_network_failure_is_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FeedTransportError):
        _run(handler, lambda client: client.fetch_events(_state()))


def test_invalid_json_is_parse_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>not json</html>")

    with pytest.raises(FeedParseError):
        _run(handler, lambda client: client.fetch_events(_state()))


def test_missing_events_list_is_parse_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"title": "EONET Events"})

    with pytest.raises(FeedParseError):
        _run(handler, lambda client: client.fetch_events(_state()))


def test_cancelled_token_skips_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"events": []})

    async def call(client):
        token = CancellationToken()
        token.cancel()
        return await client.fetch_events(_state(), token)

    with pytest.raises(FetchCancelled):
        _run(handler, call)
    assert calls == []


def test_cancel_abandons_in_flight_request():
    async def scenario():
        started = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            started.set()
            await asyncio.sleep(30)
            return httpx.Response(200, json={"events": []})

        client = EonetClient(BASE, transport=httpx.MockTransport(handler))
        token = CancellationToken()
        task = asyncio.ensure_future(client.fetch_events(_state(), token))
        await started.wait()
        token.cancel()
        try:
            with pytest.raises(FetchCancelled):
                await asyncio.wait_for(task, timeout=5)
        finally:
            await client.aclose()

    asyncio.run(scenario())
