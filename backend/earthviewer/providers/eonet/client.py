from __future__ import annotations

import asyncio
from typing import Any, List, Optional

import httpx

from earthviewer.config import EONET_BASE_URL, EVENTS_LIMIT
from earthviewer.domain.models import Category, FilterState
from earthviewer.providers.cancellation import CancellationToken, FetchCancelled
from earthviewer.providers.eonet.base import EventFeed, FeedParseError, FeedTransportError
from earthviewer.providers.eonet.query import build_categories_url, build_events_url


class EonetClient(EventFeed):
    def __init__(
        self,
        base_url: str = EONET_BASE_URL,
        *,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        limit: int = EVENTS_LIMIT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.limit = limit
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(transport=transport)

    async def fetch_events(self, state: FilterState, token: Optional[CancellationToken] = None) -> List[dict]:
        url = build_events_url(state, base_url=self.base_url, limit=self.limit)
        data = await self.get_json(url, token)
        events = data.get("events") if isinstance(data, dict) else None
        if not isinstance(events, list):
            raise FeedParseError("Response has no 'events' list")
        return events

    async def fetch_categories(self, token: Optional[CancellationToken] = None) -> List[Category]:
        data = await self.get_json(build_categories_url(self.base_url), token)
        items = data.get("categories") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise FeedParseError("Response has no 'categories' list")
        try:
            return [Category.from_payload(item) for item in items]
        except (AttributeError, KeyError, TypeError) as exc:
            raise FeedParseError(f"Malformed category record: {exc}") from exc

    async def get_json(self, url: str, token: Optional[CancellationToken] = None) -> Any:
        """Issue one GET for ``url``; abandon it as soon as ``token`` is cancelled."""
        token = token or CancellationToken()
        token.raise_if_cancelled()
        request = asyncio.ensure_future(self._client.get(url))
        waiter = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait({request, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not request.done():
                request.cancel()
        if token.cancelled:
            if not request.cancelled() and request.done():
                # consume the outcome so the task never logs an unretrieved exception
                request.exception()
            raise FetchCancelled(f"fetch cancelled: {url}")
        try:
            resp = request.result()
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FeedTransportError(
                f"HTTP {exc.response.status_code}", status_code=exc.response.status_code
            ) from exc
        except httpx.HTTPError as exc:
            raise FeedTransportError(str(exc) or exc.__class__.__name__) from exc
        try:
            return resp.json()
        except ValueError as exc:
            raise FeedParseError("Invalid JSON in response") from exc

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "EonetClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
