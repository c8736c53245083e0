from __future__ import annotations

from typing import Optional, Protocol

from earthviewer.domain.models import Category, FilterState
from earthviewer.providers.cancellation import CancellationToken


class FeedError(Exception):
    """Base class for failures the user sees as a short message."""


class FeedTransportError(FeedError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FeedParseError(FeedError):
    pass


class EventFeed(Protocol):
    """Contract for natural-event feeds."""

    async def fetch_events(self, state: FilterState, token: Optional[CancellationToken] = None) -> list[dict]:
        """Return the raw event records matching ``state``.

        Raises ``FetchCancelled`` once ``token`` is cancelled and ``FeedError``
        on transport or parse failures.
        """
        raise NotImplementedError

    async def fetch_categories(self, token: Optional[CancellationToken] = None) -> list[Category]:
        raise NotImplementedError
