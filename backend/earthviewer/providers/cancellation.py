from __future__ import annotations

import asyncio
from typing import Optional


class FetchCancelled(Exception):
    """Raised when a fetch is superseded; callers drop it silently."""


class CancellationToken:
    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self, what: str = "fetch") -> None:
        if self.cancelled:
            raise FetchCancelled(f"{what} cancelled")


class FetchSlot:
    """Holds the one live token of a logical fetch operation."""

    def __init__(self) -> None:
        self._token: Optional[CancellationToken] = None

    def replace(self) -> CancellationToken:
        # no await between cancel and swap
        if self._token is not None:
            self._token.cancel()
        self._token = CancellationToken()
        return self._token

    def is_current(self, token: CancellationToken) -> bool:
        return token is self._token and not token.cancelled

    def cancel(self) -> None:
        if self._token is not None:
            self._token.cancel()
            self._token = None
