from __future__ import annotations

from typing import List, Optional

from earthviewer.domain.models import Category, FilterState, NormalizedBatch
from earthviewer.domain.normalizer import normalize_payload
from earthviewer.hub.presentation import GeoJsonMapView, MapView, PresentationAdapter, feature_collection
from earthviewer.providers.cancellation import FetchCancelled, FetchSlot
from earthviewer.providers.eonet.base import EventFeed, FeedError


class MapSession:
    """One map instance: its view, its category list and its single in-flight event fetch.

    Open it on mount and close it on unmount (or use ``async with``). Every
    ``apply_filters`` call cancels the previous one; a superseded call never
    touches the displayed state, whatever the order in which fetches resolve.
    """

    def __init__(self, feed: EventFeed, view: Optional[MapView] = None) -> None:
        self.feed = feed
        self.view = view or GeoJsonMapView()
        self.adapter = PresentationAdapter(self.view)
        self.categories: List[Category] = []
        self.filter_state: Optional[FilterState] = None
        self.loading = False
        self.error: Optional[str] = None
        self.last_stats: Optional[dict] = None
        self.is_open = False
        self._categories_loaded = False
        self._slot = FetchSlot()

    async def open(self) -> "MapSession":
        if not self._categories_loaded:
            self._categories_loaded = True
            try:
                self.categories = await self.feed.fetch_categories()
            except FeedError as exc:
                print(f"[map_session] WARNING: categories unavailable ({exc}); selector left empty")
        self.is_open = True
        return self

    async def close(self) -> None:
        self._slot.cancel()
        self.loading = False
        self.is_open = False
        remove = getattr(self.view, "remove", None)
        if remove is not None:
            remove()

    async def __aenter__(self) -> "MapSession":
        return await self.open()

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def event_count(self) -> int:
        return len(self.adapter.features)

    async def apply_filters(self, state: FilterState) -> Optional[NormalizedBatch]:
        """Fetch, normalize and display events for ``state``.

        Returns the batch shown, or ``None`` when a newer call superseded this
        one. Feed failures are recorded in ``error`` and re-raised; the features
        on display are kept.
        """
        if not self.is_open:
            raise RuntimeError("MapSession is not open")
        token = self._slot.replace()
        self.filter_state = state
        self.loading = True
        self.error = None
        try:
            items = await self.feed.fetch_events(state, token)
        except FetchCancelled:
            return None
        except FeedError as exc:
            if not self._slot.is_current(token):
                return None
            self.error = str(exc) or "Failed to load events"
            self.loading = False
            raise
        if not self._slot.is_current(token):
            return None
        batch = normalize_payload(items)
        self.adapter.show(batch.features)
        self.last_stats = batch.stats()
        self.loading = False
        _log_summary(state, batch)
        return batch

    def snapshot(self) -> dict:
        return {
            "filters": _filters_payload(self.filter_state),
            "loading": self.loading,
            "error": self.error,
            "count": self.event_count,
            "stats": self.last_stats,
            "viewport": dict(getattr(self.view, "viewport", {}) or {}),
            "events": feature_collection(self.adapter.features),
        }


def _filters_payload(state: Optional[FilterState]) -> Optional[dict]:
    if state is None:
        return None
    return {
        "start": state.date_start.isoformat(),
        "end": state.date_end.isoformat(),
        "category": state.category_id,
        "status": state.status,
    }


def _log_summary(state: FilterState, batch: NormalizedBatch) -> None:
    print(
        f"[map_session] start={state.date_start} end={state.date_end} category={state.category_id or 'all'} "
        f"fetched={batch.fetched} mapped={batch.mapped} skipped_no_point={batch.skipped_no_point} "
        f"skipped_invalid={batch.skipped_invalid}"
    )
