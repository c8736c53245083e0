from __future__ import annotations

from typing import Dict, List, Optional, Protocol, Sequence

from earthviewer.domain.models import Bounds, RenderableFeature

EVENTS_SOURCE_ID = "eonet-events"
EVENTS_LAYER_ID = "eonet-circles"
FIT_PADDING = 40
FIT_DURATION_MS = 800

INITIAL_VIEWPORT = {"center": [-40.0, -15.0], "zoom": 2.2, "pitch": 35, "bearing": -5}


class MapView(Protocol):
    """What the adapter needs from a map widget."""

    def set_source_data(self, source_id: str, data: dict) -> None:
        raise NotImplementedError

    def fit_bounds(self, bounds: Bounds, *, padding: int, duration: int) -> None:
        raise NotImplementedError


class GeoJsonMapView(MapView):
    """In-memory map widget: keeps GeoJSON sources and the current viewport."""

    def __init__(self) -> None:
        self.sources: Dict[str, dict] = {EVENTS_SOURCE_ID: feature_collection([])}
        self.viewport: dict = dict(INITIAL_VIEWPORT)
        self.closed = False

    def set_source_data(self, source_id: str, data: dict) -> None:
        self.sources[source_id] = data

    def fit_bounds(self, bounds: Bounds, *, padding: int, duration: int) -> None:
        center = [(bounds.west + bounds.east) / 2, (bounds.south + bounds.north) / 2]
        self.viewport = {
            **self.viewport,
            "center": center,
            "bounds": bounds.as_list(),
            "padding": padding,
            "duration": duration,
        }

    def remove(self) -> None:
        self.sources.clear()
        self.closed = True


def feature_collection(features: Sequence[RenderableFeature]) -> dict:
    return {"type": "FeatureCollection", "features": [f.to_geojson() for f in features]}


def compute_bounds(features: Sequence[RenderableFeature]) -> Optional[Bounds]:
    if not features:
        return None
    lons = [f.longitude for f in features]
    lats = [f.latitude for f in features]
    return Bounds(west=min(lons), south=min(lats), east=max(lons), north=max(lats))


class PresentationAdapter:
    def __init__(self, view: MapView, source_id: str = EVENTS_SOURCE_ID) -> None:
        self.view = view
        self.source_id = source_id
        self.features: List[RenderableFeature] = []

    def show(self, features: Sequence[RenderableFeature]) -> Optional[Bounds]:
        """Replace the whole event source; fit the viewport when there is something to show."""
        self.features = list(features)
        self.view.set_source_data(self.source_id, feature_collection(self.features))
        bounds = compute_bounds(self.features)
        if bounds is not None:
            self.view.fit_bounds(bounds, padding=FIT_PADDING, duration=FIT_DURATION_MS)
        return bounds
