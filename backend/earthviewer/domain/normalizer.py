from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Iterable, Optional

from earthviewer.domain.categories import UNKNOWN_CATEGORY, color_for_key, normalize_category_key
from earthviewer.domain.models import Geometry, NormalizedBatch, RawEvent, RenderableFeature

DISPLAY_DATE_FORMAT = "%Y-%m-%d %H:%M"


def parse_geometry_date(value: Optional[str]) -> datetime:
    if not value:
        raise ValueError("Missing geometry date")
    if not isinstance(value, str):
        raise ValueError(f"Geometry date is not a string: {value!r}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_display_date(value: str) -> str:
    return parse_geometry_date(value).astimezone(timezone.utc).strftime(DISPLAY_DATE_FORMAT)


def select_latest_point(geometry: Iterable[Geometry]) -> Optional[Geometry]:
    """Most recent Point geometry; equal dates go to the later entry.

    Raises ``ValueError`` when a Point entry carries an unparseable date.
    """
    latest = None
    latest_key = None
    for idx, geom in enumerate(geometry):
        if geom.type != "Point":
            continue
        key = (parse_geometry_date(geom.date), idx)
        if latest_key is None or key > latest_key:
            latest, latest_key = geom, key
    return latest


def point_coordinates(geom: Geometry) -> tuple[float, float]:
    coords = geom.coordinates
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        raise ValueError(f"Point geometry without coordinates: {coords!r}")
    lon, lat = coords[0], coords[1]
    if isinstance(lon, bool) or isinstance(lat, bool):
        raise ValueError(f"Point geometry without coordinates: {coords!r}")
    lon, lat = float(lon), float(lat)
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise ValueError(f"Point geometry with non-finite coordinates: {coords!r}")
    return lon, lat


def normalize_event(event: RawEvent) -> Optional[RenderableFeature]:
    """Return the renderable point for ``event`` or ``None`` when it has no Point geometry."""
    latest = select_latest_point(event.geometry)
    if latest is None:
        return None
    lon, lat = point_coordinates(latest)
    category = event.categories[0].title if event.categories else ""
    category = category or UNKNOWN_CATEGORY
    key = normalize_category_key(category)
    return RenderableFeature(
        id=event.id,
        title=event.title,
        longitude=lon,
        latitude=lat,
        category_title=category,
        category_key=key,
        color=color_for_key(key),
        latest_date_formatted=format_display_date(latest.date),
    )


def normalize_events(events: Iterable[RawEvent]) -> NormalizedBatch:
    batch = NormalizedBatch()
    for event in events:
        batch.fetched += 1
        _append(batch, event)
    return batch


def normalize_payload(items: Iterable[dict]) -> NormalizedBatch:
    """Normalize raw JSON event records; malformed records are counted and skipped."""
    batch = NormalizedBatch()
    for item in items:
        batch.fetched += 1
        try:
            event = RawEvent.from_payload(item)
        except (AttributeError, KeyError, TypeError, ValueError):
            batch.skipped_invalid += 1
            continue
        _append(batch, event)
    return batch


def _append(batch: NormalizedBatch, event: RawEvent) -> None:
    try:
        feature = normalize_event(event)
    except (TypeError, ValueError):
        batch.skipped_invalid += 1
        return
    if feature is None:
        batch.skipped_no_point += 1
        return
    batch.features.append(feature)
