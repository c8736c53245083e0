from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Sequence

from earthviewer.config import DEFAULT_STATUS

STATUSES = ("open", "closed", "all")


@dataclass(frozen=True)
class Category:
    id: str
    title: str
    description: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "Category":
        return cls(
            id=str(payload["id"]),
            title=payload.get("title") or "",
            description=payload.get("description"),
        )


@dataclass(frozen=True)
class CategoryRef:
    id: str
    title: str


@dataclass(frozen=True)
class Geometry:
    type: str
    date: str
    coordinates: Any
    magnitude_value: Optional[float] = None
    magnitude_unit: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "Geometry":
        return cls(
            type=payload.get("type") or "",
            date=payload.get("date") or "",
            coordinates=payload.get("coordinates"),
            magnitude_value=payload.get("magnitudeValue"),
            magnitude_unit=payload.get("magnitudeUnit"),
        )


@dataclass(frozen=True)
class RawEvent:
    id: str
    title: str
    categories: Sequence[CategoryRef] = ()
    geometry: Sequence[Geometry] = ()
    closed: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "RawEvent":
        geometry = payload.get("geometry")
        if not isinstance(geometry, list) or not geometry:
            raise ValueError(f"event {payload.get('id')!r} has no geometry")
        return cls(
            id=str(payload["id"]),
            title=payload.get("title") or "",
            categories=tuple(
                CategoryRef(id=str(item.get("id")), title=item.get("title") or "")
                for item in payload.get("categories") or []
            ),
            geometry=tuple(Geometry.from_payload(item) for item in geometry),
            closed=payload.get("closed"),
        )


@dataclass(frozen=True)
class RenderableFeature:
    id: str
    title: str
    longitude: float
    latitude: float
    category_title: str
    category_key: str
    color: str
    latest_date_formatted: str

    def to_geojson(self) -> dict:
        return {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [self.longitude, self.latitude]},
            "properties": {
                "id": self.id,
                "title": self.title,
                "category": self.category_title,
                "categoryKey": self.category_key,
                "color": self.color,
                "latestDate": self.latest_date_formatted,
            },
        }


@dataclass(frozen=True)
class Bounds:
    west: float
    south: float
    east: float
    north: float

    def as_list(self) -> list[list[float]]:
        return [[self.west, self.south], [self.east, self.north]]


@dataclass(frozen=True)
class FilterState:
    date_start: date
    date_end: date
    category_id: Optional[str] = None
    status: str = DEFAULT_STATUS

    def __post_init__(self):
        if self.date_start > self.date_end:
            raise ValueError("date_start must not be after date_end")
        if self.status not in STATUSES:
            raise ValueError(f"status must be one of {', '.join(STATUSES)}")
        if self.category_id is not None and not str(self.category_id).strip():
            object.__setattr__(self, "category_id", None)


@dataclass
class NormalizedBatch:
    features: list[RenderableFeature] = field(default_factory=list)
    fetched: int = 0
    skipped_no_point: int = 0
    skipped_invalid: int = 0

    @property
    def mapped(self) -> int:
        return len(self.features)

    def stats(self) -> dict:
        return {
            "fetched": self.fetched,
            "mapped": self.mapped,
            "skipped_no_point": self.skipped_no_point,
            "skipped_invalid": self.skipped_invalid,
        }
