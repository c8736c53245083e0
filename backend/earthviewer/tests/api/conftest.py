from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from earthviewer.api.main import create_app
from earthviewer.domain.models import Category

SAMPLE_EVENTS = [
    {
        "id": "EONET_7001",
        "title": "Wildfire - Sample County",
        "categories": [{"id": "wildfires", "title": "Wildfires"}],
        "geometry": [{"type": "Point", "date": "2024-01-12T15:00:00Z", "coordinates": [-120.5, 38.25]}],
    },
    {
        "id": "EONET_7002",
        "title": "Tropical Cyclone Sample",
        "categories": [{"id": "severeStorms", "title": "Severe Storms"}],
        "geometry": [
            {"type": "Point", "date": "2024-01-10T00:00:00Z", "coordinates": [140.0, 10.0]},
            {"type": "Point", "date": "2024-01-11T06:00:00Z", "coordinates": [141.0, 12.5]},
        ],
    },
    {
        "id": "EONET_7003",
        "title": "Iceberg perimeter",
        "categories": [{"id": "seaLakeIce", "title": "Sea and Lake Ice"}],
        "geometry": [{"type": "Polygon", "date": "2024-01-05T00:00:00Z", "coordinates": [[[0, 0], [1, 0], [0, 0]]]}],
    },
]


class FakeFeed:
    def __init__(self) -> None:
        self.events = list(SAMPLE_EVENTS)
        self.fail_with = None
        self.states = []
        self.category_calls = 0

    async def fetch_categories(self, token=None):
        self.category_calls += 1
        return [
            Category(id="wildfires", title="Wildfires", description="Wildland fires"),
            Category(id="severeStorms", title="Severe Storms"),
        ]

    async def fetch_events(self, state, token=None):
        self.states.append(state)
        if self.fail_with is not None:
            raise self.fail_with
        if state.category_id:
            return [e for e in self.events if e["categories"][0]["id"] == state.category_id]
        return list(self.events)


@pytest.fixture()
def feed():
    return FakeFeed()


@pytest.fixture()
def api_client(feed):
    app = create_app(feed=feed)
    with TestClient(app) as client:
        yield client
