from __future__ import annotations

from datetime import date as date_type
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from earthviewer.api.deps import get_session
from earthviewer.domain.categories import circle_layer_paint, legend_entries
from earthviewer.domain.models import FilterState
from earthviewer.hub.map_session import MapSession
from earthviewer.hub.presentation import EVENTS_LAYER_ID, EVENTS_SOURCE_ID
from earthviewer.providers.eonet.base import FeedError
from earthviewer.providers.eonet.query import default_date_range

router = APIRouter(tags=["events"])


@router.get("/categories")
def list_categories(session: MapSession = Depends(get_session)):
    return [
        {"id": c.id, "title": c.title, "description": c.description}
        for c in session.categories
    ]


@router.get("/events")
async def list_events(
    start: Optional[date_type] = Query(None, description="YYYY-MM-DD, defaults to 45 days ago"),
    end: Optional[date_type] = Query(None, description="YYYY-MM-DD, defaults to today"),
    category: Optional[str] = Query(None, description="EONET category id; empty means all"),
    session: MapSession = Depends(get_session),
):
    default_start, default_end = default_date_range()
    try:
        state = FilterState(
            date_start=start or default_start,
            date_end=end or default_end,
            category_id=category,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    try:
        batch = await session.apply_filters(state)
    except FeedError as exc:
        raise HTTPException(status_code=502, detail=session.error or str(exc)) from exc
    payload = session.snapshot()
    payload["superseded"] = batch is None
    return payload


@router.get("/map")
def get_map(session: MapSession = Depends(get_session)):
    return session.snapshot()


@router.get("/map/style")
def get_map_style():
    return {
        "source": EVENTS_SOURCE_ID,
        "layer": {
            "id": EVENTS_LAYER_ID,
            "type": "circle",
            "source": EVENTS_SOURCE_ID,
            "paint": circle_layer_paint(),
        },
        "legend": legend_entries(),
    }
