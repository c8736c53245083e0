from __future__ import annotations

from datetime import date as date_type
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from earthviewer.api.deps import get_layers
from earthviewer.providers.gibs.layer_registry import LayerRegistry
from earthviewer.providers.gibs.tiles import (
    ATTRIBUTION,
    DEFAULT_LAYER,
    TILE_SIZE,
    build_tile_url,
    default_tile_date,
    today_utc,
)

router = APIRouter(tags=["tiles"])


@router.get("/tiles/layers")
def list_layers(layers: LayerRegistry = Depends(get_layers)):
    return [{"id": layer.id, "name": layer.name} for layer in layers.list()]


@router.get("/tiles")
def get_tile_template(
    layer: str = Query(DEFAULT_LAYER, min_length=1),
    date: Optional[date_type] = Query(None, description="YYYY-MM-DD (UTC), defaults to yesterday"),
):
    day = date or default_tile_date()
    today = today_utc()
    if day > today:
        raise HTTPException(status_code=422, detail=f"date must not be after {today.isoformat()}")
    return {
        "layer": layer,
        "date": day.isoformat(),
        "max_date": today.isoformat(),
        "url": build_tile_url(layer, day),
        "tile_size": TILE_SIZE,
        "attribution": ATTRIBUTION,
    }
