from __future__ import annotations

from fastapi import HTTPException, Request

from earthviewer.hub.map_session import MapSession
from earthviewer.providers.gibs.layer_registry import LayerRegistry


def get_session(request: Request) -> MapSession:
    session = getattr(request.app.state, "map_session", None)
    if session is None:
        raise HTTPException(status_code=500, detail="Map session not mounted")
    return session


def get_layers(request: Request) -> LayerRegistry:
    return request.app.state.layers
