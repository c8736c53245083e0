from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from earthviewer.api.routers import events, tiles
from earthviewer.config import EONET_BASE_URL, FRONTEND_ORIGIN
from earthviewer.hub.map_session import MapSession
from earthviewer.providers.eonet.client import EonetClient
from earthviewer.providers.gibs.layer_registry import LayerRegistry


def create_app(feed=None, view=None, layers: LayerRegistry | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_feed = None
        active_feed = feed
        if active_feed is None:
            owned_feed = active_feed = EonetClient(EONET_BASE_URL)
        session = MapSession(active_feed, view=view)
        await session.open()
        app.state.map_session = session
        try:
            yield
        finally:
            await session.close()
            app.state.map_session = None
            if owned_feed is not None:
                await owned_feed.aclose()

    app = FastAPI(title="Earth Viewer API", version="0.1.0", lifespan=lifespan)
    app.state.map_session = None
    app.state.layers = layers or LayerRegistry.default()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[FRONTEND_ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(events.router, prefix="/api")
    app.include_router(tiles.router, prefix="/api")
    return app


app = create_app()
