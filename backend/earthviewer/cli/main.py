import asyncio
from datetime import date
from typing import Optional

import typer

from earthviewer.config import EONET_BASE_URL
from earthviewer.domain.models import FilterState
from earthviewer.hub.map_session import MapSession
from earthviewer.providers.eonet.base import EventFeed, FeedError
from earthviewer.providers.eonet.client import EonetClient
from earthviewer.providers.eonet.query import build_events_url, default_date_range
from earthviewer.providers.gibs.layer_registry import LayerRegistry
from earthviewer.providers.gibs.tiles import DEFAULT_LAYER, build_tile_url, default_tile_date, today_utc

app = typer.Typer(help="CLI for the NASA EONET events feed and GIBS imagery tiles")


def _build_feed(base_url: str) -> EventFeed:
    return EonetClient(base_url)


def _parse_date(value: Optional[str], fallback: date) -> date:
    if not value:
        return fallback
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"invalid date '{value}', expected YYYY-MM-DD") from exc


def _filter_state(start: Optional[str], end: Optional[str], category: Optional[str]) -> FilterState:
    default_start, default_end = default_date_range()
    try:
        return FilterState(
            date_start=_parse_date(start, default_start),
            date_end=_parse_date(end, default_end),
            category_id=category,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


async def _close_feed(feed: EventFeed) -> None:
    aclose = getattr(feed, "aclose", None)
    if aclose is not None:
        await aclose()


@app.command("query")
def cli_query(
    start: Optional[str] = typer.Option(None, help="Start date YYYY-MM-DD"),
    end: Optional[str] = typer.Option(None, help="End date YYYY-MM-DD"),
    category: Optional[str] = typer.Option(None, help="EONET category id"),
    base_url: str = typer.Option(EONET_BASE_URL, help="EONET API base URL"),
):
    """Print the events URL for the given filters without fetching it."""
    typer.echo(build_events_url(_filter_state(start, end, category), base_url=base_url))


@app.command("events")
def cli_events(
    start: Optional[str] = typer.Option(None, help="Start date YYYY-MM-DD"),
    end: Optional[str] = typer.Option(None, help="End date YYYY-MM-DD"),
    category: Optional[str] = typer.Option(None, help="EONET category id"),
    base_url: str = typer.Option(EONET_BASE_URL, help="EONET API base URL"),
):
    state = _filter_state(start, end, category)

    async def _run():
        feed = _build_feed(base_url)
        try:
            async with MapSession(feed) as session:
                await session.apply_filters(state)
                return session.snapshot(), list(session.adapter.features)
        finally:
            await _close_feed(feed)

    try:
        snapshot, features = asyncio.run(_run())
    except FeedError as exc:
        typer.echo(f"Failed to load events: {exc}", err=True)
        raise typer.Exit(code=1)
    if not features:
        typer.echo("No events with point geometry for these filters")
        raise typer.Exit(code=0)
    typer.echo("id\tcategory\tlon\tlat\tdate\ttitle")
    for f in features:
        typer.echo(
            f"{f.id}\t{f.category_title}\t{f.longitude:.4f}\t{f.latitude:.4f}\t{f.latest_date_formatted}\t{f.title}"
        )
    bounds = snapshot["viewport"].get("bounds")
    typer.echo(f"{snapshot['count']} events, bounds={bounds}")


@app.command("categories")
def cli_categories(base_url: str = typer.Option(EONET_BASE_URL, help="EONET API base URL")):
    async def _run():
        feed = _build_feed(base_url)
        try:
            return await feed.fetch_categories()
        finally:
            await _close_feed(feed)

    try:
        categories = asyncio.run(_run())
    except FeedError as exc:
        typer.echo(f"Failed to load categories: {exc}", err=True)
        raise typer.Exit(code=1)
    for c in categories:
        typer.echo(f"{c.id}\t{c.title}")


@app.command("tile-url")
def cli_tile_url(
    layer: str = typer.Option(DEFAULT_LAYER, help="GIBS layer identifier"),
    date_: Optional[str] = typer.Option(None, "--date", help="Imagery date YYYY-MM-DD, defaults to yesterday (UTC)"),
):
    day = _parse_date(date_, default_tile_date())
    if day > today_utc():
        raise typer.BadParameter("date must not be in the future", param_hint="--date")
    typer.echo(build_tile_url(layer, day))


@app.command("layers")
def cli_layers():
    for layer in LayerRegistry.default().list():
        typer.echo(f"{layer.id}\t{layer.name}")


if __name__ == "__main__":
    app()
