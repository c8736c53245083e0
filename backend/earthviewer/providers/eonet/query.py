from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import httpx

from earthviewer.config import DEFAULT_RANGE_DAYS, EONET_BASE_URL, EVENTS_LIMIT
from earthviewer.domain.models import FilterState

DATE_FORMAT = "%Y-%m-%d"


def default_date_range(days: int = DEFAULT_RANGE_DAYS, today: Optional[date] = None) -> tuple[date, date]:
    end = today or datetime.now(timezone.utc).date()
    return end - timedelta(days=days), end


def default_filter_state(category_id: Optional[str] = None, today: Optional[date] = None) -> FilterState:
    start, end = default_date_range(today=today)
    return FilterState(date_start=start, date_end=end, category_id=category_id)


def build_query_params(state: FilterState, limit: int = EVENTS_LIMIT) -> list[tuple[str, str]]:
    params = [
        ("status", state.status),
        ("start", state.date_start.strftime(DATE_FORMAT)),
        ("end", state.date_end.strftime(DATE_FORMAT)),
    ]
    if state.category_id:
        params.append(("category", str(state.category_id)))
    params.append(("limit", str(limit)))
    return params


def build_query_string(state: FilterState, limit: int = EVENTS_LIMIT) -> str:
    return str(httpx.QueryParams(build_query_params(state, limit)))


def build_events_url(state: FilterState, base_url: str = EONET_BASE_URL, limit: int = EVENTS_LIMIT) -> str:
    return f"{base_url.rstrip('/')}/events?{build_query_string(state, limit)}"


def build_categories_url(base_url: str = EONET_BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/categories"
