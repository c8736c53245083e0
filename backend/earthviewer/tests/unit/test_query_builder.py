from datetime import date

import pytest

from earthviewer.domain.models import FilterState
from earthviewer.providers.eonet.query import (
    build_categories_url,
    build_events_url,
    build_query_string,
    default_date_range,
    default_filter_state,
)


def _state(category_id=None) -> FilterState:
    return FilterState(date_start=date(2024, 1, 1), date_end=date(2024, 1, 31), category_id=category_id)


def test_query_without_category():
    query = build_query_string(_state(""))
    assert query == "status=open&start=2024-01-01&end=2024-01-31&limit=250"
    assert "category" not in query


def test_category_only_adds_its_parameter():
    with_category = build_query_string(_state("8"))
    without_category = build_query_string(_state(None))
    assert with_category == "status=open&start=2024-01-01&end=2024-01-31&category=8&limit=250"
    assert with_category.replace("&category=8", "") == without_category


def test_same_state_same_url():
    assert build_events_url(_state("wildfires")) == build_events_url(_state("wildfires"))


def test_events_url_uses_base():
    url = build_events_url(_state(), base_url="https://eonet.test/api/v3/")
    assert url == "https://eonet.test/api/v3/events?status=open&start=2024-01-01&end=2024-01-31&limit=250"
    assert build_categories_url("https://eonet.test/api/v3") == "https://eonet.test/api/v3/categories"


def test_blank_category_is_treated_as_all():
    assert _state("   ").category_id is None


def test_filter_state_validation():
    with pytest.raises(ValueError):
        FilterState(date_start=date(2024, 2, 1), date_end=date(2024, 1, 1))
    with pytest.raises(ValueError):
        FilterState(date_start=date(2024, 1, 1), date_end=date(2024, 1, 2), status="pending")


def test_default_range_is_45_days_ending_today():
    start, end = default_date_range(today=date(2024, 3, 1))
    assert end == date(2024, 3, 1)
    assert start == date(2024, 1, 16)
    state = default_filter_state(today=date(2024, 3, 1))
    assert state.status == "open"
    assert state.category_id is None
