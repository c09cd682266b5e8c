"""Tests for outgoing param building and address-bar (de)serialization of ListQuery."""

import pytest

from eduportal.services.list_views import (
    ATTENDANCE,
    COMMUNICATIONS,
    ENROLLMENTS,
    PUBLIC_LIBRARY,
    USERS,
)
from eduportal.services.query_params import (
    build_query_params,
    parse_url_state,
    to_query_string,
    url_state_params,
)


def test_page_style_params():
    q = COMMUNICATIONS.initial_query()
    q.offset = 20
    params = build_query_params(COMMUNICATIONS, q)
    assert params == {"page": 3, "page_size": 10}


def test_offset_style_params_include_scope_and_ordering():
    q = ATTENDANCE.initial_query()
    q.offset = 40
    q.page_size = 20
    params = build_query_params(ATTENDANCE, q, {"course": 42, "student": "7"})
    assert params == {"course": 42, "student": "7", "ordering": "-created_at", "limit": 20, "offset": 40}
    assert "page" not in params and "page_size" not in params


@pytest.mark.parametrize("config", [COMMUNICATIONS, ENROLLMENTS, USERS, ATTENDANCE])
def test_sentinel_filters_are_omitted(config):
    """Filters left at "all" (or None/"") never reach the request."""
    q = config.initial_query()
    for spec in config.filters:
        q.filters[spec.key] = spec.sentinel
    params = build_query_params(config, q)
    for spec in config.filters:
        assert spec.param_name not in params
    assert "all" not in params.values()


def test_empty_values_count_as_unset():
    q = ATTENDANCE.initial_query()
    q.filters.update({"status": "", "date_from": None, "date_to": ""})
    params = build_query_params(ATTENDANCE, q)
    assert not {"status", "date_from", "date_to"} & params.keys()


def test_filter_param_rename_and_value_map():
    q = ENROLLMENTS.initial_query()
    q.filters["status"] = "pending"
    assert build_query_params(ENROLLMENTS, q)["status__iexact"] == "pending"

    q = USERS.initial_query()
    q.filters["status"] = "inactive"
    q.filters["role"] = "teacher"
    params = build_query_params(USERS, q)
    assert params["is_active"] is False
    assert params["role"] == "teacher"
    assert "status" not in params


def test_debounced_term_is_sent_not_the_raw_one():
    q = COMMUNICATIONS.initial_query()
    q.search_term = "algebra 2"
    q.debounced_search_term = "algebra"
    assert build_query_params(COMMUNICATIONS, q)["search"] == "algebra"


def test_search_goes_to_every_configured_key():
    q = USERS.initial_query()
    q.debounced_search_term = "  ali "
    params = build_query_params(USERS, q)
    assert params["full_name"] == "ali"
    assert params["email"] == "ali"


def test_multiple_value_filter_is_comma_joined():
    q = PUBLIC_LIBRARY.initial_query()
    q.filters["language"] = ["arabic", "urdu"]
    q.filters["min_rating"] = 0
    params = build_query_params(PUBLIC_LIBRARY, q)
    assert params["language"] == "arabic,urdu"
    assert "min_rating" not in params


def test_url_state_omits_defaults():
    q = ATTENDANCE.initial_query()
    assert url_state_params(ATTENDANCE, q) == {}
    q = COMMUNICATIONS.initial_query()
    assert url_state_params(COMMUNICATIONS, q) == {}


def test_url_state_reflects_non_default_fields():
    q = ATTENDANCE.initial_query()
    q.filters["status"] = "present"
    q.page_size = 20
    q.offset = 40
    assert to_query_string(url_state_params(ATTENDANCE, q)) == "status=present&limit=20&offset=40"


def test_url_state_uses_ui_values_and_first_search_key():
    q = USERS.initial_query()
    q.filters["status"] = "active"
    q.debounced_search_term = "ali"
    q.offset = 10
    assert url_state_params(USERS, q) == {"status": "active", "full_name": "ali", "page": "2"}


def test_parse_url_state_roundtrips_attendance():
    q = parse_url_state(ATTENDANCE, "?status=present&title=quiz&limit=20&offset=40&date_from=2025-01-01")
    assert q.filters["status"] == "present"
    assert q.filters["date_from"] == "2025-01-01"
    assert q.search_term == "quiz"
    assert q.debounced_search_term == "quiz"
    assert q.page_size == 20
    assert q.offset == 40


def test_parse_url_state_page_style():
    q = parse_url_state(COMMUNICATIONS, {"page": "3", "page_size": "20", "status": "new"})
    assert q.page_size == 20
    assert q.page == 3
    assert q.filters["status"] == "new"


@pytest.mark.parametrize(
    "qs",
    [
        "status=all",
        "status=bogus",
        "limit=abc&offset=-5",
        "limit=7",
        "page=0",
    ],
)
def test_parse_url_state_falls_back_to_defaults(qs):
    config = ATTENDANCE if "limit" in qs or "status" in qs else COMMUNICATIONS
    q = parse_url_state(config, qs)
    assert q.filters.get("status") == "all"
    assert q.offset == 0
    assert q.page_size == config.default_page_size


def test_parse_url_state_sort_alias_and_list_filter():
    q = parse_url_state(PUBLIC_LIBRARY, "ordering=highest-rated&language=arabic,klingon,urdu")
    assert q.ordering == "-average_rating"
    assert q.filters["language"] == ["arabic", "urdu"]


@pytest.mark.parametrize("qs,expected", [("min_rating=0", 0), ("min_rating=4", 4), ("min_rating=high", 0)])
def test_parse_url_state_numeric_filter(qs, expected):
    q = parse_url_state(PUBLIC_LIBRARY, qs)
    assert q.filters["min_rating"] == expected
    params = build_query_params(PUBLIC_LIBRARY, q)
    if expected:
        assert params["min_rating"] == expected
    else:
        assert "min_rating" not in params
