"""
ListQuery <-> outgoing request params and ListQuery <-> address-bar query string.
Unset filters (None, "", [], or the view's sentinel such as "all") are never serialized.
"""
from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import parse_qs, urlencode

from eduportal.schemas.list_query import ListQuery, ListViewConfig
from eduportal.schemas.pagination import PaginationStyle


def pagination_params(config: ListViewConfig, query: ListQuery) -> dict[str, int]:
    """Exactly one pagination pair: {page, page_size} or {limit, offset}."""
    if config.pagination == PaginationStyle.OFFSET:
        return {"limit": query.page_size, "offset": query.offset}
    return {"page": query.page, "page_size": query.page_size}


def build_query_params(
    config: ListViewConfig,
    query: ListQuery,
    scope: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Pure: the exact param set sent to the list endpoint for this state."""
    params: dict[str, Any] = {}
    for key, value in (scope or {}).items():
        if value is not None and value != "":
            params[key] = value
    if query.ordering:
        params["ordering"] = query.ordering
    params.update(pagination_params(config, query))
    for spec in config.filters:
        value = query.filters.get(spec.key, spec.sentinel)
        if spec.is_unset(value):
            continue
        params[spec.param_name] = spec.to_param(value)
    term = query.debounced_search_term.strip()
    if term:
        for key in config.search_params:
            params[key] = term
    return params


def url_state_params(config: ListViewConfig, query: ListQuery) -> dict[str, str]:
    """Non-default fields of the state, as they appear in the view's own address."""
    out: dict[str, str] = {}
    for spec in config.filters:
        value = query.filters.get(spec.key, spec.sentinel)
        if spec.is_unset(value):
            continue
        out[spec.key] = ",".join(str(v) for v in value) if isinstance(value, (list, tuple)) else str(value)
    term = query.debounced_search_term.strip()
    if term and config.search_params:
        out[config.search_params[0]] = term
    if query.ordering and query.ordering != config.default_ordering:
        out["ordering"] = query.ordering
    if config.pagination == PaginationStyle.OFFSET:
        if query.page_size != config.default_page_size or query.offset:
            out["limit"] = str(query.page_size)
            out["offset"] = str(query.offset)
    else:
        if query.page > 1:
            out["page"] = str(query.page)
        if query.page_size != config.default_page_size:
            out["page_size"] = str(query.page_size)
    return out


def to_query_string(params: Mapping[str, Any]) -> str:
    return urlencode([(k, v) for k, v in params.items()])


def _int_or_none(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def parse_url_state(config: ListViewConfig, query_string: str | Mapping[str, Any]) -> ListQuery:
    """
    Rehydrate a ListQuery from the address bar (done once, before the first fetch).
    Unknown keys, unknown choice values and malformed numbers fall back to defaults.
    """
    if isinstance(query_string, str):
        raw = {k: v[-1] for k, v in parse_qs(query_string.lstrip("?"), keep_blank_values=False).items()}
    else:
        raw = {k: (v[-1] if isinstance(v, (list, tuple)) and v else v) for k, v in query_string.items()}

    query = config.initial_query()
    for spec in config.filters:
        value = raw.get(spec.key)
        if value is None or value == "":
            continue
        if spec.multiple:
            parts = [p for p in str(value).split(",") if p]
            if spec.choices:
                parts = [p for p in parts if p in spec.choices]
            if parts:
                query.filters[spec.key] = parts
            continue
        if spec.choices and value not in spec.choices:
            continue
        value = spec.from_url(str(value))
        if value is None:
            continue
        query.filters[spec.key] = value

    if config.search_params:
        term = (raw.get(config.search_params[0]) or "").strip()
        query.search_term = term
        query.debounced_search_term = term

    ordering = raw.get("ordering")
    if ordering:
        query.ordering = config.resolve_ordering(ordering)

    if config.pagination == PaginationStyle.OFFSET:
        size = _int_or_none(raw.get("limit"))
        start = _int_or_none(raw.get("offset"))
    else:
        size = _int_or_none(raw.get("page_size"))
        start = None
    if size is not None and size in config.page_size_options:
        query.page_size = size
    if config.pagination == PaginationStyle.OFFSET:
        if start is not None and start > 0:
            query.offset = start
    else:
        page = _int_or_none(raw.get("page"))
        if page is not None and page > 1:
            query.offset = (page - 1) * query.page_size
    return query
