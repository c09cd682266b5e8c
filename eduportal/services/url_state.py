"""Mirror settled list state into the view's address, replacing (never pushing) the history entry."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

from eduportal.core.endpoints import build_endpoint
from eduportal.schemas.list_query import ListQuery, ListViewConfig
from eduportal.services.query_params import to_query_string, url_state_params

logger = logging.getLogger(__name__)


class Navigator(Protocol):
    def replace(self, url: str) -> None: ...


class HistoryNavigator:
    """In-process history stack: push adds an entry, replace overwrites the current one."""

    def __init__(self, initial_url: str = "/"):
        self.entries: list[str] = [initial_url]

    @property
    def current(self) -> str:
        return self.entries[-1]

    def push(self, url: str) -> None:
        self.entries.append(url)

    def replace(self, url: str) -> None:
        self.entries[-1] = url


class URLStateSync:
    def __init__(
        self,
        config: ListViewConfig,
        navigator: Navigator,
        path_params: Mapping[str, Any] | None = None,
    ):
        self.config = config
        self.navigator = navigator
        self.base_path = build_endpoint(config.path, **dict(path_params or {}))

    def url_for(self, query: ListQuery) -> str:
        qs = to_query_string(url_state_params(self.config, query))
        return f"{self.base_path}?{qs}" if qs else self.base_path

    def sync(self, query: ListQuery) -> str:
        url = self.url_for(query)
        logger.debug("Replacing location with %s", url)
        self.navigator.replace(url)
        return url
