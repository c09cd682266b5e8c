"""
List-view controller: filter/search/sort/page state -> one authoritative query -> gateway.

State machine: IDLE -> DEBOUNCING (search typing) -> FETCHING -> SETTLED | FAILED, cycling for
as long as the view is mounted. Filter, page, page-size and ordering changes go straight to
FETCHING; search changes wait for the debounce window. Every fetch carries a sequence number and
only the latest issued one may update the visible result (last-request-wins).
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Mapping

from eduportal.config import settings
from eduportal.core.auth import AuthContext
from eduportal.core.debounce import Debouncer
from eduportal.core.errors import AuthenticationError, PortalError, TransportError
from eduportal.schemas.list_query import ActiveFilterDescriptor, ListQuery, ListViewConfig
from eduportal.schemas.pagination import ListResult
from eduportal.services.list_gateway import ListOutcome, RemoteListGateway
from eduportal.services.pagination import PageControls
from eduportal.services.query_params import build_query_params
from eduportal.services.url_state import URLStateSync

logger = logging.getLogger(__name__)


class ControllerState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    FETCHING = "fetching"
    SETTLED = "settled"
    FAILED = "failed"


Listener = Callable[["ListQueryController"], None]


class ListQueryController:
    """One instance per mounted list view; never shared between views."""

    def __init__(
        self,
        config: ListViewConfig,
        gateway: RemoteListGateway | None = None,
        *,
        auth: AuthContext | None = None,
        scope: Mapping[str, Any] | None = None,
        initial_query: ListQuery | None = None,
        url_sync: URLStateSync | None = None,
        debounce_seconds: float | None = None,
    ):
        if config.requires_auth and auth is None:
            raise AuthenticationError("missing_token")
        self.config = config
        self.gateway = gateway or RemoteListGateway()
        self.auth = auth
        self.scope: dict[str, Any] = dict(scope or {})
        if config.user_scope_param and auth is not None:
            self.scope[config.user_scope_param] = auth.user_id
        self.url_sync = url_sync

        self._query = (initial_query or config.initial_query()).model_copy(deep=True)
        self._result = ListResult.empty()
        self._error: PortalError | None = None
        self._state = ControllerState.IDLE
        self._rest_state = ControllerState.IDLE
        self._seq = 0
        self._result_seq = 0
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[Listener] = []
        delay = settings.search_debounce_seconds if debounce_seconds is None else debounce_seconds
        self._debouncer = Debouncer(delay, self._on_search_settled)

    # -- read side -------------------------------------------------------

    @property
    def query(self) -> ListQuery:
        return self._query.model_copy(deep=True)

    @property
    def result(self) -> ListResult:
        return self._result

    @property
    def error(self) -> PortalError | None:
        return self._error

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def login_required(self) -> bool:
        return isinstance(self._error, AuthenticationError)

    def build_query_params(self) -> dict[str, Any]:
        return build_query_params(self.config, self._query, self.scope)

    def page_controls(self) -> PageControls:
        return PageControls.from_state(self._query, self._result)

    @property
    def has_active_filters(self) -> bool:
        if self._query.search_term:
            return True
        return any(
            not spec.is_unset(self._query.filters.get(spec.key, spec.sentinel)) for spec in self.config.filters
        )

    def active_filters(self) -> list[ActiveFilterDescriptor]:
        out: list[ActiveFilterDescriptor] = []
        for spec in self.config.filters:
            value = self._query.filters.get(spec.key, spec.sentinel)
            if spec.is_unset(value):
                continue
            out.append(
                ActiveFilterDescriptor(
                    key=spec.key,
                    label=spec.display(value),
                    remove=lambda key=spec.key: self.set_filter(key, None),
                )
            )
        if self._query.search_term:
            out.append(
                ActiveFilterDescriptor(
                    key="search",
                    label=f'Search: "{self._query.search_term}"',
                    remove=self.clear_search,
                )
            )
        return out

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener(controller) after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- mutations -------------------------------------------------------

    def set_search_term(self, raw: str) -> None:
        """Echo raw immediately; the debounced term follows after the quiet period."""
        self._query.search_term = raw
        self._debouncer.trigger(raw)
        self._set_state(ControllerState.DEBOUNCING)

    def clear_search(self) -> asyncio.Task | None:
        self._debouncer.cancel()
        changed = bool(self._query.debounced_search_term) or self._query.offset != 0
        self._query.search_term = ""
        self._query.debounced_search_term = ""
        self._query.offset = 0
        if not changed:
            self._settle_without_fetch()
            return None
        return self._schedule_fetch()

    def set_filter(self, key: str, value: Any) -> asyncio.Task | None:
        """Set one filter and go back to the first page. Unset values are stored as the sentinel."""
        spec = self.config.filter_spec(key)
        if spec.is_unset(value):
            value = spec.sentinel
        elif isinstance(value, tuple):
            value = list(value)
        current = self._query.filters.get(key, spec.sentinel)
        if current == value and self._query.offset == 0:
            return None
        self._query.filters[key] = value
        self._query.offset = 0
        return self._schedule_fetch()

    def set_ordering(self, value: str | None) -> asyncio.Task | None:
        ordering = self.config.resolve_ordering(value)
        if ordering == self._query.ordering and self._query.offset == 0:
            return None
        self._query.ordering = ordering
        self._query.offset = 0
        return self._schedule_fetch()

    def set_page(self, page: int) -> asyncio.Task | None:
        """Explicit page-number navigation; filters are kept."""
        return self.set_offset((max(1, page) - 1) * self._query.page_size)

    def set_offset(self, offset: int) -> asyncio.Task | None:
        offset = max(0, offset)
        if offset == self._query.offset:
            return None
        self._query.offset = offset
        return self._schedule_fetch()

    def set_page_size(self, page_size: int) -> asyncio.Task | None:
        if page_size not in self.config.page_size_options:
            raise ValueError(f"page size {page_size} is not one of {self.config.page_size_options}")
        if page_size == self._query.page_size and self._query.offset == 0:
            return None
        self._query.page_size = page_size
        self._query.offset = 0
        return self._schedule_fetch()

    def clear_all_filters(self) -> asyncio.Task | None:
        """Reset filters, search and page in one transition: at most one fetch."""
        self._debouncer.cancel()
        cleared = {spec.key: spec.sentinel for spec in self.config.filters}
        changed = (
            any(
                not spec.is_unset(self._query.filters.get(spec.key, spec.sentinel)) for spec in self.config.filters
            )
            or bool(self._query.debounced_search_term)
            or self._query.offset != 0
        )
        self._query.filters = cleared
        self._query.search_term = ""
        self._query.debounced_search_term = ""
        self._query.offset = 0
        if not changed:
            self._settle_without_fetch()
            return None
        return self._schedule_fetch()

    def next_page(self) -> asyncio.Task | None:
        size = self._query.page_size
        current = self._result_is_current()
        if current and self._result.next_cursor:
            self._query.offset += size
            return self._schedule_fetch(cursor=self._result.next_cursor)
        if current and self._query.offset + size >= self._result.total_count:
            return None
        self._query.offset += size
        return self._schedule_fetch()

    def previous_page(self) -> asyncio.Task | None:
        size = self._query.page_size
        if self._result_is_current() and self._result.prev_cursor:
            self._query.offset = max(0, self._query.offset - size)
            return self._schedule_fetch(cursor=self._result.prev_cursor)
        if self._query.offset == 0:
            return None
        self._query.offset = max(0, self._query.offset - size)
        return self._schedule_fetch()

    def refresh(self) -> asyncio.Task:
        """Re-issue the current query (first load, or after a create/update/delete)."""
        return self._schedule_fetch()

    async def wait_idle(self) -> None:
        """Wait for a pending debounce and every in-flight fetch."""
        while self._debouncer.pending or self._tasks:
            if self._tasks:
                await asyncio.gather(*list(self._tasks))
            else:
                await asyncio.sleep(0.01)

    async def close(self) -> None:
        """Unmount: stop the timer, drop in-flight results."""
        self._debouncer.cancel()
        self._seq += 1
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._listeners.clear()

    # -- internals -------------------------------------------------------

    def _result_is_current(self) -> bool:
        """Cursors and totals describe the current query only once its latest fetch has landed."""
        return self._result_seq == self._seq

    def _on_search_settled(self, value: str) -> None:
        if value.strip() == self._query.debounced_search_term.strip():
            self._settle_without_fetch()
            return
        self._query.debounced_search_term = value
        self._query.offset = 0
        self._schedule_fetch()

    def _settle_without_fetch(self) -> None:
        if self._state != ControllerState.DEBOUNCING:
            return
        self._set_state(ControllerState.FETCHING if self._tasks else self._rest_state)

    def _schedule_fetch(self, cursor: str | None = None) -> asyncio.Task:
        self._seq += 1
        seq = self._seq
        params = self.build_query_params()
        if self.url_sync is not None:
            self.url_sync.sync(self._query)
        self._set_state(ControllerState.FETCHING)
        task = asyncio.get_running_loop().create_task(self._run_fetch(seq, params, cursor, self._query.page_size))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_fetch(self, seq: int, params: dict[str, Any], cursor: str | None, page_size: int) -> None:
        try:
            outcome = await self.gateway.fetch_list(
                self.config.endpoint,
                params,
                cursor=cursor,
                page_size=page_size,
            )
        except Exception as e:
            logger.exception("List fetch for %s raised", self.config.name)
            outcome = ListOutcome.failure(TransportError(str(e) or "Request failed"))
        if seq != self._seq:
            logger.debug("Dropping stale %s response #%d (latest #%d)", self.config.name, seq, self._seq)
            return
        self._result = outcome.result
        self._result_seq = seq
        self._error = outcome.error
        self._rest_state = ControllerState.SETTLED if outcome.ok else ControllerState.FAILED
        if self._debouncer.pending:
            self._set_state(ControllerState.DEBOUNCING)
        else:
            self._set_state(self._rest_state)

    def _set_state(self, state: ControllerState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(self)
