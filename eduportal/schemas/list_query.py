"""List view state (ListQuery) and the per-view configuration that shapes its outgoing params."""

from typing import Any, Callable

from pydantic import BaseModel, Field

from eduportal.schemas.pagination import PaginationStyle

ALL = "all"


class FilterSpec(BaseModel):
    """One filter control of a list view."""

    key: str
    param: str | None = None  # outgoing query param; defaults to key
    label: str = ""
    sentinel: Any = ALL  # value meaning "unset"; never sent
    choices: dict[str, str] = Field(default_factory=dict)  # value -> human label
    value_map: dict[str, Any] = Field(default_factory=dict)  # UI value -> outgoing value
    multiple: bool = False  # list value, sent comma-joined

    @property
    def param_name(self) -> str:
        return self.param or self.key

    def is_unset(self, value: Any) -> bool:
        if value is None or value == "" or value == self.sentinel:
            return True
        if isinstance(value, (list, tuple)) and not value:
            return True
        return False

    def to_param(self, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return ",".join(str(v) for v in value)
        return self.value_map.get(value, value) if isinstance(value, str) else value

    def from_url(self, raw: str) -> Any:
        """Address-bar text as a value of the sentinel's type; None if it does not parse."""
        if isinstance(self.sentinel, (int, float)) and not isinstance(self.sentinel, bool):
            try:
                return type(self.sentinel)(raw)
            except ValueError:
                return None
        return raw

    def display(self, value: Any) -> str:
        if isinstance(value, (list, tuple)):
            text = ", ".join(self.choices.get(str(v), str(v)) for v in value)
        else:
            text = self.choices.get(str(value), str(value))
        return f"{self.label}: {text}" if self.label else text


class ListViewConfig(BaseModel):
    """Static description of one list page: endpoint, pagination style, filters, search keys."""

    name: str
    endpoint: str
    path: str  # the view's own address, e.g. /courses/{course_id}/attendance
    pagination: PaginationStyle = PaginationStyle.PAGE
    page_size_options: list[int] = Field(default_factory=lambda: [5, 10, 20, 50])
    default_page_size: int = 10
    search_params: list[str] = Field(default_factory=lambda: ["search"])
    default_ordering: str | None = None
    sort_aliases: dict[str, str] = Field(default_factory=dict)  # e.g. newest -> -created_at
    filters: list[FilterSpec] = Field(default_factory=list)
    requires_auth: bool = True
    user_scope_param: str | None = None  # param that receives the signed-in user id (attendance: student)

    def filter_spec(self, key: str) -> FilterSpec:
        for spec in self.filters:
            if spec.key == key:
                return spec
        raise KeyError(f"Unknown filter {key!r} for view {self.name!r}")

    def resolve_ordering(self, value: str | None) -> str | None:
        if not value:
            return self.default_ordering
        return self.sort_aliases.get(value, value)

    def initial_query(self) -> "ListQuery":
        return ListQuery(
            filters={spec.key: spec.sentinel for spec in self.filters},
            ordering=self.default_ordering,
            page_size=self.default_page_size,
        )


class ListQuery(BaseModel):
    """
    Filter/search/sort/page state of one list view.
    Pagination is always stored as offset + page_size; page numbers are derived.
    """

    search_term: str = ""  # raw, echoed to the input immediately
    debounced_search_term: str = ""  # settled value that is actually sent
    filters: dict[str, Any] = Field(default_factory=dict)
    ordering: str | None = None
    offset: int = Field(default=0, ge=0)
    page_size: int = Field(default=10, gt=0)

    @property
    def page(self) -> int:
        return self.offset // self.page_size + 1


class ActiveFilterDescriptor(BaseModel):
    """Chip shown for a non-default filter; remove() clears just that filter."""

    key: str
    label: str
    remove: Callable[[], Any]
