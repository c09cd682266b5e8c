"""Pager projection: page-number window, "Showing x-y of n" range, enabled/disabled controls."""

from pydantic import BaseModel

from eduportal.schemas.list_query import ListQuery
from eduportal.schemas.pagination import ListResult, total_pages_for

ELLIPSIS = "..."


def page_numbers(current: int, total: int, max_pages: int = 5) -> list[int | str]:
    """First page, neighbours of current, last page; gaps shown as "..."."""
    if total <= max_pages:
        return list(range(1, total + 1))
    pages: list[int | str] = [1]
    start = max(2, current - 1)
    end = min(total - 1, current + 1)
    if current <= 3:
        start, end = 2, 4
    if current >= total - 2:
        start, end = total - 3, total - 1
    if start > 2:
        pages.append(ELLIPSIS)
    pages.extend(range(start, end + 1))
    if end < total - 1:
        pages.append(ELLIPSIS)
    pages.append(total)
    return pages


def showing_range(offset: int, limit: int, count: int) -> tuple[int, int]:
    """1-based (first, last) row numbers on the current page; (0, 0) when there is nothing to show."""
    if count <= 0 or offset >= count:
        return 0, 0
    return offset + 1, min(offset + limit, count)


class PageControls(BaseModel):
    current_page: int
    total_pages: int
    total_count: int
    page_size: int
    has_next: bool
    has_prev: bool
    disabled: bool  # nothing to page through (empty or failed fetch)
    first_row: int
    last_row: int

    @classmethod
    def from_state(cls, query: ListQuery, result: ListResult) -> "PageControls":
        total_pages = max(result.total_pages, total_pages_for(result.total_count, query.page_size))
        first_row, last_row = showing_range(query.offset, query.page_size, result.total_count)
        disabled = result.total_count == 0
        return cls(
            current_page=query.page,
            total_pages=total_pages,
            total_count=result.total_count,
            page_size=query.page_size,
            has_next=not disabled and (bool(result.next_cursor) or query.offset + query.page_size < result.total_count),
            has_prev=not disabled and (bool(result.prev_cursor) or query.offset > 0),
            disabled=disabled,
            first_row=first_row,
            last_row=last_row,
        )

    def window(self, max_pages: int = 5) -> list[int | str]:
        return page_numbers(self.current_page, self.total_pages, max_pages)
