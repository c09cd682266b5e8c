"""Shared pagination schemas for list views."""

from enum import Enum
from math import ceil
from typing import Any

from pydantic import BaseModel, Field


class PaginationStyle(str, Enum):
    PAGE = "page"  # ?page=&page_size=
    OFFSET = "offset"  # ?limit=&offset=


def total_pages_for(total_count: int, page_size: int) -> int:
    """ceil(total_count / page_size), never below 1."""
    if page_size <= 0 or total_count <= 0:
        return 1
    return max(1, ceil(total_count / page_size))


class ListResult(BaseModel):
    """One server answer. Replaced wholesale on every fetch, never patched."""

    items: list[Any] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)
    total_pages: int = Field(default=1, ge=1)
    next_cursor: str | None = None  # ready-made "next page" URL from the server
    prev_cursor: str | None = None

    @classmethod
    def empty(cls) -> "ListResult":
        return cls()
