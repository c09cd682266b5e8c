from eduportal.schemas.list_query import ALL, ActiveFilterDescriptor, FilterSpec, ListQuery, ListViewConfig
from eduportal.schemas.pagination import ListResult, PaginationStyle, total_pages_for

__all__ = [
    "ALL",
    "ActiveFilterDescriptor",
    "FilterSpec",
    "ListQuery",
    "ListResult",
    "ListViewConfig",
    "PaginationStyle",
    "total_pages_for",
]
