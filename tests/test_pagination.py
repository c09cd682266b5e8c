"""Page-number window, showing range and pager controls."""

import pytest

from eduportal.schemas.list_query import ListQuery
from eduportal.schemas.pagination import ListResult, total_pages_for
from eduportal.services.pagination import ELLIPSIS, PageControls, page_numbers, showing_range


@pytest.mark.parametrize(
    "current,total,expected",
    [
        (1, 4, [1, 2, 3, 4]),
        (1, 10, [1, 2, 3, 4, ELLIPSIS, 10]),
        (5, 10, [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 10]),
        (10, 10, [1, ELLIPSIS, 7, 8, 9, 10]),
        (1, 0, []),
    ],
)
def test_page_numbers(current, total, expected):
    assert page_numbers(current, total) == expected


def test_showing_range():
    assert showing_range(20, 10, 95) == (21, 30)
    assert showing_range(90, 10, 95) == (91, 95)
    assert showing_range(0, 10, 0) == (0, 0)


def test_total_pages_never_below_one():
    assert total_pages_for(0, 10) == 1
    assert total_pages_for(95, 10) == 10
    assert total_pages_for(100, 10) == 10


def test_page_controls_mid_list():
    controls = PageControls.from_state(
        ListQuery(offset=20, page_size=10),
        ListResult(items=[{}] * 10, total_count=95, total_pages=10),
    )
    assert controls.current_page == 3
    assert controls.has_next and controls.has_prev
    assert (controls.first_row, controls.last_row) == (21, 30)
    assert controls.window() == [1, 2, 3, 4, ELLIPSIS, 10]


def test_page_controls_empty_result_disables_pager():
    controls = PageControls.from_state(ListQuery(), ListResult.empty())
    assert controls.disabled
    assert not controls.has_next
    assert not controls.has_prev
    assert controls.total_pages == 1
