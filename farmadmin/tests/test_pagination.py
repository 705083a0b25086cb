from __future__ import annotations

import pytest

from farmadmin.core.utils.pagination import MAX_PAGE, PageWindow, page_controls, parse_page_arg

pytestmark = pytest.mark.unit


def test_window_for_page():
    window = PageWindow.for_page(3, 50)

    assert window == PageWindow(limit=50, offset=100)
    assert window.page == 3


def test_window_for_page_clamps_to_first_page():
    assert PageWindow.for_page(0, 50).offset == 0


@pytest.mark.parametrize(
    "limit, offset",
    [(-1, 0), (5, -1), (True, 0), (2.0, 0), (None, 0), (2**63, 0), (10, 2**63)],
)
def test_window_rejects_bad_values(limit, offset):
    with pytest.raises(ValueError):
        PageWindow(limit=limit, offset=offset)


@pytest.mark.parametrize("raw, expected", [("2", 2), ("1", 1), ("0", 1), ("-3", 1), ("x", 1), (None, 1)])
def test_parse_page_arg(raw, expected):
    assert parse_page_arg(raw) == expected


def test_page_controls_middle_page():
    controls = page_controls(PageWindow(limit=10, offset=10), 25)

    assert controls["page"] == 2
    assert controls["pages"] == 3
    assert controls["has_prev"] and controls["has_next"]
    assert (controls["first_item"], controls["last_item"]) == (11, 20)


def test_page_controls_empty_listing():
    controls = page_controls(PageWindow(limit=50), 0)

    assert controls["pages"] == 1
    assert not controls["has_prev"] and not controls["has_next"]
    assert (controls["first_item"], controls["last_item"]) == (0, 0)


def test_parse_page_arg_caps_huge_numbers():
    assert parse_page_arg("99999999999999999999") == MAX_PAGE
    assert parse_page_arg(str(MAX_PAGE + 1)) == MAX_PAGE


def test_window_for_huge_page_stays_bounded():
    window = PageWindow.for_page(10**20, 50)

    assert window.offset == (MAX_PAGE - 1) * 50


def test_page_controls_window_past_the_end():
    controls = page_controls(PageWindow(limit=50, offset=200), 1)

    assert controls["page"] == 1
    assert controls["pages"] == 1
    assert not controls["has_prev"] and not controls["has_next"]
    assert (controls["first_item"], controls["last_item"]) == (0, 0)


def test_page_controls_past_the_end_of_multi_page_listing():
    controls = page_controls(PageWindow(limit=10, offset=90), 25)

    assert controls["page"] == 3
    assert controls["has_prev"] and not controls["has_next"]
    assert (controls["first_item"], controls["last_item"]) == (0, 0)
