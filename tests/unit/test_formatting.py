from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from reflex_edit_grid.formatting import draft_text, format_cell_value


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        ("hello", "hello"),
        ("2024-03-05", "2024-03-05"),
        ("2024-03-05T10:00:00Z", "05/03/2024"),
        ("2024-03-05T10:00:00", "05/03/2024"),
        ("Tuesday", "Tuesday"),
        (dt.date(2024, 3, 5), "05/03/2024"),
        (dt.datetime(2024, 12, 31, 23, 59), "31/12/2024"),
        (True, "true"),
        (False, "false"),
        (42, "42"),
        (3.5, "3.5"),
        (Decimal("1.50"), "1.50"),
        (["a"], ""),
        ({"a": 1}, ""),
    ],
)
def test_format_cell_value(value, expected):
    assert format_cell_value(value) == expected


def test_custom_date_format():
    assert format_cell_value(dt.date(2024, 3, 5), "%Y-%m-%d") == "2024-03-05"


def test_draft_text():
    assert draft_text(None) == ""
    assert draft_text(0) == "0"
    assert draft_text("x") == "x"
