"""Client-side single-column sorting with a tri-state header toggle."""

import functools
import math
import numbers
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Literal, TypeVar

from reflex_edit_grid.columns import Column

T = TypeVar("T")

SortDirection = Literal["asc", "desc"]

_ALNUM_SPLIT = re.compile(r"([0-9]+)")


@dataclass(frozen=True)
class Sort:
    """The active sort: one column, one direction."""

    column_id: str
    direction: SortDirection = "asc"


def toggle_sort(current: Sort | None, column_id: str) -> Sort | None:
    """Advance the header toggle for *column_id*.

    The cycle is ``None -> asc -> desc -> None``.  Toggling a column other
    than the active one starts that column at ``asc`` and drops the previous
    sort.
    """
    if current is None or current.column_id != column_id:
        return Sort(column_id, "asc")
    if current.direction == "asc":
        return Sort(column_id, "desc")
    return None


# ---------------------------------------------------------------------------
# Alphanumeric comparison
# ---------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    return isinstance(value, (numbers.Real, Decimal)) and not isinstance(value, bool)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, Decimal):
        return value.is_nan()
    return isinstance(value, float) and math.isnan(value)


def alphanumeric_key(value: Any) -> tuple:
    """Sort key implementing the default alphanumeric ordering.

    * ``None`` / NaN sort below every defined value.
    * Real numbers (``int``, ``float``, ``Decimal``, ``Fraction``) compare
      numerically and sort before text.
    * Everything else is compared as case-folded text split into digit and
      non-digit chunks: digit chunks compare numerically (``"item2"`` <
      ``"item10"``) and a text chunk sorts before a digit chunk at the same
      position.
    """
    if _is_missing(value):
        return (0,)
    if _is_number(value):
        return (1, value)
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)
    chunks = tuple(
        (1, int(chunk), "") if chunk.isdigit() else (0, 0, chunk)
        for chunk in _ALNUM_SPLIT.split(text.casefold())
        if chunk
    )
    return (2, chunks)


def compare_alphanumeric(a: Any, b: Any) -> int:
    """Three-way comparison of two cell values using :func:`alphanumeric_key`."""
    ka, kb = alphanumeric_key(a), alphanumeric_key(b)
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0


def sort_rows(
    rows: Sequence[T],
    column: Column,
    direction: SortDirection,
    row_of: Callable[[T], Any] | None = None,
) -> list[T]:
    """Return a new list of *rows* stably sorted by *column*.

    Ties keep their input order in both directions.  *row_of* unwraps the
    record to read from when *rows* holds wrappers rather than raw rows.
    """
    if row_of is None:
        read = column.value
    else:
        read = lambda item: column.value(row_of(item))  # noqa: E731
    if column.comparator is not None:
        cmp = column.comparator
        key = functools.cmp_to_key(lambda a, b: cmp(read(a), read(b)))
    else:
        key = lambda item: alphanumeric_key(read(item))  # noqa: E731
    return sorted(rows, key=key, reverse=direction == "desc")


# ---------------------------------------------------------------------------
# MUI sort-model interop
# ---------------------------------------------------------------------------

def to_sort_model(sort: Sort | None) -> list[dict[str, str]]:
    """Convert to the MUI DataGrid ``sortModel`` shape."""
    if sort is None:
        return []
    return [{"field": sort.column_id, "sort": sort.direction}]


def from_sort_model(sort_model: Sequence[dict[str, Any]]) -> Sort | None:
    """Convert a MUI ``sortModel`` into a :class:`Sort` (first entry only).

    Raises:
        ValueError: If the entry's direction is not ``"asc"``/``"desc"``.
    """
    for entry in sort_model:
        field = entry.get("field")
        if not field:
            continue
        direction = entry.get("sort") or "asc"
        if direction not in ("asc", "desc"):
            raise ValueError(f"Unknown sort direction: {direction!r}")
        return Sort(str(field), direction)
    return None
