"""Windowed pagination: page slicing and ellipsis-compressed page indicators.

The page-indicator window keeps the first and last page permanently
visible and centres an inner window on the current page::

    >>> page_window(10, 20)
    [0, '…', 8, 9, 10, 11, 12, '…', 19]
    >>> page_window(1, 5)
    [0, 1, 2, 3, 4]
"""

import math
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

ELLIPSIS: str = "…"

_DEFAULT_PAGE_SIZE: int = 10
_DEFAULT_MAX_PAGE_BUTTONS: int = 7

PageItem = int | str


def page_count(row_count: int, page_size: int) -> int:
    """Number of pages for *row_count* rows; an empty grid still has one page."""
    return max(1, math.ceil(row_count / page_size))


def clamp_page_index(page_index: int, count: int) -> int:
    """Clamp *page_index* into ``[0, count - 1]``."""
    return max(0, min(page_index, count - 1))


def slice_page(rows: Sequence[T], page_index: int, page_size: int) -> list[T]:
    """Return the rows shown on page *page_index*."""
    start = page_index * page_size
    return list(rows[start:start + page_size])


def page_window(
    page_index: int,
    count: int,
    max_buttons: int = _DEFAULT_MAX_PAGE_BUTTONS,
) -> list[PageItem]:
    """Compute the bounded list of page indicators for navigation UI.

    Args:
        page_index: Current zero-based page.
        count: Total number of pages.
        max_buttons: Maximum number of numbered buttons.

    Returns:
        Page indices, with :data:`ELLIPSIS` markers wherever a gap exists
        between the pinned first/last page and the inner window.

    Raises:
        ValueError: If *max_buttons* is smaller than 3.
    """
    if max_buttons < 3:
        raise ValueError(f"max_buttons must be at least 3, got {max_buttons}")
    if count <= max_buttons:
        return list(range(count))

    last = count - 1
    window_size = max_buttons - 2
    start = max(1, min(page_index - window_size // 2, last - window_size))
    end = start + window_size - 1

    items: list[PageItem] = [0]
    if start > 1:
        items.append(ELLIPSIS)
    items.extend(range(start, end + 1))
    if end < last - 1:
        items.append(ELLIPSIS)
    items.append(last)
    return items


class Paginator:
    """Mutable pagination state with clamped navigation.

    Every navigation method returns ``True`` only when the page index
    actually changed.
    """

    def __init__(
        self,
        page_size: int = _DEFAULT_PAGE_SIZE,
        page_index: int = 0,
        row_count: int = 0,
    ) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.page_size = page_size
        self.row_count = row_count
        self.page_index = clamp_page_index(page_index, self.page_count)

    @property
    def page_count(self) -> int:
        return page_count(self.row_count, self.page_size)

    def can_previous_page(self) -> bool:
        return self.page_index > 0

    def can_next_page(self) -> bool:
        return self.page_index < self.page_count - 1

    def set_row_count(self, row_count: int) -> bool:
        """Record a new row count and re-clamp the page index."""
        self.row_count = row_count
        return self._move_to(self.page_index)

    def set_page_size(self, page_size: int) -> bool:
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.page_size = page_size
        return self._move_to(self.page_index)

    def set_page_index(self, page_index: int) -> bool:
        """Jump to *page_index* (clamped); a no-op on a single-page grid."""
        if self.page_count <= 1:
            return False
        return self._move_to(page_index)

    def next_page(self) -> bool:
        if not self.can_next_page():
            return False
        return self._move_to(self.page_index + 1)

    def previous_page(self) -> bool:
        if not self.can_previous_page():
            return False
        return self._move_to(self.page_index - 1)

    def window(self, max_buttons: int = _DEFAULT_MAX_PAGE_BUTTONS) -> list[PageItem]:
        return page_window(self.page_index, self.page_count, max_buttons)

    def slice(self, rows: Sequence[T]) -> list[T]:
        return slice_page(rows, self.page_index, self.page_size)

    def _move_to(self, page_index: int) -> bool:
        new_index = clamp_page_index(page_index, self.page_count)
        changed = new_index != self.page_index
        self.page_index = new_index
        return changed
