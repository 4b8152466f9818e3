"""Local row store: the working copy of the grid's rows.

Edits never touch the caller's collection.  Every mutation produces a new
tuple, so consumers can detect changes with an identity check
(``store.rows is not previous_rows``).
"""

from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class RowStore(Generic[T]):
    """Copy-on-write snapshot of the rows, seeded from an external collection."""

    def __init__(self, rows: Iterable[T] = ()) -> None:
        self._source: Any = rows
        self._rows: tuple[T, ...] = tuple(rows)
        self.revision: int = 0

    @property
    def rows(self) -> tuple[T, ...]:
        return self._rows

    @property
    def source(self) -> Any:
        """The external collection the store was last seeded from."""
        return self._source

    def __len__(self) -> int:
        return len(self._rows)

    def __getitem__(self, index: int) -> T:
        return self._rows[index]

    def in_bounds(self, index: int) -> bool:
        return 0 <= index < len(self._rows)

    def replace(self, rows: Iterable[T]) -> None:
        """Re-seed from *rows*, discarding every local edit."""
        self._source = rows
        self._rows = tuple(rows)
        self.revision += 1

    def patch_at(self, index: int, patch_fn: Callable[[T], T]) -> bool:
        """Replace the row at *index* with ``patch_fn(row)``.

        Returns ``False`` (and leaves the store untouched) when *index* is
        out of bounds.
        """
        if not self.in_bounds(index):
            return False
        rows = list(self._rows)
        rows[index] = patch_fn(rows[index])
        self._rows = tuple(rows)
        self.revision += 1
        return True

    def revert_at(self, index: int, patched: T, original: T) -> bool:
        """Put *original* back at *index* if the store still holds *patched* there.

        A later edit or a re-seed wins over the revert.
        """
        if not self.in_bounds(index) or self._rows[index] is not patched:
            return False
        return self.patch_at(index, lambda _row: original)
