"""The grid engine: local rows, sorting, pagination and inline editing.

:class:`GridEngine` is framework-free.  It never performs I/O; it only
holds in-memory state and invokes the callbacks it was given.  UI layers
(see :mod:`reflex_edit_grid.grid_state`) call its methods in response to
discrete user interactions and render :meth:`GridEngine.visible_rows`.

Typical usage::

    engine = GridEngine(
        contacts,
        [
            {"accessor_key": "name", "header": "Name", "editable": True},
            {"accessor_key": "city", "header": "City", "editable": True},
        ],
        page_size=10,
        get_row_id=lambda row, index: str(row["id"]),
        on_cell_update=save_contact,
    )
    engine.toggle_sort("name")
    engine.begin_edit("42", "city")
    engine.update_draft("42", "city", "Paris")
    engine.commit_edit("42", "city")
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from reflex_edit_grid.columns import Column, normalize_columns
from reflex_edit_grid.editing import CellEditController, CellUpdate, CellUpdateCallback
from reflex_edit_grid.formatting import draft_text, format_cell_value
from reflex_edit_grid.pagination import (
    _DEFAULT_MAX_PAGE_BUTTONS,
    _DEFAULT_PAGE_SIZE,
    PageItem,
    Paginator,
    page_window,
)
from reflex_edit_grid.sorting import Sort, SortDirection, sort_rows, toggle_sort
from reflex_edit_grid.store import RowStore

T = TypeVar("T")

RowIdFn = Callable[[Any, int], str]


@dataclass(frozen=True)
class GridRow(Generic[T]):
    """A row as seen by the UI.

    Attributes:
        id: Row identity (``get_row_id(row, index)`` or ``str(index)``).
        index: Position of the row in the local row store.
        original: The row record itself.
    """

    id: str
    index: int
    original: T


class GridEngine(Generic[T]):
    """Client-side grid over an arbitrary row collection.

    Args:
        data: Source rows.  Passing a different object to :meth:`set_data`
            re-seeds the local copy.
        columns: Column descriptors (see :func:`normalize_columns`).
        page_size: Rows per page.
        initial_page_index: Starting page (clamped).
        get_row_id: Optional ``(row, index) -> str`` identity function.
            Without it, identity is the row's position in the local store.
        on_cell_update: Called with a :class:`CellUpdate` after every
            committed edit.  Returning ``False`` rolls the edit back.
        on_row_activate: Called with the store index of an activated row.
        on_page_change: Called with the new page index whenever it changes
            through navigation.
        max_page_buttons: Maximum numbered buttons in :meth:`page_items`.
    """

    def __init__(
        self,
        data: Iterable[T],
        columns: Sequence[Column | Mapping[str, Any]],
        *,
        page_size: int = _DEFAULT_PAGE_SIZE,
        initial_page_index: int = 0,
        get_row_id: RowIdFn | None = None,
        on_cell_update: CellUpdateCallback | None = None,
        on_row_activate: Callable[[int], Any] | None = None,
        on_page_change: Callable[[int], Any] | None = None,
        max_page_buttons: int = _DEFAULT_MAX_PAGE_BUTTONS,
    ) -> None:
        if max_page_buttons < 3:
            raise ValueError(f"max_page_buttons must be at least 3, got {max_page_buttons}")
        self.store: RowStore[T] = RowStore(data)
        self._columns: list[Column] = normalize_columns(columns)
        self._columns_by_id: dict[str, Column] = {c.id: c for c in self._columns}
        self.paginator = Paginator(page_size, initial_page_index, len(self.store))
        self.sort: Sort | None = None
        self.get_row_id = get_row_id
        self.on_row_activate = on_row_activate
        self.on_page_change = on_page_change
        self.max_page_buttons = max_page_buttons
        self.editor = CellEditController(self.store, self._columns_by_id, on_cell_update)

    # ------------------------------------------------------------------
    # Props
    # ------------------------------------------------------------------

    @property
    def columns(self) -> list[Column]:
        return list(self._columns)

    @property
    def rows(self) -> tuple[T, ...]:
        """The local (possibly edited) rows in input order."""
        return self.store.rows

    @property
    def on_cell_update(self) -> CellUpdateCallback | None:
        return self.editor.on_cell_update

    @on_cell_update.setter
    def on_cell_update(self, callback: CellUpdateCallback | None) -> None:
        self.editor.on_cell_update = callback

    def column(self, column_id: str) -> Column | None:
        return self._columns_by_id.get(column_id)

    def set_data(self, data: Iterable[T]) -> bool:
        """Re-seed the local rows when *data* is a new collection.

        Identity is what counts: the same object is ignored, an equal but
        distinct one replaces the store.  Drafts are discarded, the sort is
        kept and the page index is re-clamped.
        """
        if data is self.store.source:
            return False
        self.store.replace(data)
        self.editor.discard_all()
        self.paginator.set_row_count(len(self.store))
        return True

    def set_columns(self, columns: Sequence[Column | Mapping[str, Any]]) -> None:
        """Swap the column set, dropping drafts and a sort on a vanished column."""
        self._columns = normalize_columns(columns)
        self._columns_by_id = {c.id: c for c in self._columns}
        self.editor.columns = dict(self._columns_by_id)
        self.editor.discard_all()
        if self.sort is not None and self.sort.column_id not in self._columns_by_id:
            self.sort = None

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def row_id(self, index: int) -> str:
        if self.get_row_id is not None:
            return str(self.get_row_id(self.store[index], index))
        return str(index)

    def row_index(self, row_id: str) -> int | None:
        """Resolve *row_id* to its current store index."""
        if self.get_row_id is None:
            try:
                index = int(row_id)
            except (TypeError, ValueError):
                return None
            return index if self.store.in_bounds(index) else None
        for index, row in enumerate(self.store.rows):
            if str(self.get_row_id(row, index)) == str(row_id):
                return index
        return None

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    def can_sort(self, column_id: str) -> bool:
        column = self._columns_by_id.get(column_id)
        return column is not None and column.sortable

    def toggle_sort(self, column_id: str) -> Sort | None:
        """Header interaction: cycle ``None -> asc -> desc -> None``.

        Non-sortable or unknown columns are ignored.  A sort change returns
        to the first page.
        """
        if not self.can_sort(column_id):
            return self.sort
        self.sort = toggle_sort(self.sort, column_id)
        self.set_page_index(0)
        return self.sort

    def set_sort(self, sort: Sort | None) -> bool:
        """Set the sort directly; a sort on a non-sortable column clears it.

        Returns whether the sort changed.  A change returns to the first page.
        """
        if sort is not None and not self.can_sort(sort.column_id):
            sort = None
        if sort == self.sort:
            return False
        self.sort = sort
        self.set_page_index(0)
        return True

    def sort_indicator(self, column_id: str) -> SortDirection | None:
        if self.sort is not None and self.sort.column_id == column_id:
            return self.sort.direction
        return None

    def sorted_rows(self) -> list[GridRow[T]]:
        """All rows in view order."""
        rows = [GridRow(self.row_id(i), i, row) for i, row in enumerate(self.store.rows)]
        if self.sort is None:
            return rows
        column = self._columns_by_id[self.sort.column_id]
        return sort_rows(rows, column, self.sort.direction, row_of=lambda r: r.original)

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    @property
    def page_index(self) -> int:
        return self.paginator.page_index

    @property
    def page_size(self) -> int:
        return self.paginator.page_size

    @property
    def page_count(self) -> int:
        return self.paginator.page_count

    @property
    def row_count(self) -> int:
        return len(self.store)

    def visible_rows(self) -> list[GridRow[T]]:
        return self.paginator.slice(self.sorted_rows())

    def page_items(self) -> list[PageItem]:
        return page_window(self.page_index, self.page_count, self.max_page_buttons)

    def can_previous_page(self) -> bool:
        return self.paginator.can_previous_page()

    def can_next_page(self) -> bool:
        return self.paginator.can_next_page()

    def next_page(self) -> bool:
        return self._notify_page(self.paginator.next_page())

    def previous_page(self) -> bool:
        return self._notify_page(self.paginator.previous_page())

    def set_page_index(self, page_index: int) -> bool:
        return self._notify_page(self.paginator.set_page_index(page_index))

    def set_page_size(self, page_size: int) -> bool:
        return self._notify_page(self.paginator.set_page_size(page_size))

    def _notify_page(self, changed: bool) -> bool:
        if changed and self.on_page_change is not None:
            self.on_page_change(self.page_index)
        return changed

    # ------------------------------------------------------------------
    # Cells
    # ------------------------------------------------------------------

    def cell_value(self, row: T, column_id: str) -> Any:
        column = self._columns_by_id.get(column_id)
        return column.value(row) if column is not None else None

    def display_value(self, row: T, column_id: str) -> Any:
        """What a cell shows when it is not being edited."""
        column = self._columns_by_id.get(column_id)
        if column is None:
            return ""
        value = column.value(row)
        if column.editable:
            return draft_text(value)
        if column.cell_renderer is not None:
            return column.cell_renderer(value, row)
        return format_cell_value(value)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def begin_edit(self, row_id: str, column_id: str) -> str | None:
        index = self.row_index(row_id)
        if index is None:
            return None
        return self.editor.begin(index, column_id)

    def draft(self, row_id: str, column_id: str) -> str | None:
        index = self.row_index(row_id)
        if index is None:
            return None
        return self.editor.draft(index, column_id)

    def update_draft(self, row_id: str, column_id: str, text: str) -> bool:
        index = self.row_index(row_id)
        if index is None:
            return False
        return self.editor.update(index, column_id, text)

    def cancel_edit(self, row_id: str, column_id: str) -> bool:
        index = self.row_index(row_id)
        if index is None:
            return False
        return self.editor.discard(index, column_id)

    def commit_edit(self, row_id: str, column_id: str) -> CellUpdate | None:
        """Commit the focused cell's draft (on blur or submit)."""
        index = self.row_index(row_id)
        if index is None:
            return None
        return self.editor.commit(index, column_id, row_id=str(row_id))

    def edit_cell(self, row_id: str, column_id: str, text: str) -> CellUpdate | None:
        """Focus, type and commit in one step, for UIs that report finished edits."""
        if self.begin_edit(row_id, column_id) is None:
            return None
        self.update_draft(row_id, column_id, text)
        return self.commit_edit(row_id, column_id)

    def revert(self, update: CellUpdate) -> bool:
        """Roll back the optimistic patch of a committed edit."""
        return self.editor.rollback(update)

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def activate_row(self, row_id: str) -> bool:
        """Row click / activation: notify ``on_row_activate`` with the store index."""
        index = self.row_index(row_id)
        if index is None:
            return False
        if self.on_row_activate is not None:
            self.on_row_activate(index)
        return True

