"""Cell edit controller: per-cell drafts, commits and optimistic row patches.

Per-cell state machine::

    Idle --begin()--> Focused --update()*--> commit() --> Idle
                         \\--discard()------------------> Idle

A commit patches the :class:`~reflex_edit_grid.store.RowStore` first and
then notifies the ``on_cell_update`` callback with the *pre-patch* row.
The callback may return ``False`` to have the patch rolled back; any
exception it raises propagates to the caller and the patch stays.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from reflex_edit_grid.columns import Column, default_patch
from reflex_edit_grid.formatting import draft_text
from reflex_edit_grid.store import RowStore

CellKey = tuple[int, str]


@dataclass(frozen=True)
class CellUpdate:
    """Payload sent to ``on_cell_update`` for every committed edit.

    Attributes:
        original_row: The row as it was before the edit.
        row_index: Position of the row in the local row store.
        column_id: Id of the edited column.
        value: The raw committed draft text.
        row_id: The row's identity, when the grid knows it.
        patched_row: The row written into the store by the commit.
    """

    original_row: Any
    row_index: int
    column_id: str
    value: Any
    row_id: str | None = None
    patched_row: Any = None


CellUpdateCallback = Callable[[CellUpdate], Any]


class CellEditController:
    """Holds transient drafts for focused cells and commits them into a store."""

    def __init__(
        self,
        store: RowStore,
        columns: Mapping[str, Column],
        on_cell_update: CellUpdateCallback | None = None,
    ) -> None:
        self.store = store
        self.columns = dict(columns)
        self.on_cell_update = on_cell_update
        self._drafts: dict[CellKey, str] = {}

    @property
    def focused_cells(self) -> list[CellKey]:
        return list(self._drafts)

    def draft(self, row_index: int, column_id: str) -> str | None:
        return self._drafts.get((row_index, column_id))

    def begin(self, row_index: int, column_id: str) -> str | None:
        """Focus a cell and seed its draft from the current value.

        Returns the draft, or ``None`` when the column is not editable or
        the row does not exist.  Focusing an already focused cell keeps its
        draft.
        """
        column = self.columns.get(column_id)
        if column is None or not column.editable or not self.store.in_bounds(row_index):
            return None
        key = (row_index, column_id)
        if key not in self._drafts:
            self._drafts[key] = draft_text(column.value(self.store[row_index]))
        return self._drafts[key]

    def update(self, row_index: int, column_id: str, text: str) -> bool:
        """Replace the draft of a focused cell; ignored for unfocused cells."""
        key = (row_index, column_id)
        if key not in self._drafts:
            return False
        self._drafts[key] = text
        return True

    def discard(self, row_index: int, column_id: str) -> bool:
        """Drop a draft without side effects (e.g. the cell went away)."""
        return self._drafts.pop((row_index, column_id), None) is not None

    def discard_all(self) -> None:
        self._drafts.clear()

    def commit(
        self,
        row_index: int,
        column_id: str,
        row_id: str | None = None,
    ) -> CellUpdate | None:
        """Commit the draft of a focused cell.

        Applies the column's ``patch`` (or :func:`default_patch`) to the
        current row, stores the result, then invokes ``on_cell_update``.

        Returns:
            The :class:`CellUpdate` sent to the callback, or ``None`` when
            the cell had no draft or its row no longer exists.

        Raises:
            TypeError: If the row cannot be patched; the draft is kept.
        """
        key = (row_index, column_id)
        draft = self._drafts.get(key)
        if draft is None or not self.store.in_bounds(row_index):
            self._drafts.pop(key, None)
            return None

        column = self.columns[column_id]
        original = self.store[row_index]
        patch = column.patch or default_patch
        # A failing patch leaves the draft in place.
        patched = patch(original, draft, column_id)
        del self._drafts[key]
        self.store.patch_at(row_index, lambda _row: patched)

        update = CellUpdate(
            original_row=original,
            row_index=row_index,
            column_id=column_id,
            value=draft,
            row_id=row_id,
            patched_row=patched,
        )
        if self.on_cell_update is not None:
            result = self.on_cell_update(update)
            if result is False:
                self.rollback(update)
        return update

    def rollback(self, update: CellUpdate) -> bool:
        """Undo the optimistic patch of *update* if nothing replaced it since."""
        return self.store.revert_at(update.row_index, update.patched_row, update.original_row)
