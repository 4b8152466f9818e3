"""Reusable editable grid: Reflex state mixin and UI helpers.

Users inherit from :class:`EditableGridMixin` **and** ``rx.State``, call
:meth:`~EditableGridMixin.set_grid` with rows and column descriptors, and
render with :func:`editable_grid`.

``EditableGridMixin`` is a Reflex **state mixin** (``mixin=True``).  Each
subclass gets its own independent set of ``eg_grid_*`` reactive
variables, so multiple grids on the same page do not interfere with each
other.

Sorting, pagination and inline edits run in a
:class:`~reflex_edit_grid.engine.GridEngine`; only the current page is
sent to the browser.

Typical usage::

    from reflex_edit_grid import EditableGridMixin, editable_grid

    class ContactsState(EditableGridMixin, rx.State):
        def load(self):
            self.set_grid(load_contacts(), CONTACT_COLUMNS, page_size=10)

        def on_eg_grid_cell_update(self, update):
            return save_contact(update.row_id, update.column_id, update.value)

    def index():
        return rx.cond(ContactsState.eg_grid_loaded, editable_grid(ContactsState))
"""

import time
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import reflex as rx

from reflex_edit_grid.columns import Column
from reflex_edit_grid.datagrid import data_grid
from reflex_edit_grid.editing import CellUpdate, CellUpdateCallback
from reflex_edit_grid.engine import GridEngine, RowIdFn
from reflex_edit_grid.models import column_def_for
from reflex_edit_grid.pagination import (
    _DEFAULT_MAX_PAGE_BUTTONS,
    _DEFAULT_PAGE_SIZE,
    ELLIPSIS,
)
from reflex_edit_grid.sorting import from_sort_model, to_sort_model


ROW_ID_FIELD: str = "__row_id__"


# ---------------------------------------------------------------------------
# Module-level engine registry
# ---------------------------------------------------------------------------
# Engines hold row objects and column callables, which cannot live inside
# ``rx.State``.  They are stored here keyed by state class name and client
# token: each browser session owns its rows and edits.

_engine_registry: dict[str, GridEngine] = {}


def engine_cache_id(state_name: str, client_token: str) -> str:
    """Registry key of the engine owned by one state class in one session."""
    return f"{state_name}:{client_token}" if client_token else state_name


def _get_engine(cache_id: str) -> GridEngine | None:
    """Return the engine registered for *cache_id*, if any."""
    return _engine_registry.get(cache_id)


def _drop_engine(cache_id: str) -> None:
    _engine_registry.pop(cache_id, None)


def apply_sort_model_change(engine: GridEngine, sort_model: list[dict[str, Any]]) -> bool:
    """Apply the sort model reported by the browser grid.

    The grid is controlled with ``sortingOrder=["asc", "desc", null]``, so a
    header click reports the next step of the ``none -> asc -> desc -> none``
    cycle and the column menu's "Unsort" reports an empty model.  The
    reported model is applied as-is; a sort on a non-sortable column clears
    the sort.

    Returns:
        Whether the engine's sort changed.
    """
    return engine.set_sort(from_sort_model(sort_model))


def apply_cell_commit(
    engine: GridEngine,
    params: dict[str, Any],
    on_update: CellUpdateCallback | None,
) -> CellUpdate | None:
    """Commit ``{"id": row_id, "field": column_id, "value": text}`` into *engine*.

    *on_update* becomes the engine's ``on_cell_update`` callback, so it can
    return ``False`` to roll the edit back.  Incomplete payloads are ignored.
    """
    row_id = params.get("id")
    field = params.get("field")
    if row_id is None or not field:
        return None
    value = params.get("value")
    text = "" if value is None else str(value)
    engine.on_cell_update = on_update
    return engine.edit_cell(str(row_id), str(field), text)


def clicked_row_id(params: dict[str, Any]) -> str | None:
    """Row id of a row-click payload: ``row.__row_id__``, else the grid's ``id``."""
    row = params.get("row") or {}
    row_id = row.get(ROW_ID_FIELD, params.get("id"))
    return None if row_id is None else str(row_id)


def page_rows_to_dicts(engine: GridEngine) -> list[dict[str, Any]]:
    """Serialise the engine's current page into JSON-safe row dicts.

    Each dict carries the row id under ``__row_id__`` and one display value
    per column.  Cell renderers must therefore return JSON-safe values.
    """
    rows: list[dict[str, Any]] = []
    for grid_row in engine.visible_rows():
        row: dict[str, Any] = {ROW_ID_FIELD: grid_row.id}
        for column in engine.columns:
            row[column.id] = engine.display_value(grid_row.original, column.id)
        rows.append(row)
    return rows


def page_items_to_dicts(engine: GridEngine) -> list[dict[str, Any]]:
    """Serialise the page window into dicts for ``rx.foreach``."""
    items: list[dict[str, Any]] = []
    for position, item in enumerate(engine.page_items()):
        if item == ELLIPSIS:
            items.append({
                "key": f"gap-{position}",
                "label": ELLIPSIS,
                "index": -1,
                "ellipsis": True,
                "active": False,
            })
        else:
            items.append({
                "key": f"page-{item}",
                "label": str(int(item) + 1),
                "index": int(item),
                "ellipsis": False,
                "active": item == engine.page_index,
            })
    return items


# ---------------------------------------------------------------------------
# EditableGridMixin
# ---------------------------------------------------------------------------

class EditableGridMixin(rx.State, mixin=True):
    """Reflex State mixin for engine-backed editable grids.

    Inherit from this class **and** ``rx.State`` to get state variables and
    event handlers for client-side sorting, windowed pagination and inline
    cell editing.

    Subclasses hook into the grid by overriding:

    * :meth:`on_eg_grid_cell_update` -- persist a committed edit.  Return
      ``False`` to roll the optimistic patch back.
    * :meth:`on_eg_grid_row_activate` -- react to a row click.

    All state variable names are prefixed with ``eg_grid_`` to avoid
    collisions when composed with other state.
    """

    # -- Frontend state vars --
    eg_grid_rows: list[dict[str, Any]] = []
    eg_grid_columns: list[dict[str, Any]] = []
    eg_grid_row_count: int = 0
    eg_grid_page_index: int = 0
    eg_grid_page_count: int = 1
    eg_grid_page_items: list[dict[str, Any]] = []
    eg_grid_can_previous: bool = False
    eg_grid_can_next: bool = False
    eg_grid_sort_model: list[dict[str, str]] = []
    eg_grid_loaded: bool = False
    eg_grid_stats: str = ""
    eg_grid_selected_info: str = "Click a row to see details."

    # -- Backend-only vars (not sent to frontend) --
    _eg_grid_cache_id: str = ""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_grid(
        self,
        data: Iterable[Any],
        columns: Sequence[Column | Mapping[str, Any]],
        *,
        page_size: int = _DEFAULT_PAGE_SIZE,
        initial_page_index: int = 0,
        get_row_id: RowIdFn | None = None,
        max_page_buttons: int = _DEFAULT_MAX_PAGE_BUTTONS,
    ) -> None:
        """Create the grid engine for this state and render its first page.

        Args:
            data: Source rows.
            columns: Column descriptors (``Column`` records or mappings).
            page_size: Rows per page.
            initial_page_index: Starting page (clamped).
            get_row_id: Optional ``(row, index) -> str`` identity function.
                Strongly recommended whenever rows can be re-ordered while
                an edit is in flight.
            max_page_buttons: Maximum numbered buttons in the pager.
        """
        cache_id = engine_cache_id(type(self).__name__, self.router.session.client_token)
        previous = self._eg_grid_cache_id
        if previous and previous != cache_id:
            _drop_engine(previous)
        self._eg_grid_cache_id = cache_id  # type: ignore[assignment]

        engine = GridEngine(
            data,
            columns,
            page_size=page_size,
            initial_page_index=initial_page_index,
            get_row_id=get_row_id,
            max_page_buttons=max_page_buttons,
        )
        _engine_registry[cache_id] = engine

        self.eg_grid_columns = [column_def_for(c).dict() for c in engine.columns]  # type: ignore[assignment]
        self.eg_grid_loaded = True  # type: ignore[assignment]
        self._refresh_eg_grid("init")

    def clear_grid(self) -> None:
        """Release this session's engine and reset the grid vars."""
        if self._eg_grid_cache_id:
            _drop_engine(self._eg_grid_cache_id)
        self._eg_grid_cache_id = ""  # type: ignore[assignment]
        self.eg_grid_rows = []  # type: ignore[assignment]
        self.eg_grid_columns = []  # type: ignore[assignment]
        self.eg_grid_page_items = []  # type: ignore[assignment]
        self.eg_grid_sort_model = []  # type: ignore[assignment]
        self.eg_grid_row_count = 0  # type: ignore[assignment]
        self.eg_grid_loaded = False  # type: ignore[assignment]

    def set_grid_data(self, data: Iterable[Any]) -> None:
        """Replace the source rows (e.g. after a refetch); drops local edits."""
        engine = self._eg_grid_engine()
        if engine is None:
            return
        if engine.set_data(data):
            self._refresh_eg_grid("data")

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def on_eg_grid_cell_update(self, update: CellUpdate) -> bool | None:
        """Called after every committed edit; override to persist it.

        Returns:
            ``False`` to roll the optimistic patch back; anything else keeps it.
        """
        return None

    def on_eg_grid_row_activate(self, row_index: int, row: Any) -> None:
        """Called on row click with the row's store index; shows its cells by default."""
        engine = self._eg_grid_engine()
        if engine is None:
            return
        lines = [
            f"{column.header}: {engine.display_value(row, column.id)}"
            for column in engine.columns
        ]
        self.eg_grid_selected_info = "\n".join(lines)  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def handle_eg_grid_sort(self, sort_model: list[dict[str, Any]]) -> None:
        """Handle a header sort click or a column-menu sort action."""
        engine = self._eg_grid_engine()
        if engine is None:
            return
        apply_sort_model_change(engine, sort_model)
        # Always echo the engine sort back to the controlled grid.
        self._refresh_eg_grid("sort")

    def handle_eg_grid_page(self, page_index: int) -> None:
        """Jump to a page from the pager buttons."""
        engine = self._eg_grid_engine()
        if engine is None:
            return
        if engine.set_page_index(int(page_index)):
            self._refresh_eg_grid("page")

    def next_eg_grid_page(self) -> None:
        engine = self._eg_grid_engine()
        if engine is not None and engine.next_page():
            self._refresh_eg_grid("page")

    def previous_eg_grid_page(self) -> None:
        engine = self._eg_grid_engine()
        if engine is not None and engine.previous_page():
            self._refresh_eg_grid("page")

    def handle_eg_grid_cell_commit(self, params: dict[str, Any]) -> None:
        """Commit a finished cell edit reported by the browser grid.

        *params* is ``{"id": row_id, "field": column_id, "value": text}``.
        """
        engine = self._eg_grid_engine()
        if engine is None:
            return
        t0 = time.perf_counter()
        update = apply_cell_commit(engine, params, self.on_eg_grid_cell_update)
        elapsed_ms = (time.perf_counter() - t0) * 1000
        if update is None:
            return
        print(
            f"[EditableGrid] cell commit: row={update.row_id}, "
            f"column={update.column_id}, elapsed={elapsed_ms:.1f}ms"
        )
        self._refresh_eg_grid("edit")

    def handle_eg_grid_row_click(self, params: dict[str, Any]) -> None:
        """Handle row click -- resolve the row and call the activation hook."""
        engine = self._eg_grid_engine()
        if engine is None:
            return
        row_id = clicked_row_id(params)
        if row_id is None:
            return
        engine.on_row_activate = lambda index: self.on_eg_grid_row_activate(
            index, engine.rows[index]
        )
        engine.activate_row(row_id)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _eg_grid_engine(self) -> GridEngine | None:
        cache_id = self._eg_grid_cache_id
        if not cache_id:
            return None
        return _get_engine(cache_id)

    def _refresh_eg_grid(self, reason: str) -> None:
        """Push the engine's current page, pager and sort state to the frontend."""
        engine = self._eg_grid_engine()
        if engine is None:
            return

        t0 = time.perf_counter()
        self.eg_grid_rows = page_rows_to_dicts(engine)  # type: ignore[assignment]
        self.eg_grid_row_count = engine.row_count  # type: ignore[assignment]
        self.eg_grid_page_index = engine.page_index  # type: ignore[assignment]
        self.eg_grid_page_count = engine.page_count  # type: ignore[assignment]
        self.eg_grid_page_items = page_items_to_dicts(engine)  # type: ignore[assignment]
        self.eg_grid_can_previous = engine.can_previous_page()  # type: ignore[assignment]
        self.eg_grid_can_next = engine.can_next_page()  # type: ignore[assignment]
        self.eg_grid_sort_model = to_sort_model(engine.sort)  # type: ignore[assignment]

        elapsed_ms = (time.perf_counter() - t0) * 1000
        sort_text = (
            f"{engine.sort.column_id} {engine.sort.direction}" if engine.sort else "none"
        )
        self.eg_grid_stats = (  # type: ignore[assignment]
            f"page {engine.page_index + 1}/{engine.page_count}  "
            f"rows={engine.row_count:,}  sort={sort_text}  {elapsed_ms:.0f}ms"
        )
        print(
            f"[EditableGrid] refresh ({reason}): page={engine.page_index}, "
            f"slice={len(self.eg_grid_rows)}, rows={engine.row_count}, "
            f"elapsed={elapsed_ms:.1f}ms"
        )


# ---------------------------------------------------------------------------
# UI helpers
# ---------------------------------------------------------------------------

def editable_grid(
    state_cls: type,
    *,
    height: str = "480px",
    width: str = "100%",
    density: str = "standard",
    show_pager: bool = True,
    on_row_click: Any = None,
    **extra_props: Any,
) -> rx.Component:
    """Return a pre-wired ``data_grid(...)`` bound to an :class:`EditableGridMixin` state.

    Args:
        state_cls: The ``rx.State`` subclass that also inherits from
            :class:`EditableGridMixin`.
        height: CSS height of the grid container.
        width: CSS width of the grid container.
        density: Grid density (``"comfortable"``, ``"compact"``, ``"standard"``).
        show_pager: Render :func:`editable_grid_pager` below the grid.
        on_row_click: Override the default row-click handler.  If ``None``,
            uses the mixin's ``handle_eg_grid_row_click``.
        **extra_props: Additional props forwarded to ``data_grid()``.

    Returns:
        A Reflex component (the grid, optionally followed by the pager).
    """
    if on_row_click is None:
        on_row_click = state_cls.handle_eg_grid_row_click

    grid = data_grid(
        rows=state_cls.eg_grid_rows,
        columns=state_cls.eg_grid_columns,
        row_id_field=ROW_ID_FIELD,
        sort_model=state_cls.eg_grid_sort_model,
        density=density,
        on_sort_model_change=state_cls.handle_eg_grid_sort,
        on_cell_commit=state_cls.handle_eg_grid_cell_commit,
        on_row_click=on_row_click,
        height=height,
        width=width,
        **extra_props,
    )

    if not show_pager:
        return grid

    return rx.fragment(grid, editable_grid_pager(state_cls))


def _pager_item(state_cls: type, item: rx.Var) -> rx.Component:
    return rx.cond(
        item["ellipsis"],
        rx.text(ELLIPSIS, size="2", weight="bold", color="var(--gray-9)", padding_x="0.4em"),
        rx.button(
            item["label"],
            size="1",
            variant=rx.cond(item["active"], "solid", "outline"),
            disabled=state_cls.eg_grid_page_count <= 1,
            on_click=state_cls.handle_eg_grid_page(item["index"]),
        ),
    )


def editable_grid_pager(state_cls: type) -> rx.Component:
    """Return the Previous / page window / Next navigation bar.

    Args:
        state_cls: The ``rx.State`` subclass that inherits from
            :class:`EditableGridMixin`.

    Returns:
        A Reflex component.
    """
    return rx.hstack(
        rx.button(
            "Previous",
            size="1",
            variant="outline",
            disabled=~state_cls.eg_grid_can_previous,
            on_click=state_cls.previous_eg_grid_page,
        ),
        rx.hstack(
            rx.foreach(
                state_cls.eg_grid_page_items,
                lambda item: _pager_item(state_cls, item),
            ),
            spacing="1",
            align="center",
            justify="center",
            flex="1",
            wrap="wrap",
        ),
        rx.button(
            "Next",
            size="1",
            variant="outline",
            disabled=~state_cls.eg_grid_can_next,
            on_click=state_cls.next_eg_grid_page,
        ),
        align="center",
        spacing="2",
        width="100%",
        margin_top="0.6em",
    )


def editable_grid_stats_bar(state_cls: type) -> rx.Component:
    """Return a stats bar showing the row count and the last refresh info.

    Args:
        state_cls: The ``rx.State`` subclass that inherits from
            :class:`EditableGridMixin`.

    Returns:
        A Reflex component.
    """
    return rx.box(
        rx.hstack(
            rx.text(
                state_cls.eg_grid_row_count.to(str),  # type: ignore[union-attr]
                " rows",
                size="2",
                weight="medium",
            ),
            rx.text("|", size="2", color="var(--gray-7)"),
            rx.text(
                state_cls.eg_grid_stats,
                size="1",
                color="var(--gray-9)",
                font_family="monospace",
            ),
            spacing="2",
            align="center",
        ),
        padding="0.4em 0.8em",
        border_radius="6px",
        background="var(--blue-a2)",
        border="1px solid var(--blue-a5)",
        margin_bottom="0.5em",
    )


def editable_grid_detail_box(state_cls: type) -> rx.Component:
    """Return a detail box showing the activated row's cells.

    Args:
        state_cls: The ``rx.State`` subclass that inherits from
            :class:`EditableGridMixin`.

    Returns:
        A Reflex component.
    """
    return rx.box(
        rx.text(
            state_cls.eg_grid_selected_info,
            white_space="pre-wrap",
            size="2",
        ),
        margin_top="1em",
        padding="1em",
        border_radius="8px",
        background="var(--gray-a3)",
    )
