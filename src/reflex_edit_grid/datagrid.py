"""Reflex wrapper for the MUI X DataGrid (v8) in engine-driven edit mode.

Sorting, pagination and edit commits are owned by the Python
:class:`~reflex_edit_grid.engine.GridEngine`.  The browser grid only
renders the current page, reports header sort clicks, and reports
finished cell edits.

The wrapper code (``EditableDataGrid``) is injected directly into Reflex's
compiled pages via ``add_imports()`` + ``add_custom_code()``, so the bare
``@mui/x-data-grid`` import resolves from ``.web/node_modules/`` even when
the package is pip-installed into another project.
"""

from typing import Any, Literal

import reflex as rx
from reflex.components.el import Div

from reflex_edit_grid.models import ColumnDef


# ---------------------------------------------------------------------------
# Event-handler argument helpers
# ---------------------------------------------------------------------------
# MUI DataGrid callback objects contain non-serializable references (api,
# column objects, DOM nodes, etc.). The helpers below create small arrow-function
# wrappers that strip those keys before the value is sent to the Python backend.

def _js_strip_keys(event_var: str, exclude_keys: list[str]) -> str:
    """Return JS expression that destructures *exclude_keys* away from *event_var*."""
    keys = ", ".join(exclude_keys)
    return f"let {{{keys}, ...rest}} = {event_var}; return rest"


def _arrow_callback(js_body: str) -> rx.Var:
    """Wrap *js_body* in an immediately-invoked arrow function."""
    return rx.Var(f"(() => {{{js_body}}})()")


# -- Row click: strip api, columns object, node, event, etc.
def _on_row_click_spec(event: rx.Var) -> list[rx.Var]:
    exclude = ["api", "columns", "node", "event"]
    return [_arrow_callback(_js_strip_keys(str(event), exclude))]


# -- Sort model change: the first arg is already a plain array
def _on_sort_model_change_spec(model: rx.Var) -> list[rx.Var]:
    return [model]


# -- Cell commit: plain { id, field, value } object built by the wrapper
def _on_cell_commit_spec(event: rx.Var) -> list[rx.Var]:
    return [event]


# ---------------------------------------------------------------------------
# Inline JS wrapper – injected into compiled pages via add_custom_code().
#
# MUI reports finished edits through ``processRowUpdate(newRow, oldRow)``,
# which must return the row to keep.  The wrapper diffs the two rows, emits
# one ``onCellCommit({id, field, value})`` per changed field, and returns
# ``oldRow``: the committed value reaches the screen only when the Python
# engine pushes the patched page back.
#
# The grid always receives exactly one page of rows, so MUI's own
# pagination is pinned to a single page and its footer is hidden.
# ---------------------------------------------------------------------------
_INLINE_WRAPPER_JS = """
const EditableDataGrid = React.forwardRef(function EditableDataGrid(props, ref) {
  const { onCellCommit, rowIdField, ...rest } = props;

  const rowIdOf = React.useCallback(
    (row) => (rowIdField ? row[rowIdField] : row.id),
    [rowIdField]
  );

  const processRowUpdate = React.useCallback(
    (newRow, oldRow) => {
      if (typeof onCellCommit === "function") {
        for (const field of Object.keys(newRow)) {
          if (field === rowIdField) continue;
          if (newRow[field] !== oldRow[field]) {
            onCellCommit({ id: String(rowIdOf(newRow)), field, value: newRow[field] });
          }
        }
      }
      return oldRow;
    },
    [onCellCommit, rowIdField, rowIdOf]
  );

  const rows = Array.isArray(rest.rows) ? rest.rows : [];
  const pageSize = Math.min(100, Math.max(1, rows.length));

  return React.createElement(
    "div",
    { style: { width: "100%", height: "100%" } },
    React.createElement(MuiDataGrid_, {
      ...rest,
      ref,
      getRowId: rowIdOf,
      processRowUpdate,
      onProcessRowUpdateError: (error) =>
        console.warn("[reflex-edit-grid] row update failed", error),
      sortingMode: "server",
      sortingOrder: ["asc", "desc", null],
      paginationMode: "server",
      paginationModel: { page: 0, pageSize },
      rowCount: rows.length,
      hideFooter: true,
      disableColumnFilter: true,
    })
  );
});
EditableDataGrid.displayName = "EditableDataGrid";
"""


# ---------------------------------------------------------------------------
# DataGrid component
# ---------------------------------------------------------------------------

class DataGrid(rx.Component):
    """Reflex wrapper for the MUI X DataGrid (Community, v8), engine-driven.

    Requires a parent container with explicit dimensions.
    Use ``WrappedDataGrid`` (or the ``data_grid`` namespace callable) for
    a version that automatically wraps itself in a sized ``<div>``.
    """

    library: str = "@mui/x-data-grid"
    tag: str = "EditableDataGrid"
    is_default: bool = False

    lib_dependencies: list[str] = [
        "@mui/material@^7.0.0",
        "@emotion/react@^11.14.0",
        "@emotion/styled@^11.14.0",
    ]

    @property
    def import_var(self) -> rx.ImportVar:
        """Override: install the npm package but do NOT emit an import for the tag.

        ``EditableDataGrid`` does not exist in ``@mui/x-data-grid`` -- it is
        defined by ``add_custom_code()``.
        """
        return rx.ImportVar(tag=None, render=False)

    def add_imports(self) -> dict:
        """Import the real MUI DataGrid under an alias, plus React."""
        return {
            "@mui/x-data-grid": [
                rx.ImportVar(tag="DataGrid", alias="MuiDataGrid_"),
            ],
            "react": [rx.ImportVar(tag="React", is_default=True)],
        }

    def add_custom_code(self) -> list[str]:
        """Inject the EditableDataGrid wrapper component into the compiled page."""
        return [_INLINE_WRAPPER_JS]

    # ---- data ----
    rows: rx.Var[list[dict[str, Any]]]
    columns: rx.Var[list[dict[str, Any]]]
    row_id_field: rx.Var[str]

    # ---- display ----
    loading: rx.Var[bool]
    density: rx.Var[Literal["comfortable", "compact", "standard"]]
    row_height: rx.Var[int]
    column_header_height: rx.Var[int]
    show_toolbar: rx.Var[bool]

    # ---- sorting ----
    sort_model: rx.Var[list[dict[str, Any]]]
    disable_column_sorting: rx.Var[bool]

    # ---- editing ----
    edit_mode: rx.Var[Literal["cell", "row"]]

    # ---- selection ----
    disable_row_selection_on_click: rx.Var[bool]

    # ---- event handlers ----
    on_row_click: rx.EventHandler[_on_row_click_spec]
    on_sort_model_change: rx.EventHandler[_on_sort_model_change_spec]
    on_cell_commit: rx.EventHandler[_on_cell_commit_spec]

    @classmethod
    def create(cls, *children: rx.Component, **props: Any) -> rx.Component:
        """Create a DataGrid component.

        Args:
            *children: Child components (typically unused).
            **props: All other DataGrid props.  ``row_id_field`` names the
                row key carrying the engine's row id.

        Returns:
            The DataGrid component.
        """
        props.setdefault("edit_mode", "cell")
        return super().create(*children, **props)


# ---------------------------------------------------------------------------
# WrappedDataGrid – auto-sized container
# ---------------------------------------------------------------------------

class WrappedDataGrid(DataGrid):
    """DataGrid wrapped in a ``<div>`` with explicit width / height.

    MUI DataGrid requires a parent container with explicit dimensions.
    This variant pops ``width`` and ``height`` from the props and applies
    them to an outer ``<div>``.
    """

    @classmethod
    def create(cls, *children: rx.Component, **props: Any) -> rx.Component:
        width = props.pop("width", "100%")
        height = props.pop("height", "480px")
        props.setdefault("disable_row_selection_on_click", True)
        return Div.create(
            super().create(*children, **props),
            width=width,
            height=height,
        )


# ---------------------------------------------------------------------------
# Namespace (so users can write ``data_grid(...)`` and ``data_grid.column_def``)
# ---------------------------------------------------------------------------

class DataGridNamespace(rx.ComponentNamespace):
    """Namespace for the editable DataGrid component family."""

    column_def = ColumnDef
    root = DataGrid.create
    __call__ = WrappedDataGrid.create


data_grid = DataGridNamespace()
