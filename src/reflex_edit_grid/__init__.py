"""reflex-edit-grid – editable, sortable, paginated data grid for Reflex.

The engine (:class:`GridEngine`) is plain Python: it keeps a local copy of
the rows, sorts and paginates them, and turns committed cell edits into row
patches plus a callback.  The Reflex layer (:class:`EditableGridMixin`,
:func:`editable_grid`) renders it through MUI X DataGrid::

    pip install reflex-edit-grid
"""

from reflex_edit_grid.columns import (
    Column,
    FnAccessor,
    KeyAccessor,
    default_patch,
    normalize_columns,
    patch_list_item,
)
from reflex_edit_grid.datagrid import DataGrid, DataGridNamespace, WrappedDataGrid, data_grid
from reflex_edit_grid.editing import CellEditController, CellUpdate
from reflex_edit_grid.engine import GridEngine, GridRow
from reflex_edit_grid.formatting import format_cell_value
from reflex_edit_grid.grid_state import (
    EditableGridMixin,
    editable_grid,
    editable_grid_detail_box,
    editable_grid_pager,
    editable_grid_stats_bar,
)
from reflex_edit_grid.models import ColumnDef, column_def_for
from reflex_edit_grid.pagination import ELLIPSIS, Paginator, page_count, page_window, slice_page
from reflex_edit_grid.polars_utils import (
    build_columns_from_schema,
    frame_to_grid,
    polars_dtype_to_grid_type,
    row_id_getter,
    scan_file,
)
from reflex_edit_grid.sorting import (
    Sort,
    compare_alphanumeric,
    from_sort_model,
    sort_rows,
    to_sort_model,
    toggle_sort,
)
from reflex_edit_grid.store import RowStore
