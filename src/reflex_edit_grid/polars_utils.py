"""Utilities for turning polars frames and data files into grid rows and columns."""

from pathlib import Path
from typing import Any

import polars as pl

from reflex_edit_grid.columns import Column, FnAccessor, KeyAccessor, patch_list_item
from reflex_edit_grid.engine import RowIdFn


def polars_dtype_to_grid_type(dtype: pl.DataType) -> str:
    """Map a polars DataType to the closest MUI DataGrid column type.

    Args:
        dtype: A polars data type.

    Returns:
        One of ``"string"``, ``"number"``, ``"boolean"``, ``"date"``,
        ``"dateTime"``.
    """
    if isinstance(dtype, pl.Boolean):
        return "boolean"
    if dtype.is_numeric():
        return "number"
    if isinstance(dtype, pl.Date):
        return "date"
    if isinstance(dtype, pl.Datetime):
        return "dateTime"
    return "string"


def _humanize_field_name(field: str) -> str:
    """Convert a snake_case or raw field name to a human-friendly header.

    Examples:
        ``"first_name"`` -> ``"First Name"``
        ``"age"`` -> ``"Age"``
    """
    return field.strip("_").replace("_", " ").title()


def _is_temporal_dtype(dtype: pl.DataType) -> bool:
    return isinstance(dtype, (pl.Date, pl.Datetime, pl.Time, pl.Duration))


def _first_item(field: str):
    def _get(row: dict[str, Any]) -> Any:
        items = row.get(field)
        return items[0] if items else None

    return _get


# ---------------------------------------------------------------------------
# File scanner
# ---------------------------------------------------------------------------

def scan_file(path: Path) -> pl.LazyFrame:
    """Scan a tabular data file into a ``LazyFrame``.

    Auto-detects the format from the extension:

    * ``.csv`` -- ``pl.scan_csv()``
    * ``.tsv`` -- ``pl.scan_csv(separator="\\t")``
    * ``.parquet`` / ``.pq`` -- ``pl.scan_parquet()``
    * ``.json`` -- ``pl.read_json().lazy()`` (no streaming scan)
    * ``.ndjson`` / ``.jsonl`` -- ``pl.scan_ndjson()``
    * ``.ipc`` / ``.arrow`` / ``.feather`` -- ``pl.scan_ipc()``

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file extension is not recognised.
    """
    path = Path(path).resolve()
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pl.scan_csv(path)
    if suffix == ".tsv":
        return pl.scan_csv(path, separator="\t")
    if suffix in (".parquet", ".pq"):
        return pl.scan_parquet(path)
    if suffix == ".json":
        return pl.read_json(path).lazy()
    if suffix in (".ndjson", ".jsonl"):
        return pl.scan_ndjson(path)
    if suffix in (".ipc", ".arrow", ".feather"):
        return pl.scan_ipc(path)

    raise ValueError(
        f"Unsupported file extension: {suffix!r}. "
        "Supported: .csv, .tsv, .parquet, .pq, .json, .ndjson, .jsonl, "
        ".ipc, .arrow, .feather"
    )


# ---------------------------------------------------------------------------
# Rows and columns
# ---------------------------------------------------------------------------

def _dataframe_to_dicts(df: pl.DataFrame) -> list[dict[str, Any]]:
    """Convert a DataFrame to a list of plain dicts suitable as grid rows.

    Temporal columns become ISO-8601 strings and struct columns are cast to
    String.  List columns stay Python lists so list-item patches can edit
    single elements.
    """
    exprs: list[pl.Expr] = []
    needs_cast = False
    for name, dtype in df.schema.items():
        if _is_temporal_dtype(dtype) or isinstance(dtype, pl.Struct):
            exprs.append(pl.col(name).cast(pl.String))
            needs_cast = True
        else:
            exprs.append(pl.col(name))

    if not needs_cast:
        return df.to_dicts()
    return df.select(exprs).to_dicts()


def build_columns_from_schema(
    schema: pl.Schema,
    *,
    editable: bool = True,
    id_field: str | None = None,
    show_id_field: bool = False,
    column_descriptions: dict[str, str] | None = None,
) -> list[Column]:
    """Infer grid :class:`Column` records from a polars schema.

    Temporal and struct columns are read-only.  List columns show their
    first element and edit it in place, keeping the other elements.

    Args:
        schema: A polars ``Schema`` (e.g. ``lf.collect_schema()``).
        editable: Make eligible columns editable.
        id_field: Column holding the row identity.  Excluded unless
            *show_id_field* is ``True``; never editable.
        show_id_field: Whether to include the *id_field* column.
        column_descriptions: Optional ``{column: description}`` mapping.
    """
    descriptions = column_descriptions or {}
    columns: list[Column] = []
    for col_name, dtype in schema.items():
        if col_name == id_field and not show_id_field:
            continue

        can_edit = (
            editable
            and col_name != id_field
            and not _is_temporal_dtype(dtype)
            and not isinstance(dtype, pl.Struct)
        )

        if isinstance(dtype, (pl.List, pl.Array)):
            columns.append(
                Column(
                    id=col_name,
                    header=_humanize_field_name(col_name),
                    accessor=FnAccessor(_first_item(col_name)),
                    editable=can_edit,
                    patch=patch_list_item(0),
                    description=descriptions.get(col_name),
                )
            )
            continue

        columns.append(
            Column(
                id=col_name,
                header=_humanize_field_name(col_name),
                accessor=KeyAccessor(col_name),
                editable=can_edit,
                description=descriptions.get(col_name),
            )
        )
    return columns


def frame_to_grid(
    data: pl.LazyFrame | pl.DataFrame,
    *,
    limit: int | None = None,
    editable: bool = True,
    id_field: str | None = None,
    show_id_field: bool = False,
    column_descriptions: dict[str, str] | None = None,
) -> tuple[list[dict[str, Any]], list[Column]]:
    """Collect a polars frame into grid rows and inferred columns.

    Args:
        data: A polars ``LazyFrame`` or ``DataFrame``.
        limit: Optional maximum number of rows to collect.
        editable: Make eligible columns editable.
        id_field: Column holding the row identity (see :func:`row_id_getter`).
        show_id_field: Whether to show the *id_field* column.
        column_descriptions: Optional ``{column: description}`` mapping.

    Returns:
        A ``(rows, columns)`` tuple ready for :class:`~reflex_edit_grid.engine.GridEngine`.
    """
    lf = data.lazy() if isinstance(data, pl.DataFrame) else data
    if limit is not None:
        lf = lf.head(limit)
    df = lf.collect()

    rows = _dataframe_to_dicts(df)
    columns = build_columns_from_schema(
        df.schema,
        editable=editable,
        id_field=id_field,
        show_id_field=show_id_field,
        column_descriptions=column_descriptions,
    )
    return rows, columns


def row_id_getter(field: str) -> RowIdFn:
    """Return a ``get_row_id`` function reading *field* from each row."""

    def _get(row: dict[str, Any], index: int) -> str:
        value = row.get(field)
        return str(index) if value is None else str(value)

    return _get
