"""Serialisable MUI X DataGrid column definitions."""

from typing import Literal

import reflex as rx
from reflex.components.props import PropsBase

from reflex_edit_grid.columns import Column


class ColumnDef(PropsBase):
    """Column definition for the MUI X DataGrid, maps to GridColDef.

    Attributes are automatically converted from snake_case to camelCase
    when serialized to JavaScript props via PropsBase.
    """

    field: str
    header_name: str | None = None
    width: int | None = None
    min_width: int | None = None
    flex: int | None = None
    type: Literal["string", "number", "date", "dateTime", "boolean", "singleSelect"] | None = None
    align: Literal["left", "center", "right"] | None = None
    header_align: Literal["left", "center", "right"] | None = None
    editable: bool | rx.Var[bool] = False
    sortable: bool | rx.Var[bool] = True
    filterable: bool | rx.Var[bool] = False
    resizable: bool | rx.Var[bool] = True
    description: str | None = None
    disable_column_menu: bool | rx.Var[bool] = True


def column_def_for(column: Column) -> ColumnDef:
    """Build the frontend definition of an engine :class:`Column`.

    Fixed-width columns do not flex; every other column shares the
    remaining width.
    """
    return ColumnDef(
        field=column.id,
        header_name=column.header,
        width=column.fixed_width,
        min_width=None if column.fixed_width else 120,
        flex=None if column.fixed_width else 1,
        type="string",
        editable=column.editable,
        sortable=column.sortable,
        description=column.description,
    )
