"""Example Reflex app demonstrating the editable grid.

Two tabs:
  1. Contacts -- hand-written column descriptors over plain dicts.  The
     phone column edits the first entry of a ``phones`` list through a
     custom patch, and blank names are rejected (the edit rolls back).
  2. Employees -- columns inferred from a polars ``LazyFrame`` with
     ``frame_to_grid``; dates stay read-only.

Run from ``examples/grid_demo/`` with ``reflex run``.
"""

import datetime as dt
from typing import Any

import polars as pl
import reflex as rx

from reflex_edit_grid import (
    CellUpdate,
    EditableGridMixin,
    editable_grid,
    editable_grid_detail_box,
    editable_grid_stats_bar,
    frame_to_grid,
    patch_list_item,
    row_id_getter,
)


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

_FIRST_NAMES: list[str] = [
    "Alice", "Bob", "Charlie", "Diana", "Eve",
    "Frank", "Grace", "Hank", "Ivy", "Jack",
    "Karen", "Leo", "Mona", "Nick", "Olivia",
    "Paul", "Quinn", "Rita", "Sam", "Tina",
]
_CITIES: list[str] = ["Lyon", "Nantes", "Brest", "Metz", "Lille"]
_DEPARTMENTS: list[str] = ["Engineering", "Marketing", "Sales", "Support"]


def _build_contacts() -> list[dict[str, Any]]:
    contacts: list[dict[str, Any]] = []
    for i, name in enumerate(_FIRST_NAMES * 3, start=1):
        contacts.append({
            "id": i,
            "name": f"{name} {i}",
            "email": f"{name.lower()}{i}@example.com",
            "city": _CITIES[i % len(_CITIES)] if i % 7 else None,
            "phones": [f"06{i:08d}", f"04{i:08d}"] if i % 5 else [],
        })
    return contacts


def _build_employee_lazyframe() -> pl.LazyFrame:
    """Create a sample LazyFrame with employee data."""
    return pl.LazyFrame(
        {
            "id": list(range(1, 21)),
            "first_name": _FIRST_NAMES,
            "department": [_DEPARTMENTS[i % len(_DEPARTMENTS)] for i in range(20)],
            "salary": [52_000 + 1_750 * i for i in range(20)],
            "is_manager": [i % 6 == 0 for i in range(20)],
            "start_date": [dt.date(2020, 1, 6) + dt.timedelta(weeks=i) for i in range(20)],
        }
    )


CONTACT_COLUMNS: list[dict[str, Any]] = [
    {"accessor_key": "name", "header": "Name", "editable": True},
    {"accessor_key": "email", "header": "Email", "editable": True, "input_kind": "email"},
    {"accessor_key": "city", "header": "City", "editable": True},
    {
        "id": "phone",
        "header": "Phone",
        "accessor_fn": lambda row: row["phones"][0],
        "editable": True,
        "input_kind": "tel",
        "patch": patch_list_item(0, "phones"),
    },
]


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

class ContactsState(EditableGridMixin, rx.State):
    """Contacts grid; keeps a log of committed edits."""

    edit_log: list[str] = []

    def load(self) -> None:
        self.set_grid(
            _build_contacts(),
            CONTACT_COLUMNS,
            page_size=8,
            get_row_id=row_id_getter("id"),
        )

    def on_eg_grid_cell_update(self, update: CellUpdate) -> bool | None:
        if update.column_id == "name" and not str(update.value).strip():
            self.edit_log.append(f"row {update.row_id}: blank name rejected")
            return False
        self.edit_log.append(f"row {update.row_id}: {update.column_id} -> {update.value!r}")
        return None


class EmployeesState(EditableGridMixin, rx.State):
    """Employees grid inferred from a polars frame."""

    def load(self) -> None:
        rows, columns = frame_to_grid(_build_employee_lazyframe(), id_field="id")
        self.set_grid(rows, columns, page_size=5, get_row_id=row_id_getter("id"))


class AppState(rx.State):
    """Page-level loader."""

    def load_all(self):
        return [ContactsState.load, EmployeesState.load]


# ---------------------------------------------------------------------------
# UI
# ---------------------------------------------------------------------------

def _status_box(*children: rx.Component) -> rx.Component:
    return rx.box(
        *children,
        margin_top="1em",
        padding="1em",
        border_radius="8px",
        background="var(--gray-a3)",
    )


def contacts_tab() -> rx.Component:
    """Contacts tab content."""
    return rx.box(
        rx.text(
            "Click a cell to edit it; the value is committed when the cell loses focus. "
            "Clearing a name is rejected and rolled back.",
            margin_bottom="1em",
            color="var(--gray-11)",
        ),
        rx.cond(
            ContactsState.eg_grid_loaded,
            rx.fragment(
                editable_grid_stats_bar(ContactsState),
                editable_grid(ContactsState, height="460px"),
            ),
            rx.text("Loading...", color="var(--gray-9)"),
        ),
        _status_box(
            rx.foreach(ContactsState.edit_log, lambda line: rx.text(line, size="2")),
        ),
        padding_top="1em",
    )


def employees_tab() -> rx.Component:
    """Employees tab content."""
    return rx.box(
        rx.cond(
            EmployeesState.eg_grid_loaded,
            rx.fragment(
                editable_grid_stats_bar(EmployeesState),
                editable_grid(EmployeesState, height="340px", density="compact"),
            ),
            rx.text("Loading...", color="var(--gray-9)"),
        ),
        editable_grid_detail_box(EmployeesState),
        padding_top="1em",
    )


def index() -> rx.Component:
    """Render the main page with tabs."""
    return rx.box(
        rx.heading("Editable Grid -- Reflex Demo", size="6", margin_bottom="1em"),
        rx.tabs.root(
            rx.tabs.list(
                rx.tabs.trigger("Contacts", value="contacts"),
                rx.tabs.trigger("Employees (polars)", value="employees"),
            ),
            rx.tabs.content(contacts_tab(), value="contacts"),
            rx.tabs.content(employees_tab(), value="employees"),
            default_value="contacts",
        ),
        padding="2em",
        max_width="1400px",
        margin="0 auto",
    )


app = rx.App()
app.add_page(index, on_load=AppState.load_all)
