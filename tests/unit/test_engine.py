from __future__ import annotations

from dataclasses import dataclass
from types import SimpleNamespace

import pytest

from reflex_edit_grid.engine import GridEngine
from reflex_edit_grid.pagination import ELLIPSIS
from reflex_edit_grid.sorting import Sort


def _by_id(row, index):
    return str(row["id"])


@pytest.fixture()
def engine(contacts, contact_columns):
    return GridEngine(contacts, contact_columns, page_size=2, get_row_id=_by_id)


def _names(rows):
    return [r.original["name"] for r in rows]


class TestSorting:
    def test_toggle_cycles_and_restores_input_order(self, engine):
        assert engine.toggle_sort("name") == Sort("name", "asc")
        assert engine.sort_indicator("name") == "asc"
        assert _names(engine.sorted_rows()) == ["Alice", "bob", "Chloé", "david"]

        engine.toggle_sort("name")
        assert _names(engine.sorted_rows()) == ["david", "Chloé", "bob", "Alice"]

        assert engine.toggle_sort("name") is None
        assert engine.sort_indicator("name") is None
        assert [r.index for r in engine.sorted_rows()] == [0, 1, 2, 3]

    def test_non_sortable_column_ignored(self, engine):
        engine.toggle_sort("age")
        assert engine.toggle_sort("actions") == Sort("age", "asc")
        assert engine.toggle_sort("missing") == Sort("age", "asc")
        assert engine.can_sort("actions") is False

    def test_sort_change_returns_to_first_page(self, engine):
        engine.next_page()
        assert engine.page_index == 1

        engine.toggle_sort("city")
        assert engine.page_index == 0

    def test_set_sort_on_non_sortable_clears(self, engine):
        engine.set_sort(Sort("name", "desc"))
        assert engine.sort == Sort("name", "desc")
        engine.set_sort(Sort("actions", "asc"))
        assert engine.sort is None


class TestPaging:
    def test_visible_rows_follow_sort_then_page(self, engine):
        engine.toggle_sort("age")
        engine.next_page()
        assert [r.original["id"] for r in engine.visible_rows()] == [4, 3]

    def test_page_change_callback_only_on_change(self, contacts, contact_columns):
        seen = []
        engine = GridEngine(contacts, contact_columns, page_size=2, on_page_change=seen.append)

        assert engine.previous_page() is False
        assert engine.next_page() is True
        assert engine.next_page() is False
        assert engine.can_next_page() is False
        assert engine.can_previous_page() is True
        assert seen == [1]

    def test_page_items(self, numbered_rows):
        engine = GridEngine(numbered_rows, [{"accessor_key": "label"}], page_size=1)
        engine.set_page_index(12)
        assert engine.page_items() == [0, ELLIPSIS, 10, 11, 12, 13, 14, ELLIPSIS, 24]

    def test_rejects_bad_configuration(self, contacts, contact_columns):
        with pytest.raises(ValueError):
            GridEngine(contacts, contact_columns, page_size=0)
        with pytest.raises(ValueError):
            GridEngine(contacts, contact_columns, max_page_buttons=2)

    def test_initial_page_index_clamped(self, numbered_rows):
        engine = GridEngine(numbered_rows, [{"accessor_key": "label"}], initial_page_index=9)
        assert engine.page_index == 2


class TestData:
    def test_same_object_is_ignored(self, engine, contacts):
        engine.edit_cell("1", "city", "Paris")
        assert engine.set_data(contacts) is False
        assert engine.rows[0]["city"] == "Paris"

    def test_new_collection_reseeds_and_drops_drafts(self, engine, contacts):
        engine.begin_edit("2", "city")
        engine.update_draft("2", "city", "Paris")

        assert engine.set_data([dict(r) for r in contacts]) is True
        assert engine.draft("2", "city") is None
        assert engine.commit_edit("2", "city") is None

    def test_shrinking_data_reclamps_page(self, engine, contacts):
        engine.set_page_index(1)
        engine.set_data(contacts[:1])
        assert engine.page_index == 0
        assert engine.page_count == 1

    def test_set_columns_drops_sort_on_vanished_column(self, engine):
        engine.toggle_sort("city")
        engine.set_columns([{"accessor_key": "name"}])
        assert engine.sort is None


class TestEditing:
    def test_edit_by_id_survives_sorting(self, contacts, contact_columns):
        updates = []
        engine = GridEngine(
            contacts, contact_columns, get_row_id=_by_id, on_cell_update=updates.append
        )
        engine.toggle_sort("name")
        engine.toggle_sort("name")

        update = engine.edit_cell("2", "city", "Paris")

        assert update.row_index == 1
        assert update.row_id == "2"
        assert update.original_row["city"] == "Nantes"
        assert engine.rows[1]["city"] == "Paris"
        assert updates == [update]

    def test_positional_ids_without_row_id_fn(self, contacts, contact_columns):
        engine = GridEngine(contacts, contact_columns)
        assert engine.row_id(3) == "3"
        assert engine.row_index("3") == 3
        assert engine.row_index("7") is None
        assert engine.row_index("abc") is None

    def test_read_only_column_not_editable(self, engine):
        assert engine.begin_edit("1", "age") is None
        assert engine.edit_cell("1", "age", "40") is None

    def test_cancel_then_commit_is_noop(self, engine):
        engine.begin_edit("1", "name")
        engine.update_draft("1", "name", "Zed")
        assert engine.cancel_edit("1", "name") is True
        assert engine.commit_edit("1", "name") is None
        assert engine.rows[0]["name"] == "Alice"

    def test_revert_restores_original(self, engine):
        update = engine.edit_cell("1", "name", "Zed")
        assert engine.revert(update) is True
        assert engine.rows[0]["name"] == "Alice"

    def test_callback_can_be_swapped(self, engine):
        engine.on_cell_update = lambda update: False
        engine.edit_cell("4", "city", "Paris")
        assert engine.rows[3]["city"] == "Brest"


class TestAttributeRows:
    def test_edit_namespace_rows(self):
        updates = []
        rows = [SimpleNamespace(name="Alice", city="Lyon")]
        engine = GridEngine(
            rows, [{"accessor_key": "city", "editable": True}], on_cell_update=updates.append
        )

        update = engine.edit_cell("0", "city", "Paris")

        assert engine.rows[0].city == "Paris"
        assert rows[0].city == "Lyon"
        assert updates == [update]

    def test_edit_derived_column_on_dataclass_rows(self):
        @dataclass
        class Person:
            first: str
            last: str

        updates = []
        engine = GridEngine(
            [Person("Ann", "Lee")],
            [{"id": "full", "accessor_fn": lambda p: f"{p.first} {p.last}", "editable": True}],
            on_cell_update=updates.append,
        )

        update = engine.edit_cell("0", "full", "Ann Smith")

        assert update.value == "Ann Smith"
        assert update.original_row == Person("Ann", "Lee")
        assert len(updates) == 1


class TestCells:
    def test_display_value(self, engine, contacts):
        assert engine.display_value(contacts[2], "city") == ""
        assert engine.display_value(contacts[0], "age") == "31"
        assert engine.display_value(contacts[0], "phone") == "0601"
        assert engine.display_value(contacts[0], "missing") == ""

    def test_cell_renderer_used_for_read_only(self, contacts):
        engine = GridEngine(
            contacts,
            [{"accessor_key": "age", "cell": lambda value, row: f"{value} yrs"}],
        )
        assert engine.display_value(contacts[0], "age") == "31 yrs"

    def test_activate_row(self, contacts, contact_columns):
        activated = []
        engine = GridEngine(
            contacts, contact_columns, get_row_id=_by_id, on_row_activate=activated.append
        )
        assert engine.activate_row("3") is True
        assert engine.activate_row("99") is False
        assert activated == [2]
