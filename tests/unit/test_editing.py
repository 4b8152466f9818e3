from __future__ import annotations

import pytest

from reflex_edit_grid.columns import normalize_columns
from reflex_edit_grid.editing import CellEditController, CellUpdate
from reflex_edit_grid.store import RowStore


@pytest.fixture()
def controller(contacts, contact_columns):
    columns = {c.id: c for c in normalize_columns(contact_columns)}
    calls: list[CellUpdate] = []
    ctl = CellEditController(RowStore(contacts), columns, on_cell_update=calls.append)
    ctl.calls = calls
    return ctl


def test_begin_seeds_draft_from_value(controller):
    assert controller.begin(0, "city") == "Lyon"
    assert controller.begin(2, "city") == ""
    assert controller.focused_cells == [(0, "city"), (2, "city")]


def test_begin_refuses_read_only_and_missing_rows(controller):
    assert controller.begin(0, "age") is None
    assert controller.begin(0, "nope") is None
    assert controller.begin(10, "city") is None


def test_refocus_keeps_draft(controller):
    controller.begin(0, "city")
    controller.update(0, "city", "Lille")
    assert controller.begin(0, "city") == "Lille"


def test_update_ignored_when_not_focused(controller):
    assert controller.update(0, "city", "Paris") is False
    assert controller.draft(0, "city") is None


def test_commit_default_patch(controller, contacts):
    original = controller.store[1]
    controller.begin(1, "city")
    controller.update(1, "city", "Paris")

    update = controller.commit(1, "city", row_id="2")

    expected = dict(original, city="Paris")
    assert controller.store[1] == expected
    assert controller.calls == [update]
    assert update.original_row is original
    assert update.row_index == 1
    assert update.column_id == "city"
    assert update.value == "Paris"
    assert update.row_id == "2"
    assert controller.draft(1, "city") is None
    assert contacts[1]["city"] == "Nantes"


def test_commit_with_patch_writes_first_phone_only(controller):
    controller.begin(0, "phone")
    controller.update(0, "phone", "0699")
    controller.commit(0, "phone")

    assert controller.store[0]["phones"] == ["0699", "0401"]
    assert "phone" not in controller.store[0]


def test_commit_without_draft_is_noop(controller):
    assert controller.commit(0, "city") is None
    assert controller.calls == []


def test_commit_unchanged_value_still_notifies(controller):
    controller.begin(0, "name")
    update = controller.commit(0, "name")
    assert update.value == "Alice"
    assert len(controller.calls) == 1


def test_discard_has_no_side_effects(controller):
    before = controller.store.rows
    controller.begin(0, "city")
    controller.update(0, "city", "Paris")

    assert controller.discard(0, "city") is True
    assert controller.commit(0, "city") is None
    assert controller.store.rows is before
    assert controller.calls == []


def test_callback_false_rolls_back(contacts, contact_columns):
    columns = {c.id: c for c in normalize_columns(contact_columns)}
    ctl = CellEditController(RowStore(contacts), columns, on_cell_update=lambda update: False)
    original = ctl.store[0]

    ctl.begin(0, "city")
    ctl.update(0, "city", "Paris")
    update = ctl.commit(0, "city")

    assert update is not None
    assert ctl.store[0] is original


def test_callback_exception_propagates_and_patch_stays(contacts, contact_columns):
    columns = {c.id: c for c in normalize_columns(contact_columns)}

    def boom(update):
        raise RuntimeError("save failed")

    ctl = CellEditController(RowStore(contacts), columns, on_cell_update=boom)
    ctl.begin(0, "city")
    ctl.update(0, "city", "Paris")

    with pytest.raises(RuntimeError, match="save failed"):
        ctl.commit(0, "city")
    assert ctl.store[0]["city"] == "Paris"


def test_failing_patch_keeps_draft_and_skips_callback(contacts, contact_columns):
    columns = {c.id: c for c in normalize_columns(contact_columns)}
    calls = []
    store = RowStore([object()])
    ctl = CellEditController(store, columns, on_cell_update=calls.append)
    before = store.rows

    ctl.begin(0, "city")
    ctl.update(0, "city", "Paris")
    with pytest.raises(TypeError):
        ctl.commit(0, "city")

    assert ctl.draft(0, "city") == "Paris"
    assert store.rows is before
    assert calls == []
