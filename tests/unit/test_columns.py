from __future__ import annotations

from collections import namedtuple
from dataclasses import dataclass
from types import SimpleNamespace

import pytest

from reflex_edit_grid.columns import (
    Column,
    FnAccessor,
    KeyAccessor,
    column_from_mapping,
    default_patch,
    extract_value,
    normalize_columns,
    patch_list_item,
)


@dataclass(frozen=True)
class Person:
    name: str
    city: str


@dataclass
class Contact:
    first: str
    last: str


Point = namedtuple("Point", ["x", "y"])


class TestNormalizeColumns:
    def test_defaults_applied(self):
        (col,) = normalize_columns([{"accessor_key": "name", "header": "Name"}])

        assert col.id == "name"
        assert col.accessor == KeyAccessor("name")
        assert col.sortable is True
        assert col.editable is False
        assert col.input_kind == "text"
        assert col.patch is None

    def test_enable_sorting_false_disables_sort(self, contact_columns):
        cols = {c.id: c for c in normalize_columns(contact_columns)}

        assert cols["actions"].sortable is False
        assert cols["actions"].fixed_width == 56
        assert cols["name"].sortable is True

    def test_function_accessor_uses_explicit_id(self, contact_columns):
        cols = {c.id: c for c in normalize_columns(contact_columns)}

        assert isinstance(cols["phone"].accessor, FnAccessor)
        assert cols["phone"].accessor.kind == "fn"
        assert cols["phone"].input_kind == "tel"
        assert cols["phone"].editable is True

    def test_column_instances_pass_through(self):
        col = Column(id="x", header="X", accessor=KeyAccessor("x"))
        assert normalize_columns([col]) == [col]

    def test_string_accessor_becomes_key_accessor(self):
        col = column_from_mapping({"accessor": "email", "header": "Email"})
        assert col.accessor == KeyAccessor("email")
        assert col.id == "email"

    def test_callable_accessor_becomes_fn_accessor(self):
        col = column_from_mapping({"id": "upper", "accessor": lambda r: r["n"].upper()})
        assert col.value({"n": "ab"}) == "AB"
        assert col.header == "upper"

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError, match="Duplicate column id"):
            normalize_columns([{"accessor_key": "a"}, {"id": "a", "accessor_fn": len}])

    def test_missing_id_rejected(self):
        with pytest.raises(ValueError, match="needs an 'id'"):
            normalize_columns([{"accessor_fn": lambda r: r}])

    def test_header_used_as_id_when_nothing_else(self):
        (col,) = normalize_columns([{"header": "Notes"}])
        assert col.id == "Notes"
        assert col.accessor == KeyAccessor("Notes")


class TestExtractValue:
    def test_mapping_key(self):
        assert extract_value(KeyAccessor("a"), {"a": 1}) == 1

    def test_missing_key_is_none(self):
        assert extract_value(KeyAccessor("zzz"), {"a": 1}) is None

    def test_attribute_access(self):
        assert extract_value(KeyAccessor("city"), Person("Ann", "Metz")) == "Metz"

    def test_failing_function_degrades_to_none(self, phone_accessor):
        assert extract_value(phone_accessor, {"phones": []}) is None
        assert extract_value(phone_accessor, {}) is None

    def test_function_accessor(self, phone_accessor):
        assert extract_value(phone_accessor, {"phones": ["1", "2"]}) == "1"


class TestPatches:
    def test_default_patch_is_shallow_merge(self):
        row = {"name": "Ann", "city": "Metz", "tags": ["a"]}
        patched = default_patch(row, "Paris", "city")

        assert patched == {"name": "Ann", "city": "Paris", "tags": ["a"]}
        assert patched is not row
        assert row["city"] == "Metz"
        assert patched["tags"] is row["tags"]

    def test_default_patch_on_dataclass(self):
        patched = default_patch(Person("Ann", "Metz"), "Paris", "city")
        assert patched == Person("Ann", "Paris")

    def test_default_patch_rejects_opaque_objects(self):
        with pytest.raises(TypeError):
            default_patch(object(), "x", "city")

    def test_list_item_patch_keeps_other_elements(self):
        row = {"phones": ["0601", "0401"]}
        patched = patch_list_item(0, "phones")(row, "0699", "phone")

        assert patched["phones"] == ["0699", "0401"]
        assert row["phones"] == ["0601", "0401"]

    def test_list_item_patch_pads_short_lists(self):
        patched = patch_list_item(1)({"phones": []}, "x", "phones")
        assert patched["phones"] == ["", "x"]

    def test_default_patch_on_attribute_object(self):
        row = SimpleNamespace(name="Alice", city="Lyon")
        patched = default_patch(row, "Paris", "city")

        assert patched.city == "Paris"
        assert patched.name == "Alice"
        assert row.city == "Lyon"

    def test_default_patch_on_named_tuple(self):
        assert default_patch(Point(1, 2), 5, "y") == Point(1, 5)

    def test_default_patch_named_tuple_unknown_field(self):
        with pytest.raises(TypeError, match="no field 'z'"):
            default_patch(Point(1, 2), 5, "z")

    def test_default_patch_dataclass_derived_column(self):
        row = Contact("Ann", "Lee")
        patched = default_patch(row, "Ann Smith", "full")

        assert patched.full == "Ann Smith"
        assert (patched.first, patched.last) == ("Ann", "Lee")
        assert not hasattr(row, "full")

    def test_default_patch_frozen_dataclass_derived_column(self):
        with pytest.raises(TypeError, match="Cannot set 'full'"):
            default_patch(Person("Ann", "Metz"), "x", "full")
