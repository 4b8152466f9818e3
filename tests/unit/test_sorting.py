from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction

import pytest

from reflex_edit_grid.columns import Column, KeyAccessor
from reflex_edit_grid.sorting import (
    Sort,
    alphanumeric_key,
    compare_alphanumeric,
    from_sort_model,
    sort_rows,
    to_sort_model,
    toggle_sort,
)


def _col(key: str, **kwargs) -> Column:
    return Column(id=key, header=key, accessor=KeyAccessor(key), **kwargs)


class TestToggleSort:
    def test_single_column_cycle(self):
        state = None
        seen = []
        for _ in range(5):
            state = toggle_sort(state, "name")
            seen.append(state.direction if state else None)

        assert seen == ["asc", "desc", None, "asc", "desc"]

    def test_other_column_resets_previous(self):
        state = toggle_sort(toggle_sort(None, "name"), "name")
        assert state == Sort("name", "desc")

        state = toggle_sort(state, "city")
        assert state == Sort("city", "asc")


class TestAlphanumeric:
    def test_numbers_compare_numerically(self):
        assert compare_alphanumeric(9, 10) == -1
        assert compare_alphanumeric(2.5, 2) == 1

    def test_strings_are_case_insensitive(self):
        assert compare_alphanumeric("apple", "Banana") == -1
        assert compare_alphanumeric("ABC", "abc") == 0

    def test_embedded_numbers_compare_numerically(self):
        assert compare_alphanumeric("item2", "item10") == -1
        assert sorted(["v10", "v9", "v100"], key=alphanumeric_key) == ["v9", "v10", "v100"]

    def test_none_sorts_below_everything(self):
        for value in ("", "a", 0, -5):
            assert compare_alphanumeric(None, value) == -1
        assert compare_alphanumeric(math.nan, "a") == -1
        assert compare_alphanumeric(None, None) == 0

    def test_prefix_sorts_first(self):
        assert compare_alphanumeric("ab", "abc") == -1

    def test_decimals_and_fractions_compare_numerically(self):
        assert compare_alphanumeric(Decimal("1.5"), Decimal("1.25")) == 1
        assert compare_alphanumeric(Fraction(1, 3), 0.5) == -1
        assert compare_alphanumeric(Decimal("2"), 10) == -1
        assert compare_alphanumeric(Decimal("9"), "a") == -1

    def test_decimal_nan_is_missing(self):
        assert compare_alphanumeric(Decimal("NaN"), Decimal("-1")) == -1
        assert compare_alphanumeric(Decimal("NaN"), None) == 0


class TestSortRows:
    def test_ascending_and_descending(self, contacts):
        col = _col("name")

        asc = [r["name"] for r in sort_rows(contacts, col, "asc")]
        desc = [r["name"] for r in sort_rows(contacts, col, "desc")]

        assert asc == ["Alice", "bob", "Chloé", "david"]
        assert desc == ["david", "Chloé", "bob", "Alice"]

    def test_stable_for_ties_in_both_directions(self, contacts):
        col = _col("age")

        asc_ids = [r["id"] for r in sort_rows(contacts, col, "asc")]
        desc_ids = [r["id"] for r in sort_rows(contacts, col, "desc")]

        assert asc_ids == [2, 1, 4, 3]
        assert desc_ids == [3, 1, 4, 2]

    def test_none_values_first_ascending(self, contacts):
        ids = [r["id"] for r in sort_rows(contacts, _col("city"), "asc")]
        assert ids == [3, 4, 1, 2]

    def test_custom_comparator(self, contacts):
        by_length = _col("name", comparator=lambda a, b: len(a) - len(b))

        names = [r["name"] for r in sort_rows(contacts, by_length, "asc")]

        assert names == ["bob", "Alice", "Chloé", "david"]

    def test_decimal_column(self):
        rows = [{"price": Decimal("1.5")}, {"price": Decimal("1.25")}, {"price": Decimal("10")}]
        result = sort_rows(rows, _col("price"), "asc")
        assert [r["price"] for r in result] == [Decimal("1.25"), Decimal("1.5"), Decimal("10")]

    def test_does_not_mutate_input(self, contacts):
        before = list(contacts)
        sort_rows(contacts, _col("name"), "desc")
        assert contacts == before

    def test_row_of_unwraps_wrappers(self, contacts):
        wrapped = [(i, row) for i, row in enumerate(contacts)]
        result = sort_rows(wrapped, _col("name"), "desc", row_of=lambda item: item[1])
        assert [i for i, _ in result] == [3, 2, 1, 0]


class TestSortModel:
    def test_round_trip_shape(self):
        assert to_sort_model(None) == []
        assert to_sort_model(Sort("name", "desc")) == [{"field": "name", "sort": "desc"}]

    def test_first_entry_wins(self):
        model = [{"field": "a", "sort": "desc"}, {"field": "b", "sort": "asc"}]
        assert from_sort_model(model) == Sort("a", "desc")

    def test_empty_model(self):
        assert from_sort_model([]) is None

    def test_unknown_direction(self):
        with pytest.raises(ValueError, match="Unknown sort direction"):
            from_sort_model([{"field": "a", "sort": "sideways"}])
