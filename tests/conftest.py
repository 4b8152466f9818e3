# Shared pytest fixtures
from __future__ import annotations

from typing import Any

import pytest

from reflex_edit_grid.columns import FnAccessor, patch_list_item


@pytest.fixture()
def contacts() -> list[dict[str, Any]]:
    return [
        {"id": 1, "name": "Alice", "city": "Lyon", "phones": ["0601", "0401"], "age": 31},
        {"id": 2, "name": "bob", "city": "Nantes", "phones": ["0602", "0402"], "age": 9},
        {"id": 3, "name": "Chloé", "city": None, "phones": [], "age": 100},
        {"id": 4, "name": "david", "city": "Brest", "phones": ["0604"], "age": 31},
    ]


@pytest.fixture()
def contact_columns() -> list[dict[str, Any]]:
    return [
        {"accessor_key": "name", "header": "Name", "editable": True},
        {"accessor_key": "city", "header": "City", "editable": True},
        {
            "id": "phone",
            "header": "Phone",
            "accessor_fn": lambda row: row["phones"][0],
            "editable": True,
            "input_kind": "tel",
            "patch": patch_list_item(0, "phones"),
        },
        {"accessor_key": "age", "header": "Age"},
        {"id": "actions", "header": "", "enable_sorting": False, "width": 56},
    ]


@pytest.fixture()
def numbered_rows() -> list[dict[str, Any]]:
    return [{"id": i, "label": f"row {i}"} for i in range(25)]


@pytest.fixture()
def phone_accessor() -> FnAccessor:
    return FnAccessor(lambda row: row["phones"][0])
