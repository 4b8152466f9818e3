"""Column model: tagged column records and descriptor normalisation.

A grid column reads its value from a row either by **key** (dict key or
attribute name) or through an **accessor function**.  The two cases are
modelled as tagged records (:class:`KeyAccessor` / :class:`FnAccessor`)
rather than subclasses, so a :class:`Column` is plain configuration data.

Raw descriptors may be given as :class:`Column` instances or as mappings
using either the snake_case field names of :class:`Column` or the
``accessor_key`` / ``accessor_fn`` / ``enable_sorting`` vocabulary of
table libraries::

    normalize_columns([
        {"accessor_key": "name", "header": "Name", "editable": True},
        {
            "id": "role",
            "header": "Role",
            "accessor_fn": lambda row: row["role"]["id"],
            "enable_sorting": False,
        },
    ])
"""

import copy
import dataclasses
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal, TypeVar

T = TypeVar("T")

InputKind = Literal["text", "email", "tel"]

PatchFn = Callable[[Any, Any, str], Any]
"""``(row, new_value, column_id) -> new_row`` -- must not mutate ``row``."""

Comparator = Callable[[Any, Any], int]
"""``(value_a, value_b) -> int`` with the usual negative / zero / positive contract."""

CellRenderer = Callable[[Any, Any], Any]
"""``(value, row) -> display value``."""

_ACCESSOR_ERRORS = (KeyError, IndexError, AttributeError, TypeError, ValueError)


@dataclass(frozen=True)
class KeyAccessor:
    """Read a value by dict key (or attribute name for non-mapping rows)."""

    key: str
    kind: Literal["key"] = "key"


@dataclass(frozen=True)
class FnAccessor:
    """Read a value through a pure function of the row."""

    fn: Callable[[Any], Any]
    kind: Literal["fn"] = "fn"


Accessor = KeyAccessor | FnAccessor


@dataclass(frozen=True)
class Column:
    """Canonical column record consumed by the sort, pagination and edit engines.

    Attributes:
        id: Unique column id within one grid.  Also the key written by the
            default patch.
        header: Header label.
        accessor: How the cell value is extracted from a row.
        cell_renderer: Optional ``(value, row) -> display`` function used
            for read-only cells instead of the default formatter.
        sortable: Whether a header interaction toggles sorting.
        editable: Whether cells of this column accept drafts.
        input_kind: Advisory keyboard / input type for editors.
        fixed_width: Optional fixed width in pixels.
        patch: Optional ``(row, new_value, column_id) -> new_row`` used to
            commit edits into derived or nested fields.
        comparator: Optional custom comparator over extracted values.
        description: Optional header tooltip text.
    """

    id: str
    header: str
    accessor: Accessor
    cell_renderer: CellRenderer | None = None
    sortable: bool = True
    editable: bool = False
    input_kind: InputKind = "text"
    fixed_width: int | None = None
    patch: PatchFn | None = None
    comparator: Comparator | None = None
    description: str | None = None

    def value(self, row: Any) -> Any:
        """Extract this column's value from *row*.

        Malformed accessors (missing key, failing function) yield ``None``
        instead of raising, so the cell renders empty.
        """
        return extract_value(self.accessor, row)


def extract_value(accessor: Accessor, row: Any) -> Any:
    """Apply *accessor* to *row*, degrading to ``None`` on failure."""
    try:
        if isinstance(accessor, KeyAccessor):
            if isinstance(row, Mapping):
                return row.get(accessor.key)
            return getattr(row, accessor.key, None)
        return accessor.fn(row)
    except _ACCESSOR_ERRORS:
        return None


def default_patch(row: Any, value: Any, column_id: str) -> Any:
    """Shallow-merge *value* into *row* under *column_id*.

    * mappings become a new ``dict``
    * named tuples are copied with ``_replace``
    * dataclass instances are copied with :func:`dataclasses.replace` when
      *column_id* is one of their init fields
    * any other object (including dataclasses edited through a derived
      column) is shallow-copied and the attribute is set on the copy

    The input row is never mutated.

    Raises:
        TypeError: If the row cannot take the value (a named tuple without
            that field, a frozen or slotted object without the attribute).
    """
    if isinstance(row, Mapping):
        return {**row, column_id: value}
    if isinstance(row, tuple) and hasattr(row, "_replace"):
        if column_id not in row._fields:
            raise TypeError(
                f"{type(row).__name__!r} has no field {column_id!r}; "
                "give the column a patch function"
            )
        return row._replace(**{column_id: value})
    if dataclasses.is_dataclass(row) and not isinstance(row, type):
        init_fields = {f.name for f in dataclasses.fields(row) if f.init}
        if column_id in init_fields:
            return dataclasses.replace(row, **{column_id: value})
    patched = copy.copy(row)
    try:
        setattr(patched, column_id, value)
    except AttributeError as exc:
        raise TypeError(
            f"Cannot set {column_id!r} on {type(row).__name__!r}; "
            "give the column a patch function"
        ) from exc
    return patched


def patch_list_item(index: int, key: str | None = None) -> PatchFn:
    """Return a patch function that writes into element *index* of a list field.

    The list is read from ``row[key]`` (``key`` defaults to the column id),
    copied, padded with empty strings if it is too short, and written back.
    Every other element is preserved::

        Column(
            id="phone",
            header="Phone",
            accessor=FnAccessor(lambda r: r["phone_numbers"][0]),
            editable=True,
            patch=patch_list_item(0, "phone_numbers"),
        )
    """

    def _patch(row: Any, value: Any, column_id: str) -> Any:
        field = key or column_id
        current = row.get(field) if isinstance(row, Mapping) else getattr(row, field, None)
        items = list(current or [])
        while len(items) <= index:
            items.append("")
        items[index] = value
        return default_patch(row, items, field)

    return _patch


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------

def _coerce_accessor(raw: Mapping[str, Any]) -> Accessor | None:
    accessor = raw.get("accessor")
    if isinstance(accessor, (KeyAccessor, FnAccessor)):
        return accessor
    if isinstance(accessor, str):
        return KeyAccessor(accessor)
    if callable(accessor):
        return FnAccessor(accessor)
    if raw.get("accessor_key") is not None:
        return KeyAccessor(str(raw["accessor_key"]))
    if raw.get("accessor_fn") is not None:
        return FnAccessor(raw["accessor_fn"])
    return None


def column_from_mapping(raw: Mapping[str, Any]) -> Column:
    """Build a :class:`Column` from a mapping descriptor, applying defaults.

    The id is taken from ``id``, else from the accessor key, else from a
    string ``header``.  A descriptor without any accessor reads its own id
    as a key (display-only columns therefore render empty unless they have
    a ``cell_renderer``).

    Raises:
        ValueError: If no id can be derived.
    """
    accessor = _coerce_accessor(raw)
    header = raw.get("header")

    column_id = raw.get("id")
    if column_id is None and isinstance(accessor, KeyAccessor):
        column_id = accessor.key
    if column_id is None and isinstance(header, str) and header:
        column_id = header
    if column_id is None:
        raise ValueError(f"Column descriptor needs an 'id' or an accessor key: {dict(raw)!r}")
    column_id = str(column_id)

    if accessor is None:
        accessor = KeyAccessor(column_id)

    if "sortable" in raw:
        sortable = bool(raw["sortable"])
    else:
        sortable = raw.get("enable_sorting", True) is not False

    return Column(
        id=column_id,
        header=str(header) if header is not None else column_id,
        accessor=accessor,
        cell_renderer=raw.get("cell_renderer", raw.get("cell")),
        sortable=sortable,
        editable=bool(raw.get("editable", False)),
        input_kind=raw.get("input_kind", raw.get("input_type", "text")),
        fixed_width=raw.get("fixed_width", raw.get("width")),
        patch=raw.get("patch", raw.get("update_value")),
        comparator=raw.get("comparator", raw.get("sorting_fn")),
        description=raw.get("description"),
    )


def normalize_columns(columns: Sequence[Column | Mapping[str, Any]]) -> list[Column]:
    """Normalise raw descriptors into :class:`Column` records.

    Args:
        columns: ``Column`` instances and/or mapping descriptors.

    Returns:
        A new list of ``Column`` records in the same order.

    Raises:
        ValueError: If two columns share an id, or an id cannot be derived.
    """
    result: list[Column] = []
    seen: set[str] = set()
    for raw in columns:
        col = raw if isinstance(raw, Column) else column_from_mapping(raw)
        if col.id in seen:
            raise ValueError(f"Duplicate column id: {col.id!r}")
        seen.add(col.id)
        result.append(col)
    return result
