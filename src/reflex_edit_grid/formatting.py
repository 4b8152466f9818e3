"""Display formatting for read-only grid cells."""

import datetime as dt
import numbers
from decimal import Decimal
from typing import Any

_DEFAULT_DATE_FORMAT: str = "%d/%m/%Y"


def _parse_iso_datetime(text: str) -> dt.datetime | None:
    if "T" not in text:
        return None
    try:
        return dt.datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_cell_value(value: Any, date_format: str = _DEFAULT_DATE_FORMAT) -> str:
    """Render a raw cell value as display text.

    * ``None`` -> ``""``
    * ``date`` / ``datetime`` and ISO-8601 datetime strings (containing a
      ``"T"``) -> *date_format* (day-first by default)
    * other strings -> unchanged
    * numbers -> ``str(value)``; booleans -> ``"true"`` / ``"false"``
    * anything else (lists, dicts, objects) -> ``""``
    """
    if value is None:
        return ""
    if isinstance(value, (dt.date, dt.datetime)):
        return value.strftime(date_format)
    if isinstance(value, str):
        parsed = _parse_iso_datetime(value)
        return parsed.strftime(date_format) if parsed is not None else value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (numbers.Real, Decimal)):
        return str(value)
    return ""


def draft_text(value: Any) -> str:
    """Initial draft text for an editable cell."""
    return "" if value is None else str(value)
