"""Map heterogeneous spreadsheet rows onto the canonical :class:`Record` shape."""
from __future__ import annotations

import math
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from ..models import Record

_FIELD_SYNONYMS: Mapping[str, Sequence[str]] = {
    "first_name": ("firstName", "FirstName", "First Name"),
    "phone": ("phone", "Phone", "Phone Number"),
    "notes": ("notes", "Notes", "Note"),
}


def _normalise_key(value: Any) -> str:
    text = str(value).strip().lower()
    for char in (" ", "_", "-"):
        text = text.replace(char, "")
    return text


_LENIENT_KEYS: Mapping[str, Sequence[str]] = {
    field: tuple(dict.fromkeys(_normalise_key(name) for name in names))
    for field, names in _FIELD_SYNONYMS.items()
}


def normalize_row(row: Mapping[Any, Any]) -> Optional[Record]:
    """Return the canonical record for ``row`` or ``None`` if it is unusable.

    Each field tries its header names in order and takes the first non-blank
    value. Headers are matched exactly first; only when none of them carries a
    value are the row's keys compared case-insensitively with spaces,
    underscores and hyphens ignored. Stored values are trimmed of surrounding
    whitespace; the text between is kept as written.
    """

    record = Record(
        first_name=_resolve(row, "first_name"),
        phone=_resolve(row, "phone"),
        notes=_resolve(row, "notes"),
    )
    if not record.is_usable():
        return None
    return record


def normalize_rows(rows: Iterable[Mapping[Any, Any]]) -> List[Record]:
    """Normalise ``rows`` in order, dropping rows without a name or phone."""

    records: List[Record] = []
    for row in rows:
        record = normalize_row(row)
        if record is not None:
            records.append(record)
    return records


def _resolve(row: Mapping[Any, Any], field: str) -> str:
    for column in _FIELD_SYNONYMS[field]:
        if column not in row:
            continue
        text = _clean_text(row[column])
        if text:
            return text

    for wanted in _LENIENT_KEYS[field]:
        for column, value in row.items():
            if column is None or _normalise_key(column) != wanted:
                continue
            text = _clean_text(value)
            if text:
                return text
    return ""


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


__all__ = ["normalize_row", "normalize_rows"]
