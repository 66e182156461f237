# ikemen_lab/services/smart_collections/accessors.py

"""Field accessor registry: extracts a rule field's native value from a record.

Every FilterField maps to a record attribute and to the item kinds it exists
for. Asking for a field on the wrong kind (``isHD`` on a stage) yields the
``NOT_APPLICABLE`` sentinel instead of raising.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Callable, Union

from ikemen_lab.core.records import CharacterRecord, StageRecord, as_utc
from ikemen_lab.services.smart_collections.models import (
    FIELD_ITEM_KINDS,
    FIELD_VALUE_TYPES,
    FilterField,
    ValueType,
)

__all__ = [
    "NOT_APPLICABLE",
    "FieldValue",
    "LibraryRecord",
    "field_to_record_attr",
    "get_field_value",
]

LibraryRecord = Union[CharacterRecord, StageRecord]


class _NotApplicable:
    """Marker for a field that does not exist on an item's kind."""

    _instance: _NotApplicable | None = None

    def __new__(cls) -> _NotApplicable:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_APPLICABLE"

    def __bool__(self) -> bool:
        return False


NOT_APPLICABLE = _NotApplicable()

FieldValue = Union[str, bool, float, datetime, frozenset, None, _NotApplicable]

# Maps FilterField to the record attribute name
_FIELD_TO_ATTR: dict[FilterField, str] = {
    FilterField.NAME: "name",
    FilterField.AUTHOR: "author",
    FilterField.TAG: "tags",
    FilterField.INSTALLED_AT: "installed_at",
    FilterField.IS_HD: "is_hd",
    FilterField.HAS_AI: "has_ai",
    FilterField.HAS_MUSIC: "has_music",
    FilterField.RESOLUTION: "resolution",
    FilterField.TOTAL_WIDTH: "total_width",
    FilterField.SOURCE_GAME: "source_game",
    FilterField.STYLE: "style",
}


def field_to_record_attr(fld: FilterField) -> str:
    """Maps a FilterField to the corresponding record attribute name.

    Args:
        fld: The filter field to map.

    Returns:
        The attribute name on CharacterRecord / StageRecord.
    """
    return _FIELD_TO_ATTR[fld]


def _as_string(raw: object) -> str | None:
    if raw is None:
        return None
    return str(raw)


def _as_tag_set(raw: object) -> frozenset[str]:
    if not raw:
        return frozenset()
    if isinstance(raw, str):
        raw = raw.split(",")
    return frozenset(tag.strip().lower() for tag in raw if tag and tag.strip())


def _as_bool(raw: object) -> bool | None:
    if raw is None:
        return None
    return bool(raw)


def _as_date(raw: object) -> datetime | None:
    if not isinstance(raw, datetime):
        return None
    return as_utc(raw)


def _as_number(raw: object) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


_NORMALIZERS: dict[ValueType, Callable[[object], FieldValue]] = {
    ValueType.STRING: _as_string,
    ValueType.STRING_SET: _as_tag_set,
    ValueType.BOOLEAN: _as_bool,
    ValueType.DATE: _as_date,
    ValueType.NUMBER: _as_number,
}


def get_field_value(fld: FilterField, record: LibraryRecord) -> FieldValue:
    """Extracts the native value of ``fld`` from a character or stage record.

    Tags come back as a lowercased frozenset, dates as aware UTC datetimes and
    numbers as finite floats. Optional metadata the store does not know comes
    back as None.

    Args:
        fld: The filter field to extract.
        record: The record to read from.

    Returns:
        The field value, or NOT_APPLICABLE when the field does not exist for
        the record's kind.
    """
    if record.kind not in FIELD_ITEM_KINDS[fld]:
        return NOT_APPLICABLE

    raw = getattr(record, _FIELD_TO_ATTR[fld], None)
    return _NORMALIZERS[FIELD_VALUE_TYPES[fld]](raw)
