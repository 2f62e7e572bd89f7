"""Stage 6: Column Transformer - canonical record to storage columns.

Pure and deterministic. Every rename, nesting flatten and array coercion is
declared once in ``SHAPE_COLUMN_RULES``; nothing here guesses field names.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

from harbourmaster.models import Shape, ShapeRecord, require_every_shape


class ColumnKind(str, Enum):
    TEXT = "text"
    ARRAY = "array"
    BOOL = "bool"
    VALUE = "value"


@dataclass(frozen=True)
class ColumnRule:
    """One storage column and where its value comes from in the record."""

    column: str
    source: tuple[str, ...]
    kind: ColumnKind = ColumnKind.VALUE


def _rule(column: str, source: Optional[str] = None, kind: ColumnKind = ColumnKind.VALUE) -> ColumnRule:
    return ColumnRule(column=column, source=tuple((source or column).split(".")), kind=kind)


TEXT = ColumnKind.TEXT
ARRAY = ColumnKind.ARRAY
BOOL = ColumnKind.BOOL

SHAPE_COLUMN_RULES: Mapping[Shape, tuple[ColumnRule, ...]] = MappingProxyType({
    Shape.QNA: (
        _rule("harbour_name", "harbour", TEXT),
        _rule("question", kind=TEXT),
        _rule("answer", kind=TEXT),
        _rule("category"),
        _rule("tags", kind=ARRAY),
        _rule("tier"),
        _rule("notes", kind=TEXT),
    ),
    Shape.HARBOUR: (
        _rule("name", kind=TEXT),
        _rule("region", kind=TEXT),
        _rule("harbour_type"),
        _rule("latitude", "coordinates.lat"),
        _rule("longitude", "coordinates.lng"),
        _rule("description", kind=TEXT),
        _rule("facilities", kind=ARRAY),
        _rule("capacity"),
        _rule("depth_range", kind=TEXT),
        _rule("notes", kind=TEXT),
    ),
    Shape.WEATHER_PROFILE: (
        _rule("harbour_name", kind=TEXT),
        _rule("sheltered_from", "wind_directions.sheltered_from", ARRAY),
        _rule("exposed_to", "wind_directions.exposed_to", ARRAY),
        _rule("shelter_quality"),
        _rule("swell_susceptible", "swell_surge.susceptible", BOOL),
        _rule("swell_conditions", "swell_surge.conditions", TEXT),
        _rule("best_conditions", kind=TEXT),
        _rule("warnings", kind=TEXT),
        _rule("notes", kind=TEXT),
    ),
    Shape.MEDIA: (
        _rule("harbour_name", kind=TEXT),
        _rule("media_type"),
        _rule("title", kind=TEXT),
        _rule("file_url", "url", TEXT),
        _rule("description", kind=TEXT),
        _rule("category"),
        _rule("tags", kind=ARRAY),
        _rule("tier"),
        _rule("duration", kind=TEXT),
        _rule("notes", kind=TEXT),
    ),
})
require_every_shape(SHAPE_COLUMN_RULES, "SHAPE_COLUMN_RULES")

REFERENCING_SHAPES = frozenset({Shape.QNA, Shape.WEATHER_PROFILE, Shape.MEDIA})
SOURCE_ROW_SHAPES = frozenset({Shape.QNA, Shape.MEDIA})


def _columns_for(shape: Shape) -> tuple[str, ...]:
    columns = [rule.column for rule in SHAPE_COLUMN_RULES[shape]]
    if shape in REFERENCING_SHAPES:
        columns.insert(0, "harbour_id")
    if shape in SOURCE_ROW_SHAPES:
        columns.append("source_row_id")
    return tuple(columns)


SHAPE_COLUMNS: Mapping[Shape, tuple[str, ...]] = MappingProxyType(
    {shape: _columns_for(shape) for shape in Shape}
)


# =============================================================================
# Value coercion
# =============================================================================

def _lookup(data: Mapping[str, Any], path: tuple[str, ...]) -> Any:
    value: Any = data
    for key in path:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def _coerce(value: Any, kind: ColumnKind) -> Any:
    if isinstance(value, Enum):
        value = value.value

    if kind is ColumnKind.TEXT:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    if kind is ColumnKind.ARRAY:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        items = []
        for item in value:
            item = item.value if isinstance(item, Enum) else item
            item = item.strip() if isinstance(item, str) else item
            if item not in (None, ""):
                items.append(item)
        return items

    if kind is ColumnKind.BOOL:
        return bool(value) if value is not None else False

    return value


def to_columns(
    shape: Shape,
    record: Union[ShapeRecord, Mapping[str, Any]],
    reference_id: Optional[str] = None,
    row_id: Optional[str] = None,
) -> dict[str, Any]:
    """Map a canonical record to the exact column set of its table.

    Args:
        shape: Shape of the record.
        record: Validated record, or its plain-dict form.
        reference_id: Resolved harbour id (referencing shapes only).
        row_id: External tracking id, stored as ``source_row_id`` where supported.

    Returns:
        Column dict whose keys are exactly ``SHAPE_COLUMNS[shape]``.
    """
    data = record.model_dump(mode="json") if isinstance(record, BaseModel) else record

    columns: dict[str, Any] = {}
    if shape in REFERENCING_SHAPES:
        columns["harbour_id"] = reference_id
    for rule in SHAPE_COLUMN_RULES[shape]:
        columns[rule.column] = _coerce(_lookup(data, rule.source), rule.kind)
    if shape in SOURCE_ROW_SHAPES:
        columns["source_row_id"] = row_id
    return columns
