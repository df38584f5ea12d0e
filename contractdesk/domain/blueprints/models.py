from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Union

from contractdesk.shared.enums import FieldType
from contractdesk.shared.errors import ValidationError

# Where the editor drops a freshly added field
DEFAULT_FIELD_X = 50.0
DEFAULT_FIELD_Y = 50.0


def generate_id() -> str:
    """Generate a unique entity ID (UUID4 string)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def coerce_field_type(value: Union[str, FieldType]) -> FieldType:
    """Accept a FieldType or its string value."""
    if isinstance(value, FieldType):
        return value
    try:
        return FieldType(str(value).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(t.value for t in FieldType)
        raise ValidationError(
            f"Unknown field type '{value}'. Allowed: {allowed}.",
            code="field_type",
        ) from exc


@dataclass
class FieldPosition:
    # Free-form layout coordinate, not checked against any canvas
    x: float = DEFAULT_FIELD_X
    y: float = DEFAULT_FIELD_Y


@dataclass
class BlueprintField:
    id: str
    label: str
    type: FieldType = FieldType.TEXT
    position: FieldPosition = field(default_factory=FieldPosition)


@dataclass
class Blueprint:
    id: str
    name: str
    fields: List[BlueprintField] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)

    def field_ids(self) -> List[str]:
        return [f.id for f in self.fields]


def new_blueprint_field(
    label: str,
    field_type: Union[str, FieldType] = FieldType.TEXT,
    position: Optional[FieldPosition] = None,
) -> BlueprintField:
    """
    Build a field for a blueprint being edited.

    The id is assigned here once and kept for the lifetime of the field,
    so contracts snapshotting it later share the same field id.
    """
    clean_label = (label or "").strip()
    if not clean_label:
        raise ValidationError("Field label is required.", code="field_label")
    return BlueprintField(
        id=generate_id(),
        label=clean_label,
        type=coerce_field_type(field_type),
        position=position or FieldPosition(),
    )


def ensure_unique_field_ids(fields: List[BlueprintField]) -> None:
    """Raise ValidationError if two fields share an id."""
    seen: set[str] = set()
    for f in fields:
        if f.id in seen:
            raise ValidationError(
                f"Duplicate field id '{f.id}' in blueprint.",
                code="duplicate_field_id",
            )
        seen.add(f.id)
