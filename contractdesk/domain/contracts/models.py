from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional, Union

from contractdesk.domain.blueprints.models import BlueprintField, FieldPosition, utcnow
from contractdesk.shared.enums import ContractStatus, FieldType

FieldValue = Union[str, bool, None]


def default_value_for(field_type: FieldType) -> Union[str, bool]:
    """Empty value a new contract field starts with."""
    if field_type == FieldType.CHECKBOX:
        return False
    return ""


@dataclass
class ContractField:
    # Copy of a blueprint field taken when the contract was created.
    # Later blueprint edits do not reach it.
    id: str
    label: str
    type: FieldType
    position: FieldPosition = field(default_factory=FieldPosition)
    value: FieldValue = None

    @classmethod
    def from_blueprint_field(cls, source: BlueprintField) -> "ContractField":
        return cls(
            id=source.id,
            label=source.label,
            type=source.type,
            position=FieldPosition(x=source.position.x, y=source.position.y),
            value=default_value_for(source.type),
        )


@dataclass
class Contract:
    id: str
    name: str
    blueprint_id: str
    fields: List[ContractField] = field(default_factory=list)
    status: ContractStatus = ContractStatus.CREATED
    created_at: datetime = field(default_factory=utcnow)

    def field_values(self) -> Dict[str, FieldValue]:
        """Current values keyed by field id."""
        return {f.id: f.value for f in self.fields}

    def get_field(self, field_id: str) -> Optional[ContractField]:
        for f in self.fields:
            if f.id == field_id:
                return f
        return None

    def with_status(self, status: ContractStatus) -> "Contract":
        return replace(self, status=status)
