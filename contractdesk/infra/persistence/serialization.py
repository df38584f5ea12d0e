"""Conversion between domain objects and the plain records persisted per key.

Records use the original storage layout: camelCase keys (``blueprintId``,
``createdAt``), ``position`` as ``{"x": .., "y": ..}`` and ISO-8601 dates.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List

from contractdesk.domain.blueprints.models import (
    DEFAULT_FIELD_X,
    DEFAULT_FIELD_Y,
    Blueprint,
    BlueprintField,
    FieldPosition,
)
from contractdesk.domain.contracts.models import Contract, ContractField
from contractdesk.shared.enums import ContractStatus, FieldType
from contractdesk.shared.errors import StorageError


def _malformed(kind: str, detail: str) -> StorageError:
    return StorageError(f"Malformed {kind} record: {detail}", code="malformed_record")


def _record(data: Any, kind: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise _malformed(kind, f"expected an object, got {type(data).__name__}")
    return data


def _created_at(data: Dict[str, Any], kind: str) -> datetime:
    """
    Parse ``createdAt`` (or ``created_at``); naive values are taken as UTC.
    A record without the key is stamped now, a present but unreadable value raises.
    """
    key = "createdAt" if "createdAt" in data else "created_at"
    if key not in data or data[key] is None:
        return datetime.now(timezone.utc)
    raw = data[key]
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, str):
        try:
            # JS Date.toISOString() ends with "Z"
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError as exc:
            raise _malformed(kind, f"bad {key} '{raw}'") from exc
    else:
        raise _malformed(kind, f"bad {key} '{raw}'")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _position_to_dict(position: FieldPosition) -> Dict[str, float]:
    return {"x": position.x, "y": position.y}


def _position_from_dict(raw: Any) -> FieldPosition:
    if not isinstance(raw, dict):
        return FieldPosition()
    try:
        return FieldPosition(
            x=float(raw.get("x", DEFAULT_FIELD_X)),
            y=float(raw.get("y", DEFAULT_FIELD_Y)),
        )
    except (TypeError, ValueError):
        return FieldPosition()


def _require(data: Dict[str, Any], key: str, kind: str) -> Any:
    if key not in data:
        raise _malformed(kind, f"missing '{key}'")
    return data[key]


def _field_type(raw: Any, kind: str) -> FieldType:
    try:
        return FieldType(raw)
    except ValueError as exc:
        raise _malformed(kind, f"unknown type '{raw}'") from exc


def _field_records(data: Dict[str, Any], kind: str) -> List[Dict[str, Any]]:
    raw = data.get("fields") or []
    if not isinstance(raw, list):
        raise _malformed(kind, "'fields' is not a list")
    return [_record(item, f"{kind} field") for item in raw]


def blueprint_to_dict(blueprint: Blueprint) -> Dict[str, Any]:
    return {
        "id": blueprint.id,
        "name": blueprint.name,
        "fields": [
            {
                "id": f.id,
                "label": f.label,
                "type": f.type.value,
                "position": _position_to_dict(f.position),
            }
            for f in blueprint.fields
        ],
        "createdAt": blueprint.created_at.isoformat(),
    }


def blueprint_from_dict(data: Dict[str, Any]) -> Blueprint:
    data = _record(data, "blueprint")
    fields = [
        BlueprintField(
            id=_require(raw, "id", "blueprint field"),
            label=raw.get("label", ""),
            type=_field_type(raw.get("type", FieldType.TEXT.value), "blueprint field"),
            position=_position_from_dict(raw.get("position")),
        )
        for raw in _field_records(data, "blueprint")
    ]
    return Blueprint(
        id=_require(data, "id", "blueprint"),
        name=data.get("name", ""),
        fields=fields,
        created_at=_created_at(data, "blueprint"),
    )


def contract_to_dict(contract: Contract) -> Dict[str, Any]:
    fields: List[Dict[str, Any]] = []
    for f in contract.fields:
        record: Dict[str, Any] = {
            "id": f.id,
            "label": f.label,
            "type": f.type.value,
            "position": _position_to_dict(f.position),
        }
        # An absent value stays absent rather than null
        if f.value is not None:
            record["value"] = f.value
        fields.append(record)
    return {
        "id": contract.id,
        "name": contract.name,
        "blueprintId": contract.blueprint_id,
        "fields": fields,
        "status": contract.status.value,
        "createdAt": contract.created_at.isoformat(),
    }


def contract_from_dict(data: Dict[str, Any]) -> Contract:
    data = _record(data, "contract")
    fields = []
    for raw in _field_records(data, "contract"):
        value = raw.get("value")
        if value is not None and not isinstance(value, (str, bool)):
            value = str(value)
        fields.append(
            ContractField(
                id=_require(raw, "id", "contract field"),
                label=raw.get("label", ""),
                type=_field_type(raw.get("type", FieldType.TEXT.value), "contract field"),
                position=_position_from_dict(raw.get("position")),
                value=value,
            )
        )
    raw_status = data.get("status", ContractStatus.CREATED.value)
    try:
        status = ContractStatus(raw_status)
    except ValueError as exc:
        raise _malformed("contract", f"unknown status '{raw_status}'") from exc
    return Contract(
        id=_require(data, "id", "contract"),
        name=data.get("name", ""),
        blueprint_id=data.get("blueprintId") or data.get("blueprint_id") or "",
        fields=fields,
        status=status,
        created_at=_created_at(data, "contract"),
    )


def blueprints_to_records(blueprints: Iterable[Blueprint]) -> List[Dict[str, Any]]:
    return [blueprint_to_dict(bp) for bp in blueprints]


def blueprints_from_records(records: Iterable[Dict[str, Any]]) -> List[Blueprint]:
    return [blueprint_from_dict(r) for r in records]


def contracts_to_records(contracts: Iterable[Contract]) -> List[Dict[str, Any]]:
    return [contract_to_dict(c) for c in contracts]


def contracts_from_records(records: Iterable[Dict[str, Any]]) -> List[Contract]:
    return [contract_from_dict(r) for r in records]
