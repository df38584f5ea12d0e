"""In-memory blueprint collection with the referential integrity guard."""
from __future__ import annotations

import copy
from typing import Callable, Iterable, List, Optional

from contractdesk.domain.blueprints.models import Blueprint, ensure_unique_field_ids
from contractdesk.shared.errors import (
    BlueprintNotFoundError,
    ReferentialIntegrityViolation,
    ValidationError,
)
from contractdesk.shared.logging import get_logger

logger = get_logger(__name__)

UNKNOWN_BLUEPRINT_NAME = "Unknown Blueprint"

# blueprint_id -> ids of contracts that reference it
ReferenceLookup = Callable[[str], List[str]]


def _no_references(_blueprint_id: str) -> List[str]:
    return []


class BlueprintStore:
    """
    Ordered blueprint collection.

    Stored objects are private copies: callers get copies back and change
    the collection only through add/update/delete.
    """

    def __init__(
        self,
        blueprints: Iterable[Blueprint] = (),
        references: ReferenceLookup = _no_references,
    ) -> None:
        self._items: List[Blueprint] = []
        self._references = references
        for bp in blueprints:
            self.add(bp)

    def __len__(self) -> int:
        return len(self._items)

    def _index_of(self, blueprint_id: str) -> int:
        for idx, bp in enumerate(self._items):
            if bp.id == blueprint_id:
                return idx
        return -1

    def list(self) -> List[Blueprint]:
        return copy.deepcopy(self._items)

    def get(self, blueprint_id: str) -> Optional[Blueprint]:
        idx = self._index_of(blueprint_id)
        return copy.deepcopy(self._items[idx]) if idx >= 0 else None

    def require(self, blueprint_id: str) -> Blueprint:
        bp = self.get(blueprint_id)
        if bp is None:
            raise BlueprintNotFoundError(f"Blueprint '{blueprint_id}' not found")
        return bp

    def add(self, blueprint: Blueprint) -> None:
        """Append a blueprint. Names may repeat; ids may not."""
        if self._index_of(blueprint.id) >= 0:
            raise ValidationError(
                f"Blueprint id '{blueprint.id}' already exists.",
                code="duplicate_id",
            )
        ensure_unique_field_ids(blueprint.fields)
        self._items.append(copy.deepcopy(blueprint))

    def update(self, blueprint: Blueprint) -> None:
        """Replace the stored blueprint with the same id, keeping its position."""
        idx = self._index_of(blueprint.id)
        if idx < 0:
            raise BlueprintNotFoundError(f"Blueprint '{blueprint.id}' not found")
        ensure_unique_field_ids(blueprint.fields)
        self._items[idx] = copy.deepcopy(blueprint)

    def referencing_contracts(self, blueprint_id: str) -> List[str]:
        return list(self._references(blueprint_id))

    def has_contracts(self, blueprint_id: str) -> bool:
        return bool(self.referencing_contracts(blueprint_id))

    def delete(self, blueprint_id: str) -> None:
        """
        Remove a blueprint.

        Raises ReferentialIntegrityViolation while any contract still points
        at it; the collection is left untouched in that case.
        """
        idx = self._index_of(blueprint_id)
        if idx < 0:
            raise BlueprintNotFoundError(f"Blueprint '{blueprint_id}' not found")
        contract_ids = self.referencing_contracts(blueprint_id)
        if contract_ids:
            logger.warning(
                "delete blocked: blueprint_id=%s referenced_by=%d contracts",
                blueprint_id, len(contract_ids),
            )
            raise ReferentialIntegrityViolation(blueprint_id, contract_ids)
        self._items = [bp for bp in self._items if bp.id != blueprint_id]

    def name_for(self, blueprint_id: str) -> str:
        """Blueprint name for display joins."""
        idx = self._index_of(blueprint_id)
        return self._items[idx].name if idx >= 0 else UNKNOWN_BLUEPRINT_NAME
