"""In-memory contract collection."""
from __future__ import annotations

import copy
from typing import Dict, Iterable, List, Optional

from contractdesk.domain.blueprints.models import Blueprint
from contractdesk.domain.contracts.models import Contract, ContractField, FieldValue
from contractdesk.domain.lifecycle import engine
from contractdesk.shared.enums import ContractStatus
from contractdesk.shared.errors import (
    ContractNotFoundError,
    LifecycleViolation,
    ValidationError,
)
from contractdesk.shared.logging import get_logger

logger = get_logger(__name__)


class ContractStore:
    """
    Ordered contract collection.

    ``update`` is a plain replace by id and does not look at the lifecycle;
    callers that edit name or values check ``is_mutable`` first. Status only
    moves through ``advance``/``revoke``. Contracts are never removed.
    """

    def __init__(self, contracts: Iterable[Contract] = ()) -> None:
        self._items: List[Contract] = []
        for c in contracts:
            self._append(c)

    def __len__(self) -> int:
        return len(self._items)

    def _index_of(self, contract_id: str) -> int:
        for idx, c in enumerate(self._items):
            if c.id == contract_id:
                return idx
        return -1

    def _append(self, contract: Contract) -> None:
        if self._index_of(contract.id) >= 0:
            raise ValidationError(
                f"Contract id '{contract.id}' already exists.",
                code="duplicate_id",
            )
        self._items.append(copy.deepcopy(contract))

    def list(self) -> List[Contract]:
        return copy.deepcopy(self._items)

    def get(self, contract_id: str) -> Optional[Contract]:
        idx = self._index_of(contract_id)
        return copy.deepcopy(self._items[idx]) if idx >= 0 else None

    def require(self, contract_id: str) -> Contract:
        contract = self.get(contract_id)
        if contract is None:
            raise ContractNotFoundError(f"Contract '{contract_id}' not found")
        return contract

    @staticmethod
    def create_from(blueprint: Blueprint) -> List[ContractField]:
        """Snapshot the blueprint's fields with their empty default values."""
        return [ContractField.from_blueprint_field(f) for f in blueprint.fields]

    def add(self, contract: Contract) -> None:
        """Append a newly created contract."""
        if contract.status != ContractStatus.CREATED:
            raise LifecycleViolation(
                "New contracts must start in status Created.",
                status=contract.status.value,
                code="invalid_initial_status",
            )
        self._append(contract)

    def update(self, contract: Contract) -> None:
        """Replace the stored contract with the same id."""
        idx = self._index_of(contract.id)
        if idx < 0:
            raise ContractNotFoundError(f"Contract '{contract.id}' not found")
        self._items[idx] = copy.deepcopy(contract)

    def find_by_blueprint(self, blueprint_id: str) -> List[Contract]:
        return [copy.deepcopy(c) for c in self._items if c.blueprint_id == blueprint_id]

    def contract_ids_for(self, blueprint_id: str) -> List[str]:
        return [c.id for c in self._items if c.blueprint_id == blueprint_id]

    def has_contracts(self, blueprint_id: str) -> bool:
        return any(c.blueprint_id == blueprint_id for c in self._items)

    def is_mutable(self, contract_id: str) -> bool:
        return engine.is_mutable(self.require(contract_id))

    def advance(self, contract_id: str) -> Contract:
        """Advance one lifecycle step; a no-op for Locked/Revoked contracts."""
        current = self.require(contract_id)
        moved = engine.advance(current)
        if moved.status != current.status:
            self.update(moved)
            logger.info(
                "contract advanced: contract_id=%s %s -> %s",
                contract_id, current.status.value, moved.status.value,
            )
        return moved

    def revoke(self, contract_id: str) -> Contract:
        """Revoke the contract; a no-op when it is already revoked."""
        current = self.require(contract_id)
        revoked = engine.revoke(current)
        if revoked.status != current.status:
            self.update(revoked)
            logger.info(
                "contract revoked: contract_id=%s from=%s",
                contract_id, current.status.value,
            )
        return revoked

    def field_values(self, contract_id: str) -> Dict[str, FieldValue]:
        return self.require(contract_id).field_values()
