"""Workspace: the blueprint and contract collections plus their persistence.

Every user action goes through here. Input is validated before any store is
touched, the affected collection is written through the key-value store
before the call returns, and subscribers are told which collection changed.
"""
from __future__ import annotations

import copy
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from contractdesk.domain.blueprints.models import (
    Blueprint,
    BlueprintField,
    ensure_unique_field_ids,
    generate_id,
)
from contractdesk.domain.blueprints.store import BlueprintStore
from contractdesk.domain.contracts.models import Contract, FieldValue
from contractdesk.domain.contracts.store import ContractStore
from contractdesk.domain.lifecycle import engine
from contractdesk.infra.config.settings import settings
from contractdesk.infra.persistence.kv_store import KeyValueStore
from contractdesk.infra.persistence.serialization import (
    blueprints_from_records,
    blueprints_to_records,
    contracts_from_records,
    contracts_to_records,
)
from contractdesk.infra.persistence.store import get_kv_store
from contractdesk.shared.enums import ContractStatus, FieldType, LifecycleAction
from contractdesk.shared.errors import (
    ContractDeskError,
    LifecycleViolation,
    StorageError,
    ValidationError,
)
from contractdesk.shared.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[[str], None]


def _clean_name(name: Optional[str], what: str) -> str:
    clean = (name or "").strip()
    if not clean:
        raise ValidationError(f"Enter {what} name!", code=f"{what}_name")
    return clean


def _check_value(field_type: FieldType, field_id: str, value: FieldValue) -> None:
    if field_type == FieldType.CHECKBOX:
        if not isinstance(value, bool):
            raise ValidationError(
                f"Field '{field_id}' is a checkbox and takes true/false.",
                code="field_value",
            )
    elif not isinstance(value, str):
        raise ValidationError(
            f"Field '{field_id}' takes a text value.",
            code="field_value",
        )


def _apply_values(contract: Contract, values: Mapping[str, FieldValue]) -> None:
    """Validate every value first, then write them all."""
    for field_id, value in values.items():
        target = contract.get_field(field_id)
        if target is None:
            raise ValidationError(
                f"Contract has no field '{field_id}'.",
                code="unknown_field",
            )
        _check_value(target.type, field_id, value)
    for field_id, value in values.items():
        contract.get_field(field_id).value = value


class Workspace:
    """Explicit, injectable replacement for a global application state."""

    def __init__(
        self,
        kv_store: Optional[KeyValueStore] = None,
        blueprints_key: Optional[str] = None,
        contracts_key: Optional[str] = None,
    ) -> None:
        self.kv_store = kv_store if kv_store is not None else get_kv_store()
        self.blueprints_key = blueprints_key or settings.blueprints_key
        self.contracts_key = contracts_key or settings.contracts_key
        self._listeners: List[Listener] = []
        self.contracts: ContractStore
        self.blueprints: BlueprintStore
        self.load()

    # ------------------------------------------------------------------ io

    def load(self) -> None:
        """Read both collections from the key-value store."""
        blueprints = blueprints_from_records(self.kv_store.load(self.blueprints_key))
        contracts = contracts_from_records(self.kv_store.load(self.contracts_key))
        try:
            self.contracts = ContractStore(contracts)
            self.blueprints = BlueprintStore(blueprints, references=self.contracts.contract_ids_for)
        except ValidationError as exc:
            logger.error("Persisted collections rejected: %s", exc)
            raise StorageError(f"Persisted data is inconsistent: {exc}", code="malformed_collection") from exc
        logger.info(
            "workspace loaded: blueprints=%d contracts=%d",
            len(self.blueprints), len(self.contracts),
        )

    def _flush_blueprints(self) -> None:
        self.kv_store.save(self.blueprints_key, blueprints_to_records(self.blueprints.list()))
        self._notify(self.blueprints_key)

    def _flush_contracts(self) -> None:
        self.kv_store.save(self.contracts_key, contracts_to_records(self.contracts.list()))
        self._notify(self.contracts_key)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, key: str) -> None:
        for listener in list(self._listeners):
            listener(key)

    # ---------------------------------------------------------- blueprints

    def list_blueprints(self) -> List[Blueprint]:
        return self.blueprints.list()

    def get_blueprint(self, blueprint_id: str) -> Blueprint:
        return self.blueprints.require(blueprint_id)

    def blueprint_name(self, blueprint_id: str) -> str:
        return self.blueprints.name_for(blueprint_id)

    def has_contracts(self, blueprint_id: str) -> bool:
        return self.blueprints.has_contracts(blueprint_id)

    def create_blueprint(
        self,
        name: str,
        fields: Iterable[BlueprintField] = (),
    ) -> Blueprint:
        field_list = copy.deepcopy(list(fields))
        ensure_unique_field_ids(field_list)
        blueprint = Blueprint(
            id=generate_id(),
            name=_clean_name(name, "blueprint"),
            fields=field_list,
        )
        self.blueprints.add(blueprint)
        self._flush_blueprints()
        logger.info(
            "blueprint created: blueprint_id=%s fields=%d",
            blueprint.id, len(blueprint.fields),
        )
        return blueprint

    def update_blueprint(
        self,
        blueprint_id: str,
        name: str,
        fields: Iterable[BlueprintField],
    ) -> Blueprint:
        """Replace name and fields; existing contracts keep their snapshots."""
        current = self.blueprints.require(blueprint_id)
        updated = Blueprint(
            id=current.id,
            name=_clean_name(name, "blueprint"),
            fields=copy.deepcopy(list(fields)),
            created_at=current.created_at,
        )
        self.blueprints.update(updated)
        self._flush_blueprints()
        logger.info("blueprint updated: blueprint_id=%s", blueprint_id)
        return updated

    def delete_blueprint(self, blueprint_id: str) -> None:
        try:
            self.blueprints.delete(blueprint_id)
        except ContractDeskError as exc:
            logger.warning("delete_blueprint rejected: blueprint_id=%s reason=%s", blueprint_id, exc)
            raise
        self._flush_blueprints()
        logger.info("blueprint deleted: blueprint_id=%s", blueprint_id)

    # ----------------------------------------------------------- contracts

    def list_contracts(self) -> List[Contract]:
        return self.contracts.list()

    def get_contract(self, contract_id: str) -> Contract:
        return self.contracts.require(contract_id)

    def contracts_for_blueprint(self, blueprint_id: str) -> List[Contract]:
        return self.contracts.find_by_blueprint(blueprint_id)

    def is_mutable(self, contract_id: str) -> bool:
        return self.contracts.is_mutable(contract_id)

    def field_values(self, contract_id: str) -> Dict[str, FieldValue]:
        return self.contracts.field_values(contract_id)

    def available_actions(self, contract_id: str) -> Dict[LifecycleAction, bool]:
        return engine.available_actions(self.contracts.require(contract_id).status)

    def create_contract(
        self,
        name: str,
        blueprint_id: str,
        values: Optional[Mapping[str, FieldValue]] = None,
    ) -> Contract:
        """Instantiate a contract from a blueprint's current fields."""
        if not (name or "").strip() or not (blueprint_id or "").strip():
            logger.warning("create_contract rejected: missing name or blueprint")
            raise ValidationError(
                "Enter contract name and select blueprint!",
                code="contract_required",
            )
        blueprint = self.blueprints.get(blueprint_id)
        if blueprint is None:
            raise ValidationError(
                f"Blueprint '{blueprint_id}' does not exist.",
                code="unknown_blueprint",
            )
        contract = Contract(
            id=generate_id(),
            name=name.strip(),
            blueprint_id=blueprint.id,
            fields=self.contracts.create_from(blueprint),
            status=ContractStatus.CREATED,
        )
        if values:
            _apply_values(contract, values)
        self.contracts.add(contract)
        self._flush_contracts()
        logger.info(
            "contract created: contract_id=%s blueprint_id=%s",
            contract.id, blueprint.id,
        )
        return contract

    def update_contract(
        self,
        contract_id: str,
        name: Optional[str] = None,
        values: Optional[Mapping[str, FieldValue]] = None,
        blueprint_id: Optional[str] = None,
    ) -> Contract:
        """
        Edit name and/or field values of a mutable contract.

        ``blueprint_id`` is accepted only when it matches the contract's own
        blueprint; it is fixed once the contract exists.
        """
        contract = self.contracts.require(contract_id)
        try:
            engine.ensure_mutable(contract)
            if blueprint_id is not None and blueprint_id != contract.blueprint_id:
                raise LifecycleViolation(
                    "Blueprint cannot be changed after the contract is created.",
                    status=contract.status.value,
                    code="blueprint_fixed",
                )
            if name is not None:
                contract.name = _clean_name(name, "contract")
            if values:
                _apply_values(contract, values)
        except ContractDeskError as exc:
            logger.warning("update_contract rejected: contract_id=%s reason=%s", contract_id, exc)
            raise
        self.contracts.update(contract)
        self._flush_contracts()
        logger.info("contract updated: contract_id=%s", contract_id)
        return contract

    def advance_contract(self, contract_id: str) -> Contract:
        before = self.contracts.require(contract_id).status
        contract = self.contracts.advance(contract_id)
        if contract.status != before:
            self._flush_contracts()
        return contract

    def revoke_contract(self, contract_id: str) -> Contract:
        before = self.contracts.require(contract_id).status
        contract = self.contracts.revoke(contract_id)
        if contract.status != before:
            self._flush_contracts()
        return contract

    def transition_contract(self, contract_id: str, target: ContractStatus) -> Contract:
        """Move to an explicit status; anything but the next step or a revoke raises."""
        current = self.contracts.require(contract_id)
        try:
            moved = engine.transition(current, target)
        except LifecycleViolation as exc:
            logger.warning("transition rejected: contract_id=%s reason=%s", contract_id, exc)
            raise
        self.contracts.update(moved)
        self._flush_contracts()
        logger.info(
            "contract moved: contract_id=%s %s -> %s",
            contract_id, current.status.value, moved.status.value,
        )
        return moved
