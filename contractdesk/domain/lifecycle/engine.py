"""
Contract lifecycle rules.

Stateless: pure transition and mutability guards, no storage here.
The contract store persists whatever these functions return.

Forward order: Created -> Approved -> Sent -> Signed -> Locked.
Revoked is absorbing and reachable by revoke from every status except
Revoked itself (Locked included).
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

from contractdesk.domain.contracts.models import Contract
from contractdesk.shared.enums import ContractStatus, LifecycleAction
from contractdesk.shared.errors import LifecycleViolation

LIFECYCLE_ORDER: Tuple[ContractStatus, ...] = (
    ContractStatus.CREATED,
    ContractStatus.APPROVED,
    ContractStatus.SENT,
    ContractStatus.SIGNED,
    ContractStatus.LOCKED,
)

IMMUTABLE_STATUSES = frozenset({ContractStatus.LOCKED, ContractStatus.REVOKED})


def next_status(status: ContractStatus) -> Optional[ContractStatus]:
    """Forward successor of ``status`` or None when advance is a no-op."""
    if status in IMMUTABLE_STATUSES:
        return None
    idx = LIFECYCLE_ORDER.index(status)
    if idx + 1 >= len(LIFECYCLE_ORDER):
        return None
    return LIFECYCLE_ORDER[idx + 1]


def can_advance(status: ContractStatus) -> bool:
    return next_status(status) is not None


def can_revoke(status: ContractStatus) -> bool:
    return status != ContractStatus.REVOKED


def status_is_mutable(status: ContractStatus) -> bool:
    return status not in IMMUTABLE_STATUSES


def is_mutable(contract: Contract) -> bool:
    """Whether the contract's name and field values may still be edited."""
    return status_is_mutable(contract.status)


def ensure_mutable(contract: Contract) -> None:
    if not is_mutable(contract):
        raise LifecycleViolation(
            f"Cannot edit a {contract.status.value} contract.",
            status=contract.status.value,
            code="contract_immutable",
        )


def advance(contract: Contract) -> Contract:
    """
    Move the contract one step forward.
    Locked and Revoked contracts come back unchanged.
    """
    target = next_status(contract.status)
    if target is None:
        return contract
    return contract.with_status(target)


def revoke(contract: Contract) -> Contract:
    """Move the contract to Revoked; already revoked contracts come back unchanged."""
    if not can_revoke(contract.status):
        return contract
    return contract.with_status(ContractStatus.REVOKED)


def ensure_transition(current: ContractStatus, target: ContractStatus) -> None:
    """
    Validate an explicitly requested status change.

    Only the single forward step or a revoke is accepted; staying in place,
    skipping ahead, going back and leaving Revoked all raise.
    """
    if target == ContractStatus.REVOKED and can_revoke(current):
        return
    if target == next_status(current):
        return
    raise LifecycleViolation(
        f"Transition {current.value} -> {target.value} is not allowed.",
        status=current.value,
        code="invalid_transition",
    )


def transition(contract: Contract, target: ContractStatus) -> Contract:
    ensure_transition(contract.status, target)
    return contract.with_status(target)


def available_actions(status: ContractStatus) -> Dict[LifecycleAction, bool]:
    """Which actions a contract in ``status`` offers."""
    return {
        LifecycleAction.ADVANCE: can_advance(status),
        LifecycleAction.REVOKE: can_revoke(status),
    }
