"""Tests for the contract lifecycle rules."""
import pytest

from contractdesk.domain.contracts.models import Contract
from contractdesk.domain.lifecycle import engine
from contractdesk.shared.enums import ContractStatus, LifecycleAction
from contractdesk.shared.errors import LifecycleViolation

ALL_STATUSES = list(ContractStatus)


def _contract(status: ContractStatus = ContractStatus.CREATED) -> Contract:
    return Contract(id="c", name="C", blueprint_id="bp", status=status)


def test_advance_visits_full_order_then_noops():
    contract = _contract()
    visited = [contract.status]
    for _ in range(4):
        contract = engine.advance(contract)
        visited.append(contract.status)
    assert visited == [
        ContractStatus.CREATED,
        ContractStatus.APPROVED,
        ContractStatus.SENT,
        ContractStatus.SIGNED,
        ContractStatus.LOCKED,
    ]
    for _ in range(3):
        again = engine.advance(contract)
        assert again is contract
        assert again.status is ContractStatus.LOCKED


def test_advance_on_revoked_is_noop():
    revoked = _contract(ContractStatus.REVOKED)
    assert engine.advance(revoked) is revoked


def test_advance_does_not_mutate_input():
    contract = _contract(ContractStatus.SENT)
    engine.advance(contract)
    assert contract.status is ContractStatus.SENT


@pytest.mark.parametrize("status", [s for s in ALL_STATUSES if s is not ContractStatus.REVOKED])
def test_revoke_from_every_non_revoked_status(status):
    assert engine.revoke(_contract(status)).status is ContractStatus.REVOKED


def test_revoke_is_idempotent():
    once = engine.revoke(_contract(ContractStatus.APPROVED))
    twice = engine.revoke(once)
    assert once.status is twice.status is ContractStatus.REVOKED
    assert twice is once


@pytest.mark.parametrize("status", ALL_STATUSES)
def test_is_mutable_iff_not_locked_or_revoked(status):
    expected = status not in (ContractStatus.LOCKED, ContractStatus.REVOKED)
    assert engine.is_mutable(_contract(status)) is expected
    if expected:
        engine.ensure_mutable(_contract(status))
    else:
        with pytest.raises(LifecycleViolation) as exc:
            engine.ensure_mutable(_contract(status))
        assert exc.value.status == status.value


def test_next_status():
    assert engine.next_status(ContractStatus.CREATED) is ContractStatus.APPROVED
    assert engine.next_status(ContractStatus.SIGNED) is ContractStatus.LOCKED
    assert engine.next_status(ContractStatus.LOCKED) is None
    assert engine.next_status(ContractStatus.REVOKED) is None


@pytest.mark.parametrize(
    "current,target",
    [
        (ContractStatus.CREATED, ContractStatus.APPROVED),
        (ContractStatus.SIGNED, ContractStatus.LOCKED),
        (ContractStatus.LOCKED, ContractStatus.REVOKED),
        (ContractStatus.SENT, ContractStatus.REVOKED),
    ],
)
def test_ensure_transition_allowed(current, target):
    engine.ensure_transition(current, target)
    assert engine.transition(_contract(current), target).status is target


@pytest.mark.parametrize(
    "current,target",
    [
        (ContractStatus.CREATED, ContractStatus.SENT),
        (ContractStatus.SENT, ContractStatus.APPROVED),
        (ContractStatus.CREATED, ContractStatus.CREATED),
        (ContractStatus.LOCKED, ContractStatus.CREATED),
        (ContractStatus.REVOKED, ContractStatus.REVOKED),
        (ContractStatus.REVOKED, ContractStatus.CREATED),
    ],
)
def test_ensure_transition_rejected(current, target):
    with pytest.raises(LifecycleViolation) as exc:
        engine.ensure_transition(current, target)
    assert exc.value.code == "invalid_transition"


def test_available_actions():
    assert engine.available_actions(ContractStatus.CREATED) == {
        LifecycleAction.ADVANCE: True,
        LifecycleAction.REVOKE: True,
    }
    assert engine.available_actions(ContractStatus.LOCKED) == {
        LifecycleAction.ADVANCE: False,
        LifecycleAction.REVOKE: True,
    }
    assert engine.available_actions(ContractStatus.REVOKED) == {
        LifecycleAction.ADVANCE: False,
        LifecycleAction.REVOKE: False,
    }
