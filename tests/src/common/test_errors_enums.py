"""Tests for shared enums and error classes."""
from contractdesk.shared.enums import ContractStatus, FieldType, LifecycleAction
from contractdesk.shared.errors import (
    BlueprintNotFoundError,
    ContractDeskError,
    ContractNotFoundError,
    LifecycleViolation,
    NotFoundError,
    ReferentialIntegrityViolation,
    ValidationError,
)


def test_enum_values():
    """Enum values match the persisted strings."""
    assert [t.value for t in FieldType] == ["text", "date", "checkbox", "signature"]
    assert ContractStatus.CREATED.value == "Created"
    assert ContractStatus.REVOKED.value == "Revoked"
    assert ContractStatus("Locked") is ContractStatus.LOCKED
    assert LifecycleAction.ADVANCE.value == "advance"


def test_validation_error_code():
    """ValidationError stores and exposes its code."""
    err = ValidationError("bad", code="E1")
    assert err.code == "E1"
    assert "bad" in str(err)
    assert isinstance(err, ContractDeskError)


def test_referential_integrity_violation_payload():
    err = ReferentialIntegrityViolation("bp1", ["c1", "c2"])
    assert err.blueprint_id == "bp1"
    assert err.contract_ids == ["c1", "c2"]
    assert err.code == "blueprint_in_use"
    assert "Cannot delete blueprint" in str(err)


def test_lifecycle_violation_status():
    err = LifecycleViolation("nope", status="Locked")
    assert err.status == "Locked"
    assert err.code == "lifecycle"


def test_not_found_hierarchy():
    assert issubclass(BlueprintNotFoundError, NotFoundError)
    assert issubclass(ContractNotFoundError, NotFoundError)
    assert "Blueprint" in str(BlueprintNotFoundError("Blueprint missing"))
