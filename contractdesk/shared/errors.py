"""Custom exception classes for the application."""
from __future__ import annotations

from typing import Iterable, Optional


class ContractDeskError(Exception):
    """Base class for recoverable domain errors."""
    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class ValidationError(ContractDeskError):
    """Raised when required input is missing or invalid."""


class ReferentialIntegrityViolation(ContractDeskError):
    """Raised when a blueprint is still referenced by contracts."""
    def __init__(
        self,
        blueprint_id: str,
        contract_ids: Iterable[str] = (),
        message: str | None = None,
    ) -> None:
        super().__init__(
            message or "Cannot delete blueprint: contracts exist using this blueprint.",
            code="blueprint_in_use",
        )
        self.blueprint_id = blueprint_id
        self.contract_ids = list(contract_ids)


class LifecycleViolation(ContractDeskError):
    """Raised when a contract's status does not allow the requested change."""
    def __init__(
        self,
        message: str,
        status: Optional[str] = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message, code=code or "lifecycle")
        self.status = status


class NotFoundError(ContractDeskError):
    """Raised when an entity id does not resolve."""


class BlueprintNotFoundError(NotFoundError):
    """Raised when a blueprint is not found."""


class ContractNotFoundError(NotFoundError):
    """Raised when a contract is not found."""


class StorageError(ContractDeskError):
    """Raised when a persisted collection cannot be decoded."""
