"""Common enumerations used across the application."""
from enum import Enum


class FieldType(str, Enum):
    """Kind of input a blueprint field collects."""
    TEXT = "text"
    DATE = "date"
    CHECKBOX = "checkbox"
    SIGNATURE = "signature"


class ContractStatus(str, Enum):
    """Lifecycle status of a contract."""

    CREATED = "Created"
    APPROVED = "Approved"
    SENT = "Sent"
    SIGNED = "Signed"
    LOCKED = "Locked"
    REVOKED = "Revoked"  # Absorbing: reachable by revoke only


class LifecycleAction(str, Enum):
    """Transition a caller can request on a contract."""

    ADVANCE = "advance"
    REVOKE = "revoke"
