# localcooks/results.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from .form_schema import FieldErrors

@dataclass(frozen=True)
class Success:
    record: dict[str, Any] = field(default_factory=dict)

@dataclass(frozen=True)
class ValidationFailed:
    """Client-side, per-field. Never reaches the network."""
    field_errors: FieldErrors

@dataclass(frozen=True)
class DocumentRequirementUnmet:
    field_errors: FieldErrors

@dataclass(frozen=True)
class AuthRequired:
    reason: str = "You must be logged in to submit an application."

@dataclass(frozen=True)
class NetworkError:
    message: str

@dataclass(frozen=True)
class ServerRejected:
    message: str
    status_code: int

SubmissionResult: TypeAlias = (
    Success | ValidationFailed | DocumentRequirementUnmet | AuthRequired | NetworkError | ServerRejected
)
