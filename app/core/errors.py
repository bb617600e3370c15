# File: app/core/errors.py

"""
Error taxonomy shared by the services and the API layer.

Services raise these; ``app.main`` maps each one to an HTTP response via
``EXCEPTION_MAPPING``. Nothing here knows about FastAPI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass
class ValidationResult:
    """Outcome of an explicit validation pass: ok, or a list of field errors."""

    errors: List[FieldError] = field(default_factory=list)
    # Cleaned values, only meaningful when ok
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, field_name: str, message: str) -> None:
        self.errors.append(FieldError(field_name, message))

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ValidationError(self.errors)


class TaskTrackerError(Exception):
    """Base class for every error the API knows how to render."""


class ValidationError(TaskTrackerError):
    """Malformed or missing required input."""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in self.errors))


class AuthError(TaskTrackerError):
    """Bad credentials. Deliberately carries no detail about which part failed."""


class Unauthenticated(TaskTrackerError):
    """Missing, invalid or revoked session token."""


class NotFound(TaskTrackerError):
    """Missing resource, foreign-owned resource, or malformed id."""


class StorageUnavailable(TaskTrackerError):
    """Transient backing-store failure. Safe for the caller to retry."""
