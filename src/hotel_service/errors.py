"""Domain errors raised by the record store.

Each error carries the HTTP status it maps to and renders its own
``{"error": ...}`` response body, so route handlers never build error
payloads themselves.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ViolationKind(str, Enum):
    """Kinds of schema violations."""

    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"
    INVALID_ENUM = "invalid_enum"
    DUPLICATE_VALUE = "duplicate_value"


@dataclass(frozen=True)
class Violation:
    """A single rule a payload failed.

    Attributes:
        kind: Which rule was violated
        field: Name of the offending field
        allowed: Declared values, only set for INVALID_ENUM
    """

    kind: ViolationKind
    field: str
    allowed: tuple[str, ...] | None = None

    @property
    def message(self) -> str:
        if self.kind is ViolationKind.MISSING_FIELD:
            return f"'{self.field}' is required"
        if self.kind is ViolationKind.TYPE_MISMATCH:
            return f"'{self.field}' has the wrong type"
        if self.kind is ViolationKind.INVALID_ENUM:
            allowed = ", ".join(self.allowed or ())
            return f"'{self.field}' must be one of: {allowed}"
        return f"'{self.field}' must be unique"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "field": self.field,
            "message": self.message,
        }
        if self.allowed is not None:
            data["allowed"] = list(self.allowed)
        return data


class RecordServiceError(Exception):
    """Base class for all record store errors."""

    http_status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict[str, Any]:
        """Render the JSON error body."""
        return {"error": self.message}


class RecordValidationError(RecordServiceError):
    """Payload failed one or more schema rules."""

    http_status = 400

    def __init__(self, collection: str, violations: list[Violation]) -> None:
        fields = ", ".join(v.field for v in violations)
        super().__init__(f"Invalid {collection} record: {fields}")
        self.collection = collection
        self.violations = violations

    def to_response(self) -> dict[str, Any]:
        body = super().to_response()
        body["violations"] = [v.to_dict() for v in self.violations]
        return body


class DuplicateValueError(RecordValidationError):
    """Payload collides with an existing record on a unique field."""

    http_status = 409


class InvalidFilterError(RecordServiceError):
    """List filter names an undeclared field or an undeclared enum value."""

    http_status = 400


class RecordNotFoundError(RecordServiceError):
    """No record exists with the requested identifier."""

    http_status = 404

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(f"{collection} record '{record_id}' not found")
        self.collection = collection
        self.record_id = record_id


class PersistenceError(RecordServiceError):
    """The storage backend failed."""

    http_status = 500

    def to_response(self) -> dict[str, Any]:
        # Backend details stay in the logs
        return {"error": "Internal server error"}
