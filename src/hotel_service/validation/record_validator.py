"""Generic schema validator for record payloads."""

import logging
import math
from collections.abc import Callable, Iterable
from typing import Any

from hotel_service.errors import (
    DuplicateValueError,
    RecordValidationError,
    Violation,
    ViolationKind,
)
from hotel_service.models.record_schemas import FieldRule, FieldType, RecordSchema

logger = logging.getLogger(__name__)

# Returns the ids of records whose field equals the given value
UniqueLookup = Callable[[str, Any], Iterable[str]]


def _matches_type(rule: FieldRule, value: Any) -> bool:
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool):
        return False
    if rule.type is FieldType.TEXT:
        return isinstance(value, str)
    if rule.type is FieldType.INTEGER:
        return isinstance(value, int)
    if isinstance(value, float):
        # NaN and Infinity have no JSON or DynamoDB representation
        return math.isfinite(value)
    return isinstance(value, int)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class RecordValidator:
    """Validates payloads against a RecordSchema.

    Validation reads from storage only through the optional uniqueness
    lookup and never writes, so it is safe to run before deciding whether to
    touch the store.
    """

    def __init__(self, schema: RecordSchema) -> None:
        """Initialize validator.

        Args:
            schema: Field rule table to enforce
        """
        self.schema = schema

    def validate(
        self,
        payload: dict[str, Any],
        lookup: UniqueLookup | None = None,
        exclude_id: str | None = None,
    ) -> dict[str, Any]:
        """Check a payload and return the normalized record.

        Undeclared fields are dropped and null values are treated as absent.

        Args:
            payload: Raw field values
            lookup: Lookup used for unique fields; uniqueness is skipped when None
            exclude_id: Identifier of the record being updated, ignored by uniqueness

        Returns:
            dict: Normalized record without an identifier

        Raises:
            DuplicateValueError: If the only violations are unique collisions
            RecordValidationError: If any other rule is violated
        """
        record: dict[str, Any] = {}
        violations: list[Violation] = []

        for rule in self.schema.fields:
            value = payload.get(rule.name)

            if value is None:
                if rule.required:
                    violations.append(Violation(ViolationKind.MISSING_FIELD, rule.name))
                continue

            if rule.required and _is_blank(value):
                violations.append(Violation(ViolationKind.MISSING_FIELD, rule.name))
                continue

            if not _matches_type(rule, value):
                violations.append(Violation(ViolationKind.TYPE_MISMATCH, rule.name))
                continue

            if rule.enum is not None and value not in rule.enum:
                violations.append(
                    Violation(ViolationKind.INVALID_ENUM, rule.name, allowed=rule.enum)
                )
                continue

            if rule.unique and lookup is not None:
                holders = [rid for rid in lookup(rule.name, value) if rid != exclude_id]
                if holders:
                    violations.append(Violation(ViolationKind.DUPLICATE_VALUE, rule.name))
                    continue

            record[rule.name] = value

        if violations:
            logger.info(
                f"Rejected {self.schema.collection} payload: "
                + ", ".join(f"{v.kind.value}({v.field})" for v in violations)
            )
            if all(v.kind is ViolationKind.DUPLICATE_VALUE for v in violations):
                raise DuplicateValueError(self.schema.collection, violations)
            raise RecordValidationError(self.schema.collection, violations)

        return record
