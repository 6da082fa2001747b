"""Record service: validated CRUD over one collection."""

import logging
import uuid
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from hotel_service.errors import (
    InvalidFilterError,
    RecordNotFoundError,
    RecordValidationError,
)
from hotel_service.models.record_schemas import RecordSchema
from hotel_service.observability import traced
from hotel_service.observability.metrics import record_validation_failure
from hotel_service.repositories.record_repository import RecordRepository
from hotel_service.validation.record_validator import RecordValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordFilter:
    """Equality constraint on one field.

    Attributes:
        field: Field name to match
        value: Value the field must equal
    """

    field: str
    value: Any


class RecordService:
    """Typed create/read/update/delete over a single collection.

    Every write is validated against the collection schema before the
    repository is touched. The store assigns the record identifier and
    never changes it.
    """

    def __init__(
        self,
        schema: RecordSchema,
        repository: RecordRepository,
        validator: RecordValidator | None = None,
    ) -> None:
        """Initialize the RecordService.

        Args:
            schema: Field rule table for the collection
            repository: Storage for the collection
            validator: Validator to use, built from the schema when omitted
        """
        self.schema = schema
        self.repository = repository
        self.validator = validator or RecordValidator(schema)

    def _validate(self, payload: dict[str, Any], exclude_id: str | None = None) -> dict[str, Any]:
        try:
            return self.validator.validate(
                payload, lookup=self.repository.find_ids, exclude_id=exclude_id
            )
        except RecordValidationError as e:
            for violation in e.violations:
                record_validation_failure(self.schema.collection, violation.kind.value)
            raise

    @traced("create")
    async def create_record(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Validate and store a new record.

        Args:
            payload: Client-supplied field values; any ``id`` is ignored

        Returns:
            The stored record including its assigned ``id``

        Raises:
            RecordValidationError: If the payload breaks the schema
            PersistenceError: If the storage backend fails
        """
        record = self._validate(payload)

        # A uuid4 collision would be rejected by the conditional insert; draw again
        while True:
            record_id = uuid.uuid4().hex
            stored = {"id": record_id, **record}
            if self.repository.insert_record(stored):
                break

        logger.info(f"{self.schema.collection} record saved: {record_id}")
        return stored

    @traced("get")
    async def get_record(self, record_id: str) -> dict[str, Any]:
        """Fetch a record by id.

        Raises:
            RecordNotFoundError: If no record has the id
        """
        record = self.repository.get_record(record_id)
        if record is None:
            raise RecordNotFoundError(self.schema.collection, record_id)
        return record

    @traced("list")
    async def list_records(
        self, record_filter: RecordFilter | None = None
    ) -> Iterator[dict[str, Any]]:
        """List records, optionally narrowed by an equality filter.

        The returned iterator is lazy; storage pages are read as it is consumed.

        Args:
            record_filter: Optional field equality constraint

        Returns:
            Iterator over matching records, empty if none match

        Raises:
            InvalidFilterError: If the filter field is undeclared or the value
                is not one of the field's enum values
        """
        if record_filter is None:
            return self.repository.scan_records()

        rule = self.schema.get_rule(record_filter.field)
        if rule is None:
            raise InvalidFilterError(
                f"Cannot filter {self.schema.collection} on unknown field '{record_filter.field}'"
            )
        if rule.enum is not None and record_filter.value not in rule.enum:
            raise InvalidFilterError(f"Invalid {rule.name}: {record_filter.value}")

        return self.repository.scan_records(record_filter.field, record_filter.value)

    @traced("update")
    async def update_record(
        self,
        record_id: str,
        patch: dict[str, Any],
        full_replace: bool = True,
    ) -> dict[str, Any]:
        """Replace or patch a record, re-validating the result.

        With ``full_replace`` the patch becomes the whole record. Otherwise
        the patch is merged over the stored fields and a null value clears a
        field. The stored record is unchanged if validation fails.

        Args:
            record_id: Identifier of the record to change
            patch: New field values
            full_replace: Replace instead of merge

        Returns:
            The updated record

        Raises:
            RecordNotFoundError: If no record has the id
            RecordValidationError: If the resulting record breaks the schema
        """
        current = self.repository.get_record(record_id)
        if current is None:
            raise RecordNotFoundError(self.schema.collection, record_id)

        if full_replace:
            candidate = dict(patch)
        else:
            candidate = {**current, **patch}
        candidate.pop("id", None)

        record = self._validate(candidate, exclude_id=record_id)
        updated = {"id": record_id, **record}

        # Deleted between the read and the write
        if not self.repository.replace_record(updated):
            raise RecordNotFoundError(self.schema.collection, record_id)

        logger.info(f"{self.schema.collection} record updated: {record_id}")
        return updated

    @traced("delete")
    async def delete_record(self, record_id: str) -> None:
        """Delete a record.

        Raises:
            RecordNotFoundError: If no record has the id
        """
        if not self.repository.delete_record(record_id):
            raise RecordNotFoundError(self.schema.collection, record_id)

        logger.info(f"{self.schema.collection} record deleted: {record_id}")
