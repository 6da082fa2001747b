"""Unit tests for RecordService."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from hotel_service.errors import (
    DuplicateValueError,
    InvalidFilterError,
    PersistenceError,
    RecordNotFoundError,
    RecordValidationError,
)
from hotel_service.models.record_schemas import PERSON_SCHEMA
from hotel_service.repositories.record_repository import RecordRepository
from hotel_service.services.record_service import RecordFilter, RecordService


@pytest.mark.unit
class TestRecordService:
    """Test suite for RecordService over an in-memory repository."""

    @pytest.mark.asyncio
    async def test_create_then_get_returns_equal_record(
        self, person_service: RecordService, person_payload: dict[str, Any]
    ) -> None:
        """Test that a created record reads back unchanged."""
        created = await person_service.create_record(person_payload)

        fetched = await person_service.get_record(created["id"])

        assert fetched == created
        assert {k: v for k, v in fetched.items() if k != "id"} == person_payload

    @pytest.mark.asyncio
    async def test_create_assigns_identifier(
        self, person_service: RecordService, person_payload: dict[str, Any]
    ) -> None:
        """Test that the store owns the id and ignores a client-supplied one."""
        created = await person_service.create_record({**person_payload, "id": "mine"})

        assert created["id"] != "mine"
        assert len(created["id"]) == 32

    @pytest.mark.asyncio
    async def test_create_drops_unknown_fields(
        self, person_service: RecordService, person_payload: dict[str, Any]
    ) -> None:
        """Test that undeclared fields are not persisted."""
        created = await person_service.create_record({**person_payload, "shoe_size": 42})

        fetched = await person_service.get_record(created["id"])
        assert "shoe_size" not in fetched

    @pytest.mark.asyncio
    async def test_create_duplicate_email(
        self, person_service: RecordService, person_payload: dict[str, Any]
    ) -> None:
        """Test that a second person with the same email is rejected."""
        await person_service.create_record(person_payload)

        with pytest.raises(DuplicateValueError):
            await person_service.create_record({**person_payload, "name": "B"})

    @pytest.mark.asyncio
    async def test_create_invalid_payload_writes_nothing(
        self, person_service: RecordService, person_repository: Any
    ) -> None:
        """Test that rejected payloads never reach the repository."""
        with pytest.raises(RecordValidationError):
            await person_service.create_record({"name": "A", "work": "pilot"})

        assert person_repository.records == {}

    @pytest.mark.asyncio
    async def test_get_missing_record(self, person_service: RecordService) -> None:
        """Test that an unknown id raises RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError):
            await person_service.get_record("nope")

    @pytest.mark.asyncio
    async def test_list_all_and_filtered(
        self, person_service: RecordService, person_payload: dict[str, Any]
    ) -> None:
        """Test listing with and without a work filter."""
        chef = await person_service.create_record(person_payload)
        waiter = await person_service.create_record(
            {**person_payload, "email": "w@x.com", "work": "waiter"}
        )

        everyone = list(await person_service.list_records())
        chefs = list(await person_service.list_records(RecordFilter("work", "chef")))
        managers = list(await person_service.list_records(RecordFilter("work", "manager")))

        assert {r["id"] for r in everyone} == {chef["id"], waiter["id"]}
        assert [r["id"] for r in chefs] == [chef["id"]]
        assert all(r["work"] == "chef" for r in chefs)
        assert managers == []

    @pytest.mark.asyncio
    async def test_list_unrecognized_enum_value(self, person_service: RecordService) -> None:
        """Test that an undeclared enum value is rejected instead of returning nothing."""
        with pytest.raises(InvalidFilterError) as exc_info:
            await person_service.list_records(RecordFilter("work", "unknown"))

        assert exc_info.value.http_status == 400

    @pytest.mark.asyncio
    async def test_list_unknown_field(self, person_service: RecordService) -> None:
        """Test that filtering on an undeclared field is rejected."""
        with pytest.raises(InvalidFilterError):
            await person_service.list_records(RecordFilter("height", 180))

    @pytest.mark.asyncio
    async def test_full_replace(
        self, person_service: RecordService, person_payload: dict[str, Any]
    ) -> None:
        """Test that a full replace drops fields absent from the new payload."""
        created = await person_service.create_record({**person_payload, "age": 30})

        updated = await person_service.update_record(
            created["id"], {**person_payload, "name": "Renamed"}
        )

        assert updated["id"] == created["id"]
        assert updated["name"] == "Renamed"
        assert "age" not in updated
        assert await person_service.get_record(created["id"]) == updated

    @pytest.mark.asyncio
    async def test_partial_update_merges(
        self, person_service: RecordService, person_payload: dict[str, Any]
    ) -> None:
        """Test that a partial update keeps untouched fields."""
        created = await person_service.create_record(person_payload)

        updated = await person_service.update_record(
            created["id"], {"salary": 250.5}, full_replace=False
        )

        assert updated == {**created, "salary": 250.5}

    @pytest.mark.asyncio
    async def test_update_missing_required_field_leaves_record_unchanged(
        self, person_service: RecordService, person_payload: dict[str, Any]
    ) -> None:
        """Test that a failing update does not touch the stored record."""
        created = await person_service.create_record(person_payload)
        incomplete = {k: v for k, v in person_payload.items() if k != "mobile"}

        with pytest.raises(RecordValidationError):
            await person_service.update_record(created["id"], incomplete)

        assert await person_service.get_record(created["id"]) == created

    @pytest.mark.asyncio
    async def test_partial_update_null_clears_required_field(
        self, person_service: RecordService, person_payload: dict[str, Any]
    ) -> None:
        """Test that nulling a required field through a patch is rejected."""
        created = await person_service.create_record(person_payload)

        with pytest.raises(RecordValidationError):
            await person_service.update_record(created["id"], {"email": None}, full_replace=False)

    @pytest.mark.asyncio
    async def test_update_keeping_own_email(
        self, person_service: RecordService, person_payload: dict[str, Any]
    ) -> None:
        """Test that a record does not collide with its own unique value."""
        created = await person_service.create_record(person_payload)

        updated = await person_service.update_record(created["id"], {**person_payload, "age": 41})

        assert updated["age"] == 41

    @pytest.mark.asyncio
    async def test_update_to_taken_email(
        self, person_service: RecordService, person_payload: dict[str, Any]
    ) -> None:
        """Test that switching to another record's email is rejected."""
        await person_service.create_record(person_payload)
        other = await person_service.create_record({**person_payload, "email": "b@x.com"})

        with pytest.raises(DuplicateValueError):
            await person_service.update_record(
                other["id"], {"email": "a@x.com"}, full_replace=False
            )

    @pytest.mark.asyncio
    async def test_update_missing_record(
        self, person_service: RecordService, person_payload: dict[str, Any]
    ) -> None:
        """Test that updating an unknown id raises RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError):
            await person_service.update_record("nope", person_payload)

    @pytest.mark.asyncio
    async def test_delete_then_get(
        self, person_service: RecordService, person_payload: dict[str, Any]
    ) -> None:
        """Test that a deleted record is gone."""
        created = await person_service.create_record(person_payload)

        await person_service.delete_record(created["id"])

        with pytest.raises(RecordNotFoundError):
            await person_service.get_record(created["id"])

    @pytest.mark.asyncio
    async def test_delete_missing_record(self, person_service: RecordService) -> None:
        """Test that deleting an unknown id raises RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError):
            await person_service.delete_record("nope")


@pytest.mark.unit
class TestRecordServiceWithMockRepository:
    """Test suite for RecordService interaction with the repository."""

    @pytest.fixture
    def mock_repository(self) -> MagicMock:
        repository = MagicMock(spec=RecordRepository)
        repository.find_ids.return_value = []
        return repository

    @pytest.fixture
    def service(self, mock_repository: MagicMock) -> RecordService:
        return RecordService(schema=PERSON_SCHEMA, repository=mock_repository)

    def test_service_initialization(self, mock_repository: MagicMock) -> None:
        """Test that a validator is built from the schema."""
        service = RecordService(schema=PERSON_SCHEMA, repository=mock_repository)

        assert service.validator.schema is PERSON_SCHEMA

    @pytest.mark.asyncio
    async def test_create_retries_on_id_collision(
        self, service: RecordService, mock_repository: MagicMock, person_payload: dict[str, Any]
    ) -> None:
        """Test that a taken id is replaced with a fresh one."""
        mock_repository.insert_record.side_effect = [False, True]

        created = await service.create_record(person_payload)

        assert mock_repository.insert_record.call_count == 2
        second_call = mock_repository.insert_record.call_args_list[1].args[0]
        assert second_call["id"] == created["id"]

    @pytest.mark.asyncio
    async def test_create_persistence_error_propagates(
        self, service: RecordService, mock_repository: MagicMock, person_payload: dict[str, Any]
    ) -> None:
        """Test that storage failures surface unchanged without retry."""
        mock_repository.insert_record.side_effect = PersistenceError("down")

        with pytest.raises(PersistenceError):
            await service.create_record(person_payload)

        mock_repository.insert_record.assert_called_once()

    @pytest.mark.asyncio
    async def test_update_record_deleted_concurrently(
        self, service: RecordService, mock_repository: MagicMock, person_payload: dict[str, Any]
    ) -> None:
        """Test that a record vanishing before the write reports not found."""
        mock_repository.get_record.return_value = {"id": "r1", **person_payload}
        mock_repository.replace_record.return_value = False

        with pytest.raises(RecordNotFoundError):
            await service.update_record("r1", person_payload)

    @pytest.mark.asyncio
    async def test_list_passes_filter_to_repository(
        self, service: RecordService, mock_repository: MagicMock
    ) -> None:
        """Test that a valid filter is pushed down to the scan."""
        mock_repository.scan_records.return_value = iter([])

        await service.list_records(RecordFilter("work", "waiter"))

        mock_repository.scan_records.assert_called_once_with("work", "waiter")
