"""Shared pytest fixtures and configuration for all tests."""

import os
from collections.abc import Iterator
from typing import Any

import pytest

# Keep src/main.py from building a real application at import time
os.environ.setdefault("ENVIRONMENT", "test")

from hotel_service.models.record_schemas import MENU_SCHEMA, PERSON_SCHEMA  # noqa: E402
from hotel_service.services.record_service import RecordService  # noqa: E402


class InMemoryRecordRepository:
    """Dictionary-backed stand-in for RecordRepository.

    Mirrors the repository contract: None/False for missing records and
    copies on the way in and out so callers cannot mutate stored state.
    """

    def __init__(self) -> None:
        self.records: dict[str, dict[str, Any]] = {}

    def insert_record(self, record: dict[str, Any]) -> bool:
        if record["id"] in self.records:
            return False
        self.records[record["id"]] = dict(record)
        return True

    def replace_record(self, record: dict[str, Any]) -> bool:
        if record["id"] not in self.records:
            return False
        self.records[record["id"]] = dict(record)
        return True

    def get_record(self, record_id: str) -> dict[str, Any] | None:
        record = self.records.get(record_id)
        return dict(record) if record is not None else None

    def scan_records(self, field: str | None = None, value: Any = None) -> Iterator[dict[str, Any]]:
        for record in list(self.records.values()):
            if field is None or record.get(field) == value:
                yield dict(record)

    def find_ids(self, field: str, value: Any) -> list[str]:
        return [record["id"] for record in self.scan_records(field, value)]

    def delete_record(self, record_id: str) -> bool:
        return self.records.pop(record_id, None) is not None


@pytest.fixture
def person_payload() -> dict[str, Any]:
    """Fixture providing a valid person payload."""
    return {
        "name": "A",
        "work": "chef",
        "mobile": "1",
        "email": "a@x.com",
        "address": "addr",
        "salary": 100,
    }


@pytest.fixture
def menu_payload() -> dict[str, Any]:
    """Fixture providing a valid menu item payload."""
    return {
        "name": "Paneer Tikka",
        "price": 8.5,
        "category": "starter",
        "description": "Grilled cottage cheese with spices",
    }


@pytest.fixture
def person_repository() -> InMemoryRecordRepository:
    return InMemoryRecordRepository()


@pytest.fixture
def menu_repository() -> InMemoryRecordRepository:
    return InMemoryRecordRepository()


@pytest.fixture
def person_service(person_repository: InMemoryRecordRepository) -> RecordService:
    """Fixture providing a person RecordService over an in-memory repository."""
    return RecordService(schema=PERSON_SCHEMA, repository=person_repository)  # type: ignore[arg-type]


@pytest.fixture
def menu_service(menu_repository: InMemoryRecordRepository) -> RecordService:
    """Fixture providing a menu RecordService over an in-memory repository."""
    return RecordService(schema=MENU_SCHEMA, repository=menu_repository)  # type: ignore[arg-type]
