"""DynamoDB repository for schema-validated records.

One table per collection, keyed by the store-assigned ``id``. Following the
repository pattern used across the service, expected failures come back as
simple return values (None/False); storage-layer failures raise
PersistenceError so callers can surface them instead of mistaking them for
an empty result.
"""

import logging
from collections.abc import Iterator
from decimal import Decimal
from typing import Any

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from hotel_service.errors import PersistenceError

logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


def to_dynamodb_item(record: dict[str, Any]) -> dict[str, Any]:
    """Convert a record to DynamoDB item format.

    DynamoDB rejects Python floats, so they are stored as Decimal.
    """
    return {
        key: Decimal(str(value)) if isinstance(value, float) else value
        for key, value in record.items()
    }


def from_dynamodb_item(item: dict[str, Any]) -> dict[str, Any]:
    """Convert a DynamoDB item back to plain JSON-friendly values."""
    record: dict[str, Any] = {}
    for key, value in item.items():
        if isinstance(value, Decimal):
            value = int(value) if value == value.to_integral_value() else float(value)
        record[key] = value
    return record


def _is_conditional_failure(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED


class RecordRepository:
    """Repository for record CRUD operations on a single collection table."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def insert_record(self, record: dict[str, Any]) -> bool:
        """Insert a new record.

        Args:
            record: Record including its ``id``

        Returns:
            bool: True if inserted, False if the id is already taken

        Raises:
            PersistenceError: If DynamoDB fails
        """
        try:
            self.table.put_item(
                Item=to_dynamodb_item(record),
                ConditionExpression=Attr("id").not_exists(),
            )
            return True

        except ClientError as e:
            if _is_conditional_failure(e):
                return False
            logger.error(f"Failed to insert record into {self.table_name}: {e}")
            raise PersistenceError(f"Failed to insert record: {e}") from e

    def replace_record(self, record: dict[str, Any]) -> bool:
        """Overwrite an existing record.

        Args:
            record: Complete record including its ``id``

        Returns:
            bool: True if replaced, False if no record has that id

        Raises:
            PersistenceError: If DynamoDB fails
        """
        try:
            self.table.put_item(
                Item=to_dynamodb_item(record),
                ConditionExpression=Attr("id").exists(),
            )
            return True

        except ClientError as e:
            if _is_conditional_failure(e):
                return False
            logger.error(f"Failed to replace record in {self.table_name}: {e}")
            raise PersistenceError(f"Failed to replace record: {e}") from e

    def get_record(self, record_id: str) -> dict[str, Any] | None:
        """Retrieve a record by id.

        Args:
            record_id: Record identifier

        Returns:
            dict if found, None otherwise

        Raises:
            PersistenceError: If DynamoDB fails
        """
        try:
            response = self.table.get_item(Key={"id": record_id})

            if "Item" not in response:
                return None

            return from_dynamodb_item(response["Item"])

        except ClientError as e:
            logger.error(f"Failed to get record from {self.table_name}: {e}")
            raise PersistenceError(f"Failed to get record: {e}") from e

    def scan_records(
        self, field: str | None = None, value: Any = None
    ) -> Iterator[dict[str, Any]]:
        """Lazily iterate over records, optionally filtered by field equality.

        Pages are fetched from DynamoDB only as the iterator is consumed.

        Args:
            field: Field to filter on, None for all records
            value: Value the field must equal

        Yields:
            Records in table scan order

        Raises:
            PersistenceError: If DynamoDB fails while paging
        """
        scan_kwargs: dict[str, Any] = {}
        if field is not None:
            scan_kwargs["FilterExpression"] = Attr(field).eq(
                Decimal(str(value)) if isinstance(value, float) else value
            )

        while True:
            try:
                response = self.table.scan(**scan_kwargs)
            except ClientError as e:
                logger.error(f"Failed to scan {self.table_name}: {e}")
                raise PersistenceError(f"Failed to list records: {e}") from e

            for item in response.get("Items", []):
                yield from_dynamodb_item(item)

            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return
            scan_kwargs["ExclusiveStartKey"] = last_key

    def find_ids(self, field: str, value: Any) -> list[str]:
        """Return ids of records whose field equals value.

        Args:
            field: Field to match
            value: Value to match

        Returns:
            list: Matching record ids (empty list if none found)
        """
        return [record["id"] for record in self.scan_records(field, value)]

    def delete_record(self, record_id: str) -> bool:
        """Delete a record.

        Args:
            record_id: Record identifier

        Returns:
            bool: True if deleted, False if no record has that id

        Raises:
            PersistenceError: If DynamoDB fails
        """
        try:
            self.table.delete_item(
                Key={"id": record_id},
                ConditionExpression=Attr("id").exists(),
            )
            return True

        except ClientError as e:
            if _is_conditional_failure(e):
                return False
            logger.error(f"Failed to delete record from {self.table_name}: {e}")
            raise PersistenceError(f"Failed to delete record: {e}") from e

    def ensure_table(self) -> bool:
        """Create the table if it does not exist yet.

        Intended for local development against DynamoDB Local.

        Returns:
            bool: True if the table was created, False if it already existed
        """
        try:
            existing = self.dynamodb.meta.client.list_tables()["TableNames"]
            if self.table_name in existing:
                return False

            table = self.dynamodb.create_table(
                TableName=self.table_name,
                KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
                AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
                BillingMode="PAY_PER_REQUEST",
            )
            table.wait_until_exists()
            logger.info(f"Created table {self.table_name}")
            return True

        except ClientError as e:
            logger.error(f"Failed to create table {self.table_name}: {e}")
            raise PersistenceError(f"Failed to create table: {e}") from e
