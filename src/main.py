"""Main application entry point for the hotel records service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production. It owns the DynamoDB
resource and hands it to the repositories explicitly.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from hotel_service.handlers.api_handler import create_app
from hotel_service.models.record_schemas import MENU_SCHEMA, PERSON_SCHEMA, RecordSchema
from hotel_service.observability import configure_logging, setup_observability
from hotel_service.repositories.record_repository import RecordRepository
from hotel_service.services.record_service import RecordService

logger = logging.getLogger(__name__)


def get_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    # DYNAMODB_ENDPOINT points at DynamoDB Local during development
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", "dummy"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", "dummy"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    # Production - boto3 will use default credential chain (IAM role, env vars, etc.)
    return boto3.resource("dynamodb", region_name=region)


def create_record_service(
    dynamodb_resource: Any, schema: RecordSchema, table_env: str, default_table: str
) -> RecordService:
    """Build the repository and service for one collection.

    Args:
        dynamodb_resource: Shared boto3 DynamoDB resource
        schema: Collection schema
        table_env: Environment variable holding the table name
        default_table: Table name used when the variable is unset

    Returns:
        RecordService bound to the collection table
    """
    table_name = os.getenv(table_env, default_table)
    repository = RecordRepository(dynamodb_resource=dynamodb_resource, table_name=table_name)

    if os.getenv("CREATE_TABLES", "false").lower() == "true":
        repository.ensure_table()

    logger.info(f"Repository configured - {schema.collection}: {table_name}")
    return RecordService(schema=schema, repository=repository)


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the DynamoDB resource
    3. Initializes a repository and service per collection
    4. Creates the FastAPI app
    5. Sets up observability when enabled

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing hotel records service...")

    dynamodb_resource = get_dynamodb_resource()

    person_service = create_record_service(
        dynamodb_resource, PERSON_SCHEMA, "DYNAMODB_PERSON_TABLE", "hotel-person"
    )
    menu_service = create_record_service(
        dynamodb_resource, MENU_SCHEMA, "DYNAMODB_MENU_TABLE", "hotel-menu"
    )

    app = create_app(person_service=person_service, menu_service=menu_service)

    if os.getenv("OTEL_ENABLED", "false").lower() == "true":
        setup_observability(app)

    logger.info("Hotel records service initialized successfully")

    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "3000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.getenv("ENVIRONMENT", "development") == "development",
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
