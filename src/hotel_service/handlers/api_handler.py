"""FastAPI application exposing the person and menu collections."""

import logging
from typing import Any

from fastapi import Body, FastAPI
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from hotel_service.handlers.error_handlers import register_error_handlers
from hotel_service.services.record_service import RecordFilter, RecordService

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to my hotel... How can I help you?"


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class DeleteResponse(BaseModel):
    """Confirmation returned after a record is deleted."""

    message: str
    id: str


class ErrorResponse(BaseModel):
    """Error body returned by every failing route."""

    error: str
    violations: list[dict[str, Any]] | None = None


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _register_collection_routes(app: FastAPI, service: RecordService) -> None:
    """Bind the CRUD routes for one collection.

    Args:
        app: Application to register on
        service: Record service owning the collection
    """
    collection = service.schema.collection
    filter_field = service.schema.filter_field
    prefix = f"/{collection}"
    tags = [collection.capitalize()]

    @app.post(
        prefix,
        status_code=201,
        responses=ERROR_RESPONSES,
        tags=tags,
        name=f"create_{collection}",
    )
    async def create_record(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
        """Create a record from the request body."""
        return await service.create_record(payload)

    @app.get(prefix, responses=ERROR_RESPONSES, tags=tags, name=f"list_{collection}")
    async def list_records() -> list[dict[str, Any]]:
        """List every record in the collection."""
        records = await service.list_records()
        return list(records)

    if filter_field is not None:

        @app.get(
            f"{prefix}/{{value}}",
            responses=ERROR_RESPONSES,
            tags=tags,
            name=f"list_{collection}_by_{filter_field}",
            description=f"List {collection} records whose {filter_field} equals the path value.",
        )
        async def list_records_by_value(value: str) -> list[dict[str, Any]]:
            records = await service.list_records(RecordFilter(filter_field, value))
            return list(records)

    @app.put(
        f"{prefix}/{{record_id}}",
        responses=ERROR_RESPONSES,
        tags=tags,
        name=f"replace_{collection}",
    )
    async def replace_record(
        record_id: str, payload: dict[str, Any] = Body(...)
    ) -> dict[str, Any]:
        """Replace a record with the request body."""
        return await service.update_record(record_id, payload, full_replace=True)

    @app.patch(
        f"{prefix}/{{record_id}}",
        responses=ERROR_RESPONSES,
        tags=tags,
        name=f"patch_{collection}",
    )
    async def patch_record(
        record_id: str, payload: dict[str, Any] = Body(...)
    ) -> dict[str, Any]:
        """Merge the request body into a record."""
        return await service.update_record(record_id, payload, full_replace=False)

    @app.delete(
        f"{prefix}/{{record_id}}",
        response_model=DeleteResponse,
        responses=ERROR_RESPONSES,
        tags=tags,
        name=f"delete_{collection}",
    )
    async def delete_record(record_id: str) -> DeleteResponse:
        """Delete a record."""
        await service.delete_record(record_id)
        return DeleteResponse(message=f"{collection} record deleted", id=record_id)


def create_app(person_service: RecordService, menu_service: RecordService) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        person_service: Record service for the person collection
        menu_service: Record service for the menu collection

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Hotel Records API",
        description="Staff and menu records for the hotel",
        version="1.0.0",
    )

    # Store services in app state for access outside route closures
    app.state.person_service = person_service
    app.state.menu_service = menu_service

    register_error_handlers(app)

    @app.get("/", response_class=PlainTextResponse, tags=["Health"])
    async def welcome() -> str:
        """Plain-text greeting for the root path."""
        return WELCOME_MESSAGE

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Health status indicating service is running
        """
        return HealthResponse(status="healthy")

    for service in (person_service, menu_service):
        _register_collection_routes(app, service)
        logger.debug(f"Registered routes for /{service.schema.collection}")

    return app
