"""OpenTelemetry tracing decorators."""

import functools
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from opentelemetry import trace

from hotel_service.observability.metrics import record_operation

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def traced(operation: str, service_name: str = "hotel-svc") -> Callable[[F], F]:
    """Decorator that spans and meters an async record store method.

    The span is named ``<collection>.<operation>``, where the collection is
    read from the bound service's schema. Failures are recorded on the span
    and counted under the exception class name, then re-raised.

    Args:
        operation: Store operation name (e.g., "create")
        service_name: Tracer name

    Returns:
        Decorated coroutine function

    Example:
        @traced("create")
        async def create_record(self, payload: dict[str, Any]) -> dict[str, Any]:
            ...
    """
    tracer = trace.get_tracer(service_name)

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            collection = self.schema.collection
            started = time.perf_counter()

            with tracer.start_as_current_span(f"{collection}.{operation}") as span:
                span.set_attribute("record.collection", collection)
                span.set_attribute("record.operation", operation)

                try:
                    result = await func(self, *args, **kwargs)
                except Exception as e:
                    span.set_attribute("success", False)
                    span.set_attribute("error.type", type(e).__name__)
                    span.record_exception(e)
                    record_operation(
                        collection, operation, type(e).__name__, time.perf_counter() - started
                    )
                    raise

                span.set_attribute("success", True)
                record_operation(collection, operation, "success", time.perf_counter() - started)
                return result

        return wrapper  # type: ignore

    return decorator
