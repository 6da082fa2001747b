"""Custom metrics for the record store."""

from opentelemetry import metrics

meter = metrics.get_meter("hotel-svc")

record_operation_counter = meter.create_counter(
    name="record_operations_total",
    description="Record store operations by collection, operation and outcome",
    unit="1",
)

validation_failure_counter = meter.create_counter(
    name="record_validation_failures_total",
    description="Rejected payloads by collection and violation kind",
    unit="1",
)

operation_duration_histogram = meter.create_histogram(
    name="record_operation_duration_seconds",
    description="Duration of record store operations",
    unit="s",
)


def record_operation(collection: str, operation: str, outcome: str, duration_seconds: float) -> None:
    """Record a finished store operation.

    Args:
        collection: Collection the operation ran against (e.g., "person")
        operation: Store operation name (e.g., "create", "update")
        outcome: "success" or the error class name
        duration_seconds: Wall time of the operation
    """
    attributes = {"collection": collection, "operation": operation}
    record_operation_counter.add(1, {**attributes, "outcome": outcome})
    operation_duration_histogram.record(duration_seconds, attributes)


def record_validation_failure(collection: str, kind: str) -> None:
    """Record one schema violation.

    Args:
        collection: Collection the payload was meant for
        kind: Violation kind (e.g., "missing_field")
    """
    validation_failure_counter.add(1, {"collection": collection, "kind": kind})
