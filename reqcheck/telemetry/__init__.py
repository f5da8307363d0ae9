"""Telemetry package - OpenTelemetry instruments for the validator."""

from .metrics import (
    contract_route_count,
    record_validation_metrics,
    request_validation_latency_ms,
    request_validation_total,
)
from .runtime import get_tracer, meter

__all__ = [
    "contract_route_count",
    "get_tracer",
    "meter",
    "record_validation_metrics",
    "request_validation_latency_ms",
    "request_validation_total",
]
