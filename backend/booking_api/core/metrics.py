"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from fastapi import Response

# Booking metrics
booking_operations = Counter(
    "booking_operations_total",
    "Booking operations by kind and outcome",
    ["operation", "outcome"],  # create/update/cancel, success/<error name>
)

booking_latency = Histogram(
    "booking_latency_seconds",
    "Seat-accounting transaction latency",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

# Auth metrics
auth_attempts = Counter(
    "auth_attempts_total",
    "Registration and login attempts",
    ["action", "result"],  # register/login, success/failure
)


def metrics_endpoint() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def record_booking_operation(operation: str, outcome: str):
    booking_operations.labels(operation=operation, outcome=outcome).inc()


def record_auth_attempt(action: str, success: bool):
    result = "success" if success else "failure"
    auth_attempts.labels(action=action, result=result).inc()
