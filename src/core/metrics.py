"""Prometheus metrics for the Pesa Bridge service.

Metrics are organized into two categories:

Payment Metrics (for Product/Finance):
- pesa_stk_push_total: STK push initiations by outcome
- pesa_callback_total: Gateway callbacks by outcome
- pesa_transactions_recorded_total: Transactions written to the ledger

Technical Metrics (for Engineering/SRE):
- pesa_gateway_latency_seconds: Daraja call latency by operation
- pesa_gateway_failures_total: Daraja failures by operation and error type
- pesa_ledger_write_failures_total: Background ledger write failures
- pesa_ledger_pending_writes: Ledger writes currently in flight
- pesa_broadcast_deliveries_total: Live messages delivered to sessions
- pesa_websocket_sessions: Open WebSocket sessions
- pesa_active_rooms: Rooms with at least one session
- pesa_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, Gauge, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Payment Metrics (Product/Finance dashboards)
# =============================================================================

stk_push_total = Counter(
    "pesa_stk_push_total",
    "Total number of STK push initiations",
    ["outcome"],  # accepted, failed
)

callback_total = Counter(
    "pesa_callback_total",
    "Total number of STK callbacks received",
    ["outcome"],  # success, failed, malformed
)

transactions_recorded = Counter(
    "pesa_transactions_recorded_total",
    "Total number of transactions written to the ledger",
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

gateway_latency = Histogram(
    "pesa_gateway_latency_seconds",
    "Daraja API call latency in seconds",
    ["operation"],  # token, stk_push
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

gateway_failures = Counter(
    "pesa_gateway_failures_total",
    "Total number of Daraja API failures",
    ["operation", "error_type"],  # timeout, error, malformed
)

ledger_write_failures = Counter(
    "pesa_ledger_write_failures_total",
    "Total number of failed background ledger writes",
)

ledger_pending_writes = Gauge(
    "pesa_ledger_pending_writes",
    "Current number of in-flight background ledger writes",
)

broadcast_deliveries = Counter(
    "pesa_broadcast_deliveries_total",
    "Total number of live messages delivered to sessions",
)

websocket_sessions = Gauge(
    "pesa_websocket_sessions",
    "Current number of open WebSocket sessions",
)

active_rooms = Gauge(
    "pesa_active_rooms",
    "Current number of rooms with at least one session",
)

http_requests_total = Counter(
    "pesa_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "pesa_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_stk_push(accepted: bool) -> None:
    """Record an STK push outcome."""
    stk_push_total.labels(outcome="accepted" if accepted else "failed").inc()


def record_callback(outcome: str) -> None:
    """Record a processed callback by outcome."""
    callback_total.labels(outcome=outcome).inc()


@contextmanager
def track_gateway_latency(operation: str) -> Generator[None, None, None]:
    """Context manager to track Daraja call latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        gateway_latency.labels(operation=operation).observe(duration)


def record_gateway_failure(operation: str, error_type: str) -> None:
    """Record a Daraja call failure."""
    gateway_failures.labels(operation=operation, error_type=error_type).inc()


def record_transaction_recorded() -> None:
    """Record a successful ledger write."""
    transactions_recorded.inc()


def record_ledger_write_failure() -> None:
    """Record a failed ledger write."""
    ledger_write_failures.inc()


def record_broadcast_deliveries(count: int) -> None:
    """Record live messages delivered by a broadcast."""
    if count > 0:
        broadcast_deliveries.inc(count)


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
