"""Observability module for OrderLink.

Provides structured logging, metrics, and health checks.
"""

from .logging_config import configure_logging, get_logger
from .metrics import (
    matching_runs_total,
    mapping_candidates_total,
    candidate_confidence_histogram,
    order_mappings_total,
    orders_at_risk,
    backordered_products,
)
from .request_id import request_id_var, get_request_id, set_request_id, generate_request_id
from .health import HealthStatus, ComponentHealth
from .middleware import RequestIDMiddleware

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Metrics
    "matching_runs_total",
    "mapping_candidates_total",
    "candidate_confidence_histogram",
    "order_mappings_total",
    "orders_at_risk",
    "backordered_products",
    # Request ID
    "request_id_var",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    # Health
    "HealthStatus",
    "ComponentHealth",
    # Middleware
    "RequestIDMiddleware",
]
