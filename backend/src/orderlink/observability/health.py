"""Health checks for the mapping store and the matching configuration."""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..matching.ports import MatchingConfig
from .logging_config import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None

    def to_dict(self) -> dict:
        return {"status": self.status.value, "message": self.message, "latency_ms": self.latency_ms}


def check_database_health(db: Session) -> ComponentHealth:
    """Round-trip a trivial query against the mapping store."""
    started = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Mapping store unreachable: {e}", exc_info=True)
        return ComponentHealth(HealthStatus.UNHEALTHY, f"Database error: {e}")
    latency_ms = round((time.perf_counter() - started) * 1000, 2)
    return ComponentHealth(HealthStatus.HEALTHY, "Database connection OK", latency_ms)


def check_matching_config(config: MatchingConfig) -> ComponentHealth:
    """Flag matching settings that would make every candidate unreachable or trivial.

    The service still runs with odd settings, so problems degrade rather than
    fail the health check.
    """
    max_score = (
        config.order_number_weight
        + max(config.name_exact_weight, config.name_partial_weight)
        + config.value_weight
        + config.date_weight
    )
    problems = []
    if not 0 <= config.min_confidence <= 100:
        problems.append(f"min_confidence {config.min_confidence} outside 0..100")
    elif config.min_confidence > max_score:
        problems.append(f"min_confidence {config.min_confidence} exceeds best possible score {max_score}")
    if not 0 <= config.value_tolerance < 1:
        problems.append(f"value_tolerance {config.value_tolerance} outside [0, 1)")

    if problems:
        return ComponentHealth(HealthStatus.DEGRADED, "; ".join(problems))
    return ComponentHealth(HealthStatus.HEALTHY, f"min_confidence={config.min_confidence}")


def get_overall_health(components: Dict[str, ComponentHealth]) -> HealthStatus:
    """Worst component status wins."""
    statuses = {component.status for component in components.values()}
    for status in (HealthStatus.UNHEALTHY, HealthStatus.DEGRADED):
        if status in statuses:
            return status
    return HealthStatus.HEALTHY
