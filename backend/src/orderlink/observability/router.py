"""Probe endpoints: Prometheus metrics, health and readiness."""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..matching.ports import MatchingConfig
from .health import HealthStatus, check_database_health, check_matching_config, get_overall_health

router = APIRouter(tags=["Observability"])


@router.get("/metrics", include_in_schema=False)
def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/health", summary="Component health")
def health_check(db: Session = Depends(get_db)):
    """Report mapping store and matching configuration health.

    503 when any component is unhealthy; a degraded configuration still
    answers 200.
    """
    components = {
        "database": check_database_health(db),
        "matching": check_matching_config(MatchingConfig.from_settings(settings)),
    }
    overall = get_overall_health(components)

    return JSONResponse(
        status_code=503 if overall == HealthStatus.UNHEALTHY else 200,
        content={
            "status": overall.value,
            "environment": settings.ENVIRONMENT,
            "components": {name: component.to_dict() for name, component in components.items()},
        },
    )


@router.get("/ready")
def readiness_check(db: Session = Depends(get_db)):
    """Ready once the mapping store answers."""
    database = check_database_health(db)
    if database.status != HealthStatus.HEALTHY:
        return JSONResponse(status_code=503, content={"status": "not_ready", "message": database.message})
    return {"status": "ready"}
