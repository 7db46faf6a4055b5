"""
Health, readiness, and metrics endpoints for operational visibility.

- /health: Liveness probe (is the app running?)
- /ready: Readiness probe (is the patient database reachable?)
- /metrics: Prometheus-compatible request metrics
- /metrics/json: The same metrics as JSON

These endpoints do not use the patient envelope format.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from core.dependencies import get_database
from core.middleware import get_metrics_collector
from repositories import Database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health & Observability"])

SERVICE_NAME = "Patient Records Service"
SERVICE_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Response model for /health endpoint."""
    status: str  # "healthy"
    version: str
    timestamp: str  # ISO 8601 UTC


class DependencyStatus(BaseModel):
    """Status of a single dependency."""
    name: str
    status: str  # "ok" or "unavailable"
    latency_ms: float | None = None
    message: str | None = None


class ReadyResponse(BaseModel):
    """Response model for /ready endpoint."""
    status: str  # "ready" or "not_ready"
    dependencies: List[DependencyStatus]
    timestamp: str


class MetricsResponse(BaseModel):
    """Response model for JSON metrics endpoint."""
    http_requests_total: int
    http_requests_2xx_total: int
    http_requests_4xx_total: int
    http_requests_5xx_total: int
    http_request_duration_ms_p50: float
    http_request_duration_ms_p95: float
    http_request_duration_ms_p99: float


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Returns immediately without checking dependencies."
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version=SERVICE_VERSION, timestamp=_timestamp())


def _check_database(db: Database) -> DependencyStatus:
    """Run a trivial query against the patient table."""
    start = time.perf_counter()
    conn = None
    try:
        conn = db.get_connection()
        conn.execute("SELECT 1 FROM patient LIMIT 1")
        latency_ms = (time.perf_counter() - start) * 1000
        return DependencyStatus(
            name="database",
            status="ok",
            latency_ms=round(latency_ms, 2),
            message="SQLite connection healthy"
        )
    except Exception as e:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.error("Database health check failed", extra={"error": str(e)})
        return DependencyStatus(
            name="database",
            status="unavailable",
            latency_ms=round(latency_ms, 2),
            message=f"Connection failed: {type(e).__name__}"
        )
    finally:
        if conn is not None:
            conn.close()


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness probe",
    description="Check that the patient database is reachable. Returns 503 if not ready."
)
def readiness_check(response: Response, db: Database = Depends(get_database)) -> ReadyResponse:
    db_status = _check_database(db)

    if db_status.status == "ok":
        status = "ready"
    else:
        status = "not_ready"
        response.status_code = 503

    return ReadyResponse(status=status, dependencies=[db_status], timestamp=_timestamp())


@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="Export request counts and latency percentiles in Prometheus text format."
)
async def get_metrics() -> Response:
    """
    Scrape configuration (prometheus.yml):
        scrape_configs:
          - job_name: 'patient-svc'
            static_configs:
              - targets: ['localhost:8000']
            metrics_path: /metrics
    """
    return Response(
        content=get_metrics_collector().get_prometheus_format(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


@router.get(
    "/metrics/json",
    response_model=MetricsResponse,
    summary="JSON metrics",
)
async def get_metrics_json() -> MetricsResponse:
    return MetricsResponse(**get_metrics_collector().get_summary())


@router.get("/", summary="API root")
async def root() -> Dict[str, Any]:
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "docs": "/docs",
        "patients": "/patients",
        "health": "/health",
        "ready": "/ready",
        "metrics": "/metrics"
    }
