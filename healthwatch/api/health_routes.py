"""API routes for the health engine.

Endpoints:
  GET  /health                      — run a check round (200 / 207 / 503)
  GET  /health/detailed             — live round + per-endpoint availability
  GET  /health/history/{endpoint}   — recent results + availability metrics
  POST /health/check/{endpoint}     — probe a single endpoint now
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from healthwatch.config import settings
from healthwatch.health.engine import HealthEngine
from healthwatch.health.models import OverallStatus

logger = logging.getLogger(__name__)

health_router = APIRouter(prefix="/health", tags=["health"])

STATUS_CODES = {
    OverallStatus.HEALTHY: 200,
    OverallStatus.DEGRADED: 207,
    OverallStatus.UNHEALTHY: 503,
}


def _engine(request: Request) -> HealthEngine:
    return request.app.state.engine


@health_router.get("")
def get_health(request: Request) -> JSONResponse:
    """Current health of all endpoints, mapped onto the HTTP status."""
    snapshot = _engine(request).run_check_round()
    return JSONResponse(
        content=snapshot.to_dict(),
        status_code=STATUS_CODES.get(snapshot.overall_status, 503),
    )


@health_router.get("/detailed")
def get_detailed_health(request: Request) -> dict[str, Any]:
    return _engine(request).detailed_metrics()


@health_router.get("/history/{endpoint}", response_model=None)
def get_endpoint_history(
    endpoint: str, request: Request, limit: int = settings.default_history_limit,
) -> dict[str, Any] | JSONResponse:
    """Recent results for one endpoint, oldest first, with availability."""
    engine = _engine(request)
    history = engine.history(endpoint, limit)
    if not history:
        return JSONResponse(
            status_code=404,
            content={"error": f"No history found for endpoint: {endpoint}"},
        )
    return {
        "endpoint": endpoint,
        "history": [r.to_dict() for r in history],
        "metrics": engine.availability(endpoint).to_dict(),
    }


@health_router.post("/check/{endpoint}", response_model=None)
def trigger_check(endpoint: str, request: Request) -> dict[str, Any] | JSONResponse:
    """Probe one endpoint immediately and record the result."""
    result = _engine(request).check_endpoint(endpoint)
    if result is None:
        return JSONResponse(status_code=404, content={"error": f"Unknown endpoint: {endpoint}"})
    logger.info("Manual check %s: %s (%dms)", endpoint, result.status.value, result.response_time_ms)
    return result.to_dict()
