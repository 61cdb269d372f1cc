"""FastAPI server for the health check service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from healthwatch import __version__
from healthwatch.api.health_routes import health_router
from healthwatch.config import settings
from healthwatch.health.engine import HealthEngine
from healthwatch.health.scheduler import HealthScheduler
from healthwatch.registry import EndpointRegistry

logger = logging.getLogger(__name__)

SERVICE_NAME = "Health Check Service"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the engine and start the scheduler; tear both down on exit."""
    registry = EndpointRegistry(settings.endpoints_file)
    endpoints = registry.load()

    engine = HealthEngine(
        endpoints,
        probe_grace_ms=settings.probe_grace_ms,
        history_limit=settings.history_limit,
    )
    app.state.registry = registry
    app.state.engine = engine

    scheduler = HealthScheduler(engine, interval_seconds=settings.check_interval_seconds)
    app.state.health_scheduler = scheduler
    try:
        await scheduler.start()
    except Exception:
        logger.exception("Health scheduler failed to start")

    yield

    # Shutdown
    await scheduler.stop()
    engine.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title=SERVICE_NAME,
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(health_router)

    @app.get("/")
    def service_info() -> dict[str, Any]:
        return {
            "service": SERVICE_NAME,
            "version": __version__,
            "description": "Monitors service health and exposes metrics",
            "endpoints": {
                "GET /health": "Get current health status of all services",
                "GET /health/detailed": "Get detailed health metrics with availability",
                "GET /health/history/{endpoint}": "Get historical data for specific endpoint",
                "POST /health/check/{endpoint}": "Check a single endpoint now",
            },
        }

    return app


app = create_app()
