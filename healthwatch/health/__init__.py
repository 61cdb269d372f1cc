"""Health subsystem: prober, history store, aggregator, engine, scheduler."""

from .engine import HealthEngine
from .history import HistoryStore
from .models import (
    AvailabilityMetrics,
    CheckResult,
    EndpointSpec,
    HealthSnapshot,
    OverallStatus,
    Status,
)
from .scheduler import HealthScheduler
