"""Data models for the health engine: endpoints, results, snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def utc_now_iso() -> str:
    """Current time as an ISO-8601 UTC string (``2025-01-01T00:00:00.000Z``)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ── Enums ────────────────────────────────────────────────────────────────────


class Status(str, Enum):
    UP = "UP"
    DOWN = "DOWN"


class OverallStatus(str, Enum):
    HEALTHY = "HEALTHY"
    DEGRADED = "DEGRADED"
    UNHEALTHY = "UNHEALTHY"


# ── Models ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class EndpointSpec:
    """A monitored endpoint. Loaded once at startup, never mutated."""

    name: str
    url: str
    timeout_ms: int = 5_000

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "url": self.url, "timeout_ms": self.timeout_ms}


@dataclass(frozen=True)
class CheckResult:
    """Outcome of probing one endpoint once."""

    endpoint: str
    status: Status
    response_time_ms: int
    status_code: int | None = None
    error: str | None = None
    timestamp: str = field(default_factory=utc_now_iso)

    @property
    def is_up(self) -> bool:
        return self.status == Status.UP

    def to_dict(self) -> dict[str, Any]:
        return {
            "endpoint": self.endpoint,
            "status": self.status.value,
            "response_time_ms": self.response_time_ms,
            "status_code": self.status_code,
            "error": self.error,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class AvailabilityMetrics:
    availability: float = 0.0
    avg_response_time_ms: float = 0.0
    total_checks: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "availability": self.availability,
            "avg_response_time_ms": self.avg_response_time_ms,
            "total_checks": self.total_checks,
        }


@dataclass(frozen=True)
class HealthSnapshot:
    """Aggregate picture produced by a single check round."""

    overall_status: OverallStatus
    checks: list[CheckResult]
    total_endpoints: int
    healthy_endpoints: int
    unhealthy_endpoints: int
    uptime_ms: int
    last_check: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_status": self.overall_status.value,
            "checks": [c.to_dict() for c in self.checks],
            "total_endpoints": self.total_endpoints,
            "healthy_endpoints": self.healthy_endpoints,
            "unhealthy_endpoints": self.unhealthy_endpoints,
            "uptime_ms": self.uptime_ms,
            "last_check": self.last_check,
        }
