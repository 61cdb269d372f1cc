"""Availability and overall-status computations over check results."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from .models import AvailabilityMetrics, CheckResult, OverallStatus, Status


def _round2(value: float) -> float:
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def availability(results: Sequence[CheckResult]) -> AvailabilityMetrics:
    """Share of UP results and mean response time, both to 2 decimals.

    No results yields the zero state rather than an error.
    """
    if not results:
        return AvailabilityMetrics()

    total = len(results)
    up_count = sum(1 for r in results if r.status == Status.UP)
    avg_latency = sum(r.response_time_ms for r in results) / total
    return AvailabilityMetrics(
        availability=_round2(up_count * 100 / total),
        avg_response_time_ms=_round2(avg_latency),
        total_checks=total,
    )


def overall_status(checks: Sequence[CheckResult]) -> OverallStatus:
    """Majority rule: no DOWN is HEALTHY, more UP than DOWN is DEGRADED.

    Anything else, including a tie, is UNHEALTHY. This is a coarse proxy,
    not a weighted SLA model.
    """
    down = sum(1 for c in checks if c.status == Status.DOWN)
    up = sum(1 for c in checks if c.status == Status.UP)
    if down == 0:
        return OverallStatus.HEALTHY
    if up > down:
        return OverallStatus.DEGRADED
    return OverallStatus.UNHEALTHY
