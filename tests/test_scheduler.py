"""Tests for the periodic health scheduler."""

from __future__ import annotations

import asyncio
import logging

import pytest

from healthwatch.health.engine import HealthEngine
from healthwatch.health.models import CheckResult, HealthSnapshot, OverallStatus, Status
from healthwatch.health.scheduler import HealthScheduler, log_snapshot

from helpers import refused


def _run_for(scheduler: HealthScheduler, seconds: float) -> None:
    async def scenario() -> None:
        await scheduler.start()
        await asyncio.sleep(seconds)
        await scheduler.stop()

    asyncio.run(scenario())


class FlakyEngine:
    """Engine double whose first round raises."""

    endpoints = ()

    def __init__(self) -> None:
        self.calls = 0

    def run_check_round(self) -> HealthSnapshot:
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("round exploded")
        return HealthSnapshot(
            overall_status=OverallStatus.HEALTHY, checks=[], total_endpoints=0,
            healthy_endpoints=0, unhealthy_endpoints=0, uptime_ms=0,
            last_check="2025-01-01T00:00:00.000Z",
        )


class TestHealthScheduler:
    def test_runs_immediately_and_repeats(self, healthy_engine: HealthEngine) -> None:
        scheduler = HealthScheduler(healthy_engine, interval_seconds=0.1)
        _run_for(scheduler, 0.35)
        assert scheduler.rounds_completed >= 2
        assert healthy_engine.store.size("alpha") >= scheduler.rounds_completed
        assert scheduler.last_snapshot is not None
        assert not scheduler.running

    def test_failed_round_does_not_stop_loop(self, caplog: pytest.LogCaptureFixture) -> None:
        engine = FlakyEngine()
        scheduler = HealthScheduler(engine, interval_seconds=0.05)  # type: ignore[arg-type]
        with caplog.at_level(logging.ERROR, logger="healthwatch.health.scheduler"):
            _run_for(scheduler, 0.3)
        assert engine.calls >= 2
        assert scheduler.rounds_completed >= 1
        assert "Scheduled health check round failed" in caplog.text

    def test_start_twice_is_noop(self, healthy_engine: HealthEngine) -> None:
        scheduler = HealthScheduler(healthy_engine, interval_seconds=10)

        async def scenario() -> None:
            await scheduler.start()
            task = scheduler._task
            await scheduler.start()
            assert scheduler._task is task
            await scheduler.stop()

        asyncio.run(scenario())

    def test_rejects_non_positive_interval(self, healthy_engine: HealthEngine) -> None:
        with pytest.raises(ValueError):
            HealthScheduler(healthy_engine, interval_seconds=0)

    def test_run_now_logs_alerts(self, engine_factory, caplog: pytest.LogCaptureFixture) -> None:
        engine = engine_factory({"alpha.test": 200, "beta.test": refused, "gamma.test": 500})
        scheduler = HealthScheduler(engine)
        with caplog.at_level(logging.INFO, logger="healthwatch.health.scheduler"):
            snapshot = asyncio.run(scheduler.run_now())

        assert snapshot.overall_status == OverallStatus.UNHEALTHY
        assert "Health check: UNHEALTHY - 1/3 services healthy" in caplog.text
        assert "ALERT: beta is DOWN - Connection refused" in caplog.text
        assert "ALERT: gamma is DOWN - Unknown error" in caplog.text
        assert "ALERT: alpha" not in caplog.text


class TestLogSnapshot:
    def test_healthy_round_has_no_alerts(self, caplog: pytest.LogCaptureFixture) -> None:
        snapshot = HealthSnapshot(
            overall_status=OverallStatus.HEALTHY,
            checks=[CheckResult(endpoint="a", status=Status.UP, response_time_ms=5, status_code=200)],
            total_endpoints=1, healthy_endpoints=1, unhealthy_endpoints=0,
            uptime_ms=10, last_check="2025-01-01T00:00:00.000Z",
        )
        with caplog.at_level(logging.INFO, logger="healthwatch.health.scheduler"):
            log_snapshot(snapshot)
        assert "Health check: HEALTHY - 1/1 services healthy" in caplog.text
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
