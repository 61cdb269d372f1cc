"""Health check scheduler — runs a check round at a fixed rate.

Uses a simple asyncio loop; the blocking round runs in a worker thread so
the event loop keeps serving requests. Every round is logged as one summary
line plus one ALERT line per DOWN endpoint.
"""

from __future__ import annotations

import asyncio
import logging
import time

from .engine import HealthEngine
from .models import HealthSnapshot, Status

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 30.0


def log_snapshot(snapshot: HealthSnapshot) -> None:
    """Emit the round summary and an alert line for each DOWN endpoint."""
    logger.info(
        "Health check: %s - %d/%d services healthy",
        snapshot.overall_status.value,
        snapshot.healthy_endpoints,
        snapshot.total_endpoints,
    )
    for check in snapshot.checks:
        if check.status == Status.DOWN:
            logger.error("ALERT: %s is DOWN - %s", check.endpoint, check.error or "Unknown error")


class HealthScheduler:
    """Periodically runs ``engine.run_check_round`` until stopped."""

    def __init__(self, engine: HealthEngine, interval_seconds: float = DEFAULT_INTERVAL_SECONDS) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.engine = engine
        self.interval = interval_seconds
        self.rounds_completed = 0
        self.last_snapshot: HealthSnapshot | None = None
        self._task: asyncio.Task[None] | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the background loop; the first round runs immediately."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop(), name="health-scheduler")
        logger.info(
            "Health scheduler started: %d endpoints every %ss",
            len(self.engine.endpoints), self.interval,
        )

    async def stop(self) -> None:
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Health scheduler stopped")

    async def run_now(self) -> HealthSnapshot:
        """Run and log a single round."""
        loop = asyncio.get_running_loop()
        snapshot = await loop.run_in_executor(None, self.engine.run_check_round)
        self.last_snapshot = snapshot
        self.rounds_completed += 1
        log_snapshot(snapshot)
        return snapshot

    async def _loop(self) -> None:
        # Fixed rate: each round starts one interval after the previous start.
        while self._running:
            started = time.monotonic()
            try:
                await self.run_now()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Scheduled health check round failed")
            elapsed = time.monotonic() - started
            await asyncio.sleep(max(0.0, self.interval - elapsed))
