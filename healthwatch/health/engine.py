"""Health engine — fans probes out across all endpoints and aggregates.

Both the scheduler and the API call ``run_check_round``; rounds may overlap.
Each round probes on its own short-lived threads, joins them with a full
barrier, appends the results to the history store and folds them into a
HealthSnapshot.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any

import httpx

from . import aggregator
from .history import DEFAULT_HISTORY_LIMIT, HistoryStore
from .models import (
    AvailabilityMetrics,
    CheckResult,
    EndpointSpec,
    HealthSnapshot,
    Status,
    utc_now_iso,
)
from .prober import probe

logger = logging.getLogger(__name__)


class HealthEngine:
    """Owns the endpoint list, the history store and the shared httpx client."""

    def __init__(
        self,
        endpoints: Sequence[EndpointSpec],
        store: HistoryStore | None = None,
        client: httpx.Client | None = None,
        probe_grace_ms: int = 1_000,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        names = [e.name for e in endpoints]
        if len(set(names)) != len(names):
            raise ValueError(f"Endpoint names must be unique: {names}")

        self.endpoints: tuple[EndpointSpec, ...] = tuple(endpoints)
        self.store = store or HistoryStore(names, max_entries=history_limit)
        self.probe_grace_ms = probe_grace_ms
        self._by_name = {e.name: e for e in self.endpoints}
        self._owns_client = client is None
        self._client = client or httpx.Client(follow_redirects=True)
        self._started = time.monotonic()

        logger.info("Health engine initialised, monitoring %d endpoints", len(self.endpoints))

    # ── Probing ──────────────────────────────────────────────────────────────

    def uptime_ms(self) -> int:
        return int((time.monotonic() - self._started) * 1000)

    def _probe(self, spec: EndpointSpec) -> CheckResult:
        return probe(spec, self._client)

    def _collect(
        self, spec: EndpointSpec, future: Future[CheckResult], t0: float, started_at: str,
    ) -> CheckResult:
        """Wait for one probe, folding errors and overruns into DOWN results."""
        deadline = t0 + (spec.timeout_ms + self.probe_grace_ms) / 1000
        try:
            return future.result(timeout=max(0.0, deadline - time.monotonic()))
        except FutureTimeoutError:
            elapsed = int((time.monotonic() - t0) * 1000)
            logger.warning("Probe for %s did not finish within %dms", spec.name, spec.timeout_ms)
            return CheckResult(
                endpoint=spec.name, status=Status.DOWN, response_time_ms=elapsed,
                error=f"Health check timed out after {spec.timeout_ms}ms", timestamp=started_at,
            )
        except Exception as e:
            elapsed = int((time.monotonic() - t0) * 1000)
            logger.exception("Probe for %s raised", spec.name)
            return CheckResult(
                endpoint=spec.name, status=Status.DOWN, response_time_ms=elapsed,
                error=str(e) or type(e).__name__, timestamp=started_at,
            )

    def _fan_out(self, specs: Sequence[EndpointSpec]) -> list[CheckResult]:
        """Run one probe per endpoint, each on its own thread, and join them all.

        Every call gets its own pool, so overlapping rounds never wait on each
        other and a probe's deadline starts when its request starts. A hung
        request keeps only its own thread, which exits once httpx gives up.
        """
        t0 = time.monotonic()
        started_at = utc_now_iso()
        executor = ThreadPoolExecutor(max_workers=max(1, len(specs)), thread_name_prefix="probe")
        try:
            futures = [(spec, executor.submit(self._probe, spec)) for spec in specs]
            return [self._collect(spec, future, t0, started_at) for spec, future in futures]
        finally:
            executor.shutdown(wait=False)

    def check_endpoint(self, name: str) -> CheckResult | None:
        """Probe a single endpoint now and record the result."""
        spec = self._by_name.get(name)
        if spec is None:
            return None
        result = self._fan_out([spec])[0]
        self.store.append(spec.name, result)
        return result

    def run_check_round(self) -> HealthSnapshot:
        """Probe every endpoint concurrently and build a snapshot of this round."""
        t0 = time.monotonic()
        checks = self._fan_out(self.endpoints)

        for result in checks:
            self.store.append(result.endpoint, result)

        healthy = sum(1 for c in checks if c.status == Status.UP)
        unhealthy = sum(1 for c in checks if c.status == Status.DOWN)
        snapshot = HealthSnapshot(
            overall_status=aggregator.overall_status(checks),
            checks=checks,
            total_endpoints=len(checks),
            healthy_endpoints=healthy,
            unhealthy_endpoints=unhealthy,
            uptime_ms=self.uptime_ms(),
            last_check=utc_now_iso(),
        )
        logger.debug(
            "Round finished in %dms: %s",
            int((time.monotonic() - t0) * 1000), snapshot.overall_status.value,
        )
        return snapshot

    # ── Reads ────────────────────────────────────────────────────────────────

    def history(self, name: str, limit: int) -> list[CheckResult]:
        return self.store.get(name, limit)

    def availability(self, name: str) -> AvailabilityMetrics:
        return aggregator.availability(self.store.all(name))

    def detailed_metrics(self) -> dict[str, Any]:
        """Fresh round plus per-endpoint availability.

        Always probes live; this is never a cached read.
        """
        snapshot = self.run_check_round()
        details = [
            {"name": e.name, "url": e.url, **self.availability(e.name).to_dict()}
            for e in self.endpoints
        ]
        return {**snapshot.to_dict(), "endpoint_details": details}

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
