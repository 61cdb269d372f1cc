"""HTTP prober — a single GET against one endpoint, timed and classified.

Failures never raise: a transport error or a non-2xx answer comes back as a
DOWN CheckResult. The prober does not touch history; the engine does that.
"""

from __future__ import annotations

import logging
import time

import httpx

from .models import CheckResult, EndpointSpec, Status, utc_now_iso

logger = logging.getLogger(__name__)


def _elapsed_ms(t0: float) -> int:
    return int((time.perf_counter() - t0) * 1000)


def probe(spec: EndpointSpec, client: httpx.Client | None = None) -> CheckResult:
    """GET ``spec.url`` within ``spec.timeout_ms`` and classify the outcome.

    When ``client`` is None a short-lived client is opened for this call.
    """
    timestamp = utc_now_iso()
    timeout = spec.timeout_ms / 1000
    t0 = time.perf_counter()
    try:
        if client is None:
            with httpx.Client(timeout=timeout, follow_redirects=True) as own_client:
                resp = own_client.get(spec.url)
        else:
            resp = client.get(spec.url, timeout=timeout)
    except httpx.TimeoutException as e:
        latency = _elapsed_ms(t0)
        message = str(e) or f"Request timed out ({spec.timeout_ms}ms)"
        logger.warning("Health check failed for %s: %s", spec.name, message)
        return CheckResult(
            endpoint=spec.name, status=Status.DOWN, response_time_ms=latency,
            error=message, timestamp=timestamp,
        )
    except Exception as e:
        latency = _elapsed_ms(t0)
        message = str(e) or type(e).__name__
        logger.warning("Health check failed for %s: %s", spec.name, message)
        return CheckResult(
            endpoint=spec.name, status=Status.DOWN, response_time_ms=latency,
            error=message, timestamp=timestamp,
        )

    latency = _elapsed_ms(t0)
    status = Status.UP if resp.is_success else Status.DOWN
    if status == Status.DOWN:
        logger.debug("Endpoint %s answered %d", spec.name, resp.status_code)
    return CheckResult(
        endpoint=spec.name, status=status, response_time_ms=latency,
        status_code=resp.status_code, timestamp=timestamp,
    )
