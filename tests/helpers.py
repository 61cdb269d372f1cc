"""Network doubles and result builders shared by the tests."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Union

import httpx

from healthwatch.health.models import CheckResult, Status

# A route is either a status code or a callable taking the request.
Route = Union[int, Callable[[httpx.Request], httpx.Response]]


def make_client(routes: dict[str, Route]) -> httpx.Client:
    """httpx client whose transport answers by host name, no network involved."""

    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(request.url.host)
        if route is None:
            raise httpx.ConnectError(f"Name or service not known: {request.url.host}", request=request)
        if isinstance(route, int):
            return httpx.Response(route, request=request)
        return route(request)

    return httpx.Client(transport=httpx.MockTransport(handler))


def slow(seconds: float, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        time.sleep(seconds)
        return httpx.Response(status_code, request=request)
    return handler


def refused(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


def result(status: Status, latency: int = 10, endpoint: str = "svc") -> CheckResult:
    return CheckResult(endpoint=endpoint, status=status, response_time_ms=latency)


