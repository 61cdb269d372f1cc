"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable, Generator

import pytest

from healthwatch.health.engine import HealthEngine
from healthwatch.health.models import EndpointSpec

from helpers import Route, make_client


@pytest.fixture
def endpoints() -> list[EndpointSpec]:
    return [
        EndpointSpec("alpha", "http://alpha.test/health", 1_000),
        EndpointSpec("beta", "http://beta.test/health", 1_000),
        EndpointSpec("gamma", "http://gamma.test/health", 1_000),
    ]


@pytest.fixture
def engine_factory(endpoints: list[EndpointSpec]) -> Generator[Callable[..., HealthEngine], None, None]:
    """Build engines whose probes are answered by the given host routes."""
    created: list[HealthEngine] = []

    def factory(routes: dict[str, Route], specs: list[EndpointSpec] | None = None, **kwargs) -> HealthEngine:
        engine = HealthEngine(specs or endpoints, client=make_client(routes), **kwargs)
        created.append(engine)
        return engine

    yield factory
    for engine in created:
        engine.close()


@pytest.fixture
def healthy_engine(engine_factory) -> HealthEngine:
    return engine_factory({"alpha.test": 200, "beta.test": 200, "gamma.test": 204})
