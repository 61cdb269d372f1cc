"""Endpoint registry — loads endpoints.yaml into EndpointSpec objects.

The endpoint list is read once at startup and never reloaded. Without a
file the service monitors the three reference endpoints.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from healthwatch.health.models import EndpointSpec

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5_000

DEFAULT_ENDPOINTS: tuple[EndpointSpec, ...] = (
    EndpointSpec("service-1", "https://knowmate.com", DEFAULT_TIMEOUT_MS),
    EndpointSpec("service-2", "https://ppmt.myclassform.com", DEFAULT_TIMEOUT_MS),
    EndpointSpec("service-3", "https://myclassform.com", DEFAULT_TIMEOUT_MS),
)


class EndpointRegistry:
    """Loads and caches the monitored endpoints."""

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path else None
        self._endpoints: list[EndpointSpec] = []
        self._loaded = False

    def load(self) -> list[EndpointSpec]:
        """Parse the endpoint file, or fall back to the reference endpoints.

        Raises ``ValueError`` for unreadable YAML, a non-mapping top level or
        duplicate names.
        """
        if self._loaded:
            return self._endpoints

        if self._path is None or not self._path.exists():
            logger.info("No endpoint file at %s, using %d default endpoints", self._path, len(DEFAULT_ENDPOINTS))
            self._endpoints = list(DEFAULT_ENDPOINTS)
            self._loaded = True
            return self._endpoints

        try:
            raw = yaml.safe_load(self._path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse {self._path}: {e}") from e
        if not isinstance(raw, dict):
            raise ValueError(f"{self._path} must be a mapping with an 'endpoints' list, got {type(raw).__name__}")

        endpoints: list[EndpointSpec] = []
        for entry in raw.get("endpoints") or []:
            try:
                endpoints.append(_parse_endpoint(entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed endpoint entry %r: %s", entry, e)

        names = [e.name for e in endpoints]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate endpoint names in {self._path}: {', '.join(duplicates)}")

        self._endpoints = endpoints
        self._loaded = True
        logger.info("Loaded %d endpoints from %s", len(endpoints), self._path)
        return self._endpoints

    @property
    def endpoints(self) -> list[EndpointSpec]:
        return self.load()

    def get(self, name: str) -> EndpointSpec | None:
        return next((e for e in self.endpoints if e.name == name), None)


def _parse_endpoint(raw: dict[str, Any]) -> EndpointSpec:
    name = str(raw["name"]).strip()
    url = str(raw["url"]).strip()
    if not name or not url:
        raise ValueError("'name' and 'url' must be non-empty")
    timeout_ms = int(raw.get("timeout_ms", DEFAULT_TIMEOUT_MS))
    if timeout_ms <= 0:
        raise ValueError(f"timeout_ms must be positive, got {timeout_ms}")
    return EndpointSpec(name=name, url=url, timeout_ms=timeout_ms)
