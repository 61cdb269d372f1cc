from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Endpoint list (YAML); the reference endpoints are used when missing
    endpoints_file: str = "endpoints.yaml"

    # Health engine
    check_interval_seconds: float = 30.0
    history_limit: int = 100  # results kept per endpoint
    default_history_limit: int = 10  # ?limit= default on the history route
    probe_grace_ms: int = 1_000  # extra wait past an endpoint's timeout

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Logging
    log_level: str = "INFO"


settings = Settings()
