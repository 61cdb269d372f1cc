"""Entry point for the health check service."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from healthwatch.config import settings
from healthwatch.health.engine import HealthEngine
from healthwatch.health.models import OverallStatus, Status
from healthwatch.registry import EndpointRegistry

console = Console()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)

_OVERALL_STYLE = {
    OverallStatus.HEALTHY: "bold green",
    OverallStatus.DEGRADED: "bold yellow",
    OverallStatus.UNHEALTHY: "bold red",
}


def run_server() -> None:
    """Start the FastAPI server."""
    console.print(Panel("Starting Health Check Service", style="bold green"))
    uvicorn.run(
        "healthwatch.api.server:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )


def run_check(endpoints_file: str) -> int:
    """Run a single check round and print it. Exit code 0 only when HEALTHY."""
    endpoints = EndpointRegistry(endpoints_file).load()
    engine = HealthEngine(endpoints, probe_grace_ms=settings.probe_grace_ms)
    try:
        with console.status("[bold green]Probing endpoints..."):
            snapshot = engine.run_check_round()
    finally:
        engine.close()

    urls = {e.name: e.url for e in endpoints}
    table = Table(title="Health check")
    table.add_column("Endpoint")
    table.add_column("URL", style="dim")
    table.add_column("Status")
    table.add_column("Code", justify="right")
    table.add_column("Time (ms)", justify="right")
    table.add_column("Error", style="red")
    for c in snapshot.checks:
        status = "[green]UP[/green]" if c.status == Status.UP else "[red]DOWN[/red]"
        table.add_row(
            c.endpoint, urls.get(c.endpoint, ""), status,
            str(c.status_code or "-"), str(c.response_time_ms), c.error or "",
        )
    console.print(table)
    console.print(Panel(
        f"{snapshot.overall_status.value}: "
        f"{snapshot.healthy_endpoints}/{snapshot.total_endpoints} services healthy",
        style=_OVERALL_STYLE[snapshot.overall_status],
    ))
    return 0 if snapshot.overall_status == OverallStatus.HEALTHY else 1


def main() -> None:
    parser = argparse.ArgumentParser(description="Endpoint health check service")
    sub = parser.add_subparsers(dest="command")

    # Server mode
    sub.add_parser("serve", help="Start the API server and background scheduler")

    # One-shot mode
    check_parser = sub.add_parser("check", help="Run one check round and print the result")
    check_parser.add_argument(
        "--endpoints", default=settings.endpoints_file,
        help="YAML endpoint list (default: %(default)s)",
    )

    args = parser.parse_args()

    if args.command == "serve":
        run_server()
    elif args.command == "check":
        sys.exit(run_check(args.endpoints))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
