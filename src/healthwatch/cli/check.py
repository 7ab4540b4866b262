"""One-shot health check command."""

import asyncio

import typer

from healthwatch.cli._console import console, nl, setup_logging
from healthwatch.cli._options import resolve_settings
from healthwatch.cli._render import render_state
from healthwatch.engine.poller import HealthPoller
from healthwatch.models import PollerState


async def _run_check(poller: HealthPoller) -> PollerState:
    try:
        return await poller.refresh_now()
    finally:
        await poller.close()


def check(
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        "-u",
        help="Actuator base URL (overrides HEALTHWATCH_BASE_URL)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Run one polling cycle and print the dashboard.

    Exits with status 1 when the monitoring endpoint is unavailable.

    Examples:
        healthwatch check
        healthwatch check --base-url http://localhost:8080/actuator
    """
    setup_logging(verbose=verbose)
    settings = resolve_settings(base_url)

    state = asyncio.run(_run_check(HealthPoller(settings=settings)))

    nl()
    console.print(render_state(state))
    nl()
    if state.snapshot is None:
        raise typer.Exit(1)
