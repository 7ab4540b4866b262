"""Live dashboard command."""

import asyncio

import typer
from rich.live import Live

from healthwatch.cli._console import console, error_panel, nl, setup_logging
from healthwatch.cli._options import resolve_settings
from healthwatch.cli._render import render_state
from healthwatch.config import ALLOWED_INTERVALS_MS
from healthwatch.engine.poller import HealthPoller
from healthwatch.models import PollerState


async def _watch(poller: HealthPoller, live: Live) -> None:
    def _on_change(state: PollerState) -> None:
        live.update(render_state(state), refresh=True)

    poller.add_listener(_on_change)
    try:
        await poller.refresh_now()
        poller.set_auto_refresh(True)
        # The timer drives further cycles until interrupted.
        await asyncio.Event().wait()
    finally:
        await poller.close()


def watch(
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        "-u",
        help="Actuator base URL (overrides HEALTHWATCH_BASE_URL)",
    ),
    interval_ms: int | None = typer.Option(
        None,
        "--interval",
        "-i",
        help="Refresh interval in ms (5000, 10000, 30000, 60000 or 300000)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Poll continuously and keep the dashboard up to date.

    Examples:
        healthwatch watch
        healthwatch watch --interval 5000
    """
    setup_logging(verbose=verbose)

    if interval_ms is not None and interval_ms not in ALLOWED_INTERVALS_MS:
        allowed = ", ".join(str(ms) for ms in ALLOWED_INTERVALS_MS)
        error_panel(f"Interval must be one of {allowed}", title="Invalid interval")
        raise typer.Exit(1)

    settings = resolve_settings(base_url, interval_ms)
    poller = HealthPoller(settings=settings)

    try:
        with Live(
            render_state(poller.state),
            console=console,
            refresh_per_second=4,
            transient=False,
        ) as live:
            asyncio.run(_watch(poller, live))
    except KeyboardInterrupt:
        pass  # Clean exit on Ctrl+C
    finally:
        nl()
