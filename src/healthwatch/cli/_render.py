"""Rich renderables for poller state."""

from __future__ import annotations

from rich.box import ROUNDED
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from healthwatch.config import ALLOWED_INTERVALS_MS
from healthwatch.engine.severity import Severity, classify_snapshot, progress_band
from healthwatch.formatting import (
    format_bytes,
    format_count,
    format_percent,
    format_start_time,
    format_uptime,
)
from healthwatch.models import HealthSnapshot, PollerState

TITLE = "Health & Status Dashboard"

SEVERITY_STYLES: dict[Severity, str] = {
    Severity.HEALTHY: "green",
    Severity.WARNING: "yellow",
    Severity.CRITICAL: "red",
}

_SEVERITY_ICONS: dict[Severity, str] = {
    Severity.HEALTHY: "✓",
    Severity.WARNING: "!",
    Severity.CRITICAL: "✗",
}


def interval_label(interval_ms: int) -> str:
    """Short label for a refresh interval (``5s``, ``1m``)."""
    seconds = interval_ms // 1000
    if seconds % 60 == 0:
        return f"{seconds // 60}m"
    return f"{seconds}s"


INTERVAL_LABELS: dict[int, str] = {ms: interval_label(ms) for ms in ALLOWED_INTERVALS_MS}


def severity_badge(severity: Severity) -> Text:
    style = SEVERITY_STYLES[severity]
    return Text(f"{_SEVERITY_ICONS[severity]} {severity.value}", style=style)


def _percent_bar(percent: float) -> ProgressBar:
    style = SEVERITY_STYLES[progress_band(percent)]
    return ProgressBar(
        total=100,
        completed=min(max(percent, 0.0), 100.0),
        width=24,
        complete_style=style,
        finished_style=style,
    )


def snapshot_table(snapshot: HealthSnapshot) -> Table:
    """One row per dashboard card."""
    severities = classify_snapshot(snapshot)
    table = Table(box=ROUNDED, expand=False, show_lines=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_column("Detail", style="dim")
    table.add_column("Status")

    table.add_row(
        "Uptime",
        format_uptime(snapshot.uptime_seconds),
        f"Started: {format_start_time(snapshot.start_epoch_seconds)}",
        severity_badge(severities.uptime),
    )
    table.add_row(
        "Memory",
        Group(
            Text(format_percent(snapshot.memory_percent)),
            _percent_bar(snapshot.memory_percent),
        ),
        f"Used: {format_bytes(snapshot.memory_used_bytes)} / "
        f"Total: {format_bytes(snapshot.memory_max_bytes)}",
        severity_badge(severities.memory),
    )
    table.add_row(
        "CPU",
        Group(
            Text(format_percent(snapshot.cpu_percent)),
            _percent_bar(snapshot.cpu_percent),
        ),
        "Process CPU usage",
        severity_badge(severities.cpu),
    )
    table.add_row(
        "Disk",
        Group(
            Text(format_percent(snapshot.disk_used_percent)),
            _percent_bar(snapshot.disk_used_percent),
        ),
        f"Free: {format_bytes(snapshot.disk_free_bytes)} / "
        f"Total: {format_bytes(snapshot.disk_total_bytes)}",
        severity_badge(severities.disk),
    )
    table.add_row(
        "Active Requests",
        format_count(snapshot.active_request_count),
        "HTTP connections",
        severity_badge(severities.active_requests),
    )
    table.add_row(
        "Threads",
        format_count(snapshot.live_thread_count),
        "Live JVM threads",
        severity_badge(severities.threads),
    )
    table.add_row(
        "Sessions",
        format_count(snapshot.active_session_count),
        "Active user sessions",
        severity_badge(severities.sessions),
    )
    table.add_row(
        "System Status",
        format_percent(snapshot.peak_percent, digits=0),
        f"Memory {format_percent(snapshot.memory_percent, 0)} · "
        f"CPU {format_percent(snapshot.cpu_percent, 0)} · "
        f"Disk {format_percent(snapshot.disk_used_percent, 0)}",
        severity_badge(severities.system),
    )
    return table


def _status_line(state: PollerState) -> Text:
    line = Text()
    if state.auto_refresh_enabled:
        line.append("Auto-refresh ON", style="green")
        line.append(f" · every {interval_label(state.interval_ms)}", style="dim")
    else:
        line.append("Auto-refresh OFF", style="dim")
    if state.is_loading:
        line.append(" · refreshing…", style="cyan")
    if state.last_updated_at is not None:
        updated = state.last_updated_at.astimezone().strftime("%H:%M:%S")
        line.append(f" · Last updated: {updated}", style="dim")
    return line


def render_state(state: PollerState) -> RenderableType:
    """Render the whole dashboard for one poller state."""
    if state.snapshot is None:
        if state.last_error:
            body: RenderableType = Group(
                Text("Health Metrics Unavailable", style="red bold"),
                Text(),
                Text(state.last_error, style="dim"),
            )
            return Panel(body, title=TITLE, border_style="red dim", box=ROUNDED)
        body = Text("Loading Health Metrics…", style="cyan")
        return Panel(body, title=TITLE, border_style="dim", box=ROUNDED)

    parts: list[RenderableType] = [_status_line(state)]
    if state.last_error:
        parts.append(Text(f"! {state.last_error}", style="yellow"))
    parts.append(snapshot_table(state.snapshot))
    return Panel(Group(*parts), title=TITLE, border_style="dim", box=ROUNDED)
