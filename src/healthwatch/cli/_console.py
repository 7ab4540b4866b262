"""Shared console and formatting utilities."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

# Force colors unless explicitly disabled (NO_COLOR standard)
no_color = os.environ.get("NO_COLOR", "").lower() in ("1", "true", "yes")

console = Console(
    highlight=False,
    force_terminal=not no_color,
    no_color=no_color,
)


def success(msg: str) -> None:
    """Print success message."""
    console.print(f"  [green]✓[/green] {msg}")


def error(msg: str) -> None:
    """Print error message."""
    console.print(f"  [red]✗[/red] {msg}")


def warning(msg: str) -> None:
    """Print warning message."""
    console.print(f"  [yellow]![/yellow] {msg}")


def info(msg: str) -> None:
    """Print info message."""
    console.print(f"  [dim]→[/dim] {msg}")


def error_panel(msg: str, *, title: str = "Failed") -> None:
    """Print a styled error panel."""
    from rich.box import ROUNDED
    from rich.panel import Panel
    from rich.text import Text

    lines: list[Text] = []
    line = Text()
    line.append("✗ ", style="red bold")
    line.append(title, style="red")
    lines.append(line)
    lines.append(Text())
    lines.append(Text(msg, style="dim"))

    panel = Panel(
        Text("\n").join(lines),
        border_style="red dim",
        box=ROUNDED,
        padding=(0, 1),
        expand=False,
    )
    console.print(panel)


def nl() -> None:
    """Print newline."""
    console.print()


def setup_logging(verbose: bool = False) -> None:
    """Configure clean logging for the healthwatch CLI."""
    # Suppress noisy loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )

    logging.getLogger("healthwatch").setLevel(level)
