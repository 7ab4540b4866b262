"""Healthwatch CLI."""

import typer

from healthwatch.cli._console import console
from healthwatch.cli.check import check
from healthwatch.cli.endpoints import endpoints
from healthwatch.cli.watch import watch

app = typer.Typer(
    name="healthwatch",
    help="Poll an actuator endpoint and show application health.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        from healthwatch import __version__

        console.print(f"[bold]healthwatch[/bold] [dim]{__version__}[/dim]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version",
    ),
) -> None:
    """Application health dashboard for Spring Boot Actuator endpoints."""


# Register commands
app.command()(check)
app.command()(watch)
app.command()(endpoints)
