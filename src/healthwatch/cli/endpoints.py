"""Endpoint verification command."""

import asyncio
from dataclasses import dataclass

import typer

from healthwatch.cli._console import (
    console,
    error,
    info,
    nl,
    setup_logging,
    success,
    warning,
)
from healthwatch.cli._options import resolve_settings
from healthwatch.engine.catalog import METRIC_NAMES
from healthwatch.engine.fetcher import ActuatorClient, select_sample
from healthwatch.errors import BackendUnavailableError, MetricUnavailableError


@dataclass
class EndpointResult:
    path: str
    ok: bool
    detail: str


async def verify_endpoints(client: ActuatorClient) -> list[EndpointResult]:
    """Hit the health endpoint and every polled metric, one at a time."""
    results: list[EndpointResult] = []
    try:
        health = await client.check_health()
        results.append(EndpointResult("/health", True, f"Status: {health.status}"))
    except BackendUnavailableError as exc:
        detail = f"HTTP {exc.status}" if exc.status else exc.reason
        results.append(EndpointResult("/health", False, detail))

    for name in METRIC_NAMES:
        path = f"/metrics/{name}"
        try:
            response = await client.read_metric(name)
        except MetricUnavailableError as exc:
            results.append(EndpointResult(path, False, str(exc)))
            continue
        sample = select_sample(name, response)
        unit = f" {response.base_unit}" if response.base_unit else ""
        results.append(
            EndpointResult(
                path,
                True,
                f"Value: {sample.value:g}{unit} ({sample.statistic or 'VALUE'})",
            )
        )
    return results


async def _run(client: ActuatorClient) -> list[EndpointResult]:
    async with client:
        return await verify_endpoints(client)


def endpoints(
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
    Check that the health and metric endpoints respond.

    Examples:
        healthwatch endpoints
        healthwatch endpoints --base-url http://localhost:8080/actuator
    """
    setup_logging(verbose=verbose)
    settings = resolve_settings(base_url)
    client = ActuatorClient(settings)

    nl()
    console.print(f"[bold]Testing actuator endpoints[/bold] [dim]{client.base_url}[/dim]")
    nl()

    results = asyncio.run(_run(client))
    for result in results:
        if result.ok:
            success(f"{result.path}  [dim]{result.detail}[/dim]")
        else:
            error(f"{result.path}  [dim]{result.detail}[/dim]")

    passed = sum(1 for r in results if r.ok)
    total = len(results)
    nl()
    console.print(f"[bold]Results:[/bold] {passed}/{total} endpoints working")
    nl()

    if passed == 0:
        error("No endpoints are working. Possible issues:")
        info("The application is not running or not reachable at the base URL")
        info("The actuator dependency is not added")
        info("Actuator endpoints are not exposed (health,metrics)")
        nl()
        raise typer.Exit(1)
    if passed < total:
        warning("Some endpoints are not working. Check:")
        info("Actuator and Micrometer metrics configuration")
        info("Application server type (some metrics are server-specific)")
    else:
        success("All endpoints are working.")
    nl()
