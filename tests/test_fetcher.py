from __future__ import annotations

import math
from typing import Any, cast

import aiohttp
import pytest
from _stubs import _ResponseStub, _SessionStub, metric_payload
from healthwatch.config import Settings
from healthwatch.engine.catalog import (
    HTTP_REQUESTS_ACTIVE,
    JVM_MEMORY_USED,
    METRIC_NAMES,
    SESSIONS_ACTIVE,
)
from healthwatch.engine.fetcher import ActuatorClient, is_recognized_content_type
from healthwatch.errors import BackendUnavailableError

BASE = "http://test.local/actuator"


def _client(
    settings: Settings, session: _SessionStub
) -> ActuatorClient:
    client = ActuatorClient(settings)
    client._session = cast(Any, session)
    return client


def _metric_url(name: str) -> str:
    return f"{BASE}/metrics/{name}"


@pytest.mark.asyncio
@pytest.mark.parametrize("name", METRIC_NAMES)
async def test_fetch_metric_non_success_status_yields_zero(
    settings: Settings, name: str
) -> None:
    session = _SessionStub(
        {_metric_url(name): _ResponseStub(status=503, reason="Service Unavailable")}
    )
    client = _client(settings, session)

    assert await client.fetch_metric(name) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("name", METRIC_NAMES)
async def test_fetch_metric_empty_measurements_yields_zero(
    settings: Settings, name: str
) -> None:
    session = _SessionStub(
        {_metric_url(name): _ResponseStub(json_payload=metric_payload(name))}
    )
    client = _client(settings, session)

    assert await client.fetch_metric(name) == 0


@pytest.mark.asyncio
async def test_fetch_metric_prefers_active_tasks_for_active_requests(
    settings: Settings,
) -> None:
    payload = metric_payload(
        HTTP_REQUESTS_ACTIVE, ("DURATION", 12.5), ("ACTIVE_TASKS", 3.0)
    )
    session = _SessionStub(
        {_metric_url(HTTP_REQUESTS_ACTIVE): _ResponseStub(json_payload=payload)}
    )
    client = _client(settings, session)

    sample = await client.fetch_sample(HTTP_REQUESTS_ACTIVE)

    assert sample.value == 3.0
    assert sample.statistic == "ACTIVE_TASKS"


@pytest.mark.asyncio
async def test_fetch_metric_active_requests_falls_back_to_first(
    settings: Settings,
) -> None:
    payload = metric_payload(HTTP_REQUESTS_ACTIVE, ("DURATION", 12.5))
    session = _SessionStub(
        {_metric_url(HTTP_REQUESTS_ACTIVE): _ResponseStub(json_payload=payload)}
    )
    client = _client(settings, session)

    assert await client.fetch_metric(HTTP_REQUESTS_ACTIVE) == 12.5


@pytest.mark.asyncio
async def test_fetch_metric_takes_first_measurement_for_other_metrics(
    settings: Settings,
) -> None:
    payload = metric_payload(
        JVM_MEMORY_USED, ("VALUE", 1024.0), ("ACTIVE_TASKS", 7.0)
    )
    session = _SessionStub(
        {_metric_url(JVM_MEMORY_USED): _ResponseStub(json_payload=payload)}
    )
    client = _client(settings, session)

    assert await client.fetch_metric(JVM_MEMORY_USED) == 1024.0
    assert session.calls[0]["url"] == _metric_url(JVM_MEMORY_USED)
    assert session.calls[0]["timeout"].total == settings.metric_timeout_seconds


@pytest.mark.asyncio
async def test_fetch_metric_missing_value_yields_zero(settings: Settings) -> None:
    payload = metric_payload(JVM_MEMORY_USED, ("VALUE", None))
    session = _SessionStub(
        {_metric_url(JVM_MEMORY_USED): _ResponseStub(json_payload=payload)}
    )
    client = _client(settings, session)

    assert await client.fetch_metric(JVM_MEMORY_USED) == 0


@pytest.mark.asyncio
async def test_fetch_metric_rejects_unrecognized_content_type(
    settings: Settings,
) -> None:
    response = _ResponseStub(
        json_payload=metric_payload(JVM_MEMORY_USED, ("VALUE", 5.0)),
        content_type="text/html; charset=utf-8",
        text_payload="<html>login</html>",
    )
    session = _SessionStub({_metric_url(JVM_MEMORY_USED): response})
    client = _client(settings, session)

    assert await client.fetch_metric(JVM_MEMORY_USED) == 0


@pytest.mark.asyncio
async def test_fetch_metric_accepts_actuator_vendor_content_type(
    settings: Settings,
) -> None:
    response = _ResponseStub(
        json_payload=metric_payload(JVM_MEMORY_USED, ("VALUE", 5.0)),
        content_type="application/vnd.spring-boot.actuator.v3+json",
    )
    session = _SessionStub({_metric_url(JVM_MEMORY_USED): response})
    client = _client(settings, session)

    assert await client.fetch_metric(JVM_MEMORY_USED) == 5.0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failure",
    [
        aiohttp.ClientConnectionError("connection refused"),
        TimeoutError(),
        OSError("network unreachable"),
    ],
)
async def test_fetch_metric_transport_failure_yields_zero(
    settings: Settings, failure: BaseException
) -> None:
    session = _SessionStub({}, default=failure)
    client = _client(settings, session)

    assert await client.fetch_metric(JVM_MEMORY_USED) == 0


@pytest.mark.asyncio
async def test_fetch_metric_malformed_payload_yields_zero(
    settings: Settings,
) -> None:
    response = _ResponseStub(json_payload={"measurements": "not-a-list"})
    session = _SessionStub({_metric_url(JVM_MEMORY_USED): response})
    client = _client(settings, session)

    assert await client.fetch_metric(JVM_MEMORY_USED) == 0


@pytest.mark.asyncio
async def test_check_health_returns_status(settings: Settings) -> None:
    session = _SessionStub(
        {f"{BASE}/health": _ResponseStub(json_payload={"status": "UP"})}
    )
    client = _client(settings, session)

    health = await client.check_health()

    assert health.status == "UP"
    assert session.calls[0]["timeout"].total == settings.probe_timeout_seconds


@pytest.mark.asyncio
async def test_check_health_non_success_raises_unavailable(
    settings: Settings,
) -> None:
    session = _SessionStub({f"{BASE}/health": _ResponseStub(status=503)})
    client = _client(settings, session)

    with pytest.raises(BackendUnavailableError, match="HTTP 503") as exc_info:
        await client.check_health()
    assert exc_info.value.status == 503


@pytest.mark.asyncio
async def test_check_health_transport_failure_raises_unavailable(
    settings: Settings,
) -> None:
    session = _SessionStub(
        {}, default=aiohttp.ClientConnectionError("connection refused")
    )
    client = _client(settings, session)

    with pytest.raises(BackendUnavailableError, match="unreachable") as exc_info:
        await client.check_health()
    assert exc_info.value.status is None
    assert "connection refused" in exc_info.value.reason


@pytest.mark.asyncio
async def test_check_health_tolerates_non_json_body(settings: Settings) -> None:
    session = _SessionStub(
        {f"{BASE}/health": _ResponseStub(json_payload=None, content_type="text/plain")}
    )
    client = _client(settings, session)

    health = await client.check_health()

    assert health.status == "UNKNOWN"


@pytest.mark.asyncio
async def test_close_releases_session(settings: Settings) -> None:
    session = _SessionStub({})
    client = _client(settings, session)

    await client.close()

    assert session.closed is True
    await client.close()


def test_client_builds_urls_and_basic_auth() -> None:
    client = ActuatorClient(
        Settings(base_url=f"{BASE}/", username="admin", password="secret")
    )

    assert client.base_url == BASE
    assert client.health_url() == f"{BASE}/health"
    assert client.metric_url("jvm.threads.live") == f"{BASE}/metrics/jvm.threads.live"
    assert client._auth == aiohttp.BasicAuth("admin", "secret")


@pytest.mark.parametrize(
    ("content_type", "expected"),
    [
        ("application/json", True),
        ("application/json;charset=UTF-8", True),
        ("application/vnd.spring-boot.actuator.v3+json", True),
        ("text/html", False),
        (None, False),
        ("", False),
    ],
)
def test_is_recognized_content_type(content_type: str | None, expected: bool) -> None:
    assert is_recognized_content_type(content_type) is expected


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["NaN", float("nan"), float("inf"), "-Infinity"])
async def test_fetch_metric_non_finite_value_yields_zero(
    settings: Settings, value: float | str
) -> None:
    payload = metric_payload(SESSIONS_ACTIVE, ("VALUE", value))
    session = _SessionStub(
        {_metric_url(SESSIONS_ACTIVE): _ResponseStub(json_payload=payload)}
    )
    client = _client(settings, session)

    sample = await client.fetch_sample(SESSIONS_ACTIVE)

    assert sample.value == 0
    assert math.isfinite(sample.value)


@pytest.mark.asyncio
async def test_closed_client_does_not_reopen_session(settings: Settings) -> None:
    session = _SessionStub(
        {},
        default=_ResponseStub(
            json_payload=metric_payload(JVM_MEMORY_USED, ("VALUE", 1.0))
        ),
    )
    client = _client(settings, session)
    await client.close()

    assert await client.fetch_metric(JVM_MEMORY_USED) == 0
    with pytest.raises(BackendUnavailableError, match="closed"):
        await client.check_health()

    assert client._session is None
    assert session.calls == []
