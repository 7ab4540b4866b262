"""Actuator client: availability probe and per-metric reads."""

import asyncio
import math
import logging
from typing import Any, Self

import aiohttp
from pydantic import TypeAdapter, ValidationError

from healthwatch.config import Settings, get_settings
from healthwatch.contracts import HealthStatusResponse, MetricResponse
from healthwatch.engine.catalog import selection_policy_for
from healthwatch.errors import BackendUnavailableError, MetricUnavailableError
from healthwatch.models import MetricSample

logger = logging.getLogger(__name__)

RECOGNIZED_CONTENT_TYPES: tuple[str, ...] = (
    "application/json",
    "application/vnd.spring-boot.actuator",
)

SETUP_HINT = (
    "Make sure the backend is running with actuator endpoints enabled "
    "(management.endpoints.web.exposure.include=health,metrics)."
)

_metric_response_adapter = TypeAdapter(MetricResponse)
_health_response_adapter = TypeAdapter(HealthStatusResponse)


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def is_recognized_content_type(content_type: str | None) -> bool:
    if not content_type:
        return False
    lowered = content_type.lower()
    return any(kind in lowered for kind in RECOGNIZED_CONTENT_TYPES)


def select_sample(name: str, response: MetricResponse) -> MetricSample:
    """Pick the value for ``name`` using its selection policy."""
    if not response.measurements:
        logger.warning("No measurements found for metric %s", name)
        return MetricSample(name=name)

    measurement = selection_policy_for(name).select(response.measurements)
    # Micrometer reports gauges it cannot read as NaN.
    if (
        measurement is None
        or measurement.value is None
        or not math.isfinite(measurement.value)
    ):
        return MetricSample(name=name)
    return MetricSample(
        name=name, value=measurement.value, statistic=measurement.statistic
    )


class ActuatorClient:
    """Reads health and metric payloads from a monitoring endpoint."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self._base_url = settings.base_url.rstrip("/")
        self._metric_timeout = aiohttp.ClientTimeout(
            total=settings.metric_timeout_seconds
        )
        self._probe_timeout = aiohttp.ClientTimeout(
            total=settings.probe_timeout_seconds
        )
        self._auth: aiohttp.BasicAuth | None = None
        if settings.username:
            self._auth = aiohttp.BasicAuth(settings.username, settings.password or "")
        self._headers = {"Accept": "application/json"}
        self._session: aiohttp.ClientSession | None = None
        self._closed = False

    @property
    def base_url(self) -> str:
        return self._base_url

    def health_url(self) -> str:
        return f"{self._base_url}/health"

    def metric_url(self, name: str) -> str:
        return f"{self._base_url}/metrics/{name}"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: Any,
    ) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or bool(getattr(self._session, "closed", False)):
            self._session = aiohttp.ClientSession(
                headers=self._headers, auth=self._auth
            )
        return self._session

    async def close(self) -> None:
        self._closed = True
        session = self._session
        if session is None:
            return
        if not bool(getattr(session, "closed", False)):
            await session.close()
        self._session = None

    async def check_health(self) -> HealthStatusResponse:
        """
        Probe the health endpoint before a metric batch.

        Raises:
            BackendUnavailableError: on transport failure, timeout or a
                non-success status.
        """
        url = self.health_url()
        if self._closed:
            raise BackendUnavailableError(f"Client is closed; not probing {url}")
        session = await self._ensure_session()
        try:
            async with session.get(url, timeout=self._probe_timeout) as resp:
                if not _is_success(resp.status):
                    raise BackendUnavailableError(
                        f"Monitoring endpoint not available (HTTP {resp.status}) "
                        f"at {url}. {SETUP_HINT}",
                        status=resp.status,
                    )
                try:
                    payload = await resp.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError):
                    payload = None
        except BackendUnavailableError:
            logger.warning("Health probe failed for %s", url)
            raise
        except (aiohttp.ClientError, TimeoutError, OSError) as exc:
            logger.warning("Health probe failed for %s: %s", url, exc)
            cause = str(exc) or type(exc).__name__
            raise BackendUnavailableError(
                f"Monitoring endpoint unreachable at {url} ({cause}). {SETUP_HINT}"
            ) from exc

        if not isinstance(payload, dict):
            return HealthStatusResponse()
        try:
            return _health_response_adapter.validate_python(payload)
        except ValidationError:
            return HealthStatusResponse()

    async def read_metric(self, name: str) -> MetricResponse:
        """Read and parse one metric payload.

        Raises:
            MetricUnavailableError: on transport failure, timeout, a
                non-success status, an unrecognized content type, or
                after the client has been closed.
        """
        url = self.metric_url(name)
        if self._closed:
            raise MetricUnavailableError("Client is closed")
        session = await self._ensure_session()
        try:
            async with session.get(url, timeout=self._metric_timeout) as resp:
                if not _is_success(resp.status):
                    raise MetricUnavailableError(f"HTTP {resp.status}: {resp.reason}")

                content_type = resp.headers.get("Content-Type")
                if not is_recognized_content_type(content_type):
                    text = await resp.text()
                    logger.debug("Non-JSON response for metric %s: %s", name, text)
                    raise MetricUnavailableError(
                        f"Expected JSON response, got: {content_type}"
                    )
                payload = await resp.json(content_type=None)
        except (aiohttp.ClientError, TimeoutError, OSError, ValueError) as exc:
            raise MetricUnavailableError(str(exc) or type(exc).__name__) from exc

        try:
            return _metric_response_adapter.validate_python(payload)
        except ValidationError as exc:
            raise MetricUnavailableError(f"Malformed metric payload: {exc}") from exc

    async def fetch_sample(self, name: str) -> MetricSample:
        """Fetch one metric as a sample. Never raises; failures yield value 0."""
        try:
            response = await self.read_metric(name)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Failed to fetch metric %s: %s", name, exc)
            return MetricSample(name=name)

        return select_sample(name, response)

    async def fetch_metric(self, name: str) -> float:
        """Fetch one numeric metric value, or 0 when it is unavailable."""
        sample = await self.fetch_sample(name)
        return sample.value
