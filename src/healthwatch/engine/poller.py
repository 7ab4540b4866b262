"""Health poller: runs metric batches and owns the dashboard state.

One cycle probes the health endpoint, then reads every metric in
``METRIC_NAMES`` concurrently and publishes a single ``HealthSnapshot``.
Cycles run on demand (``refresh_now``) or from a recurring timer while
auto-refresh is enabled.

Example:
    poller = HealthPoller(ActuatorClient())
    await poller.refresh_now()
    poller.set_auto_refresh(True)
    ...
    await poller.close()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any, Protocol

from healthwatch.config import Settings, get_settings, validate_interval_ms
from healthwatch.engine.catalog import METRIC_NAMES, SNAPSHOT_FIELDS
from healthwatch.engine.fetcher import ActuatorClient
from healthwatch.errors import BackendUnavailableError, InvalidIntervalError
from healthwatch.models import HealthSnapshot, PollerState

logger = logging.getLogger(__name__)

StateListener = Callable[[PollerState], None]
SleepFn = Callable[[float], Awaitable[Any]]


class MetricSource(Protocol):
    async def check_health(self) -> Any: ...

    async def fetch_metric(self, name: str) -> float: ...

    async def close(self) -> None: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


class HealthPoller:
    """
    Orchestrates polling cycles and exposes ``PollerState`` to renderers.

    State is only mutated by the poller itself at cycle start, cycle
    success, cycle failure, and when auto-refresh or the interval change.
    Each cycle takes a sequence number; only the most recently started cycle
    may apply its result, and nothing is applied after ``close()``.
    """

    def __init__(
        self,
        client: MetricSource | None = None,
        *,
        settings: Settings | None = None,
        sleep: SleepFn = asyncio.sleep,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        settings = settings or get_settings()
        self._owns_client = client is None
        self._client: MetricSource = client or ActuatorClient(settings)
        self._sleep = sleep
        self._clock = clock
        self._initial_auto_refresh = settings.auto_refresh
        self._state = PollerState(interval_ms=settings.refresh_interval_ms)
        self._sequence = 0
        self._timer: asyncio.Task[None] | None = None
        self._timer_interval_ms: int | None = None
        self._cycles: set[asyncio.Task[None]] = set()
        self._listeners: list[StateListener] = []
        self._closed = False

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def timer_interval_ms(self) -> int | None:
        """Period of the active timer, or None when no timer is running."""
        if self._timer is None:
            return None
        return self._timer_interval_ms

    @property
    def in_flight(self) -> int:
        return len(self._cycles)

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback invoked with the new state after every change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def start(self) -> PollerState:
        """Run the first cycle and enable auto-refresh if configured to."""
        await self.refresh_now()
        if self._initial_auto_refresh and not self._closed:
            self._enable_timer(run_now=False)
        return self._state

    async def refresh_now(self) -> PollerState:
        """Run one polling cycle and return the resulting state."""
        if self._closed:
            return self._state
        await self._run_cycle()
        return self._state

    def set_auto_refresh(self, enabled: bool) -> None:
        """Switch between manual and auto mode.

        Enabling starts the timer and runs a cycle immediately. Disabling
        cancels the timer but lets an in-flight cycle finish.
        """
        if self._closed:
            if enabled:
                raise RuntimeError("Poller is closed")
            return
        if enabled == self._state.auto_refresh_enabled:
            return
        if enabled:
            self._enable_timer(run_now=True)
        else:
            self._cancel_timer()
            self._update(auto_refresh_enabled=False)
            logger.debug("Auto-refresh disabled")

    def set_interval_ms(self, interval_ms: int) -> None:
        """Change the refresh period, rescheduling the timer if it is running."""
        try:
            validate_interval_ms(interval_ms)
        except ValueError as exc:
            raise InvalidIntervalError(str(exc)) from exc
        if self._closed or interval_ms == self._state.interval_ms:
            return
        self._update(interval_ms=interval_ms)
        if self._timer is not None:
            self._cancel_timer()
            self._start_timer(interval_ms)

    async def wait_for_cycles(self) -> None:
        """Wait until every cycle launched by the timer has settled."""
        while self._cycles:
            await asyncio.gather(*list(self._cycles), return_exceptions=True)

    async def close(self) -> None:
        """Tear down: cancel the timer and drop results of in-flight cycles."""
        if self._closed:
            return
        self._closed = True
        timer = self._timer
        self._cancel_timer()
        if timer is not None:
            try:
                await timer
            except asyncio.CancelledError:
                pass
        self._listeners.clear()
        if self._owns_client:
            await self._client.close()
        logger.debug("Health poller closed")

    def _enable_timer(self, *, run_now: bool) -> None:
        self._update(auto_refresh_enabled=True)
        self._start_timer(self._state.interval_ms)
        if run_now:
            self._spawn_cycle()

    def _start_timer(self, interval_ms: int) -> None:
        self._timer_interval_ms = interval_ms
        self._timer = asyncio.create_task(self._tick_loop(interval_ms / 1000))
        logger.debug("Auto-refresh timer started (interval=%dms)", interval_ms)

    def _cancel_timer(self) -> None:
        timer = self._timer
        if timer is None:
            return
        self._timer = None
        self._timer_interval_ms = None
        timer.cancel()
        logger.debug("Auto-refresh timer cancelled")

    async def _tick_loop(self, interval_seconds: float) -> None:
        while True:
            await self._sleep(interval_seconds)
            if self._closed:
                return
            self._spawn_cycle()

    def _spawn_cycle(self) -> None:
        task = asyncio.create_task(self._run_cycle())
        self._cycles.add(task)
        task.add_done_callback(self._on_cycle_done)

    def _on_cycle_done(self, task: asyncio.Task[None]) -> None:
        self._cycles.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Polling cycle failed: %s", exc, exc_info=exc)

    def _is_current(self, sequence: int) -> bool:
        return not self._closed and sequence == self._sequence

    async def _run_cycle(self) -> None:
        self._sequence += 1
        sequence = self._sequence
        self._update(is_loading=True, last_error=None)

        try:
            await self._client.check_health()
        except BackendUnavailableError as exc:
            if self._is_current(sequence):
                self._update(is_loading=False, last_error=exc.reason)
            return
        except Exception:
            if self._is_current(sequence):
                self._update(is_loading=False)
            raise

        values = await asyncio.gather(
            *(self._client.fetch_metric(name) for name in METRIC_NAMES)
        )
        snapshot = HealthSnapshot.from_metric_values(
            dict(zip(METRIC_NAMES, values)), SNAPSHOT_FIELDS
        )

        if not self._is_current(sequence):
            logger.debug("Discarding result of stale cycle %d", sequence)
            return
        self._update(
            snapshot=snapshot,
            is_loading=False,
            last_updated_at=self._clock(),
        )
        logger.debug("Cycle %d complete", sequence)

    def _update(self, **changes: Any) -> None:
        if self._closed:
            return
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as exc:
                logger.warning("State listener failed: %s", exc)
