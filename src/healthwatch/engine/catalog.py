"""Metric names polled each cycle and how a value is picked from each response."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from healthwatch.contracts import Measurement

PROCESS_UPTIME = "process.uptime"
PROCESS_START_TIME = "process.start.time"
JVM_MEMORY_USED = "jvm.memory.used"
JVM_MEMORY_MAX = "jvm.memory.max"
PROCESS_CPU_USAGE = "process.cpu.usage"
DISK_FREE = "disk.free"
DISK_TOTAL = "disk.total"
HTTP_REQUESTS_ACTIVE = "http.server.requests.active"
JVM_THREADS_LIVE = "jvm.threads.live"
SESSIONS_ACTIVE = "tomcat.sessions.active.current"

# Snapshot field -> metric name, in snapshot field order.
SNAPSHOT_FIELDS: dict[str, str] = {
    "uptime_seconds": PROCESS_UPTIME,
    "start_epoch_seconds": PROCESS_START_TIME,
    "memory_used_bytes": JVM_MEMORY_USED,
    "memory_max_bytes": JVM_MEMORY_MAX,
    "cpu_percent": PROCESS_CPU_USAGE,
    "disk_free_bytes": DISK_FREE,
    "disk_total_bytes": DISK_TOTAL,
    "active_request_count": HTTP_REQUESTS_ACTIVE,
    "live_thread_count": JVM_THREADS_LIVE,
    "active_session_count": SESSIONS_ACTIVE,
}

METRIC_NAMES: tuple[str, ...] = tuple(SNAPSHOT_FIELDS.values())


class SelectionPolicy(Protocol):
    def select(self, measurements: list[Measurement]) -> Measurement | None: ...


@dataclass(frozen=True)
class FirstMeasurement:
    """Take the first reported measurement."""

    def select(self, measurements: list[Measurement]) -> Measurement | None:
        return measurements[0] if measurements else None


@dataclass(frozen=True)
class PreferStatistic:
    """Take the measurement tagged ``statistic``, else the first one."""

    statistic: str

    def select(self, measurements: list[Measurement]) -> Measurement | None:
        for measurement in measurements:
            if measurement.statistic == self.statistic:
                return measurement
        return FirstMeasurement().select(measurements)


DEFAULT_POLICY: SelectionPolicy = FirstMeasurement()

# The active request timer reports both DURATION and ACTIVE_TASKS under one name.
SELECTION_POLICIES: dict[str, SelectionPolicy] = {
    HTTP_REQUESTS_ACTIVE: PreferStatistic("ACTIVE_TASKS"),
}


def selection_policy_for(metric_name: str) -> SelectionPolicy:
    """Resolve the selection policy for a metric name."""
    return SELECTION_POLICIES.get(metric_name, DEFAULT_POLICY)
