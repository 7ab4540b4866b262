"""Threshold classification for snapshot metrics."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from healthwatch.models import HealthSnapshot


class Severity(StrEnum):
    HEALTHY = "Healthy"
    WARNING = "Warning"
    CRITICAL = "Critical"

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS = {Severity.HEALTHY: 0, Severity.WARNING: 1, Severity.CRITICAL: 2}


@dataclass(frozen=True)
class Thresholds:
    warning: float
    critical: float


def classify(value: float, thresholds: Thresholds) -> Severity:
    """Classify ``value``: below warning is healthy, at or above critical is critical."""
    if value >= thresholds.critical:
        return Severity.CRITICAL
    if value >= thresholds.warning:
        return Severity.WARNING
    return Severity.HEALTHY


MEMORY_THRESHOLDS = Thresholds(warning=75, critical=90)
CPU_THRESHOLDS = Thresholds(warning=70, critical=90)
DISK_THRESHOLDS = Thresholds(warning=80, critical=95)
ACTIVE_REQUEST_THRESHOLDS = Thresholds(warning=50, critical=100)
THREAD_THRESHOLDS = Thresholds(warning=200, critical=300)
SESSION_THRESHOLDS = Thresholds(warning=100, critical=200)
SYSTEM_THRESHOLDS = Thresholds(warning=75, critical=90)


@dataclass(frozen=True)
class SnapshotSeverities:
    """Per-card severities for one snapshot."""

    memory: Severity
    cpu: Severity
    disk: Severity
    active_requests: Severity
    threads: Severity
    sessions: Severity
    system: Severity
    uptime: Severity = Severity.HEALTHY

    def worst(self) -> Severity:
        return max(
            (
                self.memory,
                self.cpu,
                self.disk,
                self.active_requests,
                self.threads,
                self.sessions,
                self.system,
            ),
            key=lambda severity: severity.rank,
        )


def composite_severity(snapshot: HealthSnapshot) -> Severity:
    """System status: the peak of memory, CPU and disk percentages."""
    return classify(snapshot.peak_percent, SYSTEM_THRESHOLDS)


def classify_snapshot(snapshot: HealthSnapshot) -> SnapshotSeverities:
    return SnapshotSeverities(
        memory=classify(snapshot.memory_percent, MEMORY_THRESHOLDS),
        cpu=classify(snapshot.cpu_percent, CPU_THRESHOLDS),
        disk=classify(snapshot.disk_used_percent, DISK_THRESHOLDS),
        active_requests=classify(
            snapshot.active_request_count, ACTIVE_REQUEST_THRESHOLDS
        ),
        threads=classify(snapshot.live_thread_count, THREAD_THRESHOLDS),
        sessions=classify(snapshot.active_session_count, SESSION_THRESHOLDS),
        system=composite_severity(snapshot),
    )


def progress_band(percent: float) -> Severity:
    """Colour band for a percentage bar (>=90 critical, >=75 warning)."""
    return classify(percent, SYSTEM_THRESHOLDS)
