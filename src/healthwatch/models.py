"""Snapshot and poller state models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from healthwatch.config import DEFAULT_INTERVAL_MS


@dataclass(frozen=True)
class MetricSample:
    """A single named numeric observation. Unavailable values are 0."""

    name: str
    value: float = 0.0
    statistic: str | None = None


def _ratio_percent(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator * 100


class HealthSnapshot(BaseModel):
    """
    Immutable aggregate of one polling cycle.

    CPU is stored already scaled to a percentage so it formats the same way
    as the memory and disk ratios derived below.
    """

    model_config = ConfigDict(frozen=True)

    uptime_seconds: float
    start_epoch_seconds: float
    memory_used_bytes: float
    memory_max_bytes: float
    cpu_percent: float
    disk_free_bytes: float
    disk_total_bytes: float
    active_request_count: float
    live_thread_count: float
    active_session_count: float

    @classmethod
    def from_metric_values(
        cls, values: Mapping[str, float], fields: Mapping[str, str]
    ) -> HealthSnapshot:
        """Build a snapshot from ``metric name -> value`` using a field mapping.

        ``fields`` maps snapshot field names to metric names. The CPU metric
        arrives as a 0..1 fraction and is scaled here.
        """
        data = {name: values.get(metric, 0.0) for name, metric in fields.items()}
        data["cpu_percent"] = data.get("cpu_percent", 0.0) * 100
        return cls(**data)

    @property
    def cpu_fraction(self) -> float:
        return self.cpu_percent / 100

    @property
    def memory_percent(self) -> float:
        return _ratio_percent(self.memory_used_bytes, self.memory_max_bytes)

    @property
    def disk_used_bytes(self) -> float:
        return self.disk_total_bytes - self.disk_free_bytes

    @property
    def disk_used_percent(self) -> float:
        return _ratio_percent(self.disk_used_bytes, self.disk_total_bytes)

    @property
    def peak_percent(self) -> float:
        """Highest of the memory, CPU and disk percentages."""
        return max(self.memory_percent, self.cpu_percent, self.disk_used_percent)


@dataclass(frozen=True)
class PollerState:
    """Read-only view of the poller handed to renderers."""

    snapshot: HealthSnapshot | None = None
    is_loading: bool = False
    last_error: str | None = None
    last_updated_at: datetime | None = None
    auto_refresh_enabled: bool = False
    interval_ms: int = DEFAULT_INTERVAL_MS

    @property
    def has_data(self) -> bool:
        return self.snapshot is not None
