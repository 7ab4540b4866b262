"""Healthwatch engine - fetching, polling and classification."""

from healthwatch.engine.catalog import (
    METRIC_NAMES,
    SELECTION_POLICIES,
    SNAPSHOT_FIELDS,
    FirstMeasurement,
    PreferStatistic,
    selection_policy_for,
)
from healthwatch.engine.fetcher import ActuatorClient
from healthwatch.engine.poller import HealthPoller, MetricSource
from healthwatch.engine.severity import (
    Severity,
    SnapshotSeverities,
    Thresholds,
    classify,
    classify_snapshot,
    composite_severity,
)

__all__ = [
    # Catalog
    "METRIC_NAMES",
    "SELECTION_POLICIES",
    "SNAPSHOT_FIELDS",
    "FirstMeasurement",
    "PreferStatistic",
    "selection_policy_for",
    # Fetcher
    "ActuatorClient",
    # Poller
    "HealthPoller",
    "MetricSource",
    # Severity
    "Severity",
    "SnapshotSeverities",
    "Thresholds",
    "classify",
    "classify_snapshot",
    "composite_severity",
]
