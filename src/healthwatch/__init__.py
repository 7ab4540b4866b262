"""Healthwatch - poll an actuator endpoint and render a live health snapshot."""

from healthwatch._version import __version__
from healthwatch.config import ALLOWED_INTERVALS_MS, Settings, get_settings
from healthwatch.engine import (
    ActuatorClient,
    HealthPoller,
    Severity,
    Thresholds,
    classify,
    composite_severity,
)
from healthwatch.errors import (
    BackendUnavailableError,
    HealthwatchError,
    InvalidIntervalError,
)
from healthwatch.models import HealthSnapshot, MetricSample, PollerState

__all__ = [
    "ALLOWED_INTERVALS_MS",
    "ActuatorClient",
    "BackendUnavailableError",
    "HealthPoller",
    "HealthSnapshot",
    "HealthwatchError",
    "InvalidIntervalError",
    "MetricSample",
    "PollerState",
    "Settings",
    "Severity",
    "Thresholds",
    "__version__",
    "classify",
    "composite_severity",
    "get_settings",
]
