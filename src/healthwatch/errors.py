"""Exceptions raised by healthwatch."""


class HealthwatchError(Exception):
    """Base class for healthwatch errors."""


class BackendUnavailableError(HealthwatchError):
    """The availability probe failed; no metrics were fetched."""

    def __init__(self, reason: str, *, status: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status = status


class InvalidIntervalError(HealthwatchError, ValueError):
    """A refresh interval outside the allowed set was requested."""


class MetricUnavailableError(HealthwatchError):
    """A single metric could not be read; pollers treat it as value 0."""
