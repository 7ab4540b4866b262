"""Actuator wire payloads."""

from pydantic import BaseModel, ConfigDict, Field


class Measurement(BaseModel):
    """One statistic reported for a metric."""

    model_config = ConfigDict(extra="ignore")

    statistic: str = "VALUE"
    value: float | None = None


class AvailableTag(BaseModel):
    """A tag that can be used to drill into a metric."""

    model_config = ConfigDict(extra="ignore")

    tag: str
    values: list[str] = Field(default_factory=list)


class MetricResponse(BaseModel):
    """Response body of ``GET {base}/metrics/{name}``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = ""
    description: str | None = None
    base_unit: str | None = Field(default=None, alias="baseUnit")
    measurements: list[Measurement] = Field(default_factory=list)
    available_tags: list[AvailableTag] = Field(
        default_factory=list, alias="availableTags"
    )


class HealthStatusResponse(BaseModel):
    """Response body of ``GET {base}/health``."""

    model_config = ConfigDict(extra="allow")

    status: str = "UNKNOWN"


__all__ = [
    "AvailableTag",
    "HealthStatusResponse",
    "Measurement",
    "MetricResponse",
]
