from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from .severity import DisplayCategory, Severity


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (matches the upstream documents)."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class AggregationSample(CamelModel):
    """One aggregation window for one location."""

    location: str
    window_end: datetime
    avg_ice_thickness: Optional[float] = None
    avg_surface_temp: Optional[float] = None
    avg_external_temp: Optional[float] = None
    max_snow_accumulation: Optional[float] = None
    safety_status: Optional[str] = None

    @field_validator("window_end")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def metric(self, name: str) -> Optional[float]:
        return getattr(self, name)


LatestSnapshot = Dict[str, AggregationSample]
HistoryWindow = List[AggregationSample]


class OverallStatus(CamelModel):
    label: str
    severity: Severity
    category: DisplayCategory
    location: Optional[str] = None


class AlignedSeriesSet(CamelModel):
    """Common time axis plus one value list per (metric, location).

    Every list in ``series`` has ``len(axis)`` entries; ``None`` marks a gap.
    """

    axis: List[datetime]
    labels: List[str]
    series: Dict[str, Dict[str, List[Optional[float]]]]

    def values(self, metric: str, location: str) -> List[Optional[float]]:
        return self.series[metric][location]

    @property
    def is_empty(self) -> bool:
        return not self.axis


class LocationCard(CamelModel):
    location: str
    reported: bool
    status: str
    severity: Severity
    category: DisplayCategory
    display_fields: Dict[str, str]
    last_window_end: Optional[datetime] = None
    last_window_label: str = "-"


class ChartSpec(CamelModel):
    metric: str
    title: str
    unit: str
    x_axis_title: str
    y_axis_title: str


class RenderPayload(CamelModel):
    overall: OverallStatus
    locations: Dict[str, LocationCard]
    series: AlignedSeriesSet
    charts: List[ChartSpec]
    generated_at: datetime
