"""Numeric sample fields that can be aligned and charted."""

from typing import NamedTuple


class MetricField(NamedTuple):
    title: str
    unit: str

    @property
    def axis_title(self) -> str:
        return f"{self.title} ({self.unit})"


METRIC_FIELDS: dict[str, MetricField] = {
    "avg_ice_thickness": MetricField("Ice Thickness", "cm"),
    "avg_surface_temp": MetricField("Surface Temperature", "°C"),
    "avg_external_temp": MetricField("External Temperature", "°C"),
    "max_snow_accumulation": MetricField("Snow Accumulation", "cm"),
}
