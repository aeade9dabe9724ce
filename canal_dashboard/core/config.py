from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator

from canal_dashboard.domain.fields import METRIC_FIELDS
from shared.config import BaseServiceConfig
from shared.constants import Locations


class Settings(BaseServiceConfig):
    # Refresh loop
    refresh_interval_ms: int = Field(30_000, gt=0)
    history_window_minutes: int = Field(60, gt=0)

    # What to show, in display (and overall tie-break) order
    locations: list[str] = Locations.all()
    metrics: list[str] = ["avg_ice_thickness", "avg_surface_temp"]
    display_timezone: str = "America/Toronto"

    # Upstream store
    clickhouse_table: str = "sensor_aggregations"
    clickhouse_query_timeout_seconds: int = Field(10, gt=0)
    store_connect_retries: int = Field(6, ge=1)

    # HTTP
    http_host: str = "0.0.0.0"
    http_port: int = 8000

    otel_service_name: str = "dashboard"

    @field_validator("locations")
    @classmethod
    def _check_locations(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one location must be monitored")
        if len(set(value)) != len(value):
            raise ValueError("locations must be unique")
        return value

    @field_validator("metrics")
    @classmethod
    def _check_metrics(cls, value: list[str]) -> list[str]:
        unknown = [m for m in value if m not in METRIC_FIELDS]
        if unknown:
            raise ValueError(f"unknown metrics: {unknown}")
        if len(set(value)) != len(value):
            raise ValueError("metrics must be unique")
        return value

    @field_validator("display_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {value}") from exc
        return value

    @property
    def refresh_interval_seconds(self) -> float:
        return self.refresh_interval_ms / 1000

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.display_timezone)


settings = Settings()
