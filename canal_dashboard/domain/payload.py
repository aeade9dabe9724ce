from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Optional, Sequence

from .alignment import align, format_time
from .fields import METRIC_FIELDS
from .models import (
    AggregationSample,
    ChartSpec,
    HistoryWindow,
    LatestSnapshot,
    LocationCard,
    RenderPayload,
)
from .overall import resolve_overall
from .severity import Severity, classify, display_category, status_text

CARD_FIELDS = (
    "avg_ice_thickness",
    "avg_surface_temp",
    "avg_external_temp",
    "max_snow_accumulation",
)


def format_reading(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:.1f}"


def build_location_card(
    location: str, sample: Optional[AggregationSample], tz: Optional[tzinfo] = None
) -> LocationCard:
    if sample is None:
        return LocationCard(
            location=location,
            reported=False,
            status=status_text(None),
            severity=Severity.UNKNOWN,
            category=display_category(Severity.UNKNOWN),
            display_fields={name: "-" for name in CARD_FIELDS},
        )
    severity = classify(sample.safety_status)
    return LocationCard(
        location=location,
        reported=True,
        status=status_text(sample.safety_status),
        severity=severity,
        category=display_category(severity),
        display_fields={
            name: format_reading(sample.metric(name)) for name in CARD_FIELDS
        },
        last_window_end=sample.window_end,
        last_window_label=format_time(sample.window_end, tz),
    )


def build_chart_specs(metrics: Sequence[str], window_minutes: int) -> list[ChartSpec]:
    specs = []
    for metric in metrics:
        field = METRIC_FIELDS[metric]
        specs.append(
            ChartSpec(
                metric=metric,
                title=field.title,
                unit=field.unit,
                x_axis_title=f"Time (last {window_minutes} min)",
                y_axis_title=field.axis_title,
            )
        )
    return specs


def build_render_payload(
    snapshot: LatestSnapshot,
    history: HistoryWindow,
    *,
    locations: Sequence[str],
    metrics: Sequence[str],
    window_minutes: int,
    tz: Optional[tzinfo] = None,
    now: Optional[datetime] = None,
) -> RenderPayload:
    """Turn one cycle's fetched data into everything the renderer draws."""
    return RenderPayload(
        overall=resolve_overall(snapshot, locations),
        locations={
            loc: build_location_card(loc, snapshot.get(loc), tz) for loc in locations
        },
        series=align(history, locations, metrics, tz),
        charts=build_chart_specs(metrics, window_minutes),
        generated_at=now or datetime.now(timezone.utc),
    )
