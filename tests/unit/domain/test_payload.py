from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from canal_dashboard.domain.payload import (
    build_chart_specs,
    build_location_card,
    build_render_payload,
    format_reading,
)
from canal_dashboard.domain.severity import DisplayCategory, Severity
from shared.constants import Locations

OTTAWA = ZoneInfo("America/Toronto")


def test_format_reading():
    assert format_reading(12.34) == "12.3"
    assert format_reading(0.0) == "0.0"
    assert format_reading(-3.25) == "-3.2"
    assert format_reading(None) == "-"


def test_card_for_reporting_location(make_sample, ts):
    sample = make_sample(
        Locations.NAC,
        at=0,
        avg_ice_thickness=25.46,
        max_snow_accumulation=None,
        safety_status="Caution",
    )

    card = build_location_card(Locations.NAC, sample, OTTAWA)

    assert card.reported
    assert card.status == "Caution"
    assert card.severity is Severity.CAUTION
    assert card.category is DisplayCategory.CAUTION
    assert card.display_fields["avg_ice_thickness"] == "25.5"
    assert card.display_fields["max_snow_accumulation"] == "-"
    assert card.last_window_end == ts(0)
    assert card.last_window_label == "12:00"


def test_card_for_silent_location():
    card = build_location_card(Locations.FIFTH_AVENUE, None)

    assert not card.reported
    assert card.status == "Unknown"
    assert card.category is DisplayCategory.NEUTRAL
    assert set(card.display_fields.values()) == {"-"}
    assert card.last_window_end is None
    assert card.last_window_label == "-"


def test_chart_specs():
    specs = build_chart_specs(["avg_ice_thickness", "avg_surface_temp"], 60)

    assert [s.metric for s in specs] == ["avg_ice_thickness", "avg_surface_temp"]
    assert specs[0].y_axis_title == "Ice Thickness (cm)"
    assert specs[1].y_axis_title == "Surface Temperature (°C)"
    assert specs[0].x_axis_title == "Time (last 60 min)"


def test_render_payload_combines_everything(make_sample, locations):
    now = datetime(2026, 1, 15, 17, 5, tzinfo=timezone.utc)
    snapshot = {
        Locations.DOWS_LAKE: make_sample(
            Locations.DOWS_LAKE, at=1, safety_status="Safe"
        ),
        Locations.NAC: make_sample(Locations.NAC, at=1, safety_status="Unsafe"),
    }
    history = [
        make_sample(Locations.DOWS_LAKE, at=0, avg_ice_thickness=31.111),
        make_sample(Locations.NAC, at=1, avg_ice_thickness=9.5),
    ]

    payload = build_render_payload(
        snapshot,
        history,
        locations=locations,
        metrics=["avg_ice_thickness"],
        window_minutes=60,
        tz=OTTAWA,
        now=now,
    )

    assert payload.overall.location == Locations.NAC
    assert list(payload.locations) == locations
    assert not payload.locations[Locations.FIFTH_AVENUE].reported
    ice = payload.series.values("avg_ice_thickness", Locations.DOWS_LAKE)
    assert ice == [31.11, None]
    assert payload.generated_at == now
    assert len(payload.charts) == 1


def test_render_payload_serializes_camel_case(make_sample, locations):
    payload = build_render_payload(
        {},
        [make_sample(Locations.NAC, at=0)],
        locations=locations,
        metrics=["avg_ice_thickness"],
        window_minutes=60,
    )

    body = payload.model_dump(mode="json", by_alias=True)

    assert body["overall"]["label"] == "Unknown"
    assert body["overall"]["severity"] == 0
    assert body["overall"]["category"] == "neutral"
    assert "generatedAt" in body
    assert body["locations"][Locations.NAC]["lastWindowEnd"] is None
    assert body["series"]["series"]["avg_ice_thickness"][Locations.DOWS_LAKE] == [None]
    assert body["charts"][0]["yAxisTitle"] == "Ice Thickness (cm)"
