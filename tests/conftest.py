import os
from datetime import datetime, timedelta, timezone

import pytest

# Plain-text logs under test; must be set before settings are first imported.
os.environ.setdefault("APP_ENVIRONMENT", "testing")

from canal_dashboard.domain.models import AggregationSample  # noqa: E402
from shared.constants import Locations  # noqa: E402

T0 = datetime(2026, 1, 15, 17, 0, tzinfo=timezone.utc)


def minutes(n: int) -> datetime:
    return T0 + timedelta(minutes=n)


@pytest.fixture
def locations() -> list[str]:
    return Locations.all()


@pytest.fixture
def make_sample():
    """Factory for AggregationSample with sensible defaults."""

    def _make(location: str = Locations.DOWS_LAKE, at: int = 0, **fields):
        defaults = {
            "avg_ice_thickness": 30.0,
            "avg_surface_temp": -5.0,
            "avg_external_temp": -8.0,
            "max_snow_accumulation": 2.0,
            "safety_status": "Safe",
        }
        defaults.update(fields)
        return AggregationSample(location=location, window_end=minutes(at), **defaults)

    return _make


@pytest.fixture
def ts():
    """``ts(n)`` is the window end n minutes after a fixed reference time."""
    return minutes
