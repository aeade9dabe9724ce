"""Projection of per-location history onto one shared time axis.

Sites do not report in lock-step, so every location's samples are placed on
the union of all ``window_end`` values seen in the window. Where a location has
no sample at a tick the value is ``None``; charts skip gaps rather than drawing
through zero, and nothing here interpolates.

Rounding is half away from zero on the value's shortest decimal form, so
``2.675`` becomes ``2.68`` even though the binary float sits just below it.
"""

from __future__ import annotations

import math
from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Dict, Iterable, List, Optional, Sequence

from .fields import METRIC_FIELDS
from .models import AggregationSample, AlignedSeriesSet

PRECISION = Decimal("0.01")


def round_value(value: Optional[float]) -> Optional[float]:
    """Round to two decimals, or ``None`` for anything that is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    exact = Decimal(repr(float(value)))
    with localcontext() as ctx:
        # quantize needs every integer digit plus two decimals
        ctx.prec = max(ctx.prec, exact.adjusted() + 4)
        rounded = exact.quantize(PRECISION, rounding=ROUND_HALF_UP)
    return float(rounded)


def format_time(value: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    if value is None:
        return "-"
    if tz is not None:
        value = value.astimezone(tz)
    return value.strftime("%H:%M")


def common_axis(history: Iterable[AggregationSample]) -> List[datetime]:
    return sorted({sample.window_end for sample in history})


def index_by_time(
    history: Iterable[AggregationSample], locations: Sequence[str]
) -> Dict[str, Dict[datetime, AggregationSample]]:
    """``location -> window_end -> sample``; later duplicates overwrite earlier ones."""
    by_location: Dict[str, Dict[datetime, AggregationSample]] = {
        loc: {} for loc in locations
    }
    for sample in history:
        lookup = by_location.get(sample.location)
        if lookup is not None:
            lookup[sample.window_end] = sample
    return by_location


def align(
    history: Sequence[AggregationSample],
    locations: Sequence[str],
    metrics: Sequence[str],
    tz: Optional[tzinfo] = None,
) -> AlignedSeriesSet:
    unknown = [m for m in metrics if m not in METRIC_FIELDS]
    if unknown:
        raise ValueError(f"cannot align unknown metrics: {unknown}")

    axis = common_axis(history)
    by_location = index_by_time(history, locations)

    series: Dict[str, Dict[str, List[Optional[float]]]] = {}
    for metric in metrics:
        per_location = {}
        for location in locations:
            lookup = by_location[location]
            values = []
            for tick in axis:
                sample = lookup.get(tick)
                if sample is None:
                    values.append(None)
                else:
                    values.append(round_value(sample.metric(metric)))
            per_location[location] = values
        series[metric] = per_location

    return AlignedSeriesSet(
        axis=axis,
        labels=[format_time(t, tz) for t in axis],
        series=series,
    )
