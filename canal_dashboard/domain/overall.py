from __future__ import annotations

from typing import Iterator, Sequence

from .models import LatestSnapshot, OverallStatus
from .severity import UNKNOWN_LABEL, Severity, classify, display_category


def iteration_order(
    snapshot: LatestSnapshot, locations: Sequence[str]
) -> Iterator[str]:
    """Configured locations first, then any unexpected snapshot keys sorted by name.

    Never depends on the mapping's insertion order.
    """
    for location in locations:
        if location in snapshot:
            yield location
    known = set(locations)
    yield from sorted(loc for loc in snapshot if loc not in known)


def resolve_overall(
    snapshot: LatestSnapshot, locations: Sequence[str]
) -> OverallStatus:
    """Worst-case status across the snapshot.

    Only a strictly higher severity replaces the current winner, so a tie goes
    to whichever location comes first in ``locations``. Locations missing from
    the snapshot contribute nothing.
    """
    best = Severity.UNKNOWN
    label = UNKNOWN_LABEL
    winner = None
    for location in iteration_order(snapshot, locations):
        status = snapshot[location].safety_status
        severity = classify(status)
        if severity > best:
            best = severity
            label = status.strip()
            winner = location
    return OverallStatus(
        label=label,
        severity=best,
        category=display_category(best),
        location=winner,
    )
