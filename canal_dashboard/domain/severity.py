"""Safety status classification.

Labels arrive as free text from the aggregation job (``Safe``, ``CAUTION``,
``unsafe``...). Anything we do not recognise is ``UNKNOWN``: it ranks below
``SAFE`` and gets its own neutral display category.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any

from canal_dashboard.core.logger import get_logger

logger = get_logger("dashboard.severity")

UNKNOWN_LABEL = "Unknown"


class Severity(IntEnum):
    UNKNOWN = 0
    SAFE = 1
    CAUTION = 2
    UNSAFE = 3


class DisplayCategory(str, Enum):
    SAFE = "safe"
    CAUTION = "caution"
    UNSAFE = "unsafe"
    NEUTRAL = "neutral"

    @property
    def css_class(self) -> str:
        return f"badge-{self.value}"


_BY_LABEL = {
    "safe": Severity.SAFE,
    "caution": Severity.CAUTION,
    "unsafe": Severity.UNSAFE,
}

_CATEGORIES = {
    Severity.UNKNOWN: DisplayCategory.NEUTRAL,
    Severity.SAFE: DisplayCategory.SAFE,
    Severity.CAUTION: DisplayCategory.CAUTION,
    Severity.UNSAFE: DisplayCategory.UNSAFE,
}


def classify(label: Any) -> Severity:
    if not isinstance(label, str):
        return Severity.UNKNOWN
    severity = _BY_LABEL.get(label.strip().lower())
    if severity is None:
        if label.strip():
            logger.debug("unrecognised_safety_status", extra={"label": label})
        return Severity.UNKNOWN
    return severity


def display_category(severity: Severity) -> DisplayCategory:
    return _CATEGORIES[Severity(severity)]


def status_text(label: Any) -> str:
    """Label as shown on a badge: the received text, or ``Unknown`` when blank."""
    if isinstance(label, str) and label.strip():
        return label
    return UNKNOWN_LABEL
