from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from canal_dashboard.domain.models import RenderPayload


class RenderHandle:
    """Holds the payload the renderer currently shows.

    A successful cycle swaps in a complete new payload with ``replace_data``;
    a failed one only updates the failure bookkeeping, so readers keep seeing
    the last good payload. Both run on the event loop thread and replace plain
    references, so a reader never sees a half-built payload.
    """

    def __init__(self):
        self._payload: Optional[RenderPayload] = None
        self.last_success_at: Optional[datetime] = None
        self.last_failure_at: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self.consecutive_failures = 0

    @property
    def current(self) -> Optional[RenderPayload]:
        return self._payload

    @property
    def ready(self) -> bool:
        return self._payload is not None

    @property
    def stale(self) -> bool:
        return self.consecutive_failures > 0

    def replace_data(self, payload: RenderPayload) -> None:
        self._payload = payload
        self.last_success_at = payload.generated_at
        self.consecutive_failures = 0
        self.last_error = None

    def record_failure(self, error: str, at: Optional[datetime] = None) -> None:
        self.last_failure_at = at or datetime.now(timezone.utc)
        self.last_error = error
        self.consecutive_failures += 1

    def freshness(self) -> Dict[str, Any]:
        return {
            "lastSuccessAt": self.last_success_at,
            "lastFailureAt": self.last_failure_at,
            "consecutiveFailures": self.consecutive_failures,
            "lastError": self.last_error,
            "stale": self.stale,
        }
