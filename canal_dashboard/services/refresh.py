"""Periodic refresh: fetch, transform, publish.

One timer loop fires a cycle immediately and then every
``refresh_interval_ms``. Ticks are single-flight: when the previous cycle is
still running the tick is skipped (and counted), never queued, so cycles
never overlap. A cycle either replaces the whole render payload or leaves it
alone; a failure never reaches the timer loop.
"""

from __future__ import annotations

import asyncio
import time
from datetime import tzinfo
from typing import Optional, Protocol, Sequence

from canal_dashboard.core.config import settings
from canal_dashboard.core.logger import get_logger
from canal_dashboard.core.metrics import (
    LAST_SUCCESS_TIMESTAMP,
    OVERALL_SEVERITY,
    REFRESH_CYCLE_SECONDS,
    REFRESH_CYCLES_TOTAL,
    REFRESH_FAILURES_TOTAL,
    REFRESH_SKIPPED_TOTAL,
)
from canal_dashboard.domain.errors import FetchFailure
from canal_dashboard.domain.models import HistoryWindow, LatestSnapshot, RenderPayload
from canal_dashboard.domain.payload import build_render_payload
from canal_dashboard.utils.concurrency import run_blocking

from .render import RenderHandle

logger = get_logger("dashboard.refresh")


class AggregationSource(Protocol):
    def fetch_latest_snapshot(self, locations: Sequence[str]) -> LatestSnapshot: ...

    def fetch_history_window(self, duration_minutes: int) -> HistoryWindow: ...


class RefreshOrchestrator:
    def __init__(
        self,
        store: AggregationSource,
        handle: RenderHandle,
        *,
        locations: Optional[Sequence[str]] = None,
        metrics: Optional[Sequence[str]] = None,
        window_minutes: Optional[int] = None,
        interval_seconds: Optional[float] = None,
        tz: Optional[tzinfo] = None,
    ):
        self.store = store
        self.handle = handle
        self.locations = list(settings.locations if locations is None else locations)
        self.metrics = list(settings.metrics if metrics is None else metrics)
        self.window_minutes = (
            settings.history_window_minutes
            if window_minutes is None
            else window_minutes
        )
        self.interval_seconds = (
            settings.refresh_interval_seconds
            if interval_seconds is None
            else interval_seconds
        )
        self.tz = settings.tz if tz is None else tz
        if not self.locations:
            raise ValueError("at least one location is required")
        if self.window_minutes <= 0:
            raise ValueError(f"window_minutes must be > 0, got {self.window_minutes}")
        if self.interval_seconds <= 0:
            raise ValueError(
                f"interval_seconds must be > 0, got {self.interval_seconds}"
            )
        self._inflight: Optional[asyncio.Task] = None

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def _fetch(self) -> tuple[LatestSnapshot, HistoryWindow]:
        snapshot, history = await asyncio.gather(
            run_blocking(self.store.fetch_latest_snapshot, self.locations),
            run_blocking(self.store.fetch_history_window, self.window_minutes),
        )
        return snapshot, history

    def _record_failure(self, source: str, error: str) -> None:
        REFRESH_FAILURES_TOTAL.labels(source=source).inc()
        self.handle.record_failure(error)

    async def run_cycle(self) -> Optional[RenderPayload]:
        """Run one refresh cycle.

        Returns the new payload, or on failure the payload still being shown
        (``None`` if no cycle has succeeded yet).
        """
        started = time.perf_counter()
        try:
            snapshot, history = await self._fetch()
            payload = build_render_payload(
                snapshot,
                history,
                locations=self.locations,
                metrics=self.metrics,
                window_minutes=self.window_minutes,
                tz=self.tz,
            )
        except FetchFailure as e:
            self._record_failure(e.source, str(e))
            logger.warning(
                "refresh_cycle_fetch_failed",
                extra={
                    "source": e.source,
                    "error": e.message,
                    "consecutive_failures": self.handle.consecutive_failures,
                },
            )
            return self.handle.current
        except Exception as e:  # noqa: BLE001
            self._record_failure("unexpected", str(e))
            logger.exception("refresh_cycle_failed", extra={"error": str(e)})
            return self.handle.current
        finally:
            REFRESH_CYCLE_SECONDS.observe(time.perf_counter() - started)

        self.handle.replace_data(payload)
        REFRESH_CYCLES_TOTAL.inc()
        LAST_SUCCESS_TIMESTAMP.set(payload.generated_at.timestamp())
        OVERALL_SEVERITY.set(int(payload.overall.severity))
        logger.info(
            "refresh_cycle_completed",
            extra={
                "overall": payload.overall.label,
                "reported": len(snapshot),
                "points": len(history),
                "ticks": len(payload.series.axis),
            },
        )
        return payload

    def trigger(self) -> bool:
        """Start a cycle unless one is already running. Returns whether it started."""
        if self.in_flight:
            REFRESH_SKIPPED_TOTAL.inc()
            logger.warning(
                "refresh_tick_skipped",
                extra={"reason": "previous cycle still in flight"},
            )
            return False
        self._inflight = asyncio.create_task(self.run_cycle(), name="refresh-cycle")
        return True

    async def run_forever(self, stop_event: asyncio.Event) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        logger.info(
            "refresh_loop_started",
            extra={
                "interval_s": self.interval_seconds,
                "window_minutes": self.window_minutes,
                "locations": self.locations,
            },
        )
        try:
            while not stop_event.is_set():
                self.trigger()
                now = loop.time()
                next_tick += self.interval_seconds
                if next_tick < now:
                    # Fell behind (e.g. a blocked loop); drop the missed ticks.
                    next_tick = now + self.interval_seconds
                try:
                    await asyncio.wait_for(stop_event.wait(), next_tick - now)
                except asyncio.TimeoutError:
                    pass
        finally:
            if self.in_flight:
                await asyncio.wait({self._inflight})
            logger.info("refresh_loop_stopped")
