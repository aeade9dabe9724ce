"""Read-only access to the sensor aggregation table.

The aggregation job writes one row per location per window; the dashboard only
ever asks for the newest row per location and for a trailing window of rows.
All calls are blocking; callers on the event loop go through ``run_blocking``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence

import clickhouse_connect
from pydantic import ValidationError

from canal_dashboard.core.config import settings
from canal_dashboard.core.logger import get_logger
from canal_dashboard.domain.errors import FetchFailure
from canal_dashboard.domain.models import (
    AggregationSample,
    HistoryWindow,
    LatestSnapshot,
)

logger = get_logger("dashboard.store")

COLUMNS = (
    "location",
    "window_end",
    "avg_ice_thickness",
    "avg_surface_temp",
    "avg_external_temp",
    "max_snow_accumulation",
    "safety_status",
)


def parse_rows(source: str, rows: Iterable[Sequence[Any]]) -> List[AggregationSample]:
    samples = []
    for row in rows:
        try:
            samples.append(AggregationSample.model_validate(dict(zip(COLUMNS, row))))
        except ValidationError as e:
            raise FetchFailure(
                source, f"malformed row: {e.error_count()} error(s)"
            ) from e
    return samples


class SensorAggregationStore:
    def __init__(self, table: str | None = None):
        self.table = table or settings.clickhouse_table
        self.client = clickhouse_connect.get_client(
            host=settings.clickhouse_host,
            port=settings.clickhouse_port,
            database=settings.clickhouse_db,
            username=settings.clickhouse_user,
            password=settings.clickhouse_password,
            interface="http",
            send_receive_timeout=settings.clickhouse_query_timeout_seconds,
            # latest and history run concurrently on this client; a shared
            # session would lock one of them out
            autogenerate_session_id=False,
        )

    def _query(self, source: str, query: str, parameters: Dict[str, Any]):
        try:
            return self.client.query(query, parameters=parameters).result_rows
        except Exception as e:
            logger.error(
                "store_query_failed", extra={"source": source, "error": str(e)}
            )
            raise FetchFailure(source, str(e)) from e

    def fetch_latest_snapshot(self, locations: Sequence[str]) -> LatestSnapshot:
        """Newest sample per location; locations that never reported are absent."""
        query = f"""
        SELECT {", ".join(COLUMNS)}
        FROM {self.table}
        WHERE location IN %(locations)s
        ORDER BY window_end DESC
        LIMIT 1 BY location
        """
        rows = self._query("latest", query, {"locations": tuple(locations)})
        by_location = {s.location: s for s in parse_rows("latest", rows)}
        snapshot = {loc: by_location[loc] for loc in locations if loc in by_location}
        logger.debug(
            "latest_snapshot_fetched",
            extra={"reported": list(snapshot), "expected": len(locations)},
        )
        return snapshot

    def fetch_history_window(self, duration_minutes: int) -> HistoryWindow:
        """Every sample whose window ended within the trailing ``duration_minutes``."""
        query = f"""
        SELECT {", ".join(COLUMNS)}
        FROM {self.table}
        WHERE window_end >= now() - INTERVAL %(minutes)s MINUTE
        ORDER BY window_end ASC
        """
        rows = self._query("history", query, {"minutes": int(duration_minutes)})
        history = parse_rows("history", rows)
        logger.debug(
            "history_window_fetched",
            extra={"points": len(history), "minutes": duration_minutes},
        )
        return history

    def ping(self) -> bool:
        try:
            ok = self.client.ping()
        except Exception as e:
            raise FetchFailure("ping", str(e)) from e
        if not ok:
            raise FetchFailure("ping", "clickhouse did not answer ping")
        return True

    def close(self) -> None:
        self.client.close()
