from fastapi import APIRouter, Depends, HTTPException, Query

from canal_dashboard.api.dependencies import get_render_handle, get_store
from canal_dashboard.core.config import settings
from canal_dashboard.core.logger import get_logger
from canal_dashboard.domain.errors import FetchFailure
from canal_dashboard.infrastructure.clickhouse.client import SensorAggregationStore
from canal_dashboard.services.render import RenderHandle
from canal_dashboard.utils.concurrency import run_blocking

router = APIRouter()
logger = get_logger(__name__)


@router.get("/dashboard")
async def get_dashboard(handle: RenderHandle = Depends(get_render_handle)):
    """Last successfully rendered payload plus how fresh it is."""
    payload = handle.current
    if payload is None:
        raise HTTPException(status_code=503, detail="No dashboard data rendered yet")
    body = payload.model_dump(mode="json", by_alias=True)
    body["freshness"] = handle.freshness()
    return body


@router.get("/latest")
async def get_latest(store: SensorAggregationStore = Depends(get_store)):
    """Latest aggregation document for each monitored location."""
    try:
        snapshot = await run_blocking(store.fetch_latest_snapshot, settings.locations)
    except FetchFailure as e:
        logger.error("latest_fetch_failed", extra={"error": e.message})
        raise HTTPException(status_code=502, detail="Failed to fetch latest data.")
    return {
        "locations": [
            s.model_dump(mode="json", by_alias=True) for s in snapshot.values()
        ]
    }


@router.get("/history")
async def get_history(
    minutes: int | None = Query(None, ge=1, le=1440),
    store: SensorAggregationStore = Depends(get_store),
):
    """Raw samples for the trailing window, oldest first."""
    window = minutes or settings.history_window_minutes
    try:
        history = await run_blocking(store.fetch_history_window, window)
    except FetchFailure as e:
        logger.error(
            "history_fetch_failed", extra={"error": e.message, "minutes": window}
        )
        raise HTTPException(status_code=502, detail="Failed to fetch history data.")
    return {
        "minutes": window,
        "points": [s.model_dump(mode="json", by_alias=True) for s in history],
    }
