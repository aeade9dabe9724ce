from fastapi import APIRouter, Depends, Response

from canal_dashboard.api.dependencies import get_render_handle, get_store
from canal_dashboard.domain.errors import FetchFailure
from canal_dashboard.infrastructure.clickhouse.client import SensorAggregationStore
from canal_dashboard.services.render import RenderHandle
from canal_dashboard.utils.concurrency import run_blocking

router = APIRouter()


@router.get("/healthz")
async def healthz(store: SensorAggregationStore = Depends(get_store)):
    try:
        await run_blocking(store.ping)
    except FetchFailure as e:
        return Response(status_code=503, content=str(e))
    return {"status": "ok", "clickhouse": "ok"}


@router.get("/readyz")
async def readyz(handle: RenderHandle = Depends(get_render_handle)):
    if handle.ready:
        return {"status": "ready"}
    return Response(status_code=503, content="not ready")
