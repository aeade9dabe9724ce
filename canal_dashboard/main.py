import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from prometheus_fastapi_instrumentator import Instrumentator

from canal_dashboard.api.router import api_router
from canal_dashboard.core.config import settings
from canal_dashboard.core.logger import configure_logging, get_logger
from canal_dashboard.infrastructure.clickhouse.client import SensorAggregationStore
from canal_dashboard.services.refresh import RefreshOrchestrator
from canal_dashboard.services.render import RenderHandle
from canal_dashboard.utils.concurrency import run_blocking
from shared.utils.retry import retry_async

# Configure logging once and get service logger
configure_logging()
logger = get_logger("dashboard.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("dashboard_service_starting")
    app.state.store = await _init_store_with_retry()
    app.state.render_handle = RenderHandle()
    app.state.orchestrator = RefreshOrchestrator(
        app.state.store, app.state.render_handle
    )
    app.state.stop_event = asyncio.Event()
    app.state.refresh_task = asyncio.create_task(
        app.state.orchestrator.run_forever(app.state.stop_event)
    )
    try:
        yield
    finally:
        logger.info("dashboard_service_stopping")
        app.state.stop_event.set()
        try:
            await app.state.refresh_task
        except Exception:  # noqa: BLE001
            logger.exception("refresh_loop_exit_error")
        await run_blocking(app.state.store.close)


app = FastAPI(title="Rideau Canal Ice Dashboard", version="0.1.0", lifespan=lifespan)
app.include_router(api_router)

Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    excluded_handlers=["/docs", "/openapi.json", "/metrics"],
).instrument(app)


async def _init_store_with_retry() -> SensorAggregationStore:
    async def _connect():
        store = await run_blocking(SensorAggregationStore)
        await run_blocking(store.ping)
        return store

    async def _on_retry(attempt: int, exc: BaseException, sleep_for: float):
        logger.warning(
            "store_connect_retry",
            extra={
                "attempt": attempt,
                "error": str(exc),
                "sleep_for": round(sleep_for, 2),
            },
        )

    store = await retry_async(
        _connect,
        retries=settings.store_connect_retries,
        base_delay=0.5,
        max_delay=8.0,
        jitter=0.2,
        on_retry=_on_retry,
    )
    logger.info("store_connected", extra={"table": store.table})
    return store


@app.get("/metrics")
async def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def run() -> None:
    uvicorn.run(
        "canal_dashboard.main:app",
        host=settings.http_host,
        port=settings.http_port,
        log_config=None,
    )
