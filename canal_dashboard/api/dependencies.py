from fastapi import Request

from canal_dashboard.infrastructure.clickhouse.client import SensorAggregationStore
from canal_dashboard.services.render import RenderHandle


def get_store(request: Request) -> SensorAggregationStore:
    return request.app.state.store  # type: ignore[return-value]


def get_render_handle(request: Request) -> RenderHandle:
    return request.app.state.render_handle  # type: ignore[return-value]
