from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from canal_dashboard.api.dependencies import get_render_handle, get_store
from canal_dashboard.domain.errors import FetchFailure
from canal_dashboard.domain.payload import build_render_payload
from canal_dashboard.main import app
from canal_dashboard.services.render import RenderHandle
from shared.constants import Locations


@pytest.fixture
def store():
    return MagicMock()


@pytest.fixture
def handle():
    return RenderHandle()


@pytest.fixture
def client(store, handle):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_render_handle] = lambda: handle
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_dashboard_not_ready(client):
    resp = client.get("/api/dashboard")

    assert resp.status_code == 503


def test_dashboard_serves_payload_with_freshness(
    client, handle, make_sample, locations
):
    handle.replace_data(
        build_render_payload(
            {Locations.NAC: make_sample(Locations.NAC, safety_status="Unsafe")},
            [make_sample(Locations.NAC, at=0, avg_ice_thickness=9.5)],
            locations=locations,
            metrics=["avg_ice_thickness"],
            window_minutes=60,
        )
    )
    handle.record_failure("history: query timed out")

    resp = client.get("/api/dashboard")

    assert resp.status_code == 200
    body = resp.json()
    assert body["overall"]["label"] == "Unsafe"
    assert body["overall"]["location"] == Locations.NAC
    assert body["series"]["series"]["avg_ice_thickness"][Locations.NAC] == [9.5]
    assert body["freshness"]["stale"] is True
    assert body["freshness"]["consecutiveFailures"] == 1


def test_latest_passthrough(client, store, make_sample):
    store.fetch_latest_snapshot.return_value = {
        Locations.DOWS_LAKE: make_sample(Locations.DOWS_LAKE, safety_status="Caution")
    }

    resp = client.get("/api/latest")

    assert resp.status_code == 200
    docs = resp.json()["locations"]
    assert docs[0]["location"] == Locations.DOWS_LAKE
    assert docs[0]["safetyStatus"] == "Caution"


def test_latest_failure_is_502(client, store):
    store.fetch_latest_snapshot.side_effect = FetchFailure("latest", "down")

    resp = client.get("/api/latest")

    assert resp.status_code == 502


def test_history_uses_default_window(client, store, make_sample):
    store.fetch_history_window.return_value = [make_sample(Locations.NAC, at=0)]

    resp = client.get("/api/history")

    assert resp.status_code == 200
    assert resp.json()["minutes"] == 60
    assert len(resp.json()["points"]) == 1
    store.fetch_history_window.assert_called_once_with(60)


def test_history_custom_window_and_validation(client, store):
    store.fetch_history_window.return_value = []

    assert client.get("/api/history?minutes=15").json()["minutes"] == 15
    assert client.get("/api/history?minutes=0").status_code == 422


def test_history_failure_is_502(client, store):
    store.fetch_history_window.side_effect = FetchFailure("history", "timeout")

    assert client.get("/api/history").status_code == 502


def test_healthz(client, store):
    store.ping.return_value = True
    assert client.get("/healthz").status_code == 200

    store.ping.side_effect = FetchFailure("ping", "clickhouse down")
    resp = client.get("/healthz")
    assert resp.status_code == 503
    assert "clickhouse down" in resp.text


def test_readyz(client, handle, locations):
    assert client.get("/readyz").status_code == 503

    handle.replace_data(
        build_render_payload(
            {},
            [],
            locations=locations,
            metrics=["avg_ice_thickness"],
            window_minutes=60,
        )
    )

    assert client.get("/readyz").status_code == 200


def test_metrics_endpoint(client):
    resp = client.get("/metrics")

    assert resp.status_code == 200
    assert "dashboard_refresh_cycles_total" in resp.text
