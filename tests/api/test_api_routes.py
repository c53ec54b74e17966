"""
API route tests

The integrator is ticked by hand between requests: mutating endpoints only
queue commands, so effects show up after the next tick.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from api import create_app
from api.dependencies import set_service_container
from engine.frame_clock import FrameClock
from engine.input_queue import ResetCommand
from managers.config_manager import ConfigManager
from models.enums import InputKey
from services.service_container import ServiceContainer


@pytest.fixture
def services(integrator, held_keys, event_bus):
    container = ServiceContainer(
        config_manager=ConfigManager(),
        integrator=integrator,
        preset_store=integrator.presets,
        held_keys=held_keys,
        event_bus=event_bus,
    )
    set_service_container(container)
    yield container
    set_service_container(None)


@pytest.fixture
def client(services):
    return TestClient(create_app())


class TestControlRoutes:

    def test_state(self, client, services):
        services.integrator.tick(frozenset({InputKey.UP}))

        response = client.get("/api/v1/controls/state")

        assert response.status_code == 200
        body = response.json()
        assert body["state"]["zoom"] == pytest.approx(0.99995)
        assert body["mode"] == "ZOOM"
        assert body["transition"] == {"active": False, "progress": 1.0, "depth": 0}
        assert body["viewport"] == [640.0, 360.0]

    def test_reset_is_queued(self, client, services):
        integrator = services.integrator
        integrator.tick(frozenset({InputKey.J}))

        response = client.post("/api/v1/controls/reset")

        assert response.status_code == 202
        assert response.json() == {"queued": True, "command": "reset"}
        assert integrator.rotation != 0.0
        assert integrator.input_queue.drain() == [ResetCommand()]

    def test_reset_applies_on_next_tick(self, client, services):
        integrator = services.integrator
        integrator.tick(frozenset({InputKey.J}))

        client.post("/api/v1/controls/reset")
        integrator.tick(frozenset())

        assert integrator.rotation == 0.0
        assert integrator.zoom == 1.0

    def test_pointer(self, client, services):
        response = client.post("/api/v1/controls/pointer", json={"dx": 64, "dy": 0})
        assert response.status_code == 202

        state = services.integrator.tick(frozenset())
        assert state.rotation_momentum != 0.0

    def test_orientation(self, client, services):
        response = client.post("/api/v1/controls/orientation", json={"roll": 0.3})
        assert response.status_code == 202

        state = services.integrator.tick(frozenset())
        assert state.rotation_momentum != 0.0

    def test_pointer_validation_error(self, client):
        response = client.post("/api/v1/controls/pointer", json={"dx": "left"})

        assert response.status_code == 422
        body = response.json()
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert body["error"]["details"]["error_count"] == 2

    @pytest.mark.parametrize("url, payload", [
        ("/api/v1/controls/pointer", '{"dx": Infinity, "dy": 0}'),
        ("/api/v1/controls/pointer", '{"dx": 0, "dy": NaN}'),
        ("/api/v1/controls/orientation", '{"yaw": -Infinity}'),
    ])
    def test_non_finite_values_rejected(self, client, services, url, payload):
        response = client.post(url, content=payload, headers={"Content-Type": "application/json"})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert len(services.integrator.input_queue) == 0


class TestPresetRoutes:

    def test_store_then_get(self, client, services):
        integrator = services.integrator
        integrator.tick(frozenset({InputKey.UP}))

        response = client.put("/api/v1/presets/3")
        assert response.status_code == 202

        assert client.get("/api/v1/presets/3").status_code == 404
        integrator.tick(frozenset())

        response = client.get("/api/v1/presets/3")
        assert response.status_code == 200
        assert response.json()["slot"] == 3

        listing = client.get("/api/v1/presets").json()
        assert listing["count"] == 1
        assert [p["slot"] for p in listing["presets"]] == [3]

    def test_empty_slot_is_404(self, client):
        response = client.get("/api/v1/presets/5")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRESET_NOT_FOUND"

    @pytest.mark.parametrize("method, url", [
        ("get", "/api/v1/presets/10"),
        ("put", "/api/v1/presets/-1"),
        ("post", "/api/v1/presets/42/recall"),
    ])
    def test_invalid_slot_is_422(self, client, method, url):
        response = getattr(client, method)(url)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "INVALID_PRESET_SLOT"

    def test_non_numeric_slot(self, client):
        response = client.get("/api/v1/presets/first")
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_recall_known_and_unknown(self, client, services):
        integrator = services.integrator
        integrator.store_preset(1)

        unknown = client.post("/api/v1/presets/2/recall")
        known = client.post("/api/v1/presets/1/recall")

        assert unknown.status_code == 202
        assert unknown.json()["known"] is False
        assert known.json() == {"queued": True, "command": "recall", "slot": 1, "known": True}

        integrator.tick(frozenset())
        assert integrator.transition_active

        status = client.get("/api/v1/controls/state").json()["transition"]
        assert status["active"] is True
        assert status["depth"] == 1


class TestSystemRoutes:

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["controls"] == "ready"

    def test_root(self, client):
        assert client.get("/").json()["health"] == "/api/health"

    def test_metrics_without_clock(self, client):
        body = client.get("/api/v1/system/metrics").json()
        assert body["running"] is False
        assert body["frames_rendered"] == 0

    def test_metrics_with_clock(self, client, services, integrator, held_keys):
        services.frame_clock = FrameClock(integrator, held_keys, fps=60)

        body = client.get("/api/v1/system/metrics").json()

        assert body["fps_target"] == 60
        assert body["running"] is False
        assert body["paused"] is False

    def test_frame_control(self, client, services, integrator, held_keys):
        clock = FrameClock(integrator, held_keys, fps=30)
        services.frame_clock = clock

        assert client.post("/api/v1/system/frame/pause").json()["paused"] is True
        assert clock.paused

        response = client.post("/api/v1/system/frame/step")
        assert response.status_code == 200
        assert clock.step_requested

        assert client.post("/api/v1/system/frame/resume").json()["paused"] is False

        body = client.put("/api/v1/system/frame/fps", json={"fps": 60}).json()
        assert body["fps_target"] == 60
        assert clock.fps == 60

    def test_fps_out_of_range(self, client, services, integrator, held_keys):
        services.frame_clock = FrameClock(integrator, held_keys, fps=30)

        response = client.put("/api/v1/system/frame/fps", json={"fps": 0})

        assert response.status_code == 422
        assert services.frame_clock.fps == 30

    @pytest.mark.parametrize("method, url", [
        ("post", "/api/v1/system/frame/pause"),
        ("post", "/api/v1/system/frame/resume"),
        ("post", "/api/v1/system/frame/step"),
    ])
    def test_frame_control_without_clock(self, client, method, url):
        response = getattr(client, method)(url)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "FRAME_CLOCK_UNAVAILABLE"

    def test_event_history(self, client, services):
        integrator = services.integrator
        integrator.tick(frozenset({InputKey.TAB}))
        integrator.tick(frozenset({InputKey.SHIFT, InputKey.DIGIT_4}))

        asyncio.run(services.event_bus.publish_all(integrator.pop_events()))

        body = client.get("/api/v1/system/events", params={"limit": 5}).json()

        assert body["count"] == 2
        assert [e["type"] for e in body["events"]] == ["CONTROL_MODE_CHANGED", "PRESET_STORED"]
        assert body["events"][0]["data"] == {"old": "ZOOM", "new": "PAN"}
        assert body["events"][1]["data"] == {"slot": 4}

    def test_event_history_limit_validated(self, client):
        assert client.get("/api/v1/system/events", params={"limit": 0}).status_code == 422

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/v1/shaders")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"


def test_unavailable_without_services():
    set_service_container(None)
    client = TestClient(create_app())

    response = client.get("/api/v1/controls/state")

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "SERVICE_UNAVAILABLE"
    assert client.get("/api/health").json()["controls"] == "starting"
