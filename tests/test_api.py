"""Tests for the HTTP API router."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api import router
from furnace.controller import ThermostatController
from furnace.models import SensorReading
from furnace.presentation import StatusBoard


class StubService:
    last_reading = SensorReading(temperature=20.0, humidity=41.5)
    last_signal_strength = -62


@pytest.fixture
def app(config, actuator):
    app = FastAPI()
    app.include_router(router)
    board = StatusBoard()
    app.state.controller = ThermostatController(config, actuator, observer=board)
    app.state.status_board = board
    return app


@pytest.fixture
def http(app):
    return TestClient(app)


def test_health(http):
    response = http.get("/api/health")

    assert response.status_code == 200
    assert response.json()["actuator_host"] == "192.168.0.111"


def test_status(app, http):
    app.state.controller.update_temperature(20.0)
    app.state.service = StubService()

    data = http.get("/api/status").json()

    assert data["state"] == "heating"
    assert data["label"] == "HEATING"
    assert data["color"] == "#FF0000"
    assert data["power_w"] == 1500.0
    assert data["target_temp"] == 21.0
    assert data["humidity"] == 41.5
    assert data["signal_strength"] == -62
    assert data["display"] == {
        "temperature": "20.0°C",
        "humidity": "41.5%",
        "target": "Target: 21.0°C",
        "status": "● HEATING",
    }


def test_status_without_controller():
    app = FastAPI()
    app.include_router(router)

    response = TestClient(app).get("/api/status")

    assert response.status_code == 503


def test_set_target(app, http):
    response = http.post("/api/target", json={"temperature": 23.5})

    assert response.status_code == 200
    assert response.json() == {"target_temp": 23.5}
    assert app.state.controller.target_temp == 23.5


def test_set_target_out_of_range(app, http):
    response = http.post("/api/target", json={"temperature": 40.0})

    assert response.status_code == 422
    assert app.state.controller.target_temp == 21.0


def test_override(app, http, actuator):
    response = http.post("/api/override", json={"on": True})

    assert response.status_code == 200
    assert response.json()["state"] == "heating"
    assert actuator.relay_calls == [(0, True)]


def test_override_failure(app, http, actuator):
    actuator.fail_command = True

    response = http.post("/api/override", json={"on": True})

    assert response.status_code == 502
    assert app.state.controller.state.value == "off"


def test_set_actuator_host(app, http, actuator):
    response = http.post("/api/actuator", json={"host": "10.0.0.8"})

    assert response.status_code == 200
    assert response.json() == {"host": "10.0.0.8", "channel": 0}
    assert actuator.host == "10.0.0.8"


def test_events(app, http):
    app.state.controller.update_temperature(20.0)
    app.state.controller.update_temperature(22.0)

    events = http.get("/api/events", params={"limit": 1}).json()["events"]

    assert len(events) == 1
    assert events[0]["state"] == "off"
