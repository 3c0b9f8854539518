"""Shared fixtures for the furnace tests."""

from unittest.mock import MagicMock

import pytest
import requests

from furnace.exceptions import ActuatorUnreachableError, CommandFailedError
from furnace.models import ActuatorStatus, HeatingState
from furnace.settings import ThermostatConfig

SHELLY_STATUS = (
    '{"wifi_sta":{"connected":true,"ip":"192.168.0.111","rssi":-58},'
    '"relays":[{"ison":true,"has_timer":false,"source":"http"},'
    '{"ison":false,"has_timer":false,"source":"input"}],'
    '"meters":[{"power":1840.50,"overpower":0.00,"is_valid":true},'
    '{"power":12.25,"overpower":0.00,"is_valid":true}],'
    '"temperature":41.37,"overtemperature":false,'
    '"tmp":{"tC":41.37,"tF":106.47,"is_valid":true}}'
)


class FakeActuator:
    """In-memory stand-in for ActuatorClient."""

    def __init__(self, status=None):
        self.host = "192.168.0.111"
        self.status = status or ActuatorStatus(power_0=1500.0, power_1=20.0, online=True)
        self.fail_command = False
        self.fail_status = False
        self.relay_calls = []
        self.status_calls = 0

    def set_relay(self, channel, on):
        self.relay_calls.append((channel, on))
        if self.fail_command:
            raise CommandFailedError("Relay command returned HTTP 500", status_code=500)

    def get_status(self):
        self.status_calls += 1
        if self.fail_status:
            raise ActuatorUnreachableError("Actuator unreachable")
        return self.status

    def set_host(self, host):
        self.host = host


class RecordingObserver:
    """Observer that records every notification."""

    def __init__(self):
        self.calls: list[tuple[HeatingState, float]] = []

    def on_state_changed(self, state, power_w):
        self.calls.append((state, power_w))


def make_response(status_code=200, chunks=(b"",), iter_error=None):
    """Build a mocked requests.Response."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    if iter_error is not None:
        response.iter_content.side_effect = iter_error
    else:
        response.iter_content.return_value = iter(chunks)
    return response


@pytest.fixture
def config():
    return ThermostatConfig(
        target_temp=21.0,
        hysteresis_low=0.5,
        hysteresis_high=0.3,
        relay_channel=0,
    )


@pytest.fixture
def actuator():
    return FakeActuator()


@pytest.fixture
def observer():
    return RecordingObserver()
