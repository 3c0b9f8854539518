"""
Furnace Data Models

Heating state, actuator snapshots and sensor readings.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class HeatingState(str, Enum):
    """Heating state reported by the thermostat controller."""

    OFF = "off"
    HEATING = "heating"
    ERROR = "error"


@dataclass
class ThermostatState:
    """Mutable state owned by the thermostat controller."""

    heating_state: HeatingState = HeatingState.OFF
    target_temp: float = 20.0
    current_temp: Optional[float] = None  # None until the first sample
    power_w: float = 0.0  # 0 if unknown


@dataclass
class ActuatorEndpoint:
    """Address of the remote relay device and the channel driven on it."""

    host: str
    channel: int

    @property
    def base_url(self) -> str:
        return f"http://{self.host}"


@dataclass(frozen=True)
class ActuatorStatus:
    """Snapshot of the actuator status.

    When ``online`` is False the remaining fields carry no meaning.
    """

    output_0: bool = False
    output_1: bool = False
    power_0: float = 0.0  # W
    power_1: float = 0.0  # W
    temperature: float = 0.0  # Device internal temperature (°C)
    online: bool = False

    @classmethod
    def offline(cls) -> "ActuatorStatus":
        """Zeroed status of an unreachable device."""
        return cls()

    def output_for(self, channel: int) -> bool:
        return self.output_0 if channel == 0 else self.output_1

    def power_for(self, channel: int) -> float:
        return self.power_0 if channel == 0 else self.power_1


@dataclass(frozen=True)
class SensorReading:
    """A single temperature/humidity sample."""

    temperature: float  # °C
    humidity: Optional[float] = None  # %RH
