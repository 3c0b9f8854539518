"""Furnace single-zone thermostat package."""

# Define public API
__all__ = [
    "ActuatorClient",
    "ActuatorStatus",
    "HeatingState",
    "ThermostatConfig",
    "ThermostatController",
    "ThermostatObserver",
]

# Import settings
from .settings import ThermostatConfig

# Import models
from .models import ActuatorStatus, HeatingState

# Import actuator client and controller
from .actuator_client import ActuatorClient
from .controller import ThermostatController, ThermostatObserver
