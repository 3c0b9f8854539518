"""
Furnace Custom Exceptions

Simple exception hierarchy for error handling.
"""

from .models import ActuatorStatus


class FurnaceError(Exception):
    """Base exception for Furnace."""

    pass


class ConfigurationError(FurnaceError):
    """Configuration or argument is invalid."""

    pass


class ActuatorError(FurnaceError):
    """Remote relay actuator failed."""

    pass


class CommandFailedError(ActuatorError):
    """Relay command was not acknowledged with HTTP 200."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ActuatorUnreachableError(ActuatorError):
    """Status could not be fetched from the actuator."""

    def __init__(self, message: str):
        super().__init__(message)
        self.status = ActuatorStatus.offline()


class SensorError(FurnaceError):
    """Sensor data is unavailable or invalid."""

    pass
