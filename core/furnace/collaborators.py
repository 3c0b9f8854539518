"""
Collaborator interfaces consumed by the periodic driver.
"""

from typing import Protocol

from .models import SensorReading


class TemperatureSensor(Protocol):
    """Source of temperature/humidity samples."""

    def read(self) -> SensorReading:
        """Take one reading.

        Raises:
            SensorError: If no valid reading is available
        """
        ...


class ConnectivityMonitor(Protocol):
    """Network link state."""

    def is_connected(self) -> bool:
        ...

    def signal_strength(self) -> int:
        """Signal strength in dBm (-100 to 0)."""
        ...
