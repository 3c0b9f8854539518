"""
Thermostat Service

Background service that periodically reads the sensor and feeds the
thermostat controller. At most one cycle is in flight at any time.
"""

import asyncio
import logging
from typing import Optional

from .collaborators import ConnectivityMonitor, TemperatureSensor
from .controller import ThermostatController
from .exceptions import ActuatorError, SensorError
from .models import HeatingState, SensorReading

logger = logging.getLogger(__name__)


class ThermostatService:
    """Periodic driver for a ThermostatController."""

    def __init__(
        self,
        controller: ThermostatController,
        sensor: TemperatureSensor,
        interval_seconds: float = 2.0,
        connectivity: Optional[ConnectivityMonitor] = None,
    ):
        self.controller = controller
        self.sensor = sensor
        self.interval_seconds = interval_seconds
        self.connectivity = connectivity
        self.last_reading: Optional[SensorReading] = None
        self.last_signal_strength: Optional[int] = None  # dBm

        self._task: asyncio.Task | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        """Start the thermostat service."""
        if self._running:
            logger.warning("Thermostat service already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(f"🔥 Thermostat service started (interval: {self.interval_seconds}s)")

    async def stop(self):
        """Stop the thermostat service."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("🔥 Thermostat service stopped")

    async def _run_loop(self):
        """Main control loop - one cycle every interval."""
        while self._running:
            try:
                await self.run_cycle()
            except Exception as e:
                logger.error(f"Error in thermostat loop: {e}", exc_info=True)

            await asyncio.sleep(self.interval_seconds)

    async def run_cycle(self) -> Optional[HeatingState]:
        """Read the sensor once and update the controller.

        Returns:
            Resulting heating state, or None if the cycle was skipped
        """
        if self.connectivity is not None:
            if not self.connectivity.is_connected():
                self.last_signal_strength = None
                logger.warning("Network not connected, skipping thermostat cycle")
                return None
            self.last_signal_strength = self.connectivity.signal_strength()

        try:
            reading = await asyncio.to_thread(self.sensor.read)
        except SensorError as e:
            logger.warning(f"Failed to read sensor data: {e}")
            self.last_reading = None
            return None

        self.last_reading = reading
        logger.debug(f"🌡️  Temperature: {reading.temperature:.1f}°C")

        try:
            return await asyncio.to_thread(
                self.controller.update_temperature, reading.temperature
            )
        except ActuatorError as e:
            logger.error(f"Actuator command failed: {e}")
            return self.controller.state
