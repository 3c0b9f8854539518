"""
Simple Home Assistant API Client for Furnace

Minimal client for reading temperature and humidity sensors, used as the
sensor source of the thermostat service.
"""

import logging
import math
from typing import Any, Optional

import requests

from .exceptions import SensorError
from .models import SensorReading

logger = logging.getLogger(__name__)


def _finite_float(value: Any) -> float:
    """Convert to float, rejecting nan and inf."""
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite value: {value!r}")
    return number


class HAClient:
    """Simple Home Assistant REST API client."""

    def __init__(self, base_url: str, token: str, timeout: float = 5.0):
        """Initialize HA client.

        Args:
            base_url: Home Assistant URL (e.g., "http://supervisor/core")
            token: Long-lived access token
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        # Create a session for connection pooling
        self.session = requests.Session()
        self.session.headers.update(self.headers)
        self.timeout = timeout

    def get_state(self, entity_id: str) -> dict[str, Any]:
        """Get current state of an entity.

        Args:
            entity_id: Entity ID (e.g., "sensor.temperature")

        Returns:
            State dictionary with 'state', 'attributes', etc.

        Raises:
            SensorError: If the entity is missing or the request fails
        """
        url = f"{self.base_url}/api/states/{entity_id}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                raise SensorError(f"Entity not found: {entity_id}") from e
            raise SensorError(f"Failed to get state for {entity_id}: {e}") from e
        except (requests.exceptions.RequestException, ValueError) as e:
            raise SensorError(f"HA API request failed: {e}") from e

    def _get_float(self, entity_id: str, attribute: str) -> float:
        """Read a numeric state, falling back to a named attribute."""
        state = self.get_state(entity_id)
        try:
            return _finite_float(state["state"])
        except (ValueError, KeyError, TypeError) as e:
            try:
                return _finite_float(state["attributes"][attribute])
            except (ValueError, KeyError, TypeError):
                raise SensorError(f"Cannot read {attribute} from {entity_id}: {e}") from e

    def get_temperature(self, entity_id: str) -> float:
        """Get temperature (°C) from a sensor or climate entity.

        Raises:
            SensorError: If temperature cannot be read
        """
        if entity_id.startswith("climate."):
            state = self.get_state(entity_id)
            try:
                return _finite_float(state["attributes"]["current_temperature"])
            except (ValueError, KeyError, TypeError) as e:
                raise SensorError(
                    f"Cannot read current_temperature from climate entity {entity_id}: {e}"
                ) from e
        return self._get_float(entity_id, "current_temperature")

    def get_humidity(self, entity_id: str) -> float:
        """Get relative humidity (%) from a sensor entity.

        Raises:
            SensorError: If humidity cannot be read
        """
        return self._get_float(entity_id, "current_humidity")

    def close(self) -> None:
        self.session.close()


class HomeAssistantSensor:
    """TemperatureSensor backed by Home Assistant entities."""

    def __init__(
        self,
        client: HAClient,
        temperature_entity: str,
        humidity_entity: Optional[str] = None,
    ):
        self.client = client
        self.temperature_entity = temperature_entity
        self.humidity_entity = humidity_entity

    def read(self) -> SensorReading:
        temperature = self.client.get_temperature(self.temperature_entity)

        humidity = None
        if self.humidity_entity:
            try:
                humidity = self.client.get_humidity(self.humidity_entity)
            except SensorError as e:
                # Humidity is display-only
                logger.warning(f"Failed to read humidity: {e}")

        logger.debug(f"Sensor reading: {temperature:.2f}°C, humidity={humidity}")
        return SensorReading(temperature=temperature, humidity=humidity)
