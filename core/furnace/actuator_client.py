"""
Relay Actuator HTTP Client

Minimal client for a Shelly-style relay device: switch a relay channel and
read the device status. No retries are performed here.
"""

import logging

import requests

from .exceptions import ActuatorUnreachableError, CommandFailedError, ConfigurationError
from .models import ActuatorStatus
from .status_parser import parse_status

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0  # seconds per request
STATUS_BODY_LIMIT = 1024  # bytes of the status body that are scanned
RELAY_CHANNELS = (0, 1)


class ActuatorClient:
    """HTTP client for a two-channel relay actuator."""

    def __init__(self, host: str, timeout: float = DEFAULT_TIMEOUT):
        """Initialize actuator client.

        Args:
            host: Device host or IP address (e.g., "192.168.0.111")
            timeout: Request timeout in seconds
        """
        self._host = ""
        self.set_host(host)
        self.timeout = timeout
        # Create a session for connection pooling
        self.session = requests.Session()

    @property
    def host(self) -> str:
        return self._host

    @property
    def base_url(self) -> str:
        return f"http://{self._host}"

    def set_host(self, host: str) -> None:
        """Change the device address.

        Must not be called while a request is in flight.

        Raises:
            ConfigurationError: If host is empty
        """
        host = (host or "").strip().rstrip("/")
        if not host:
            raise ConfigurationError("Actuator host must not be empty")
        if self._host and host != self._host:
            logger.info(f"Actuator host changed: {self._host} → {host}")
        self._host = host

    def set_relay(self, channel: int, on: bool) -> None:
        """Switch a relay channel on or off.

        Args:
            channel: Relay channel (0 or 1)
            on: True to energize the relay

        Raises:
            ConfigurationError: If channel is not 0 or 1
            CommandFailedError: If the request fails or the reply is not HTTP 200
        """
        if channel not in RELAY_CHANNELS:
            raise ConfigurationError(f"Invalid relay channel: {channel}")

        turn = "on" if on else "off"
        url = f"{self.base_url}/relay/{channel}?turn={turn}"
        logger.info(f"Setting relay {channel} to {turn.upper()}")
        logger.debug(f"URL: {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Relay command failed: {e}")
            raise CommandFailedError(f"Relay {channel} command failed: {e}") from e

        if response.status_code != 200:
            logger.warning(f"Unexpected status code: {response.status_code}")
            raise CommandFailedError(
                f"Relay {channel} command returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        logger.debug("Relay command successful")

    def get_status(self) -> ActuatorStatus:
        """Fetch and parse the device status.

        The HTTP status code is not checked; only transport success matters.
        At most STATUS_BODY_LIMIT bytes of the body are read.

        Returns:
            ActuatorStatus with online=True

        Raises:
            ActuatorUnreachableError: If the device cannot be reached or the
                body cannot be read
        """
        url = f"{self.base_url}/status"
        try:
            response = self.session.get(url, timeout=self.timeout, stream=True)
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to open HTTP connection: {e}")
            raise ActuatorUnreachableError(f"Actuator {self._host} unreachable: {e}") from e

        try:
            body = self._read_body(response)
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to read response: {e}")
            raise ActuatorUnreachableError(f"Failed to read status from {self._host}: {e}") from e
        finally:
            response.close()

        logger.debug(f"Received {len(body)} bytes")
        logger.debug(f"Response: {body}")
        return parse_status(body)

    def _read_body(self, response) -> str:
        """Read up to STATUS_BODY_LIMIT bytes and decode them."""
        data = b""
        for chunk in response.iter_content(chunk_size=STATUS_BODY_LIMIT):
            if not chunk:
                continue
            data += chunk
            if len(data) >= STATUS_BODY_LIMIT:
                break
        return data[:STATUS_BODY_LIMIT].decode("utf-8", errors="replace")

    def close(self) -> None:
        self.session.close()
