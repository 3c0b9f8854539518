"""
Thermostat Controller

Hysteresis-based heating decisions for a single zone, enacted through the
relay actuator. One controller instance owns all thermostat state; it is
created once by the application and handed to the periodic driver.
"""

import logging
import threading
from dataclasses import replace
from typing import Callable, Optional, Protocol

from .actuator_client import ActuatorClient
from .exceptions import ActuatorUnreachableError, CommandFailedError
from .models import ActuatorEndpoint, HeatingState, ThermostatState
from .settings import ThermostatConfig

logger = logging.getLogger(__name__)


class ThermostatObserver(Protocol):
    """Receives heating state transitions."""

    def on_state_changed(self, state: HeatingState, power_w: float) -> None:
        ...


class CallbackObserver:
    """Adapts a plain ``(state, power_w)`` function to ThermostatObserver."""

    def __init__(self, callback: Callable[[HeatingState, float], None]):
        self.callback = callback

    def on_state_changed(self, state: HeatingState, power_w: float) -> None:
        self.callback(state, power_w)


def decide_heating(
    delta: float,
    currently_heating: bool,
    hysteresis_low: float,
    hysteresis_high: float,
) -> bool:
    """Decide whether heating should be active.

    Args:
        delta: target - current temperature (°C)
        currently_heating: Whether the previous decision was to heat
        hysteresis_low: Heat when delta exceeds this
        hysteresis_high: Stop when delta drops below minus this

    Returns:
        True to heat. Inside the dead band [-hysteresis_high, hysteresis_low]
        the previous decision is kept.
    """
    if delta > hysteresis_low:
        return True
    if delta < -hysteresis_high:
        return False
    return currently_heating


class ThermostatController:
    """
    Single-zone thermostat driving a remote relay.

    Mutating operations are serialized by an internal lock. The observer is
    called synchronously, on the caller's thread, whenever the heating state
    changes.
    """

    def __init__(
        self,
        config: ThermostatConfig,
        client: ActuatorClient,
        observer: Optional[ThermostatObserver] = None,
    ):
        """Initialize controller and probe the actuator once.

        An unreachable actuator does not fail construction; the controller
        starts in the ERROR state instead.

        Args:
            config: Thermostat parameters
            client: Actuator client for the relay device
            observer: Optional state change observer
        """
        self.config = config
        self.client = client
        self._channel = config.relay_channel
        self._observer = observer
        self._state = ThermostatState(target_temp=config.target_temp)
        self._lock = threading.RLock()

        logger.info("Initializing thermostat controller...")
        logger.info(f"Actuator host: {client.host}, Relay: {self._channel}")

        with self._lock:
            self._probe()

        logger.info("Thermostat controller initialized")

    def _probe(self) -> None:
        try:
            status = self.client.get_status()
        except ActuatorUnreachableError as e:
            logger.warning(f"Actuator is offline or unreachable: {e}")
            self._transition(HeatingState.ERROR, 0.0)
            return

        if not status.online:
            logger.warning("Actuator is offline or unreachable")
            self._transition(HeatingState.ERROR, 0.0)
            return

        logger.info(
            f"Actuator is online, relay {self._channel} is "
            f"{'ON' if status.output_for(self._channel) else 'OFF'}"
        )

    def _transition(self, new_state: HeatingState, power_w: float) -> None:
        """Record state and power; notify the observer on a state change."""
        old_state = self._state.heating_state
        self._state.power_w = power_w
        if new_state == old_state:
            return

        logger.info(f"State change: {old_state.value} → {new_state.value}")
        self._state.heating_state = new_state
        if self._observer is not None:
            self._observer.on_state_changed(new_state, power_w)

    def update_temperature(self, current_temp: float) -> HeatingState:
        """Feed a new temperature sample and enact the heating decision.

        Args:
            current_temp: Current temperature in °C

        Returns:
            Resulting heating state. An unreachable actuator during the status
            fetch yields ERROR without raising.

        Raises:
            CommandFailedError: If the relay command failed (state is ERROR)
        """
        with self._lock:
            self._state.current_temp = current_temp
            target = self._state.target_temp
            delta = target - current_temp

            logger.debug(
                f"Temp update: Current={current_temp:.1f}°C, Target={target:.1f}°C, "
                f"Delta={delta:.2f}°C"
            )

            should_heat = decide_heating(
                delta,
                self._state.heating_state == HeatingState.HEATING,
                self.config.hysteresis_low,
                self.config.hysteresis_high,
            )

            try:
                self.client.set_relay(self._channel, should_heat)
            except CommandFailedError:
                logger.error("Failed to control actuator relay")
                self._transition(HeatingState.ERROR, 0.0)
                raise

            # Read status for power monitoring
            try:
                status = self.client.get_status()
            except ActuatorUnreachableError as e:
                logger.warning(f"Status fetch failed: {e}")
                status = e.status

            if not status.online:
                self._transition(HeatingState.ERROR, 0.0)
                return self._state.heating_state

            power = status.power_for(self._channel)
            self._transition(HeatingState.HEATING if should_heat else HeatingState.OFF, power)

            logger.info(
                f"Furnace {'HEATING' if should_heat else 'OFF'}, Power: {power:.1f}W, "
                f"Temp: {current_temp:.1f}/{target:.1f}°C"
            )
            return self._state.heating_state

    def manual_override(self, on: bool) -> HeatingState:
        """Switch the relay directly, bypassing hysteresis.

        Raises:
            CommandFailedError: If the relay command failed (state unchanged)
        """
        logger.info(f"Manual override: {'ON' if on else 'OFF'}")
        with self._lock:
            self.client.set_relay(self._channel, on)
            self._transition(HeatingState.HEATING if on else HeatingState.OFF, 0.0)
            return self._state.heating_state

    def set_target(self, target_temp: float) -> bool:
        """Set the target temperature.

        Takes effect on the next temperature update; the current heating
        state is not re-evaluated.

        Returns:
            False if the target is outside [min_target, max_target] (ignored)
        """
        if not self.config.accepts_target(target_temp):
            logger.warning(f"Invalid target temperature: {target_temp:.1f}°C (ignoring)")
            return False

        with self._lock:
            logger.info(
                f"Target temperature changed: {self._state.target_temp:.1f}°C → {target_temp:.1f}°C"
            )
            self._state.target_temp = target_temp
        return True

    def register_observer(self, observer: Optional[ThermostatObserver]) -> None:
        """Register the state observer, replacing any previous one."""
        with self._lock:
            self._observer = observer

    def set_actuator_host(self, host: str) -> None:
        """Point the controller at a different actuator address."""
        with self._lock:
            self.client.set_host(host)

    @property
    def state(self) -> HeatingState:
        return self._state.heating_state

    @property
    def target_temp(self) -> float:
        return self._state.target_temp

    @property
    def power_w(self) -> float:
        return self._state.power_w

    @property
    def current_temp(self) -> Optional[float]:
        return self._state.current_temp

    @property
    def channel(self) -> int:
        return self._channel

    @property
    def endpoint(self) -> ActuatorEndpoint:
        return ActuatorEndpoint(host=self.client.host, channel=self._channel)

    def snapshot(self) -> ThermostatState:
        """Copy of the current thermostat state."""
        with self._lock:
            return replace(self._state)

    def __repr__(self) -> str:
        return (
            f"ThermostatController(target={self._state.target_temp}°C, "
            f"state={self._state.heating_state.value}, power={self._state.power_w}W)"
        )
