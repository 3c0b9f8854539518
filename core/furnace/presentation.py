"""
Status presentation helpers.

Turns controller state into the strings and colours shown by display
collaborators, and keeps a short in-memory list of recent transitions.
"""

import threading
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

from .models import HeatingState

# UI colours (RGB hex)
COLOR_FURNACE_HEATING = 0xFF0000
COLOR_FURNACE_OFF = 0x808080
COLOR_FURNACE_ERROR = 0xFF6600

ERROR_TEXT = "ERROR"


@dataclass(frozen=True)
class StatusStyle:
    """Label and colour for a heating state."""

    label: str
    color: int

    @property
    def color_hex(self) -> str:
        return f"#{self.color:06X}"


STATUS_STYLES = {
    HeatingState.HEATING: StatusStyle("HEATING", COLOR_FURNACE_HEATING),
    HeatingState.OFF: StatusStyle("OFF", COLOR_FURNACE_OFF),
    HeatingState.ERROR: StatusStyle("ERROR", COLOR_FURNACE_ERROR),
}


def status_style(state: HeatingState) -> StatusStyle:
    return STATUS_STYLES[state]


def format_temperature(value: Optional[float]) -> str:
    return ERROR_TEXT if value is None else f"{value:.1f}°C"


def format_humidity(value: Optional[float]) -> str:
    return ERROR_TEXT if value is None else f"{value:.1f}%"


def format_target(value: float) -> str:
    return f"Target: {value:.1f}°C"


@dataclass
class TransitionEvent:
    """A heating state transition."""

    timestamp: str  # ISO format
    state: str
    label: str
    power_w: float


class StatusBoard:
    """Observer that tracks the latest furnace status for display."""

    def __init__(self, max_events: int = 100):
        self.style = status_style(HeatingState.OFF)
        self.state = HeatingState.OFF
        self.power_w = 0.0
        self.events: deque[TransitionEvent] = deque(maxlen=max_events)
        self.lock = threading.Lock()

    def sync(self, state: HeatingState, power_w: float) -> None:
        """Align with a controller's state without recording a transition."""
        with self.lock:
            self.state = state
            self.style = status_style(state)
            self.power_w = power_w

    def on_state_changed(self, state: HeatingState, power_w: float) -> None:
        event = TransitionEvent(
            timestamp=datetime.now(timezone.utc).isoformat(),
            state=state.value,
            label=status_style(state).label,
            power_w=power_w,
        )
        with self.lock:
            self.state = state
            self.style = status_style(state)
            self.power_w = power_w
            self.events.append(event)

    def get_events(self, limit: Optional[int] = None) -> list[dict]:
        """Most recent transitions, oldest first."""
        with self.lock:
            events = list(self.events)
        if limit is not None:
            events = events[-limit:] if limit > 0 else []
        return [asdict(e) for e in events]
