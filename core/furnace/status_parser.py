"""
Actuator Status Parser

Best-effort text scan of the actuator ``/status`` body. The body is expected to
look like ``{"relays":[{"ison":true,...},{"ison":false,...}],"meters":[{"power":
12.5,...},{"power":0,...}],"tmp":{"tC":41.2,...}}`` but is never decoded as a
whole: each field is located by a fixed marker, and a missing marker only
defaults that field.
"""

import logging
import re

from .models import ActuatorStatus

logger = logging.getLogger(__name__)

RELAYS_MARKER = '"relays":[{'
METERS_MARKER = '"meters":[{'
ISON_MARKER = '"ison":'
POWER_MARKER = '"power":'
TEMPERATURE_MARKER = '"tC":'
ITEM_DELIMITER = "},{"

# Same prefix atof() accepts: sign, digits, optional fraction, optional exponent
_NUMBER_PREFIX = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


def _find(body: str, marker: str, start: int = 0) -> int:
    """Index just past ``marker`` at or after ``start``, -1 if absent."""
    if start < 0:
        return -1
    pos = body.find(marker, start)
    return pos + len(marker) if pos >= 0 else -1


def _number_at(body: str, pos: int) -> float:
    """Numeric prefix at ``pos``; 0.0 when there is none."""
    if pos < 0:
        return 0.0
    match = _NUMBER_PREFIX.match(body, pos)
    if not match:
        return 0.0
    try:
        return float(match.group(1))
    except ValueError:
        return 0.0


def _flag_at(body: str, pos: int) -> bool:
    """True if the text at ``pos`` (after whitespace) starts with ``true``."""
    if pos < 0:
        return False
    return body[pos:].lstrip().startswith("true")


def extract_number(body: str, marker: str, start: int = 0) -> float:
    """Number following the first ``marker`` at or after ``start``.

    Example: ``extract_number('{"power":123.45}', '"power":')`` -> 123.45
    """
    return _number_at(body, _find(body, marker, start))


def parse_status(body: str) -> ActuatorStatus:
    """Extract relay, power and temperature fields from a status body.

    Never raises on malformed input. The returned status is marked online;
    reachability is decided by the caller that fetched the body.
    """
    output_0 = output_1 = False
    power_0 = power_1 = 0.0

    relays_pos = _find(body, RELAYS_MARKER)
    if relays_pos >= 0:
        ison_pos = _find(body, ISON_MARKER, relays_pos)
        output_0 = _flag_at(body, ison_pos)

        # Second relay: next item after the first "ison" marker
        search_from = ison_pos if ison_pos >= 0 else relays_pos
        relay1_pos = _find(body, ITEM_DELIMITER, search_from)
        if relay1_pos >= 0:
            output_1 = _flag_at(body, _find(body, ISON_MARKER, relay1_pos))

    meters_pos = _find(body, METERS_MARKER)
    if meters_pos >= 0:
        power_0 = extract_number(body, POWER_MARKER, meters_pos)
        meter1_pos = _find(body, ITEM_DELIMITER, meters_pos)
        if meter1_pos >= 0:
            power_1 = extract_number(body, POWER_MARKER, meter1_pos)

    temperature = extract_number(body, TEMPERATURE_MARKER)

    status = ActuatorStatus(
        output_0=output_0,
        output_1=output_1,
        power_0=power_0,
        power_1=power_1,
        temperature=temperature,
        online=True,
    )
    logger.debug(
        f"Parsed status: Relay0={'ON' if output_0 else 'OFF'}, "
        f"Relay1={'ON' if output_1 else 'OFF'}, Power0={power_0:.1f}W, "
        f"Power1={power_1:.1f}W, Temp={temperature:.1f}°C"
    )
    return status
