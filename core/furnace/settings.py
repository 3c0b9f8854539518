"""
Furnace Configuration Settings

Thermostat parameters and application settings.
User-facing settings are loaded from options.json (Home Assistant add-on),
config.yaml for development, and environment variables / .env.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Optional

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS_PATH = "/data/options.json"


def _camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


@dataclass(frozen=True)
class ThermostatConfig:
    """Thermostat control parameters, immutable after construction."""

    target_temp: float = 20.0  # Initial target temperature (°C)
    hysteresis_high: float = 0.3  # °C above target → heating forced off
    hysteresis_low: float = 0.5  # °C below target → heating forced on
    relay_channel: int = 0  # Actuator relay channel (0 or 1)
    min_target: float = 15.0
    max_target: float = 30.0

    def __post_init__(self):
        # bool is an int subclass; 0.0 would end up in the relay URL
        if (
            not isinstance(self.relay_channel, int)
            or isinstance(self.relay_channel, bool)
            or self.relay_channel not in (0, 1)
        ):
            raise ConfigurationError(f"Invalid relay channel: {self.relay_channel}")
        if not self.hysteresis_high > 0:
            raise ConfigurationError(
                f"hysteresis_high must be positive (got {self.hysteresis_high})"
            )
        if not self.hysteresis_low > self.hysteresis_high:
            raise ConfigurationError(
                f"hysteresis_low ({self.hysteresis_low}) must exceed "
                f"hysteresis_high ({self.hysteresis_high})"
            )
        if self.min_target > self.max_target:
            raise ConfigurationError(
                f"Invalid target range: [{self.min_target}, {self.max_target}]"
            )
        if not self.accepts_target(self.target_temp):
            raise ConfigurationError(
                f"Target temperature {self.target_temp}°C outside "
                f"[{self.min_target}, {self.max_target}]"
            )

    def accepts_target(self, target_temp: float) -> bool:
        """Whether a target temperature lies in the configured range."""
        return self.min_target <= target_temp <= self.max_target

    @classmethod
    def from_dict(cls, data: dict) -> "ThermostatConfig":
        """Create from dictionary."""
        converted = {_camel_to_snake(k): v for k, v in data.items()}

        # Accept the shorter keys used in add-on options
        if "channel" in converted:
            converted["relay_channel"] = converted.pop("channel")
        if "target" in converted:
            converted["target_temp"] = converted.pop("target")

        try:
            return cls(**converted)
        except TypeError as e:
            raise ConfigurationError(f"Invalid thermostat settings: {e}") from e


@dataclass
class AppSettings:
    """Application settings for the thermostat service."""

    actuator_host: str
    thermostat: ThermostatConfig = field(default_factory=ThermostatConfig)
    poll_interval_seconds: float = 2.0
    request_timeout: float = 5.0
    ha_url: str = "http://supervisor/core"
    ha_token: str = ""
    temperature_entity: Optional[str] = None
    humidity_entity: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        """Create from dictionary (camelCase or snake_case keys)."""
        converted = {_camel_to_snake(k): v for k, v in data.items()}

        thermostat = converted.pop("thermostat", None) or {}
        if not converted.get("actuator_host"):
            raise ConfigurationError("actuator_host is not configured")

        try:
            return cls(thermostat=ThermostatConfig.from_dict(thermostat), **converted)
        except TypeError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e


def _read_options(options_path: str, config_path: Optional[str]) -> dict:
    """Load raw options from options.json, falling back to config.yaml."""
    if options_path and os.path.exists(options_path):
        with open(options_path) as f:
            options = json.load(f)
        logger.info(f"Loaded settings from {options_path}")
        return options

    if config_path and os.path.exists(config_path):
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
        logger.info(f"Loaded settings from {config_path}")
        return config.get("options", {})

    logger.warning("No options.json or config.yaml found, using environment only")
    return {}


def load_settings(
    options_path: str = DEFAULT_OPTIONS_PATH,
    config_path: Optional[str] = None,
) -> AppSettings:
    """Load application settings.

    Sources, in order: options.json, the ``options`` mapping of config.yaml,
    then environment variables (``.env`` is loaded first). Environment
    variables override file values.

    Raises:
        ConfigurationError: If required settings are missing or invalid
    """
    options = dict(_read_options(options_path, config_path))

    load_dotenv()  # this loads from .env automatically
    env_overrides = {
        "actuator_host": os.getenv("FURNACE_ACTUATOR_HOST"),
        "ha_url": os.getenv("HA_URL"),
        "ha_token": os.getenv("HA_TOKEN"),
        "log_level": os.getenv("FURNACE_LOG_LEVEL"),
    }
    for key, value in env_overrides.items():
        if value:
            options[key] = value

    return AppSettings.from_dict(options)
