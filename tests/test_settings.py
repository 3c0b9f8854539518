"""Tests for configuration loading and validation."""

import json

import pytest

from furnace.exceptions import ConfigurationError
from furnace.settings import AppSettings, ThermostatConfig, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("FURNACE_ACTUATOR_HOST", "HA_URL", "HA_TOKEN", "FURNACE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestThermostatConfig:
    def test_defaults(self):
        config = ThermostatConfig()

        assert config.target_temp == 20.0
        assert config.hysteresis_low == 0.5
        assert config.hysteresis_high == 0.3
        assert config.relay_channel == 0
        assert (config.min_target, config.max_target) == (15.0, 30.0)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"relay_channel": 2},
            {"relay_channel": -1},
            {"hysteresis_high": 0.0},
            {"hysteresis_high": -0.1},
            {"hysteresis_low": 0.3, "hysteresis_high": 0.3},
            {"hysteresis_low": 0.2, "hysteresis_high": 0.3},
            {"target_temp": 14.0},
            {"target_temp": 31.0},
            {"min_target": 25.0, "max_target": 20.0},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            ThermostatConfig(**kwargs)

    @pytest.mark.parametrize("channel", [True, False, 0.0, 1.0, "0", None])
    def test_relay_channel_must_be_int(self, channel):
        with pytest.raises(ConfigurationError):
            ThermostatConfig(relay_channel=channel)

    def test_relay_channel_float_from_yaml_rejected(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(
            "options:\n"
            "  actuator_host: 10.0.0.3\n"
            "  thermostat:\n"
            "    relay_channel: 0.0\n"
        )

        with pytest.raises(ConfigurationError):
            load_settings(str(tmp_path / "missing.json"), str(config))

    def test_is_immutable(self):
        config = ThermostatConfig()

        with pytest.raises(AttributeError):
            config.target_temp = 25.0

    def test_from_dict_camel_case(self):
        config = ThermostatConfig.from_dict(
            {"targetTemp": 22.0, "hysteresisLow": 0.8, "hysteresisHigh": 0.4, "relayChannel": 1}
        )

        assert config == ThermostatConfig(
            target_temp=22.0, hysteresis_low=0.8, hysteresis_high=0.4, relay_channel=1
        )

    def test_from_dict_short_keys(self):
        config = ThermostatConfig.from_dict({"target": 19.5, "channel": 1})

        assert config.target_temp == 19.5
        assert config.relay_channel == 1

    def test_from_dict_unknown_key(self):
        with pytest.raises(ConfigurationError):
            ThermostatConfig.from_dict({"pid_gain": 1.0})


class TestAppSettings:
    def test_from_dict(self):
        settings = AppSettings.from_dict(
            {
                "actuatorHost": "192.168.0.111",
                "pollIntervalSeconds": 10,
                "thermostat": {"targetTemp": 21.0},
            }
        )

        assert settings.actuator_host == "192.168.0.111"
        assert settings.poll_interval_seconds == 10
        assert settings.thermostat.target_temp == 21.0
        assert settings.request_timeout == 5.0

    def test_missing_host(self):
        with pytest.raises(ConfigurationError):
            AppSettings.from_dict({"thermostat": {}})


class TestLoadSettings:
    def test_options_json(self, tmp_path):
        options = tmp_path / "options.json"
        options.write_text(
            json.dumps({"actuator_host": "10.0.0.2", "thermostat": {"relay_channel": 1}})
        )

        settings = load_settings(str(options))

        assert settings.actuator_host == "10.0.0.2"
        assert settings.thermostat.relay_channel == 1

    def test_config_yaml_fallback(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(
            "name: Furnace\n"
            "options:\n"
            "  actuator_host: 10.0.0.3\n"
            "  temperature_entity: sensor.room\n"
            "  thermostat:\n"
            "    target_temp: 19.0\n"
        )

        settings = load_settings(str(tmp_path / "missing.json"), str(config))

        assert settings.actuator_host == "10.0.0.3"
        assert settings.temperature_entity == "sensor.room"
        assert settings.thermostat.target_temp == 19.0

    def test_environment_overrides(self, tmp_path, monkeypatch):
        options = tmp_path / "options.json"
        options.write_text(json.dumps({"actuatorHost": "10.0.0.2"}))
        monkeypatch.setenv("FURNACE_ACTUATOR_HOST", "10.0.0.9")
        monkeypatch.setenv("HA_TOKEN", "secret")

        settings = load_settings(str(options))

        assert settings.actuator_host == "10.0.0.9"
        assert settings.ha_token == "secret"

    def test_environment_only(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FURNACE_ACTUATOR_HOST", "10.0.0.4")

        settings = load_settings(str(tmp_path / "missing.json"))

        assert settings.actuator_host == "10.0.0.4"
        assert settings.thermostat == ThermostatConfig()

    def test_nothing_configured(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings(str(tmp_path / "missing.json"))
