"""Tests for CountdownConfig and SystemConfig Pydantic models."""

import math

import pytest
from pydantic import ValidationError

from countdown.core.models.config import (
    DEFAULT_FETCH_URL,
    CountdownConfig,
    SystemConfig,
    format_seconds,
    validate_interval,
)


class TestValidateInterval:
    @pytest.mark.parametrize("value", [0, -1, -0.5, math.nan, math.inf])
    def test_rejects(self, value):
        with pytest.raises(ValueError):
            validate_interval(value)

    def test_accepts_strings(self):
        assert validate_interval("2.5") == 2.5


class TestCountdownConfig:
    def test_defaults(self):
        cfg = CountdownConfig()
        assert cfg.fetch_url == DEFAULT_FETCH_URL
        assert cfg.fetch_seconds == 60
        assert cfg.enable_notification is False
        assert cfg.launch_at_login is False

    def test_persisted_keys(self):
        cfg = CountdownConfig.model_validate(
            {
                "fetchURLString": "https://example.com/date.txt",
                "fetchSeconds": "30",
                "enableNotification": True,
                "launchAtLogin": True,
            }
        )
        assert cfg.fetch_url == "https://example.com/date.txt"
        assert cfg.fetch_seconds == 30.0
        assert cfg.enable_notification is True
        assert cfg.launch_at_login is True

    def test_field_names_also_accepted(self):
        cfg = CountdownConfig(fetch_seconds=5)
        assert cfg.fetch_seconds == 5.0

    def test_dump_uses_persisted_keys(self):
        dumped = CountdownConfig(fetch_seconds=90).model_dump(by_alias=True)
        assert dumped == {
            "fetchURLString": DEFAULT_FETCH_URL,
            "fetchSeconds": "90",
            "enableNotification": False,
            "launchAtLogin": False,
        }

    def test_fractional_seconds_dump(self):
        assert CountdownConfig(fetch_seconds=0.5).model_dump(by_alias=True)["fetchSeconds"] == "0.5"

    @pytest.mark.parametrize("seconds", [0.1234567, 1e-7, 2.5, 1e6])
    def test_interval_round_trips_exactly(self, seconds):
        stored = CountdownConfig(fetch_seconds=seconds).model_dump(by_alias=True)
        assert CountdownConfig.model_validate(stored).fetch_seconds == seconds

    def test_format_seconds(self):
        assert format_seconds(60.0) == "60"
        assert format_seconds(0.1234567) == "0.1234567"

    @pytest.mark.parametrize("seconds", ["0", "-5", "abc", "nan", "inf", 0])
    def test_bad_interval_rejected(self, seconds):
        with pytest.raises(ValidationError):
            CountdownConfig.model_validate({"fetchSeconds": seconds})

    @pytest.mark.parametrize("url", ["", "not a url", "ftp://example.com/x"])
    def test_bad_url_rejected(self, url):
        with pytest.raises(ValidationError):
            CountdownConfig(fetch_url=url)

    def test_url_is_stripped(self):
        assert CountdownConfig(fetch_url=" https://example.com/d ").fetch_url == "https://example.com/d"

    def test_extra_field_rejected(self):
        with pytest.raises(ValidationError, match="theme"):
            CountdownConfig.model_validate({"theme": "dark"})

    def test_frozen(self):
        cfg = CountdownConfig()
        with pytest.raises(ValidationError):
            cfg.fetch_seconds = 10


class TestSystemConfig:
    def test_defaults(self):
        cfg = SystemConfig()
        assert cfg.log_level == "INFO"
        assert cfg.log_dir == "logs"
        assert cfg.webui_port == 8080
        assert cfg.dev_mode is False
        assert cfg.event_bus_queue_size == 1000
        assert cfg.tick_seconds == 1.0
        assert cfg.settings_file.endswith("settings.json")

    @pytest.mark.parametrize("tick", [0, -1])
    def test_bad_tick_rejected(self, tick):
        with pytest.raises(ValidationError):
            SystemConfig(tick_seconds=tick)

    def test_extra_field_rejected(self):
        with pytest.raises(ValidationError):
            SystemConfig(nonexistent=True)
