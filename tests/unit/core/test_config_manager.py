"""Tests for the config manager (load_config)."""

import json

import pytest

from countdown.config.config_manager import load_config
from countdown.core.models.config import SystemConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in (
        "COUNTDOWN_CONFIG_FILE",
        "COUNTDOWN_LOG_LEVEL",
        "COUNTDOWN_LOG_DIR",
        "COUNTDOWN_DEV_MODE",
        "COUNTDOWN_WEBUI_PORT",
        "COUNTDOWN_TICK_SECONDS",
        "COUNTDOWN_SETTINGS_FILE",
    ):
        monkeypatch.delenv(key, raising=False)


class TestLoadConfig:
    def test_defaults_without_file(self):
        cfg = load_config()
        assert isinstance(cfg, SystemConfig)
        assert cfg == SystemConfig()

    def test_load_custom_config(self, tmp_path):
        config_file = tmp_path / "countdown.json"
        config_file.write_text(json.dumps({"webui_port": 9090, "log_level": "DEBUG"}))
        cfg = load_config(config_file)
        assert cfg.webui_port == 9090
        assert cfg.log_level == "DEBUG"

    def test_config_file_from_env(self, tmp_path, monkeypatch):
        config_file = tmp_path / "countdown.json"
        config_file.write_text(json.dumps({"tick_seconds": 0.5}))
        monkeypatch.setenv("COUNTDOWN_CONFIG_FILE", str(config_file))
        assert load_config().tick_seconds == 0.5

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nonexistent.json")

    def test_env_override_log_level(self, tmp_path, monkeypatch):
        config_file = tmp_path / "cfg.json"
        config_file.write_text(json.dumps({"log_level": "INFO"}))
        monkeypatch.setenv("COUNTDOWN_LOG_LEVEL", "DEBUG")
        assert load_config(config_file).log_level == "DEBUG"

    @pytest.mark.parametrize("raw, expected", [("1", True), ("yes", True), ("0", False), ("off", False)])
    def test_env_override_dev_mode(self, monkeypatch, raw, expected):
        monkeypatch.setenv("COUNTDOWN_DEV_MODE", raw)
        assert load_config().dev_mode is expected

    def test_env_override_webui_port(self, monkeypatch):
        monkeypatch.setenv("COUNTDOWN_WEBUI_PORT", "3000")
        assert load_config().webui_port == 3000

    def test_env_override_settings_file(self, monkeypatch):
        monkeypatch.setenv("COUNTDOWN_SETTINGS_FILE", "/tmp/other.json")
        assert load_config().settings_file == "/tmp/other.json"

    def test_invalid_tick_rejected(self, monkeypatch):
        monkeypatch.setenv("COUNTDOWN_TICK_SECONDS", "0")
        with pytest.raises(ValueError):
            load_config()
