"""Configuration: process config loader and the user settings store."""

from countdown.config.config_manager import load_config
from countdown.config.settings_store import SettingsStore

__all__ = [
	"load_config",
	"SettingsStore",
]
