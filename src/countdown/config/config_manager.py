"""Config manager — load JSON (optional) → apply env overrides → validate → SystemConfig."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from countdown.core.models.config import SystemConfig

_log = logging.getLogger(__name__)

# Environment variable → (field, type).
_ENV_OVERRIDES: dict[str, tuple[str, type]] = {
    "COUNTDOWN_LOG_LEVEL": ("log_level", str),
    "COUNTDOWN_LOG_DIR": ("log_dir", str),
    "COUNTDOWN_DEV_MODE": ("dev_mode", bool),
    "COUNTDOWN_WEBUI_PORT": ("webui_port", int),
    "COUNTDOWN_TICK_SECONDS": ("tick_seconds", float),
    "COUNTDOWN_SETTINGS_FILE": ("settings_file", str),
}


def _coerce(value: str, target_type: type) -> object:
    """Coerce a string env-var value to the expected Python type."""
    if target_type is bool:
        return value.strip().lower() in ("1", "true", "yes")
    return target_type(value)


def load_config(config_path: Path | str | None = None) -> SystemConfig:
    """Load, override, and validate the process configuration.

    Args:
        config_path: Path to a JSON file with :class:`SystemConfig` fields.
            When *None*, ``COUNTDOWN_CONFIG_FILE`` is consulted; with neither
            set, defaults are used.

    Returns:
        A fully-validated :class:`SystemConfig` instance.

    Raises:
        FileNotFoundError: If an explicitly named config file does not exist.
    """
    raw: dict[str, object] = {}
    path = _resolve_config_path(config_path)
    if path is not None:
        _log.info("Loading config from %s", path)
        raw = json.loads(path.read_text(encoding="utf-8"))

    for env_key, (field, typ) in _ENV_OVERRIDES.items():
        env_val = os.environ.get(env_key)
        if env_val is not None:
            raw[field] = _coerce(env_val, typ)
            _log.debug("Env override: %s → %s = %r", env_key, field, env_val)

    return SystemConfig(**raw)


def _resolve_config_path(config_path: Path | str | None) -> Path | None:
    if config_path is None:
        env = os.environ.get("COUNTDOWN_CONFIG_FILE")
        if not env:
            return None
        config_path = env
    p = Path(config_path)
    if not p.is_file():
        raise FileNotFoundError(
            f"Config file not found: {p}\n"
            "Create the file or unset COUNTDOWN_CONFIG_FILE to use defaults."
        )
    return p
