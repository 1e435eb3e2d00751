"""Thread-safe key/value store for the user settings.

Persists the four user keys (``fetchURLString``, ``fetchSeconds``,
``enableNotification``, ``launchAtLogin``) to a JSON file.  Missing keys
fall back to the defaults on :class:`CountdownConfig`.  Every commit is
validated as a whole before anything is written, and writes are atomic.

The file is located by checking (in order):
1. the *path* passed to the constructor
2. ``COUNTDOWN_SETTINGS_FILE`` environment variable
3. ``~/.config/menubar-countdown/settings.json``
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from countdown.core.errors import ConfigurationError
from countdown.core.models.config import CountdownConfig

_log = logging.getLogger(__name__)

_DEFAULT_PATH = "~/.config/menubar-countdown/settings.json"


def _atomic_write_json(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f"{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with open(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, sort_keys=True)
            handle.write("\n")
        Path(tmp_name).replace(path)
    finally:
        tmp_path = Path(tmp_name)
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    err = errors[0]
    field = ".".join(str(p) for p in err.get("loc", ())) or "settings"
    return f"{field}: {err.get('msg', 'invalid value')}"


class SettingsStore:
    """Durable, lazily-loaded user settings.

    Args:
        path: Settings file location.  See the module docstring for the
            fallback order.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = self._resolve_path(path)
        self._lock = threading.Lock()
        self._loaded = False
        self._store: dict[str, Any] = {}

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Return the raw stored value for *key* (an alias such as ``fetchSeconds``)."""
        self._ensure_loaded()
        with self._lock:
            return self._store.get(key, default)

    def resolve(self) -> tuple[CountdownConfig, dict[str, str]]:
        """Return the stored configuration with unusable values set to defaults.

        A hand-edited file such as ``{"fetchSeconds": "0"}`` keeps its valid
        keys; only the bad ones fall back.

        Returns:
            The configuration, and a mapping of persisted key to error
            message for every value that was replaced.  The mapping is
            empty when the stored settings are fully valid.
        """
        self._ensure_loaded()
        with self._lock:
            raw = dict(self._store)
        try:
            return CountdownConfig.model_validate(raw), {}
        except ValidationError as exc:
            problems = {
                str(err["loc"][0]): err.get("msg", "invalid value")
                for err in exc.errors()
                if err.get("loc")
            }

        for key, msg in problems.items():
            _log.warning("Ignoring stored %s=%r: %s", key, raw.get(key), msg)
        usable = {k: v for k, v in raw.items() if k not in problems}
        return CountdownConfig.model_validate(usable), problems

    def commit(self, **changes: Any) -> CountdownConfig:
        """Validate and persist *changes* (field names, e.g. ``fetch_url=...``).

        Nothing is written if the merged settings do not validate.

        Returns:
            The new validated configuration.

        Raises:
            ConfigurationError: On a malformed URL, a non-positive interval
                or an unknown field.
        """
        self._ensure_loaded()
        aliases = {name: field.alias or name for name, field in CountdownConfig.model_fields.items()}
        unknown = set(changes) - set(aliases)
        if unknown:
            raise ConfigurationError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

        with self._lock:
            merged = dict(self._store)
            for name, value in changes.items():
                merged[aliases[name]] = value
            try:
                validated = CountdownConfig.model_validate(merged)
            except ValidationError as exc:
                raise ConfigurationError(_first_error(exc)) from exc

            self._store = validated.model_dump(by_alias=True)
            _atomic_write_json(self._path, self._store)

        _log.info("Settings committed: %s", ", ".join(sorted(changes)))
        return validated

    def reload(self) -> None:
        """Forget the cached values; the next read goes back to disk."""
        with self._lock:
            self._loaded = False
            self._store = {}

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            self._store = self._read_file()
            self._loaded = True

    def _read_file(self) -> dict[str, Any]:
        if not self._path.is_file():
            _log.info("No settings file at %s — using defaults", self._path)
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            _log.exception("Could not read settings file %s — using defaults", self._path)
            return {}
        if not isinstance(raw, dict):
            _log.warning("Settings file %s is not a JSON object — ignoring", self._path)
            return {}
        known = {field.alias or name for name, field in CountdownConfig.model_fields.items()}
        return {k: v for k, v in raw.items() if k in known}

    @staticmethod
    def _resolve_path(path: Path | str | None) -> Path:
        if path is not None:
            return Path(path).expanduser()
        env = os.environ.get("COUNTDOWN_SETTINGS_FILE")
        return Path(env or _DEFAULT_PATH).expanduser()
