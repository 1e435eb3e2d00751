"""Root logger configuration and a context-prefixing logger wrapper.

The package is named ``countdown.logging``, so the stdlib module is always
imported here as ``_logging``.
"""

from __future__ import annotations

import logging as _logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are chatty at INFO.
_NOISY_LOGGERS = ("urllib3", "uvicorn.access", "watchfiles")


def setup_logging(
    log_level: str = "INFO",
    log_dir: str = "logs",
    max_bytes: int = 2 * 1024 * 1024,
    backup_count: int = 2,
    log_file: str = "countdown.log",
) -> Path:
    """Send records to stderr and to a rotating file under *log_dir*.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        log_level: Level name; unknown names fall back to INFO.
        log_dir: Directory for the log file, created when missing.
        max_bytes: Rotation threshold per file.
        backup_count: Rotated files to keep.
        log_file: File name inside *log_dir*.

    Returns:
        Path of the active log file.
    """
    level = _logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = _logging.INFO

    root = _logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)

    formatter = _logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)

    stream = _logging.StreamHandler()
    stream.setFormatter(formatter)
    root.addHandler(stream)

    directory = Path(log_dir).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / log_file
    rotating = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    rotating.setFormatter(formatter)
    root.addHandler(rotating)

    if level > _logging.DEBUG:
        for name in _NOISY_LOGGERS:
            _logging.getLogger(name).setLevel(max(level, _logging.WARNING))
    return path


def get_logger(name: str) -> _logging.Logger:
    return _logging.getLogger(name)


class ContextualLogger:
    """Prefixes each message with ``[key=value]`` pairs.

    Usage::

        log = ContextualLogger(get_logger(__name__), url="https://example.com/date.txt")
        log.info("Fetching")  # => "[url=https://example.com/date.txt] Fetching"
    """

    def __init__(self, logger: _logging.Logger, **context: Any) -> None:
        self._logger = logger
        self._prefix = "[" + " ".join(f"{k}={v}" for k, v in context.items()) + "]" if context else ""

    def log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._prefix:
            msg = f"{self._prefix} {msg}"
        kwargs.setdefault("stacklevel", 2)
        self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("stacklevel", 3)
        self.log(_logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("stacklevel", 3)
        self.log(_logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("stacklevel", 3)
        self.log(_logging.WARNING, msg, *args, **kwargs)
