"""Tests for countdown.logging."""

from __future__ import annotations

import logging

import pytest

from countdown.logging import ContextualLogger, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    def test_writes_rotating_file(self, tmp_path, restore_root_logger):
        path = setup_logging(log_level="DEBUG", log_dir=str(tmp_path / "logs"))

        get_logger("countdown.test").info("hello file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert path == tmp_path / "logs" / "countdown.log"
        assert "hello file" in path.read_text(encoding="utf-8")

    def test_repeat_call_replaces_handlers(self, tmp_path, restore_root_logger):
        setup_logging(log_dir=str(tmp_path))
        setup_logging(log_dir=str(tmp_path))
        assert len(logging.getLogger().handlers) == 2

    def test_unknown_level_falls_back_to_info(self, tmp_path, restore_root_logger):
        setup_logging(log_level="CHATTY", log_dir=str(tmp_path))
        assert logging.getLogger().level == logging.INFO


class TestContextualLogger:
    def test_prefix(self, caplog):
        log = ContextualLogger(get_logger("countdown.ctx"), url="https://example.com/d")
        with caplog.at_level(logging.INFO, logger="countdown.ctx"):
            log.info("Fetching %s", "now")
        assert caplog.messages == ["[url=https://example.com/d] Fetching now"]

    def test_no_context_no_prefix(self, caplog):
        log = ContextualLogger(get_logger("countdown.ctx"))
        with caplog.at_level(logging.WARNING, logger="countdown.ctx"):
            log.warning("plain")
        assert caplog.messages == ["plain"]

    def test_caller_is_reported(self, caplog):
        log = ContextualLogger(get_logger("countdown.ctx"), k="v")
        with caplog.at_level(logging.WARNING, logger="countdown.ctx"):
            log.warning("boom")
        assert caplog.records[0].funcName == "test_caller_is_reported"
