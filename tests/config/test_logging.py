"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from servicekit.config.logging import configure_logging
from servicekit.domain.fields import Input
from servicekit.services.base import Service


class Traced(Service):
    name = Input(str)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    sk = logging.getLogger("servicekit")
    sk_level = sk.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    sk.setLevel(sk_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("servicekit").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("servicekit").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("servicekit.test")
        log.warning("json test", answer=42)
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "servicekit.test"
        assert "timestamp" in parsed

    def test_service_call_event_when_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        Traced.call(name="Ada")
        lines = [json.loads(line) for line in capfd.readouterr().err.strip().splitlines()]
        events = [line for line in lines if line["event"] == "service.call"]
        assert len(events) == 1
        assert events[0]["service"] == Traced.service_path()
        assert events[0]["success"] is True

    def test_service_call_silent_when_quiet(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        Traced.call(name="Ada")
        captured = capfd.readouterr()
        assert "service.call" not in captured.err
        assert "service.call" not in captured.out
