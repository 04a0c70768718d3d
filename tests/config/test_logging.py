"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from amctl.config.logging import bind_request_context, configure_logging
from amctl.domain.types import Transport


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    am = logging.getLogger("amctl")
    am_level = am.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    am.setLevel(am_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("amctl").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("amctl").level == logging.WARNING

    def test_human_mode_output(self) -> None:
        configure_logging(verbose=True, log_json=False)
        log = structlog.get_logger("amctl.test")
        log.warning("hello world", key="val")
        # Smoke test — verify no exception; format depends on terminal

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("amctl.test")
        log.warning("json test", answer=42)
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "amctl.test"
        assert "timestamp" in parsed

    def test_stdlib_amctl_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)

        logging.getLogger("amctl.plugins.manager").debug("Registered plugin: sample")

        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "Registered plugin: sample"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "amctl.plugins.manager"
        assert "timestamp" in parsed

    def test_third_party_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)

        logging.getLogger("pluggy").debug("hook noise")

        captured = capfd.readouterr()
        assert captured.err == ""

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        root = logging.getLogger()
        assert len(root.handlers) == 1

    def test_explicit_level(self) -> None:
        configure_logging(level=logging.INFO)
        assert logging.getLogger("amctl").level == logging.INFO

    def test_verbose_beats_level(self) -> None:
        configure_logging(verbose=True, level=logging.INFO)
        assert logging.getLogger("amctl").level == logging.DEBUG

    def test_json_mode_renders_exceptions(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        try:
            raise ValueError("broken handler")
        except ValueError:
            logging.getLogger("amctl.bridge.router").exception("Handler failed")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Handler failed"
        assert "broken handler" in parsed["exception"]

    def test_request_context_is_merged(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        with bind_request_context("PING", Transport.SOCKET):
            logging.getLogger("amctl.bridge.router").debug("Received PING")
        logging.getLogger("amctl.bridge.router").debug("after")
        first, second = (json.loads(line) for line in capfd.readouterr().err.splitlines())
        assert first["verb"] == "PING"
        assert first["transport"] == "socket"
        assert "verb" not in second
