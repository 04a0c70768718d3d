"""Tests for the am command."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from amctl.cli import cli


def url_file(home: Path) -> Path:
    return home / ".amctl" / "url_to_open"


@pytest.mark.usefixtures("_isolated_home")
class TestFastPath:
    def test_view_url_queued(self, cli_runner: CliRunner, short_home: Path) -> None:
        result = cli_runner.invoke(
            cli, ["am", "start", "-a", "android.intent.action.VIEW", "-d", "https://example.com"]
        )
        assert result.exit_code == 0, result.output
        assert result.output == (
            "Starting: Intent { act=android.intent.action.VIEW dat=https://example.com }\n"
        )
        assert url_file(short_home).read_text() == "https://example.com\n"

    def test_bare_url(self, cli_runner: CliRunner, short_home: Path) -> None:
        result = cli_runner.invoke(cli, ["am", "https://example.com"])
        assert result.exit_code == 0
        assert url_file(short_home).read_text() == "https://example.com\n"

    def test_no_arguments(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["am", "start"])
        assert result.exit_code == 1
        assert "ERROR: Usage: START" in result.output

    def test_bridge_down(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AMCTL_CLIENT__TIMEOUT", "0.3")
        monkeypatch.setenv("AMCTL_FOREGROUND__HANDOFF_TIMEOUT", "0.1")
        result = cli_runner.invoke(cli, ["am", "start", "-n", "com.example/.Main"])
        assert result.exit_code == 1
        assert "ERROR: Command timed out" in result.output


@pytest.mark.usefixtures("_isolated_home", "bridge")
class TestStartCommand:
    def test_component(self, cli_runner: CliRunner, fake_platform: Any) -> None:
        result = cli_runner.invoke(cli, ["am", "start", "-n", "com.example/.Main"])
        assert result.exit_code == 0, result.output
        assert result.output == (
            "Starting: Intent { act=android.intent.action.VIEW "
            "cmp=com.example/com.example.Main }\n"
        )
        assert fake_platform.actions[0].class_name == "com.example.Main"

    def test_quoted_extra(self, cli_runner: CliRunner, fake_platform: Any) -> None:
        result = cli_runner.invoke(
            cli, ["am", "start", "-a", "com.example.SEND", "--es", "text", "hello world"]
        )
        assert result.exit_code == 0, result.output
        assert fake_platform.actions[0].extras == {"text": "hello world"}

    def test_rejected(self, cli_runner: CliRunner, fake_platform: Any) -> None:
        fake_platform.accept = False
        result = cli_runner.invoke(cli, ["am", "start", "-a", "com.example.NOPE"])
        assert result.exit_code == 1
        assert "ERROR: No Activity found to handle" in result.output
