"""Tests for the serve command."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from amctl.cli import cli


class TestServeCommand:
    """Tests for amctl serve."""

    def test_serve_registered(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert "serve" in result.output

    def test_serve_help_shows_transport_switches(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["serve", "--help"])
        assert "--no-socket" in result.output
        assert "--no-poller" in result.output

    @pytest.mark.usefixtures("_isolated_home")
    def test_both_transports_disabled(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["serve", "--no-socket", "--no-poller"])
        assert result.exit_code == 2
        assert "At least one transport must be enabled" in result.output

    @pytest.mark.usefixtures("_isolated_home")
    def test_serve_runs_bridge(self, cli_runner: CliRunner) -> None:
        with (
            patch("amctl.commands.serve._install_signal_handlers") as install,
            patch("amctl.bridge.daemon.Bridge.run_forever") as run_forever,
        ):
            result = cli_runner.invoke(cli, ["serve", "--no-poller"])

        assert result.exit_code == 0, result.output
        install.assert_called_once()
        run_forever.assert_called_once()

    @pytest.mark.usefixtures("_isolated_home")
    def test_transport_switches_reach_bridge(self, cli_runner: CliRunner) -> None:
        from amctl.bridge.daemon import Bridge

        seen: list[Bridge] = []

        def capture(self: Bridge, stop: object = None) -> None:
            seen.append(self)

        with (
            patch("amctl.commands.serve._install_signal_handlers"),
            patch.object(Bridge, "run_forever", capture),
        ):
            result = cli_runner.invoke(cli, ["serve", "--no-socket"])

        assert result.exit_code == 0, result.output
        (bridge,) = seen
        assert bridge.listener is None
        assert bridge.poller is not None

    @pytest.mark.usefixtures("_isolated_home")
    def test_bridge_failure_reported(self, cli_runner: CliRunner) -> None:
        with (
            patch("amctl.commands.serve._install_signal_handlers"),
            patch(
                "amctl.bridge.daemon.Bridge.run_forever",
                side_effect=RuntimeError("Another bridge is already listening"),
            ),
        ):
            result = cli_runner.invoke(cli, ["serve"])

        assert result.exit_code == 1
        assert "Another bridge is already listening" in result.output
