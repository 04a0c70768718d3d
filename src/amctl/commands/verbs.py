"""amctl verbs — list the dispatch table."""

from __future__ import annotations

import click

from amctl.commands._base import AmCommand
from amctl.commands._context import AppContext


@click.command(
    cls=AmCommand,
    examples="""\
  amctl verbs
  amctl --json verbs""",
)
@click.pass_obj
def verbs(app: AppContext) -> None:
    """Show every verb the bridge understands."""
    from amctl.bridge.daemon import Bridge
    from amctl.output.formatters import format_verbs
    from amctl.plugins.manager import PluginManager

    bridge = Bridge(app.settings, plugin_manager=PluginManager())
    click.echo(format_verbs(bridge.router.table, json_output=app.settings.json_output))
