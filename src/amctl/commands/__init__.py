"""Subcommand modules for amctl.

Provides register_commands() which uses deferred imports to keep
``amctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from amctl.commands.am import am
    from amctl.commands.open_url import open_url
    from amctl.commands.send import send
    from amctl.commands.serve import serve
    from amctl.commands.verbs import verbs

    cli.add_command(serve)
    cli.add_command(send)
    cli.add_command(am)
    cli.add_command(open_url)
    cli.add_command(verbs)
