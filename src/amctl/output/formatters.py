"""Plain-line, JSON, and table renderers.

A Response prints as its wire line by default so shell callers can keep
matching on the ``OK:``/``ERROR:`` prefix; ``--json`` dumps the model.
"""

from __future__ import annotations

import json as _json
from collections.abc import Mapping
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from amctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from amctl.services.base import HandlerDescriptor
    from amctl.services.result import Response


def format_response(response: Response, *, json_output: bool = False) -> str:
    if json_output:
        return response.model_dump_json(indent=2)
    return response.render()


def format_verbs(
    table: Mapping[str, HandlerDescriptor],
    *,
    json_output: bool = False,
    no_color: bool = False,
) -> str:
    """Render the dispatch table, sorted by verb."""
    rows = [table[verb] for verb in sorted(table)]
    if json_output:
        payload = [
            {
                "verb": d.verb,
                "context": d.context.value,
                "usage": d.usage,
                "summary": d.summary,
            }
            for d in rows
        ]
        return _json.dumps(payload, indent=2)

    grid = Table(title="Verbs", show_lines=False)
    grid.add_column("Verb", style="am.verb", no_wrap=True)
    grid.add_column("Context")
    grid.add_column("Arguments", style="am.usage")
    grid.add_column("Description")
    for d in rows:
        style = f"am.context.{d.context.value}"
        grid.add_row(
            d.verb, f"[{style}]{d.context.value}[/]", escape(d.usage), escape(d.summary)
        )

    console = create_console(no_color=no_color)
    console.print(grid)
    return get_output(console).rstrip("\n")
