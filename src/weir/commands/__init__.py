"""Subcommand modules for weir.

Provides register_commands() which uses deferred imports to keep
``weir --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    from weir.commands.graph import graph
    from weir.commands.grow import grow

    cli.add_command(graph)
    cli.add_command(grow)
