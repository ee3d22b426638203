"""Subcommand modules for mqtopo.

Provides register_commands() which uses deferred imports to keep
``mqtopo --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from mqtopo.commands.channel import channel_type
    from mqtopo.commands.ping import ping
    from mqtopo.commands.query import query

    cli.add_command(query)
    cli.add_command(channel_type)
    cli.add_command(ping)
