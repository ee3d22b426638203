"""Command: look up the MQ channel type code for a relationship name."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mqtopo.commands._base import MqCommand
from mqtopo.services.channels import describe_channel

if TYPE_CHECKING:
    from mqtopo.commands._context import AppContext


@click.command(
    "channel-type",
    cls=MqCommand,
    examples="""\
  mqtopo channel-type SVRCONN
  mqtopo --json channel-type CLUSTER_SENDER""",
)
@click.argument("name")
@click.pass_obj
def channel_type(app: AppContext, name: str) -> None:
    """Show the channel type code for relationship type NAME."""
    app.emit(describe_channel(name))
