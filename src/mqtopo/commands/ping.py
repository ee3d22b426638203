"""Command: check connectivity to the graph store."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mqtopo.commands._base import MqCommand
from mqtopo.services.traversal import TopologyService

if TYPE_CHECKING:
    from mqtopo.commands._context import AppContext


@click.command(cls=MqCommand, examples="  mqtopo ping\n  mqtopo -c prod.toml ping")
@click.pass_obj
def ping(app: AppContext) -> None:
    """Verify that Neo4j is reachable with the configured credentials."""
    service = TopologyService(app.executor, app.settings.traversal)
    try:
        result = service.ping()
    finally:
        app.close()
    app.emit(result)
