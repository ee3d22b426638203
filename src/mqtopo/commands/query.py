"""Command: run a graph query and render the layered topology snapshot."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mqtopo.commands._base import MqCommand
from mqtopo.services.traversal import TopologyService

if TYPE_CHECKING:
    from mqtopo.commands._context import AppContext

_QUERY_EXAMPLES = """\
  mqtopo query "MATCH p=(q:QueueManager {name: 'QM1'})--() RETURN p"
  mqtopo query "MATCH p=(q:QueueManager {name: 'QM1'})--() RETURN p" --layers 3
  mqtopo query "MATCH (q:QueueManager) WHERE q.host = 'h1' RETURN q" --relationships-only
  mqtopo --json query "MATCH p=(a:Application)--() RETURN p" --no-applications"""


@click.command(cls=MqCommand, examples=_QUERY_EXAMPLES)
@click.argument("cypher")
@click.option(
    "-l",
    "--layers",
    type=int,
    default=None,
    help="Number of layers to expand (default from config).",
)
@click.option(
    "--relationships-only",
    is_flag=True,
    help="Follow-up layers only collect connections.",
)
@click.option(
    "--no-applications",
    is_flag=True,
    help="Skip application nodes.",
)
@click.pass_obj
def query(
    app: AppContext,
    cypher: str,
    layers: int | None,
    relationships_only: bool,
    no_applications: bool,
) -> None:
    """Run CYPHER and expand around discovered queue managers."""
    service = TopologyService(app.executor, app.settings.traversal)
    include_nodes = False if relationships_only else None
    include_applications = False if no_applications else None
    try:
        result = service.run_query(
            cypher,
            layers,
            include_nodes=include_nodes,
            include_applications=include_applications,
        )
    finally:
        app.close()
    app.emit(result)
