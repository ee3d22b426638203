"""Typed topology entities and the snapshot that aggregates them.

Field aliases are the external JSON contract read by the topology
viewer (``qmgrid``, ``channelName``, ``startId`` ...). Always serialize
with ``by_alias=True``; :meth:`Snapshot.to_payload` does this.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from mqtopo.domain.types import ReposType

_ENTITY_CONFIG: dict[str, Any] = {"frozen": True, "populate_by_name": True}


class QueueManager(BaseModel):
    """A broker instance discovered in the graph."""

    model_config = _ENTITY_CONFIG

    id: int
    qmgr_id: int = Field(alias="qmgrid")
    name: str
    repos: ReposType = ReposType.UNKNOWN
    tooltip: str = ""
    layer: int = 1
    decom: int = 0
    host: str
    host2: str = ""
    multi: int = 0


class Application(BaseModel):
    """A client program connected to one or more queue managers."""

    model_config = _ENTITY_CONFIG

    id: int
    app_id: int = Field(alias="appid")
    name: str
    owner: str
    tooltip: str = ""
    layer: int = 1


class Connection(BaseModel):
    """A channel between two nodes, taken from a graph relationship."""

    model_config = _ENTITY_CONFIG

    id: int
    channel_name: str = Field(alias="channelName")
    channel_type: int = Field(alias="channelType")
    start_id: int = Field(alias="startId")
    end_id: int = Field(alias="endId")


class Snapshot(BaseModel):
    """Deduplicated topology: queue managers, applications, connections.

    Each collection is in first-discovery order and holds every
    identity at most once.
    """

    model_config = _ENTITY_CONFIG

    queue_managers: list[QueueManager] = Field(default_factory=list, alias="queuemanagers")
    applications: list[Application] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.queue_managers or self.applications or self.connections)

    def counts(self) -> dict[str, int]:
        return {
            "queuemanagers": len(self.queue_managers),
            "applications": len(self.applications),
            "connections": len(self.connections),
        }

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict using the external field names."""
        return self.model_dump(mode="json", by_alias=True)
