"""Raw graph shapes returned by a query executor.

These are read-only views of what the graph store hands back. A result
record holds one or more positional values, each of which may be a
:class:`RawPath`, a bare :class:`RawNode` (queries without a relationship
pattern, e.g. a filtered single-node ``MATCH``) or a bare
:class:`RawRelationship`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from mqtopo.domain.properties import PropertyValue

type Record = Sequence[object]


@dataclass(frozen=True)
class RawNode:
    """A graph node: store-assigned identity, ordered labels, properties."""

    id: int
    labels: tuple[str, ...] = ()
    properties: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @property
    def primary_label(self) -> str | None:
        """First label, the only one used for classification."""
        return self.labels[0] if self.labels else None

    def get(self, key: str) -> PropertyValue:
        return PropertyValue.of(self.properties.get(key))


@dataclass(frozen=True)
class RawRelationship:
    """A typed, directed relationship between two node identities."""

    id: int
    type: str
    start_id: int
    end_id: int


@dataclass(frozen=True)
class RawPath:
    """An ordered node sequence with the relationships that connect it."""

    nodes: tuple[RawNode, ...] = ()
    relationships: tuple[RawRelationship, ...] = ()


def split_record(values: Iterable[object]) -> tuple[list[RawNode], list[RawRelationship]]:
    """Flatten a record's positional values into nodes and relationships.

    Paths contribute all of their nodes and relationships in path order.
    Scalar values (counts, strings) are ignored.
    """
    nodes: list[RawNode] = []
    relationships: list[RawRelationship] = []
    for value in values:
        if isinstance(value, RawPath):
            nodes.extend(value.nodes)
            relationships.extend(value.relationships)
        elif isinstance(value, RawNode):
            nodes.append(value)
        elif isinstance(value, RawRelationship):
            relationships.append(value)
    return nodes, relationships
