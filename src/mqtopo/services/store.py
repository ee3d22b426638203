"""Aggregation stores and snapshot assembly.

Each :class:`EntityStore` keeps an identity lookup and an
insertion-ordered list that always hold the same members. Insertion is
first-writer-wins: a later rediscovery of an identity never replaces the
stored entity, so the layer recorded at first discovery sticks.

Stores are created per traversal and never shared between calls.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from mqtopo.domain.entities import Application, Connection, QueueManager, Snapshot


class _Identified(Protocol):
    @property
    def id(self) -> int: ...


class EntityStore[T: _Identified]:
    """Identity-keyed, insertion-ordered collection of one entity kind."""

    def __init__(self) -> None:
        self._by_id: dict[int, T] = {}
        self._ordered: list[T] = []

    def insert_if_absent(self, entity: T) -> bool:
        """Add *entity* unless its identity is already present.

        Returns True if the entity was added.
        """
        if entity.id in self._by_id:
            return False
        self._by_id[entity.id] = entity
        self._ordered.append(entity)
        return True

    def get(self, entity_id: int) -> T | None:
        return self._by_id.get(entity_id)

    def items(self) -> list[T]:
        """A copy of the members in first-discovery order."""
        return list(self._ordered)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._by_id

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self) -> Iterator[T]:
        return iter(self._ordered)


class TopologyStore:
    """The three aggregation stores of one traversal."""

    def __init__(self) -> None:
        self.queue_managers: EntityStore[QueueManager] = EntityStore()
        self.applications: EntityStore[Application] = EntityStore()
        self.connections: EntityStore[Connection] = EntityStore()

    def add_entity(self, entity: QueueManager | Application) -> bool:
        """Route a classified node record to its store."""
        if isinstance(entity, QueueManager):
            return self.queue_managers.insert_if_absent(entity)
        return self.applications.insert_if_absent(entity)

    def add_connection(self, connection: Connection) -> bool:
        return self.connections.insert_if_absent(connection)

    def snapshot(self) -> Snapshot:
        """Assemble the stores' ordered contents into a :class:`Snapshot`."""
        return Snapshot(
            queue_managers=self.queue_managers.items(),
            applications=self.applications.items(),
            connections=self.connections.items(),
        )
