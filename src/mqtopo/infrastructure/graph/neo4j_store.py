"""Neo4j-backed query executor.

Wraps the official ``neo4j`` driver. The driver is created lazily on
the first session and verified once, so ``--help`` and config commands
never touch the network. Driver ``Node``/``Relationship``/``Path``
values are converted to :mod:`mqtopo.domain.graph` shapes; any other
value (counts, strings) is passed through unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from neo4j import GraphDatabase
from neo4j.exceptions import AuthError, DriverError, Neo4jError, ServiceUnavailable
from neo4j.graph import Node, Path, Relationship

from mqtopo.domain.graph import RawNode, RawPath, RawRelationship, Record
from mqtopo.domain.types import EntityKind
from mqtopo.infrastructure.graph.executor import GraphConnectionError, QueryExecutionError

if TYPE_CHECKING:
    from neo4j import Driver, Session

    from mqtopo.config.models import Neo4jConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Driver value conversion
# ---------------------------------------------------------------------------


_ENTITY_LABELS = frozenset(kind.value for kind in EntityKind)


def _label_order(label: str) -> tuple[bool, str]:
    return label not in _ENTITY_LABELS, label


def convert_node(node: Node) -> RawNode:
    # The driver exposes labels as an unordered frozenset. Entity labels go
    # first so extra labels never hide a QueueManager or Application.
    labels = tuple(sorted(node.labels, key=_label_order))
    return RawNode(id=node.id, labels=labels, properties=dict(node.items()))


def convert_relationship(rel: Relationship) -> RawRelationship:
    start = rel.start_node
    end = rel.end_node
    return RawRelationship(
        id=rel.id,
        type=rel.type,
        start_id=start.id if start is not None else -1,
        end_id=end.id if end is not None else -1,
    )


def convert_value(value: Any) -> Any:
    """Convert one positional record value into its raw graph shape."""
    if isinstance(value, Path):
        return RawPath(
            nodes=tuple(convert_node(n) for n in value.nodes),
            relationships=tuple(convert_relationship(r) for r in value.relationships),
        )
    if isinstance(value, Node):
        return convert_node(value)
    if isinstance(value, Relationship):
        return convert_relationship(value)
    return value


# ---------------------------------------------------------------------------
# Session and executor
# ---------------------------------------------------------------------------


class Neo4jSession:
    """A :class:`QuerySession` over one driver session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def execute(self, query: str, parameters: Mapping[str, Any] | None = None) -> list[Record]:
        try:
            result = self._session.run(query, dict(parameters or {}))
            rows = list(result)
        except (Neo4jError, DriverError) as exc:
            raise QueryExecutionError(str(exc), query=query, parameters=parameters) from exc
        return [tuple(convert_value(v) for v in row.values()) for row in rows]


class Neo4jExecutor:
    """A :class:`QueryExecutor` backed by a Neo4j driver."""

    def __init__(self, config: Neo4jConfig) -> None:
        self._config = config
        self._driver: Driver | None = None

    @property
    def driver(self) -> Driver:
        """The driver (created and verified on first access)."""
        if self._driver is None:
            self._driver = self._connect()
        return self._driver

    def _connect(self) -> Driver:
        cfg = self._config
        logger.debug("Connecting to Neo4j at %s", cfg.uri)
        kwargs: dict[str, Any] = {"connection_timeout": cfg.connection_timeout}
        if cfg.encrypted:
            kwargs["encrypted"] = True
        try:
            driver = GraphDatabase.driver(cfg.uri, auth=(cfg.username, cfg.password), **kwargs)
            driver.verify_connectivity()
        except AuthError as exc:
            raise GraphConnectionError(
                f"Authentication failed for {cfg.username}@{cfg.uri}"
            ) from exc
        except (ServiceUnavailable, DriverError, Neo4jError, ValueError) as exc:
            raise GraphConnectionError(f"Cannot reach Neo4j at {cfg.uri}: {exc}") from exc
        logger.debug("Neo4j connection verified")
        return driver

    def verify(self) -> None:
        """Force a connectivity check.

        Raises:
            GraphConnectionError: The store is unreachable.
        """
        _ = self.driver

    @contextmanager
    def session(self) -> Iterator[Neo4jSession]:
        driver = self.driver
        session = driver.session(database=self._config.database)
        logger.debug("Opened Neo4j session")
        try:
            yield Neo4jSession(session)
        finally:
            session.close()
            logger.debug("Closed Neo4j session")

    def close(self) -> None:
        if self._driver is not None:
            self._driver.close()
            self._driver = None
