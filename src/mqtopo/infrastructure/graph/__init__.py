"""Query executor contract and the Neo4j-backed implementation."""

from mqtopo.infrastructure.graph.executor import (
    GraphConnectionError,
    GraphStoreError,
    QueryExecutionError,
    QueryExecutor,
    QuerySession,
)

__all__ = [
    "GraphConnectionError",
    "GraphStoreError",
    "QueryExecutionError",
    "QueryExecutor",
    "QuerySession",
]
