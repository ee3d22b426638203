"""QueryExecutor — the contract services use to reach the graph store.

An executor hands out one scoped session per traversal. Sessions run a
query synchronously and return fully materialized records, so a query
either contributes all of its records or fails before any are seen.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import AbstractContextManager
from typing import Any, Protocol

from mqtopo.domain.graph import Record


class GraphStoreError(Exception):
    """Base class for graph store failures."""


class GraphConnectionError(GraphStoreError):
    """The graph store cannot be reached or rejected the credentials."""


class QueryExecutionError(GraphStoreError):
    """A query failed to execute."""

    def __init__(self, message: str, *, query: str, parameters: Mapping[str, Any] | None = None):
        super().__init__(message)
        self.query = query
        self.parameters = dict(parameters or {})


class QuerySession(Protocol):
    """A live session able to run one query at a time."""

    def execute(self, query: str, parameters: Mapping[str, Any] | None = None) -> list[Record]:
        """Run *query* and return its records.

        Raises:
            QueryExecutionError: The query failed.
        """
        ...


class QueryExecutor(Protocol):
    """Source of scoped query sessions."""

    def session(self) -> AbstractContextManager[QuerySession]:
        """Open a session, released when the context exits.

        Raises:
            GraphConnectionError: The store is unreachable.
        """
        ...
