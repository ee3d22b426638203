"""Shared pytest fixtures and test helpers for mqtopo tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from mqtopo.config.models import DEFAULT_EXPAND_QUERY
from mqtopo.domain.graph import RawNode, RawPath, RawRelationship, Record
from mqtopo.services.telemetry import disable_telemetry

type Response = list[Record] | Exception


# ---------------------------------------------------------------------------
# Raw graph builders
# ---------------------------------------------------------------------------


def qm_node(node_id: int, qmid: int, name: str, host: str = "h1", **props: Any) -> RawNode:
    """A QueueManager node with the required properties plus *props*."""
    return RawNode(
        id=node_id,
        labels=("QueueManager",),
        properties={"qmid": qmid, "name": name, "host": host, **props},
    )


def app_node(node_id: int, app_id: int, name: str, owner: str = "team1", **props: Any) -> RawNode:
    """An Application node with the required properties plus *props*."""
    return RawNode(
        id=node_id,
        labels=("Application",),
        properties={"id": app_id, "name": name, "owner": owner, **props},
    )


def rel(rel_id: int, rel_type: str, start: int, end: int) -> RawRelationship:
    return RawRelationship(id=rel_id, type=rel_type, start_id=start, end_id=end)


def path(start: RawNode, relationship: RawRelationship, end: RawNode) -> RawPath:
    """A one-hop path ``start -[relationship]- end``."""
    return RawPath(nodes=(start, end), relationships=(relationship,))


# ---------------------------------------------------------------------------
# Scripted executor
# ---------------------------------------------------------------------------


class ScriptedSession:
    def __init__(self, executor: ScriptedExecutor) -> None:
        self._executor = executor

    def execute(self, query: str, parameters: Mapping[str, Any] | None = None) -> list[Record]:
        params = dict(parameters or {})
        self._executor.calls.append((query, params))
        response = self._executor.respond(query, params)
        if isinstance(response, Exception):
            raise response
        return list(response)


class ScriptedExecutor:
    """In-memory QueryExecutor returning canned records.

    Root queries are answered from *queries* (by exact text); expansion
    queries from *expansions* (by ``qmid`` parameter). Responses queued in
    *sequences* for a ``qmid`` are used first, one per call. Unscripted
    queries return no records. Every issued query is kept in ``calls``.
    """

    def __init__(
        self,
        queries: dict[str, Response] | None = None,
        expansions: dict[int, Response] | None = None,
        *,
        sequences: dict[int, list[Response]] | None = None,
        connect_error: Exception | None = None,
        expand_query: str = DEFAULT_EXPAND_QUERY,
    ) -> None:
        self.queries = queries or {}
        self.expansions = expansions or {}
        self.sequences = sequences or {}
        self.connect_error = connect_error
        self.expand_query = expand_query
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.opened = 0
        self.closed = 0

    def respond(self, query: str, params: dict[str, Any]) -> Response:
        if query == self.expand_query:
            queued = self.sequences.get(params["qmid"])
            if queued:
                return queued.pop(0)
            return self.expansions.get(params["qmid"], [])
        return self.queries.get(query, [])

    @property
    def expansion_calls(self) -> list[int]:
        return [p["qmid"] for q, p in self.calls if q == self.expand_query]

    @contextmanager
    def session(self) -> Iterator[ScriptedSession]:
        if self.connect_error is not None:
            raise self.connect_error
        self.opened += 1
        try:
            yield ScriptedSession(self)
        finally:
            self.closed += 1


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo logging configuration done by CLI invocations."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    yield
    root.handlers = handlers
    structlog.reset_defaults()
    disable_telemetry()


ROOT = "MATCH p=(q:QueueManager {name: 'QM1'})--() RETURN p"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def topology() -> ScriptedExecutor:
    """Two-hop topology around QM1.

    Layer 1: QM1 (node 1) -SVRCONN- APP1 (node 5), QM1 -SENDER- QM2 (node 2).
    Expanding QM1 re-finds both; expanding QM2 finds QM3 (node 3) via
    CLUSSDR and re-finds QM1. Expanding QM3 finds APP2 (node 6).
    """
    qm1 = qm_node(1, 10, "QM1", decom=0, type="Full")
    qm2 = qm_node(2, 20, "QM2", host="h2", decom=0)
    qm3 = qm_node(3, 30, "QM3", host="h3", decom=0, type="Normal")
    app1 = app_node(5, 500, "APP1")
    app2 = app_node(6, 600, "APP2", owner="team2")
    svrconn = rel(99, "SVRCONN", 5, 1)
    sender = rel(100, "SENDER", 1, 2)
    clussdr = rel(101, "CLUSSDR", 2, 3)
    client = rel(102, "CLNTCONN", 6, 3)
    return ScriptedExecutor(
        queries={
            ROOT: [(path(qm1, svrconn, app1),), (path(qm1, sender, qm2),)],
        },
        expansions={
            10: [(path(qm1, svrconn, app1),), (path(qm1, sender, qm2),)],
            20: [(path(qm2, clussdr, qm3),), (path(qm2, sender, qm1),)],
            30: [(path(qm3, client, app2),), (path(qm3, clussdr, qm2),)],
        },
    )
