"""Tests for the Neo4j executor, with the driver mocked out."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from neo4j.exceptions import AuthError, ServiceUnavailable, SessionExpired
from neo4j.graph import Node, Path, Relationship

from mqtopo.config.models import Neo4jConfig
from mqtopo.domain.entities import Application
from mqtopo.domain.extract import classify_node
from mqtopo.domain.graph import RawNode, RawPath, RawRelationship
from mqtopo.infrastructure.graph.executor import GraphConnectionError, QueryExecutionError
from mqtopo.infrastructure.graph.neo4j_store import (
    Neo4jExecutor,
    convert_node,
    convert_relationship,
    convert_value,
)

DRIVER = "mqtopo.infrastructure.graph.neo4j_store.GraphDatabase.driver"


def _node(node_id: int, labels: set[str], props: dict) -> MagicMock:
    node = MagicMock(spec=Node)
    node.id = node_id
    node.labels = frozenset(labels)
    node.items.return_value = props.items()
    return node


def _rel(rel_id: int, rel_type: str, start: MagicMock, end: MagicMock) -> MagicMock:
    rel = MagicMock(spec=Relationship)
    rel.id = rel_id
    rel.type = rel_type
    rel.start_node = start
    rel.end_node = end
    return rel


def _record(*values: object) -> MagicMock:
    record = MagicMock()
    record.values.return_value = list(values)
    return record


@pytest.fixture
def config() -> Neo4jConfig:
    return Neo4jConfig(uri="bolt://db:7687", username="neo4j", password="secret")


class TestConversion:
    def test_entity_label_first(self) -> None:
        node = _node(1, {"Production", "QueueManager"}, {"qmid": 10})
        raw = convert_node(node)
        assert raw == RawNode(
            id=1, labels=("QueueManager", "Production"), properties={"qmid": 10}
        )

    def test_extra_labels_do_not_hide_entity(self) -> None:
        node = _node(6, {"Broker", "MQ", "Application"}, {"id": 600, "name": "A", "owner": "o"})
        raw = convert_node(node)
        assert raw.labels == ("Application", "Broker", "MQ")
        app = classify_node(raw, 1)
        assert isinstance(app, Application)
        assert app.app_id == 600

    def test_unmanaged_labels_sorted(self) -> None:
        raw = convert_node(_node(2, {"Zeta", "Alpha"}, {}))
        assert raw.labels == ("Alpha", "Zeta")

    def test_relationship_endpoints(self) -> None:
        a = _node(1, {"QueueManager"}, {})
        b = _node(2, {"QueueManager"}, {})
        raw = convert_relationship(_rel(100, "SENDER", a, b))
        assert raw == RawRelationship(id=100, type="SENDER", start_id=1, end_id=2)

    def test_path(self) -> None:
        a = _node(1, {"QueueManager"}, {})
        b = _node(2, {"Application"}, {})
        p = MagicMock(spec=Path)
        p.nodes = (a, b)
        p.relationships = (_rel(9, "SVRCONN", b, a),)
        raw = convert_value(p)
        assert isinstance(raw, RawPath)
        assert [n.id for n in raw.nodes] == [1, 2]
        assert raw.relationships[0].start_id == 2

    def test_scalars_pass_through(self) -> None:
        assert convert_value(42) == 42
        assert convert_value("x") == "x"


class TestExecutor:
    def test_driver_is_lazy(self, config: Neo4jConfig) -> None:
        with patch(DRIVER) as driver_factory:
            Neo4jExecutor(config)
        driver_factory.assert_not_called()

    def test_connects_with_config(self, config: Neo4jConfig) -> None:
        with patch(DRIVER) as driver_factory:
            executor = Neo4jExecutor(config)
            executor.verify()
        driver_factory.assert_called_once_with(
            "bolt://db:7687", auth=("neo4j", "secret"), connection_timeout=30.0
        )
        driver_factory.return_value.verify_connectivity.assert_called_once()

    def test_unreachable(self, config: Neo4jConfig) -> None:
        with patch(DRIVER) as driver_factory:
            driver_factory.return_value.verify_connectivity.side_effect = ServiceUnavailable("no")
            executor = Neo4jExecutor(config)
            with pytest.raises(GraphConnectionError, match="Cannot reach Neo4j"):
                executor.verify()

    def test_auth_failure(self, config: Neo4jConfig) -> None:
        with patch(DRIVER) as driver_factory:
            driver_factory.return_value.verify_connectivity.side_effect = AuthError("bad")
            executor = Neo4jExecutor(config)
            with pytest.raises(GraphConnectionError, match="Authentication failed"):
                executor.verify()

    def test_session_runs_and_converts(self, config: Neo4jConfig) -> None:
        node = _node(1, {"QueueManager"}, {"qmid": 10})
        with patch(DRIVER) as driver_factory:
            neo_session = driver_factory.return_value.session.return_value
            neo_session.run.return_value = [_record(node, 3)]
            executor = Neo4jExecutor(config)
            with executor.session() as session:
                records = session.execute("MATCH (q) RETURN q, 3", {"qmid": 10})
        neo_session.run.assert_called_once_with("MATCH (q) RETURN q, 3", {"qmid": 10})
        neo_session.close.assert_called_once()
        assert records[0][0].id == 1
        assert records[0][1] == 3

    def test_query_error_wrapped(self, config: Neo4jConfig) -> None:
        with patch(DRIVER) as driver_factory:
            neo_session = driver_factory.return_value.session.return_value
            neo_session.run.side_effect = SessionExpired("syntax")
            executor = Neo4jExecutor(config)
            with executor.session() as session:
                with pytest.raises(QueryExecutionError) as exc_info:
                    session.execute("MATCH (", {"qmid": 10})
        assert exc_info.value.query == "MATCH ("
        assert exc_info.value.parameters == {"qmid": 10}
        neo_session.close.assert_called_once()

    def test_close_releases_driver(self, config: Neo4jConfig) -> None:
        with patch(DRIVER) as driver_factory:
            executor = Neo4jExecutor(config)
            executor.verify()
            executor.close()
        driver_factory.return_value.close.assert_called_once()
