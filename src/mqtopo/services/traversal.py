"""TopologyService — layered traversal of the MQ topology graph.

Layer 1 runs the caller's query verbatim. Each further layer runs the
configured expansion query once for every queue manager that has not
been expanded successfully yet, in discovery order, so output order is
reproducible.
Everything found is classified and merged into per-call aggregation
stores (first discovery wins, including its layer).

Failure policy:
- Unreachable store: fatal, no traversal.
- Root query failure: fatal, the (empty) partial snapshot is returned.
- Expansion query failure: recorded, that queue manager's contribution
  to the layer is skipped and the traversal carries on. Nothing is merged
  from a failed query, so the pre-query snapshot is kept as is. The queue
  manager stays in the frontier and is queried again in the next layer.
- Extraction failure: fatal, halts the traversal; entities merged
  before the failing node are kept.
"""

from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from mqtopo.config.logging import traversal_logger
from mqtopo.config.models import TraversalConfig
from mqtopo.domain.entities import QueueManager, Snapshot
from mqtopo.domain.extract import ExtractionError, classify_node, extract_connection
from mqtopo.domain.graph import Record, split_record
from mqtopo.infrastructure.graph.executor import GraphConnectionError, QueryExecutionError
from mqtopo.services.base import BaseService
from mqtopo.services.result import ErrorCode, ServiceError, ServiceResult
from mqtopo.services.store import TopologyStore
from mqtopo.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from mqtopo.infrastructure.graph.executor import QueryExecutor, QuerySession

_clock = time.monotonic


@dataclass(frozen=True)
class FailedQuery:
    """An expansion query that failed and was skipped."""

    node_id: int
    qmgr_id: int
    layer: int
    message: str

    def describe(self) -> str:
        return (
            f"Layer {self.layer} expansion of queue manager {self.qmgr_id} "
            f"failed: {self.message}"
        )


@dataclass
class TraversalOutcome:
    """Snapshot plus the first fatal error (if any) of one traversal."""

    snapshot: Snapshot
    error: ServiceError | None = None
    failed_queries: list[FailedQuery] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    layers_completed: int = 0
    queries_issued: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class _LayeredRun:
    """Mutable state of one traversal over one session."""

    def __init__(
        self,
        session: QuerySession,
        config: TraversalConfig,
        log: BoundLogger,
        *,
        relationships_only: bool,
        include_applications: bool,
        deadline_seconds: float | None,
    ) -> None:
        self._session = session
        self._config = config
        self._log = log
        self._relationships_only = relationships_only
        self._include_applications = include_applications
        self._deadline_seconds = deadline_seconds
        self._deadline = _clock() + deadline_seconds if deadline_seconds is not None else None
        self._expanded: set[int] = set()

        self.store = TopologyStore()
        self.failed: list[FailedQuery] = []
        self.warnings: list[str] = []
        self.queries = 0
        self.layers_completed = 0
        self.timed_out = False

    # -- queries -------------------------------------------------------

    def _execute(self, query: str, parameters: Mapping[str, Any] | None) -> list[Record]:
        self.queries += 1
        return self._session.execute(query, parameters)

    def _deadline_passed(self) -> bool:
        return self._deadline is not None and _clock() >= self._deadline

    # -- merging -------------------------------------------------------

    def _merge(
        self, records: Sequence[Record], *, layer: int, include_nodes: bool
    ) -> ServiceError | None:
        added = 0
        for record in records:
            nodes, relationships = split_record(record)
            if include_nodes:
                for node in nodes:
                    try:
                        entity = classify_node(
                            node, layer, include_applications=self._include_applications
                        )
                    except ExtractionError as exc:
                        self._log.error(
                            "extraction.failed",
                            layer=layer,
                            node_id=exc.node_id,
                            field=exc.field,
                            error=exc.message,
                        )
                        return ServiceError(
                            code=ErrorCode.EXTRACTION_FAILED,
                            message=exc.message,
                            detail={**exc.to_detail(), "layer": layer},
                        )
                    if entity is not None and self.store.add_entity(entity):
                        added += 1
            for rel in relationships:
                if self.store.add_connection(extract_connection(rel)):
                    added += 1
        self._log.debug("round.merged", layer=layer, records=len(records), added=added)
        return None

    # -- layers --------------------------------------------------------

    def run_root(self, query: str, parameters: Mapping[str, Any] | None) -> ServiceError | None:
        self._log.debug("round.start", layer=1)
        with trace_span("layer_1") as span:
            try:
                records = self._execute(query, parameters)
            except QueryExecutionError as exc:
                self._log.error("query.failed", layer=1, error=str(exc))
                return ServiceError(
                    code=ErrorCode.QUERY_FAILED,
                    message=f"Query failed: {exc}",
                    detail={"layer": 1},
                )
            error = self._merge(records, layer=1, include_nodes=True)
            if span:
                span.annotate("records", len(records))
        if error is None:
            self.layers_completed = 1
        return error

    def frontier(self) -> list[QueueManager]:
        """Queue managers without a successful expansion, in discovery order."""
        return [qm for qm in self.store.queue_managers if qm.id not in self._expanded]

    def expand(self, layer: int) -> ServiceError | None:
        frontier = self.frontier()
        self._log.debug("round.start", layer=layer, frontier=len(frontier))
        with trace_span(f"layer_{layer}") as span:
            for position, qm in enumerate(frontier):
                if self._deadline_passed():
                    skipped = len(frontier) - position
                    self.warnings.append(
                        f"Traversal deadline of {self._deadline_seconds}s exceeded at layer "
                        f"{layer}; {skipped} expansion queries skipped"
                    )
                    self._log.warning("traversal.deadline", layer=layer, skipped=skipped)
                    self.timed_out = True
                    return None
                try:
                    records = self._execute(self._config.expand_query, {"qmid": qm.qmgr_id})
                except QueryExecutionError as exc:
                    self.failed.append(
                        FailedQuery(
                            node_id=qm.id, qmgr_id=qm.qmgr_id, layer=layer, message=str(exc)
                        )
                    )
                    self._log.warning(
                        "query.failed", layer=layer, qmgrid=qm.qmgr_id, error=str(exc)
                    )
                    continue
                self._expanded.add(qm.id)
                error = self._merge(
                    records, layer=layer, include_nodes=not self._relationships_only
                )
                if error is not None:
                    return error
            if span:
                span.annotate("frontier", len(frontier))
        self.layers_completed = layer
        return None

    def outcome(self, error: ServiceError | None) -> TraversalOutcome:
        return TraversalOutcome(
            snapshot=self.store.snapshot(),
            error=error,
            failed_queries=list(self.failed),
            warnings=list(self.warnings),
            layers_completed=self.layers_completed,
            queries_issued=self.queries,
        )


class TopologyService(BaseService):
    """Builds topology snapshots from graph queries."""

    def __init__(self, executor: QueryExecutor, config: TraversalConfig | None = None) -> None:
        super().__init__(executor)
        self._config = config or TraversalConfig()

    def traverse(
        self,
        root_query: str,
        max_layers: int,
        *,
        relationships_only: bool = False,
        include_applications: bool | None = None,
        parameters: Mapping[str, Any] | None = None,
        deadline_seconds: float | None = None,
        log: BoundLogger | None = None,
    ) -> TraversalOutcome:
        """Run *root_query* and expand around queue managers up to *max_layers*.

        Args:
            root_query: Query run verbatim as layer 1.
            max_layers: Total number of layers, at least 1.
            relationships_only: Follow-up layers only extract connections.
            include_applications: Classify ``Application`` nodes (default from config).
            parameters: Parameters for the root query.
            deadline_seconds: Overall time limit for expansion (default from config).
            log: Logger for this call; a fresh bound logger if omitted.

        Raises:
            ValueError: *max_layers* is below 1.
            GraphConnectionError: The store could not be reached.
        """
        if max_layers < 1:
            raise ValueError(f"max_layers must be at least 1, got {max_layers}")
        if include_applications is None:
            include_applications = self._config.include_applications
        if deadline_seconds is None:
            deadline_seconds = self._config.deadline_seconds
        log = log or traversal_logger()

        with self._executor.session() as session:
            log.debug("session.open")
            run = _LayeredRun(
                session,
                self._config,
                log,
                relationships_only=relationships_only,
                include_applications=include_applications,
                deadline_seconds=deadline_seconds,
            )
            log.info("traversal.start", max_layers=max_layers, query=root_query)
            error = run.run_root(root_query, parameters)
            layer = 2
            while error is None and layer <= max_layers and not run.timed_out:
                if not run.frontier():
                    break
                error = run.expand(layer)
                layer += 1
            outcome = run.outcome(error)
        log.debug("session.close")

        log.info(
            "traversal.complete",
            ok=outcome.ok,
            layers=outcome.layers_completed,
            queries=outcome.queries_issued,
            failed=len(outcome.failed_queries),
            **outcome.snapshot.counts(),
        )
        return outcome

    @traced
    def run_query(
        self,
        query: str,
        layers: int | None = None,
        *,
        include_nodes: bool | None = None,
        include_applications: bool | None = None,
        log: BoundLogger | None = None,
    ) -> ServiceResult:
        """Public entry point: traverse and package the snapshot as a ServiceResult.

        ``include_nodes=False`` switches follow-up layers to
        relationships-only mode; ``include_applications=False`` skips
        application nodes in every layer. Both default from config.
        Expansion failures become warnings; fatal errors set ``error``
        and still return the partial snapshot in ``data``.
        """
        op = "run_query"
        cfg = self._config
        layers = cfg.default_layers if layers is None else layers
        if include_nodes is None:
            include_nodes = cfg.include_nodes

        if not query.strip():
            return ServiceResult.failure(op, ErrorCode.INVALID_ARGUMENT, "Query must not be empty")
        if not 1 <= layers <= cfg.max_layers:
            return ServiceResult.failure(
                op,
                ErrorCode.INVALID_ARGUMENT,
                f"Layers must be between 1 and {cfg.max_layers}, got {layers}",
                detail={"layers": layers, "max_layers": cfg.max_layers},
            )

        try:
            outcome = self.traverse(
                query,
                layers,
                relationships_only=not include_nodes,
                include_applications=include_applications,
                log=log,
            )
        except GraphConnectionError as exc:
            return ServiceResult.failure(
                op, ErrorCode.CONNECTION_FAILED, str(exc), data=Snapshot().to_payload()
            )

        warnings = [f.describe() for f in outcome.failed_queries] + outcome.warnings
        return ServiceResult(
            ok=outcome.ok,
            op=op,
            data=outcome.snapshot.to_payload(),
            warnings=warnings,
            error=outcome.error,
            meta={
                "layers": layers,
                "layers_completed": outcome.layers_completed,
                "queries": outcome.queries_issued,
                "counts": outcome.snapshot.counts(),
            },
        )

    @traced
    def ping(self) -> ServiceResult:
        """Check that the graph store is reachable and answers queries."""
        op = "ping"
        try:
            with self._executor.session() as session:
                session.execute("RETURN 1")
        except GraphConnectionError as exc:
            return ServiceResult.failure(op, ErrorCode.CONNECTION_FAILED, str(exc))
        except QueryExecutionError as exc:
            return ServiceResult.failure(op, ErrorCode.QUERY_FAILED, str(exc))
        return ServiceResult(ok=True, op=op, data={"reachable": True})
