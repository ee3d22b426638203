"""BaseService — foundation for mqtopo services.

Every service receives a :class:`QueryExecutor` at construction time.
Services open their own sessions via ``self._executor.session()`` and
never share a session across calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mqtopo.infrastructure.graph.executor import QueryExecutor


class BaseService:
    """Base for service-layer classes.

    Usage::

        class TopologyService(BaseService):
            def run_query(self, query: str, ...) -> ServiceResult:
                with self._executor.session() as session:
                    ...
    """

    def __init__(self, executor: QueryExecutor) -> None:
        self._executor = executor
