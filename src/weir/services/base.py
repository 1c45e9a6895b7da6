"""BaseService — shared foundation for weir services.

Every service wraps one :class:`Weir`.  Services that change topology do
it through a scope (:meth:`BaseService._run_scope`) so that the walk over
the graph and the mutations it decides on never interleave.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from weir.domain.errors import CommitError
from weir.infrastructure.graph.engine import GraphEngine
from weir.services.result import ServiceResult
from weir.services.telemetry import record_commit, trace_span

if TYPE_CHECKING:
    from weir.infrastructure.graph.scope import CommitReport, Scope
    from weir.infrastructure.graph.store import Weir

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class GrowService(BaseService):
            def grow(self, ...) -> ServiceResult:
                try:
                    report = self._run_scope(lambda s: s % SplitEdge(0, 1))
                except CommitError as exc:
                    return self._commit_failed("grow", exc)
                ...
    """

    def __init__(self, weir: Weir) -> None:
        self._weir = weir
        self._engine: GraphEngine | None = None

    @property
    def weir(self) -> Weir:
        return self._weir

    @property
    def engine(self) -> GraphEngine:
        """NetworkX view of the graph (created lazily, rebuilt on change)."""
        if self._engine is None:
            self._engine = GraphEngine(self._weir)
        return self._engine

    def _run_scope(self, fill: Callable[[Scope], Any]) -> CommitReport:
        """Open a scope, let *fill* queue alterations, commit, and return the report.

        Raises:
            CommitError: propagated from the commit.
        """
        with trace_span("commit"):
            try:
                with self._weir.scope() as scope:
                    fill(scope)
            except CommitError as exc:
                record_commit(exc.report)
                raise
            assert scope.report is not None
            record_commit(scope.report)
        return scope.report

    @staticmethod
    def _commit_failed(op: str, exc: CommitError) -> ServiceResult:
        logger.warning("%s: commit stopped at alteration %d (%s)", op, exc.index, exc.kind)
        return ServiceResult.fail(op, "COMMIT_FAILED", str(exc), **exc.report.to_dict())
