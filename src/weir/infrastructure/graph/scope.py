"""Scopes and the alteration executor.

A :class:`Scope` is the handle yielded by :meth:`Weir.scope`.  It collects
alterations (``scope % alt``) and offers read-only passthroughs to the
graph.  Reads always see the last committed state; queued alterations
are invisible until the scope ends.

The executor applies a batch in enqueue order, each alteration against the
state left by the previous one.  It stops at the first failure and keeps
what was already applied:

    fail-fast, partial effect, no rollback.
"""

from __future__ import annotations

import itertools
import logging
import random
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from weir.domain.errors import CommitError, ScopeViolation, UnresolvedRef, WeirError
from weir.infrastructure.graph import iteration
from weir.infrastructure.graph.alterations import Alteration, Ref, VertexRef

if TYPE_CHECKING:
    from weir.domain.edges import Edge
    from weir.domain.vectors import Vec
    from weir.infrastructure.graph.store import Weir

logger = logging.getLogger(__name__)

# Process-wide so a Ref can never be mistaken for one from another scope.
_scope_ids = itertools.count(1)


@dataclass(frozen=True)
class CommitReport:
    """Outcome of applying one batch of alterations.

    Attributes:
        total: Number of alterations in the batch.
        applied: Number applied before stopping (== total on success).
        results: Per-alteration results, in order, for the applied ones.
        failed_index: Batch index of the failing alteration, if any.
        failed: The failing alteration, if any.
        error: The error it raised, if any.
    """

    total: int
    applied: int
    results: tuple[Any, ...] = ()
    failed_index: int | None = None
    failed: Alteration | None = None
    error: WeirError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"ok": self.ok, "total": self.total, "applied": self.applied}
        if self.error is not None:
            data["failed_index"] = self.failed_index
            data["failed"] = repr(self.failed)
            data["error"] = {"kind": self.error.kind, "message": str(self.error)}
        return data


class _Resolver:
    """Map vertex operands (ids or Refs) to concrete vertex ids."""

    def __init__(self, scope_id: int | None, results: list[Any]) -> None:
        self._scope_id = scope_id
        self._results = results

    def __call__(self, operand: VertexRef) -> int:
        if not isinstance(operand, Ref):
            return operand
        if operand.scope_id != self._scope_id:
            raise ScopeViolation(f"{operand!r} belongs to a different scope")
        if operand.index >= len(self._results):
            raise UnresolvedRef(f"{operand!r} refers to an alteration not yet applied")
        value = self._results[operand.index]
        if not isinstance(value, int) or isinstance(value, bool):
            raise UnresolvedRef(f"{operand!r} does not refer to a vertex (got {value!r})")
        return value


def execute(
    weir: Weir,
    alterations: Iterable[Alteration],
    *,
    owner: Scope | None = None,
) -> CommitReport:
    """Apply *alterations* to *weir* in order, stopping at the first failure.

    Only :class:`WeirError` failures are captured in the report; anything
    else is a bug and propagates.  Either way, alterations applied before
    the failure stay applied.

    Raises:
        ScopeViolation: another scope owns the graph, or a commit is
            already running on it.
    """
    batch = tuple(alterations)
    results: list[Any] = []
    resolve = _Resolver(owner.id if owner is not None else None, results)
    failed_index: int | None = None
    error: WeirError | None = None

    with weir._commit_window(owner):
        for index, alteration in enumerate(batch):
            try:
                results.append(alteration.apply(weir, resolve))
            except WeirError as exc:
                failed_index, error = index, exc
                break

    report = CommitReport(
        total=len(batch),
        applied=len(results),
        results=tuple(results),
        failed_index=failed_index,
        failed=batch[failed_index] if failed_index is not None else None,
        error=error,
    )
    if report.ok:
        logger.debug("Committed %d alterations", report.total)
    else:
        logger.debug(
            "Commit stopped at %d/%d: %s: %s",
            failed_index,
            report.total,
            error.kind if error else "?",
            error,
        )
    return report


class Scope:
    """Alteration log bound to one graph for the lifetime of a ``with`` block.

    Usage::

        with weir.scope() as s:
            for edge in s.iter_edges():
                if s.edge_length(*edge) > 1.0:
                    s % SplitEdge(*edge)
    """

    def __init__(self, weir: Weir) -> None:
        self._weir = weir
        self._id = next(_scope_ids)
        self._log: list[Alteration] = []
        self._open = True
        self.report: CommitReport | None = None

    @property
    def id(self) -> int:
        return self._id

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def pending(self) -> tuple[Alteration, ...]:
        return tuple(self._log)

    def __len__(self) -> int:
        return len(self._log)

    def __repr__(self) -> str:
        state = "open" if self._open else "closed"
        return f"<Scope {self._id} {state} pending={len(self._log)}>"

    # ------------------------------------------------------------------
    # Alteration log
    # ------------------------------------------------------------------

    def enqueue(self, alteration: Alteration) -> Ref:
        """Queue *alteration* and return a Ref to its future result.

        Never touches the graph.
        """
        if not self._open:
            raise ScopeViolation(f"Scope {self._id} is closed")
        if not isinstance(alteration, Alteration):
            raise TypeError(f"Expected an Alteration, got {type(alteration).__name__}")
        self._log.append(alteration)
        return Ref(self._id, len(self._log) - 1)

    def __mod__(self, alteration: Alteration) -> Ref:
        return self.enqueue(alteration)

    def extend(self, alterations: Iterable[Alteration]) -> list[Ref]:
        return [self.enqueue(alt) for alt in alterations]

    def commit(self) -> CommitReport:
        """Close the scope and apply the log.  Called by :meth:`Weir.scope`.

        Raises:
            CommitError: an alteration failed; earlier ones stay applied.
        """
        if not self._open:
            raise ScopeViolation(f"Scope {self._id} is closed")
        self._open = False
        batch, self._log = self._log, []
        report = execute(self._weir, batch, owner=self)
        self.report = report
        if not report.ok:
            raise CommitError(report) from report.error
        return report

    def discard(self) -> int:
        """Close the scope without applying anything.  Returns the dropped count."""
        self._open = False
        dropped = len(self._log)
        self._log = []
        return dropped

    # ------------------------------------------------------------------
    # Read-only passthroughs (committed state)
    # ------------------------------------------------------------------

    @property
    def _graph(self) -> Weir:
        if not self._open:
            raise ScopeViolation(f"Scope {self._id} is closed")
        return self._weir

    @property
    def dim(self) -> int:
        return self._weir.dim

    def has_vertex(self, v: int) -> bool:
        return self._graph.has_vertex(v)

    def has_edge(self, u: int, v: int) -> bool:
        return self._graph.has_edge(u, v)

    def position(self, v: int) -> Vec:
        return self._graph.position(v)

    def incident_edges(self, v: int) -> frozenset[Edge]:
        return self._graph.incident_edges(v)

    def neighbors(self, v: int) -> list[int]:
        return self._graph.neighbors(v)

    def degree(self, v: int) -> int:
        return self._graph.degree(v)

    def edge_length(self, u: int, v: int) -> float:
        return self._graph.edge_length(u, v)

    def vertex_attrs(self, v: int) -> dict[str, Any]:
        return self._graph.vertex_attrs(v)

    def edge_attrs(self, u: int, v: int) -> dict[str, Any]:
        return self._graph.edge_attrs(u, v)

    def num_vertices(self) -> int:
        return self._graph.num_vertices()

    def num_edges(self) -> int:
        return self._graph.num_edges()

    def vertex_ids(self) -> list[int]:
        return self._graph.vertex_ids()

    def edges(self) -> list[Edge]:
        return self._graph.edges()

    def iter_vertices(self) -> Iterator[int]:
        return iteration.iter_vertices(self._graph)

    def iter_edges(self) -> Iterator[Edge]:
        return iteration.iter_edges(self._graph)

    def iter_incident_edges(self, v: int) -> Iterator[Edge]:
        return iteration.iter_incident_edges(self._graph, v)

    def random_vertex(self, rng: random.Random) -> int | None:
        return iteration.random_vertex(self._graph, rng)

    def random_edge(self, rng: random.Random) -> Edge | None:
        return iteration.random_edge(self._graph, rng)

    def random_incident_edge(self, v: int, rng: random.Random) -> Edge | None:
        return iteration.random_incident_edge(self._graph, v, rng)
