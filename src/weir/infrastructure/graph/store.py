"""Weir — the mutable vertex/edge graph store.

Owns the vertex table, the edge table, and the incidence index (vertex ->
set of edges touching it).  Direct operations apply immediately and leave
the graph consistent on return.  Batched changes go through
:meth:`Weir.scope`, which queues alterations and commits them in order
when the ``with`` block ends.

INVARIANTS (hold whenever no commit is in progress):

1. Every edge is stored canonically, smaller index first.
2. No duplicate edges and no self-loops.
3. No edge references a vertex absent from the vertex table.
4. The incidence index is the exact inverse of the edge table.
5. Vertex indices are unique and never recycled.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from weir.domain.attributes import AttrValue, check_value, normalize_attrs, normalize_key
from weir.domain.edges import Edge
from weir.domain.errors import (
    DuplicateEdge,
    InvalidEdge,
    MissingEndpoint,
    ScopeViolation,
    UnknownEdge,
    UnknownVertex,
)
from weir.domain.vectors import Vec, as_vec
from weir.infrastructure.graph.scope import Scope

if TYPE_CHECKING:
    from weir.config.models import GraphConfig

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Vertex:
    position: Vec
    attrs: dict[str, AttrValue] = field(default_factory=dict)


class Weir:
    """Undirected graph of positioned vertices with a deferred-alteration protocol.

    Args:
        dim: Dimension of vertex positions, 2 or 3.  Fixed for the lifetime
            of the graph.
        check_scopes: Reject direct mutation while a scope is open.  Nested
            and re-entrant scopes are always rejected.

    Usage::

        g = Weir(dim=2)
        a = g.add_vertex((0, 0))
        b = g.add_vertex((1, 0))
        with g.scope() as s:
            c = s % AddVertex((0, 1))
            s % AddEdge(a, b)
            s % AddEdge(b, c)
        # both edges exist here, not inside the block
    """

    def __init__(self, dim: int = 2, *, check_scopes: bool = True) -> None:
        if dim not in (2, 3):
            raise ValueError(f"dim must be 2 or 3, got {dim!r}")
        self._dim = dim
        self._check_scopes = check_scopes
        self._verts: dict[int, _Vertex] = {}
        self._edges: dict[Edge, dict[str, AttrValue]] = {}
        self._incidence: dict[int, set[Edge]] = {}
        self._next_index = 0
        self._version = 0
        self._scope: Scope | None = None
        self._committing = False

    @classmethod
    def from_config(cls, config: GraphConfig) -> Weir:
        return cls(dim=config.dim, check_scopes=config.check_scopes)

    @classmethod
    def from_records(
        cls,
        dim: int,
        vertices: Iterable[tuple[int, Any, Mapping[str, Any]]],
        edges: Iterable[tuple[int, int, Mapping[str, Any]]],
        *,
        next_index: int | None = None,
    ) -> Weir:
        """Rebuild a graph with explicit vertex ids (used by snapshot import).

        Raises ValueError if ids repeat or *next_index* would recycle an id.
        Edge errors surface as the usual :class:`InvalidEdge` /
        :class:`DuplicateEdge` kinds.
        """
        weir = cls(dim=dim)
        for index, position, attrs in vertices:
            if index in weir._verts or index < 0:
                raise ValueError(f"Invalid or repeated vertex id: {index}")
            weir._verts[index] = _Vertex(as_vec(position, dim), normalize_attrs(attrs))
            weir._incidence[index] = set()
            weir._next_index = max(weir._next_index, index + 1)
        if next_index is not None:
            if next_index < weir._next_index:
                raise ValueError(
                    f"next_index {next_index} would reuse ids up to {weir._next_index - 1}"
                )
            weir._next_index = next_index
        for u, v, attrs in edges:
            weir.add_edge(u, v, attrs)
        return weir

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def next_index(self) -> int:
        """Index the next added vertex will receive."""
        return self._next_index

    @property
    def version(self) -> int:
        """Counter bumped on every successful mutation."""
        return self._version

    @property
    def active_scope(self) -> Scope | None:
        return self._scope

    @property
    def committing(self) -> bool:
        return self._committing

    def __repr__(self) -> str:
        return f"Weir(dim={self._dim}, vertices={len(self._verts)}, edges={len(self._edges)})"

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def _require_writable(self) -> None:
        if self._check_scopes and self._scope is not None and not self._committing:
            raise ScopeViolation(
                "Graph is owned by an open scope; enqueue an alteration instead"
            )

    def _vertex(self, v: int) -> _Vertex:
        try:
            return self._verts[v]
        except (KeyError, TypeError):
            raise UnknownVertex(v) from None

    def _edge_key(self, u: int, v: int) -> Edge:
        """Resolve an existing edge, checking endpoints first."""
        self._vertex(u)
        self._vertex(v)
        if u == v:
            raise UnknownEdge(u, v)
        edge = Edge(u, v)
        if edge not in self._edges:
            raise UnknownEdge(u, v)
        return edge

    def as_position(self, value: Any) -> Vec:
        """Coerce *value* to a position of this graph's dimension."""
        return as_vec(value, self._dim)

    # ------------------------------------------------------------------
    # Vertices
    # ------------------------------------------------------------------

    def add_vertex(self, position: Any, attrs: Mapping[Any, Any] | None = None) -> int:
        """Insert a vertex and return its newly allocated index."""
        self._require_writable()
        pos = self.as_position(position)
        clean = normalize_attrs(attrs)
        index = self._next_index
        self._next_index += 1
        self._verts[index] = _Vertex(pos, clean)
        self._incidence[index] = set()
        self._version += 1
        return index

    def add_vertices(self, positions: Iterable[Any]) -> list[int]:
        """Insert several vertices; all positions are checked before any insert."""
        self._require_writable()
        coerced = [self.as_position(p) for p in positions]
        return [self.add_vertex(p) for p in coerced]

    def has_vertex(self, v: int) -> bool:
        return v in self._verts

    def position(self, v: int) -> Vec:
        return self._vertex(v).position

    def positions(self, vertices: Iterable[int]) -> list[Vec]:
        return [self._vertex(v).position for v in vertices]

    def move_vertex(self, v: int, vec: Any, *, relative: bool = True) -> Vec:
        """Move *v* by *vec* (``relative=True``) or to *vec*.  Returns the new position."""
        self._require_writable()
        vertex = self._vertex(v)
        delta = self.as_position(vec)
        vertex.position = vertex.position + delta if relative else delta
        self._version += 1
        return vertex.position

    def delete_vertex(self, v: int) -> list[Edge]:
        """Remove *v* and every edge touching it.  Returns the removed edges."""
        self._require_writable()
        self._vertex(v)
        removed = sorted(self._incidence[v])
        for edge in removed:
            other = edge.other(v)
            self._incidence[other].discard(edge)
            del self._edges[edge]
        del self._incidence[v]
        del self._verts[v]
        self._version += 1
        return removed

    def vertex_attrs(self, v: int) -> dict[str, AttrValue]:
        return dict(self._vertex(v).attrs)

    def get_vertex_attr(self, v: int, key: Any, default: Any = None) -> Any:
        return self._vertex(v).attrs.get(normalize_key(key), default)

    def set_vertex_attr(self, v: int, key: Any, value: Any) -> None:
        self._require_writable()
        vertex = self._vertex(v)
        vertex.attrs[normalize_key(key)] = check_value(key, value)
        self._version += 1

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def add_edge(self, u: int, v: int, attrs: Mapping[Any, Any] | None = None) -> Edge:
        """Insert the canonical edge ``(u, v)``.

        Raises:
            InvalidEdge: ``u == v``.
            MissingEndpoint: either endpoint is absent (also an UnknownVertex).
            DuplicateEdge: the canonical pair already exists.
        """
        self._require_writable()
        if u == v:
            raise InvalidEdge(u, v)
        for endpoint in (u, v):
            if endpoint not in self._verts:
                raise MissingEndpoint(u, v, endpoint)
        edge = Edge(u, v)
        if edge in self._edges:
            raise DuplicateEdge(u, v)
        self._edges[edge] = normalize_attrs(attrs)
        self._incidence[edge.a].add(edge)
        self._incidence[edge.b].add(edge)
        self._version += 1
        return edge

    def has_edge(self, u: int, v: int) -> bool:
        """Order-independent existence check.  Never raises."""
        if u == v:
            return False
        try:
            return Edge(u, v) in self._edges
        except TypeError:
            return False

    def delete_edge(self, u: int, v: int) -> Edge:
        self._require_writable()
        if u == v or not self.has_edge(u, v):
            raise UnknownEdge(u, v)
        edge = Edge(u, v)
        del self._edges[edge]
        self._incidence[edge.a].discard(edge)
        self._incidence[edge.b].discard(edge)
        self._version += 1
        return edge

    def incident_edges(self, v: int) -> frozenset[Edge]:
        self._vertex(v)
        return frozenset(self._incidence[v])

    def neighbors(self, v: int) -> list[int]:
        self._vertex(v)
        return sorted(edge.other(v) for edge in self._incidence[v])

    def degree(self, v: int) -> int:
        self._vertex(v)
        return len(self._incidence[v])

    def edge_length(self, u: int, v: int) -> float:
        """Euclidean distance between the endpoints of an existing edge."""
        edge = self._edge_key(u, v)
        return self._verts[edge.a].position.dist(self._verts[edge.b].position)

    def edge_attrs(self, u: int, v: int) -> dict[str, AttrValue]:
        return dict(self._edges[self._edge_key(u, v)])

    def get_edge_attr(self, u: int, v: int, key: Any, default: Any = None) -> Any:
        return self._edges[self._edge_key(u, v)].get(normalize_key(key), default)

    def set_edge_attr(self, u: int, v: int, key: Any, value: Any) -> None:
        self._require_writable()
        edge = self._edge_key(u, v)
        self._edges[edge][normalize_key(key)] = check_value(key, value)
        self._version += 1

    # ------------------------------------------------------------------
    # Whole-graph queries
    # ------------------------------------------------------------------

    def num_vertices(self) -> int:
        return len(self._verts)

    def num_edges(self) -> int:
        return len(self._edges)

    def vertex_ids(self) -> list[int]:
        """All vertex ids in ascending order (a copy)."""
        return sorted(self._verts)

    def edges(self) -> list[Edge]:
        """All edges in ascending canonical order (a copy)."""
        return sorted(self._edges)

    def bounding_box(self) -> tuple[Vec, Vec] | None:
        """``(min corner, max corner)`` of all positions, or None if empty."""
        if not self._verts:
            return None
        points = [vertex.position.coords() for vertex in self._verts.values()]
        cls = type(next(iter(self._verts.values())).position)
        lo = cls(*(min(c) for c in zip(*points, strict=True)))
        hi = cls(*(max(c) for c in zip(*points, strict=True)))
        return lo, hi

    def integrity_issues(self) -> list[str]:
        """Check the structural invariants.  An empty list means consistent."""
        issues: list[str] = []
        for edge in self._edges:
            if edge.a >= edge.b:
                issues.append(f"{edge!r} is not canonical")
            for endpoint in edge:
                if endpoint not in self._verts:
                    issues.append(f"{edge!r} references missing vertex {endpoint}")
                elif edge not in self._incidence.get(endpoint, ()):
                    issues.append(f"{edge!r} missing from incidence of {endpoint}")
        for v, incident in self._incidence.items():
            if v not in self._verts:
                issues.append(f"incidence entry for missing vertex {v}")
            for edge in incident:
                if edge not in self._edges:
                    issues.append(f"incidence of {v} lists absent {edge!r}")
                elif v not in edge:
                    issues.append(f"incidence of {v} lists non-incident {edge!r}")
        if set(self._verts) != set(self._incidence):
            issues.append("vertex table and incidence index disagree")
        if self._verts and max(self._verts) >= self._next_index:
            issues.append("next index would recycle an existing vertex id")
        return issues

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    @contextmanager
    def scope(self) -> Iterator[Scope]:
        """Open a scope that queues alterations and commits them on exit.

        Reads through the scope (or the graph) see the last committed state
        until the block ends.  On normal exit the queued alterations are
        applied in enqueue order; the first failure stops the commit and
        raises :class:`~weir.domain.errors.CommitError`, leaving earlier
        alterations applied.  If the block raises, nothing is applied.

        Raises:
            ScopeViolation: a scope is already open on this graph, or a
                commit is in progress.
        """
        if self._committing:
            raise ScopeViolation("Cannot open a scope during a commit")
        if self._scope is not None:
            raise ScopeViolation("A scope is already open on this graph")
        scope = Scope(self)
        self._scope = scope
        try:
            try:
                yield scope
            except BaseException:
                dropped = scope.discard()
                logger.debug("Scope %d raised; discarded %d alterations", scope.id, dropped)
                raise
            scope.commit()
        finally:
            self._scope = None

    @contextmanager
    def _commit_window(self, owner: Scope | None) -> Iterator[None]:
        """Mark the graph as committing for the executor."""
        if self._committing:
            raise ScopeViolation("Re-entrant commit on the same graph")
        if self._scope is not None and self._scope is not owner:
            raise ScopeViolation("Graph is owned by another open scope")
        self._committing = True
        try:
            yield
        finally:
            self._committing = False
