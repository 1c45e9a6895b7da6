"""Alterations — immutable descriptions of one intended graph mutation.

Constructing an alteration never touches a graph.  Alterations are queued
on a :class:`~weir.infrastructure.graph.scope.Scope` (``scope % alt``) and
applied by the executor when the scope ends.  Wherever a vertex id is
expected, an alteration also accepts the :class:`Ref` returned when an
earlier vertex-producing alteration was enqueued in the same scope.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from weir.domain.attributes import AttrItems, freeze_attrs, normalize_attrs
from weir.domain.edges import Edge
from weir.domain.vectors import Vec2, Vec3

if TYPE_CHECKING:
    from weir.domain.vectors import Vec
    from weir.infrastructure.graph.store import Weir


@dataclass(frozen=True, slots=True)
class Ref:
    """Placeholder for the result of the *index*-th alteration of a scope."""

    scope_id: int
    index: int

    def __repr__(self) -> str:
        return f"Ref(scope={self.scope_id}, index={self.index})"


type VertexRef = int | Ref
type Resolver = Callable[[VertexRef], int]


def _freeze_position(value: Any) -> Any:
    # Vectors are already immutable; other sequences are snapshotted.
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return value
    if isinstance(value, (Vec2, Vec3)):
        return value
    return tuple(value)


class Alteration(ABC):
    """Base class for queued mutations."""

    __slots__ = ()

    @abstractmethod
    def apply(self, weir: Weir, resolve: Resolver) -> Any:
        """Apply to *weir*.  Only the executor calls this."""


@dataclass(frozen=True)
class AddVertex(Alteration):
    """Add a vertex.  Result: the new vertex id."""

    position: Any
    attrs: AttrItems = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _freeze_position(self.position))
        object.__setattr__(self, "attrs", freeze_attrs(self.attrs))

    def apply(self, weir: Weir, resolve: Resolver) -> int:
        return weir.add_vertex(self.position, dict(self.attrs))


@dataclass(frozen=True)
class AddEdge(Alteration):
    """Add the edge ``(u, v)``.  Result: the canonical :class:`Edge`.

    With ``exist_ok=True`` an existing edge is left untouched instead of
    failing with DuplicateEdge.
    """

    u: VertexRef
    v: VertexRef
    attrs: AttrItems = ()
    exist_ok: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "attrs", freeze_attrs(self.attrs))

    def apply(self, weir: Weir, resolve: Resolver) -> Edge:
        u, v = resolve(self.u), resolve(self.v)
        if self.exist_ok and weir.has_edge(u, v):
            return Edge(u, v)
        return weir.add_edge(u, v, dict(self.attrs))


@dataclass(frozen=True)
class MoveVertex(Alteration):
    """Move a vertex by (or to) a vector.  Result: the new position."""

    v: VertexRef
    vec: Any
    relative: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "vec", _freeze_position(self.vec))

    def apply(self, weir: Weir, resolve: Resolver) -> Vec:
        return weir.move_vertex(resolve(self.v), self.vec, relative=self.relative)


@dataclass(frozen=True)
class DeleteVertex(Alteration):
    """Delete a vertex and its incident edges.  Result: the removed edges."""

    v: VertexRef

    def apply(self, weir: Weir, resolve: Resolver) -> list[Edge]:
        return weir.delete_vertex(resolve(self.v))


@dataclass(frozen=True)
class DeleteEdge(Alteration):
    """Delete the edge ``(u, v)``.  Result: the removed :class:`Edge`."""

    u: VertexRef
    v: VertexRef

    def apply(self, weir: Weir, resolve: Resolver) -> Edge:
        return weir.delete_edge(resolve(self.u), resolve(self.v))


@dataclass(frozen=True)
class SetVertexAttr(Alteration):
    v: VertexRef
    key: Any
    value: Any

    def apply(self, weir: Weir, resolve: Resolver) -> None:
        weir.set_vertex_attr(resolve(self.v), self.key, self.value)


@dataclass(frozen=True)
class SetEdgeAttr(Alteration):
    u: VertexRef
    v: VertexRef
    key: Any
    value: Any

    def apply(self, weir: Weir, resolve: Resolver) -> None:
        weir.set_edge_attr(resolve(self.u), resolve(self.v), self.key, self.value)


@dataclass(frozen=True)
class SplitEdge(Alteration):
    """Replace edge ``(u, v)`` with ``(u, w)`` and ``(w, v)`` through a new vertex.

    The new vertex sits at *position*, or at the edge midpoint when omitted.
    Both halves inherit the edge attributes.  Result: the new vertex id.
    """

    u: VertexRef
    v: VertexRef
    position: Any = None
    attrs: AttrItems = ()

    def __post_init__(self) -> None:
        if self.position is not None:
            object.__setattr__(self, "position", _freeze_position(self.position))
        object.__setattr__(self, "attrs", freeze_attrs(self.attrs))

    def apply(self, weir: Weir, resolve: Resolver) -> int:
        u, v = resolve(self.u), resolve(self.v)
        # All checks happen before the first write so a failure leaves no trace.
        edge_attrs = weir.edge_attrs(u, v)
        attrs = normalize_attrs(self.attrs)
        if self.position is None:
            pos = weir.position(u).mid(weir.position(v))
        else:
            pos = weir.as_position(self.position)
        weir.delete_edge(u, v)
        w = weir.add_vertex(pos, attrs)
        weir.add_edge(u, w, edge_attrs)
        weir.add_edge(w, v, edge_attrs)
        return w


@dataclass(frozen=True)
class AppendEdge(Alteration):
    """Grow a new vertex off *v* and connect it.  Result: the new vertex id.

    With ``relative=True`` the new vertex is placed at ``position(v) + vec``,
    otherwise at *vec*.
    """

    v: VertexRef
    vec: Any
    relative: bool = True
    attrs: AttrItems = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "vec", _freeze_position(self.vec))
        object.__setattr__(self, "attrs", freeze_attrs(self.attrs))

    def apply(self, weir: Weir, resolve: Resolver) -> int:
        v = resolve(self.v)
        offset = weir.as_position(self.vec)
        pos = weir.position(v) + offset if self.relative else offset
        w = weir.add_vertex(pos, normalize_attrs(self.attrs))
        weir.add_edge(v, w)
        return w


@dataclass(frozen=True)
class AddPath(Alteration):
    """Add a chain of new vertices joined by edges.

    With ``closed=True`` (and at least three points) the last vertex is
    joined back to the first.  Result: the tuple of new vertex ids.
    """

    points: Sequence[Any]
    closed: bool = False
    attrs: AttrItems = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(_freeze_position(p) for p in self.points))
        object.__setattr__(self, "attrs", freeze_attrs(self.attrs))

    def apply(self, weir: Weir, resolve: Resolver) -> tuple[int, ...]:
        # Validate everything before the first insert.
        positions = [weir.as_position(p) for p in self.points]
        attrs = normalize_attrs(self.attrs)
        ids = [weir.add_vertex(p) for p in positions]
        for a, b in zip(ids, ids[1:], strict=False):
            weir.add_edge(a, b, attrs)
        if self.closed and len(ids) >= 3:
            weir.add_edge(ids[-1], ids[0], attrs)
        return tuple(ids)
