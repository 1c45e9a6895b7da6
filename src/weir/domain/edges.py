"""Canonical undirected edges.

An edge is an unordered pair of vertex indices stored with the smaller
index first.  The canonical pair *is* the identity of the edge:
``Edge(3, 1) == Edge(1, 3)`` and both hash the same.

INVARIANT: An Edge never holds a self-loop.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from weir.domain.errors import InvalidEdge


@dataclass(frozen=True, order=True, slots=True)
class Edge:
    """Canonical vertex pair ``(a, b)`` with ``a < b``."""

    a: int
    b: int

    def __post_init__(self) -> None:
        if self.a == self.b:
            raise InvalidEdge(self.a, self.b)
        if self.a > self.b:
            a, b = self.b, self.a
            object.__setattr__(self, "a", a)
            object.__setattr__(self, "b", b)

    @classmethod
    def of(cls, u: int, v: int) -> Edge:
        """Canonicalize an arbitrary pair."""
        return cls(u, v)

    def __iter__(self) -> Iterator[int]:
        yield self.a
        yield self.b

    def __contains__(self, vertex: object) -> bool:
        return vertex == self.a or vertex == self.b

    def other(self, vertex: int) -> int:
        """The endpoint that is not *vertex*."""
        if vertex == self.a:
            return self.b
        if vertex == self.b:
            return self.a
        raise ValueError(f"Vertex {vertex} is not an endpoint of {self}")

    def as_tuple(self) -> tuple[int, int]:
        return (self.a, self.b)

    def __repr__(self) -> str:
        return f"Edge({self.a}, {self.b})"
