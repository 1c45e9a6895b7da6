"""GraphEngine — lazily built NetworkX view of a weir graph.

Rebuilt whenever the graph's version counter has moved since the last
build, so algorithms always run on committed state.  Callers that never
need an algorithm never pay for the build.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from weir.infrastructure.graph.store import Weir

type _Graph = nx.Graph


class GraphEngine:
    """Lazy-loading NetworkX graph backed by a :class:`Weir`."""

    def __init__(self, weir: Weir) -> None:
        self._weir = weir
        self._graph: _Graph | None = None
        self._built_version: int | None = None

    @property
    def graph(self) -> _Graph:
        """Return the graph, rebuilding it if the weir changed since last access."""
        if self._graph is None or self._built_version != self._weir.version:
            self._graph = self._build()
            self._built_version = self._weir.version
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached graph, forcing rebuild on next access."""
        self._graph = None
        self._built_version = None

    def _build(self) -> _Graph:
        """Build an undirected graph with positions and Euclidean edge weights.

        Adds all vertices first so isolated ones are visible to algorithms.
        """
        w = self._weir
        g: _Graph = nx.Graph()
        for v in w.vertex_ids():
            g.add_node(v, **{**w.vertex_attrs(v), "pos": w.position(v).coords()})
        for edge in w.edges():
            attrs = {**w.edge_attrs(edge.a, edge.b), "length": w.edge_length(edge.a, edge.b)}
            g.add_edge(edge.a, edge.b, **attrs)
        return g
