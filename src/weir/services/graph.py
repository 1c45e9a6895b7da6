"""GraphService — analysis and topology helpers over a weir graph.

Read-only algorithms run on the NetworkX view from ``self.engine``.
Operations that rewrite topology (``spanning_tree`` with ``prune=True``,
``relative_neighborhood``) decide on the committed state first and apply
their changes in a single scope.
"""

from __future__ import annotations

from itertools import combinations
from typing import Any

import networkx as nx

from weir.domain.edges import Edge
from weir.domain.errors import CommitError
from weir.infrastructure.graph.alterations import AddEdge, DeleteEdge
from weir.services.base import BaseService
from weir.services.contracts import GraphStatsData, dump_validated
from weir.services.result import ServiceResult
from weir.services.telemetry import trace_span, traced


def _edge_list(edges: list[Edge]) -> list[list[int]]:
    return [[e.a, e.b] for e in edges]


class GraphService(BaseService):
    """Handles graph statistics, paths, trees, and neighborhoods."""

    @traced
    def stats(self) -> ServiceResult:
        """Counts, total edge length, mean degree, and bounding box."""
        w = self._weir
        g = self.engine.graph
        n = w.num_vertices()
        bbox = w.bounding_box()
        data = {
            "dim": w.dim,
            "vertices": n,
            "edges": w.num_edges(),
            "components": nx.number_connected_components(g) if n else 0,
            "total_length": round(sum(d["length"] for _, _, d in g.edges(data=True)), 6),
            "mean_degree": round(2 * w.num_edges() / n, 4) if n else 0.0,
            "bbox": [bbox[0].to_list(), bbox[1].to_list()] if bbox else None,
        }
        return ServiceResult(ok=True, op="stats", data=dump_validated(GraphStatsData, data))

    @traced
    def components(self) -> ServiceResult:
        """Connected components, largest first, each as a sorted id list."""
        g = self.engine.graph
        comps = sorted(
            (sorted(c) for c in nx.connected_components(g)),
            key=lambda c: (-len(c), c[0]),
        )
        return ServiceResult(
            ok=True,
            op="components",
            data={"count": len(comps), "items": comps},
        )

    @traced
    def path(self, source: int, target: int) -> ServiceResult:
        """Shortest path between two vertices, weighted by edge length."""
        w = self._weir
        for v in (source, target):
            if not w.has_vertex(v):
                return ServiceResult.fail("path", "NOT_FOUND", f"Unknown vertex: {v}", vertex=v)
        g = self.engine.graph
        try:
            nodes = nx.shortest_path(g, source, target, weight="length")
        except nx.NetworkXNoPath:
            return ServiceResult.fail(
                "path",
                "NO_PATH",
                f"No path between {source} and {target}",
                source=source,
                target=target,
            )
        length = sum(w.edge_length(a, b) for a, b in zip(nodes, nodes[1:], strict=False))
        return ServiceResult(
            ok=True,
            op="path",
            data={
                "source": source,
                "target": target,
                "vertices": nodes,
                "hops": len(nodes) - 1,
                "length": round(length, 6),
            },
        )

    @traced
    def spanning_tree(self, *, prune: bool = False) -> ServiceResult:
        """Minimum spanning forest by edge length.

        With ``prune=True`` every edge outside the forest is deleted from
        the graph in one scope.
        """
        g = self.engine.graph
        tree = sorted(Edge(a, b) for a, b in nx.minimum_spanning_edges(g, weight="length", data=False))
        keep = set(tree)
        extra = [e for e in self._weir.edges() if e not in keep]

        data: dict[str, Any] = {"edges": _edge_list(tree), "count": len(tree), "removed": 0}
        if prune and extra:
            with trace_span("prune"):
                try:
                    report = self._run_scope(
                        lambda s: s.extend(DeleteEdge(e.a, e.b) for e in extra)
                    )
                except CommitError as exc:
                    return self._commit_failed("spanning_tree", exc)
            data["removed"] = report.applied
        return ServiceResult(ok=True, op="spanning_tree", data=data)

    @traced
    def relative_neighborhood(self, radius: float) -> ServiceResult:
        """Connect vertex pairs that form the relative neighborhood graph.

        ``(u, v)`` closer than *radius* is connected unless some third
        vertex ``k`` satisfies ``max(d(u, k), d(v, k)) < d(u, v)``.
        Existing edges are kept.
        """
        if radius <= 0:
            return ServiceResult.fail(
                "relative_neighborhood", "INVALID_INPUT", "radius must be positive"
            )
        w = self._weir
        ids = w.vertex_ids()
        pos = {v: w.position(v) for v in ids}

        with trace_span("candidates") as span:
            candidates: list[tuple[int, int]] = []
            for u, v in combinations(ids, 2):
                d = pos[u].dist(pos[v])
                if d >= radius or w.has_edge(u, v):
                    continue
                if any(
                    max(pos[u].dist(pos[k]), pos[v].dist(pos[k])) < d
                    for k in ids
                    if k != u and k != v
                ):
                    continue
                candidates.append((u, v))
            if span:
                span.annotate("candidates", len(candidates))

        try:
            report = self._run_scope(
                lambda s: s.extend(AddEdge(u, v, exist_ok=True) for u, v in candidates)
            )
        except CommitError as exc:
            return self._commit_failed("relative_neighborhood", exc)

        return ServiceResult(
            ok=True,
            op="relative_neighborhood",
            data={
                "radius": radius,
                "added": report.applied,
                "edges": _edge_list(sorted(Edge(u, v) for u, v in candidates)),
            },
        )
