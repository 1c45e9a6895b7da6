"""Snapshot iteration over a graph.

Each helper captures the ids it will yield at call time, so a traversal
keeps walking the structure as it stood when it started even if the graph
changes underneath it.  A fresh call takes a fresh snapshot.

Random helpers take an explicit :class:`random.Random` so results are
reproducible with a seed.  They draw from the committed state only.
"""

from __future__ import annotations

import random
from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from weir.domain.edges import Edge
    from weir.infrastructure.graph.store import Weir


def iter_vertices(weir: Weir) -> Iterator[int]:
    """Vertex ids in ascending order, as of this call."""
    return iter(weir.vertex_ids())


def iter_edges(weir: Weir) -> Iterator[Edge]:
    """Edges in ascending canonical order, as of this call."""
    return iter(weir.edges())


def iter_incident_edges(weir: Weir, v: int) -> Iterator[Edge]:
    """Edges touching *v* in ascending order, as of this call.

    Raises UnknownVertex if *v* is absent.
    """
    return iter(sorted(weir.incident_edges(v)))


def random_vertex(weir: Weir, rng: random.Random) -> int | None:
    ids = weir.vertex_ids()
    return rng.choice(ids) if ids else None


def random_edge(weir: Weir, rng: random.Random) -> Edge | None:
    edges = weir.edges()
    return rng.choice(edges) if edges else None


def random_incident_edge(weir: Weir, v: int, rng: random.Random) -> Edge | None:
    edges = sorted(weir.incident_edges(v))
    return rng.choice(edges) if edges else None


def sample_vertices(weir: Weir, k: int, rng: random.Random) -> list[int]:
    """Up to *k* distinct vertex ids, without replacement."""
    ids = weir.vertex_ids()
    return rng.sample(ids, min(k, len(ids)))
