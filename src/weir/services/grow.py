"""GrowService — seeded generative growth built on scopes.

Each growth step opens one scope.  The step walks a snapshot of the
committed graph, rolls the dice with the service's ``random.Random``, and
queues its decisions; they land together when the scope ends.  Vertices
and edges created during a step are therefore never visited by that step.
"""

from __future__ import annotations

import logging
import math
import random
from typing import TYPE_CHECKING

from weir.config.models import GrowConfig
from weir.domain.errors import CommitError
from weir.domain.vectors import Vec, Vec2, Vec3
from weir.infrastructure.graph.alterations import AddPath, AppendEdge, MoveVertex, SplitEdge
from weir.services.base import BaseService
from weir.services.contracts import GrowData, dump_validated
from weir.services.result import ServiceResult
from weir.services.telemetry import get_current_span, trace_span, traced

if TYPE_CHECKING:
    from weir.infrastructure.graph.scope import Scope
    from weir.infrastructure.graph.store import Weir

logger = logging.getLogger(__name__)


def random_direction(dim: int, rng: random.Random) -> Vec:
    """Unit vector with a uniformly random direction."""
    if dim == 2:
        return Vec2.from_angle(rng.uniform(0.0, math.tau))
    while True:
        candidate = Vec3(rng.gauss(0, 1), rng.gauss(0, 1), rng.gauss(0, 1))
        if candidate.length() > 1e-12:
            return candidate.normalized()


def polygon_points(dim: int, sides: int, radius: float) -> list[Vec]:
    """Corners of a regular polygon around the origin (in the xy plane)."""
    points: list[Vec] = []
    for i in range(sides):
        corner = Vec2.from_angle(math.tau * i / sides, radius)
        points.append(corner if dim == 2 else Vec3(corner.x, corner.y, 0.0))
    return points


class GrowService(BaseService):
    """Seeds and grows a graph.

    Args:
        weir: The graph to grow.
        rng: Random source.  Pass a seeded ``random.Random`` for
            reproducible runs; defaults to an unseeded one.
    """

    def __init__(self, weir: Weir, rng: random.Random | None = None) -> None:
        super().__init__(weir)
        self._rng = rng if rng is not None else random.Random()

    @property
    def rng(self) -> random.Random:
        return self._rng

    @traced
    def seed_polygon(self, sides: int = 6, radius: float = 1.0) -> ServiceResult:
        """Add a closed regular polygon of *sides* corners."""
        if sides < 3:
            return ServiceResult.fail("seed_polygon", "INVALID_INPUT", "sides must be at least 3")
        if radius <= 0:
            return ServiceResult.fail("seed_polygon", "INVALID_INPUT", "radius must be positive")
        points = polygon_points(self._weir.dim, sides, radius)
        try:
            report = self._run_scope(lambda s: s % AddPath(points, closed=True))
        except CommitError as exc:
            return self._commit_failed("seed_polygon", exc)
        return ServiceResult(
            ok=True,
            op="seed_polygon",
            data={"sides": sides, "radius": radius, "vertices": list(report.results[0])},
        )

    def _plan_step(self, s: Scope, config: GrowConfig) -> None:
        rng = self._rng
        dim = s.dim
        budget = config.max_vertices - s.num_vertices()

        for edge in s.iter_edges():
            if budget <= 0:
                break
            if rng.random() < config.split_probability:
                mid = s.position(edge.a).mid(s.position(edge.b))
                offset = random_direction(dim, rng) * (config.jitter * rng.random())
                s % SplitEdge(edge.a, edge.b, position=mid + offset)
                budget -= 1

        for v in s.iter_vertices():
            if budget <= 0:
                break
            if rng.random() < config.append_probability:
                s % AppendEdge(v, random_direction(dim, rng) * config.append_length)
                budget -= 1

        if config.jitter > 0:
            for v in s.iter_vertices():
                s % MoveVertex(v, random_direction(dim, rng) * (config.jitter * rng.random()))

    @traced
    def grow(self, config: GrowConfig | None = None) -> ServiceResult:
        """Run ``config.steps`` growth steps, seeding a polygon first if empty.

        Every step is one scope: split some edges near their midpoints,
        append short spurs to some vertices, then jitter every vertex.
        Growth stops early once ``config.max_vertices`` is reached.
        """
        config = config or GrowConfig()
        warnings: list[str] = []
        commits = 0
        alterations = 0

        if self._weir.num_vertices() == 0:
            points = polygon_points(self._weir.dim, config.sides, config.radius)
            try:
                report = self._run_scope(lambda s: s % AddPath(points, closed=True))
            except CommitError as exc:
                return self._commit_failed("grow", exc)
            commits += 1
            alterations += report.applied

        steps = 0
        for step in range(config.steps):
            if self._weir.num_vertices() >= config.max_vertices:
                warnings.append(
                    f"Stopped after {step} steps: reached max_vertices={config.max_vertices}"
                )
                break
            with trace_span(f"step-{step}"):
                try:
                    report = self._run_scope(lambda s: self._plan_step(s, config))
                except CommitError as exc:
                    return self._commit_failed("grow", exc)
            commits += 1
            alterations += report.applied
            steps += 1
            logger.debug(
                "Step %d: %d alterations, %d vertices",
                step,
                report.applied,
                self._weir.num_vertices(),
            )

        span = get_current_span()
        if span:
            span.annotate("steps", steps)

        data = {
            "steps": steps,
            "seed": config.seed,
            "commits": commits,
            "alterations": alterations,
            "vertices": self._weir.num_vertices(),
            "edges": self._weir.num_edges(),
        }
        return ServiceResult(
            ok=True,
            op="grow",
            data=dump_validated(GrowData, data),
            warnings=warnings,
        )
