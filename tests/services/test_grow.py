"""Tests for GrowService — seeded generative growth."""

from __future__ import annotations

import math
import random

import pytest

from weir.config.models import GrowConfig
from weir.domain.vectors import Vec2
from weir.infrastructure.graph.store import Weir
from weir.services.grow import GrowService, polygon_points, random_direction


def _grow(seed: int, dim: int = 2, **overrides: object) -> tuple[Weir, dict]:
    weir = Weir(dim=dim)
    config = GrowConfig(seed=seed, **overrides)  # type: ignore[arg-type]
    result = GrowService(weir, random.Random(seed)).grow(config)
    assert result.ok
    return weir, result.data


class TestHelpers:
    def test_polygon_points(self) -> None:
        pts = polygon_points(2, 4, 2.0)
        assert len(pts) == 4
        assert pts[0].is_close(Vec2(2, 0))
        assert all(math.isclose(p.length(), 2.0) for p in pts)

    def test_polygon_points_3d_flat(self) -> None:
        assert all(p.z == 0.0 for p in polygon_points(3, 5, 1.0))  # type: ignore[union-attr]

    @pytest.mark.parametrize("dim", [2, 3])
    def test_random_direction_is_unit(self, dim: int) -> None:
        rng = random.Random(0)
        for _ in range(10):
            d = random_direction(dim, rng)
            assert d.dim == dim
            assert math.isclose(d.length(), 1.0)


class TestSeedPolygon:
    def test_closed_ring(self, weir2d: Weir) -> None:
        result = GrowService(weir2d).seed_polygon(5)
        assert result.data["vertices"] == [0, 1, 2, 3, 4]
        assert weir2d.num_edges() == 5
        assert all(weir2d.degree(v) == 2 for v in weir2d.vertex_ids())

    def test_too_few_sides(self, weir2d: Weir) -> None:
        result = GrowService(weir2d).seed_polygon(2)
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"
        assert weir2d.num_vertices() == 0

    def test_bad_radius(self, weir2d: Weir) -> None:
        assert not GrowService(weir2d).seed_polygon(4, radius=0).ok


class TestGrow:
    def test_seeds_empty_graph(self) -> None:
        weir, data = _grow(1, steps=0, sides=7)
        assert weir.num_vertices() == 7
        assert data["steps"] == 0
        assert data["commits"] == 1

    def test_grows_and_stays_consistent(self) -> None:
        weir, data = _grow(3, steps=8)
        assert data["steps"] == 8
        assert data["commits"] == 9
        assert weir.num_vertices() > 6
        assert data["vertices"] == weir.num_vertices()
        assert data["edges"] == weir.num_edges()
        assert weir.integrity_issues() == []

    def test_same_seed_same_graph(self) -> None:
        a, _ = _grow(11, steps=6)
        b, _ = _grow(11, steps=6)
        assert a.edges() == b.edges()
        assert [a.position(v) for v in a.vertex_ids()] == [b.position(v) for v in b.vertex_ids()]

    def test_different_seed_differs(self) -> None:
        a, _ = _grow(1, steps=6)
        b, _ = _grow(2, steps=6)
        assert [a.position(v) for v in a.vertex_ids()] != [b.position(v) for v in b.vertex_ids()]

    def test_3d(self) -> None:
        weir, _ = _grow(5, dim=3, steps=4)
        assert weir.dim == 3
        assert weir.integrity_issues() == []

    def test_max_vertices_stops_early(self) -> None:
        weir, data = _grow(4, steps=50, split_probability=1.0, max_vertices=20)
        assert weir.num_vertices() <= 20
        assert data["steps"] < 50

    def test_max_vertices_warning(self) -> None:
        weir = Weir()
        config = GrowConfig(seed=4, steps=50, split_probability=1.0, max_vertices=20)
        result = GrowService(weir, random.Random(4)).grow(config)
        assert any("max_vertices" in w for w in result.warnings)

    def test_no_jitter_keeps_seed_positions(self) -> None:
        weir, _ = _grow(
            9, steps=3, jitter=0.0, split_probability=0.0, append_probability=0.0, sides=4
        )
        assert weir.position(0).is_close(Vec2(1, 0))
        assert weir.num_vertices() == 4

    def test_grows_existing_graph(self, triangle: Weir) -> None:
        result = GrowService(triangle, random.Random(0)).grow(
            GrowConfig(steps=2, split_probability=1.0)
        )
        assert result.data["commits"] == 2
        # Every edge of each step's snapshot was split: 3 -> 6 -> 12.
        assert triangle.num_edges() >= 12
