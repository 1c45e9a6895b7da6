"""Tests for individual alteration kinds."""

from __future__ import annotations

import pytest

from weir.domain.edges import Edge
from weir.domain.errors import CommitError, DuplicateEdge, InvalidAttribute, UnknownEdge
from weir.domain.vectors import Vec2
from weir.infrastructure.graph.alterations import (
    AddEdge,
    AddPath,
    AddVertex,
    AppendEdge,
    DeleteVertex,
    SetEdgeAttr,
    SetVertexAttr,
    SplitEdge,
)
from weir.infrastructure.graph.scope import execute
from weir.infrastructure.graph.store import Weir


class TestImmutability:
    def test_frozen(self) -> None:
        alt = AddEdge(1, 2)
        with pytest.raises(AttributeError):
            alt.u = 3  # type: ignore[misc]

    def test_position_snapshot(self) -> None:
        pos = [1.0, 2.0]
        alt = AddVertex(pos)
        pos[0] = 99.0
        assert alt.position == (1.0, 2.0)

    def test_attrs_snapshot(self) -> None:
        attrs = {"w": 1}
        alt = AddVertex((0, 0), attrs)
        attrs["w"] = 2
        assert alt.attrs == (("w", 1),)

    def test_construction_does_not_touch_graph(self, weir2d: Weir) -> None:
        AddVertex((0, 0))
        assert weir2d.num_vertices() == 0


class TestAddEdge:
    def test_exist_ok(self, triangle: Weir) -> None:
        report = execute(triangle, [AddEdge(1, 0, exist_ok=True)])
        assert report.ok
        assert report.results == (Edge(0, 1),)
        assert triangle.num_edges() == 3

    def test_duplicate_without_exist_ok(self, triangle: Weir) -> None:
        report = execute(triangle, [AddEdge(1, 0)])
        assert isinstance(report.error, DuplicateEdge)

    def test_attrs(self, weir2d: Weir) -> None:
        weir2d.add_vertices([(0, 0), (1, 0)])
        execute(weir2d, [AddEdge(0, 1, {"kind": "rib"})])
        assert weir2d.edge_attrs(0, 1) == {"kind": "rib"}


class TestSplitEdge:
    def test_midpoint(self, triangle: Weir) -> None:
        triangle.set_edge_attr(0, 1, "w", 2)
        report = execute(triangle, [SplitEdge(0, 1)])
        w = report.results[0]
        assert triangle.position(w) == Vec2(0.5, 0)
        assert not triangle.has_edge(0, 1)
        assert triangle.has_edge(0, w)
        assert triangle.has_edge(w, 1)
        assert triangle.edge_attrs(0, w) == {"w": 2}
        assert triangle.integrity_issues() == []

    def test_explicit_position(self, triangle: Weir) -> None:
        report = execute(triangle, [SplitEdge(0, 1, position=(0.25, 0.1))])
        assert triangle.position(report.results[0]) == Vec2(0.25, 0.1)

    def test_missing_edge_leaves_no_trace(self, weir2d: Weir) -> None:
        weir2d.add_vertices([(0, 0), (1, 0)])
        before = weir2d.next_index
        report = execute(weir2d, [SplitEdge(0, 1)])
        assert isinstance(report.error, UnknownEdge)
        assert weir2d.next_index == before
        assert weir2d.num_vertices() == 2

    def test_bad_vertex_attrs_keep_edge(self, triangle: Weir) -> None:
        before = triangle.next_index
        report = execute(triangle, [SplitEdge(0, 1, attrs={"k": [1, 2]})])
        assert isinstance(report.error, InvalidAttribute)
        assert triangle.has_edge(0, 1)
        assert triangle.next_index == before
        assert triangle.integrity_issues() == []


class TestAppendEdge:
    def test_relative(self, triangle: Weir) -> None:
        report = execute(triangle, [AppendEdge(1, (0.5, 0))])
        w = report.results[0]
        assert triangle.position(w) == Vec2(1.5, 0)
        assert triangle.has_edge(1, w)

    def test_absolute(self, triangle: Weir) -> None:
        report = execute(triangle, [AppendEdge(1, (3, 3), relative=False)])
        assert triangle.position(report.results[0]) == Vec2(3, 3)

    def test_bad_attrs_add_nothing(self, triangle: Weir) -> None:
        report = execute(triangle, [AppendEdge(1, (0.5, 0), attrs={"k": None})])
        assert isinstance(report.error, InvalidAttribute)
        assert triangle.num_vertices() == 3


class TestAddPath:
    def test_open(self, weir2d: Weir) -> None:
        report = execute(weir2d, [AddPath([(0, 0), (1, 0), (2, 0)])])
        assert report.results == ((0, 1, 2),)
        assert weir2d.edges() == [Edge(0, 1), Edge(1, 2)]

    def test_closed(self, weir2d: Weir) -> None:
        execute(weir2d, [AddPath([(0, 0), (1, 0), (0, 1)], closed=True)])
        assert weir2d.edges() == [Edge(0, 1), Edge(0, 2), Edge(1, 2)]

    def test_closed_needs_three_points(self, weir2d: Weir) -> None:
        execute(weir2d, [AddPath([(0, 0), (1, 0)], closed=True)])
        assert weir2d.num_edges() == 1

    def test_ref_to_path_is_not_a_vertex(self, weir2d: Weir) -> None:
        with pytest.raises(CommitError):
            with weir2d.scope() as s:
                path = s % AddPath([(0, 0), (1, 0)])
                s % DeleteVertex(path)

    def test_bad_attrs_add_nothing(self, weir2d: Weir) -> None:
        report = execute(weir2d, [AddPath([(0, 0), (1, 0)], attrs={"k": object()})])
        assert isinstance(report.error, InvalidAttribute)
        assert weir2d.num_vertices() == 0
        assert weir2d.next_index == 0


class TestAttrs:
    def test_set_vertex_and_edge_attrs(self, triangle: Weir) -> None:
        report = execute(
            triangle,
            [SetVertexAttr(0, "root", True), SetEdgeAttr(2, 1, "len", 1.4)],
        )
        assert report.ok
        assert triangle.get_vertex_attr(0, "root") is True
        assert triangle.get_edge_attr(1, 2, "len") == 1.4

    def test_invalid_value_fails_commit(self, triangle: Weir) -> None:
        report = execute(triangle, [SetVertexAttr(0, "bad", object())])
        assert report.error is not None
        assert report.error.kind == "InvalidAttribute"
