"""Tests for scopes and the alteration executor.

Covers commit ordering, partial effect on failure, read isolation,
reference resolution, and the scope ownership rules.
"""

from __future__ import annotations

import pytest

from weir.domain.edges import Edge
from weir.domain.errors import (
    CommitError,
    DuplicateEdge,
    ScopeViolation,
    UnknownEdge,
    UnknownVertex,
    UnresolvedRef,
)
from weir.domain.vectors import Vec2
from weir.infrastructure.graph.alterations import (
    AddEdge,
    AddVertex,
    DeleteEdge,
    DeleteVertex,
    MoveVertex,
    Ref,
)
from weir.infrastructure.graph.scope import CommitReport, execute
from weir.infrastructure.graph.store import Weir


class TestCommitOrdering:
    def test_added_vertex_then_edge(self, weir2d: Weir) -> None:
        b = weir2d.add_vertex((1, 0))
        with weir2d.scope() as s:
            a = s % AddVertex((0, 0))
            s % AddEdge(a, b)
        assert weir2d.num_vertices() == 2
        new = s.report.results[0]
        assert weir2d.has_edge(new, b)

    def test_delete_then_edge_fails_with_partial_effect(self, weir2d: Weir) -> None:
        a, b = weir2d.add_vertices([(0, 0), (1, 0)])
        with pytest.raises(CommitError) as exc:
            with weir2d.scope() as s:
                s % DeleteVertex(b)
                s % AddEdge(a, b)
        err = exc.value
        assert err.index == 1
        assert isinstance(err.cause, UnknownVertex)
        assert isinstance(err.__cause__, UnknownVertex)
        assert err.kind == "MissingEndpoint"
        # The deletion before the failure stays applied.
        assert not weir2d.has_vertex(b)
        assert weir2d.has_vertex(a)
        assert weir2d.integrity_issues() == []

    def test_later_alterations_not_applied(self, triangle: Weir) -> None:
        with pytest.raises(CommitError):
            with triangle.scope() as s:
                s % DeleteEdge(0, 1)
                s % AddEdge(1, 2)  # duplicate
                s % DeleteEdge(0, 2)
        assert not triangle.has_edge(0, 1)
        assert triangle.has_edge(0, 2)
        assert s.report is not None
        assert s.report.applied == 1
        assert s.report.failed_index == 1
        assert isinstance(s.report.error, DuplicateEdge)

    def test_each_alteration_sees_previous(self, weir2d: Weir) -> None:
        a, b = weir2d.add_vertices([(0, 0), (1, 0)])
        with weir2d.scope() as s:
            s % AddEdge(a, b)
            s % DeleteEdge(b, a)
            s % AddEdge(a, b)
        assert weir2d.edges() == [Edge(a, b)]

    def test_empty_scope(self, weir2d: Weir) -> None:
        with weir2d.scope() as s:
            pass
        assert s.report == CommitReport(total=0, applied=0)


class TestReadIsolation:
    def test_pending_edge_invisible(self, weir2d: Weir) -> None:
        a, b = weir2d.add_vertices([(0, 0), (1, 0)])
        with weir2d.scope() as s:
            s % AddEdge(a, b)
            assert not s.has_edge(a, b)
            assert not weir2d.has_edge(a, b)
            assert s.degree(a) == 0
        assert weir2d.has_edge(a, b)

    def test_pending_vertex_invisible(self, weir2d: Weir) -> None:
        with weir2d.scope() as s:
            s % AddVertex((0, 0))
            assert s.num_vertices() == 0
            assert list(s.iter_vertices()) == []
        assert weir2d.num_vertices() == 1

    def test_pending_move_invisible(self, weir2d: Weir) -> None:
        v = weir2d.add_vertex((0, 0))
        with weir2d.scope() as s:
            s % MoveVertex(v, (5, 5))
            assert s.position(v) == Vec2(0, 0)
        assert weir2d.position(v) == Vec2(5, 5)

    def test_traversal_walks_committed_snapshot(self, triangle: Weir) -> None:
        visited = []
        with triangle.scope() as s:
            for edge in s.iter_edges():
                visited.append(edge)
                s % DeleteEdge(edge.a, edge.b)
        assert visited == [Edge(0, 1), Edge(0, 2), Edge(1, 2)]
        assert triangle.num_edges() == 0


class TestRefs:
    def test_ref_resolves_to_new_vertex(self, weir2d: Weir) -> None:
        with weir2d.scope() as s:
            a = s % AddVertex((0, 0))
            b = s % AddVertex((1, 0))
            s % AddEdge(a, b)
        assert isinstance(a, Ref)
        assert weir2d.edges() == [Edge(0, 1)]
        assert weir2d.edge_length(0, 1) == 1.0

    def test_ref_from_other_scope(self, weir2d: Weir) -> None:
        with weir2d.scope() as s1:
            stale = s1 % AddVertex((0, 0))
        with pytest.raises(CommitError) as exc:
            with weir2d.scope() as s2:
                s2 % AddEdge(stale, 0)
        assert isinstance(exc.value.cause, ScopeViolation)

    def test_ref_to_later_alteration(self, weir2d: Weir) -> None:
        with pytest.raises(CommitError) as exc:
            with weir2d.scope() as s:
                s % MoveVertex(Ref(s.id, 1), (1, 1))
                s % AddVertex((0, 0))
        assert isinstance(exc.value.cause, UnresolvedRef)

    def test_ref_to_non_vertex_result(self, triangle: Weir) -> None:
        with pytest.raises(CommitError) as exc:
            with triangle.scope() as s:
                moved = s % MoveVertex(0, (1, 1))
                s % AddEdge(moved, 1)
        assert isinstance(exc.value.cause, UnresolvedRef)


class TestScopeRules:
    def test_nested_scope_rejected(self, weir2d: Weir) -> None:
        with weir2d.scope():
            with pytest.raises(ScopeViolation):
                with weir2d.scope():
                    pass

    def test_direct_mutation_rejected_while_open(self, weir2d: Weir) -> None:
        v = weir2d.add_vertex((0, 0))
        with weir2d.scope():
            with pytest.raises(ScopeViolation):
                weir2d.add_vertex((1, 1))
            with pytest.raises(ScopeViolation):
                weir2d.move_vertex(v, (1, 1))
        assert weir2d.num_vertices() == 1

    def test_direct_mutation_allowed_when_unchecked(self) -> None:
        w = Weir(dim=2, check_scopes=False)
        with w.scope():
            w.add_vertex((0, 0))
        assert w.num_vertices() == 1

    def test_scope_reusable_after_exit(self, weir2d: Weir) -> None:
        with weir2d.scope() as s:
            s % AddVertex((0, 0))
        with weir2d.scope() as s:
            s % AddVertex((1, 1))
        assert weir2d.num_vertices() == 2

    def test_closed_scope_rejects_use(self, weir2d: Weir) -> None:
        with weir2d.scope() as s:
            pass
        assert not s.is_open
        with pytest.raises(ScopeViolation):
            s % AddVertex((0, 0))
        with pytest.raises(ScopeViolation):
            s.num_vertices()

    def test_enqueue_requires_alteration(self, weir2d: Weir) -> None:
        with weir2d.scope() as s:
            with pytest.raises(TypeError):
                s % "add"  # type: ignore[operator]

    def test_body_exception_discards_log(self, weir2d: Weir) -> None:
        with pytest.raises(RuntimeError, match="boom"):
            with weir2d.scope() as s:
                s % AddVertex((0, 0))
                raise RuntimeError("boom")
        assert weir2d.num_vertices() == 0
        assert s.report is None
        assert weir2d.active_scope is None

    def test_released_after_failed_commit(self, weir2d: Weir) -> None:
        with pytest.raises(CommitError):
            with weir2d.scope() as s:
                s % DeleteEdge(0, 1)
        assert weir2d.active_scope is None
        assert not weir2d.committing
        weir2d.add_vertex((0, 0))

    def test_pending_and_len(self, weir2d: Weir) -> None:
        with weir2d.scope() as s:
            s.extend([AddVertex((0, 0)), AddVertex((1, 1))])
            assert len(s) == 2
            assert all(isinstance(a, AddVertex) for a in s.pending)


class TestExecute:
    def test_without_scope(self, triangle: Weir) -> None:
        report = execute(triangle, [DeleteEdge(0, 1), DeleteEdge(0, 1)])
        assert not report.ok
        assert report.applied == 1
        assert isinstance(report.error, UnknownEdge)
        assert report.to_dict()["error"]["kind"] == "UnknownEdge"

    def test_rejected_while_scope_open(self, triangle: Weir) -> None:
        with triangle.scope():
            with pytest.raises(ScopeViolation):
                execute(triangle, [DeleteEdge(0, 1)])

    def test_non_weir_errors_propagate(self, weir2d: Weir) -> None:
        class Broken(AddVertex):
            def apply(self, weir, resolve):  # type: ignore[no-untyped-def]
                raise ZeroDivisionError

        with pytest.raises(ZeroDivisionError):
            execute(weir2d, [Broken((0, 0))])
        assert not weir2d.committing


class TestTriangleScenario:
    def test_end_to_end(self, weir2d: Weir) -> None:
        for p in [(0, 0), (1, 0), (0, 1)]:
            weir2d.add_vertex(p)
        with weir2d.scope() as s:
            s % AddEdge(0, 1)
            s % AddEdge(1, 2)
            s % AddEdge(2, 0)
        for u, v in [(0, 1), (1, 2), (0, 2)]:
            assert weir2d.has_edge(u, v)
            assert weir2d.has_edge(v, u)
        for v in range(3):
            assert len(weir2d.incident_edges(v)) == 2
        assert weir2d.edge_length(0, 1) == 1.0
