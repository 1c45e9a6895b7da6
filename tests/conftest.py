"""Shared pytest fixtures for weir tests."""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from weir.infrastructure.graph.store import Weir
from weir.services.export import ExportService
from weir.services.telemetry import _current_span, disable_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None]:
    """Keep WEIR_* variables and stray config files out of every test."""
    for key in list(os.environ):
        if key.startswith("WEIR_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    yield
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture
def weir2d() -> Weir:
    return Weir(dim=2)


@pytest.fixture
def triangle() -> Weir:
    """Vertices 0, 1, 2 at (0,0), (1,0), (0,1) joined in a cycle."""
    w = Weir(dim=2)
    a, b, c = w.add_vertices([(0, 0), (1, 0), (0, 1)])
    w.add_edge(a, b)
    w.add_edge(b, c)
    w.add_edge(c, a)
    return w


@pytest.fixture
def square_with_tail() -> Weir:
    """Unit square 0-1-2-3 with a diagonal 0-2, a tail 2-4, and isolated vertex 5."""
    w = Weir(dim=2)
    w.add_vertices([(0, 0), (1, 0), (1, 1), (0, 1), (2, 1), (5, 5)])
    for u, v in [(0, 1), (1, 2), (2, 3), (3, 0), (0, 2), (2, 4)]:
        w.add_edge(u, v)
    return w


@pytest.fixture
def snapshot(tmp_path: Path, square_with_tail: Weir) -> Path:
    """``square_with_tail`` saved as a JSON snapshot."""
    path = tmp_path / "web.json"
    result = ExportService(square_with_tail).export_json(path)
    assert result.ok
    return path
