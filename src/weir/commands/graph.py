"""Command group: graph analysis on JSON snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from weir.commands._base import WeirGroup
from weir.services.graph import GraphService

if TYPE_CHECKING:
    from weir.commands._context import AppContext
    from weir.services.result import ServiceResult

_GRAPH_EXAMPLES = """\
  weir graph stats web.json
  weir graph components web.json
  weir graph path web.json 0 17
  weir graph mst web.json --output tree.json
  weir graph rng web.json --radius 0.4 -o rng.json"""

_SNAPSHOT = click.Path(exists=True, dir_okay=False)


def _emit_with_output(
    app: AppContext, svc: GraphService, result: ServiceResult, output: str | None
) -> None:
    if result.ok and output:
        app.save_graph(svc.weir, output)
        result = result.model_copy(update={"data": {**result.data, "output": output}})
    app.emit(result)


@click.group(cls=WeirGroup, examples=_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Analyze and rewrite graph snapshots."""


@graph.command(
    examples="""\
  weir graph stats web.json
  weir --json graph stats web.json"""
)
@click.argument("file", type=_SNAPSHOT)
@click.pass_obj
def stats(app: AppContext, file: str) -> None:
    """Vertex/edge counts, total length, and bounding box."""
    app.emit(GraphService(app.load_graph(file)).stats())


@graph.command(
    examples="""\
  weir graph components web.json
  weir -q graph components web.json"""
)
@click.argument("file", type=_SNAPSHOT)
@click.pass_obj
def components(app: AppContext, file: str) -> None:
    """List connected components, largest first."""
    app.emit(GraphService(app.load_graph(file)).components())


@graph.command(
    examples="""\
  weir graph path web.json 0 17
  weir --json graph path web.json 3 9"""
)
@click.argument("file", type=_SNAPSHOT)
@click.argument("source", type=int)
@click.argument("target", type=int)
@click.pass_obj
def path(app: AppContext, file: str, source: int, target: int) -> None:
    """Shortest path between two vertices by edge length."""
    app.emit(GraphService(app.load_graph(file)).path(source, target))


@graph.command(
    examples="""\
  weir graph mst web.json
  weir graph mst web.json --output tree.json"""
)
@click.argument("file", type=_SNAPSHOT)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Delete non-tree edges and write the result here.",
)
@click.pass_obj
def mst(app: AppContext, file: str, output: str | None) -> None:
    """Minimum spanning forest by edge length."""
    svc = GraphService(app.load_graph(file))
    _emit_with_output(app, svc, svc.spanning_tree(prune=output is not None), output)


@graph.command(
    examples="""\
  weir graph rng web.json --radius 0.5
  weir graph rng web.json --radius 0.5 -o rng.json"""
)
@click.argument("file", type=_SNAPSHOT)
@click.option("--radius", type=float, required=True, help="Maximum connection distance.")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the connected graph here.",
)
@click.pass_obj
def rng(app: AppContext, file: str, radius: float, output: str | None) -> None:
    """Add relative-neighborhood edges between nearby vertices."""
    svc = GraphService(app.load_graph(file))
    _emit_with_output(app, svc, svc.relative_neighborhood(radius), output)
