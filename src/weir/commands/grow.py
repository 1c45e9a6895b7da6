"""Command: grow a graph from a seed polygon."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Any

import click

from weir.commands._base import WeirCommand
from weir.infrastructure.graph.store import Weir
from weir.services.grow import GrowService

if TYPE_CHECKING:
    from weir.commands._context import AppContext


@click.command(
    cls=WeirCommand,
    examples="""\
  weir grow
  weir grow --steps 40 --seed 7 --output web.json
  weir grow --dim 3 --sides 5 --seed 1 -o web3d.json
  weir --json grow --steps 5""",
)
@click.option("--steps", type=click.IntRange(min=0), default=None, help="Growth steps.")
@click.option("--seed", type=int, default=None, help="Random seed for a reproducible run.")
@click.option("--sides", type=click.IntRange(min=3), default=None, help="Seed polygon corners.")
@click.option("--dim", type=click.Choice(["2", "3"]), default=None, help="Position dimension.")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the grown graph as a JSON snapshot.",
)
@click.pass_obj
def grow(
    app: AppContext,
    steps: int | None,
    seed: int | None,
    sides: int | None,
    dim: str | None,
    output: str | None,
) -> None:
    """Grow a graph by repeated scoped split/append/jitter steps."""
    overrides: dict[str, Any] = {
        k: v for k, v in {"steps": steps, "seed": seed, "sides": sides}.items() if v is not None
    }
    config = app.settings.grow.model_copy(update=overrides)
    graph_cfg = app.settings.graph
    if dim:
        graph_cfg = graph_cfg.model_copy(update={"dim": int(dim)})
    weir = Weir.from_config(graph_cfg)
    result = GrowService(weir, random.Random(config.seed)).grow(config)
    if result.ok and output:
        app.save_graph(weir, output)
        result = result.model_copy(update={"data": {**result.data, "output": output}})
    app.emit(result)
