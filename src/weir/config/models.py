"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, weir.toml only contains overrides.
An empty weir.toml (or none at all) is a valid configuration.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class GraphConfig(BaseModel):
    """[graph] section."""

    model_config = {"frozen": True}

    dim: Literal[2, 3] = 2
    check_scopes: bool = True


class GrowConfig(BaseModel):
    """[grow] section — parameters of the generative growth run."""

    model_config = {"frozen": True}

    seed: int | None = None
    steps: int = Field(default=12, ge=0)
    sides: int = Field(default=6, ge=3)
    radius: float = Field(default=1.0, gt=0)
    split_probability: float = Field(default=0.3, ge=0, le=1)
    append_probability: float = Field(default=0.1, ge=0, le=1)
    append_length: float = Field(default=0.25, ge=0)
    jitter: float = Field(default=0.02, ge=0)
    max_vertices: int = Field(default=5000, ge=1)


class ExportConfig(BaseModel):
    """[export] section."""

    model_config = {"frozen": True}

    indent: int | None = 2


class WeirConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    graph: GraphConfig = Field(default_factory=GraphConfig)
    grow: GrowConfig = Field(default_factory=GrowConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
