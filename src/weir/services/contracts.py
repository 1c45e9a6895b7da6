"""Typed payload contracts for service boundaries and snapshot files.

These models validate payload shapes before they leave the service layer,
and define the JSON snapshot document written by ``ExportService``.
Attribute values are a discriminated union on ``kind``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from weir.domain.attributes import AttrValue, attr_kind
from weir.domain.vectors import vec


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


# ── Attribute payloads ───────────────────────────────────────────────


class NumberAttr(BaseModel):
    kind: Literal["number"] = "number"
    value: int | float


class BoolAttr(BaseModel):
    kind: Literal["bool"] = "bool"
    value: bool


class TextAttr(BaseModel):
    kind: Literal["text"] = "text"
    value: str


class VecAttr(BaseModel):
    kind: Literal["vec"] = "vec"
    value: list[float] = Field(min_length=2, max_length=3)


AttrPayload = Annotated[
    NumberAttr | BoolAttr | TextAttr | VecAttr,
    Field(discriminator="kind"),
]


def encode_attr(value: AttrValue) -> AttrPayload:
    kind = attr_kind(value)
    if kind == "bool":
        return BoolAttr(value=value)  # type: ignore[arg-type]
    if kind == "number":
        return NumberAttr(value=value)  # type: ignore[arg-type]
    if kind == "text":
        return TextAttr(value=value)  # type: ignore[arg-type]
    return VecAttr(value=list(value))  # type: ignore[arg-type]


def decode_attr(payload: AttrPayload) -> AttrValue:
    if isinstance(payload, VecAttr):
        return vec(*payload.value)
    return payload.value


def encode_attrs(attrs: dict[str, AttrValue]) -> dict[str, AttrPayload]:
    return {key: encode_attr(value) for key, value in attrs.items()}


def decode_attrs(attrs: dict[str, AttrPayload]) -> dict[str, AttrValue]:
    return {key: decode_attr(payload) for key, payload in attrs.items()}


# ── Snapshot document ────────────────────────────────────────────────


class VertexRecord(BaseModel):
    id: int = Field(ge=0)
    position: list[float]
    attrs: dict[str, AttrPayload] = Field(default_factory=dict)


class EdgeRecord(BaseModel):
    a: int
    b: int
    attrs: dict[str, AttrPayload] = Field(default_factory=dict)


class GraphDocument(BaseModel):
    """JSON snapshot of a graph, preserving vertex ids and the id counter."""

    format: Literal["weir"] = "weir"
    version: Literal[1] = 1
    dim: Literal[2, 3]
    next_index: int = Field(ge=0)
    vertices: list[VertexRecord] = Field(default_factory=list)
    edges: list[EdgeRecord] = Field(default_factory=list)


# ── Service payloads ─────────────────────────────────────────────────


class GraphStatsData(BaseModel):
    """Payload contract for ``GraphService.stats``."""

    model_config = ConfigDict(extra="forbid")

    dim: int
    vertices: int
    edges: int
    components: int
    total_length: float
    mean_degree: float
    bbox: list[list[float]] | None


class GrowData(BaseModel):
    """Payload contract for ``GrowService.grow``."""

    model_config = ConfigDict(extra="allow")

    steps: int
    seed: int | None
    commits: int
    alterations: int
    vertices: int
    edges: int
