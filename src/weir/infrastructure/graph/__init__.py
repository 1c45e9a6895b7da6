"""Graph store and the deferred-alteration protocol."""

from weir.infrastructure.graph.alterations import (
    AddEdge,
    AddPath,
    AddVertex,
    AppendEdge,
    Alteration,
    DeleteEdge,
    DeleteVertex,
    MoveVertex,
    Ref,
    SetEdgeAttr,
    SetVertexAttr,
    SplitEdge,
)
from weir.infrastructure.graph.scope import CommitReport, Scope, execute
from weir.infrastructure.graph.store import Weir

__all__ = [
    "AddEdge",
    "AddPath",
    "AddVertex",
    "AppendEdge",
    "Alteration",
    "CommitReport",
    "DeleteEdge",
    "DeleteVertex",
    "MoveVertex",
    "Ref",
    "Scope",
    "SetEdgeAttr",
    "SetVertexAttr",
    "SplitEdge",
    "Weir",
    "execute",
]
