"""weir — a positioned vertex/edge graph with scoped, deferred alterations."""

from weir.domain.edges import Edge
from weir.domain.errors import (
    CommitError,
    DuplicateEdge,
    InvalidAttribute,
    InvalidEdge,
    InvalidPosition,
    MissingEndpoint,
    ScopeViolation,
    UnknownEdge,
    UnknownVertex,
    UnresolvedRef,
    WeirError,
)
from weir.domain.vectors import Vec2, Vec3, vec
from weir.infrastructure.graph import (
    AddEdge,
    AddPath,
    AddVertex,
    Alteration,
    AppendEdge,
    CommitReport,
    DeleteEdge,
    DeleteVertex,
    MoveVertex,
    Ref,
    Scope,
    SetEdgeAttr,
    SetVertexAttr,
    SplitEdge,
    Weir,
    execute,
)
from weir.infrastructure.graph.iteration import (
    iter_edges,
    iter_incident_edges,
    iter_vertices,
    random_edge,
    random_incident_edge,
    random_vertex,
    sample_vertices,
)

__version__ = "0.1.0"

__all__ = [
    "AddEdge",
    "AddPath",
    "AddVertex",
    "Alteration",
    "AppendEdge",
    "CommitError",
    "CommitReport",
    "DeleteEdge",
    "DeleteVertex",
    "DuplicateEdge",
    "Edge",
    "InvalidAttribute",
    "InvalidEdge",
    "InvalidPosition",
    "MissingEndpoint",
    "MoveVertex",
    "Ref",
    "Scope",
    "ScopeViolation",
    "SetEdgeAttr",
    "SetVertexAttr",
    "SplitEdge",
    "UnknownEdge",
    "UnknownVertex",
    "UnresolvedRef",
    "Vec2",
    "Vec3",
    "Weir",
    "WeirError",
    "execute",
    "iter_edges",
    "iter_incident_edges",
    "iter_vertices",
    "random_edge",
    "random_incident_edge",
    "random_vertex",
    "sample_vertices",
    "vec",
]
