"""Error taxonomy for graph operations.

Every error raised by the graph store, the alteration executor, or a scope
derives from :class:`WeirError`.  Each kind also subclasses the closest
builtin (``KeyError`` for missing ids, ``ValueError`` for rejected input)
so callers that only know the builtins still catch them.

INVARIANT: Errors are structural, never transient.  Nothing in the core
retries an operation that raised one of these.
"""

from __future__ import annotations

from typing import Any


class WeirError(Exception):
    """Base class for all graph errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    @property
    def kind(self) -> str:
        """Short name of the error kind (the class name)."""
        return type(self).__name__


class UnknownVertex(WeirError, KeyError):
    """An operation referenced a vertex absent from the committed state."""

    def __init__(self, vertex: int) -> None:
        WeirError.__init__(self, f"Unknown vertex: {vertex}")
        self.vertex = vertex


class UnknownEdge(WeirError, KeyError):
    """An operation referenced an edge absent from the committed state."""

    def __init__(self, u: int, v: int) -> None:
        WeirError.__init__(self, f"Unknown edge: ({min(u, v)}, {max(u, v)})")
        self.pair = (min(u, v), max(u, v))


class InvalidEdge(WeirError, ValueError):
    """An edge was rejected (self-loop or missing endpoint)."""

    def __init__(self, u: int, v: int, reason: str = "self-loop") -> None:
        WeirError.__init__(self, f"Invalid edge ({u}, {v}): {reason}")
        self.pair = (u, v)
        self.reason = reason


class MissingEndpoint(InvalidEdge, UnknownVertex):
    """An edge endpoint does not exist.

    Both an :class:`InvalidEdge` (the edge cannot be formed) and an
    :class:`UnknownVertex` (the id is not in the graph).
    """

    def __init__(self, u: int, v: int, missing: int) -> None:
        WeirError.__init__(self, f"Invalid edge ({u}, {v}): unknown vertex {missing}")
        self.pair = (u, v)
        self.reason = "missing endpoint"
        self.vertex = missing


class DuplicateEdge(WeirError, ValueError):
    """The canonical pair is already an edge."""

    def __init__(self, u: int, v: int) -> None:
        WeirError.__init__(self, f"Duplicate edge: ({min(u, v)}, {max(u, v)})")
        self.pair = (min(u, v), max(u, v))


class ScopeViolation(WeirError, RuntimeError):
    """Overlapping or re-entrant scope use, or a handle used outside its scope."""


class UnresolvedRef(ScopeViolation):
    """A scope reference could not be resolved to a vertex id."""


class InvalidPosition(WeirError, ValueError):
    """A position does not match the graph dimension."""

    def __init__(self, value: Any, dim: int) -> None:
        WeirError.__init__(self, f"Expected a {dim}D position, got {value!r}")
        self.value = value
        self.dim = dim


class InvalidAttribute(WeirError, TypeError):
    """An attribute key or value is outside the supported value types."""

    def __init__(self, key: Any, value: Any) -> None:
        WeirError.__init__(
            self,
            f"Unsupported attribute {key!r}={value!r} "
            "(values must be bool, int, float, str, Vec2 or Vec3)",
        )
        self.key = key
        self.value = value


class CommitError(WeirError):
    """A scope commit stopped at a failing alteration.

    Alterations before :attr:`index` remain applied.  The underlying error
    is available as :attr:`cause` and is chained as ``__cause__``.
    """

    def __init__(self, report: Any) -> None:
        self.report = report
        self.index: int = report.failed_index
        self.alteration = report.failed
        self.cause: WeirError = report.error
        WeirError.__init__(
            self,
            f"Alteration {self.index} ({self.alteration!r}) failed: "
            f"{self.cause.kind}: {self.cause}",
        )

    @property
    def kind(self) -> str:
        """Kind of the underlying error, e.g. ``"UnknownVertex"``."""
        return self.cause.kind
