"""Vector kernel — immutable 2D/3D vectors backed by numpy.

Each vector wraps a read-only ``float64`` array.  Arithmetic is elementwise
between vectors of the same dimension and broadcasts when the other operand
is a plain number.  All operations return new vectors; nothing here mutates
its operands.  Equality and hashing follow the coordinates, so vectors
behave as values (dict keys, set members).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any, ClassVar, Self

import numpy as np
import numpy.typing as npt

from weir.domain.errors import InvalidPosition

type Number = int | float
type FloatArray = npt.NDArray[np.float64]

_SCALARS = (int, float, np.integer, np.floating)


def _is_scalar(value: Any) -> bool:
    return isinstance(value, _SCALARS) and not isinstance(value, (bool, np.bool_))


class _VecOps(ABC):
    """Shared arithmetic for :class:`Vec2` and :class:`Vec3`."""

    __slots__ = ("_arr",)

    dim: ClassVar[int]
    _arr: FloatArray

    def _init(self, coords: Iterable[float]) -> None:
        arr = np.array(list(coords), dtype=np.float64)
        arr.flags.writeable = False
        object.__setattr__(self, "_arr", arr)

    @classmethod
    def _wrap(cls, arr: FloatArray) -> Self:
        obj = object.__new__(cls)
        obj._init(arr)
        return obj

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self) -> tuple[type[Self], tuple[float, ...]]:
        return type(self), self.coords()

    def _operand(self, other: Any) -> FloatArray | float | None:
        if _is_scalar(other):
            return float(other)
        if isinstance(other, _VecOps) and other.dim == self.dim:
            return other._arr
        return None

    @property
    def array(self) -> FloatArray:
        """The read-only coordinate array."""
        return self._arr

    def coords(self) -> tuple[float, ...]:
        return tuple(self._arr.tolist())

    def __iter__(self) -> Iterator[float]:
        return iter(self.coords())

    def __len__(self) -> int:
        return self.dim

    def __getitem__(self, index: int) -> float:
        return self.coords()[index]

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return bool(np.array_equal(self._arr, other._arr))  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, *self.coords()))

    def __repr__(self) -> str:
        fields = ", ".join(f"{n}={c!r}" for n, c in zip("xyz", self.coords(), strict=False))
        return f"{type(self).__name__}({fields})"

    def __add__(self, other: Any) -> Self:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(self._arr + o)

    __radd__ = __add__

    def __sub__(self, other: Any) -> Self:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(self._arr - o)

    def __rsub__(self, other: Any) -> Self:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(o - self._arr)

    def __mul__(self, other: Any) -> Self:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        return self._wrap(self._arr * o)

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> Self:
        o = self._operand(other)
        if o is None:
            return NotImplemented
        if isinstance(o, float) and o == 0.0:
            raise ZeroDivisionError("vector division by zero")
        return self._wrap(self._arr / o)

    def __neg__(self) -> Self:
        return self._wrap(-self._arr)

    def dot(self, other: Self) -> float:
        return float(np.dot(self._arr, other._arr))

    def length(self) -> float:
        return float(np.linalg.norm(self._arr))

    def dist(self, other: Self) -> float:
        return float(np.linalg.norm(self._arr - other._arr))

    def normalized(self) -> Self:
        """Unit vector in the same direction.

        The zero vector normalizes to itself rather than raising.
        """
        n = np.linalg.norm(self._arr)
        if n == 0.0:
            return self
        return self._wrap(self._arr / n)

    def lerp(self, other: Self, t: float) -> Self:
        """Linear interpolation: ``self`` at ``t=0``, ``other`` at ``t=1``."""
        return self._wrap(self._arr + (other._arr - self._arr) * t)

    def mid(self, other: Self) -> Self:
        return self.lerp(other, 0.5)

    def is_close(self, other: Self, *, abs_tol: float = 1e-9) -> bool:
        return bool(np.allclose(self._arr, other._arr, rtol=1e-9, atol=abs_tol))

    def to_list(self) -> list[float]:
        return self._arr.tolist()

    @abstractmethod
    def cross(self, other: Self) -> Any:
        """Cross product; a scalar in 2D, a vector in 3D."""


class Vec2(_VecOps):
    """2D vector."""

    __slots__ = ()

    dim = 2

    def __init__(self, x: float = 0.0, y: float = 0.0) -> None:
        self._init((x, y))

    @property
    def x(self) -> float:
        return float(self._arr[0])

    @property
    def y(self) -> float:
        return float(self._arr[1])

    def cross(self, other: Vec2) -> float:
        """Scalar z-component of the 3D cross product."""
        # np.cross on 2-vectors is deprecated in numpy 2
        a, b = self._arr, other._arr
        return float(a[0] * b[1] - a[1] * b[0])

    def perp(self) -> Vec2:
        """Counter-clockwise perpendicular."""
        return Vec2(-self.y, self.x)

    @classmethod
    def from_angle(cls, angle: float, radius: float = 1.0) -> Vec2:
        return cls._wrap(np.array([np.cos(angle), np.sin(angle)]) * radius)


class Vec3(_VecOps):
    """3D vector."""

    __slots__ = ()

    dim = 3

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self._init((x, y, z))

    @property
    def x(self) -> float:
        return float(self._arr[0])

    @property
    def y(self) -> float:
        return float(self._arr[1])

    @property
    def z(self) -> float:
        return float(self._arr[2])

    def cross(self, other: Vec3) -> Vec3:
        return self._wrap(np.cross(self._arr, other._arr))


type Vec = Vec2 | Vec3

_VEC_TYPES: dict[int, type[Vec2] | type[Vec3]] = {2: Vec2, 3: Vec3}


def vec(*coords: Number) -> Vec:
    """Build a :class:`Vec2` or :class:`Vec3` from 2 or 3 numbers."""
    cls = _VEC_TYPES.get(len(coords))
    if cls is None:
        raise InvalidPosition(coords, 2 if len(coords) < 2 else 3)
    return cls(*coords)


def zero(dim: int) -> Vec:
    return _VEC_TYPES[dim]()


def as_vec(value: Any, dim: int) -> Vec:
    """Coerce *value* (a vector, an array, or a sequence of numbers) to a *dim*-vector.

    Raises :class:`InvalidPosition` when the value has the wrong length or
    holds non-numeric components.
    """
    if isinstance(value, _VecOps):
        if value.dim != dim:
            raise InvalidPosition(value, dim)
        return value  # type: ignore[return-value]
    if isinstance(value, (str, bytes)):
        raise InvalidPosition(value, dim)
    try:
        coords = tuple(value)
    except TypeError:
        raise InvalidPosition(value, dim) from None
    if len(coords) != dim or not all(_is_scalar(c) for c in coords):
        raise InvalidPosition(value, dim)
    return _VEC_TYPES[dim]._wrap(np.asarray(coords, dtype=np.float64))
