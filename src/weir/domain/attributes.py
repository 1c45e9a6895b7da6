"""Attribute values attached to vertices and edges.

Attributes form an open mapping from a string key to a small tagged union
of values: numbers, booleans, text, and vectors.  Enum members are accepted
as keys and normalized to a string (the member value if it is a string,
otherwise the member name).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from weir.domain.errors import InvalidAttribute
from weir.domain.vectors import Vec2, Vec3

type AttrValue = bool | int | float | str | Vec2 | Vec3
type AttrKey = str | Enum
type AttrItems = tuple[tuple[AttrKey, Any], ...]

_VALUE_TYPES = (bool, int, float, str, Vec2, Vec3)


def normalize_key(key: Any) -> str:
    if isinstance(key, Enum):
        return key.value if isinstance(key.value, str) else key.name
    if isinstance(key, str) and key:
        return key
    raise InvalidAttribute(key, None)


def check_value(key: Any, value: Any) -> AttrValue:
    """Return *value* unchanged if it is a supported attribute value."""
    if isinstance(value, _VALUE_TYPES):
        return value
    raise InvalidAttribute(key, value)


def attr_kind(value: AttrValue) -> str:
    """Tag of an attribute value: ``bool``, ``number``, ``text`` or ``vec``."""
    # bool before number: bool is an int subclass.
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "text"
    if isinstance(value, (Vec2, Vec3)):
        return "vec"
    raise InvalidAttribute("?", value)


def normalize_attrs(
    attrs: Mapping[Any, Any] | Iterable[tuple[Any, Any]] | None,
) -> dict[str, AttrValue]:
    """Validate and normalize an attribute mapping (or iterable of pairs)."""
    if not attrs:
        return {}
    items = attrs.items() if isinstance(attrs, Mapping) else attrs
    out: dict[str, AttrValue] = {}
    for key, value in items:
        out[normalize_key(key)] = check_value(key, value)
    return out


def freeze_attrs(attrs: Mapping[Any, Any] | Iterable[tuple[Any, Any]] | None) -> AttrItems:
    """Snapshot attributes as a tuple of pairs, without validating them."""
    if not attrs:
        return ()
    items = attrs.items() if isinstance(attrs, Mapping) else attrs
    return tuple((key, value) for key, value in items)
