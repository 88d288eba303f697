"""Closed tagged value model for JSON documents.

A JSON value is exactly one of six frozen dataclasses:

- ``JsonNull``
- ``JsonBool(value)``
- ``JsonNumber(value)``   (float64; precision beyond classification is not kept)
- ``JsonString(value)``
- ``JsonArray(items)``
- ``JsonObject(members)`` (ordered ``(key, value)`` pairs, keys unique)

Consumers dispatch with a ``match`` statement over the six classes ending in
``assert_never`` so that a type checker flags any shape left unhandled.

``from_python`` and ``to_python`` bridge to the generic values produced by
``json.loads``.  Both walk the tree with an explicit stack, so arbitrarily deep
input cannot exhaust the interpreter's call stack.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Any, ClassVar, TypeAlias, assert_never

from json_structure.tree.nodes import NodeType

__all__ = [
    "JsonArray",
    "JsonBool",
    "JsonNull",
    "JsonNumber",
    "JsonObject",
    "JsonString",
    "JsonValue",
    "from_python",
    "is_json_value",
    "to_python",
]


@dataclass(frozen=True, slots=True)
class JsonNull:
    kind: ClassVar[NodeType] = NodeType.NULL


@dataclass(frozen=True, slots=True)
class JsonBool:
    value: bool
    kind: ClassVar[NodeType] = NodeType.BOOL


@dataclass(frozen=True, slots=True)
class JsonNumber:
    """A JSON number stored as float64.  NaN and infinities are rejected."""

    value: float
    kind: ClassVar[NodeType] = NodeType.NUMBER

    def __post_init__(self) -> None:
        if not math.isfinite(self.value):
            msg = f"JSON numbers must be finite, got {self.value!r}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class JsonString:
    value: str
    kind: ClassVar[NodeType] = NodeType.STRING


@dataclass(frozen=True, slots=True)
class JsonArray:
    items: tuple[JsonValue, ...] = ()
    kind: ClassVar[NodeType] = NodeType.ARRAY


@dataclass(frozen=True, slots=True)
class JsonObject:
    """A JSON object: ordered members with unique keys."""

    members: tuple[tuple[str, JsonValue], ...] = ()
    kind: ClassVar[NodeType] = NodeType.OBJECT

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for key, _ in self.members:
            if key in seen:
                msg = f"duplicate object key {key!r}"
                raise ValueError(msg)
            seen.add(key)

    def keys(self) -> tuple[str, ...]:
        return tuple(key for key, _ in self.members)


JsonValue: TypeAlias = JsonNull | JsonBool | JsonNumber | JsonString | JsonArray | JsonObject

_VALUE_CLASSES = (JsonNull, JsonBool, JsonNumber, JsonString, JsonArray, JsonObject)


def is_json_value(value: object) -> bool:
    """Return True if *value* is an instance of one of the six variants."""
    return isinstance(value, _VALUE_CLASSES)


def _to_number(value: int | float) -> JsonNumber:
    try:
        return JsonNumber(float(value))
    except OverflowError:
        # ints beyond float range saturate, precision is not preserved anyway
        return JsonNumber(sys.float_info.max if value > 0 else -sys.float_info.max)


def from_python(obj: Any) -> JsonValue:
    """Convert a generic Python value (as produced by ``json.loads``) to a JsonValue.

    Dispatch order matters: ``bool`` is checked before ``int`` because bool
    subclasses int.  Integers become floats.  Tuples are accepted as arrays.

    Raises:
        TypeError:  For values that have no JSON shape (sets, bytes, non-string
                    object keys, ...).
        ValueError: For NaN or infinite floats.
    """
    results: list[JsonValue] = []
    # (assembled, obj): assembled=True means all children already sit on results
    stack: list[tuple[bool, Any]] = [(False, obj)]

    while stack:
        assembled, current = stack.pop()

        if assembled:
            count = len(current)
            children = results[len(results) - count :]
            del results[len(results) - count :]
            if isinstance(current, dict):
                results.append(JsonObject(tuple(zip(current.keys(), children, strict=True))))
            else:
                results.append(JsonArray(tuple(children)))
            continue

        if isinstance(current, bool):
            results.append(JsonBool(current))
        elif isinstance(current, (int, float)):
            results.append(_to_number(current))
        elif isinstance(current, str):
            results.append(JsonString(current))
        elif current is None:
            results.append(JsonNull())
        elif isinstance(current, dict):
            for key in current:
                if not isinstance(key, str):
                    raise TypeError(f"JSON object keys must be str, got {type(key)!r}")
            stack.append((True, current))
            stack.extend((False, child) for child in reversed(list(current.values())))
        elif isinstance(current, (list, tuple)):
            stack.append((True, current))
            stack.extend((False, child) for child in reversed(current))
        else:
            raise TypeError(f"Unsupported JSON value type: {type(current)!r}")

    return results[0]


def to_python(value: JsonValue) -> Any:
    """Convert a JsonValue back into plain ``dict``/``list``/scalar values."""
    results: list[Any] = []
    stack: list[tuple[bool, JsonValue]] = [(False, value)]

    while stack:
        assembled, current = stack.pop()

        if assembled:
            if isinstance(current, JsonObject):
                count = len(current.members)
                children = results[len(results) - count :]
                del results[len(results) - count :]
                results.append(dict(zip(current.keys(), children, strict=True)))
            elif isinstance(current, JsonArray):
                count = len(current.items)
                children = results[len(results) - count :]
                del results[len(results) - count :]
                results.append(children)
            continue

        match current:
            case JsonNull():
                results.append(None)
            case JsonBool(value=flag):
                results.append(flag)
            case JsonNumber(value=number):
                results.append(number)
            case JsonString(value=text):
                results.append(text)
            case JsonArray(items=items):
                stack.append((True, current))
                stack.extend((False, item) for item in reversed(items))
            case JsonObject(members=members):
                stack.append((True, current))
                stack.extend((False, member) for _, member in reversed(members))
            case _:
                assert_never(current)

    return results[0]
