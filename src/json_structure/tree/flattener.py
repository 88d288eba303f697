"""Flattener: enumerates a JSON value's tree into a structure table.

Traversal is pre-order with an explicit work stack rather than call
recursion, so adversarially deep documents cannot exhaust the interpreter
stack.  Node ids come from a counter local to each call: repeated and
concurrent calls never share state, and the same input always yields an
identical table.

Ordering:
- Object members are visited in key-insertion order and carry ``name``.
- Array elements are visited in index order and carry ``array_index``.
- Scalars are leaves.  Empty objects and arrays produce a single node of their
  container type with no descendants.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import assert_never

from json_structure.errors import ShapeError
from json_structure.tree.nodes import Document, StructureNode
from json_structure.tree.values import (
    JsonArray,
    JsonBool,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
    is_json_value,
)

__all__ = ["Flattener", "flatten", "max_depth"]


@dataclass(frozen=True, slots=True)
class _Pending:
    """A value waiting on the work stack together with its placement."""

    value: JsonValue
    parent_id: int | None
    level: int
    name: str | None = None
    array_index: int | None = None


@dataclass
class Flattener:
    """Converts a JSON value into its pre-order structure table.

    Example::

        from json_structure.tree import Flattener, from_python

        table = Flattener().flatten(from_python({"a": 1, "b": [1, 2, 3]}))
        # 6 nodes: object, a:number, b:array, three numbers at level 2
    """

    def flatten(
        self, document: JsonValue | Document, document_id: int = 0
    ) -> tuple[StructureNode, ...]:
        """Flatten one document into a tuple of StructureNodes.

        Args:
            document:    A JsonValue, or a Document whose ``document_id``
                         overrides the argument.
            document_id: Identifier stamped on every node when *document* is a
                         bare JsonValue.

        Returns:
            The nodes in pre-order; ``node_id`` equals the tuple index.

        Raises:
            ShapeError: If *document* is absent or not a JsonValue.
        """
        if isinstance(document, Document):
            document_id = document.document_id
            document = document.value
        if not is_json_value(document):
            raise ShapeError(
                f"cannot flatten {type(document).__name__}: expected a JsonValue or Document"
            )

        table: list[StructureNode] = []
        stack: list[_Pending] = [_Pending(value=document, parent_id=None, level=0)]

        while stack:
            pending = stack.pop()
            node_id = len(table)
            value = pending.value

            match value:
                case JsonNull():
                    scalar = None
                case JsonBool(value=flag):
                    scalar = flag
                case JsonNumber(value=number):
                    scalar = number
                case JsonString(value=text):
                    scalar = text
                case JsonArray(items=items):
                    scalar = None
                    # reversed so the first element is popped first
                    for index in range(len(items) - 1, -1, -1):
                        stack.append(
                            _Pending(items[index], node_id, pending.level + 1, array_index=index)
                        )
                case JsonObject(members=members):
                    scalar = None
                    for key, member in reversed(members):
                        stack.append(_Pending(member, node_id, pending.level + 1, name=key))
                case _:
                    assert_never(value)

            table.append(
                StructureNode(
                    document_id=document_id,
                    node_id=node_id,
                    parent_id=pending.parent_id,
                    level=pending.level,
                    node_type=value.kind,
                    name=pending.name,
                    array_index=pending.array_index,
                    value=scalar,
                )
            )

        return tuple(table)


def flatten(document: JsonValue | Document, document_id: int = 0) -> tuple[StructureNode, ...]:
    """Functional shortcut for ``Flattener().flatten(document, document_id)``."""
    return Flattener().flatten(document, document_id)


def max_depth(table: tuple[StructureNode, ...] | list[StructureNode]) -> int:
    """Return the deepest ``level`` in *table*, or 0 for an empty table."""
    return max((node.level for node in table), default=0)
