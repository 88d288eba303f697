"""Checks a document's structure table against a generalized schema.

Every key in a generalized object is optional, so conformance only flags
structure the schema never saw: a path missing from the schema, or a node
whose type is outside the type set recorded at its path.  Descendants of an
unexpected node are not reported separately.

Each node's schema position is found by stepping from its parent's position
(``properties[name]`` or ``items``), so the check runs in time proportional to
the node count however deep the document is.  Full path tuples are built only
for the nodes that are reported.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from json_structure.errors import ShapeError
from json_structure.schema.nodes import SchemaNode
from json_structure.schema.paths import ARRAY_ITEMS, PathKey, PathSegment, format_path
from json_structure.tree.nodes import StructureNode

__all__ = ["Violation", "find_violations"]


@dataclass(frozen=True, slots=True)
class Violation:
    """One structural disagreement between a document and a schema."""

    path: PathKey
    document_id: int
    node_id: int
    reason: str

    def __str__(self) -> str:
        return f"{format_path(self.path) or '/'}: {self.reason}"


def _step(position: SchemaNode, node: StructureNode) -> SchemaNode | None:
    if node.name is not None:
        if position.properties is None:
            return None
        return position.properties.get(node.name)
    if node.array_index is not None:
        return position.items
    raise ShapeError(
        f"node {node.node_id} of document {node.document_id} has a parent "
        "but neither a name nor an array_index"
    )


def _path_of(node: StructureNode, by_origin: dict[tuple[int, int], StructureNode]) -> PathKey:
    segments: list[PathSegment] = []
    current = node
    while current.parent_id is not None:
        segments.append(current.name if current.name is not None else ARRAY_ITEMS)
        current = by_origin[(current.document_id, current.parent_id)]
    segments.reverse()
    return tuple(segments)


def find_violations(schema: SchemaNode, table: Iterable[StructureNode]) -> list[Violation]:
    """Return the nodes of *table* that *schema* does not account for.

    Args:
        schema: A generalized schema.
        table:  A flattened document (or several).

    Returns:
        Violations in pre-order; an empty list means the document conforms.

    Raises:
        ShapeError: If a non-root node's parent is missing from *table*.
    """
    by_origin: dict[tuple[int, int], StructureNode] = {}
    # None marks a node that was reported (or sits below one)
    positions: dict[tuple[int, int], SchemaNode | None] = {}
    violations: list[Violation] = []

    for node in sorted(table, key=lambda n: (n.document_id, n.node_id)):
        origin = (node.document_id, node.node_id)
        by_origin[origin] = node

        if node.parent_id is None:
            position: SchemaNode | None = schema
        else:
            parent_origin = (node.document_id, node.parent_id)
            if parent_origin not in positions:
                raise ShapeError(
                    f"node {node.node_id} of document {node.document_id} "
                    f"references missing parent {node.parent_id}"
                )
            parent_position = positions[parent_origin]
            if parent_position is None:
                positions[origin] = None
                continue
            position = _step(parent_position, node)

        if position is None or position.is_unknown:
            positions[origin] = None
            if node.name is not None:
                what = "key"
            elif node.array_index is not None:
                what = "array element"
            else:
                what = "document"
            violations.append(
                Violation(
                    _path_of(node, by_origin), node.document_id, node.node_id, f"unexpected {what}"
                )
            )
        elif node.node_type not in position.types:
            positions[origin] = None
            violations.append(
                Violation(
                    _path_of(node, by_origin),
                    node.document_id,
                    node.node_id,
                    f"type {node.node_type} not in {position.type_names}",
                )
            )
        else:
            positions[origin] = position

    return violations
