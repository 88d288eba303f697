"""SchemaNode: one generalized structural position.

A SchemaNode summarises every structure node that reached the same canonical
path across the generalized inputs:

- ``types``       every NodeType observed there (a set, so divergent shapes
                  are recorded rather than resolved).
- ``properties``  present iff ``object`` is among the types; one child per
                  distinct key, ordered by first appearance.
- ``items``       present iff ``array`` is among the types; exactly one merged
                  child for all elements, or the *unknown* placeholder
                  (``types == frozenset()``) when no element was ever seen.
- ``sample``      in value-sample mode, the earliest-origin scalar value.

Origins are ``(position, document_id, node_id)`` triples, where ``position``
is the table's place in the fold.  Equality is checked with an explicit stack,
so arbitrarily deep schemas compare without call recursion.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from json_structure.schema.paths import ARRAY_ITEMS, PathKey, PathSegment
from json_structure.tree.nodes import NodeType
from json_structure.tree.values import JsonValue, to_python

__all__ = ["Origin", "SchemaNode"]

Origin: TypeAlias = tuple[int, int, int]


@dataclass(frozen=True, slots=True, eq=False)
class SchemaNode:
    """Immutable generalized schema position.

    Attributes:
        types:         Observed node types; empty only for the unknown
                       placeholder.
        name:          Object key leading here; None for the root and for
                       array item schemas.
        properties:    Child schemas keyed by object key, in first-seen order.
        items:         Merged child schema for array elements.
        sample:        Representative scalar (value-sample mode only).
        occurrences:   Number of structure nodes folded into this position.
        first_seen:    Smallest ``(position, document_id, node_id)`` origin
                       observed.
        sample_origin: Origin of ``sample``; keeps schema merges commutative.
    """

    types: frozenset[NodeType]
    name: str | None = None
    properties: dict[str, SchemaNode] | None = None
    items: SchemaNode | None = None
    sample: JsonValue | None = None
    occurrences: int = 0
    first_seen: Origin | None = None
    sample_origin: Origin | None = field(default=None, repr=False)

    @classmethod
    def unknown(cls) -> SchemaNode:
        """The placeholder for an array position that never held an element."""
        return cls(types=frozenset())

    @property
    def is_unknown(self) -> bool:
        return not self.types

    @property
    def is_divergent(self) -> bool:
        """True when more than one type was observed at this position."""
        return len(self.types) > 1

    @property
    def type_names(self) -> list[str]:
        """Observed types as strings, in NodeType declaration order."""
        return [str(node_type) for node_type in NodeType if node_type in self.types]

    def children(self) -> Iterator[tuple[PathSegment, SchemaNode]]:
        """Yield ``(segment, child)``: properties in order, then the item schema."""
        if self.properties:
            yield from self.properties.items()
        if self.items is not None:
            yield ARRAY_ITEMS, self.items

    def walk(self) -> Iterator[tuple[PathKey, SchemaNode]]:
        """Yield ``(path, node)`` for this node and every descendant, pre-order.

        Unknown placeholders are yielded too; callers filter with
        ``is_unknown`` when they only want observed positions.  Every yielded
        path is a full tuple, so deep schemas are better traversed with
        ``children``.
        """
        stack: list[tuple[PathKey, SchemaNode]] = [((), self)]
        while stack:
            path, node = stack.pop()
            yield path, node
            for segment, child in reversed(list(node.children())):
                stack.append(((*path, segment), child))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SchemaNode):
            return NotImplemented
        stack: list[tuple[SchemaNode, SchemaNode]] = [(self, other)]
        while stack:
            left, right = stack.pop()
            if left is right:
                continue
            if (
                left.types != right.types
                or left.name != right.name
                or left.sample != right.sample
                or left.occurrences != right.occurrences
                or left.first_seen != right.first_seen
                or left.sample_origin != right.sample_origin
            ):
                return False
            if (left.items is None) != (right.items is None):
                return False
            if (left.properties is None) != (right.properties is None):
                return False
            if left.properties is not None and right.properties is not None:
                if left.properties.keys() != right.properties.keys():
                    return False
                for key, child in left.properties.items():
                    stack.append((child, right.properties[key]))
            if left.items is not None and right.items is not None:
                stack.append((left.items, right.items))
        return True

    def to_dict(self) -> dict[str, Any]:
        """Render the schema as nested plain dicts.

        Shape: ``{"types", "name"?, "occurrences", "sample"?, "properties"?,
        "items"?}``.  Suitable for ``json.dumps``.
        """
        root: dict[str, Any] = {}
        stack: list[tuple[SchemaNode, dict[str, Any]]] = [(self, root)]
        while stack:
            node, out = stack.pop()
            out["types"] = node.type_names
            if node.name is not None:
                out["name"] = node.name
            out["occurrences"] = node.occurrences
            if node.sample is not None:
                out["sample"] = to_python(node.sample)
            if node.properties is not None:
                rendered: dict[str, Any] = {}
                for key, child in node.properties.items():
                    rendered[key] = {}
                    stack.append((child, rendered[key]))
                out["properties"] = rendered
            if node.items is not None:
                out["items"] = {}
                stack.append((node.items, out["items"]))
        return root
