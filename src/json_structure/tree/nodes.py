"""NodeType StrEnum and the record types of a flattened document.

``StructureNode`` is one row of a document's structure table as produced by
the Flattener.  ``Document`` pairs a parsed value with its position in an input
collection.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from json_structure.tree.values import JsonValue

__all__ = ["SCALAR_TYPES", "Document", "NodeType", "ScalarValue", "StructureNode"]

ScalarValue: TypeAlias = None | bool | float | str


class NodeType(StrEnum):
    """The six JSON shapes a structure node can take.

    StrEnum values are the lowercased member names:
    - NULL   -> "null"
    - BOOL   -> "bool"
    - NUMBER -> "number"
    - STRING -> "string"
    - ARRAY  -> "array"
    - OBJECT -> "object"
    """

    NULL = auto()
    BOOL = auto()
    NUMBER = auto()
    STRING = auto()
    ARRAY = auto()
    OBJECT = auto()


SCALAR_TYPES: frozenset[NodeType] = frozenset(
    {NodeType.NULL, NodeType.BOOL, NodeType.NUMBER, NodeType.STRING}
)


@dataclass(frozen=True, slots=True)
class Document:
    """A parsed JSON value and its position in the input collection."""

    document_id: int
    value: JsonValue

    def __post_init__(self) -> None:
        if self.document_id < 0:
            msg = f"document_id must be >= 0, got {self.document_id}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class StructureNode:
    """One node of a document's flattened structure table.

    Attributes:
        document_id: Document the node belongs to.
        node_id:     Pre-order position of the node, dense from 0.
        parent_id:   ``node_id`` of the parent; None for the root.
        level:       Depth, 0 for the root.
        node_type:   JSON shape of the node.
        name:        Object key that leads to this node; None unless the parent
                     is an object.
        array_index: Position within the parent array; None unless the parent
                     is an array.
        value:       The scalar's value for scalar nodes; None for containers.
    """

    document_id: int
    node_id: int
    parent_id: int | None
    level: int
    node_type: NodeType
    name: str | None = None
    array_index: int | None = None
    value: ScalarValue = None

    def __post_init__(self) -> None:
        if self.name is not None and self.array_index is not None:
            msg = f"node {self.node_id}: name and array_index are mutually exclusive"
            raise ValueError(msg)
        if (self.parent_id is None) != (self.level == 0):
            msg = f"node {self.node_id}: only the root (level 0) may lack a parent"
            raise ValueError(msg)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None
