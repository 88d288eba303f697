"""Graph projection of one document's structure table.

The projector answers "one document's structure as a graph": vertices map 1:1
to structure nodes and edges 1:1 to non-root nodes (``parent_id -> node_id``).
It assigns no colors and computes no layout.  Rendering components consume
``Vertex.node_type`` for that.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from json_structure.errors import ShapeError
from json_structure.tree.nodes import NodeType, StructureNode

__all__ = ["Edge", "GraphProjection", "Vertex", "project"]


@dataclass(frozen=True, slots=True)
class Vertex:
    id: int
    node_type: NodeType
    label: str | None = None


@dataclass(frozen=True, slots=True)
class Edge:
    parent_id: int
    child_id: int


@dataclass(frozen=True, slots=True)
class GraphProjection:
    """Vertex/edge view of a single document, ready for an external renderer."""

    document_id: int
    vertices: tuple[Vertex, ...]
    edges: tuple[Edge, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "document_id": self.document_id,
            "vertices": [
                {"id": v.id, "type": str(v.node_type), "label": v.label} for v in self.vertices
            ],
            "edges": [{"parent_id": e.parent_id, "child_id": e.child_id} for e in self.edges],
        }


def project(table: Iterable[StructureNode]) -> GraphProjection:
    """Project a single document's structure table onto vertices and edges.

    Raises:
        ShapeError: If *table* is empty or spans more than one document_id.
    """
    nodes = sorted(table, key=lambda n: n.node_id)
    if not nodes:
        raise ShapeError("cannot project an empty structure table")

    document_ids = {node.document_id for node in nodes}
    if len(document_ids) > 1:
        raise ShapeError(
            f"graph projection needs exactly one document, got ids {sorted(document_ids)}"
        )

    vertices = tuple(Vertex(node.node_id, node.node_type, node.name) for node in nodes)
    edges = tuple(
        Edge(node.parent_id, node.node_id) for node in nodes if node.parent_id is not None
    )
    return GraphProjection(document_id=nodes[0].document_id, vertices=vertices, edges=edges)
