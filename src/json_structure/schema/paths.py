"""Canonical path keys for schema generalization.

A path key is a tuple of segments from the document root to a node.  Object
segments are the literal key; array segments are the ``ARRAY_ITEMS`` wildcard,
never the concrete index, so every element of every array at the same position
folds into one schema slot.  Keys stay structured (never joined strings), so a
key containing ``/``, ``.`` or ``*`` cannot collide with a different path.

Internally paths are interned in a ``PathTrie``: each distinct path gets a
dense integer id looked up by ``(parent_path_id, segment)``.  Keying a node
costs one dict lookup regardless of its depth, so deeply nested documents are
keyed in time and memory proportional to their node count.  Full tuples are
only materialized on request (``PathTrie.key``, ``iter_path_keys``).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import TypeAlias

from json_structure.errors import ShapeError
from json_structure.tree.nodes import StructureNode

__all__ = [
    "ARRAY_ITEMS",
    "PathKey",
    "PathSegment",
    "PathTrie",
    "format_path",
    "iter_path_ids",
    "iter_path_keys",
]


class _Wildcard(Enum):
    ARRAY_ITEMS = "[*]"

    def __repr__(self) -> str:
        return "ARRAY_ITEMS"


ARRAY_ITEMS = _Wildcard.ARRAY_ITEMS

PathSegment: TypeAlias = str | _Wildcard
PathKey: TypeAlias = tuple[PathSegment, ...]


class PathTrie:
    """Interns canonical paths as dense integer ids.

    Id ``PathTrie.ROOT`` (0) is the empty path and always exists.  A child id
    is always larger than its parent's, so iterating ids in ascending order
    visits every parent before its children.

    Example::

        trie = PathTrie()
        users = trie.child(PathTrie.ROOT, "users")
        name = trie.child(trie.child(users, ARRAY_ITEMS), "name")
        trie.key(name)   # ("users", ARRAY_ITEMS, "name")
    """

    ROOT = 0

    def __init__(self) -> None:
        self._ids: dict[tuple[int, PathSegment], int] = {}
        self._parents: list[int] = [-1]
        self._segments: list[PathSegment | None] = [None]

    def __len__(self) -> int:
        return len(self._parents)

    def child(self, path_id: int, segment: PathSegment) -> int:
        """Return the id of *path_id* extended by *segment*, interning it if new."""
        edge = (path_id, segment)
        found = self._ids.get(edge)
        if found is None:
            found = len(self._parents)
            self._ids[edge] = found
            self._parents.append(path_id)
            self._segments.append(segment)
        return found

    def parent(self, path_id: int) -> int | None:
        """Parent path id, or None for the root."""
        parent = self._parents[path_id]
        return None if parent < 0 else parent

    def segment(self, path_id: int) -> PathSegment | None:
        """Last segment of the path, or None for the root."""
        return self._segments[path_id]

    def key(self, path_id: int) -> PathKey:
        """Materialize the full segment tuple of *path_id*."""
        segments: list[PathSegment] = []
        while path_id > self.ROOT:
            segment = self._segments[path_id]
            assert segment is not None
            segments.append(segment)
            path_id = self._parents[path_id]
        segments.reverse()
        return tuple(segments)


def _segment(node: StructureNode) -> PathSegment:
    if node.name is not None:
        return node.name
    if node.array_index is not None:
        return ARRAY_ITEMS
    raise ShapeError(
        f"node {node.node_id} of document {node.document_id} has a parent "
        "but neither a name nor an array_index"
    )


def iter_path_ids(
    table: Iterable[StructureNode],
    trie: PathTrie,
    root: tuple[int, int] | None = None,
) -> Iterator[tuple[StructureNode, int]]:
    """Yield ``(node, path_id)`` for the nodes of one or more structure tables.

    Paths are interned into *trie*.  Nodes are processed in
    ``(document_id, node_id)`` order, which is pre-order for flattener output,
    so each parent's path id is known before its children.

    Args:
        table: Structure nodes, possibly from several documents.
        trie:  Interning table shared across calls.
        root:  Optional ``(document_id, node_id)`` of a sub-root.  When given,
               only that node and its descendants are yielded, with paths
               relative to it (the sub-root's path is ``PathTrie.ROOT``).

    Raises:
        ShapeError: When a non-root node's parent is missing from *table*
            (whole-table mode) or a non-root node lacks a name/index.
    """
    path_ids: dict[tuple[int, int], int] = {}

    for node in sorted(table, key=lambda n: (n.document_id, n.node_id)):
        origin = (node.document_id, node.node_id)

        if root is not None:
            if origin == root:
                path_id = PathTrie.ROOT
            else:
                parent_path = path_ids.get((node.document_id, node.parent_id))
                if node.parent_id is None or parent_path is None:
                    continue
                path_id = trie.child(parent_path, _segment(node))
        elif node.parent_id is None:
            path_id = PathTrie.ROOT
        else:
            parent_path = path_ids.get((node.document_id, node.parent_id))
            if parent_path is None:
                raise ShapeError(
                    f"node {node.node_id} of document {node.document_id} "
                    f"references missing parent {node.parent_id}"
                )
            path_id = trie.child(parent_path, _segment(node))

        path_ids[origin] = path_id
        yield node, path_id


def iter_path_keys(
    table: Iterable[StructureNode],
    root: tuple[int, int] | None = None,
) -> Iterator[tuple[StructureNode, PathKey]]:
    """Like ``iter_path_ids`` but yields materialized path tuples.

    Each tuple is as long as its node is deep; prefer ``iter_path_ids`` for
    large or deeply nested inputs.
    """
    trie = PathTrie()
    for node, path_id in iter_path_ids(table, trie, root=root):
        yield node, trie.key(path_id)


def format_path(path: PathKey) -> str:
    """Render a path key for humans, e.g. ``/users[*]/name``.

    Object keys are escaped as in RFC 6901 (``~`` -> ``~0``, ``/`` -> ``~1``).
    The root renders as the empty string.
    """
    parts: list[str] = []
    for segment in path:
        if segment is ARRAY_ITEMS:
            parts.append(ARRAY_ITEMS.value)
        else:
            parts.append("/" + segment.replace("~", "~0").replace("/", "~1"))
    return "".join(parts)
