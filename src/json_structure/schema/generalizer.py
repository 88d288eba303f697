"""SchemaGeneralizer: folds structure tables into one representative schema.

Every structure node is keyed by its canonical path (object keys literal,
array indices replaced by the ``ARRAY_ITEMS`` wildcard).  Paths are interned in
a ``PathTrie``, so a node is keyed in constant time however deep it sits.  Each
path owns a slot that accumulates:

- the union of observed node types,
- the number of contributing nodes,
- the smallest ``(position, document_id, node_id)`` origin,
- in value-sample mode, the scalar value with the smallest origin.

``position`` is the table's place in the input collection: the first table
folded is position 0, the next 1, and so on.  Workers folding disjoint slices
of a collection pass the global position explicitly (``add_table(...,
position=i)`` or ``generalize(..., start=offset)``).

Every one of those reductions is associative and commutative, so tables can
be folded in any order, split across workers and recombined with ``merge``,
and the built ``SchemaNode`` compares equal.  Children are ordered by their
first-seen origin, which realizes "first-seen order across the fold" without
depending on the order in which partial results are combined.

Array positions always produce exactly one item schema.  When no element was
ever observed at an array path, the item schema is the explicit unknown
placeholder.  Arrays mixing element shapes (e.g. numbers and objects) produce
one unioned item schema whose type set lists every shape and which carries the
union of the object keys and nested array items.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import assert_never

from json_structure.errors import ShapeError
from json_structure.schema.config import SchemaConfig, SchemaMode
from json_structure.schema.nodes import Origin, SchemaNode
from json_structure.schema.paths import ARRAY_ITEMS, PathTrie, iter_path_ids
from json_structure.tree.nodes import NodeType, StructureNode
from json_structure.tree.values import JsonBool, JsonNull, JsonNumber, JsonString, JsonValue

__all__ = ["SchemaGeneralizer", "generalize", "generalize_subtree", "merge_schemas"]


@dataclass(slots=True)
class _Slot:
    """Mutable accumulator for one canonical path."""

    types: set[NodeType]
    occurrences: int
    first_seen: Origin
    sample: JsonValue | None = None
    sample_origin: Origin | None = None


def _sample_of(node: StructureNode) -> JsonValue | None:
    """Rebuild the scalar JsonValue of a structure node; None for containers."""
    node_type = node.node_type
    match node_type:
        case NodeType.NULL:
            return JsonNull()
        case NodeType.BOOL:
            return JsonBool(bool(node.value))
        case NodeType.NUMBER:
            return JsonNumber(float(node.value))  # type: ignore[arg-type]
        case NodeType.STRING:
            return JsonString(str(node.value))
        case NodeType.ARRAY | NodeType.OBJECT:
            return None
        case _:
            assert_never(node_type)


def _sample_rank(origin: Origin, sample: JsonValue) -> tuple[Origin, str]:
    # repr breaks ties between equal origins from partitions reusing positions
    return origin, repr(sample)


class SchemaGeneralizer:
    """Streaming fold from structure tables to a SchemaNode.

    Example::

        from json_structure.schema import SchemaGeneralizer
        from json_structure.tree import flatten, from_python

        gen = SchemaGeneralizer()
        gen.add_table(flatten(from_python({"x": 1})))
        gen.add_table(flatten(from_python({"x": "s"})))
        schema = gen.build()
        schema.properties["x"].types   # {NUMBER, STRING}
    """

    def __init__(self, config: SchemaConfig | None = None) -> None:
        self._config = config if config is not None else SchemaConfig()
        self._trie = PathTrie()
        self._slots: dict[int, _Slot] = {}
        self._tables = 0
        self._next_position = 0

    @property
    def config(self) -> SchemaConfig:
        return self._config

    @property
    def table_count(self) -> int:
        """Number of tables (or schemas) folded so far."""
        return self._tables

    @property
    def path_count(self) -> int:
        """Number of distinct canonical paths observed so far."""
        return len(self._slots)

    @property
    def next_position(self) -> int:
        """Position assigned to the next table added without an explicit one."""
        return self._next_position

    # ------------------------------------------------------------------
    # Folding
    # ------------------------------------------------------------------

    def add_table(
        self,
        table: Iterable[StructureNode],
        root: tuple[int, int] | None = None,
        position: int | None = None,
    ) -> SchemaGeneralizer:
        """Fold one structure table into the accumulator.

        Args:
            table:    A document's flattened table.
            root:     Optional ``(document_id, node_id)`` sub-root; paths are
                      then relative to it and nodes outside its subtree are
                      ignored.
            position: The table's place in the whole collection.  Defaults to
                      one past the largest position folded so far, so a single
                      sequential fold numbers tables 0, 1, 2, ...

        Returns:
            ``self``, to allow chaining.

        Raises:
            ValueError: If *position* is negative.
        """
        if position is None:
            position = self._next_position
        elif position < 0:
            raise ValueError(f"position must be >= 0, got {position}")
        self._next_position = max(self._next_position, position + 1)

        keep_samples = self._config.mode == SchemaMode.VALUE_SAMPLE
        for node, path_id in iter_path_ids(table, self._trie, root=root):
            origin = (position, node.document_id, node.node_id)
            sample = _sample_of(node) if keep_samples else None
            self._absorb(
                path_id,
                types={node.node_type},
                occurrences=1,
                first_seen=origin,
                sample=sample,
                sample_origin=origin if sample is not None else None,
            )
        self._tables += 1
        return self

    def add_schema(self, schema: SchemaNode) -> SchemaGeneralizer:
        """Fold an already-built SchemaNode into the accumulator.

        The origins recorded in *schema* are kept as they are.
        """
        keep_samples = self._config.mode == SchemaMode.VALUE_SAMPLE
        stack: list[tuple[int, SchemaNode]] = [(PathTrie.ROOT, schema)]
        while stack:
            path_id, node = stack.pop()
            if node.is_unknown or node.first_seen is None:
                continue
            has_sample = keep_samples and node.sample is not None
            self._absorb(
                path_id,
                types=set(node.types),
                occurrences=node.occurrences,
                first_seen=node.first_seen,
                sample=node.sample if has_sample else None,
                sample_origin=node.sample_origin if has_sample else None,
            )
            self._next_position = max(self._next_position, node.first_seen[0] + 1)
            for segment, child in node.children():
                stack.append((self._trie.child(path_id, segment), child))
        self._tables += 1
        return self

    def merge(self, other: SchemaGeneralizer) -> SchemaGeneralizer:
        """Return a new accumulator holding the union of ``self`` and *other*.

        Neither operand is modified.  The operation is associative and
        commutative, so partial folds from independent workers can be
        combined in any order.

        Raises:
            ValueError: If the two accumulators use different modes.
        """
        if other._config.mode != self._config.mode:
            msg = f"cannot merge {self._config.mode} with {other._config.mode} generalizers"
            raise ValueError(msg)

        merged = SchemaGeneralizer(self._config)
        for source in (self, other):
            # source ids ascend parent-first, so every parent is mapped before its children
            mapped = {PathTrie.ROOT: PathTrie.ROOT}
            for path_id in range(1, len(source._trie)):
                parent = source._trie.parent(path_id)
                segment = source._trie.segment(path_id)
                assert parent is not None and segment is not None
                mapped[path_id] = merged._trie.child(mapped[parent], segment)
            for path_id, slot in source._slots.items():
                merged._absorb(
                    mapped[path_id],
                    types=set(slot.types),
                    occurrences=slot.occurrences,
                    first_seen=slot.first_seen,
                    sample=slot.sample,
                    sample_origin=slot.sample_origin,
                )
        merged._tables = self._tables + other._tables
        merged._next_position = max(self._next_position, other._next_position)
        return merged

    def _absorb(
        self,
        path_id: int,
        *,
        types: set[NodeType],
        occurrences: int,
        first_seen: Origin,
        sample: JsonValue | None,
        sample_origin: Origin | None,
    ) -> None:
        slot = self._slots.get(path_id)
        if slot is None:
            self._slots[path_id] = _Slot(
                types=types,
                occurrences=occurrences,
                first_seen=first_seen,
                sample=sample,
                sample_origin=sample_origin,
            )
            return

        slot.types |= types
        slot.occurrences += occurrences
        slot.first_seen = min(slot.first_seen, first_seen)
        if sample is None or sample_origin is None:
            return
        if (
            slot.sample is None
            or slot.sample_origin is None
            or _sample_rank(sample_origin, sample) < _sample_rank(slot.sample_origin, slot.sample)
        ):
            slot.sample = sample
            slot.sample_origin = sample_origin

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def build(self) -> SchemaNode:
        """Assemble the immutable SchemaNode tree.

        Built bottom-up from the path trie (children always carry larger ids
        than their parents) without call recursion.  With nothing folded yet,
        the unknown placeholder is returned.
        """
        if PathTrie.ROOT not in self._slots:
            return SchemaNode.unknown()

        children: dict[int, list[int]] = {}
        for path_id in self._slots:
            parent = self._trie.parent(path_id)
            if parent is not None:
                children.setdefault(parent, []).append(path_id)

        built: dict[int, SchemaNode] = {}
        for path_id in sorted(self._slots, reverse=True):
            slot = self._slots[path_id]

            properties: dict[str, SchemaNode] | None = None
            items: SchemaNode | None = None
            if NodeType.OBJECT in slot.types:
                properties = {}
            if NodeType.ARRAY in slot.types:
                items = SchemaNode.unknown()

            kids = children.get(path_id, [])
            kids.sort(key=lambda k: (self._slots[k].first_seen, str(self._trie.segment(k))))
            for child_id in kids:
                child = built.pop(child_id)
                segment = self._trie.segment(child_id)
                if segment is ARRAY_ITEMS:
                    items = child
                elif segment is not None:
                    if properties is None:
                        properties = {}
                    properties[segment] = child

            segment = self._trie.segment(path_id)
            built[path_id] = SchemaNode(
                types=frozenset(slot.types),
                name=segment if isinstance(segment, str) else None,
                properties=properties,
                items=items,
                sample=slot.sample,
                occurrences=slot.occurrences,
                first_seen=slot.first_seen,
                sample_origin=slot.sample_origin,
            )

        return built[PathTrie.ROOT]


def generalize(
    tables: Iterable[Iterable[StructureNode]],
    config: SchemaConfig | None = None,
    start: int = 0,
) -> SchemaNode:
    """Fold many documents' structure tables into one representative schema.

    *tables* may be a lazy iterable; each table is folded and released before
    the next is requested.  Tables take positions ``start``, ``start + 1``,
    ... in input order, so keys are ordered by the first table that carries
    them even when every table uses the default ``document_id``.  A worker
    generalizing a slice of a larger collection passes the slice offset as
    *start*; ``merge_schemas`` then combines the slices into the same schema a
    single fold would produce.
    """
    generalizer = SchemaGeneralizer(config)
    for position, table in enumerate(tables, start=start):
        generalizer.add_table(table, position=position)
    return generalizer.build()


def generalize_subtree(
    table: Iterable[StructureNode],
    node_id: int,
    document_id: int | None = None,
    config: SchemaConfig | None = None,
) -> SchemaNode:
    """Generalize one position inside a single document.

    The typical use is an array of records: the returned schema's ``items``
    merges every element of the array at *node_id*.

    Args:
        table:       Structure table containing the node.
        node_id:     Sub-root to generalize.
        document_id: Document owning *node_id*.  Required only when *table*
                     spans several documents.
        config:      Generalizer configuration.

    Raises:
        ShapeError: If the node does not exist or the owning document is
            ambiguous.
    """
    nodes = list(table)
    if document_id is None:
        document_ids = {node.document_id for node in nodes}
        if len(document_ids) > 1:
            raise ShapeError(
                f"table spans documents {sorted(document_ids)}; pass document_id explicitly"
            )
        document_id = next(iter(document_ids), 0)

    if not any(n.document_id == document_id and n.node_id == node_id for n in nodes):
        raise ShapeError(f"node {node_id} not found in document {document_id}")

    generalizer = SchemaGeneralizer(config)
    generalizer.add_table(nodes, root=(document_id, node_id))
    return generalizer.build()


def merge_schemas(*schemas: SchemaNode) -> SchemaNode:
    """Merge already-built schemas with the same semantics as the table fold.

    Recorded origins are kept, so slices generalized with
    ``generalize(..., start=offset)`` merge into the schema a single fold over
    the whole collection would build, in whatever order they are passed.
    Samples are kept when present (value-sample schemas); type-only schemas
    carry none, so merging them stays type-only.
    """
    generalizer = SchemaGeneralizer(SchemaConfig(mode=SchemaMode.VALUE_SAMPLE))
    for schema in schemas:
        generalizer.add_schema(schema)
    return generalizer.build()
