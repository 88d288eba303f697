"""Comprehensive tests for SchemaGeneralizer and the generalize helpers.

Covers key union, array folding, type-set divergence, the unknown placeholder,
first-seen ordering, value-sample mode, heterogeneous arrays, intra-document
generalization, the associative/commutative merge, and deep nesting.
"""

from __future__ import annotations

import itertools
from functools import reduce
from typing import Any

import pytest

from json_structure.errors import ShapeError
from json_structure.schema.config import SchemaConfig, SchemaMode
from json_structure.schema.conformance import find_violations
from json_structure.schema.generalizer import (
    SchemaGeneralizer,
    generalize,
    generalize_subtree,
    merge_schemas,
)
from json_structure.schema.nodes import SchemaNode
from json_structure.schema.paths import ARRAY_ITEMS
from json_structure.tree.flattener import flatten
from json_structure.tree.nodes import NodeType, StructureNode
from json_structure.tree.values import JsonNumber, JsonString, from_python

SAMPLE = SchemaConfig(mode=SchemaMode.VALUE_SAMPLE)

COLLECTION: list[Any] = [
    {"id": 1, "tags": ["a", "b"], "meta": {"score": 0.5}},
    {"id": "two", "tags": [], "extra": None},
    {"id": 3, "tags": [1], "meta": {"score": None, "flag": True}},
    {"id": 4, "meta": {}, "items": [{"k": 1}, {"v": [1, 2]}]},
    [1, {"z": 2}],
]

SHARED_ID_COLLECTION: list[Any] = [
    {"z": "late", "y": [1, 2, 3]},
    {"a": "alpha", "z": "early"},
    {"m": None, "y": ["s"]},
    {"b": {"c": 1}, "a": "beta"},
]


def _tables(documents: list[Any]) -> list[tuple[StructureNode, ...]]:
    return [flatten(from_python(doc), document_id=i) for i, doc in enumerate(documents)]


def _schema(documents: list[Any], config: SchemaConfig | None = None) -> SchemaNode:
    return generalize(_tables(documents), config)


# ---------------------------------------------------------------------------
# Merge policy
# ---------------------------------------------------------------------------


class TestObjectPositions:
    def test_keys_are_unioned(self) -> None:
        """Every distinct key appears once, in first-seen order."""
        schema = _schema([{"a": 1}, {"b": 2}, {"a": 3, "c": 4}])
        assert schema.properties is not None
        assert list(schema.properties) == ["a", "b", "c"]

    def test_missing_keys_are_not_errors(self) -> None:
        """A key absent from some documents is just less frequent."""
        schema = _schema([{"a": 1}, {}])
        assert schema.properties is not None
        assert schema.properties["a"].occurrences == 1
        assert schema.occurrences == 2

    def test_child_names(self) -> None:
        """Object children carry their key as name; the root has none."""
        schema = _schema([{"a": {"b": 1}}])
        assert schema.name is None
        assert schema.properties is not None
        child = schema.properties["a"]
        assert child.name == "a"
        assert child.properties is not None
        assert child.properties["b"].name == "b"

    def test_empty_object_has_empty_properties(self) -> None:
        """An empty object still gets a properties mapping."""
        schema = _schema([{}])
        assert schema.types == {NodeType.OBJECT}
        assert schema.properties == {}
        assert schema.items is None


class TestArrayPositions:
    def test_numbers_only_array(self) -> None:
        """All elements fold into one item schema."""
        schema = _schema([{"b": [1, 2, 3]}])
        assert schema.properties is not None
        items = schema.properties["b"].items
        assert items is not None
        assert items.types == {NodeType.NUMBER}
        assert items.occurrences == 3

    def test_single_item_schema_across_documents(self) -> None:
        """Elements of arrays in different documents share the item schema."""
        schema = _schema([[{"a": 1}], [{"b": 2}, {"a": "x"}]])
        assert schema.items is not None
        assert schema.items.properties is not None
        assert list(schema.items.properties) == ["a", "b"]
        assert schema.items.properties["a"].types == {NodeType.NUMBER, NodeType.STRING}
        assert schema.items.name is None

    def test_never_populated_array_gets_unknown_placeholder(self) -> None:
        """An always-empty array has the unknown item schema."""
        schema = _schema([{"l": []}, {"l": []}])
        assert schema.properties is not None
        items = schema.properties["l"].items
        assert items is not None
        assert items.is_unknown
        assert items == SchemaNode.unknown()

    def test_populated_once_is_not_unknown(self) -> None:
        """One populated instance is enough for a real item schema."""
        schema = _schema([{"l": []}, {"l": ["s"]}])
        assert schema.properties is not None
        items = schema.properties["l"].items
        assert items is not None
        assert items.types == {NodeType.STRING}

    def test_nested_arrays(self) -> None:
        """Arrays of arrays fold level by level."""
        schema = _schema([[[1], [2, "x"]], [[]]])
        assert schema.items is not None and schema.items.items is not None
        assert schema.items.items.types == {NodeType.NUMBER, NodeType.STRING}


class TestTypeDivergence:
    def test_number_and_string(self) -> None:
        """Divergent types are recorded as a set."""
        schema = _schema([{"x": 1}, {"x": "s"}])
        assert schema.properties is not None
        x = schema.properties["x"]
        assert x.types == {NodeType.NUMBER, NodeType.STRING}
        assert x.is_divergent
        assert x.type_names == ["number", "string"]

    def test_root_type_set(self) -> None:
        """The root may diverge too, carrying both properties and items."""
        schema = _schema([{"a": 1}, [1], 3])
        assert schema.types == {NodeType.OBJECT, NodeType.ARRAY, NodeType.NUMBER}
        assert schema.properties is not None
        assert schema.items is not None


class TestHeterogeneousArrays:
    """Mixed-shape arrays produce one unioned item schema."""

    def test_scalars_objects_and_arrays_union(self) -> None:
        """Scalars, objects and nested arrays share one item schema."""
        schema = _schema([[1, {"a": True}, ["s"], {"b": None}]])
        items = schema.items
        assert items is not None
        assert items.types == {NodeType.NUMBER, NodeType.OBJECT, NodeType.ARRAY}
        assert items.properties is not None
        assert list(items.properties) == ["a", "b"]
        assert items.items is not None
        assert items.items.types == {NodeType.STRING}


# ---------------------------------------------------------------------------
# Ordering, modes, empty input
# ---------------------------------------------------------------------------


class TestOrderingAndModes:
    def test_first_seen_order_follows_documents(self) -> None:
        """Keys are ordered by the first document that carries them."""
        schema = _schema([{"b": 1}, {"a": 1, "b": 2}])
        assert schema.properties is not None
        assert list(schema.properties) == ["b", "a"]

    def test_type_only_has_no_samples(self) -> None:
        """Type-only mode records no sample anywhere."""
        schema = _schema([{"a": 1}])
        assert all(node.sample is None for _, node in schema.walk())

    def test_value_sample_keeps_first_scalar(self) -> None:
        """Value-sample mode keeps the first-seen scalar."""
        schema = _schema([{"a": "first"}, {"a": "second"}], SAMPLE)
        assert schema.properties is not None
        assert schema.properties["a"].sample == JsonString("first")
        assert schema.sample is None

    def test_value_sample_for_array_items(self) -> None:
        """The item sample is the first element."""
        schema = _schema([[7, 8, 9]], SAMPLE)
        assert schema.items is not None
        assert schema.items.sample == JsonNumber(7.0)

    def test_value_sample_skips_container_observations(self) -> None:
        """Containers never become samples."""
        schema = _schema([{"a": {}}, {"a": 5}], SAMPLE)
        assert schema.properties is not None
        assert schema.properties["a"].sample == JsonNumber(5.0)

    def test_no_tables_yields_unknown(self) -> None:
        """An empty fold builds the unknown placeholder."""
        assert generalize([]).is_unknown

    def test_lazy_iterable_accepted(self) -> None:
        """A generator of tables is folded one table at a time."""
        tables = (flatten(from_python({"n": i}), i) for i in range(3))
        schema = generalize(tables)
        assert schema.occurrences == 3


class TestSharedDocumentIds:
    """Tables flattened with the default document_id still fold in input order."""

    def test_key_order_follows_fold_position(self) -> None:
        """A later table's key comes after every key of an earlier table."""
        tables = [
            flatten(from_python({"p": [1, 2, 3, 4, 5], "q": 1})),
            flatten(from_python({"r": 1})),
        ]
        schema = generalize(tables)
        assert schema.properties is not None
        assert list(schema.properties) == ["p", "q", "r"]

    def test_sample_follows_fold_position(self) -> None:
        """The sample comes from the first table, not the smallest value."""
        tables = [flatten(from_python({"a": "zeta"})), flatten(from_python({"a": "alpha"}))]
        schema = generalize(tables, SAMPLE)
        assert schema.properties is not None
        assert schema.properties["a"].sample == JsonString("zeta")

    def test_sequential_add_table_numbers_positions(self) -> None:
        """add_table without a position continues after the last one."""
        gen = SchemaGeneralizer()
        gen.add_table(flatten(from_python({"b": 1})))
        gen.add_table(flatten(from_python({"a": 1})), position=5)
        gen.add_table(flatten(from_python({"c": 1})))
        assert gen.next_position == 7
        schema = gen.build()
        assert schema.properties is not None
        assert list(schema.properties) == ["b", "a", "c"]

    def test_negative_position_rejected(self) -> None:
        """Positions are non-negative."""
        with pytest.raises(ValueError, match="position must be >= 0"):
            SchemaGeneralizer().add_table(flatten(from_python(1)), position=-1)

    @pytest.mark.parametrize("config", [None, SAMPLE])
    def test_partitions_with_positions_match_single_fold(
        self, config: SchemaConfig | None
    ) -> None:
        """Workers passing global positions reproduce the sequential fold."""
        tables = [flatten(from_python(doc)) for doc in SHARED_ID_COLLECTION]
        expected = generalize(tables, config)
        left = SchemaGeneralizer(config)
        right = SchemaGeneralizer(config)
        for position, table in enumerate(tables):
            (left if position % 2 else right).add_table(table, position=position)
        assert left.merge(right).build() == expected
        assert right.merge(left).build() == expected

    def test_sliced_generalize_with_start(self) -> None:
        """Slices generalized with an offset merge into the full fold."""
        tables = [flatten(from_python(doc)) for doc in SHARED_ID_COLLECTION]
        expected = generalize(tables, SAMPLE)
        head = generalize(tables[:2], SAMPLE)
        tail = generalize(tables[2:], SAMPLE, start=2)
        assert merge_schemas(tail, head) == expected
        assert merge_schemas(head, tail) == expected


# ---------------------------------------------------------------------------
# Associative, commutative merge
# ---------------------------------------------------------------------------


class TestMerge:
    @pytest.mark.parametrize("config", [None, SAMPLE])
    def test_fold_order_does_not_matter(self, config: SchemaConfig | None) -> None:
        """Adding positioned tables in any order builds the same schema."""
        tables = _tables(COLLECTION)
        expected = generalize(tables, config)
        for perm in itertools.permutations(range(len(tables))):
            gen = SchemaGeneralizer(config)
            for position in perm:
                gen.add_table(tables[position], position=position)
            assert gen.build() == expected

    @pytest.mark.parametrize("config", [None, SAMPLE])
    def test_partitioned_reduce_matches_single_fold(self, config: SchemaConfig | None) -> None:
        """Every two-way split merges back into the single fold, either way round."""
        tables = _tables(COLLECTION)
        expected = generalize(tables, config)
        for split in range(1, len(tables)):
            left = SchemaGeneralizer(config)
            right = SchemaGeneralizer(config)
            for position, table in enumerate(tables):
                (left if position < split else right).add_table(table, position=position)
            assert left.merge(right).build() == expected
            assert right.merge(left).build() == expected

    def test_merge_is_associative(self) -> None:
        """Left and right reductions agree."""
        parts = [
            SchemaGeneralizer().add_table(t, position=i) for i, t in enumerate(_tables(COLLECTION))
        ]
        left_fold = reduce(SchemaGeneralizer.merge, parts).build()
        right_fold = parts[0].merge(
            parts[1].merge(parts[2].merge(parts[3].merge(parts[4])))
        ).build()
        assert left_fold == right_fold
        assert left_fold == generalize(_tables(COLLECTION))

    def test_merge_does_not_mutate_operands(self) -> None:
        """merge returns a new accumulator."""
        a = SchemaGeneralizer().add_table(flatten(from_python({"a": 1}), 0))
        b = SchemaGeneralizer().add_table(flatten(from_python({"b": 1}), 1), position=1)
        before = a.build()
        merged = a.merge(b)
        assert a.build() == before
        assert merged.table_count == 2
        assert merged.next_position == 2

    def test_merge_rejects_mixed_modes(self) -> None:
        """Type-only and value-sample accumulators do not mix."""
        with pytest.raises(ValueError, match="cannot merge"):
            SchemaGeneralizer().merge(SchemaGeneralizer(SAMPLE))

    def test_merge_schemas_matches_fold(self) -> None:
        """Built slices merge into the single-fold schema."""
        tables = _tables(COLLECTION)
        expected = generalize(tables, SAMPLE)
        partial = [generalize(tables[:2], SAMPLE), generalize(tables[2:], SAMPLE, start=2)]
        assert merge_schemas(*partial) == expected
        assert merge_schemas(*reversed(partial)) == expected

    def test_merge_schemas_keeps_unknown_as_identity(self) -> None:
        """An unknown item schema gives way to an observed one."""
        schema = _schema([{"l": []}])
        merged = merge_schemas(schema, _schema([{"l": [1]}], None))
        assert merged.properties is not None
        items = merged.properties["l"].items
        assert items is not None
        assert items.types == {NodeType.NUMBER}


# ---------------------------------------------------------------------------
# Intra-document generalization
# ---------------------------------------------------------------------------


class TestGeneralizeSubtree:
    def test_array_of_records(self) -> None:
        """The items of an array of records merge into one schema."""
        table = flatten(from_python({"rows": [{"a": 1}, {"a": "x", "b": None}]}))
        rows_id = next(n.node_id for n in table if n.name == "rows")
        schema = generalize_subtree(table, rows_id)
        assert schema.types == {NodeType.ARRAY}
        assert schema.name is None
        assert schema.items is not None
        assert schema.items.occurrences == 2
        assert schema.items.properties is not None
        assert schema.items.properties["a"].types == {NodeType.NUMBER, NodeType.STRING}
        assert schema.items.properties["b"].types == {NodeType.NULL}

    def test_unknown_node_raises(self) -> None:
        """A node id absent from the table is a ShapeError."""
        with pytest.raises(ShapeError, match="not found"):
            generalize_subtree(flatten(from_python([1])), 42)

    def test_multi_document_needs_id(self) -> None:
        """An ambiguous owner document must be named explicitly."""
        table = flatten(from_python([1]), 0) + flatten(from_python([2]), 1)
        with pytest.raises(ShapeError, match="pass document_id"):
            generalize_subtree(table, 0)
        schema = generalize_subtree(table, 0, document_id=1)
        assert schema.occurrences == 1


# ---------------------------------------------------------------------------
# Deep nesting
# ---------------------------------------------------------------------------


def _deep_document(depth: int, leaf: Any) -> Any:
    document = leaf
    for level in range(depth):
        document = {"k": document} if level % 2 else [document]
    return document


class TestDeepNesting:
    """Generalization, rendering and conformance stay iterative on deep input."""

    DEPTH = 10_000

    def test_generalize_render_and_check(self) -> None:
        """A 10 000-level document generalizes, renders and conforms to itself."""
        table = flatten(from_python(_deep_document(self.DEPTH, "leaf")))
        schema = generalize([table])
        assert schema == generalize([table])

        node: SchemaNode | None = schema
        levels = 0
        while node is not None:
            levels += 1
            if node.items is not None:
                node = node.items
            elif node.properties:
                node = node.properties["k"]
            else:
                node = None
        assert levels == self.DEPTH + 1

        rendered: Any = schema.to_dict()
        levels = 0
        while rendered is not None:
            levels += 1
            rendered = rendered.get("items") or rendered.get("properties", {}).get("k")
        assert levels == self.DEPTH + 1

        assert find_violations(schema, table) == []

    def test_deep_violation_reported_once(self) -> None:
        """A mistyped leaf at the bottom yields one violation with its full path."""
        schema = generalize([flatten(from_python(_deep_document(self.DEPTH, "leaf")))])
        (violation,) = find_violations(
            schema, flatten(from_python(_deep_document(self.DEPTH, 1)))
        )
        assert len(violation.path) == self.DEPTH
        assert violation.path[0] == "k"
        assert violation.path[-1] is ARRAY_ITEMS
        assert violation.reason == "type number not in ['string']"
