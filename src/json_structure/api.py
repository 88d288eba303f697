"""Convenience API functions for json-structure.

Each call creates fresh engine objects, so no state survives between calls.
The lower-level building blocks (``flatten``, ``generalize``, ``project``,
...) are re-exported from the package root unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from json_structure.config import ExplorerConfig
from json_structure.explorer import CollectionExplorer
from json_structure.result import ExplorationResult
from json_structure.schema.config import SchemaConfig
from json_structure.schema.conformance import find_violations
from json_structure.schema.generalizer import SchemaGeneralizer
from json_structure.schema.nodes import SchemaNode
from json_structure.tree.flattener import Flattener
from json_structure.tree.values import JsonValue, from_python, is_json_value

__all__ = ["explore", "explore_values", "generalize_values", "is_conformant"]


def explore(
    texts: Iterable[str | bytes],
    config: ExplorerConfig | None = None,
) -> ExplorationResult:
    """Parse, flatten and generalize a collection of raw JSON texts.

    Args:
        texts:  Raw JSON documents; each is parsed independently.
        config: Explorer settings.  Defaults to ``ExplorerConfig()``.

    Returns:
        An ``ExplorationResult``.  Texts that fail to parse appear in
        ``errors`` and do not affect the schema.
    """
    return CollectionExplorer(config=config).explore(texts)


def explore_values(
    values: Iterable[Any],
    config: ExplorerConfig | None = None,
) -> ExplorationResult:
    """Like ``explore`` for already-parsed Python values."""
    return CollectionExplorer(config=config).explore_values(values)


def generalize_values(
    values: Iterable[Any],
    config: SchemaConfig | None = None,
) -> SchemaNode:
    """Generalize Python values (or JsonValues) directly into a schema.

    Document ids follow input order.
    """
    flattener = Flattener()
    generalizer = SchemaGeneralizer(config)
    for document_id, value in enumerate(values):
        generalizer.add_table(flattener.flatten(_as_json_value(value), document_id))
    return generalizer.build()


def is_conformant(value: Any, schema: SchemaNode) -> bool:
    """Return True if *value* only uses paths and types recorded in *schema*."""
    table = Flattener().flatten(_as_json_value(value))
    return not find_violations(schema, table)


def _as_json_value(value: Any) -> JsonValue:
    return value if is_json_value(value) else from_python(value)
