"""schema subpackage: public API for schema generalization.

Example::

    from json_structure.schema import generalize
    from json_structure.tree import flatten, from_python

    tables = [flatten(from_python(doc), i) for i, doc in enumerate(docs)]
    schema = generalize(tables)
"""

from __future__ import annotations

from json_structure.schema.config import SchemaConfig, SchemaMode
from json_structure.schema.conformance import Violation, find_violations
from json_structure.schema.generalizer import (
    SchemaGeneralizer,
    generalize,
    generalize_subtree,
    merge_schemas,
)
from json_structure.schema.nodes import SchemaNode
from json_structure.schema.paths import (
    ARRAY_ITEMS,
    PathKey,
    PathTrie,
    format_path,
    iter_path_ids,
    iter_path_keys,
)

__all__ = [
    "ARRAY_ITEMS",
    "PathKey",
    "PathTrie",
    "SchemaConfig",
    "SchemaGeneralizer",
    "SchemaMode",
    "SchemaNode",
    "Violation",
    "find_violations",
    "format_path",
    "generalize",
    "generalize_subtree",
    "iter_path_ids",
    "iter_path_keys",
    "merge_schemas",
]
