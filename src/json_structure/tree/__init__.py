"""Tree subpackage: the value model and the structure flattener.

Re-exports:
- JsonValue and its six variants, plus from_python/to_python converters
- NodeType: StrEnum of the six JSON shapes
- StructureNode / Document: rows and inputs of a flattened table
- Flattener / flatten: pre-order, explicit-stack flattening
"""

from json_structure.tree.flattener import Flattener, flatten, max_depth
from json_structure.tree.nodes import SCALAR_TYPES, Document, NodeType, StructureNode
from json_structure.tree.values import (
    JsonArray,
    JsonBool,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
    from_python,
    is_json_value,
    to_python,
)

__all__ = [
    "SCALAR_TYPES",
    "Document",
    "Flattener",
    "JsonArray",
    "JsonBool",
    "JsonNull",
    "JsonNumber",
    "JsonObject",
    "JsonString",
    "JsonValue",
    "NodeType",
    "StructureNode",
    "flatten",
    "from_python",
    "is_json_value",
    "max_depth",
    "to_python",
]
