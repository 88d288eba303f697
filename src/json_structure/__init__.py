"""json-structure: flatten JSON documents into structure tables and generalize them into schemas."""

from __future__ import annotations

from json_structure.api import explore, explore_values, generalize_values, is_conformant
from json_structure.complexity import ComplexityReport, complexity
from json_structure.config import ExplorerConfig
from json_structure.errors import JsonStructureError, ParseError, ShapeError
from json_structure.explorer import CollectionExplorer
from json_structure.graph import Edge, GraphProjection, Vertex, project
from json_structure.ingest import parse_document, parse_documents
from json_structure.result import ExplorationResult
from json_structure.schema import (
    ARRAY_ITEMS,
    SchemaConfig,
    SchemaGeneralizer,
    SchemaMode,
    SchemaNode,
    Violation,
    find_violations,
    format_path,
    generalize,
    generalize_subtree,
    merge_schemas,
)
from json_structure.tree import (
    Document,
    Flattener,
    JsonArray,
    JsonBool,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
    NodeType,
    StructureNode,
    flatten,
    from_python,
    to_python,
)

__version__: str = "0.1.0"
__all__: list[str] = [
    "ARRAY_ITEMS",
    "CollectionExplorer",
    "ComplexityReport",
    "Document",
    "Edge",
    "ExplorationResult",
    "ExplorerConfig",
    "Flattener",
    "GraphProjection",
    "JsonArray",
    "JsonBool",
    "JsonNull",
    "JsonNumber",
    "JsonObject",
    "JsonString",
    "JsonStructureError",
    "JsonValue",
    "NodeType",
    "ParseError",
    "SchemaConfig",
    "SchemaGeneralizer",
    "SchemaMode",
    "SchemaNode",
    "ShapeError",
    "StructureNode",
    "Vertex",
    "Violation",
    "complexity",
    "explore",
    "explore_values",
    "find_violations",
    "flatten",
    "format_path",
    "from_python",
    "generalize",
    "generalize_subtree",
    "generalize_values",
    "is_conformant",
    "merge_schemas",
    "parse_document",
    "parse_documents",
    "project",
    "to_python",
]
