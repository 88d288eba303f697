"""ExplorationResult dataclass for batch exploration output."""

from __future__ import annotations

from dataclasses import dataclass

from json_structure.complexity import ComplexityReport
from json_structure.errors import ParseError
from json_structure.schema.nodes import SchemaNode
from json_structure.tree.nodes import StructureNode

__all__ = ["ExplorationResult"]


@dataclass(frozen=True, slots=True)
class ExplorationResult:
    """Result of exploring a collection of JSON documents.

    Attributes:
        schema: Generalized schema over every successfully parsed document.
        complexities: ``{document_id: node count}`` for parsed documents.
        report: Summary statistics of ``complexities``.
        tables: ``{document_id: structure table}``; empty unless the explorer
            was configured with ``keep_tables=True``.
        errors: One ParseError per document that failed to parse, in input
            order.
        computation_time_ms: Wall-clock duration of the exploration.
    """

    schema: SchemaNode
    complexities: dict[int, int]
    report: ComplexityReport
    tables: dict[int, tuple[StructureNode, ...]]
    errors: list[ParseError]
    computation_time_ms: float

    @property
    def document_count(self) -> int:
        """Number of documents that parsed successfully."""
        return len(self.complexities)
