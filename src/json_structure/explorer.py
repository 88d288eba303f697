"""CollectionExplorer: wires ingestion, flattening, complexity and generalization.

This is the orchestration layer between the engine and the public API.  It
walks a collection once, document by document:

- raw text is parsed (via ``ingest.iter_parsed``) and flattened through a
  per-instance StructureCache,
- the table's length is recorded as the document's complexity,
- the table is folded into a SchemaGeneralizer and, unless ``keep_tables``
  is set, released immediately.

Parse failures are collected on the result and never abort the batch.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from typing import Any

from json_structure.cache import StructureCache
from json_structure.complexity import ComplexityReport
from json_structure.config import ExplorerConfig
from json_structure.errors import ParseError
from json_structure.ingest import iter_parsed
from json_structure.logging import get_logger
from json_structure.result import ExplorationResult
from json_structure.schema.generalizer import SchemaGeneralizer
from json_structure.tree.flattener import Flattener
from json_structure.tree.nodes import Document, StructureNode
from json_structure.tree.values import from_python

__all__ = ["CollectionExplorer"]

logger = get_logger("explorer")


class CollectionExplorer:
    """Explores a collection of JSON documents in a single streaming pass.

    Two separate explorers never share cache state.

    Example::

        from json_structure.explorer import CollectionExplorer

        explorer = CollectionExplorer()
        result = explorer.explore(['{"x": 1}', '{"x": "s"}', "not json"])
        result.schema.properties["x"].type_names   # ["number", "string"]
        result.errors[0].document_id               # 2
    """

    def __init__(self, config: ExplorerConfig | None = None) -> None:
        self._config = config if config is not None else ExplorerConfig()
        self._cache = StructureCache(max_size=self._config.cache_size)
        self._flattener = Flattener()

    @property
    def config(self) -> ExplorerConfig:
        return self._config

    @property
    def cache(self) -> StructureCache:
        return self._cache

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def explore(self, texts: Iterable[str | bytes]) -> ExplorationResult:
        """Explore raw JSON texts; document ids are their input positions."""
        t0 = time.perf_counter()
        generalizer = SchemaGeneralizer(self._config.schema)
        complexities: dict[int, int] = {}
        tables: dict[int, tuple[StructureNode, ...]] = {}
        errors: list[ParseError] = []

        for document_id, outcome in iter_parsed(texts, self._cache.get_or_flatten):
            if isinstance(outcome, ParseError):
                errors.append(outcome)
                continue
            self._absorb(document_id, outcome, generalizer, complexities, tables)

        return self._finish(t0, generalizer, complexities, tables, errors)

    def explore_values(self, values: Iterable[Any]) -> ExplorationResult:
        """Explore already-parsed Python values (dicts, lists, scalars).

        Raises:
            TypeError: If a value has no JSON shape.
            ValueError: If a value holds a non-finite number.
        """
        t0 = time.perf_counter()
        generalizer = SchemaGeneralizer(self._config.schema)
        complexities: dict[int, int] = {}
        tables: dict[int, tuple[StructureNode, ...]] = {}

        for document_id, value in enumerate(values):
            document = Document(document_id=document_id, value=from_python(value))
            table = self._flattener.flatten(document)
            self._absorb(document_id, table, generalizer, complexities, tables)

        return self._finish(t0, generalizer, complexities, tables, [])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _absorb(
        self,
        document_id: int,
        table: tuple[StructureNode, ...],
        generalizer: SchemaGeneralizer,
        complexities: dict[int, int],
        tables: dict[int, tuple[StructureNode, ...]],
    ) -> None:
        complexities[document_id] = len(table)
        generalizer.add_table(table, position=document_id)
        if self._config.keep_tables:
            tables[document_id] = table
        logger.debug("Document %d flattened to %d nodes", document_id, len(table))

    def _finish(
        self,
        t0: float,
        generalizer: SchemaGeneralizer,
        complexities: dict[int, int],
        tables: dict[int, tuple[StructureNode, ...]],
        errors: list[ParseError],
    ) -> ExplorationResult:
        schema = generalizer.build()
        report = ComplexityReport.from_counts(complexities)
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        logger.info(
            "Explored %d documents (%d failed, %d schema paths) in %.1f ms",
            len(complexities),
            len(errors),
            generalizer.path_count,
            elapsed_ms,
        )
        return ExplorationResult(
            schema=schema,
            complexities=complexities,
            report=report,
            tables=tables,
            errors=errors,
            computation_time_ms=elapsed_ms,
        )
