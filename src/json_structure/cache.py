"""StructureCache: LRU cache of flattened tables keyed by raw JSON text.

Crawled collections often repeat identical documents.  A cached table is
stored once and re-stamped with the requested ``document_id`` on every hit,
so callers always receive a table for the document they asked about.

Each instance owns its own ``LRUCache``; two caches never share entries.
Eviction of the least-recently-used entry is silent.  Parse failures are not
cached: they are re-raised on every lookup.
"""

from __future__ import annotations

import dataclasses

from cachetools import LRUCache

from json_structure.ingest import parse_document
from json_structure.tree.flattener import Flattener
from json_structure.tree.nodes import StructureNode

__all__ = ["StructureCache"]


class StructureCache:
    """LRU-backed cache from raw JSON text to its structure table.

    Args:
        max_size: Maximum number of distinct texts held.  Defaults to 512.

    Example::

        cache = StructureCache(max_size=128)
        table = cache.get_or_flatten('{"a": 1}', document_id=7)
        table[0].document_id   # 7
    """

    def __init__(self, max_size: int = 512) -> None:
        self._cache: LRUCache[str | bytes, tuple[StructureNode, ...]] = LRUCache(
            maxsize=max_size
        )
        self._flattener = Flattener()
        self.hits = 0
        self.misses = 0

    @property
    def max_size(self) -> int:
        """The maximum number of entries this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of entries stored in the cache."""
        return int(self._cache.currsize)

    def get_or_flatten(self, text: str | bytes, document_id: int = 0) -> tuple[StructureNode, ...]:
        """Return the structure table of *text*, stamped with *document_id*.

        Raises:
            ParseError: If *text* is not valid JSON.
        """
        cached = self._cache.get(text)
        if cached is None:
            self.misses += 1
            table = self._flattener.flatten(parse_document(text, document_id))
            self._cache[text] = table
            return table

        self.hits += 1
        if cached[0].document_id == document_id:
            return cached
        return tuple(dataclasses.replace(node, document_id=document_id) for node in cached)
