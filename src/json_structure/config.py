"""ExplorerConfig: settings for batch exploration of a JSON collection."""

from __future__ import annotations

from dataclasses import dataclass, field

from json_structure.schema.config import SchemaConfig

__all__ = ["ExplorerConfig"]


@dataclass(frozen=True, slots=True)
class ExplorerConfig:
    """Immutable configuration for CollectionExplorer.

    Attributes:
        schema:      Generalizer configuration (type-only or value-sample).
        keep_tables: When True, every document's structure table is retained on
            the result.  When False (default) tables are streamed into the
            generalizer and released, keeping memory flat on large inputs.
        cache_size:  Maximum number of distinct raw texts whose tables are
            cached (>= 1).
    """

    schema: SchemaConfig = field(default_factory=SchemaConfig)
    keep_tables: bool = False
    cache_size: int = 512

    def __post_init__(self) -> None:
        if self.cache_size < 1:
            msg = f"cache_size must be >= 1, got {self.cache_size}"
            raise ValueError(msg)
