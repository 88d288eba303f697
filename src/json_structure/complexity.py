"""Complexity metric: a document's flattened node count.

``complexity(doc) == len(flatten(doc))``.  ``ComplexityReport`` summarises the
per-document counts of a collection, the structural-size proxy used when
sampling or comparing collections.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

import numpy as np

from json_structure.tree.flattener import Flattener
from json_structure.tree.nodes import Document
from json_structure.tree.values import JsonValue

__all__ = ["ComplexityReport", "complexity"]


def complexity(document: JsonValue | Document) -> int:
    """Return the number of nodes in the document's structure table."""
    return len(Flattener().flatten(document))


@dataclass(frozen=True, slots=True)
class ComplexityReport:
    """Distribution of document complexities across a collection.

    Attributes:
        count:  Number of documents.
        total:  Sum of all complexities.
        mean:   Arithmetic mean.
        std:    Population standard deviation (ddof=0).
        min:    Smallest complexity.
        median: 50th percentile.
        p90:    90th percentile (linear interpolation).
        max:    Largest complexity.
    """

    count: int
    total: int
    mean: float
    std: float
    min: int
    median: float
    p90: float
    max: int

    @classmethod
    def from_counts(cls, counts: Mapping[int, int]) -> ComplexityReport:
        """Build a report from ``{document_id: complexity}``.

        An empty mapping yields an all-zero report.
        """
        if not counts:
            return cls(count=0, total=0, mean=0.0, std=0.0, min=0, median=0.0, p90=0.0, max=0)

        values = np.fromiter(counts.values(), dtype=np.int64, count=len(counts))
        return cls(
            count=int(values.size),
            total=int(values.sum()),
            mean=float(np.mean(values)),
            std=float(np.std(values)),
            min=int(values.min()),
            median=float(np.median(values)),
            p90=float(np.percentile(values, 90)),
            max=int(values.max()),
        )
