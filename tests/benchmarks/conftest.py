"""Deterministic collection generators for performance benchmarks.

All generators produce fixed, reproducible documents. No random values.
Three tiers: 10 flat records, 100 nested records, and one 2 000-level deep
document for the explicit-stack traversal.
"""

from __future__ import annotations

from typing import Any

import pytest


def _make_flat_records(count: int) -> list[dict[str, Any]]:
    """Generate flat records sharing most keys, with a few optional ones."""
    records: list[dict[str, Any]] = []
    for i in range(count):
        record: dict[str, Any] = {f"field_{j}": f"value_{i}_{j}" for j in range(10)}
        if i % 3 == 0:
            record["optional"] = None
        records.append(record)
    return records


def _make_nested_records(count: int) -> list[dict[str, Any]]:
    """Generate records with nested sections, arrays and divergent types.

    Each record: 5 sections x (6 leaves + an array of 4 item objects).
    """
    records: list[dict[str, Any]] = []
    for i in range(count):
        record: dict[str, Any] = {}
        for s in range(5):
            section: dict[str, Any] = {f"leaf_{k}": k * i for k in range(6)}
            section["items"] = [
                {"id": j, "label": f"item_{j}" if j % 2 else j} for j in range(4)
            ]
            record[f"section_{s}"] = section
        records.append(record)
    return records


def _make_deep_document(depth: int) -> dict[str, Any]:
    """Generate one document nested *depth* levels through alternating containers."""
    document: Any = "leaf"
    for level in range(depth):
        document = {"child": document} if level % 2 else [document]
    return {"root": document}


@pytest.fixture
def records_10_flat() -> list[dict[str, Any]]:
    """10 flat records with an optional key."""
    return _make_flat_records(10)


@pytest.fixture
def records_100_nested() -> list[dict[str, Any]]:
    """100 nested records (5 sections, arrays of item objects)."""
    return _make_nested_records(100)


@pytest.fixture
def deep_document() -> dict[str, Any]:
    """One document nested 2 000 levels deep."""
    return _make_deep_document(2000)
