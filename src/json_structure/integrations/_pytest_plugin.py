"""pytest plugin for json-structure.

Auto-discovered by pytest via the pytest11 entry point declared in
pyproject.toml; installing the package is enough, no conftest.py changes are
needed.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from json_structure import SchemaNode, find_violations, flatten, from_python, generalize_values
from json_structure.tree.values import is_json_value


@pytest.fixture(scope="session")
def assert_json_conforms() -> Any:
    """Fixture returning a callable that asserts a document fits a schema.

    Usage in tests::

        def test_payload_shape(assert_json_conforms):
            examples = [{"id": 1, "tags": ["a"]}, {"id": 2, "tags": []}]
            assert_json_conforms({"id": 3, "tags": ["b", "c"]}, examples)

    The expected shape is either a built ``SchemaNode`` or a sequence of
    example documents that is generalized on the fly.

    Returns:
        A callable ``_assert(actual, expected) -> None`` raising
        ``AssertionError`` that lists every violation.
    """

    def _assert(actual: Any, expected: SchemaNode | Sequence[Any]) -> None:
        schema = expected if isinstance(expected, SchemaNode) else generalize_values(expected)
        value = actual if is_json_value(actual) else from_python(actual)
        violations = find_violations(schema, flatten(value))
        if violations:
            details = "\n".join(f"  {violation}" for violation in violations)
            raise AssertionError(
                f"JSON document does not conform to schema "
                f"({len(violations)} violation(s)):\n{details}\n"
                f"  actual: {actual}"
            )

    return _assert
