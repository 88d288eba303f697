"""Integrations subpackage for json-structure.

Contains the pytest plugin (auto-discovered via the ``pytest11`` entry point),
which provides the ``assert_json_conforms`` fixture.
"""

from __future__ import annotations

__all__: list[str] = []
