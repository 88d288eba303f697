"""Exception hierarchy for json-structure.

Only the parsing boundary produces recoverable, per-document failures
(``ParseError``).  ``ShapeError`` marks a caller handing the engine input of the
wrong shape.  Type divergence between documents is never an error: the schema
generalizer records a type set instead.
"""

from __future__ import annotations

__all__ = ["JsonStructureError", "ParseError", "ShapeError"]


class JsonStructureError(Exception):
    """Base class for every error raised by json-structure."""


class ParseError(JsonStructureError, ValueError):
    """Raised when a raw JSON text cannot be parsed.

    Attributes:
        document_id: Position of the failing text in its input collection.
        reason:      Human-readable parser message.
    """

    def __init__(self, document_id: int, reason: str) -> None:
        super().__init__(f"document {document_id}: {reason}")
        self.document_id = document_id
        self.reason = reason


class ShapeError(JsonStructureError, ValueError):
    """Raised when an operation receives structurally invalid input.

    Examples: projecting a table that spans several documents, or flattening
    something that is not a JSON value.
    """
