"""Parsing boundary: raw JSON texts to Documents.

Each text is parsed independently with the standard ``json`` module and then
converted to the tagged value model.  A text that fails to parse becomes a
``ParseError`` carrying its ``document_id``; the rest of the batch is
unaffected.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Iterator
from typing import NoReturn, TypeVar

from json_structure.errors import ParseError
from json_structure.logging import get_logger
from json_structure.tree.nodes import Document
from json_structure.tree.values import from_python

__all__ = ["iter_documents", "iter_parsed", "parse_document", "parse_documents"]

logger = get_logger("ingest")

T = TypeVar("T")


def _reject_constant(name: str) -> NoReturn:
    raise ValueError(f"non-standard JSON constant {name}")


def parse_document(text: str | bytes, document_id: int = 0) -> Document:
    """Parse one raw JSON text into a Document.

    Raises:
        ParseError: For malformed JSON, ``NaN``/``Infinity`` constants, numbers
            outside float range, or nesting deeper than the parser supports.
    """
    try:
        raw = json.loads(text, parse_constant=_reject_constant)
        value = from_python(raw)
    except RecursionError:
        raise ParseError(document_id, "nesting exceeds parser recursion limit") from None
    except (ValueError, TypeError) as exc:
        # JSONDecodeError is a ValueError; JsonNumber rejects overflowed floats
        raise ParseError(document_id, str(exc)) from exc
    return Document(document_id=document_id, value=value)


def iter_parsed(
    texts: Iterable[str | bytes],
    parse: Callable[[str | bytes, int], T],
    start: int = 0,
) -> Iterator[tuple[int, T | ParseError]]:
    """Apply *parse* to each text, yielding ``(document_id, outcome)``.

    *parse* receives the text and its position-assigned document id (from
    *start*).  A ``ParseError`` it raises is logged and yielded in place of
    the result, so one bad text never aborts the batch.
    """
    for document_id, text in enumerate(texts, start=start):
        try:
            yield document_id, parse(text, document_id)
        except ParseError as exc:
            logger.warning("Skipping document %d: %s", document_id, exc.reason)
            yield document_id, exc


def iter_documents(
    texts: Iterable[str | bytes], start: int = 0
) -> Iterator[Document | ParseError]:
    """Lazily parse *texts*, yielding a Document or a ParseError per text.

    Document ids are assigned by position, beginning at *start*.
    """
    for _, outcome in iter_parsed(texts, parse_document, start=start):
        yield outcome


def parse_documents(
    texts: Iterable[str | bytes], start: int = 0
) -> tuple[Document | ParseError, ...]:
    """Eager form of ``iter_documents``."""
    return tuple(iter_documents(texts, start=start))
