"""Strict parser for a subset of MediaWiki markup."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mwparser.ast import Document
    from mwparser.parser import ParseResult

__version__ = "0.1.0"


def parse(source: str, *, memoize: bool = False) -> ParseResult:
    """Parse wiki markup, returning Success(document) or Failure(diagnostic)."""
    from mwparser.parser import parse as _parse

    return _parse(source, memoize=memoize)


def parse_document(source: str, *, memoize: bool = False) -> Document:
    """Parse wiki markup into a Document, raising ParseError on failure."""
    from mwparser.parser import parse_document as _parse_document

    return _parse_document(source, memoize=memoize)
