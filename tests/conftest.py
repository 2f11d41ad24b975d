"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from mwparser.ast import Document, Element, Formatted, Markup, Paragraph, Text
from mwparser.parser import Failure, Success, parse, parse_document
from mwparser.traverse import walk


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns a Document."""

    def _parse(source: str) -> Document:
        return parse_document(source)

    return _parse


@pytest.fixture
def parse_failure():
    """Return a helper that parses source expected to be rejected."""

    def _parse(source: str) -> Failure:
        result = parse(source)
        assert not isinstance(result, Success), f"Expected failure, got {result}"
        return result

    return _parse


@pytest.fixture
def first_inline(parse_source):
    """Return a helper giving the inline children of the first paragraph."""

    def _inline(source: str) -> tuple:
        doc = parse_source(source)
        para = doc.content[0]
        assert isinstance(para, Paragraph), f"Expected Paragraph, got {type(para).__name__}"
        return para.content

    return _inline


def text_of(node: Element) -> str:
    """Concatenate all Text payloads below node, in document order."""
    return "".join(n.text for n, _ in walk(node) if isinstance(n, Text))


def assert_formatted(node: Element, markup: Markup, text: str | None = None) -> None:
    """Assert that node is a Formatted run with the given markup (and text)."""
    assert isinstance(node, Formatted), f"Expected Formatted, got {type(node).__name__}"
    assert node.markup == markup, f"Expected {markup}, got {node.markup}"
    if text is not None:
        assert text_of(node) == text, f"Expected text {text!r}, got {text_of(node)!r}"
