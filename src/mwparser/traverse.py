"""Read-only traversal over document trees."""

from __future__ import annotations

from collections.abc import Iterator

from mwparser.ast import (
    Comment,
    Document,
    Element,
    ExternalReference,
    Formatted,
    Heading,
    InternalReference,
    List,
    ListItem,
    Paragraph,
    Template,
    TemplateAttribute,
    Text,
)


def children(node: Element) -> Iterator[Element]:
    """Yield the direct children of *node* in field order."""
    if isinstance(node, (Document, Paragraph, Formatted, Template, List, ListItem)):
        yield from node.content
    elif isinstance(node, Heading):
        yield node.caption
        yield from node.content
    elif isinstance(node, TemplateAttribute):
        if node.name is not None:
            yield node.name
        yield from node.value
    elif isinstance(node, ExternalReference):
        yield from node.caption
    elif isinstance(node, InternalReference):
        yield node.target
        for option in node.options:
            yield from option
        yield from node.caption
    elif not isinstance(node, (Text, Comment)):
        raise TypeError(f"not a document element: {type(node).__name__}")


def walk(
    node: Element, path: tuple[Element, ...] = ()
) -> Iterator[tuple[Element, tuple[Element, ...]]]:
    """Yield (element, ancestors) pairs in pre-order, starting with *node*."""
    yield node, path
    inner = (*path, node)
    for child in children(node):
        yield from walk(child, inner)
