"""--debug AST dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from mwparser.ast import (
    Comment,
    Element,
    ExternalReference,
    Formatted,
    Heading,
    InternalReference,
    ListItem,
    TemplateAttribute,
    Text,
)
from mwparser.traverse import walk


def dump_ast(node: Element, *, file: TextIO = sys.stderr, positions: bool = False) -> None:
    """Print a human-readable AST tree to *file*."""
    for element, path in walk(node):
        line = f"{_indent(len(path))}{_describe(element)}"
        if positions:
            start, end = element.span.start, element.span.end
            line += f"  @{start.line}:{start.column}-{end.line}:{end.column}"
        file.write(line + "\n")


def _indent(depth: int) -> str:
    return "  " * depth


def _describe(node: Element) -> str:
    name = type(node).__name__
    if isinstance(node, Text):
        return f"Text({node.text!r})"
    if isinstance(node, Comment):
        return f"Comment({node.text!r})"
    if isinstance(node, ListItem):
        return f"ListItem {node.kind.name} depth={node.depth}"
    if isinstance(node, Formatted):
        return f"Formatted {node.markup.name}"
    if isinstance(node, Heading):
        return f"Heading depth={node.depth}"
    if isinstance(node, TemplateAttribute):
        return "TemplateAttribute named" if node.name is not None else "TemplateAttribute"
    if isinstance(node, ExternalReference):
        return f"ExternalReference {node.target}"
    if isinstance(node, InternalReference):
        return f"InternalReference options={len(node.options)}"
    return name
