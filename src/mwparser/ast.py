"""AST node types for parsed wiki documents."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mwparser.source import Span


class Markup(Enum):
    """Kind of inline formatting applied by a Formatted node."""

    BOLD = "bold"
    ITALIC = "italic"
    MATH = "math"
    PLAIN = "plain"


class ListItemKind(Enum):
    """Kind of list line, taken from the last marker of its prefix."""

    UNORDERED = "unordered"
    ORDERED = "ordered"
    DEFINITION_TERM = "definitionterm"
    DEFINITION = "definition"


@dataclass(frozen=True, slots=True)
class Text:
    """Literal text with no further structure."""

    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class Comment:
    """<!-- ... --> comment; text is everything between the markers."""

    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class Formatted:
    """Inline run with markup.

    Plain and math runs hold a single Text; bold and italic runs may nest
    other Formatted nodes.
    """

    markup: Markup
    content: tuple[Formatted | Text, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class TemplateAttribute:
    """One '|'-separated part of a template, positional when name is None."""

    name: Text | None
    value: tuple[Inline | Paragraph, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class Template:
    """A {{...}} transclusion, parsed but never expanded."""

    content: tuple[TemplateAttribute, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class ExternalReference:
    """[url caption] link."""

    target: str
    caption: tuple[Inline, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class InternalReference:
    """[[target|option|...|caption]] link."""

    target: Text
    options: tuple[tuple[Inline, ...], ...]
    caption: tuple[Inline, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class Paragraph:
    """One line of inline content."""

    content: tuple[Inline, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class ListItem:
    """One list line; depth is the number of leading markers."""

    depth: int
    kind: ListItemKind
    content: tuple[Inline, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class List:
    """Run of consecutive list lines.

    Items stay flat in source order; nesting is expressed only through
    each item's depth.
    """

    content: tuple[ListItem, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class Heading:
    depth: int
    caption: Paragraph
    content: tuple[List | Paragraph, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class Document:
    """Root document node."""

    content: tuple[Heading | List | Paragraph, ...]
    span: Span


Inline = Formatted | Template | ExternalReference | InternalReference | Comment
Element = (
    Document
    | Heading
    | List
    | ListItem
    | Paragraph
    | Template
    | TemplateAttribute
    | ExternalReference
    | InternalReference
    | Formatted
    | Comment
    | Text
)
