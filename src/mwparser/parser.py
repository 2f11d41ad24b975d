"""Wiki markup grammar: rule methods evaluated over source text into an AST."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from mwparser.ast import (
    Comment,
    Document,
    ExternalReference,
    Formatted,
    Heading,
    Inline,
    InternalReference,
    List,
    ListItem,
    ListItemKind,
    Markup,
    Paragraph,
    Template,
    TemplateAttribute,
    Text,
)
from mwparser.chars import (
    LIST_MARKERS,
    is_key_char,
    is_list_marker,
    is_math_char,
    is_plain_char,
    is_target_char,
    is_url_char,
)
from mwparser.errors import Diagnostic, ExpectedSet, ParseError
from mwparser.peg import FailureTracker, Match, PegParser, Rule, rule

# Inline constructs (templates, links, bold, italic) that may be open at
# once before the parse is abandoned.
MAX_NESTING = 40


@dataclass(frozen=True, slots=True)
class Success:
    document: Document


@dataclass(frozen=True, slots=True)
class Failure:
    diagnostic: Diagnostic
    expected: ExpectedSet

    @property
    def offset(self) -> int:
        return self.expected.offset


ParseResult = Success | Failure


class _NestingLimit(Exception):
    def __init__(self, offset: int) -> None:
        super().__init__(offset)
        self.offset = offset


class WikiParser(PegParser):
    """Ordered-choice grammar for headings, lists, paragraphs, formatting, templates and links."""

    def __init__(
        self,
        source: str,
        *,
        memoize: bool = False,
        tracker: FailureTracker | None = None,
    ) -> None:
        super().__init__(source, memoize=memoize, tracker=tracker)
        self._depth = 0
        self._innermost = 0

    def run(self) -> ParseResult:
        try:
            m = self.document(0)
        except _NestingLimit as exc:
            return self._failure(ExpectedSet(exc.offset, frozenset({"nesting depth"})))
        except RecursionError:
            return self._failure(ExpectedSet(self._innermost, frozenset({"nesting depth"})))
        if m is not None:
            return Success(m[1])
        return self._failure(self.tracker.expected())

    def _failure(self, expected: ExpectedSet) -> Failure:
        position = self.lines.position(expected.offset)
        return Failure(Diagnostic.from_expected(expected, position), expected)

    @contextmanager
    def _nested(self, pos: int) -> Iterator[None]:
        """Count one more open inline construct starting at *pos*."""
        if self._depth >= MAX_NESTING:
            raise _NestingLimit(pos)
        self._depth += 1
        self._innermost = pos
        try:
            yield
        finally:
            self._depth -= 1

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    @rule
    def document(self, pos: int) -> Match[Document] | None:
        start = pos
        pos, blocks = self.many(pos, self.block)
        if self.end_of_input(pos) is None:
            return None
        return pos, Document(tuple(blocks), self.span(start, pos))

    @rule
    def block(self, pos: int) -> Match[Heading | List | Paragraph] | None:
        return self.choice(pos, self.heading, self.list_block, self.paragraph)

    @rule
    def heading(self, pos: int) -> Match[Heading] | None:
        start = pos
        m = self.many1(pos, self.lit("="))
        if m is None:
            return None
        pos, markers = m
        pos, _ = self.many(pos, self.lit(" "))

        m = self.caption(pos)
        if m is None:
            return None
        pos, caption = m

        # Closing markers are consumed in any number, their count is not checked
        pos, _ = self.many(pos, self.lit("="))
        pos, _ = self.many(pos, self.lit(" "))
        m = self.line_end(pos)
        if m is None:
            return None
        pos, _ = m

        pos, body = self.many(pos, self._section_block)
        return pos, Heading(len(markers), caption, tuple(body), self.span(start, pos))

    def _section_block(self, pos: int) -> Match[List | Paragraph] | None:
        return self.choice(pos, self.list_block, self.paragraph)

    @rule
    def caption(self, pos: int) -> Match[Paragraph] | None:
        start = pos
        m = self.many1(pos, self.inline)
        if m is None:
            return None
        pos, content = m
        return pos, Paragraph(tuple(content), self.span(start, pos))

    @rule
    def list_block(self, pos: int) -> Match[List] | None:
        start = pos
        m = self.many1(pos, self.list_item)
        if m is None:
            return None
        pos, items = m
        return pos, List(tuple(items), self.span(start, pos))

    @rule
    def list_item(self, pos: int) -> Match[ListItem] | None:
        start = pos
        m = self.capture(
            pos, lambda p: self.many1(p, lambda q: self.char(q, is_list_marker, "list marker"))
        )
        if m is None:
            return None
        pos, markers = m
        pos, _ = self.many(pos, self.lit(" "))
        end, content = self.many(pos, self.inline)
        m = self.line_end(end)
        if m is None:
            return None
        kind = ListItemKind(LIST_MARKERS[markers[-1]])
        return m[0], ListItem(len(markers), kind, tuple(content), self.span(start, end))

    @rule
    def paragraph(self, pos: int) -> Match[Paragraph] | None:
        return self.choice(pos, self._filled_paragraph, self._blank_line)

    def _filled_paragraph(self, pos: int) -> Match[Paragraph] | None:
        start = pos
        m = self.many1(pos, self.inline)
        if m is None:
            return None
        end, content = m
        m = self.line_end(end)
        if m is None:
            return None
        return m[0], Paragraph(tuple(content), self.span(start, end))

    def _blank_line(self, pos: int) -> Match[Paragraph] | None:
        m = self.newline(pos)
        if m is None:
            return None
        return m[0], Paragraph((), self.span(pos, pos))

    @rule
    def line_end(self, pos: int) -> Match[None] | None:
        return self.choice(pos, self.newline, self.end_of_input)

    @rule
    def newline(self, pos: int) -> Match[str] | None:
        return self.quiet(
            pos, lambda p: self.choice(p, self.lit("\r\n"), self.lit("\n")), "newline"
        )

    # ------------------------------------------------------------------
    # Inline content
    # ------------------------------------------------------------------

    @rule
    def inline(self, pos: int) -> Match[Inline] | None:
        return self.choice(
            pos,
            self.comment,
            self.template,
            self.internal_reference,
            self.external_reference,
            self.formatted,
        )

    @rule
    def formatted(self, pos: int) -> Match[Formatted] | None:
        # Bold before italic: "'''" must win over "''" at the same offset
        return self.choice(pos, self.bold, self.italic, self.math, self.plain)

    @rule
    def bold(self, pos: int) -> Match[Formatted] | None:
        return self._delimited(pos, "'''", Markup.BOLD, self._bold_item)

    @rule
    def italic(self, pos: int) -> Match[Formatted] | None:
        return self._delimited(pos, "''", Markup.ITALIC, self._italic_item)

    def _bold_item(self, pos: int) -> Match[Formatted | Text] | None:
        return self.choice(pos, self.italic, self.math, self.text)

    def _italic_item(self, pos: int) -> Match[Formatted | Text] | None:
        return self.choice(pos, self.bold, self.math, self.text)

    def _delimited(
        self, pos: int, marker: str, markup: Markup, item: Rule
    ) -> Match[Formatted] | None:
        start = pos
        m = self.literal(pos, marker)
        if m is None:
            return None
        with self._nested(start):
            m = self.many1(m[0], item)
        if m is None:
            return None
        pos, content = m
        m = self.literal(pos, marker)
        if m is None:
            return None
        pos = m[0]
        return pos, Formatted(markup, tuple(content), self.span(start, pos))

    @rule
    def math(self, pos: int) -> Match[Formatted] | None:
        start = pos
        m = self.literal(pos, "$")
        if m is None:
            return None
        m = self.quiet(
            m[0],
            lambda p: self._text(p, lambda q: self.char(q, is_math_char, "math character")),
            "math text",
        )
        if m is None:
            return None
        pos, payload = m
        m = self.literal(pos, "$")
        if m is None:
            return None
        pos = m[0]
        return pos, Formatted(Markup.MATH, (payload,), self.span(start, pos))

    @rule
    def plain(self, pos: int) -> Match[Formatted] | None:
        m = self.text(pos)
        if m is None:
            return None
        pos, text = m
        return pos, Formatted(Markup.PLAIN, (text,), text.span)

    @rule
    def text(self, pos: int) -> Match[Text] | None:
        return self.quiet(pos, lambda p: self._text(p, self._text_char), "paragraph text")

    def _text_char(self, pos: int) -> Match[str] | None:
        return self.choice(
            pos,
            lambda p: self.char(p, is_plain_char, "text character"),
            self._single_quote,
            self._open_angle,
        )

    def _single_quote(self, pos: int) -> Match[str] | None:
        """A lone "'" that does not start a formatting marker."""
        m = self.literal(pos, "'")
        if m is None:
            return None
        if self.not_followed_by(m[0], self.lit("'")) is None:
            return None
        return m

    def _open_angle(self, pos: int) -> Match[str] | None:
        """A "<" that does not open a comment."""
        m = self.literal(pos, "<")
        if m is None:
            return None
        if self.not_followed_by(m[0], self.lit("!--")) is None:
            return None
        return m

    def _text(self, pos: int, char_rule: Callable[[int], Match[str] | None]) -> Match[Text] | None:
        m = self.capture(pos, lambda p: self.many1(p, char_rule))
        if m is None:
            return None
        end, value = m
        return end, Text(value, self.span(pos, end))

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    @rule
    def comment(self, pos: int) -> Match[Comment] | None:
        start = pos
        m = self.literal(pos, "<!--")
        if m is None:
            return None
        pos, body = self.capture(m[0], lambda p: self.many(p, self._comment_char))
        m = self.literal(pos, "-->")
        if m is None:
            return None
        pos = m[0]
        return pos, Comment(body, self.span(start, pos))

    def _comment_char(self, pos: int) -> Match[str] | None:
        if self.not_followed_by(pos, self.lit("-->")) is None:
            return None
        return self.char(pos, lambda ch: True, "comment text")

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    @rule
    def template(self, pos: int) -> Match[Template] | None:
        start = pos
        m = self.literal(pos, "{{")
        if m is None:
            return None
        with self._nested(start):
            m = self.template_attribute(m[0])
            if m is None:
                return None
            pos, first = m
            pos, rest = self.many(pos, self._next_attribute)
        m = self.literal(pos, "}}")
        if m is None:
            return None
        pos = m[0]
        return pos, Template((first, *rest), self.span(start, pos))

    def _next_attribute(self, pos: int) -> Match[TemplateAttribute] | None:
        m = self.literal(pos, "|")
        if m is None:
            return None
        return self.template_attribute(m[0])

    @rule
    def template_attribute(self, pos: int) -> Match[TemplateAttribute] | None:
        start = pos
        pos, name = self.optional(pos, self._attribute_name)

        # The first line is parsed once; it only becomes a Paragraph when
        # more lines follow.
        line_start = pos
        pos, first = self.many(pos, self.inline)
        line_end = pos
        pos, rest = self.many(pos, self._next_value_line)
        if rest:
            value = (Paragraph(tuple(first), self.span(line_start, line_end)), *rest)
        else:
            value = tuple(first)
        return pos, TemplateAttribute(name, value, self.span(start, pos))

    def _attribute_name(self, pos: int) -> Match[Text] | None:
        m = self.quiet(
            pos,
            lambda p: self._text(p, lambda q: self.char(q, is_key_char, "key character")),
            "template key",
        )
        if m is None:
            return None
        pos, name = m
        m = self.literal(pos, "=")
        if m is None:
            return None
        return m[0], name

    def _next_value_line(self, pos: int) -> Match[Paragraph] | None:
        """Continuation line of a multi-line attribute value."""
        m = self.newline(pos)
        if m is None:
            return None
        start = m[0]
        pos, content = self.many(start, self.inline)
        return pos, Paragraph(tuple(content), self.span(start, pos))

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    @rule
    def internal_reference(self, pos: int) -> Match[InternalReference] | None:
        start = pos
        m = self.literal(pos, "[[")
        if m is None:
            return None
        m = self.quiet(
            m[0],
            lambda p: self._text(p, lambda q: self.char(q, is_target_char, "target character")),
            "link target",
        )
        if m is None:
            return None
        pos, target = m
        with self._nested(start):
            pos, segments = self.many(pos, self._link_segment)
        m = self.literal(pos, "]]")
        if m is None:
            return None
        pos = m[0]

        # The last segment is the caption, the ones before it are options
        options = tuple(tuple(seg) for seg in segments[:-1])
        caption = tuple(segments[-1]) if segments else ()
        return pos, InternalReference(target, options, caption, self.span(start, pos))

    def _link_segment(self, pos: int) -> Match[list[Inline]] | None:
        m = self.literal(pos, "|")
        if m is None:
            return None
        return self.many(m[0], self.inline)

    @rule
    def external_reference(self, pos: int) -> Match[ExternalReference] | None:
        start = pos
        m = self.literal(pos, "[")
        if m is None:
            return None
        m = self.quiet(
            m[0],
            lambda p: self.capture(
                p, lambda q: self.many1(q, lambda r: self.char(r, is_url_char, "url character"))
            ),
            "url",
        )
        if m is None:
            return None
        pos, target = m
        with self._nested(start):
            pos, caption = self.optional(pos, self._reference_caption)
        m = self.literal(pos, "]")
        if m is None:
            return None
        pos = m[0]
        return pos, ExternalReference(target, tuple(caption or ()), self.span(start, pos))

    def _reference_caption(self, pos: int) -> Match[list[Inline]] | None:
        m = self.many1(pos, self.lit(" "))
        if m is None:
            return None
        return self.many(m[0], self.inline)


def parse(
    source: str,
    *,
    memoize: bool = False,
    tracker: FailureTracker | None = None,
) -> ParseResult:
    """Parse wiki markup into a Success holding the Document, or a Failure."""
    return WikiParser(source, memoize=memoize, tracker=tracker).run()


def parse_document(source: str, *, memoize: bool = False) -> Document:
    """Convenience function: parse source text, raising ParseError on failure."""
    result = parse(source, memoize=memoize)
    if isinstance(result, Failure):
        raise ParseError(result.diagnostic, source)
    return result.document
