"""Tests for <!-- --> comments."""

from __future__ import annotations

from mwparser.ast import Comment, Markup, Template
from tests.conftest import assert_formatted


class TestComments:
    def test_inline_comment(self, first_inline):
        before, comment, after = first_inline("a <!-- note --> b")
        assert_formatted(before, Markup.PLAIN, "a ")
        assert isinstance(comment, Comment)
        assert comment.text == " note "
        assert_formatted(after, Markup.PLAIN, " b")

    def test_span_covers_markers(self, first_inline):
        (comment,) = first_inline("<!--x-->")
        assert comment.span.start.offset == 0
        assert comment.span.end.offset == 8

    def test_empty_comment(self, first_inline):
        (comment,) = first_inline("<!---->")
        assert comment.text == ""

    def test_spans_lines(self, parse_source):
        doc = parse_source("<!-- x\ny --> z")
        (para,) = doc.content
        comment = para.content[0]
        assert comment.text == " x\ny "
        assert comment.span.end.line == 2

    def test_inside_template_value(self, first_inline):
        (tpl,) = first_inline("{{a|<!--c-->}}")
        assert isinstance(tpl, Template)
        (value,) = tpl.content[1].value
        assert value == Comment("c", value.span)


class TestAngleBrackets:
    def test_lone_angle_is_text(self, first_inline):
        (node,) = first_inline("a < b > c")
        assert_formatted(node, Markup.PLAIN, "a < b > c")

    def test_partial_opener_is_text(self, first_inline):
        (node,) = first_inline("<!- x")
        assert_formatted(node, Markup.PLAIN, "<!- x")

    def test_unclosed_comment(self, parse_failure):
        failure = parse_failure("<!-- x")
        assert failure.offset == 6
        assert '"-->"' in failure.diagnostic.expected
