"""Tests for template syntax: positional and named attributes."""

from __future__ import annotations

import time

from mwparser.ast import Markup, Paragraph, Template, TemplateAttribute
from mwparser.parser import Success, parse
from tests.conftest import assert_formatted, text_of


def _template(first_inline, source: str) -> Template:
    (node,) = first_inline(source)
    assert isinstance(node, Template), f"Expected Template, got {type(node).__name__}"
    return node


class TestAttributes:
    def test_positional_and_named(self, first_inline):
        tpl = _template(first_inline, "{{foo|bar|baz=qux}}")
        assert len(tpl.content) == 3
        assert all(isinstance(a, TemplateAttribute) for a in tpl.content)
        first, second, third = tpl.content

        assert first.name is None
        assert text_of(first) == "foo"
        assert second.name is None
        assert text_of(second) == "bar"
        assert third.name is not None
        assert third.name.text == "baz"
        (value,) = third.value
        assert_formatted(value, Markup.PLAIN, "qux")

    def test_name_only(self, first_inline):
        tpl = _template(first_inline, "{{reflist}}")
        (attr,) = tpl.content
        assert attr.name is None
        assert text_of(attr) == "reflist"

    def test_empty_value(self, first_inline):
        tpl = _template(first_inline, "{{foo|}}")
        assert len(tpl.content) == 2
        assert tpl.content[1].name is None
        assert tpl.content[1].value == ()

    def test_named_empty_value(self, first_inline):
        tpl = _template(first_inline, "{{foo|key=}}")
        attr = tpl.content[1]
        assert attr.name.text == "key"
        assert attr.value == ()

    def test_formatted_value(self, first_inline):
        tpl = _template(first_inline, "{{quote|text='''loud''' words}}")
        value = tpl.content[1].value
        assert_formatted(value[0], Markup.BOLD, "loud")
        assert_formatted(value[1], Markup.PLAIN, " words")

    def test_attribute_spans(self, first_inline):
        tpl = _template(first_inline, "{{a|b=c}}")
        assert tpl.span.start.offset == 0
        assert tpl.span.end.offset == 9
        assert tpl.content[0].span.start.offset == 2
        assert tpl.content[0].span.end.offset == 3
        named = tpl.content[1]
        assert named.span.start.offset == 4
        assert named.span.end.offset == 7
        assert named.name.span.start.offset == 4
        assert named.name.span.end.offset == 5


class TestNesting:
    def test_template_in_value(self, first_inline):
        tpl = _template(first_inline, "{{outer|{{inner|x}}}}")
        (inner,) = tpl.content[1].value
        assert isinstance(inner, Template)
        assert [text_of(a) for a in inner.content] == ["inner", "x"]

    def test_deep_nesting_parses_quickly(self):
        depth = 25
        source = "{{a|" * depth + "x" + "}}" * depth
        started = time.perf_counter()
        result = parse(source)
        elapsed = time.perf_counter() - started
        assert isinstance(result, Success)
        assert elapsed < 1.0, f"parsing {depth} nested templates took {elapsed:.2f}s"

        node = result.document.content[0].content[0]
        for _ in range(depth - 1):
            (node,) = node.content[1].value
        assert [text_of(a) for a in node.content] == ["a", "x"]

    def test_template_inside_text(self, first_inline):
        nodes = first_inline("born {{date|1970}} in town")
        assert isinstance(nodes[1], Template)
        assert text_of(nodes[0]) == "born "
        assert text_of(nodes[2]) == " in town"


class TestMultiLineValues:
    def test_value_lines_become_paragraphs(self, first_inline):
        tpl = _template(first_inline, "{{infobox\n|name=Ada\n|born=1815\n}}")
        assert len(tpl.content) == 3
        first = tpl.content[0]
        assert all(isinstance(v, Paragraph) for v in first.value)
        assert [text_of(v) for v in first.value] == ["infobox", ""]

        name = tpl.content[1]
        assert name.name.text == "name"
        assert [text_of(v) for v in name.value] == ["Ada", ""]

        born = tpl.content[2]
        assert [text_of(v) for v in born.value] == ["1815", ""]

    def test_first_line_span(self, first_inline):
        tpl = _template(first_inline, "{{a|k=x y\nz}}")
        first, second = tpl.content[1].value
        assert first.span.start.offset == 6
        assert first.span.end.offset == 9
        assert second.span.start.offset == 10
        assert second.span.end.offset == 11

    def test_single_line_value_is_inline(self, first_inline):
        tpl = _template(first_inline, "{{a|b}}")
        assert not isinstance(tpl.content[1].value[0], Paragraph)


class TestTemplateErrors:
    def test_unclosed(self, parse_failure):
        failure = parse_failure("{{foo")
        assert failure.offset == 5
        assert '"}}"' in failure.diagnostic.expected
        assert '"|"' in failure.diagnostic.expected

    def test_equals_in_value_rejected(self, parse_failure):
        parse_failure("{{a|b=c=d}}")

    def test_stray_closing_braces_rejected(self, parse_failure):
        parse_failure("text }}")
