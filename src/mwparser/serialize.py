"""Rendering of document trees to plain data, JSON, YAML, and back to markup."""

from __future__ import annotations

import dataclasses
import json
from typing import Any

import yaml

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
    ListItemKind,
    Markup,
    Paragraph,
    Template,
    TemplateAttribute,
    Text,
)
from mwparser.source import ZERO_SPAN, Position, Span

_TYPE_NAMES: dict[type, str] = {
    Document: "document",
    Heading: "heading",
    List: "list",
    ListItem: "listitem",
    Paragraph: "paragraph",
    Template: "template",
    TemplateAttribute: "templateattribute",
    ExternalReference: "externalreference",
    InternalReference: "internalreference",
    Formatted: "formatted",
    Comment: "comment",
    Text: "text",
}
_TYPES_BY_NAME = {name: cls for cls, name in _TYPE_NAMES.items()}


# ----------------------------------------------------------------------
# Plain data
# ----------------------------------------------------------------------


def to_dict(node: Element, *, positions: bool = True) -> dict[str, Any]:
    """Render *node* as nested dicts and lists.

    Every mapping carries a "type" key; spans appear under "position"
    only when *positions* is true.
    """
    out: dict[str, Any] = {"type": _TYPE_NAMES[type(node)]}
    if positions:
        out["position"] = _span_to_dict(node.span)

    def many(items: tuple) -> list[dict[str, Any]]:
        return [to_dict(item, positions=positions) for item in items]

    if isinstance(node, (Text, Comment)):
        out["text"] = node.text
    elif isinstance(node, ListItem):
        out["depth"] = node.depth
        out["kind"] = node.kind.value
        out["content"] = many(node.content)
    elif isinstance(node, Formatted):
        out["markup"] = node.markup.value
        out["content"] = many(node.content)
    elif isinstance(node, Heading):
        out["depth"] = node.depth
        out["caption"] = to_dict(node.caption, positions=positions)
        out["content"] = many(node.content)
    elif isinstance(node, TemplateAttribute):
        out["name"] = None if node.name is None else to_dict(node.name, positions=positions)
        out["value"] = many(node.value)
    elif isinstance(node, ExternalReference):
        out["target"] = node.target
        out["caption"] = many(node.caption)
    elif isinstance(node, InternalReference):
        out["target"] = to_dict(node.target, positions=positions)
        out["options"] = [many(option) for option in node.options]
        out["caption"] = many(node.caption)
    else:
        out["content"] = many(node.content)
    return out


def from_dict(data: dict[str, Any]) -> Element:
    """Rebuild a tree from to_dict() output; absent positions become ZERO_SPAN."""
    try:
        cls = _TYPES_BY_NAME[data["type"]]
    except KeyError as exc:
        raise ValueError(f"unknown element type: {data.get('type')!r}") from exc

    span = _span_from_dict(data["position"]) if "position" in data else ZERO_SPAN

    def many(items: list[dict[str, Any]]) -> tuple:
        return tuple(from_dict(item) for item in items)

    if cls is Text or cls is Comment:
        return cls(data["text"], span)
    if cls is ListItem:
        return ListItem(data["depth"], ListItemKind(data["kind"]), many(data["content"]), span)
    if cls is Formatted:
        return Formatted(Markup(data["markup"]), many(data["content"]), span)
    if cls is Heading:
        return Heading(data["depth"], from_dict(data["caption"]), many(data["content"]), span)
    if cls is TemplateAttribute:
        name = None if data["name"] is None else from_dict(data["name"])
        return TemplateAttribute(name, many(data["value"]), span)
    if cls is ExternalReference:
        return ExternalReference(data["target"], many(data["caption"]), span)
    if cls is InternalReference:
        options = tuple(many(option) for option in data["options"])
        return InternalReference(from_dict(data["target"]), options, many(data["caption"]), span)
    return cls(many(data["content"]), span)


def _span_to_dict(span: Span) -> dict[str, dict[str, int]]:
    return {
        "start": dataclasses.asdict(span.start),
        "end": dataclasses.asdict(span.end),
    }


def _span_from_dict(data: dict[str, dict[str, int]]) -> Span:
    return Span(Position(**data["start"]), Position(**data["end"]))


def to_json(node: Element, *, positions: bool = True, indent: int | None = 2) -> str:
    return json.dumps(to_dict(node, positions=positions), indent=indent, ensure_ascii=False)


def to_yaml(node: Element, *, positions: bool = True) -> str:
    return yaml.safe_dump(
        to_dict(node, positions=positions),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def strip_positions(node: Element) -> Element:
    """Return a copy of *node* with every span replaced by ZERO_SPAN."""
    return from_dict(to_dict(node, positions=False))


# ----------------------------------------------------------------------
# Markup
# ----------------------------------------------------------------------

_MARKERS = {Markup.BOLD: "'''", Markup.ITALIC: "''", Markup.MATH: "$", Markup.PLAIN: ""}
_LIST_MARKERS = {
    ListItemKind.UNORDERED: "*",
    ListItemKind.ORDERED: "#",
    ListItemKind.DEFINITION_TERM: ";",
    ListItemKind.DEFINITION: ":",
}


def to_wikitext(node: Element) -> str:
    """Write *node* back as wiki markup that parses to the same structure."""
    if isinstance(node, Text):
        return node.text
    if isinstance(node, Comment):
        return f"<!--{node.text}-->"
    if isinstance(node, Formatted):
        marker = _MARKERS[node.markup]
        return marker + _join(node.content) + marker
    if isinstance(node, Document):
        return "".join(_block(block) for block in node.content)
    if isinstance(node, Heading):
        marker = "=" * node.depth
        head = f"{marker}{to_wikitext(node.caption)}{marker}\n"
        return head + "".join(_block(block) for block in node.content)
    if isinstance(node, List):
        return "".join(_line(item) for item in node.content)
    if isinstance(node, ListItem):
        # Mixed prefixes such as "*#" are written with the last marker only
        return _LIST_MARKERS[node.kind] * node.depth + " " + _join(node.content)
    if isinstance(node, Paragraph):
        return _join(node.content)
    if isinstance(node, Template):
        return "{{" + "|".join(to_wikitext(attr) for attr in node.content) + "}}"
    if isinstance(node, TemplateAttribute):
        name = "" if node.name is None else node.name.text + "="
        if node.value and isinstance(node.value[0], Paragraph):
            return name + "\n".join(to_wikitext(line) for line in node.value)
        return name + _join(node.value)
    if isinstance(node, ExternalReference):
        caption = " " + _join(node.caption) if node.caption else ""
        return f"[{node.target}{caption}]"
    if isinstance(node, InternalReference):
        parts = [node.target.text]
        parts.extend(_join(option) for option in node.options)
        if node.options or node.caption:
            parts.append(_join(node.caption))
        return "[[" + "|".join(parts) + "]]"
    raise TypeError(f"not a document element: {type(node).__name__}")


def _join(nodes: tuple) -> str:
    return "".join(to_wikitext(n) for n in nodes)


def _line(node: Paragraph | ListItem) -> str:
    return to_wikitext(node) + "\n"


def _block(node: Element) -> str:
    return _line(node) if isinstance(node, Paragraph) else to_wikitext(node)
