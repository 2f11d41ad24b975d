"""Character classification for the structural delimiters of wiki markup."""

from __future__ import annotations

# Plain text: everything except heading, line, quote, template, math,
# separator, link and comment delimiters.
_PLAIN_EXCLUDED = frozenset("=\n'{}$|[]<")

# Math payload between '$' markers
_MATH_EXCLUDED = frozenset("$\n")

# Template attribute names (text before '=')
_KEY_EXCLUDED = frozenset("=|{}[]\n'")

# Internal link targets: [[target|...]]
_TARGET_EXCLUDED = frozenset("|[]{}\n")

# External link URLs: [url caption]
_URL_EXCLUDED = frozenset("[]{}|")

# Line prefixes that open a list item, and the kind each one gives
LIST_MARKERS = {
    "*": "unordered",
    "#": "ordered",
    ";": "definitionterm",
    ":": "definition",
}


def is_plain_char(ch: str) -> bool:
    """Return True if ch may appear in plain paragraph text."""
    return ch not in _PLAIN_EXCLUDED


def is_math_char(ch: str) -> bool:
    """Return True if ch may appear inside a $...$ math section."""
    return ch not in _MATH_EXCLUDED


def is_key_char(ch: str) -> bool:
    """Return True if ch may appear in a template attribute name."""
    return ch not in _KEY_EXCLUDED


def is_target_char(ch: str) -> bool:
    return ch not in _TARGET_EXCLUDED


def is_url_char(ch: str) -> bool:
    return not ch.isspace() and ch not in _URL_EXCLUDED


def is_list_marker(ch: str) -> bool:
    return ch in LIST_MARKERS
