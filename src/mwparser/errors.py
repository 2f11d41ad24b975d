"""Syntax diagnostics with formatted source context."""

from __future__ import annotations

from dataclasses import dataclass

from mwparser.source import Position

# Number of lines shown on each side of the erroneous line
CONTEXT_LINES = 5


@dataclass(frozen=True, slots=True)
class ExpectedSet:
    """Labels that failed to match at the furthest offset reached."""

    offset: int
    labels: frozenset[str]


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured description of a failed parse."""

    position: Position
    expected: tuple[str, ...]

    @property
    def offset(self) -> int:
        return self.position.offset

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def column(self) -> int:
        return self.position.column

    @classmethod
    def from_expected(cls, expected: ExpectedSet, position: Position) -> Diagnostic:
        return cls(position, tuple(sorted(expected.labels)))

    @property
    def message(self) -> str:
        if not self.expected:
            return "could not continue to parse"
        return "could not continue to parse, expected one of: " + ", ".join(
            _display_label(label) for label in self.expected
        )


def _display_label(label: str) -> str:
    # Whitespace-only literals are unreadable unless quoted
    if label.isspace():
        return repr(label)
    return label


def source_context(
    source: str, line: int, radius: int = CONTEXT_LINES
) -> tuple[int, list[str]]:
    """Return (first line number, lines) surrounding 1-based *line*."""
    lines = source.split("\n")
    idx = min(max(line, 1), len(lines)) - 1
    first = max(0, idx - radius)
    last = min(len(lines) - 1, idx + radius)
    return first + 1, [ln.rstrip("\r") for ln in lines[first : last + 1]]


class ParseError(Exception):
    """Raised when the input cannot be parsed, with position and source context."""

    def __init__(self, diagnostic: Diagnostic, source: str) -> None:
        self.diagnostic = diagnostic
        self.source = source
        super().__init__(self.format())

    @property
    def position(self) -> Position:
        return self.diagnostic.position

    @property
    def expected(self) -> tuple[str, ...]:
        return self.diagnostic.expected

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def format(self, filename: str = "input.wiki", context: int = 0) -> str:
        line = self.position.line
        col = self.position.column

        first, lines = source_context(self.source, line, context)
        line_num_width = len(str(first + len(lines) - 1))
        gutter_width = line_num_width + 1
        blank_gutter = " " * gutter_width + "|"

        out = [
            f"error: {self.message}",
            f"{' ' * gutter_width}--> {filename}:{line}:{col}",
            blank_gutter,
        ]
        for num, content in enumerate(lines, start=first):
            out.append(f"{num:>{line_num_width}} | {content}".rstrip())
            if num == line:
                pad = " " * (col - 1)
                out.append(f"{blank_gutter} {pad}^")
        return "\n".join(out)
