"""Source positions, spans, and offset-to-line/column conversion."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """Source position: 0-based character offset, 1-based line and column."""

    offset: int
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


ZERO_POSITION = Position(0, 0, 0)
ZERO_SPAN = Span(ZERO_POSITION, ZERO_POSITION)


class LineIndex:
    """Map character offsets of one input to line/column positions.

    Newline offsets are collected once; each lookup is a binary search.
    """

    def __init__(self, source: str) -> None:
        self._length = len(source)
        self._newlines = [i for i, ch in enumerate(source) if ch == "\n"]

    def position(self, offset: int) -> Position:
        if not 0 <= offset <= self._length:
            raise ValueError(f"offset {offset} outside input of length {self._length}")
        # Number of newlines strictly before offset
        line_idx = bisect_right(self._newlines, offset - 1)
        line_start = self._newlines[line_idx - 1] + 1 if line_idx else 0
        return Position(offset, line_idx + 1, offset - line_start + 1)

    def span(self, start: int, end: int) -> Span:
        return Span(self.position(start), self.position(end))
