"""PEG evaluation primitives with furthest-failure tracking.

A rule is any callable ``rule(pos)`` returning ``(new_pos, value)`` on a
match or ``None`` when it does not match. A non-match is ordinary control
flow, never an exception: callers backtrack simply by reusing the offset
they started from. Every primitive that fails records what it expected in
the parser's FailureTracker, which keeps only the labels seen at the
furthest offset reached.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from mwparser.errors import ExpectedSet
from mwparser.source import LineIndex, Span

T = TypeVar("T")

Match = tuple[int, T]
Rule = Callable[[int], "Match[Any] | None"]


class FailureTracker:
    """Furthest offset at which matching failed, and what was expected there."""

    def __init__(self) -> None:
        self.offset = -1
        self._labels: set[str] = set()
        self._suppress = 0

    @property
    def quiet(self) -> bool:
        return self._suppress > 0

    def record(self, offset: int, label: str) -> None:
        if self._suppress:
            return
        if offset > self.offset:
            self.offset = offset
            self._labels = {label}
        elif offset == self.offset:
            self._labels.add(label)

    @contextmanager
    def suppressed(self) -> Iterator[None]:
        self._suppress += 1
        try:
            yield
        finally:
            self._suppress -= 1

    def expected(self) -> ExpectedSet:
        return ExpectedSet(max(self.offset, 0), frozenset(self._labels))


def rule(method: Callable[[Any, int], Match[T] | None]) -> Callable[[Any, int], Match[T] | None]:
    """Mark a grammar method as a named rule, memoized when the parser asks for it.

    Results are cached per (rule, offset, quiet state). Replaying a cached
    result without re-recording its failures is safe: the tracker only
    ever moves forward, so labels dropped the first time stay irrelevant.
    """
    name = method.__name__

    @functools.wraps(method)
    def wrapper(self: PegParser, pos: int) -> Match[T] | None:
        memo = self._memo
        if memo is None:
            return method(self, pos)
        key = (name, pos, self.tracker.quiet)
        if key in memo:
            return memo[key]
        result = memo[key] = method(self, pos)
        return result

    return wrapper


class PegParser:
    """Base class for grammars: holds the input and the combinator primitives."""

    def __init__(
        self,
        source: str,
        *,
        memoize: bool = False,
        tracker: FailureTracker | None = None,
    ) -> None:
        self.source = source
        self.tracker = tracker if tracker is not None else FailureTracker()
        self.lines = LineIndex(source)
        self._memo: dict[tuple[str, int, bool], Any] | None = {} if memoize else None

    def span(self, start: int, end: int) -> Span:
        return self.lines.span(start, end)

    # ------------------------------------------------------------------
    # Terminals
    # ------------------------------------------------------------------

    def literal(self, pos: int, text: str) -> Match[str] | None:
        if self.source.startswith(text, pos):
            return pos + len(text), text
        self.tracker.record(pos, f'"{text}"')
        return None

    def lit(self, text: str) -> Rule:
        """Literal match as a standalone rule."""
        return functools.partial(self.literal, text=text)

    def char(self, pos: int, predicate: Callable[[str], bool], label: str) -> Match[str] | None:
        if pos < len(self.source):
            ch = self.source[pos]
            if predicate(ch):
                return pos + 1, ch
        self.tracker.record(pos, label)
        return None

    def end_of_input(self, pos: int) -> Match[None] | None:
        if pos == len(self.source):
            return pos, None
        self.tracker.record(pos, "end of input")
        return None

    # ------------------------------------------------------------------
    # Combinators
    # ------------------------------------------------------------------

    def sequence(self, pos: int, *rules: Rule) -> Match[tuple[Any, ...]] | None:
        values = []
        for r in rules:
            m = r(pos)
            if m is None:
                return None
            pos, value = m
            values.append(value)
        return pos, tuple(values)

    def choice(self, pos: int, *alternatives: Rule) -> Match[Any] | None:
        for alt in alternatives:
            m = alt(pos)
            if m is not None:
                return m
        return None

    def many(self, pos: int, r: Rule) -> Match[list[Any]]:
        values = []
        while True:
            m = r(pos)
            # A zero-width match would repeat forever
            if m is None or m[0] == pos:
                return pos, values
            pos, value = m
            values.append(value)

    def many1(self, pos: int, r: Rule) -> Match[list[Any]] | None:
        pos, values = self.many(pos, r)
        if not values:
            return None
        return pos, values

    def optional(self, pos: int, r: Rule) -> Match[Any]:
        m = r(pos)
        if m is None:
            return pos, None
        return m

    def lookahead(self, pos: int, r: Rule) -> Match[None] | None:
        if r(pos) is None:
            return None
        return pos, None

    def not_followed_by(self, pos: int, r: Rule) -> Match[None] | None:
        with self.tracker.suppressed():
            m = r(pos)
        if m is not None:
            return None
        return pos, None

    def quiet(self, pos: int, r: Rule, label: str) -> Match[Any] | None:
        """Run r without recording its internals; on failure expect *label* instead."""
        with self.tracker.suppressed():
            m = r(pos)
        if m is None:
            self.tracker.record(pos, label)
        return m

    def capture(self, pos: int, r: Rule) -> Match[str] | None:
        """Run r and return the source text it consumed."""
        m = r(pos)
        if m is None:
            return None
        return m[0], self.source[pos : m[0]]
