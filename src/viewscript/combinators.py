"""Parser combinators over an indexable string.

Every parser is a function ``(source, index) -> Outcome`` where the outcome is
either a ``(value, next_index)`` tuple or a ``Failure``. Failures are plain
data: nothing here raises.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from viewscript.ast import Kind, Node


@dataclass(frozen=True, slots=True)
class Failure:
    """An expectation that was not met at ``index``."""

    expected: str
    index: int


Outcome: TypeAlias = "tuple[Any, int] | Failure"
Parser: TypeAlias = Callable[[str, int], "tuple[Any, int] | Failure"]


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


def character(c: str) -> Parser:
    """Match the single character *c*."""
    expected = f'"{c}"'

    def parse(source: str, index: int) -> Outcome:
        if index < len(source) and source[index] == c:
            return c, index + 1
        return Failure(expected, index)

    return parse


def string(s: str) -> Parser:
    """Match the literal string *s*."""
    expected = f'"{s}"'
    length = len(s)

    def parse(source: str, index: int) -> Outcome:
        if source.startswith(s, index):
            return s, index + length
        return Failure(expected, index)

    return parse


def char_class(predicate: Callable[[str], bool], description: str) -> Parser:
    """Match one character for which *predicate* holds."""

    def parse(source: str, index: int) -> Outcome:
        if index < len(source) and predicate(source[index]):
            return source[index], index + 1
        return Failure(description, index)

    return parse


def any_char(source: str, index: int) -> Outcome:
    if index < len(source):
        return source[index], index + 1
    return Failure("any", index)


def exclude(strings: Sequence[str]) -> Parser:
    """Match one character unless one of *strings* starts at the index."""
    at_end = "not " + ", ".join(json.dumps(s) for s in strings)

    def parse(source: str, index: int) -> Outcome:
        if index >= len(source):
            return Failure(at_end, index)
        for s in strings:
            if source.startswith(s, index):
                return Failure(f'not "{s}"', index)
        return source[index], index + 1

    return parse


def end_of_input(source: str, index: int) -> Outcome:
    if index == len(source):
        return "EOF", index
    return Failure("EOF", index)


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


def sequence(parsers: Sequence[Parser]) -> Parser:
    """Run *parsers* in order; the value is the tuple of their values."""

    def parse(source: str, index: int) -> Outcome:
        values = []
        for p in parsers:
            outcome = p(source, index)
            if isinstance(outcome, Failure):
                return outcome
            value, index = outcome
            values.append(value)
        return tuple(values), index

    return parse


def both(first: Parser, second: Parser) -> Parser:
    """Binary sequence, yielding a pair."""

    def parse(source: str, index: int) -> Outcome:
        outcome1 = first(source, index)
        if isinstance(outcome1, Failure):
            return outcome1
        outcome2 = second(source, outcome1[1])
        if isinstance(outcome2, Failure):
            return outcome2
        return (outcome1[0], outcome2[0]), outcome2[1]

    return parse


def or_else(first: Parser, second: Parser) -> Parser:
    """Try *first*, falling back to *second* only if *first* consumed nothing."""

    def parse(source: str, index: int) -> Outcome:
        outcome = first(source, index)
        if isinstance(outcome, Failure) and outcome.index == index:
            return second(source, index)
        return outcome

    return parse


def attempt(p: Parser) -> Parser:
    """Run *p*, reporting any failure at the start index so it can backtrack."""

    def parse(source: str, index: int) -> Outcome:
        outcome = p(source, index)
        if isinstance(outcome, Failure) and outcome.index != index:
            return Failure(outcome.expected, index)
        return outcome

    return parse


def first_of(parsers: Sequence[Parser]) -> Parser:
    """Ordered choice across *parsers*.

    Returns the first success, or the first failure that consumed input. When
    every alternative fails without consuming, the failure with the greatest
    index wins (the earliest one on ties).
    """

    def parse(source: str, index: int) -> Outcome:
        furthest: Failure | None = None
        for p in parsers:
            outcome = p(source, index)
            if not isinstance(outcome, Failure) or outcome.index != index:
                return outcome
            if furthest is None or outcome.index > furthest.index:
                furthest = outcome
        assert furthest is not None, "first_of needs at least one parser"
        return furthest

    return parse


def _repeat(p: Parser, minimum: int) -> Parser:
    # The loop lives in the returned parser itself, so a nested repetition
    # costs one stack frame per level.
    def parse(source: str, index: int) -> Outcome:
        values: list[Any] = []
        while True:
            outcome = p(source, index)
            if isinstance(outcome, Failure):
                if outcome.index == index and len(values) >= minimum:
                    return tuple(values), index
                return outcome
            value, next_index = outcome
            if next_index == index:
                # A parser that matches empty would repeat forever.
                if len(values) < minimum:
                    values.append(value)
                return tuple(values), index
            values.append(value)
            index = next_index

    return parse


def zero_or_more(p: Parser) -> Parser:
    """Repeat *p*; a failure after consuming input is propagated."""
    return _repeat(p, 0)


def one_or_more(p: Parser) -> Parser:
    """Like ``zero_or_more`` but at least one match is required."""
    return _repeat(p, 1)


def optional(p: Parser) -> Parser:
    """Yield ``None`` when *p* fails without consuming input."""

    def parse(source: str, index: int) -> Outcome:
        outcome = p(source, index)
        if isinstance(outcome, Failure) and outcome.index == index:
            return None, index
        return outcome

    return parse


def typed(kind: Kind, p: Parser) -> Parser:
    """Wrap the value of *p* in a tree ``Node`` of the given kind."""

    def parse(source: str, index: int) -> Outcome:
        outcome = p(source, index)
        if isinstance(outcome, Failure):
            return outcome
        return Node(kind, outcome[0]), outcome[1]

    return parse
