"""Compiler for JavaScript with embedded view tags."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from viewscript.ast import Tree
    from viewscript.builtins import RuntimeNames

__version__ = "0.1.0"

# Reported when tags or brackets nest deeper than the interpreter stack allows.
NESTING_EXPECTED = "shallower nesting"


def parse_tree(source: str) -> Tree:
    """Parse source into a tree; raises ParseError on bad syntax."""
    from viewscript.combinators import Failure
    from viewscript.errors import ParseError
    from viewscript.parser import parse

    try:
        tree = parse(source)
    except RecursionError:
        raise ParseError(NESTING_EXPECTED, 0, source) from None
    if isinstance(tree, Failure):
        raise ParseError(tree.expected, tree.index, source)
    return tree


def generate_tree(tree: Tree, source: str, runtime: RuntimeNames | None = None) -> str:
    """Generate plain JavaScript for a tree parsed from *source*."""
    from viewscript.errors import ParseError
    from viewscript.generate import generate

    try:
        return generate(tree, runtime)
    except RecursionError:
        raise ParseError(NESTING_EXPECTED, 0, source) from None


def compile(source: str, runtime: RuntimeNames | None = None) -> str:
    """Parse source and generate plain JavaScript; raises ParseError on bad syntax."""
    return generate_tree(parse_tree(source), source, runtime)
