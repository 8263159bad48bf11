"""--debug parse tree dump to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from typing import TextIO

from viewscript.ast import Kind, Node, Tree


def dump_tree(tree: Tree, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable parse tree to *file*.

    Runs of host text are coalesced; only tag structure is expanded.
    """
    file.write("Expression\n")
    _dump_parts(tree, 1, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _leaves(tree: Tree) -> Iterator[str | Node]:
    if isinstance(tree, tuple):
        for part in tree:
            yield from _leaves(part)
    elif tree is not None:
        yield tree


def _flatten(tree: Tree) -> str:
    """Source text of a part, with nested tags shown by kind."""
    return "".join(
        f"<{leaf.kind.value}>" if isinstance(leaf, Node) else leaf for leaf in _leaves(tree)
    )


def _dump_parts(tree: Tree, depth: int, f: TextIO) -> None:
    pending: list[str] = []
    for leaf in _leaves(tree):
        if isinstance(leaf, Node):
            if pending:
                f.write(f"{_indent(depth)}Text({''.join(pending)!r})\n")
                pending = []
            _dump_node(leaf, depth, f)
        else:
            pending.append(leaf)
    if pending:
        f.write(f"{_indent(depth)}Text({''.join(pending)!r})\n")


def _dump_node(node: Node, depth: int, f: TextIO) -> None:
    kind = node.kind
    value = node.value
    if kind in (Kind.COMMENT, Kind.TEXT):
        f.write(f"{_indent(depth)}{kind.value}({_flatten(value)!r})\n")
    elif kind is Kind.INTERPOLATION:
        f.write(f"{_indent(depth)}interpolation\n")
        _dump_parts(value[1], depth + 1, f)
    elif kind is Kind.ATTRIBUTES:
        f.write(f"{_indent(depth)}attributes\n")
        for name, assignment, _separator in value:
            shown = _flatten(name)
            if assignment is not None:
                shown += "=" + _flatten(assignment[1])
            f.write(f"{_indent(depth + 1)}{shown}\n")
    elif kind is Kind.FRAGMENT:
        f.write(f"{_indent(depth)}fragment\n")
        for child in value[1]:
            _dump_node(child, depth + 1, f)
    else:
        f.write(f"{_indent(depth)}{kind.value} {_flatten(value[2])}\n")
        if kind is Kind.NODE_DATA:
            _dump_parts(value[4], depth + 1, f)
        elif kind is Kind.NODE_DATA_CHILDREN:
            _dump_node(value[4], depth + 1, f)
            for child in value[6]:
                _dump_node(child, depth + 1, f)
