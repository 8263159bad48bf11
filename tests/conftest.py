"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from viewscript.ast import Kind, Node, Tree
from viewscript.combinators import Failure
from viewscript.parser import parse


@pytest.fixture
def parse_source():
    """Return a helper that parses source and fails the test on a parse failure."""

    def _parse(source: str) -> Tree:
        tree = parse(source)
        assert not isinstance(tree, Failure), f"unexpected parse failure: {tree}"
        return tree

    return _parse


@pytest.fixture
def find_nodes():
    """Return a helper that collects tree nodes of a kind, in source order."""

    def _find(tree: Tree, kind: Kind) -> list[Node]:
        found: list[Node] = []

        def walk(t: Tree) -> None:
            if isinstance(t, Node):
                if t.kind is kind:
                    found.append(t)
                walk(t.value)
            elif isinstance(t, tuple):
                for part in t:
                    walk(part)

        walk(tree)
        return found

    return _find

