"""Parse tree node types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias


class Kind(Enum):
    COMMENT = "comment"  # #...#
    ATTRIBUTES = "attributes"  # name=value pairs inside a tag
    TEXT = "text"  # literal text child
    INTERPOLATION = "interpolation"  # {expression} child
    NODE = "node"  # <name*>
    NODE_DATA = "nodeData"  # <name .../>
    NODE_DATA_CHILDREN = "nodeDataChildren"  # <name ...>...</name>
    FRAGMENT = "fragment"  # <>...</>


@dataclass(frozen=True, slots=True)
class Node:
    """A tagged parse value.

    The shape of ``value`` is fixed by ``kind``: tag nodes hold the tuple of
    their sequence parts (delimiters included), ``attributes`` holds a tuple of
    ``(name, ("=", value) | None, separator)`` triples.
    """

    kind: Kind
    value: Any


# Untagged parts are raw source strings or tuples of parts.
Tree: TypeAlias = "str | tuple[Tree, ...] | Node | None"
