"""Code generator: turns a parse tree back into host-language source.

Host text passes through unchanged. Tags become calls on component
constructors (or bare references for ``<name*>``), fragments become arrays.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from viewscript.ast import Kind, Node, Tree
from viewscript.builtins import DEFAULT_RUNTIME, RuntimeNames, normalize_attribute_name, resolve_name

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class PropsFragment:
    """Partially generated props object.

    ``output`` is either a comma-joined list of ``"name":value`` entries (to be
    wrapped in braces by the caller) or, when ``is_expression`` is set, a
    complete merge-call expression. ``separator`` is what must precede any
    further entry.
    """

    output: str
    separator: str
    is_expression: bool


@dataclass(frozen=True, slots=True)
class TextOutput:
    """Generated text child; layout-only whitespace is not a child at all."""

    output: str
    is_whitespace: bool


def generate(tree: Tree, runtime: RuntimeNames | None = None) -> str:
    """Generate host-language source for a parse tree."""
    return Generator(runtime or DEFAULT_RUNTIME).generate(tree)


def _unwrap_braces(tree: Tree) -> Tree:
    """Return the inner expression of a ``{ expression }`` value."""
    if isinstance(tree, tuple) and len(tree) == 3 and tree[0] == "{" and tree[2] == "}":
        return tree[1]
    return tree


def _is_object_literal(tree: Tree) -> bool:
    """Guess whether a braced value is an object literal rather than a ternary.

    Only top-level parts of the braced expression are inspected: a ``:`` with
    no ``?`` means object literal. Nested brackets and strings are opaque, so
    this can misclassify unusual expressions.
    """
    if not (isinstance(tree, tuple) and tree and tree[0] == "{" and tree[-1] == "}"):
        return False
    inner = tree[1]
    if not isinstance(inner, tuple):
        return False

    has_colon = False
    has_question = False
    for part in inner:
        # Substring test for raw strings, element test for opaque text runs.
        if isinstance(part, (str, tuple)):
            has_question = has_question or "?" in part
            has_colon = has_colon or ":" in part
    return has_colon and not has_question


def _escape_text_item(item: Tree) -> str:
    # Escape pairs from the source are kept as written.
    if isinstance(item, tuple):
        return "".join(item)
    if item == '"':
        return '\\"'
    if item == "\n":
        # Line continuation keeps the output line count in step with the input.
        return "\\n\\\n"
    if item == "\r":
        # A raw carriage return would end the string literal.
        return "\\r"
    return item


class Generator:
    """Walks a parse tree and emits source text. The tree is never mutated."""

    def __init__(self, runtime: RuntimeNames = DEFAULT_RUNTIME) -> None:
        self._runtime = runtime

    def generate(self, tree: Tree) -> str:
        if isinstance(tree, str):
            return tree
        if isinstance(tree, tuple):
            return "".join(self.generate(part) for part in tree)
        if not isinstance(tree, Node):
            raise TypeError(f"cannot generate code for {type(tree).__name__}")

        kind = tree.kind
        if kind is Kind.COMMENT:
            # Re-emitted as a block comment so line numbers survive.
            return f"/*{self.generate(tree.value[1])}*/"
        if kind is Kind.ATTRIBUTES:
            props = self.generate_attributes(tree)
            return props.output if props.is_expression else f"{{{props.output}}}"
        if kind is Kind.TEXT:
            return self.generate_text(tree).output
        if kind is Kind.INTERPOLATION:
            return f"{self._runtime.text}({{data:{self.generate(tree.value[1])}}})"
        if kind is Kind.NODE:
            return self._generate_node(tree)
        if kind is Kind.NODE_DATA:
            return self._generate_node_data(tree)
        if kind is Kind.NODE_DATA_CHILDREN:
            return self._generate_node_data_children(tree)
        if kind is Kind.FRAGMENT:
            output, _ = self.generate_children(tree.value[1])
            return f"[{output}]"
        raise TypeError(f"unknown node kind: {kind!r}")

    # ------------------------------------------------------------------
    # Props and children
    # ------------------------------------------------------------------

    def generate_attributes(self, node: Node) -> PropsFragment:
        spreads: list[str] = []
        entries: list[str] = []

        for name_tree, assignment, _separator in node.value:
            name = normalize_attribute_name(self.generate(_unwrap_braces(name_tree)))
            value_tree = assignment[1] if assignment is not None else None

            if name.startswith("..."):
                spreads.append(name[3:] or self.generate(_unwrap_braces(value_tree or ())))
            elif value_tree is None:
                entries.append(f'"{name}":true')
            elif _is_object_literal(value_tree):
                entries.append(f'"{name}":{{{self.generate(value_tree[1])}}}')
            else:
                entries.append(f'"{name}":{self.generate(_unwrap_braces(value_tree))}')

        if not spreads:
            return PropsFragment(
                output=",".join(entries),
                separator="," if entries else "",
                is_expression=False,
            )

        tail = f", {{{','.join(entries)}}}" if entries else ""
        return PropsFragment(
            output=f"{self._runtime.merge}({{}}, {','.join(spreads)}{tail})",
            separator=",",
            is_expression=True,
        )

    def generate_text(self, node: Node) -> TextOutput:
        raw = self.generate(node.value)
        if "\n" in raw and _WHITESPACE_RE.fullmatch(raw):
            return TextOutput(raw, is_whitespace=True)
        data = "".join(_escape_text_item(item) for item in node.value)
        return TextOutput(f'{self._runtime.text}({{data:"{data}"}})', is_whitespace=False)

    def generate_children(self, children: tuple[Node, ...], separator: str = "") -> tuple[str, str]:
        """Generate a comma-separated child list, splicing fragments in place.

        Returns the output and the separator the next child would need.
        """
        parts: list[str] = []

        for child in children:
            if child.kind is Kind.TEXT:
                text = self.generate_text(child)
                if text.is_whitespace:
                    parts.append(text.output)
                else:
                    parts.append(separator + text.output)
                    separator = ","
            elif child.kind is Kind.FRAGMENT:
                output, separator = self.generate_children(child.value[1], separator)
                parts.append(output)
            elif child.kind is Kind.INTERPOLATION:
                value = self.generate(child.value[1])
                parts.append(f"{separator}...{self._runtime.normalize_children}({value})")
                separator = ","
            else:
                parts.append(separator + self.generate(child))
                separator = ","

        return "".join(parts), separator

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def _generate_name(self, name_tree: Tree) -> str:
        inner = _unwrap_braces(name_tree)
        if inner is not name_tree:
            return f"({self.generate(inner)})"
        return resolve_name(self.generate(name_tree), self._runtime)

    def _head(self, value: tuple) -> str:
        """Separators and resolved name: the ``< name`` part of a tag."""
        return self.generate(value[1]) + self._generate_name(value[2]) + self.generate(value[3])

    def _generate_node(self, node: Node) -> str:
        return self._head(node.value)

    def _data_expression(self, node: Node) -> str | None:
        """A single bracketed attribute with no value is the whole props value."""
        if len(node.value) != 1:
            return None
        name_tree, assignment, _separator = node.value[0]
        if assignment is not None:
            return None
        generated = self.generate(name_tree)
        if generated[:1] not in ("{", "(", "[") or generated.startswith("{..."):
            return None
        return self.generate(_unwrap_braces(name_tree))

    def _generate_node_data(self, node: Node) -> str:
        data = node.value[4]
        if isinstance(data, Node) and data.kind is Kind.ATTRIBUTES:
            expr = self._data_expression(data)
            if expr is None:
                props = self.generate_attributes(data)
                expr = props.output if props.is_expression else f"{{{props.output}}}"
        else:
            expr = self.generate(data)
        return f"{self._head(node.value)}({expr})"

    def _generate_node_data_children(self, node: Node) -> str:
        value = node.value
        props = self.generate_attributes(value[4])
        children = value[6]
        child_output = self.generate_children(children)[0] if children else ""

        if props.is_expression:
            if children:
                expr = f"{self._runtime.merge}({{}}, {props.output}, {{children:[{child_output}]}})"
            else:
                expr = props.output
        else:
            tail = f"{props.separator}children:[{child_output}]" if children else ""
            expr = f"{{{props.output}{tail}}}"
        return f"{self._head(value)}({expr})"
