"""Tests for the view grammar and parse tree shapes."""

from __future__ import annotations

import pytest

from viewscript.ast import Kind, Node
from viewscript.combinators import Failure
from viewscript.parser import is_ident_char, parse


class TestIdentifiers:
    @pytest.mark.parametrize("ch", ["a", "Z", "0", "_", "$", ".", "-"])
    def test_ident_chars(self, ch: str) -> None:
        assert is_ident_char(ch)

    @pytest.mark.parametrize("ch", [" ", "<", "/", "=", "{", '"', ""])
    def test_non_ident_chars(self, ch: str) -> None:
        assert not is_ident_char(ch)


class TestHostText:
    def test_empty_source(self) -> None:
        assert parse("") == ()

    def test_plain_code_has_no_nodes(self, parse_source, find_nodes) -> None:
        tree = parse_source("const f = (a, b) => { return [a, b]; };")
        for kind in Kind:
            assert find_nodes(tree, kind) == []

    @pytest.mark.parametrize(
        "source",
        [
            r"/\//",
            r"/\\/",
            "/test\\\n",
            "a / b",
            "x = /ab+c/g.test(s)",
            "// <div>\nx",
            "/* <div> */ x",
            '"<div>" + `<p>` + \'<a>\'',
        ],
    )
    def test_slashes_strings_and_comments(self, parse_source, find_nodes, source: str) -> None:
        tree = parse_source(source)
        assert find_nodes(tree, Kind.NODE_DATA_CHILDREN) == []

    def test_less_than_is_an_operator(self, parse_source) -> None:
        assert parse_source("a < b") == (("a",), (" ",), "<", (" ", "b"))

    def test_less_than_before_identifier(self, parse_source, find_nodes) -> None:
        tree = parse_source("if (a < b && c <d) {}")
        assert find_nodes(tree, Kind.NODE) == []
        assert find_nodes(tree, Kind.NODE_DATA) == []
        assert find_nodes(tree, Kind.NODE_DATA_CHILDREN) == []

    def test_template_comment(self, parse_source, find_nodes) -> None:
        tree = parse_source("x # a \\# b #")
        (comment,) = find_nodes(tree, Kind.COMMENT)
        assert comment.value[0] == "#"
        assert comment.value[2] == "#"


class TestTags:
    def test_bare_reference(self, parse_source) -> None:
        (node,) = parse_source("<div*>")
        assert isinstance(node, Node)
        assert node.kind is Kind.NODE
        assert node.value[2] == ("d", "i", "v")

    @pytest.mark.parametrize("source", ['<"div"*>', "<{dynamic}*>", "< div *>"])
    def test_bare_reference_names(self, parse_source, source: str) -> None:
        (node,) = parse_source(source)
        assert node.kind is Kind.NODE

    def test_self_closing_with_attributes(self, parse_source) -> None:
        (node,) = parse_source('<div foo="bar" bar={1 + 2 + 3} baz/>')
        assert node.kind is Kind.NODE_DATA
        attrs = node.value[4]
        assert attrs.kind is Kind.ATTRIBUTES
        assert len(attrs.value) == 3
        name, assignment, _separator = attrs.value[0]
        assert name == ("f", "o", "o")
        assert assignment == ("=", ('"', ("b", "a", "r"), '"'))
        assert attrs.value[2][1] is None

    @pytest.mark.parametrize("source", ["<div {foo}/>", '<"div" {foo}/>', "<{div} {foo}/>"])
    def test_data_expression_forms(self, parse_source, source: str) -> None:
        (node,) = parse_source(source)
        assert node.kind is Kind.NODE_DATA

    def test_children(self, parse_source, find_nodes) -> None:
        tree = parse_source(
            """
            <div dynamic={true}>
                <h1>Title</h1>
                <p color="blue">Text</p>
            </div>
            """
        )
        (outer,) = [n for n in tree if isinstance(n, Node)]
        assert outer.kind is Kind.NODE_DATA_CHILDREN
        tags = [c for c in outer.value[6] if c.kind is Kind.NODE_DATA_CHILDREN]
        assert len(tags) == 2
        assert len(find_nodes(tree, Kind.TEXT)) == 5

    def test_closing_name_is_not_checked(self, parse_source) -> None:
        (node,) = parse_source("<div>a</span>")
        assert node.kind is Kind.NODE_DATA_CHILDREN
        assert node.value[8] == ("s", "p", "a", "n")

    def test_generic_closing_tag(self, parse_source) -> None:
        (node,) = parse_source("<{div} dynamic={true}><p>x</p></>")
        assert node.kind is Kind.NODE_DATA_CHILDREN

    def test_escaped_text(self, parse_source, find_nodes) -> None:
        tree = parse_source(r"<div>test \{ and \< escaped</div>")
        (text,) = find_nodes(tree, Kind.TEXT)
        assert ("\\", "{") in text.value
        assert ("\\", "<") in text.value

    def test_fragment_and_interpolation(self, parse_source, find_nodes) -> None:
        tree = parse_source("<><span>A</span><p>{message}</p></>")
        (fragment,) = find_nodes(tree, Kind.FRAGMENT)
        assert len(fragment.value[1]) == 2
        (interp,) = find_nodes(tree, Kind.INTERPOLATION)
        assert interp.value[1] == (("m", "e", "s", "s", "a", "g", "e"),)

    def test_tag_inside_expression(self, parse_source, find_nodes) -> None:
        tree = parse_source("render(() => <div*>, [<p/>])")
        assert len(find_nodes(tree, Kind.NODE)) == 1
        assert len(find_nodes(tree, Kind.NODE_DATA)) == 1

    def test_separator_comment(self, parse_source, find_nodes) -> None:
        (node,) = parse_source("<div #note# id=x/>")
        assert node.kind is Kind.NODE_DATA
        assert len(find_nodes(node.value[3], Kind.COMMENT)) == 1


class TestFailures:
    def test_failure_is_returned_not_raised(self) -> None:
        result = parse('<div test="/>')
        assert result == Failure('"""', 13)

    def test_unterminated_block_comment(self) -> None:
        assert parse("/* open") == Failure('"*/"', 7)

    def test_unbalanced_closer(self) -> None:
        assert parse("a)") == Failure("EOF", 1)

    def test_unclosed_bracket(self) -> None:
        assert parse("f(a") == Failure('")"', 3)

    def test_parse_is_deterministic(self) -> None:
        source = "<div a={1}>{x}</div> < <p"
        assert parse(source) == parse(source)
