"""View grammar: tag syntax interleaved with arbitrary host-language text.

There is no tokenizer. Ambiguities (``/`` as comment, regex or division,
``<`` as tag or less-than) are resolved with ordered choice and ``attempt``.
All combinators are built once, at import time.
"""

from __future__ import annotations

import string as _string

from viewscript.ast import Kind, Tree
from viewscript.combinators import (
    Failure,
    Outcome,
    Parser,
    any_char,
    attempt,
    both,
    char_class,
    character,
    end_of_input,
    exclude,
    first_of,
    one_or_more,
    optional,
    or_else,
    sequence,
    string,
    typed,
    zero_or_more,
)

# ASCII word characters plus $ . -
_IDENT_CHARS = frozenset(_string.ascii_letters + _string.digits + "_$.-")

# Characters that end a run of opaque host-language text.
_STRUCTURAL = ("/", "#", '"', "'", "`", "(", ")", "[", "]", "{", "}", "<")


def is_ident_char(ch: str) -> bool:
    """Return True if ch may appear in a bare value (tag or attribute name)."""
    return ch in _IDENT_CHARS


def _escaped(delimiters: list[str]) -> Parser:
    """A backslash escape pair, or one character that is not a delimiter."""
    return or_else(both(character("\\"), any_char), exclude(delimiters))


def _quoted(quote: str) -> Parser:
    return sequence([character(quote), zero_or_more(_escaped([quote])), character(quote)])


# ---------------------------------------------------------------------------
# Productions
# ---------------------------------------------------------------------------
#
# Productions are combinators bound to module names. The grammar is
# recursive only through ``expression`` and the child list of a tag, so those
# two are functions that look up their combinator when called.


def expression(source: str, index: int) -> Outcome:
    """Host-language text with embedded tags."""
    return _expression(source, index)


def _child_list(source: str, index: int) -> Outcome:
    return _children(source, index)


# ``#`` ... ``#`` template comment
comment = typed(
    Kind.COMMENT,
    sequence([character("#"), zero_or_more(_escaped(["#"])), character("#")]),
)

# Whitespace and template comments between tag parts
separator = zero_or_more(
    or_else(first_of([character(" "), character("\t"), character("\n")]), comment)
)

# Identifier run, quoted string, or bracketed sub-expression
value = first_of(
    [
        one_or_more(char_class(is_ident_char, "identifier character")),
        _quoted('"'),
        _quoted("'"),
        _quoted("`"),
        sequence([character("("), expression, character(")")]),
        sequence([character("["), expression, character("]")]),
        sequence([character("{"), expression, character("}")]),
    ]
)

attributes = typed(
    Kind.ATTRIBUTES,
    zero_or_more(sequence([value, optional(sequence([character("="), value])), separator])),
)

text = typed(Kind.TEXT, one_or_more(_escaped(["{", "<"])))

interpolation = typed(
    Kind.INTERPOLATION, sequence([character("{"), expression, character("}")])
)

# <name*>: a bare reference
node = typed(
    Kind.NODE,
    sequence([character("<"), separator, value, separator, string("*>")]),
)

# <name attrs/> or <name {expr}/>
node_data = typed(
    Kind.NODE_DATA,
    sequence(
        [
            character("<"),
            separator,
            value,
            separator,
            or_else(attempt(attributes), value),
            string("/>"),
        ]
    ),
)

# <name attrs>children</name>; the closing name is not checked
node_data_children = typed(
    Kind.NODE_DATA_CHILDREN,
    sequence(
        [
            character("<"),
            separator,
            value,
            separator,
            attributes,
            character(">"),
            _child_list,
            string("</"),
            zero_or_more(exclude([">"])),
            character(">"),
        ]
    ),
)

fragment = typed(Kind.FRAGMENT, sequence([string("<>"), _child_list, string("</>")]))

_children = zero_or_more(
    first_of(
        [
            attempt(node),
            attempt(node_data),
            attempt(node_data_children),
            attempt(fragment),
            text,
            interpolation,
        ]
    )
)

_expression = zero_or_more(
    first_of(
        [
            # Line comment
            sequence([string("//"), zero_or_more(exclude(["\n"]))]),
            # Block comment
            sequence([string("/*"), zero_or_more(exclude(["*/"])), string("*/")]),
            # Regular expression literal
            attempt(
                sequence(
                    [
                        character("/"),
                        one_or_more(
                            or_else(
                                both(character("\\"), exclude(["\n"])),
                                exclude(["/", "\n"]),
                            )
                        ),
                        character("/"),
                    ]
                )
            ),
            comment,
            value,
            attempt(node),
            attempt(node_data),
            attempt(node_data_children),
            attempt(fragment),
            # A failed regex or tag parse leaves an operator.
            character("/"),
            character("<"),
            # Opaque text up to the next structurally significant character.
            # Brackets stop the run so an enclosing value can close them.
            one_or_more(exclude(_STRUCTURAL)),
        ]
    )
)

main = both(expression, end_of_input)


def parse(source: str) -> Tree | Failure:
    """Parse *source* into a tree, or return the ``Failure`` as data."""
    outcome = main(source, 0)
    if isinstance(outcome, Failure):
        return outcome
    return outcome[0][0]
