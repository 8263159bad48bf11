"""Parse error type and the formatters that give it source context."""

from __future__ import annotations


def line_column(source: str, index: int) -> tuple[int, int]:
    """Return the 1-based line and column of *index* in *source*.

    Indexes past the end continue the last line.
    """
    before = source[:index]
    line = before.count("\n") + 1
    column = index - (before.rfind("\n") + 1) + 1
    return line, column


def format_detailed(source: str, index: int, expected: str) -> str:
    """Compact message: expectation, location, offending line and a caret."""
    if index >= len(source):
        return f"Parse error: expected {expected} at end of input"

    line, column = line_column(source, index)
    source_line = source.split("\n")[line - 1]
    prefix = f"{line}:{column}"
    pad = " " * (len(prefix) + column)
    return (
        f"Parse error: expected {expected} at {prefix}\n"
        f"{prefix} {source_line}\n"
        f"{pad}^"
    )


def format_context(source: str, index: int) -> str:
    """Numbered lines around *index* with a caret under its column."""
    # Pad so an index at or past the end still has a column to point at.
    if index >= len(source):
        source = source + " " * (index - len(source) + 1)

    lines = source.split("\n")
    line, column = line_column(source, index)
    # The next line number is never narrower than the others.
    width = len(str(line + 1)) + 2

    def gutter(label: str) -> str:
        return f"{label}| ".rjust(width)

    formatted = ""
    if line > 1:
        formatted += f"{gutter(str(line - 1))}{lines[line - 2]}\n"
    formatted += f"{gutter(str(line))}{lines[line - 1]}\n{gutter('')}{'^'.rjust(column)}"
    if line < len(lines):
        formatted += f"\n{gutter(str(line + 1))}{lines[line]}"
    return formatted


class ParseError(Exception):
    """Raised by ``compile()`` when the source does not match the grammar."""

    def __init__(self, expected: str, index: int, source: str) -> None:
        self.expected = expected
        self.index = index
        self.source = source
        self.line, self.column = line_column(source, index)
        self.message = f"expected {expected}"
        super().__init__(self.format())

    def format(self, filename: str = "input.js") -> str:
        return (
            "error: invalid view syntax\n"
            f"  --> {filename}:{self.line}:{self.column}\n"
            f"{format_detailed(self.source, self.index, self.expected)}\n"
            "\n"
            "Context:\n"
            f"{format_context(self.source, self.index)}"
        )
