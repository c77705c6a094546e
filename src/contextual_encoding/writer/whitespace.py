"""Whitespace helpers shared by writers."""

from contextual_encoding.validation.validators import Sink

SPACE = " "
NBSP = "\u00a0"

# Longest run written in one call
_CHUNK = 64


def write_repeated(out: Sink, unit: str, count: int) -> None:
    """Write ``unit`` ``count`` times, in bounded chunks."""
    if count <= 0:
        return
    chunk = unit * min(count, _CHUNK)
    full, remainder = divmod(count, _CHUNK)
    for _ in range(full):
        out.write(chunk)
    if remainder:
        out.write(unit * remainder)


def write_indent(out: Sink, depth: int, indent_unit: str = "\t") -> None:
    """Write ``depth`` indentation units."""
    write_repeated(out, indent_unit, depth)


def write_nli(out: Sink, depth: int, indent_unit: str = "\t", newline: str = "\n") -> None:
    """Write a newline followed by ``depth`` indentation units."""
    out.write(newline)
    write_indent(out, depth, indent_unit)


def write_spaces(out: Sink, count: int) -> None:
    write_repeated(out, SPACE, count)


def write_nbsp(out: Sink, count: int) -> None:
    write_repeated(out, NBSP, count)
