"""Escaping functions for every content/container pair.

Each function takes a chunk of content and returns the chunk rewritten for the
container. None of them keeps state between calls, so streaming encoders can
apply them chunk by chunk. Input characters that cannot be represented in the
container at all are rejected rather than dropped.
"""

import re
from typing import Dict, Match, Pattern

from contextual_encoding.media.types import MediaType
from contextual_encoding.validation.characters import check_characters

# JavaScript string body

_ESCAPE_MAP_FOR_JAVASCRIPT: Dict[str, str] = {
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
    '"': '\\"',
    "\\": "\\\\",
}

# Controls, quotes, backslash, markup specials ("</script", "]]>"), C1
# controls, line/paragraph separators and lone surrogates
_MATCHER_FOR_JAVASCRIPT: Pattern[str] = re.compile(
    "[\x00-\x1f\"&'<>\\\\\x7f-\x9f\u2028\u2029\ud800-\udfff]"
)


def _replacer_for_javascript(match: Match[str]) -> str:
    """A regex replacer."""
    group = match.group(0)
    encoded = _ESCAPE_MAP_FOR_JAVASCRIPT.get(group)
    if encoded is None:
        # "\u2028" -> "\\u2028"
        encoded = "\\u%04x" % ord(group)
        _ESCAPE_MAP_FOR_JAVASCRIPT[group] = encoded
    return encoded


def escape_text_in_javascript(text: str) -> str:
    """Escape text for the inside of a double-quoted JavaScript string.

    The result is also a valid JSON string body, and never contains ``<``,
    ``>`` or ``&`` so it can sit in a script element or a CDATA section.
    """
    return _MATCHER_FOR_JAVASCRIPT.sub(_replacer_for_javascript, text)


# JSON in an XHTML script element

_ESCAPE_MAP_FOR_JSON_IN_XHTML: Dict[str, str] = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
}
_MATCHER_FOR_JSON_IN_XHTML: Pattern[str] = re.compile("[<>&]")


def escape_json_in_xhtml(text: str) -> str:
    """Escape JSON for the inside of a script element.

    ``<``, ``>`` and ``&`` can only occur inside JSON strings, where a unicode
    escape has the same meaning.
    """
    check_characters(MediaType.XHTML, text)
    return _MATCHER_FOR_JSON_IN_XHTML.sub(
        lambda match: _ESCAPE_MAP_FOR_JSON_IN_XHTML[match.group(0)], text
    )


# XHTML text and attributes

_ESCAPE_MAP_FOR_XHTML: Dict[str, str] = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
}
_MATCHER_FOR_XHTML: Pattern[str] = re.compile("[&<>]")

_ESCAPE_MAP_FOR_XHTML_ATTRIBUTE: Dict[str, str] = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "\t": "&#9;",
    "\n": "&#10;",
    "\r": "&#13;",
}
_MATCHER_FOR_XHTML_ATTRIBUTE: Pattern[str] = re.compile("[&<>\"'\t\n\r]")


def escape_text_in_xhtml(text: str) -> str:
    """Escape text for XHTML element content."""
    check_characters(MediaType.XHTML, text)
    return _MATCHER_FOR_XHTML.sub(lambda match: _ESCAPE_MAP_FOR_XHTML[match.group(0)], text)


def escape_text_in_xhtml_attribute(text: str, apos: str = "&#39;") -> str:
    """Escape text for a quoted XHTML attribute value.

    Both quote characters are escaped so the caller may delimit with either.
    Tab, newline and carriage return become character references so
    attribute-value normalization does not turn them into spaces.

    Args:
        text: Text to escape
        apos: Reference to use for ``'``, which depends on the doctype
    """
    check_characters(MediaType.XHTML_ATTRIBUTE, text)

    def replace(match: Match[str]) -> str:
        group = match.group(0)
        if group == "'":
            return apos
        return _ESCAPE_MAP_FOR_XHTML_ATTRIBUTE[group]

    return _MATCHER_FOR_XHTML_ATTRIBUTE.sub(replace, text)


# SQL and shell string literals

_ESCAPE_MAP_FOR_MYSQL: Dict[str, str] = {
    "\\": "\\\\",
    "'": "\\'",
    "\t": "\\t",
    "\n": "\\n",
}
_MATCHER_FOR_MYSQL: Pattern[str] = re.compile("[\\\\'\t\n]")


def escape_text_in_mysql(text: str) -> str:
    """Escape text for the inside of a single-quoted MySQL string literal.

    Based on the MySQL "Special Character Escape Sequences" table; characters
    that table cannot represent are rejected.
    """
    check_characters(MediaType.MYSQL, text)
    return _MATCHER_FOR_MYSQL.sub(lambda match: _ESCAPE_MAP_FOR_MYSQL[match.group(0)], text)


def escape_text_in_psql(text: str) -> str:
    """Escape text for the inside of a standard-conforming PostgreSQL literal."""
    check_characters(MediaType.PSQL, text)
    return text.replace("'", "''")


def escape_text_in_sh(text: str) -> str:
    """Escape text for the inside of a single-quoted POSIX shell word."""
    check_characters(MediaType.SH, text)
    return text.replace("'", "'\\''")


# CDATA sections

CDATA_END = "]]>"
CDATA_END_SPLIT = "]]]]><![CDATA[>"


def split_cdata_end(text: str, pending_brackets: int) -> str:
    """Break every ``]]>`` into two CDATA sections.

    Args:
        text: Chunk to write
        pending_brackets: Number of ``]`` (at most two) that ended the
            previously written chunk

    Returns:
        The chunk to write, without the pending brackets already written
    """
    combined = "]" * pending_brackets + text
    return combined.replace(CDATA_END, CDATA_END_SPLIT)[pending_brackets:]


def trailing_brackets(text: str, pending_brackets: int) -> int:
    """Number of ``]`` (at most two) ending the output after ``text``."""
    stripped = text.rstrip("]")
    count = len(text) - len(stripped)
    if not stripped:
        count += pending_brackets
    return min(count, 2)
