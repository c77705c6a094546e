"""Per media type character predicates.

Each media type has a predicate over single code points and a matching
compiled pattern that finds the first invalid character of a string. Checks
fail fast on the first violation.
"""

import re
from typing import Callable, ClassVar, Dict, List, Optional, Pattern, Tuple

from contextual_encoding.media.types import MediaType
from contextual_encoding.shared.errors import InvalidCharacterError

# XML 1.0 valid character ranges
XML_VALID_RANGES: List[Tuple[int, int]] = [
    (0x0009, 0x0009),  # Tab
    (0x000A, 0x000A),  # Line Feed
    (0x000D, 0x000D),  # Carriage Return
    (0x0020, 0xD7FF),  # Basic Multilingual Plane excluding surrogates
    (0xE000, 0xFFFD),  # Private Use and extended characters
    (0x10000, 0x10FFFF),  # Supplementary planes
]

# Last two code points of every supplementary plane
SUPPLEMENTARY_NONCHARS = frozenset(
    (plane << 16) | low for plane in range(1, 0x11) for low in (0xFFFE, 0xFFFF)
)

# Tab, newline, printable ASCII, and 0xA0 through 0xFFFD
SQL_VALID_RANGES: List[Tuple[int, int]] = [
    (0x0009, 0x000A),
    (0x0020, 0x007E),
    (0x00A0, 0xFFFD),
]

# RFC 3986 unreserved and reserved characters, plus the percent sign
URL_UNRESERVED = "A-Za-z0-9\\-._~"
URL_GEN_DELIMS = ":/?#\\[\\]@"
URL_SUB_DELIMS = "!$&'()*+,;="
URL_CHARACTER_CLASS = URL_UNRESERVED + URL_GEN_DELIMS + URL_SUB_DELIMS + "%"

CACHE_SIZE_LIMIT = 1000


def _ranges_to_class(ranges: List[Tuple[int, int]]) -> str:
    parts = []
    for start, end in ranges:
        if start == end:
            parts.append(re.escape(chr(start)))
        else:
            parts.append(f"{re.escape(chr(start))}-{re.escape(chr(end))}")
    return "".join(parts)


_XML_INVALID: Pattern[str] = re.compile(
    "[^" + _ranges_to_class(XML_VALID_RANGES) + "]|["
    + "".join(re.escape(chr(c)) for c in sorted(SUPPLEMENTARY_NONCHARS)) + "]"
)
_SQL_INVALID: Pattern[str] = re.compile("[^" + _ranges_to_class(SQL_VALID_RANGES) + "]")
_URL_INVALID: Pattern[str] = re.compile("[^" + URL_CHARACTER_CLASS + "]")


class XmlCharacterValidator:
    """XML 1.0 character validity checker, shared by the text and XHTML types."""

    # Cache for validation results to improve performance
    _validation_cache: ClassVar[Dict[int, bool]] = {}

    @classmethod
    def is_valid(cls, code_point: int) -> bool:
        """Check if a code point is a valid XML 1.0 character."""
        cached = cls._validation_cache.get(code_point)
        if cached is not None:
            return cached

        is_valid = (
            any(start <= code_point <= end for start, end in XML_VALID_RANGES)
            and code_point not in SUPPLEMENTARY_NONCHARS
        )

        if len(cls._validation_cache) < CACHE_SIZE_LIMIT:
            cls._validation_cache[code_point] = is_valid

        return is_valid

    @classmethod
    def clear_cache(cls) -> None:
        """Clear validation cache."""
        cls._validation_cache.clear()


def is_valid_text_char(code_point: int) -> bool:
    """Valid in plain text, XHTML and XHTML attributes."""
    return XmlCharacterValidator.is_valid(code_point)


def is_valid_sql_char(code_point: int) -> bool:
    """Valid in MySQL, PostgreSQL and shell string literals.

    See the MySQL "Special Character Escape Sequences" table: control
    characters other than tab and newline, 0x7F through 0x9F, and anything
    above 0xFFFD are rejected.
    """
    return (
        0x20 <= code_point <= 0x7E  # common case first
        or code_point == 0x09
        or code_point == 0x0A
        or 0xA0 <= code_point <= 0xFFFD
    )


def is_valid_url_char(code_point: int) -> bool:
    """Valid somewhere in an RFC 3986 URI reference."""
    return code_point < 0x80 and _URL_INVALID.match(chr(code_point)) is None


def is_any_char(code_point: int) -> bool:
    """Scripts may use the entire Unicode character set."""
    return True


CharacterPredicate = Callable[[int], bool]

PREDICATES: Dict[MediaType, CharacterPredicate] = {
    MediaType.JAVASCRIPT: is_any_char,
    MediaType.JSON: is_any_char,
    MediaType.LD_JSON: is_any_char,
    MediaType.MYSQL: is_valid_sql_char,
    MediaType.PSQL: is_valid_sql_char,
    MediaType.SH: is_valid_sql_char,
    MediaType.TEXT: is_valid_text_char,
    MediaType.URL: is_valid_url_char,
    MediaType.XHTML: is_valid_text_char,
    MediaType.XHTML_ATTRIBUTE: is_valid_text_char,
}

_INVALID_PATTERNS: Dict[MediaType, Optional[Pattern[str]]] = {
    MediaType.JAVASCRIPT: None,
    MediaType.JSON: None,
    MediaType.LD_JSON: None,
    MediaType.MYSQL: _SQL_INVALID,
    MediaType.PSQL: _SQL_INVALID,
    MediaType.SH: _SQL_INVALID,
    MediaType.TEXT: _XML_INVALID,
    MediaType.URL: _URL_INVALID,
    MediaType.XHTML: _XML_INVALID,
    MediaType.XHTML_ATTRIBUTE: _XML_INVALID,
}


def is_passthrough(media_type: MediaType) -> bool:
    """Whether every character is valid for ``media_type``."""
    return _INVALID_PATTERNS[media_type] is None


def check_character(media_type: MediaType, ch: str) -> None:
    """Check one character, raising InvalidCharacterError if invalid."""
    code_point = ord(ch)
    if not PREDICATES[media_type](code_point):
        raise InvalidCharacterError(code_point, media_type)


def check_characters(
    media_type: MediaType,
    text: str,
    start: int = 0,
    end: Optional[int] = None
) -> None:
    """Check ``text[start:end]``, raising on the first invalid character.

    Raises:
        InvalidCharacterError: Carrying the offending code point
    """
    pattern = _INVALID_PATTERNS[media_type]
    if pattern is None:
        return
    if end is None:
        end = len(text)
    match = pattern.search(text, start, end)
    if match is not None:
        raise InvalidCharacterError(ord(match.group(0)), media_type)
