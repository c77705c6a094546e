"""Validation layer for contextual encoding.

This module provides per media type character predicates, fail-fast validating
sinks and RFC 3986 URL checks.
"""

from .characters import (
    PREDICATES,
    XmlCharacterValidator,
    check_character,
    check_characters,
    is_any_char,
    is_passthrough,
    is_valid_sql_char,
    is_valid_text_char,
    is_valid_url_char,
)
from .url import check_url, is_valid_url, normalize_url
from .validators import (
    MediaValidator,
    Sink,
    ValidMediaFilter,
    ValidMediaInput,
    ValidMediaOutput,
    get_validator,
    is_validating,
)

__all__ = [
    "PREDICATES",
    "XmlCharacterValidator",
    "check_character",
    "check_characters",
    "is_any_char",
    "is_passthrough",
    "is_valid_sql_char",
    "is_valid_text_char",
    "is_valid_url_char",
    "check_url",
    "is_valid_url",
    "normalize_url",
    "MediaValidator",
    "Sink",
    "ValidMediaFilter",
    "ValidMediaInput",
    "ValidMediaOutput",
    "get_validator",
    "is_validating",
]
