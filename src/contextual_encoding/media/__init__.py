"""Media type layer for contextual encoding.

This module provides the fixed media type taxonomy, its compatibility facts and
the encoding context threaded into encoders.
"""

from .context import EncodingContext, UrlRewriter
from .types import (
    DEFAULT_DOCTYPE,
    DEFAULT_SERIALIZATION,
    JAVASCRIPT_TYPES,
    Doctype,
    MarkupType,
    MediaType,
    Serialization,
)

__all__ = [
    "EncodingContext",
    "UrlRewriter",
    "DEFAULT_DOCTYPE",
    "DEFAULT_SERIALIZATION",
    "JAVASCRIPT_TYPES",
    "Doctype",
    "MarkupType",
    "MediaType",
    "Serialization",
]
