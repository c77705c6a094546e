"""Writer layer for contextual encoding.

This module provides encoding writers, scoped text regions, whitespace helpers
and the values accepted as text.
"""

from .markup import COMMENT_DELIMITERS, MarkupHook, lookup_key, write_markup
from .media_writer import MAX_DEPTH, MediaWriter, TextRegionWriter, new_media_writer
from .text_source import CharRange, Deferred, MediaWritable, TextSource, is_fast_to_string
from .whitespace import NBSP, SPACE

__all__ = [
    "COMMENT_DELIMITERS",
    "MarkupHook",
    "lookup_key",
    "write_markup",
    "MAX_DEPTH",
    "MediaWriter",
    "TextRegionWriter",
    "new_media_writer",
    "CharRange",
    "Deferred",
    "MediaWritable",
    "TextSource",
    "is_fast_to_string",
    "NBSP",
    "SPACE",
]
