"""Contextual Encoding.

Encodes text of one media type so it can be embedded, unchanged in meaning,
inside text of another: plain text in XHTML, a URL in a JavaScript string in
an XHTML attribute, a value in a SQL or shell literal.

Progressive API Disclosure:
- Level 1: One-shot encoding - encode_value()
- Level 2: Encoder selection - select_encoder(), MediaEncoder
- Level 3: Writer chains - new_media_writer(), MediaWriter.text()
"""

__version__ = "0.1.0"
__author__ = "Contextual Encoding Team"

# Level 1 and 2: Selection and one-shot encoding
from .encoding import BufferedEncoder, EncoderKind, MediaEncoder, encode_value, select_encoder

# Media types and the context threaded into encoders
from .media import Doctype, EncodingContext, MediaType, Serialization

# Configuration and errors
from .shared.config import EncodingConfig
from .shared.errors import (
    EncodingError,
    InvalidCharacterError,
    MalformedUrlError,
    UnsupportedConversionError,
)

# Level 3: Writers
from .writer import MediaWriter, TextRegionWriter, new_media_writer

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: One-shot encoding
    "encode_value",

    # Level 2: Encoder selection
    "select_encoder",
    "MediaEncoder",
    "BufferedEncoder",
    "EncoderKind",

    # Level 3: Writer chains
    "new_media_writer",
    "MediaWriter",
    "TextRegionWriter",

    # Media types and context
    "MediaType",
    "Doctype",
    "Serialization",
    "EncodingContext",

    # Configuration and errors
    "EncodingConfig",
    "EncodingError",
    "InvalidCharacterError",
    "MalformedUrlError",
    "UnsupportedConversionError",
]
