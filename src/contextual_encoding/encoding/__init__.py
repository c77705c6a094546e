"""Encoding layer for contextual encoding.

This module provides the escape functions, the streaming and buffered encoders
and the selection matrix choosing between them.
"""

from .encoders import (
    BufferState,
    BufferedEncoder,
    EncoderKind,
    MediaEncoder,
    PassthroughEncoder,
    passthrough_encoder,
)
from .escapes import (
    escape_json_in_xhtml,
    escape_text_in_javascript,
    escape_text_in_mysql,
    escape_text_in_psql,
    escape_text_in_sh,
    escape_text_in_xhtml,
    escape_text_in_xhtml_attribute,
)
from .selection import ENCODER_MATRIX, encode_value, is_supported, select_encoder

__all__ = [
    "BufferState",
    "BufferedEncoder",
    "EncoderKind",
    "MediaEncoder",
    "PassthroughEncoder",
    "passthrough_encoder",
    "escape_json_in_xhtml",
    "escape_text_in_javascript",
    "escape_text_in_mysql",
    "escape_text_in_psql",
    "escape_text_in_sh",
    "escape_text_in_xhtml",
    "escape_text_in_xhtml_attribute",
    "ENCODER_MATRIX",
    "encode_value",
    "is_supported",
    "select_encoder",
]
