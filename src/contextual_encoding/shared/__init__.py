"""Shared utilities for contextual encoding.

This module provides the configuration objects, exception taxonomy and
logging helpers used across all layers.
"""

from .config import (
    BufferConfig,
    ConfigError,
    ConfigValidationError,
    EncodingConfig,
    MarkupConfig,
    WriterConfig,
)
from .errors import (
    BufferLimitExceededError,
    EncoderStateError,
    EncodingError,
    InvalidCharacterError,
    MalformedUrlError,
    UnsupportedConversionError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
    new_stream_id,
)

__all__ = [
    "BufferConfig",
    "ConfigError",
    "ConfigValidationError",
    "EncodingConfig",
    "MarkupConfig",
    "WriterConfig",
    "BufferLimitExceededError",
    "EncoderStateError",
    "EncodingError",
    "InvalidCharacterError",
    "MalformedUrlError",
    "UnsupportedConversionError",
    "CorrelationLogger",
    "get_logger",
    "new_stream_id",
]
