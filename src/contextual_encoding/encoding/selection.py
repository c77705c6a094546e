"""Encoder selection matrix.

Decides, for a (content, container) pair, whether content is already valid in
the container, which encoder applies, or that no rule exists.
"""

from functools import lru_cache
from typing import Dict, Optional, Tuple

from contextual_encoding.media.context import EncodingContext
from contextual_encoding.media.types import JAVASCRIPT_TYPES, Doctype, MediaType, Serialization
from contextual_encoding.shared.config import BufferConfig
from contextual_encoding.shared.errors import UnsupportedConversionError
from contextual_encoding.shared.logging import get_logger

from .encoders import BufferedEncoder, EncoderKind, MediaEncoder, passthrough_encoder

logger = get_logger(__name__, None, "selection")

Pair = Tuple[MediaType, MediaType]


def _build_matrix() -> Dict[Pair, EncoderKind]:
    matrix: Dict[Pair, EncoderKind] = {}
    for script in JAVASCRIPT_TYPES:
        matrix[(script, MediaType.XHTML)] = EncoderKind.JAVASCRIPT_IN_XHTML
        matrix[(script, MediaType.XHTML_ATTRIBUTE)] = EncoderKind.JAVASCRIPT_IN_XHTML_ATTRIBUTE
        matrix[(MediaType.TEXT, script)] = EncoderKind.TEXT_IN_JAVASCRIPT
        matrix[(MediaType.URL, script)] = EncoderKind.URL_IN_JAVASCRIPT
    matrix.update({
        (MediaType.TEXT, MediaType.MYSQL): EncoderKind.TEXT_IN_MYSQL,
        (MediaType.TEXT, MediaType.PSQL): EncoderKind.TEXT_IN_PSQL,
        (MediaType.TEXT, MediaType.SH): EncoderKind.TEXT_IN_SH,
        (MediaType.TEXT, MediaType.XHTML): EncoderKind.TEXT_IN_XHTML,
        (MediaType.TEXT, MediaType.XHTML_ATTRIBUTE): EncoderKind.TEXT_IN_XHTML_ATTRIBUTE,
        (MediaType.URL, MediaType.XHTML): EncoderKind.URL_IN_XHTML,
        (MediaType.URL, MediaType.XHTML_ATTRIBUTE): EncoderKind.URL_IN_XHTML_ATTRIBUTE,
    })
    return matrix


# (content, container) -> encoder, for every pair needing one
ENCODER_MATRIX: Dict[Pair, EncoderKind] = _build_matrix()

# The matrix and the "already valid in" table must never overlap
assert not any(content.is_valid_in(container) for content, container in ENCODER_MATRIX)


def is_supported(content_type: MediaType, container_type: MediaType) -> bool:
    """Whether content can be placed in the container, encoded or not."""
    return (
        content_type.is_valid_in(container_type)
        or (content_type, container_type) in ENCODER_MATRIX
    )


@lru_cache(maxsize=None)
def _streaming_encoder(
    kind: EncoderKind,
    content_type: MediaType,
    container_type: MediaType,
    doctype: Doctype,
    serialization: Serialization
) -> MediaEncoder:
    # Keyed only on what streaming transforms read; never on the URL rewriter
    context = EncodingContext(doctype=doctype, serialization=serialization)
    return MediaEncoder(kind, content_type, container_type, context)


def select_encoder(
    context: EncodingContext,
    content_type: MediaType,
    container_type: MediaType,
    buffer_config: Optional[BufferConfig] = None
) -> Optional[MediaEncoder]:
    """Get the encoder for content of one type inside a container of another.

    Args:
        context: Encoding context of the output stream
        content_type: Type of the value being written
        container_type: Type of the text the value is written into
        buffer_config: Buffer sizing for encoders that need whole values

    Returns:
        None when content is already valid in the container unmodified,
        otherwise an encoder bound to exactly this pair. Encoders keeping
        per-value state are new on every call; the others are shared.

    Raises:
        ValueError: If ``context`` is None
        UnsupportedConversionError: If no rule exists for the pair
    """
    if context is None:
        raise ValueError("context is required")

    if content_type.is_valid_in(container_type):
        logger.debug(
            "No encoder needed",
            extra={"content_type": content_type.name, "container_type": container_type.name}
        )
        return None

    kind = ENCODER_MATRIX.get((content_type, container_type))
    if kind is None:
        logger.warning(
            "Unsupported conversion",
            extra={"content_type": content_type.name, "container_type": container_type.name}
        )
        raise UnsupportedConversionError(content_type, container_type)

    encoder: MediaEncoder
    if kind.buffered:
        if buffer_config is None:
            buffer_config = BufferConfig()
        encoder = BufferedEncoder(
            kind,
            container_type,
            context,
            initial_capacity=buffer_config.initial_capacity,
            max_buffered_chars=buffer_config.max_buffered_chars,
        )
    elif kind is EncoderKind.JAVASCRIPT_IN_XHTML:
        # Tracks "]]>" split across writes
        encoder = MediaEncoder(kind, content_type, container_type, context)
    else:
        encoder = _streaming_encoder(
            kind, content_type, container_type, context.doctype, context.serialization
        )

    assert encoder.valid_output_type is container_type, (
        f"{encoder!r} does not produce {container_type.name}"
    )
    assert encoder.accepts(content_type), f"{encoder!r} does not accept {content_type.name}"

    logger.debug(
        "Selected encoder",
        extra={
            "content_type": content_type.name,
            "container_type": container_type.name,
            "encoder": kind.label,
        }
    )
    return encoder


def encode_value(
    context: EncodingContext,
    content_type: MediaType,
    container_type: MediaType,
    value: str
) -> str:
    """Encode one complete value for a container.

    Values already valid in the container are still validated as the content
    type and returned unchanged.
    """
    encoder = select_encoder(context, content_type, container_type)
    if encoder is None:
        encoder = passthrough_encoder(content_type, container_type, context)
    return encoder.encode(value)
