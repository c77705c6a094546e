"""Writers that encode everything written to them.

A :class:`MediaWriter` accepts content of one media type and forwards it,
encoded, to a destination of another. Writers chain: the plain-text writer of
a JavaScript writer inside XHTML writes through the JavaScript writer, so
every layer applies its own encoding.

A writer owns mutable state (indentation, depth, its cached text writer and
possibly a buffered encoder) and belongs to one output stream. Callers must
serialize access to it.
"""

import sys
from functools import partial
from typing import Any, Optional

from contextual_encoding.encoding.encoders import MediaEncoder, passthrough_encoder
from contextual_encoding.encoding.selection import select_encoder
from contextual_encoding.media.context import EncodingContext
from contextual_encoding.media.types import MarkupType, MediaType
from contextual_encoding.shared.config import EncodingConfig
from contextual_encoding.shared.errors import EncoderStateError
from contextual_encoding.shared.logging import get_logger, new_stream_id
from contextual_encoding.validation.validators import Sink, ValidMediaFilter

from . import whitespace
from .markup import MarkupHook, write_markup
from .text_source import CharRange, Deferred, MediaWritable, is_fast_to_string

logger = get_logger(__name__, None, "writer")

# Largest depth; incrementing past it has no effect
MAX_DEPTH = sys.maxsize

_UNSET = object()


class MediaWriter(ValidMediaFilter):
    """Encodes content of one media type into a destination.

    Attributes:
        context: Encoding context shared by every writer in the chain
        encoder: Encoder applied to everything written
        out: Destination accepting the encoder's output type
        config: Presentation and buffering configuration
        correlation_id: Id of the output stream, shared by nested writers
    """

    def __init__(
        self,
        context: EncodingContext,
        encoder: MediaEncoder,
        out: Sink,
        config: Optional[EncodingConfig] = None,
        markup: Optional[MarkupHook] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        if context is None:
            raise ValueError("context is required")
        if encoder is None:
            raise ValueError("encoder is required")
        self.context = context
        self.encoder = encoder
        self.out = out
        self.config = config or EncodingConfig()
        if markup is None:
            markup = partial(
                write_markup,
                enabled=self.config.markup.enable_lookup_markup,
                max_key_length=self.config.markup.comment_key_max_length,
            )
        self.markup = markup
        self._indent = self.config.writer.indent
        self._depth = self.config.writer.depth
        self._text_writer: Optional["MediaWriter"] = None
        self.correlation_id = correlation_id or new_stream_id()
        self._logger = logger.for_stream(self.correlation_id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.encoder!r})"

    @property
    def valid_input_type(self) -> MediaType:
        return self.encoder.valid_input_type

    @property
    def valid_output_type(self) -> MediaType:
        return self.encoder.valid_output_type

    def accepts(self, input_type: MediaType) -> bool:
        return self.encoder.accepts(input_type)

    def can_skip(self, input_type: MediaType) -> bool:
        return self.encoder.can_skip(input_type)

    # Encoded output

    def write(self, text: str, start: int = 0, end: Optional[int] = None) -> None:
        """Encode ``text[start:end]`` into the destination."""
        self.encoder.write(text, self.out, start, end)

    def append(self, ch: str) -> "MediaWriter":
        self.encoder.append(ch, self.out)
        return self

    def write_prefix(self) -> "MediaWriter":
        """Write the encoder prefix, starting a value."""
        self.encoder.write_prefix_to(self.out)
        return self

    def write_suffix(self) -> "MediaWriter":
        """Write the encoder suffix, finishing a value."""
        self.encoder.write_suffix_to(self.out)
        return self

    def flush(self) -> None:
        flush = getattr(self.out, "flush", None)
        if flush is not None:
            flush()

    def _get_text_writer(self) -> "MediaWriter":
        """Writer for plain text in this writer's input type; may be ``self``."""
        if self._text_writer is None:
            text_encoder = select_encoder(
                self.context,
                MediaType.TEXT,
                self.encoder.valid_input_type,
                self.config.buffer,
            )
            if text_encoder is None:
                self._text_writer = self
            else:
                self._text_writer = MediaWriter(
                    self.context,
                    text_encoder,
                    self,
                    self.config,
                    self.markup,
                    self.correlation_id,
                )
                self._logger.debug(
                    "Created text writer",
                    extra={"encoder": text_encoder.kind.label}
                )
        return self._text_writer

    # Indentation and whitespace, written unencoded to the destination

    @property
    def indenting(self) -> bool:
        return self._indent

    def set_indent(self, indent: bool) -> "MediaWriter":
        self._indent = indent
        return self

    @property
    def depth(self) -> int:
        return self._depth

    def set_depth(self, depth: int) -> "MediaWriter":
        if depth < 0:
            raise ValueError(f"depth < 0: {depth}")
        self._depth = depth
        return self

    def inc_depth(self) -> "MediaWriter":
        """Increase depth by one when indenting, stopping at ``MAX_DEPTH``."""
        if self._indent and self._depth < MAX_DEPTH:
            self._depth += 1
        return self

    def dec_depth(self) -> "MediaWriter":
        """Decrease depth by one when indenting, stopping at zero."""
        if self._indent and self._depth > 0:
            self._depth -= 1
        return self

    def nl(self) -> "MediaWriter":
        """Write a newline."""
        self.out.write(self.config.writer.newline)
        return self

    def nli(self, depth_offset: int = 0) -> "MediaWriter":
        """Write a newline, then indentation when indenting."""
        if self._indent:
            whitespace.write_nli(
                self.out,
                self._depth + depth_offset,
                self.config.writer.indent_unit,
                self.config.writer.newline,
            )
        else:
            self.out.write(self.config.writer.newline)
        return self

    def indent(self, depth_offset: int = 0) -> "MediaWriter":
        """Write indentation when indenting."""
        if self._indent:
            whitespace.write_indent(
                self.out, self._depth + depth_offset, self.config.writer.indent_unit
            )
        return self

    def sp(self, count: int = 1) -> "MediaWriter":
        """Write spaces."""
        whitespace.write_spaces(self.out, count)
        return self

    def nbsp(self, count: int = 1) -> "MediaWriter":
        """Write non-breaking spaces as one text value."""
        text_writer = self._get_text_writer()
        if text_writer is not self:
            text_writer.encoder.write_prefix_to(self)
        whitespace.write_nbsp(text_writer, count)
        if text_writer is not self:
            text_writer.encoder.write_suffix_to(self)
        return self

    # Text

    def text(self, value: Any = _UNSET, start: int = 0, end: Optional[int] = None) -> Any:
        """Write a value as plain text, encoded for this writer.

        Called without arguments, opens a :class:`TextRegionWriter` for
        streaming text of any length; the region must be closed, preferably
        with a ``with`` block.

        Args:
            value: A text source, see ``contextual_encoding.writer.text_source``
            start: Start of the range to write when ``value`` is a ``str``
            end: End of the range to write when ``value`` is a ``str``

        Returns:
            The region when called without arguments, otherwise ``self``
        """
        if value is _UNSET:
            return self._open_region()

        while isinstance(value, Deferred):
            value = value.get()

        if value is None or isinstance(value, str):
            self._write_text(value, start, end)
        elif isinstance(value, CharRange):
            self._write_text(value.text, value.start, value.end)
        elif is_fast_to_string(value):
            self._write_text(str(value))
        elif isinstance(value, MediaWritable):
            with self._open_region() as region:
                value.write_to(region)
        else:
            self._write_markup(value)
        return self

    def _write_text(self, text: Optional[str], start: int = 0, end: Optional[int] = None) -> None:
        text_writer = self._get_text_writer()
        if text_writer is not self:
            text_writer.encoder.write_prefix_to(self)
        if text is not None:
            text_writer.write(text, start, end)
        if text_writer is not self:
            text_writer.encoder.write_suffix_to(self)

    def _write_markup(self, value: Any) -> None:
        text_writer = self._get_text_writer()
        if text_writer is self:
            # Already plain text
            self.markup(value, MarkupType.TEXT, False, self.encoder, self.out)
        else:
            self.markup(
                value,
                self.encoder.valid_input_type.markup_type,
                True,
                text_writer.encoder,
                self,
            )

    def _open_region(self) -> "TextRegionWriter":
        text_writer = self._get_text_writer()
        if text_writer is not self:
            text_writer.encoder.write_prefix_to(self)
        return TextRegionWriter(self, text_writer)


class TextRegionWriter(MediaWriter):
    """Plain-text writer whose closing writes the text suffix exactly once.

    The text prefix has already been written when the region is created.
    Writing after :meth:`close` raises :class:`EncoderStateError`.
    """

    def __init__(self, parent: MediaWriter, text_writer: MediaWriter) -> None:
        super().__init__(
            text_writer.context,
            text_writer.encoder,
            text_writer.out,
            parent.config,
            parent.markup,
            parent.correlation_id,
        )
        self.parent = parent
        self._wraps_encoder = text_writer is not parent
        self.closed = False

    def __enter__(self) -> "TextRegionWriter":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def write(self, text: str, start: int = 0, end: Optional[int] = None) -> None:
        if self.closed:
            raise EncoderStateError("Text region already closed")
        super().write(text, start, end)

    def append(self, ch: str) -> "MediaWriter":
        if self.closed:
            raise EncoderStateError("Text region already closed")
        return super().append(ch)

    def close(self) -> None:
        """Write the text suffix; later calls do nothing."""
        if self.closed:
            return
        self.closed = True
        if self._wraps_encoder:
            self.encoder.write_suffix_to(self.parent)
        self._logger.debug("Closed text region", extra={"encoder": self.encoder.kind.label})


def new_media_writer(
    context: EncodingContext,
    content_type: MediaType,
    container_type: MediaType,
    out: Sink,
    config: Optional[EncodingConfig] = None,
    correlation_id: Optional[str] = None
) -> MediaWriter:
    """Create a writer for content of one type written into a container.

    Uses the selected encoder, or a validating passthrough when content is
    already valid in the container. A new stream id is drawn unless
    ``correlation_id`` is given.

    Raises:
        UnsupportedConversionError: If no rule exists for the pair
    """
    config = config or EncodingConfig()
    encoder = select_encoder(context, content_type, container_type, config.buffer)
    if encoder is None:
        encoder = passthrough_encoder(content_type, container_type, context)
    return MediaWriter(context, encoder, out, config, correlation_id=correlation_id)
