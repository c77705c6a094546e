"""Media encoders.

Encodes media to allow it to be contained in a different type of media. For
example, one may have plain text inside of XHTML, or a URL inside a JavaScript
string inside an ``onclick`` attribute of an XHTML document.

Every concrete transform is one member of :class:`EncoderKind`; the kind
carries the few parameters that differ between transforms, and
:class:`MediaEncoder` dispatches on it. Each encoder both validates its input
characters and produces valid output characters.

Streaming encoders keep no state between calls and may be shared. Buffered
encoders and the CDATA-splitting script encoder keep per-value state and
belong to a single output stream; callers must serialize access to them.
"""

import io
from enum import Enum
from typing import Callable, Dict, List, Optional

from contextual_encoding.media.context import EncodingContext
from contextual_encoding.media.types import MediaType, Serialization
from contextual_encoding.shared.config import DEFAULT_BUFFER_CAPACITY
from contextual_encoding.shared.errors import (
    BufferLimitExceededError,
    EncoderStateError,
)
from contextual_encoding.shared.logging import get_logger
from contextual_encoding.validation.characters import check_characters
from contextual_encoding.validation.url import check_url, normalize_url
from contextual_encoding.validation.validators import (
    Sink,
    ValidMediaFilter,
    get_validator,
    is_validating,
)

from . import escapes

logger = get_logger(__name__, None, "encoder")

CDATA_PREFIX = "//<![CDATA[\n"
CDATA_SUFFIX = "\n//]]>"


class EncoderKind(Enum):
    """Closed set of encoders.

    Attributes:
        input_type: Media type the encoder accepts, or None when bound per call
        buffered: Whether the whole value is needed before any output
        quote: Written as both prefix and suffix
    """

    TEXT_IN_JAVASCRIPT = ("text-in-javascript", MediaType.TEXT, False, '"')
    TEXT_IN_MYSQL = ("text-in-mysql", MediaType.TEXT, False, "'")
    TEXT_IN_PSQL = ("text-in-psql", MediaType.TEXT, False, "'")
    TEXT_IN_SH = ("text-in-sh", MediaType.TEXT, False, "'")
    TEXT_IN_XHTML = ("text-in-xhtml", MediaType.TEXT, False, "")
    TEXT_IN_XHTML_ATTRIBUTE = ("text-in-xhtml-attribute", MediaType.TEXT, False, "")
    JAVASCRIPT_IN_XHTML = ("javascript-in-xhtml", None, False, "")
    JAVASCRIPT_IN_XHTML_ATTRIBUTE = ("javascript-in-xhtml-attribute", None, False, "")
    URL_IN_JAVASCRIPT = ("url-in-javascript", MediaType.URL, True, '"')
    URL_IN_XHTML = ("url-in-xhtml", MediaType.URL, True, "")
    URL_IN_XHTML_ATTRIBUTE = ("url-in-xhtml-attribute", MediaType.URL, True, "")
    PASSTHROUGH = ("passthrough", None, False, "")

    def __init__(
        self,
        label: str,
        input_type: Optional[MediaType],
        buffered: bool,
        quote: str
    ) -> None:
        self.label = label
        self.input_type = input_type
        self.buffered = buffered
        self.quote = quote


class MediaEncoder(ValidMediaFilter):
    """Streaming encoder bound to an input and an output media type.

    Each call transforms its characters independently and forwards them to
    ``out`` immediately.
    """

    def __init__(
        self,
        kind: EncoderKind,
        input_type: MediaType,
        output_type: MediaType,
        context: EncodingContext = EncodingContext.DEFAULT
    ) -> None:
        if kind.input_type is not None and kind.input_type is not input_type:
            raise ValueError(f"{kind.label} does not accept {input_type.name}")
        self.kind = kind
        self.context = context
        self._input_type = input_type
        self._output_type = output_type
        # Only used by JAVASCRIPT_IN_XHTML with XML serialization
        self._pending_brackets = 0

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.kind.label}: "
            f"{self._input_type.name} -> {self._output_type.name})"
        )

    @property
    def valid_input_type(self) -> MediaType:
        return self._input_type

    @property
    def valid_output_type(self) -> MediaType:
        return self._output_type

    @property
    def _uses_cdata(self) -> bool:
        return (
            self.kind is EncoderKind.JAVASCRIPT_IN_XHTML
            and self._input_type is MediaType.JAVASCRIPT
            and self.context.serialization is Serialization.XML
        )

    def get_prefix(self) -> str:
        """Text written before the first character of a value."""
        if self._uses_cdata:
            return CDATA_PREFIX
        return self.kind.quote

    def get_suffix(self) -> str:
        """Text written after the last character of a value."""
        if self._uses_cdata:
            return CDATA_SUFFIX
        return self.kind.quote

    def write_prefix_to(self, out: Sink) -> None:
        """Start a value by writing this encoder's prefix."""
        assert is_validating(out, self._output_type), (
            f"{out!r} does not validate {self._output_type.name}"
        )
        self._pending_brackets = 0
        prefix = self.get_prefix()
        if prefix:
            out.write(prefix)

    def write(
        self,
        text: str,
        out: Sink,
        start: int = 0,
        end: Optional[int] = None
    ) -> None:
        """Encode ``text[start:end]`` and write it to ``out``."""
        if start != 0 or end is not None:
            text = text[start:end]
        if not text:
            return
        encoded = _ENCODERS[self.kind](self, text, out)
        if encoded:
            out.write(encoded)

    def append(self, ch: str, out: Sink) -> "MediaEncoder":
        """Encode a single character."""
        if len(ch) != 1:
            raise ValueError(f"Expected a single character, got {len(ch)}")
        self.write(ch, out)
        return self

    def write_suffix_to(self, out: Sink) -> None:
        """Finish a value by writing this encoder's suffix."""
        assert is_validating(out, self._output_type), (
            f"{out!r} does not validate {self._output_type.name}"
        )
        suffix = self.get_suffix()
        if suffix:
            out.write(suffix)

    def encode(self, text: str) -> str:
        """Encode one complete value, prefix and suffix included."""
        out = io.StringIO()
        self.write_prefix_to(out)
        self.write(text, out)
        self.write_suffix_to(out)
        return out.getvalue()


class BufferState(Enum):
    """Lifecycle of a buffered value."""

    OPEN = "open"
    CLOSED = "closed"


class BufferedEncoder(MediaEncoder):
    """Encoder that needs a value's entire content before producing output.

    Writes accumulate in an internal buffer; the suffix transforms the whole
    value, writes it and closes the buffer. The prefix never depends on
    content and is written eagerly. Writing a prefix after the suffix starts a
    new value.

    Attributes:
        initial_capacity: Configured size hint, kept for introspection; the
            buffer is a list of chunks and grows on demand
        max_buffered_chars: Characters allowed in one value, unbounded when None
    """

    def __init__(
        self,
        kind: EncoderKind,
        output_type: MediaType,
        context: EncodingContext = EncodingContext.DEFAULT,
        initial_capacity: int = DEFAULT_BUFFER_CAPACITY,
        max_buffered_chars: Optional[int] = None
    ) -> None:
        if not kind.buffered or kind.input_type is None:
            raise ValueError(f"{kind.label} is not a buffered encoder")
        super().__init__(kind, kind.input_type, output_type, context)
        self.initial_capacity = initial_capacity
        self.max_buffered_chars = max_buffered_chars
        self.state = BufferState.OPEN
        self._buffer: List[str] = []
        self._length = 0

    @property
    def buffered_length(self) -> int:
        """Characters accumulated for the current value."""
        return self._length

    def write_prefix_to(self, out: Sink) -> None:
        if self.state is BufferState.CLOSED:
            self.state = BufferState.OPEN
        self._buffer = []
        self._length = 0
        super().write_prefix_to(out)

    def write(
        self,
        text: str,
        out: Sink,
        start: int = 0,
        end: Optional[int] = None
    ) -> None:
        if self.state is BufferState.CLOSED:
            raise EncoderStateError(f"{self.kind.label}: value already closed")
        if start != 0 or end is not None:
            text = text[start:end]
        if not text:
            return
        attempted = self._length + len(text)
        if self.max_buffered_chars is not None and attempted > self.max_buffered_chars:
            raise BufferLimitExceededError(self.max_buffered_chars, attempted)
        self._buffer.append(text)
        self._length = attempted

    def write_suffix_to(self, out: Sink) -> None:
        if self.state is BufferState.CLOSED:
            raise EncoderStateError(f"{self.kind.label}: value already closed")
        assert is_validating(out, self.valid_output_type), (
            f"{out!r} does not validate {self.valid_output_type.name}"
        )
        value = "".join(self._buffer)
        self._buffer = []
        self._length = 0
        self.state = BufferState.CLOSED
        logger.debug(
            "Flushing buffered value",
            extra={"encoder": self.kind.label, "length": len(value)}
        )
        out.write(_BUFFERED_TRANSFORMS[self.kind](self, value) + self.get_suffix())

    def rewrite_url(self, url: str) -> str:
        """Normalize, rewrite through the context, then check a URL."""
        rewritten = self.context.encode_url(normalize_url(url))
        check_url(rewritten)
        return rewritten


class PassthroughEncoder(MediaEncoder):
    """Forwards content already valid in its container, validating it first.

    Writes go through :func:`get_validator`, so validation is skipped when
    the destination already validates the content type itself.
    """

    def __init__(
        self,
        content_type: MediaType,
        container_type: MediaType,
        context: EncodingContext = EncodingContext.DEFAULT
    ) -> None:
        if not content_type.is_valid_in(container_type):
            raise ValueError(
                f"{content_type.name} is not valid in {container_type.name} unencoded"
            )
        super().__init__(EncoderKind.PASSTHROUGH, content_type, container_type, context)

    def write(
        self,
        text: str,
        out: Sink,
        start: int = 0,
        end: Optional[int] = None
    ) -> None:
        if start != 0 or end is not None:
            text = text[start:end]
        if text:
            get_validator(self.valid_input_type, out).write(text)


def _javascript_in_xhtml(encoder: MediaEncoder, text: str, out: Sink) -> str:
    if encoder.valid_input_type is not MediaType.JAVASCRIPT:
        return escapes.escape_json_in_xhtml(text)
    check_characters(MediaType.XHTML, text)
    if not encoder._uses_cdata:
        return text
    encoded = escapes.split_cdata_end(text, encoder._pending_brackets)
    encoder._pending_brackets = escapes.trailing_brackets(text, encoder._pending_brackets)
    return encoded


def _text_in_javascript(encoder: MediaEncoder, text: str, out: Sink) -> str:
    check_characters(MediaType.TEXT, text)
    return escapes.escape_text_in_javascript(text)


def _xhtml_attribute(encoder: MediaEncoder, text: str, out: Sink) -> str:
    return escapes.escape_text_in_xhtml_attribute(text, encoder.context.doctype.apos)


StreamingTransform = Callable[[MediaEncoder, str, Sink], str]

_ENCODERS: Dict[EncoderKind, StreamingTransform] = {
    EncoderKind.TEXT_IN_JAVASCRIPT: _text_in_javascript,
    EncoderKind.TEXT_IN_MYSQL: lambda e, text, out: escapes.escape_text_in_mysql(text),
    EncoderKind.TEXT_IN_PSQL: lambda e, text, out: escapes.escape_text_in_psql(text),
    EncoderKind.TEXT_IN_SH: lambda e, text, out: escapes.escape_text_in_sh(text),
    EncoderKind.TEXT_IN_XHTML: lambda e, text, out: escapes.escape_text_in_xhtml(text),
    EncoderKind.TEXT_IN_XHTML_ATTRIBUTE: _xhtml_attribute,
    EncoderKind.JAVASCRIPT_IN_XHTML: _javascript_in_xhtml,
    EncoderKind.JAVASCRIPT_IN_XHTML_ATTRIBUTE: _xhtml_attribute,
}

BufferedTransform = Callable[[BufferedEncoder, str], str]

_BUFFERED_TRANSFORMS: Dict[EncoderKind, BufferedTransform] = {
    EncoderKind.URL_IN_JAVASCRIPT: lambda e, url: escapes.escape_text_in_javascript(
        e.rewrite_url(url)
    ),
    EncoderKind.URL_IN_XHTML: lambda e, url: escapes.escape_text_in_xhtml(
        e.rewrite_url(url)
    ),
    EncoderKind.URL_IN_XHTML_ATTRIBUTE: lambda e, url: escapes.escape_text_in_xhtml_attribute(
        e.rewrite_url(url), e.context.doctype.apos
    ),
}


def passthrough_encoder(
    content_type: MediaType,
    container_type: MediaType,
    context: EncodingContext = EncodingContext.DEFAULT
) -> PassthroughEncoder:
    """Build the validate-only encoder for a pair that needs no escaping."""
    return PassthroughEncoder(content_type, container_type, context)
