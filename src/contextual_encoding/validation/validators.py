"""Streaming validators that guard a downstream sink.

A validator is a fail-fast gate: every write is checked against the predicate
of the validator's media type and forwarded only if every character passes.
Validators hold no buffered data and no mutable state, so one instance may be
shared freely.
"""

from typing import Any, Optional, Protocol

from contextual_encoding.media.types import MediaType
from contextual_encoding.shared.errors import InvalidCharacterError
from contextual_encoding.shared.logging import get_logger

from .characters import check_character, check_characters, is_passthrough

logger = get_logger(__name__, None, "validator")


class Sink(Protocol):
    """Anything accepting text, such as ``io.StringIO`` or an open text file."""

    def write(self, text: str) -> Any:
        ...


class ValidMediaInput:
    """Something that guarantees the media type of what it accepts."""

    @property
    def valid_input_type(self) -> MediaType:
        raise NotImplementedError

    def accepts(self, input_type: MediaType) -> bool:
        """Whether input labeled ``input_type`` is validated on the way through."""
        return input_type.is_valid_in(self.valid_input_type)

    def can_skip(self, input_type: MediaType) -> bool:
        """Whether input labeled ``input_type`` needs no validation at all."""
        return self.valid_input_type.is_identical_to(input_type)


class ValidMediaOutput:
    """Something that guarantees the media type of what it produces."""

    @property
    def valid_output_type(self) -> MediaType:
        raise NotImplementedError


class ValidMediaFilter(ValidMediaInput, ValidMediaOutput):
    """Both a validating input and a valid output."""


def is_validating(out: Any, media_type: MediaType) -> bool:
    """Whether ``out`` is known to validate ``media_type``.

    Raw sinks are trusted, matching how the caller declared them.
    """
    if isinstance(out, ValidMediaInput):
        return out.accepts(media_type)
    return True


class MediaValidator(ValidMediaFilter):
    """Character gate for one media type in front of a sink.

    Attributes:
        out: Downstream sink receiving validated text
    """

    def __init__(self, media_type: MediaType, out: Sink) -> None:
        self._media_type = media_type
        self.out = out

    def __repr__(self) -> str:
        return f"MediaValidator({self._media_type.name})"

    @property
    def media_type(self) -> MediaType:
        return self._media_type

    @property
    def valid_input_type(self) -> MediaType:
        return self._media_type

    @property
    def valid_output_type(self) -> MediaType:
        return self._media_type

    def write(self, text: str, start: int = 0, end: Optional[int] = None) -> None:
        """Validate ``text[start:end]`` and forward it."""
        if end is None:
            end = len(text)
        try:
            check_characters(self._media_type, text, start, end)
        except InvalidCharacterError as e:
            logger.warning(
                "Rejected character",
                extra={"media_type": self._media_type.name, "code_point": e.code_point}
            )
            raise
        if start == 0 and end == len(text):
            self.out.write(text)
        elif start < end:
            self.out.write(text[start:end])

    def append(self, ch: str) -> "MediaValidator":
        """Validate and forward a single character."""
        check_character(self._media_type, ch)
        self.out.write(ch)
        return self

    def flush(self) -> None:
        flush = getattr(self.out, "flush", None)
        if flush is not None:
            flush()


def get_validator(content_type: MediaType, out: Sink) -> Sink:
    """Get a sink that validates ``content_type`` characters in front of ``out``.

    Returns ``out`` itself when it already makes validation of
    ``content_type`` unnecessary, or when ``content_type`` accepts every
    character.
    """
    if isinstance(out, ValidMediaInput) and out.can_skip(content_type):
        return out
    if is_passthrough(content_type):
        return out
    return MediaValidator(content_type, out)
