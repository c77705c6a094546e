"""Exception taxonomy for contextual encoding.

Every error is raised synchronously by the operation that detected it and is
fatal to that logical write. Characters forwarded to the sink before the
failing one stay written.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from contextual_encoding.media.types import MediaType


class EncodingError(Exception):
    """Base exception for all encoding and validation failures."""


class InvalidCharacterError(EncodingError):
    """A character is not valid for the media type it was claimed to be."""

    def __init__(
        self,
        code_point: int,
        media_type: Optional["MediaType"] = None,
        message: Optional[str] = None
    ) -> None:
        self.code_point = code_point
        self.media_type = media_type
        if message is None:
            where = f" in {media_type.name}" if media_type is not None else ""
            message = f"Invalid character{where}: U+{code_point:04X}"
        super().__init__(message)


class MalformedUrlError(InvalidCharacterError):
    """A URL (usually after rewriting) is not RFC 3986 syntax."""

    def __init__(self, url: str, position: int, reason: str) -> None:
        self.url = url
        self.position = position
        self.reason = reason
        code_point = ord(url[position]) if 0 <= position < len(url) else -1
        super().__init__(
            code_point,
            None,
            f"Malformed URL at index {position}: {reason}: {url!r}"
        )


class UnsupportedConversionError(EncodingError):
    """No escaping rule exists for a content/container pair."""

    def __init__(self, content_type: "MediaType", container_type: "MediaType") -> None:
        self.content_type = content_type
        self.container_type = container_type
        super().__init__(
            f"Unable to find encoder for {content_type.content_type} "
            f"in {container_type.content_type}"
        )


class EncoderStateError(EncodingError):
    """A buffered value or text region was written to after being closed."""


class BufferLimitExceededError(EncodingError):
    """A buffered value grew past the configured character limit."""

    def __init__(self, limit: int, attempted: int) -> None:
        self.limit = limit
        self.attempted = attempted
        super().__init__(
            f"Buffered value of {attempted} characters exceeds limit of {limit}"
        )
