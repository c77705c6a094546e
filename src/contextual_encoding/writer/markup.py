"""Translation lookup markup.

Values that came from a translation lookup may be wrapped in comments naming
their lookup key, so translation tooling can locate them in generated output.
Comments are written into the container, outside of any quoting added by the
text encoder, and only in containers having a block comment syntax.
"""

import re
from typing import Any, Callable, Dict, Optional, Pattern, Tuple

from contextual_encoding.encoding.encoders import MediaEncoder
from contextual_encoding.media.types import MarkupType
from contextual_encoding.validation.validators import Sink

# Written into the container as-is; the value itself is always encoded
COMMENT_DELIMITERS: Dict[MarkupType, Tuple[str, str]] = {
    MarkupType.XHTML: ("<!--", "-->"),
    MarkupType.JAVASCRIPT: ("/*", "*/"),
    MarkupType.MYSQL: ("/*", "*/"),
    MarkupType.PSQL: ("/*", "*/"),
}

_UNSAFE_KEY_CHARACTERS: Pattern[str] = re.compile(r"[^A-Za-z0-9._:/\-]")

MarkupHook = Callable[[Any, MarkupType, bool, MediaEncoder, Sink], None]


def lookup_key(value: Any) -> Optional[str]:
    """The translation key carried by ``value``, if any."""
    key = getattr(value, "translation_key", None)
    if key is None:
        return None
    return str(key)


def _comment_body(key: str, max_length: int) -> str:
    body = _UNSAFE_KEY_CHARACTERS.sub("_", key[:max_length])
    # "--" may not appear inside an XML comment
    while "--" in body:
        body = body.replace("--", "-_")
    return body


def write_markup(
    value: Any,
    markup_type: MarkupType,
    wrap_with_encoder: bool,
    encoder: MediaEncoder,
    out: Sink,
    enabled: bool = False,
    max_key_length: int = 256
) -> None:
    """Write an arbitrary value as text, with optional lookup comments.

    Args:
        value: Value to write, coerced with ``str``
        markup_type: Comment syntax of the container ``out`` accepts
        wrap_with_encoder: Whether to write the encoder prefix and suffix
            around the value, inside the comments
        encoder: Text encoder for the value
        out: Destination, accepting the container type
        enabled: Whether lookup comments are written at all
        max_key_length: Longest lookup key written into a comment
    """
    delimiters = COMMENT_DELIMITERS.get(markup_type) if enabled else None
    key = lookup_key(value) if delimiters is not None else None

    if key is not None:
        out.write(f"{delimiters[0]} {_comment_body(key, max_key_length)} {delimiters[1]}")
    if wrap_with_encoder:
        encoder.write_prefix_to(out)
    encoder.write(str(value), out)
    if wrap_with_encoder:
        encoder.write_suffix_to(out)
    if key is not None:
        out.write(f"{delimiters[0]} /{_comment_body(key, max_key_length)} {delimiters[1]}")
