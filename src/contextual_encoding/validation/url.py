"""RFC 3986 URL normalization and whole-value syntax checks.

URL validity is a property of the complete value: a percent sign is only valid
when followed by two hex digits, brackets only inside an IP-literal host, and
a colon in the first segment only after a well-formed scheme. These checks run
on finished values, which is why URL encoders buffer.
"""

import re
from typing import Match, Pattern

from contextual_encoding.media.types import MediaType
from contextual_encoding.shared.errors import InvalidCharacterError, MalformedUrlError

from .characters import URL_CHARACTER_CLASS

# Everything RFC 3986 does not allow, plus any percent not starting a triple
_NOT_URL_CHARACTER: Pattern[str] = re.compile(
    "(?:[^" + URL_CHARACTER_CLASS + "]|%(?![0-9A-Fa-f]{2}))+"
)
_URL_CHARACTER: Pattern[str] = re.compile("[" + URL_CHARACTER_CLASS + "]*")
_SCHEME: Pattern[str] = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_BAD_PERCENT: Pattern[str] = re.compile(r"%(?![0-9A-Fa-f]{2})")
_IP_LITERAL: Pattern[str] = re.compile(r"\[[0-9A-Fa-fvV:.\-_~!$&'()*+,;=]+\]")
_BRACKET: Pattern[str] = re.compile(r"[\[\]]")


def _pct_encode(match: Match[str]) -> str:
    """URL encodes the UTF-8 octets of the matched characters."""
    value = match.group(0)
    try:
        octets = value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidCharacterError(ord(value[e.start]), MediaType.URL) from e
    return "".join(f"%{octet:02X}" for octet in octets)


def normalize_url(url: str) -> str:
    """Percent-encode the characters that cannot appear unescaped in a URL.

    Existing percent-encoded triples are kept; a ``%`` that does not start a
    triple becomes ``%25``. Reserved characters keep their meaning, except
    brackets outside the host, which only an IP literal may hold.

    Raises:
        InvalidCharacterError: For lone surrogates, which have no UTF-8 form
    """
    url = _NOT_URL_CHARACTER.sub(_pct_encode, url)
    colon = _scheme_colon(url)
    hier_start = 0
    if colon != -1 and _SCHEME.fullmatch(url, 0, colon):
        hier_start = colon + 1
    authority = _authority_span(url, hier_start)
    return _BRACKET.sub(
        lambda match: match.group(0) if match.start() in authority else _pct_encode(match),
        url
    )


def _scheme_colon(url: str) -> int:
    """Index of the colon ending a scheme, or -1 when the first segment has none."""
    first_delimiter = len(url)
    for delimiter in "/?#":
        index = url.find(delimiter)
        if index != -1:
            first_delimiter = min(first_delimiter, index)
    return url.find(":", 0, first_delimiter)


def _authority_span(url: str, hier_start: int) -> range:
    if not url.startswith("//", hier_start):
        return range(0)
    start = hier_start + 2
    end = len(url)
    for delimiter in "/?#":
        index = url.find(delimiter, start)
        if index != -1:
            end = min(end, index)
    return range(start, end)


def check_url(url: str) -> None:
    """Check that ``url`` is an RFC 3986 URI reference.

    Raises:
        MalformedUrlError: Describing the first violation found
    """
    valid = _URL_CHARACTER.match(url)
    if valid.end() != len(url):
        raise MalformedUrlError(url, valid.end(), "character not allowed")

    bad_percent = _BAD_PERCENT.search(url)
    if bad_percent is not None:
        raise MalformedUrlError(url, bad_percent.start(), "incomplete percent-encoding")

    # Scheme, when the first segment holds a colon
    colon = _scheme_colon(url)
    hier_start = 0
    if colon != -1:
        if not _SCHEME.fullmatch(url, 0, colon):
            raise MalformedUrlError(url, 0, "invalid scheme")
        hier_start = colon + 1

    fragment = url.find("#")
    if fragment != -1 and url.find("#", fragment + 1) != -1:
        raise MalformedUrlError(url, url.find("#", fragment + 1), "second fragment delimiter")

    authority = _authority_span(url, hier_start)
    for bracket in _BRACKET.finditer(url):
        if bracket.start() not in authority:
            raise MalformedUrlError(url, bracket.start(), "bracket outside of host")
    if authority and "[" in url[authority.start:authority.stop]:
        host = url[authority.start:authority.stop].rsplit("@", 1)[-1]
        literal = _IP_LITERAL.match(host)
        if literal is None:
            raise MalformedUrlError(url, authority.start, "malformed IP literal")
        port = host[literal.end():]
        if port and not re.fullmatch(r":[0-9]*", port):
            raise MalformedUrlError(url, authority.stop - len(port), "malformed port")


def is_valid_url(url: str) -> bool:
    """Whether ``url`` passes :func:`check_url`."""
    try:
        check_url(url)
    except MalformedUrlError:
        return False
    return True
