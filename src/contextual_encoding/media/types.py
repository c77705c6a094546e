"""Media type taxonomy and compatibility facts.

The set of media types is fixed. Which type is already valid inside which
other type is a hard-coded table, not something derived from the character
predicates; it must stay in step with the selection matrix in
``contextual_encoding.encoding.selection``.
"""

from enum import Enum
from typing import Dict, FrozenSet


class MarkupType(Enum):
    """Comment syntax available for translation lookup markup."""

    NONE = "none"              # Comments impossible or undesirable
    TEXT = "text"              # Plain text, never marked up
    XHTML = "xhtml"            # <!-- ... -->
    JAVASCRIPT = "javascript"  # /* ... */
    MYSQL = "mysql"            # /* ... */
    PSQL = "psql"              # /* ... */
    SH = "sh"                  # # ... (line comment)


class MediaType(Enum):
    """Supported media types.

    Attributes:
        content_type: Canonical content-type label
        markup_type: Lookup-comment syntax usable inside this type
    """

    JAVASCRIPT = ("text/javascript", MarkupType.JAVASCRIPT)
    JSON = ("application/json", MarkupType.NONE)
    LD_JSON = ("application/ld+json", MarkupType.NONE)
    MYSQL = ("text/x-mysql", MarkupType.MYSQL)
    PSQL = ("text/x-psql", MarkupType.PSQL)
    SH = ("text/x-sh", MarkupType.SH)
    TEXT = ("text/plain", MarkupType.TEXT)
    URL = ("text/uri-list", MarkupType.NONE)
    XHTML = ("application/xhtml+xml", MarkupType.XHTML)
    XHTML_ATTRIBUTE = ("text/x-xhtml-attribute", MarkupType.NONE)

    def __init__(self, content_type: str, markup_type: MarkupType) -> None:
        self.content_type = content_type
        self.markup_type = markup_type

    @classmethod
    def from_content_type(cls, content_type: str) -> "MediaType":
        """Look up a media type by its content-type label.

        Parameters such as ``; charset=utf-8`` are ignored and the comparison is
        case-insensitive.

        Raises:
            ValueError: If no media type has that label
        """
        label = content_type.split(";", 1)[0].strip().lower()
        for media_type in cls:
            if media_type.content_type == label:
                return media_type
        raise ValueError(f"Unknown content type: {content_type}")

    @property
    def is_javascript(self) -> bool:
        """Whether this is one of the mutually interchangeable script types."""
        return self in JAVASCRIPT_TYPES

    def is_valid_in(self, container: "MediaType") -> bool:
        """Whether content of this type is valid, unmodified, inside ``container``."""
        return container in _VALID_IN[self]

    def is_identical_to(self, other: "MediaType") -> bool:
        """Whether validating ``other`` as this type is a no-op."""
        return self is other


JAVASCRIPT_TYPES: FrozenSet[MediaType] = frozenset({
    MediaType.JAVASCRIPT,
    MediaType.JSON,
    MediaType.LD_JSON,
})

# content -> containers that accept it without any encoding
_VALID_IN: Dict[MediaType, FrozenSet[MediaType]] = {
    MediaType.JAVASCRIPT: JAVASCRIPT_TYPES | {MediaType.TEXT},
    MediaType.JSON: JAVASCRIPT_TYPES | {MediaType.TEXT},
    MediaType.LD_JSON: JAVASCRIPT_TYPES | {MediaType.TEXT},
    MediaType.MYSQL: frozenset({MediaType.MYSQL, MediaType.TEXT}),
    MediaType.PSQL: frozenset({MediaType.PSQL, MediaType.TEXT}),
    MediaType.SH: frozenset({MediaType.SH, MediaType.TEXT}),
    MediaType.TEXT: frozenset({MediaType.TEXT}),
    MediaType.URL: frozenset({MediaType.URL, MediaType.TEXT}),
    MediaType.XHTML: frozenset({MediaType.XHTML, MediaType.TEXT}),
    MediaType.XHTML_ATTRIBUTE: frozenset({
        MediaType.XHTML_ATTRIBUTE,
        MediaType.XHTML,
        MediaType.TEXT,
    }),
}


class Doctype(Enum):
    """Document type of the (X)HTML being produced."""

    HTML5 = "html5"
    STRICT = "strict"
    TRANSITIONAL = "transitional"
    FRAMESET = "frameset"
    NONE = "none"

    @property
    def apos(self) -> str:
        """Character reference for an apostrophe.

        ``&apos;`` is not defined by the HTML 4 doctypes.
        """
        return "&apos;" if self is Doctype.HTML5 else "&#39;"


class Serialization(Enum):
    """Whether (X)HTML is serialized for an SGML-like or an XML parser."""

    SGML = "sgml"
    XML = "xml"


DEFAULT_DOCTYPE = Doctype.HTML5
DEFAULT_SERIALIZATION = Serialization.SGML
