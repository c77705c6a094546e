"""Encoding context supplied by the host of an output stream.

The context is the only way encoders learn about their surroundings: how URLs
are rewritten (session ids, context paths), the doctype being produced and
whether markup is serialized for an XML or an SGML-like parser.
"""

from dataclasses import dataclass
from typing import Callable, ClassVar, Optional

from .types import DEFAULT_DOCTYPE, DEFAULT_SERIALIZATION, Doctype, Serialization

UrlRewriter = Callable[[str], str]


@dataclass(frozen=True)
class EncodingContext:
    """Immutable per-request capability bundle.

    Attributes:
        url_rewriter: Rewrites a URL for the current request; identity when None.
            The result must be valid RFC 3986, which buffered URL encoders check.
        doctype: Doctype of the document being written
        serialization: XML or SGML-like serialization
    """

    url_rewriter: Optional[UrlRewriter] = None
    doctype: Doctype = DEFAULT_DOCTYPE
    serialization: Serialization = DEFAULT_SERIALIZATION

    DEFAULT: ClassVar["EncodingContext"]
    XML: ClassVar["EncodingContext"]
    SGML: ClassVar["EncodingContext"]

    def encode_url(self, url: str) -> str:
        """Encode a URL for the current encoding context."""
        if self.url_rewriter is None:
            return url
        return self.url_rewriter(url)


EncodingContext.DEFAULT = EncodingContext()
EncodingContext.XML = EncodingContext(serialization=Serialization.XML)
EncodingContext.SGML = EncodingContext(serialization=Serialization.SGML)
