"""Tests for streaming and buffered encoders."""

import io
import logging

import pytest

from contextual_encoding.encoding.encoders import (
    CDATA_PREFIX,
    CDATA_SUFFIX,
    BufferedEncoder,
    BufferState,
    EncoderKind,
    MediaEncoder,
    passthrough_encoder,
)
from contextual_encoding.encoding.selection import select_encoder
from contextual_encoding.media.context import EncodingContext
from contextual_encoding.media.types import Doctype, MediaType
from contextual_encoding.shared.config import BufferConfig
from contextual_encoding.shared.errors import (
    BufferLimitExceededError,
    EncoderStateError,
    InvalidCharacterError,
    MalformedUrlError,
)
from contextual_encoding.validation.validators import ValidMediaInput

DEFAULT = EncodingContext.DEFAULT


def encode(content, container, text, context=DEFAULT):
    return select_encoder(context, content, container).encode(text)


class TestEncoderKind:
    """Tests for the tagged encoder variants."""

    def test_kinds_are_distinct(self):
        """Test that no kind aliases another."""
        assert len(EncoderKind) == 12
        assert len({kind.label for kind in EncoderKind}) == 12

    def test_parameters(self):
        """Test per-kind parameters."""
        assert EncoderKind.TEXT_IN_JAVASCRIPT.quote == '"'
        assert EncoderKind.TEXT_IN_SH.quote == "'"
        assert EncoderKind.TEXT_IN_XHTML.quote == ""
        assert EncoderKind.URL_IN_JAVASCRIPT.buffered
        assert EncoderKind.URL_IN_JAVASCRIPT.input_type is MediaType.URL
        assert not EncoderKind.TEXT_IN_MYSQL.buffered
        assert EncoderKind.JAVASCRIPT_IN_XHTML.input_type is None

    def test_input_type_must_match_kind(self):
        """Test that a kind cannot be bound to a foreign input type."""
        with pytest.raises(ValueError, match="does not accept"):
            MediaEncoder(EncoderKind.TEXT_IN_XHTML, MediaType.URL, MediaType.XHTML)


class TestTextEncoders:
    """Tests for text in every container."""

    def test_javascript(self):
        """Test text in a JavaScript string."""
        assert encode(MediaType.TEXT, MediaType.JAVASCRIPT, 'a"b') == '"a\\"b"'
        assert encode(MediaType.TEXT, MediaType.JSON, "x\ny") == '"x\\ny"'

    def test_javascript_rejects_invalid_text(self):
        """Test that text input is validated."""
        with pytest.raises(InvalidCharacterError):
            encode(MediaType.TEXT, MediaType.LD_JSON, "\x00")

    def test_sql_and_shell(self):
        """Test quoting for SQL and shell literals."""
        assert encode(MediaType.TEXT, MediaType.MYSQL, "it's") == "'it\\'s'"
        assert encode(MediaType.TEXT, MediaType.PSQL, "it's") == "'it''s'"
        assert encode(MediaType.TEXT, MediaType.SH, "it's") == "'it'\\''s'"

    def test_xhtml(self):
        """Test text in XHTML element content."""
        assert encode(MediaType.TEXT, MediaType.XHTML, "<b>") == "&lt;b&gt;"

    def test_xhtml_attribute_follows_doctype(self):
        """Test the apostrophe reference per doctype."""
        assert encode(MediaType.TEXT, MediaType.XHTML_ATTRIBUTE, "'") == "&apos;"
        strict = EncodingContext(doctype=Doctype.STRICT)
        assert encode(MediaType.TEXT, MediaType.XHTML_ATTRIBUTE, "'", strict) == "&#39;"

    def test_append(self):
        """Test single character writes."""
        out = io.StringIO()
        encoder = select_encoder(DEFAULT, MediaType.TEXT, MediaType.XHTML)
        encoder.append("<", out).append("a", out)
        assert out.getvalue() == "&lt;a"
        with pytest.raises(ValueError):
            encoder.append("ab", out)

    def test_write_range(self):
        """Test writing part of a string."""
        out = io.StringIO()
        encoder = select_encoder(DEFAULT, MediaType.TEXT, MediaType.XHTML)
        encoder.write("x<y>z", out, 1, 4)
        assert out.getvalue() == "&lt;y&gt;"


class TestScriptEncoders:
    """Tests for scripts in XHTML."""

    def test_sgml_serialization_is_unchanged(self):
        """Test that SGML script elements need no wrapping."""
        script = "if (a < b && c) {}"
        assert encode(MediaType.JAVASCRIPT, MediaType.XHTML, script) == script

    def test_xml_serialization_uses_cdata(self):
        """Test the CDATA wrapper for XML serialization."""
        encoded = encode(MediaType.JAVASCRIPT, MediaType.XHTML, "x < y", EncodingContext.XML)
        assert encoded == CDATA_PREFIX + "x < y" + CDATA_SUFFIX
        assert encoded == "//<![CDATA[\nx < y\n//]]>"

    def test_cdata_end_split_across_writes(self):
        """Test that "]]>" spanning two writes is still split."""
        out = io.StringIO()
        encoder = select_encoder(EncodingContext.XML, MediaType.JAVASCRIPT, MediaType.XHTML)
        encoder.write_prefix_to(out)
        encoder.write("a]", out)
        encoder.write("]>b", out)
        encoder.write_suffix_to(out)
        assert out.getvalue() == "//<![CDATA[\na]]]]><![CDATA[>b\n//]]>"

    def test_json_in_xhtml(self):
        """Test JSON in a script element."""
        encoded = encode(MediaType.JSON, MediaType.XHTML, '{"a":"</script>"}')
        assert encoded == '{"a":"\\u003c/script\\u003e"}'

    def test_script_in_attribute(self):
        """Test script in an event handler attribute."""
        assert encode(MediaType.JAVASCRIPT, MediaType.XHTML_ATTRIBUTE, 'f("x")') == (
            "f(&quot;x&quot;)"
        )

    def test_script_must_be_valid_xhtml(self):
        """Test that characters invalid in XHTML are rejected."""
        with pytest.raises(InvalidCharacterError):
            encode(MediaType.JAVASCRIPT, MediaType.XHTML, "a\x00")


class TestBufferedEncoder:
    """Tests for buffered URL encoders."""

    def test_buffered_across_writes(self):
        """Test that writes are transformed once, at the suffix."""
        out = io.StringIO()
        encoder = select_encoder(DEFAULT, MediaType.URL, MediaType.JAVASCRIPT)
        assert isinstance(encoder, BufferedEncoder)

        encoder.write_prefix_to(out)
        assert out.getvalue() == '"'
        for part in ("http://", "example.com/", "a b"):
            encoder.write(part, out)
        assert out.getvalue() == '"'
        assert encoder.buffered_length == len("http://example.com/a b")

        encoder.write_suffix_to(out)
        assert out.getvalue() == '"http://example.com/a%20b"'
        assert encoder.state is BufferState.CLOSED

    def test_equals_single_write(self):
        """Test that chunking does not change the result."""
        encoder = select_encoder(DEFAULT, MediaType.URL, MediaType.JAVASCRIPT)
        assert encoder.encode("http://example.com/a b") == '"http://example.com/a%20b"'

    def test_write_after_close(self):
        """Test that a closed value rejects writes and a second suffix."""
        out = io.StringIO()
        encoder = select_encoder(DEFAULT, MediaType.URL, MediaType.XHTML)
        encoder.write_prefix_to(out)
        encoder.write("/a", out)
        encoder.write_suffix_to(out)
        with pytest.raises(EncoderStateError):
            encoder.write("/b", out)
        with pytest.raises(EncoderStateError):
            encoder.write_suffix_to(out)

    def test_prefix_starts_new_value(self):
        """Test that a closed encoder is reusable after a new prefix."""
        encoder = select_encoder(DEFAULT, MediaType.URL, MediaType.XHTML)
        assert encoder.encode("/a") == "/a"
        assert encoder.encode("/b") == "/b"
        assert encoder.state is BufferState.CLOSED

    def test_url_in_xhtml(self):
        """Test normalization then XHTML escaping."""
        encoded = encode(MediaType.URL, MediaType.XHTML, "/a?x=1&y=<")
        assert encoded == "/a?x=1&amp;y=%3C"

    def test_query_brackets_are_encoded(self):
        """Test that brackets in a query are repaired rather than rejected."""
        encoded = encode(MediaType.URL, MediaType.XHTML_ATTRIBUTE, "/search?filter[]=a b")
        assert encoded == "/search?filter%5B%5D=a%20b"
        encoded = encode(MediaType.URL, MediaType.JAVASCRIPT, "http://[::1]/p?a[0]=1")
        assert encoded == '"http://[::1]/p?a%5B0%5D=1"'

    def test_rewriter_is_applied(self):
        """Test URL rewriting through the context."""
        context = EncodingContext(url_rewriter=lambda url: url + ";jsessionid=abc")
        encoded = encode(MediaType.URL, MediaType.XHTML_ATTRIBUTE, "/p?a=1&b=2", context)
        assert encoded == "/p?a=1&amp;b=2;jsessionid=abc"

    def test_rewritten_url_is_checked(self):
        """Test that an invalid rewrite is rejected."""
        context = EncodingContext(url_rewriter=lambda url: url + " x")
        with pytest.raises(MalformedUrlError):
            encode(MediaType.URL, MediaType.XHTML, "/p", context)

    def test_buffer_limit(self):
        """Test the optional size cap."""
        encoder = select_encoder(
            DEFAULT, MediaType.URL, MediaType.XHTML,
            BufferConfig(initial_capacity=4, max_buffered_chars=8)
        )
        out = io.StringIO()
        encoder.write_prefix_to(out)
        encoder.write("12345", out)
        with pytest.raises(BufferLimitExceededError) as exc_info:
            encoder.write("6789", out)
        assert exc_info.value.limit == 8
        assert exc_info.value.attempted == 9

    def test_unbounded_by_default(self):
        """Test that no cap applies by default."""
        encoder = select_encoder(DEFAULT, MediaType.URL, MediaType.XHTML)
        assert encoder.max_buffered_chars is None
        assert encoder.initial_capacity == 128
        assert encoder.encode("/" + "a" * 100000) == "/" + "a" * 100000

    def test_requires_buffered_kind(self):
        """Test that streaming kinds cannot be buffered."""
        with pytest.raises(ValueError, match="not a buffered encoder"):
            BufferedEncoder(EncoderKind.TEXT_IN_XHTML, MediaType.XHTML)


class RecordingSink(ValidMediaInput):
    """Sink advertising XHTML input that records writes without checking."""

    def __init__(self):
        self.written = []

    @property
    def valid_input_type(self):
        return MediaType.XHTML

    def write(self, text):
        self.written.append(text)


class TestPassthroughEncoder:
    """Tests for validate-only encoders."""

    def test_valid_content_is_unchanged(self):
        """Test that already-valid content passes through."""
        encoder = passthrough_encoder(MediaType.XHTML_ATTRIBUTE, MediaType.XHTML)
        assert encoder.encode("a &amp; b") == "a &amp; b"

    def test_content_is_validated(self):
        """Test that content is checked against its own type."""
        encoder = passthrough_encoder(MediaType.MYSQL, MediaType.TEXT)
        with pytest.raises(InvalidCharacterError):
            encoder.encode("\x7f")

    def test_validation_skipped_for_identical_downstream(self):
        """Test that a downstream validating the same type is trusted."""
        sink = RecordingSink()
        encoder = passthrough_encoder(MediaType.XHTML, MediaType.XHTML)
        encoder.write("\x00", sink)
        encoder.append("\x01", sink)
        assert sink.written == ["\x00", "\x01"]

    def test_requires_compatible_pair(self):
        """Test that pairs needing encoding cannot pass through."""
        with pytest.raises(ValueError, match="not valid in"):
            passthrough_encoder(MediaType.TEXT, MediaType.XHTML)

    def test_rejection_goes_through_validator(self, caplog):
        """Test that a raw sink is guarded by the content type validator."""
        out = io.StringIO()
        encoder = passthrough_encoder(MediaType.SH, MediaType.TEXT)
        with caplog.at_level(logging.WARNING, logger="contextual_encoding.validation.validators"):
            encoder.write("ok", out)
            with pytest.raises(InvalidCharacterError) as exc_info:
                encoder.write("a\x1fb", out)

        assert exc_info.value.code_point == 0x1F
        assert out.getvalue() == "ok"
        record = caplog.records[-1]
        assert record.getMessage() == "Rejected character"
        assert record.media_type == "SH"

    def test_script_content_is_not_checked(self):
        """Test that script types accept every character."""
        encoder = passthrough_encoder(MediaType.JSON, MediaType.JAVASCRIPT)
        assert encoder.encode("\x00\ufffe") == "\x00\ufffe"
