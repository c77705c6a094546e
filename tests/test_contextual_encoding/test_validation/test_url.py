"""Tests for URL normalization and syntax checks."""

import pytest

from contextual_encoding.shared.errors import InvalidCharacterError, MalformedUrlError
from contextual_encoding.validation.url import check_url, is_valid_url, normalize_url


class TestNormalizeUrl:
    """Tests for normalize_url."""

    def test_space_is_percent_encoded(self):
        """Test encoding of a space."""
        assert normalize_url("http://example.com/a b") == "http://example.com/a%20b"

    def test_non_ascii_is_utf8_encoded(self):
        """Test UTF-8 percent-encoding with uppercase hex."""
        assert normalize_url("/caf\u00e9") == "/caf%C3%A9"

    def test_existing_triples_are_kept(self):
        """Test that valid percent-encoding is not double encoded."""
        assert normalize_url("/a%20b%2F") == "/a%20b%2F"

    def test_stray_percent_is_encoded(self):
        """Test that a percent not starting a triple is encoded."""
        assert normalize_url("/100%") == "/100%25"
        assert normalize_url("/%zz") == "/%25zz"

    def test_reserved_characters_keep_their_meaning(self):
        """Test that delimiters are left alone."""
        url = "http://user@host:80/p;x?q=1&r=2#frag"
        assert normalize_url(url) == url

    def test_brackets_outside_host_are_encoded(self):
        """Test that query and path brackets are percent-encoded."""
        assert normalize_url("/search?filter[]=a b") == "/search?filter%5B%5D=a%20b"
        assert normalize_url("http://host/x[1]#[y]") == "http://host/x%5B1%5D#%5By%5D"

    def test_ip_literal_brackets_are_kept(self):
        """Test that the brackets of an IPv6 host survive."""
        url = "http://[2001:db8::7]:8080/a[b]"
        assert normalize_url(url) == "http://[2001:db8::7]:8080/a%5Bb%5D"
        check_url(normalize_url(url))

    @pytest.mark.parametrize("url", [
        "/search?filter[]=a b",
        "/a[b]",
        "mailto:x[1]@example.com",
        "//host/p?q=[]",
    ])
    def test_normalized_urls_pass_check(self, url):
        """Test that normalizing repairs everything the checker rejects for brackets."""
        assert is_valid_url(normalize_url(url))

    def test_lone_surrogate(self):
        """Test that characters without a UTF-8 form are rejected."""
        with pytest.raises(InvalidCharacterError):
            normalize_url("/a\ud800")


class TestCheckUrl:
    """Tests for check_url."""

    @pytest.mark.parametrize("url", [
        "",
        "http://example.com/a%20b",
        "//example.com/path",
        "/relative?x=1#top",
        "mailto:someone@example.com",
        "http://[::1]:8080/",
        "http://[2001:db8::7]/",
        "page.html",
    ])
    def test_valid(self, url):
        """Test well-formed URI references."""
        check_url(url)
        assert is_valid_url(url)

    @pytest.mark.parametrize("url, position, reason", [
        ("a b", 1, "character not allowed"),
        ("/%2", 1, "incomplete percent-encoding"),
        ("1http:x", 0, "invalid scheme"),
        ("a#b#c", 3, "second fragment delimiter"),
        ("/a[b]", 2, "bracket outside of host"),
        ("http://[zz]/", 7, "malformed IP literal"),
        ("http://[::1]x/", 12, "malformed port"),
    ])
    def test_invalid(self, url, position, reason):
        """Test the first violation is reported with its position."""
        with pytest.raises(MalformedUrlError) as exc_info:
            check_url(url)
        assert exc_info.value.position == position
        assert exc_info.value.reason == reason
        assert not is_valid_url(url)

    def test_malformed_url_is_an_invalid_character(self):
        """Test that one except clause catches both errors."""
        with pytest.raises(InvalidCharacterError):
            check_url("a b")
