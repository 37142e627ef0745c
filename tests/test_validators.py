"""Tests for input validators and sanitizers."""

from datetime import datetime, timedelta, timezone

from shortlink.core.validators import (
    is_valid_custom_code,
    is_valid_url,
    normalize_email,
    sanitize_short_code,
    to_naive_utc,
)


class TestURLValidation:
    """Test URL validation function."""

    def test_valid_urls(self):
        valid_urls = [
            "http://example.com",
            "https://example.com/page",
            "https://www.example.com/path/to/page",
            "http://subdomain.example.com:8080/path?query=value",
            "http://localhost:3000/",
        ]
        for url in valid_urls:
            assert is_valid_url(url), f"Should be valid: {url}"

    def test_invalid_urls(self):
        invalid_urls = [
            "not-a-url",
            "ftp://example.com",
            "javascript:alert(1)",
            "example.com",
            "",
            "http://",
            "http://intranet/page",
            "https://exa mple.com",
            "http://example.com:notaport/",
            "https://example.com/" + "a" * 2048,
        ]
        for url in invalid_urls:
            assert not is_valid_url(url), f"Should be invalid: {url}"


class TestShortCodes:
    def test_sanitize_accepts_generated_and_custom_codes(self):
        assert sanitize_short_code("aZ09xY") == "aZ09xY"
        assert sanitize_short_code("my-link_1") == "my-link_1"
        assert sanitize_short_code("  abc123 ") == "abc123"

    def test_sanitize_rejects_unsafe_codes(self):
        for code in ["", "../etc", "a/b", "favicon.ico", "x" * 33, "a%20b"]:
            assert sanitize_short_code(code) is None, code

    def test_custom_code_length_bounds(self):
        assert not is_valid_custom_code("ab")
        assert is_valid_custom_code("abc")
        assert is_valid_custom_code("a" * 32)
        assert not is_valid_custom_code("a" * 33)
        assert not is_valid_custom_code("has space")


class TestNormalisation:
    def test_aware_datetime_becomes_naive_utc(self):
        aware = datetime(2026, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_naive_utc(aware) == datetime(2026, 1, 1, 10, 0)

    def test_naive_datetime_and_none_pass_through(self):
        naive = datetime(2026, 1, 1, 12, 0)
        assert to_naive_utc(naive) is naive
        assert to_naive_utc(None) is None

    def test_normalize_email(self):
        assert normalize_email(" Alice@Example.COM ") == "alice@example.com"
        assert normalize_email("not-an-email") is None
