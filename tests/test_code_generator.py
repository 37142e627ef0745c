"""Tests for random short code generation."""

import pytest

from shortlink.services.code_generator import BASE62_CHARS, generate_short_code


class TestGenerateShortCode:
    """Test generate_short_code()."""

    def test_default_length_is_six(self):
        assert len(generate_short_code()) == 6

    def test_requested_length(self):
        for length in (1, 4, 10, 32):
            assert len(generate_short_code(length)) == length

    def test_uses_base62_alphabet_only(self):
        code = generate_short_code(500)
        assert set(code) <= set(BASE62_CHARS)

    def test_ten_thousand_codes_are_distinct(self):
        codes = {generate_short_code(6) for _ in range(10_000)}
        assert len(codes) == 10_000

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            generate_short_code(0)
