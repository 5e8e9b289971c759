"""
Tests for QueryEncoder.

Tests:
- Percent-encoding of query text
- Fixed page size and safe-search flag
- Blank input rejection
- Fallback term when text cannot be encoded
"""

import logging

import pytest

from photo_search.application.search.query_encoder import MAX_QUERY_LENGTH, QueryEncoder
from photo_search.shared.exceptions import ConfigurationError, EncodeError, ErrorKind

# A lone surrogate has no UTF-8 form
UNENCODABLE = "cat\ud800"


class TestEncode:
    def test_simple_word(self, encoder):
        request = encoder.encode("paris")

        assert request.query == "paris"
        assert request.encoded_query == "paris"
        assert request.per_page == 200
        assert request.safe_search is True
        assert request.used_fallback is False

    def test_trims_whitespace(self, encoder):
        request = encoder.encode("  red fox \n")
        assert request.query == "red fox"
        assert request.encoded_query == "red%20fox"

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("a&b", "a%26b"),
            ("a=b", "a%3Db"),
            ("50%", "50%25"),
            ("a/b?c#d", "a%2Fb%3Fc%23d"),
            ("a+b", "a%2Bb"),
            ("東京", "%E6%9D%B1%E4%BA%AC"),
        ],
    )
    def test_reserved_and_non_ascii_characters(self, encoder, text, expected):
        assert encoder.encode(text).encoded_query == expected

    def test_custom_page_size_and_safe_search(self):
        request = QueryEncoder(per_page=20, safe_search=False).encode("x")
        assert request.per_page == 20
        assert request.safe_search is False
        assert request.to_params() == {"q": "x", "per_page": "20", "safesearch": "false"}

    def test_long_query_is_clamped(self, encoder):
        request = encoder.encode("a" * (MAX_QUERY_LENGTH + 50))
        assert len(request.query) == MAX_QUERY_LENGTH

    def test_encoder_is_stateless(self, encoder):
        first = encoder.encode("cats")
        encoder.encode("dogs")
        assert encoder.encode("cats") == first


class TestBlankInput:
    @pytest.mark.parametrize("text", ["", "   ", "\t\n", None])
    def test_blank_raises_encode_error(self, encoder, text):
        with pytest.raises(EncodeError) as exc_info:
            encoder.encode(text)
        assert exc_info.value.kind is ErrorKind.ENCODE_ERROR


class TestFallback:
    def test_unencodable_text_uses_default_fallback(self, encoder, caplog):
        with caplog.at_level(logging.WARNING, logger="photo_search"):
            request = encoder.encode(UNENCODABLE)

        assert request.used_fallback is True
        assert request.encoded_query == "paris"
        assert request.query == UNENCODABLE
        assert "falling back" in caplog.text

    def test_configured_fallback(self):
        request = QueryEncoder(fallback_query="sunset beach").encode(UNENCODABLE)
        assert request.encoded_query == "sunset%20beach"
        assert request.used_fallback is True

    @pytest.mark.parametrize("fallback", [None, "", "   "])
    def test_disabled_fallback_raises(self, fallback):
        encoder = QueryEncoder(fallback_query=fallback)
        assert encoder.fallback_query is None

        with pytest.raises(EncodeError, match="Cannot percent-encode"):
            encoder.encode(UNENCODABLE)

    def test_unencodable_fallback_is_rejected_up_front(self):
        with pytest.raises(ConfigurationError, match="Fallback query"):
            QueryEncoder(fallback_query="x\udcff")
