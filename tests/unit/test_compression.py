"""
Unit tests for Accept-Encoding negotiation.
"""

import gzip

import pytest

from minihttp.http.content_types import ContentType, EncodingScheme
from minihttp.http.request import HTTPMethod, HTTPRequest
from minihttp.http.response import HTTPResponse, finalize_content_length
from minihttp.middleware.compression import (
    CompressionMiddleware,
    encode_body,
    negotiate_encoding,
    select_encoding,
)


def request_with(accept_encoding=None) -> HTTPRequest:
    headers = {}
    if accept_encoding is not None:
        headers["Accept-Encoding"] = accept_encoding
    return HTTPRequest(method=HTTPMethod.GET, path="/echo/abc", headers=headers)


def text_response(body: str = "abc") -> HTTPResponse:
    return HTTPResponse().with_header("Content-Type", "text/plain").with_body(body)


class TestEncodingScheme:
    """Tests for the closed encoding vocabulary."""

    def test_known_token(self):
        assert EncodingScheme.from_token("gzip") is EncodingScheme.GZIP

    @pytest.mark.parametrize("token", ["br", "deflate", "GZIP", "gzip;q=1.0", "*", ""])
    def test_unknown_tokens(self, token: str):
        assert EncodingScheme.from_token(token) is None

    def test_wire_strings(self):
        assert str(EncodingScheme.GZIP) == "gzip"
        assert str(ContentType.TEXT_PLAIN) == "text/plain"
        assert str(ContentType.OCTET_STREAM) == "application/octet-stream"


class TestSelectEncoding:
    """Tests for select_encoding()."""

    @pytest.mark.parametrize("value", [
        "gzip",
        "br, gzip",
        "invalid-encoding-1, gzip, invalid-encoding-2",
        "  gzip  ",
        "deflate,gzip",
    ])
    def test_gzip_found(self, value: str):
        assert select_encoding(value) is EncodingScheme.GZIP

    @pytest.mark.parametrize("value", [
        None,
        "",
        "invalid-encoding",
        "br, deflate",
        "gzip;q=1.0",
        "x-gzip",
    ])
    def test_nothing_supported(self, value):
        assert select_encoding(value) is None


class TestNegotiateEncoding:
    """Tests for negotiate_encoding()."""

    def test_gzip_applied(self):
        response = negotiate_encoding(request_with("gzip"), text_response("abc"))

        assert response.is_encoded
        assert response.headers["Content-Encoding"] == "gzip"
        assert response.headers["Content-Type"] == "text/plain"
        assert gzip.decompress(response.payload) == b"abc"

    def test_unchanged_without_header(self):
        original = text_response()
        assert negotiate_encoding(request_with(), original) is original

    def test_unchanged_for_unknown_encoding(self):
        response = negotiate_encoding(request_with("invalid-encoding"), text_response())

        assert not response.is_encoded
        assert "Content-Encoding" not in response.headers
        assert response.payload == b"abc"

    def test_compresses_even_when_larger(self):
        response = negotiate_encoding(request_with("gzip"), text_response("a"))
        assert len(response.payload) > 1

    def test_empty_body_still_compressed(self):
        response = negotiate_encoding(request_with("gzip"), HTTPResponse())

        assert response.headers["Content-Encoding"] == "gzip"
        assert gzip.decompress(response.payload) == b""

    def test_applies_to_error_responses(self):
        draft = HTTPResponse().with_status(404)
        response = negotiate_encoding(request_with("gzip"), draft)

        assert response.status_code == 404
        assert response.headers["Content-Encoding"] == "gzip"

    def test_exact_header_name(self):
        request = HTTPRequest(
            method=HTTPMethod.GET,
            path="/echo/abc",
            headers={"accept-encoding": "gzip"},
        )
        assert not negotiate_encoding(request, text_response()).is_encoded

    def test_input_not_mutated(self):
        original = text_response()
        negotiate_encoding(request_with("gzip"), original)

        assert not original.is_encoded
        assert "Content-Encoding" not in original.headers

    def test_content_length_is_compressed_size(self):
        response = finalize_content_length(
            negotiate_encoding(request_with("gzip"), text_response("abc" * 100))
        )

        assert response.headers["Content-Length"] == str(len(response.encoded_body))
        assert response.to_bytes().endswith(response.encoded_body)

    def test_gzip_framing(self):
        data = b"hello world " * 50
        encoded = encode_body(EncodingScheme.GZIP, data)

        assert encoded[:2] == b"\x1f\x8b"
        assert len(encoded) < len(data)
        assert gzip.decompress(encoded) == data


class TestCompressionMiddleware:
    """Tests for CompressionMiddleware."""

    def test_encodes_inner_response(self):
        middleware = CompressionMiddleware()
        response = middleware(request_with("gzip"), lambda request: text_response("xyz"))

        assert gzip.decompress(response.payload) == b"xyz"

    def test_passes_through(self):
        middleware = CompressionMiddleware()
        response = middleware(request_with(), lambda request: text_response("xyz"))

        assert response.payload == b"xyz"
