"""
Unit tests for HTTP request parsing.
"""

import io

import pytest

from rawhttp.http.request import (
    HTTPRequest,
    RequestLine,
    Headers,
    HTTPParseError,
    EmptyRequestLine,
    MalformedRequestLine,
    HeaderReadError,
    InvalidContentLength,
    BodyReadError,
    parse_request_line,
    parse_content_length,
    read_request_line,
    read_headers,
    read_body,
    read_request,
)


def reader(data: bytes) -> io.BufferedReader:
    return io.BufferedReader(io.BytesIO(data))


class TestParseRequestLine:
    """Tests for the request line parser."""

    @pytest.mark.parametrize("line, expected", [
        ("GET / HTTP/1.1", RequestLine("GET", "/", "HTTP/1.1")),
        ("POST /files/a.txt HTTP/1.1", RequestLine("POST", "/files/a.txt", "HTTP/1.1")),
        ("BREW /pot HTCPCP/1.0", RequestLine("BREW", "/pot", "HTCPCP/1.0")),
        ("get /echo/%20 HTTP/1.0", RequestLine("get", "/echo/%20", "HTTP/1.0")),
    ])
    def test_three_tokens_accepted(self, line, expected):
        """Any three single-space separated tokens are structurally valid."""
        assert parse_request_line(line) == expected

    def test_empty_line(self):
        with pytest.raises(EmptyRequestLine):
            parse_request_line("")

    @pytest.mark.parametrize("line", [
        "GET /",
        "GET",
        "GET / HTTP/1.1 extra",
        "GET  / HTTP/1.1",
        "GET\t/\tHTTP/1.1",
        " GET / HTTP/1.1",
    ])
    def test_wrong_shape_rejected(self, line):
        with pytest.raises(MalformedRequestLine):
            parse_request_line(line)

    def test_parse_errors_share_base_class(self):
        with pytest.raises(HTTPParseError):
            parse_request_line("GET /")

    def test_read_strips_crlf(self):
        line = read_request_line(reader(b"GET /echo/x HTTP/1.1\r\nHost: a\r\n"))
        assert line.target == "/echo/x"
        assert line.version == "HTTP/1.1"

    def test_read_accepts_bare_lf(self):
        line = read_request_line(reader(b"GET / HTTP/1.1\n"))
        assert line == RequestLine("GET", "/", "HTTP/1.1")

    def test_closed_stream_is_empty_request_line(self):
        with pytest.raises(EmptyRequestLine):
            read_request_line(reader(b""))

    def test_blank_first_line_is_empty_request_line(self):
        with pytest.raises(EmptyRequestLine):
            read_request_line(reader(b"\r\nGET / HTTP/1.1\r\n"))

    def test_non_utf8_bytes_round_trip(self):
        line = read_request_line(reader(b"GET /echo/\xff\xfe HTTP/1.1\r\n"))
        assert line.target.encode("utf-8", "surrogateescape") == b"/echo/\xff\xfe"


class TestReadHeaders:
    """Tests for the header reader."""

    def test_reads_until_blank_line(self):
        stream = reader(b"Host: localhost\r\nUser-Agent: curl/8.0\r\n\r\nBODY")
        headers = read_headers(stream)

        assert len(headers) == 2
        assert headers["Host"] == "localhost"
        assert headers.user_agent == "curl/8.0"
        # Nothing past the separator was consumed
        assert stream.read() == b"BODY"

    def test_no_headers(self):
        headers = read_headers(reader(b"\r\n"))
        assert len(headers) == 0
        assert headers.user_agent == ""
        assert headers.content_length == 0

    def test_case_insensitive_lookup(self):
        headers = read_headers(reader(b"USER-AGENT: shouty\r\ncontent-length: 3\r\n\r\n"))

        assert headers.get("User-Agent") == "shouty"
        assert headers.get("user-agent") == "shouty"
        assert "Content-Length" in headers
        assert headers.content_length == 3

    def test_value_whitespace_trimmed(self):
        headers = read_headers(reader(b"User-Agent:   padded value  \r\nX-Tight:v\r\n\r\n"))
        assert headers.user_agent == "padded value"
        assert headers["x-tight"] == "v"

    def test_repeated_header_last_wins(self):
        headers = read_headers(reader(b"User-Agent: first\r\nuser-agent: second\r\n\r\n"))
        assert headers.user_agent == "second"
        assert len(headers) == 1

    def test_eof_before_blank_line(self):
        with pytest.raises(HeaderReadError):
            read_headers(reader(b"Host: localhost\r\n"))

    def test_eof_mid_line(self):
        with pytest.raises(HeaderReadError):
            read_headers(reader(b"Host: local"))

    def test_line_without_colon(self):
        with pytest.raises(HeaderReadError):
            read_headers(reader(b"this is not a header\r\n\r\n"))

    def test_socket_error_becomes_header_read_error(self):
        class BrokenReader:
            def readline(self):
                raise ConnectionResetError("peer reset")

        with pytest.raises(HeaderReadError) as exc_info:
            read_headers(BrokenReader())

        assert isinstance(exc_info.value.__cause__, ConnectionResetError)

    @pytest.mark.parametrize("value", [b"abc", b"-1", b"+5", b"1.5", b"0x10", b"1 0"])
    def test_invalid_content_length(self, value):
        with pytest.raises(InvalidContentLength):
            read_headers(reader(b"Content-Length: " + value + b"\r\n\r\n"))


class TestParseContentLength:

    def test_missing_is_zero(self):
        assert parse_content_length(None) == 0
        assert parse_content_length("") == 0

    def test_digits(self):
        assert parse_content_length("0") == 0
        assert parse_content_length("1024") == 1024

    def test_non_ascii_digits_rejected(self):
        with pytest.raises(InvalidContentLength):
            parse_content_length("١٢")  # Arabic-Indic "12"


class TestReadBody:

    def test_exact_length(self):
        stream = reader(b"hello world")
        assert read_body(stream, 5) == b"hello"

    def test_zero_length_reads_nothing(self):
        stream = reader(b"left alone")
        assert read_body(stream, 0) == b""
        assert stream.read() == b"left alone"

    def test_short_body(self):
        with pytest.raises(BodyReadError):
            read_body(reader(b"abc"), 10)

    def test_binary_body(self):
        payload = bytes(range(256))
        assert read_body(reader(payload), 256) == payload


class TestReadRequest:

    def test_get(self, sample_get_request: bytes):
        request = read_request(reader(sample_get_request), ("127.0.0.1", 12345))

        assert request.method == "GET"
        assert request.target == "/echo/hello"
        assert request.version == "HTTP/1.1"
        assert request.user_agent == "pytest"
        assert request.body == b""
        assert request.client_address == ("127.0.0.1", 12345)

    def test_post_with_body(self, sample_post_request: bytes):
        request = read_request(reader(sample_post_request))

        assert request.method == "POST"
        assert request.target == "/files/notes.txt"
        assert request.headers.content_length == len(b"hello, file store")
        assert request.body == b"hello, file store"

    def test_body_only_with_content_length(self):
        request = read_request(reader(b"POST /files/x HTTP/1.1\r\n\r\ntrailing"))
        assert request.body == b""

    def test_request_is_immutable(self):
        request = HTTPRequest(line=RequestLine("GET", "/", "HTTP/1.1"))
        with pytest.raises(AttributeError):
            request.body = b"changed"


class TestHeaders:

    def test_constructor_and_iteration(self):
        headers = Headers({"Content-Type": "text/plain", "X-One": "1"})

        assert list(headers) == ["Content-Type", "X-One"]
        assert dict(headers.items()) == {"Content-Type": "text/plain", "X-One": "1"}

    def test_missing_header_default(self):
        headers = Headers()
        assert headers.get("X-Missing") == ""
        assert headers.get("X-Missing", "default") == "default"
        with pytest.raises(KeyError):
            headers["X-Missing"]
