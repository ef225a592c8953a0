"""
Unit tests for the access log line.
"""

import logging
import time

from rawhttp.access_log import RequestLog, log_request
from rawhttp.http.request import HTTPRequest, RequestLine
from rawhttp.http.response import text, not_found


class TestRequestLog:

    def test_to_text(self):
        entry = RequestLog(
            connection_id="abcd1234",
            client_ip="10.0.0.7",
            method="GET",
            target="/echo/hi",
            status_code=200,
            content_length=2,
            duration_ms=1.234,
            timestamp="19/Oct/2026:10:15:02 +0000",
        )

        assert entry.to_text() == (
            '[abcd1234] 10.0.0.7 - - [19/Oct/2026:10:15:02 +0000] '
            '"GET /echo/hi" 200 2 1.23ms'
        )

    def test_missing_client_ip(self):
        entry = RequestLog("id", "", "GET", "/", 404, 0, 0.0, "ts")
        assert entry.to_text().startswith("[id] - - - [ts]")


class TestLogRequest:

    def test_emits_one_info_line(self, caplog):
        request = HTTPRequest(
            line=RequestLine("GET", "/echo/abc", "HTTP/1.1"),
            client_address=("127.0.0.1", 5555),
        )

        with caplog.at_level(logging.INFO, logger="rawhttp.access"):
            entry = log_request("conn0001", request, text("abc"), time.time())

        assert entry.status_code == 200
        assert entry.content_length == 3
        assert entry.client_ip == "127.0.0.1"
        assert [r.message for r in caplog.records] == [entry.to_text()]

    def test_status_from_response(self):
        request = HTTPRequest(line=RequestLine("POST", "/nowhere", "HTTP/1.1"))
        entry = log_request("conn0002", request, not_found(), time.time())

        assert entry.status_code == 404
        assert entry.content_length == 0
        assert entry.duration_ms >= 0
