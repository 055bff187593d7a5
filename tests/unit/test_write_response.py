"""
Unit tests for response serialization.
"""

import io

import pytest

from tinyhttp.host import write_response
from tinyhttp.http.response import (
    HtmlResponse,
    NotFoundResponse,
    RedirectResponse,
    Response,
    TextResponse,
)


class TrackingStream(io.BytesIO):
    """BytesIO that remembers its contents after close()."""

    def close(self):
        if not self.closed:
            self.final = self.getvalue()
        super().close()


def serialize(response: Response, server_name=None) -> bytes:
    stream = TrackingStream()
    write_response(response, stream, server_name)
    assert stream.closed
    return stream.final


class TestWriteResponse:
    """Tests for write_response."""

    def test_status_line_and_body(self):
        raw = serialize(HtmlResponse("<h1>Welcome</h1>"))
        assert raw.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"Content-Type: text/html\r\n" in raw
        assert b"Connection: close\r\n" in raw
        assert raw.endswith(b"\r\n\r\n<h1>Welcome</h1>")

    def test_unset_status_written_as_200(self):
        raw = serialize(Response())
        assert raw.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"Content-Type" not in raw
        assert raw.endswith(b"\r\n\r\n")

    def test_not_found(self):
        raw = serialize(NotFoundResponse())
        assert raw.startswith(b"HTTP/1.1 404 Not Found\r\n")

    def test_custom_headers(self):
        raw = serialize(RedirectResponse("/next"))
        assert raw.startswith(b"HTTP/1.1 303 See Other\r\n")
        assert b"Location: /next\r\n" in raw

    def test_unknown_status_code(self):
        response = TextResponse("x")
        response.status_code = 299
        assert serialize(response).startswith(b"HTTP/1.1 299 Success\r\n")

    def test_date_and_server_headers(self):
        raw = serialize(TextResponse("x"), server_name="TinyHttp/1.0")
        assert b"Date: " in raw
        assert b"Server: TinyHttp/1.0\r\n" in raw

    def test_no_server_header_by_default(self):
        assert b"Server:" not in serialize(TextResponse("x"))

    def test_writer_called_once(self):
        calls = []
        response = Response()
        response.body = lambda stream: calls.append(stream.write(b"data"))
        raw = serialize(response)
        assert len(calls) == 1
        assert raw.endswith(b"data")

    def test_stream_closed_when_writer_raises(self):
        """The stream is closed and the error propagates."""
        response = Response()

        def failing(stream):
            stream.write(b"partial")
            raise IOError("disk gone")

        response.body = failing
        stream = TrackingStream()
        with pytest.raises(IOError):
            write_response(response, stream)

        assert stream.closed
        assert stream.final.endswith(b"partial")
