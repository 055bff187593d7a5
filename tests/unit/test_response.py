"""
Unit tests for the response variants.
"""

import io
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import pytest

from tinyhttp.http.response import (
    EPOCH_TICKS,
    FileResponse,
    HtmlResponse,
    NotFoundResponse,
    RedirectResponse,
    RedirectType,
    Response,
    TextResponse,
    format_etag,
    format_http_date,
    write_string,
)


def body_as_string(response: Response, encoding: str = "utf-8") -> Optional[str]:
    """Run the body writer into memory; None when there is no writer."""
    if response.body is None:
        return None
    stream = io.BytesIO()
    response.body(stream)
    return stream.getvalue().decode(encoding)


class TestResponse:
    """Tests for the base Response."""

    def test_defaults(self):
        response = Response()
        assert response.status_code is None
        assert response.content_type is None
        assert response.body is None
        assert response.headers == {}

    def test_headers_not_shared(self):
        """Each response gets its own header dict."""
        a, b = Response(), Response()
        a.headers["X-One"] = "1"
        assert b.headers == {}


class TestTextResponse:
    """Tests for TextResponse and HtmlResponse."""

    def test_text_defaults(self):
        response = TextResponse("Hello")
        assert response.status_code == 200
        assert response.content_type == "text/plain"
        assert body_as_string(response) == "Hello"

    def test_custom_content_type(self):
        response = TextResponse("{}", content_type="application/json")
        assert response.content_type == "application/json"

    def test_encoding(self):
        response = TextResponse("café", encoding="latin-1")
        stream = io.BytesIO()
        response.body(stream)
        assert stream.getvalue() == "café".encode("latin-1")

    def test_none_body_has_no_writer(self):
        response = TextResponse(None)
        assert response.status_code == 200
        assert response.body is None

    def test_empty_body_has_writer(self):
        response = TextResponse("")
        assert body_as_string(response) == ""

    def test_html_defaults(self):
        response = HtmlResponse("<h1>Welcome</h1>")
        assert response.status_code == 200
        assert response.content_type == "text/html"
        assert body_as_string(response) == "<h1>Welcome</h1>"


class TestNotFoundResponse:
    """Tests for NotFoundResponse."""

    def test_defaults(self):
        response = NotFoundResponse()
        assert response.status_code == 404
        assert response.content_type == "text/html"
        assert response.body is None

    def test_content_type_override(self):
        response = NotFoundResponse("application/json")
        assert response.content_type == "application/json"


class TestRedirectResponse:
    """Tests for RedirectResponse."""

    @pytest.mark.parametrize(
        "redirect_type,status",
        [
            (RedirectType.PERMANENT, 301),
            (RedirectType.TEMPORARY, 307),
            (RedirectType.SEE_OTHER, 303),
        ],
    )
    def test_status_codes(self, redirect_type, status):
        response = RedirectResponse("/new", redirect_type)
        assert response.status_code == status

    def test_default_is_see_other(self):
        response = RedirectResponse("/new")
        assert response.status_code == 303
        assert response.redirect_type is RedirectType.SEE_OTHER

    def test_location_and_empty_body(self):
        """Body writer exists but writes nothing."""
        response = RedirectResponse("http://example.com/next")
        assert response.headers["Location"] == "http://example.com/next"
        assert response.content_type == "text/html"
        assert body_as_string(response) == ""


class TestFileResponse:
    """Tests for FileResponse."""

    def test_file_exists(self, html_dir: Path):
        response = FileResponse("test.txt", base_directory=html_dir)

        info = os.stat(html_dir / "test.txt")
        expected_etag = format(info.st_mtime_ns // 100 + EPOCH_TICKS, "x")
        expected_date = format_http_date(
            datetime.fromtimestamp(info.st_mtime, tz=timezone.utc)
        )

        assert response.status_code == 200
        assert response.content_type == "text/plain"
        assert response.headers["ETag"] == expected_etag
        assert response.headers["Last-Modified"] == expected_date
        assert body_as_string(response) == "Test"

    def test_absolute_path_inside_base(self, html_dir: Path):
        response = FileResponse(str(html_dir / "sub" / "page.html"), base_directory=html_dir)
        assert response.status_code == 200
        assert response.content_type == "text/html"

    def test_content_type_override(self, html_dir: Path):
        response = FileResponse("test.txt", content_type="text/csv", base_directory=html_dir)
        assert response.content_type == "text/csv"

    @pytest.mark.parametrize("path", [None, ""])
    def test_empty_path(self, path, html_dir: Path):
        response = FileResponse(path, base_directory=html_dir)
        assert response.status_code == 404
        assert response.body is None

    def test_no_extension(self, html_dir: Path):
        """Existing file without an extension is still 404."""
        response = FileResponse("README", base_directory=html_dir)
        assert response.status_code == 404
        assert response.body is None
        assert response.content_type is None

    def test_outside_base_directory(self, html_dir: Path):
        """Escaping the base directory with .. yields 404."""
        response = FileResponse("../secret.txt", base_directory=html_dir)
        assert response.status_code == 404
        assert response.body is None

    def test_absolute_path_outside_base(self, html_dir: Path):
        response = FileResponse(str(html_dir.parent / "secret.txt"), base_directory=html_dir)
        assert response.status_code == 404

    def test_nonexistent(self, html_dir: Path):
        response = FileResponse("missing.txt", base_directory=html_dir)
        assert response.status_code == 404
        assert response.body is None

    @pytest.mark.parametrize(
        "path",
        ["a" * 300 + ".txt", "a\x00b.txt", "sub/" + "b" * 300 + "/c.txt"],
        ids=["long-name", "nul-byte", "long-directory"],
    )
    def test_invalid_path_is_not_found(self, path, html_dir: Path):
        """Paths the OS rejects yield 404 instead of raising."""
        response = FileResponse(path, base_directory=html_dir)
        assert response.status_code == 404
        assert response.body is None
        assert response.content_type is None

    def test_default_base_directory(self, html_dir: Path, monkeypatch):
        """Without base_directory, "html" under the working directory is used."""
        monkeypatch.chdir(html_dir.parent)
        response = FileResponse("test.txt")
        assert response.status_code == 200
        assert body_as_string(response) == "Test"

    def test_body_reads_file_at_write_time(self, html_dir: Path):
        response = FileResponse("test.txt", base_directory=html_dir)
        (html_dir / "test.txt").write_text("Changed")
        assert body_as_string(response) == "Changed"


class TestHelpers:
    """Tests for module helpers."""

    def test_write_string(self):
        stream = io.BytesIO()
        write_string(stream, "abc")
        assert stream.getvalue() == b"abc"

    def test_write_string_none(self):
        stream = io.BytesIO()
        write_string(stream, None)
        assert stream.getvalue() == b""

    def test_format_http_date(self):
        dt = datetime(2024, 3, 1, 10, 0, 5)
        assert format_http_date(dt) == "Fri, 01 Mar 2024 10:00:05 GMT"

    def test_format_http_date_converts_to_utc(self):
        from datetime import timedelta

        dt = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_http_date(dt) == "Fri, 01 Mar 2024 10:00:00 GMT"

    def test_format_etag(self):
        """Unix epoch maps to the tick count of 1970-01-01."""
        assert format_etag(0) == format(621355968000000000, "x")
        assert format_etag(100) == format(621355968000000001, "x")
