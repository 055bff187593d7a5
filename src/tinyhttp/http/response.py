"""
=============================================================================
HTTP RESPONSES
=============================================================================

A Response is a plain value a handler returns. It describes WHAT to send;
the host decides HOW (see tinyhttp.host.write_response).

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          Response                                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │   status_code   int or None   (None is written as 200)              │
    │   content_type  str or None   (None → no Content-Type header)       │
    │   headers       dict          extra headers, written as-is          │
    │   body          writer or None                                      │
    │                                                                      │
    │   A body WRITER is a callable that receives the output stream:      │
    │                                                                      │
    │       def body(stream: BinaryIO) -> None:                           │
    │           stream.write(b"...")                                      │
    │                                                                      │
    │   The host calls it exactly once, after the headers are out.        │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
VARIANTS
=============================================================================

    ┌──────────────────┬────────┬──────────────────┬─────────────────────┐
    │  Class           │ Status │ Content-Type     │ Body                │
    ├──────────────────┼────────┼──────────────────┼─────────────────────┤
    │  Response        │  None  │  None            │  None               │
    │  TextResponse    │  200   │  text/plain      │  encoded text       │
    │  HtmlResponse    │  200   │  text/html       │  encoded text       │
    │  FileResponse    │ 200/404│  from extension  │  file contents      │
    │  RedirectResponse│ 301/303│  text/html       │  empty              │
    │                  │  /307  │                  │  + Location header  │
    │  NotFoundResponse│  404   │  text/html       │  None               │
    └──────────────────┴────────┴──────────────────┴─────────────────────┘

Content-Length is never set by a variant. Every response is followed by
closing the connection, which is how the client learns the body ended.
"""

import logging
import os
import shutil
from datetime import datetime, timezone
from enum import IntEnum
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Optional, Union

from .mime_types import get_mime_type
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


BodyWriter = Callable[[BinaryIO], None]

COPY_BUFFER_SIZE = 64 * 1024

# 100ns ticks since 0001-01-01 UTC at the Unix epoch
EPOCH_TICKS = 621355968000000000


def write_string(stream: BinaryIO, text: Optional[str], encoding: str = "utf-8") -> None:
    """
    Write text to a binary stream. None writes nothing.

    Args:
        stream: Writable binary stream
        text: Text to write
        encoding: Character encoding
    """
    if text is None:
        return
    stream.write(text.encode(encoding))


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 1123).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Fri, 01 Mar 2024 10:00:00 GMT

    Aware datetimes are converted to UTC first; naive ones are assumed to
    already be UTC.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# BASE RESPONSE
# =============================================================================

class Response:
    """
    Base response: no status, no content type, no body, no headers.

    Subclasses fill these in from their constructor. The fields stay
    plain attributes, so a handler can still tweak a response before
    returning it:

        response = HtmlResponse("<h1>Created</h1>")
        response.status_code = 201
        response.headers["X-Request-Id"] = "abc"
    """

    def __init__(self):
        self.headers: Dict[str, str] = {}
        self.content_type: Optional[str] = None
        self.status_code: Optional[int] = None
        self.body: Optional[BodyWriter] = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code!r}, "
            f"content_type={self.content_type!r})"
        )


class TextResponse(Response):
    """
    200 response carrying text.

    Args:
        body: Text to send; None means no body at all
        content_type: Content-Type header value
        encoding: Encoding used to turn the text into bytes
    """

    def __init__(
        self,
        body: Optional[str],
        content_type: str = "text/plain",
        encoding: str = "utf-8",
    ):
        super().__init__()
        self.content_type = content_type
        self.status_code = HTTPStatus.OK
        self.text = body
        self.encoding = encoding

        if body is not None:
            self.body = self._write

    def _write(self, stream: BinaryIO) -> None:
        write_string(stream, self.text, self.encoding)


class HtmlResponse(TextResponse):
    """TextResponse defaulting to text/html."""

    def __init__(
        self,
        body: Optional[str],
        content_type: str = "text/html",
        encoding: str = "utf-8",
    ):
        super().__init__(body, content_type, encoding)


class NotFoundResponse(Response):
    """404 with no body."""

    def __init__(self, content_type: str = "text/html"):
        super().__init__()
        self.content_type = content_type
        self.status_code = HTTPStatus.NOT_FOUND


class RedirectType(IntEnum):
    """Redirect kinds and the status code each one sends."""

    PERMANENT = HTTPStatus.MOVED_PERMANENTLY
    TEMPORARY = HTTPStatus.TEMPORARY_REDIRECT
    SEE_OTHER = HTTPStatus.SEE_OTHER


class RedirectResponse(Response):
    """
    Redirect to another location.

    Args:
        location: Value of the Location header
        redirect_type: PERMANENT (301), TEMPORARY (307) or SEE_OTHER (303)

    The body writer is present but writes nothing, so the client sees
    an empty (not absent) body.
    """

    def __init__(self, location: str, redirect_type: RedirectType = RedirectType.SEE_OTHER):
        super().__init__()
        self.location = location
        self.redirect_type = RedirectType(redirect_type)
        self.content_type = "text/html"
        self.status_code = int(self.redirect_type)
        self.headers["Location"] = location
        self.body = self._write

    def _write(self, stream: BinaryIO) -> None:
        write_string(stream, "")


# =============================================================================
# FILE RESPONSE
# =============================================================================

def default_base_directory() -> Path:
    """The "html" directory under the current working directory."""
    return Path.cwd() / "html"


class FileResponse(Response):
    """
    Serve a file from inside a base directory.

    =========================================================================
    RESOLUTION
    =========================================================================

        file_path ──► relative? ──yes──► base_directory / file_path
                         │
                         no
                         ▼
                      file_path
                         │
                         ▼
                   resolve() (follows "..", symlinks)
                         │
                         ▼
              inside base_directory?  exists?  has extension?
                         │
               any "no" ─┴─► 404, no body, no content type

    A successful response is 200 with:

        Content-Type   explicit content_type, else looked up by extension
        ETag           last-write time in 100ns ticks since 0001-01-01,
                       lowercase hex (e.g. "8dc39f0a1b2c3d4")
        Last-Modified  last-write time, RFC 1123

    The file is opened when the body is WRITTEN, not when the response is
    built, and is always closed afterwards.
    =========================================================================

    Args:
        file_path: File to serve, absolute or relative to base_directory
        content_type: Override for the Content-Type header
        base_directory: Directory the file must live in. Defaults to
            "html" under the current working directory.
    """

    def __init__(
        self,
        file_path: Optional[Union[str, os.PathLike]],
        content_type: Optional[str] = None,
        base_directory: Optional[Union[str, os.PathLike]] = None,
    ):
        super().__init__()
        self.status_code = HTTPStatus.NOT_FOUND
        self.path: Optional[Path] = None

        if base_directory is None:
            base_directory = default_base_directory()
        self.base_directory = Path(base_directory).resolve()

        full_path = self._resolve(file_path)
        if full_path is None:
            return

        try:
            stat = full_path.stat()
        except OSError as e:
            logger.debug(f"Cannot stat {full_path}: {e}")
            return

        self.path = full_path
        self.status_code = HTTPStatus.OK
        self.content_type = content_type or get_mime_type(full_path.name)
        self.headers["ETag"] = format_etag(stat.st_mtime_ns)
        self.headers["Last-Modified"] = format_http_date(
            datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
        )
        self.body = self._write

    def _resolve(self, file_path) -> Optional[Path]:
        if not file_path:
            return None

        candidate = Path(file_path)
        if len(os.path.splitext(candidate.name)[1]) < 2:
            logger.debug(f"File has no extension: {file_path}")
            return None

        if not candidate.is_absolute():
            candidate = self.base_directory / candidate

        # Over-long names, NUL bytes and similar raise from the OS layer
        try:
            full_path = candidate.resolve()
            is_file = full_path.is_file()
        except (OSError, ValueError) as e:
            logger.debug(f"Invalid file path {file_path!r}: {e}")
            return None

        try:
            full_path.relative_to(self.base_directory)
        except ValueError:
            logger.warning(f"File outside base directory: {file_path}")
            return None

        if not is_file:
            logger.debug(f"File not found: {full_path}")
            return None

        return full_path

    def _write(self, stream: BinaryIO) -> None:
        with open(self.path, "rb") as f:
            shutil.copyfileobj(f, stream, COPY_BUFFER_SIZE)


def format_etag(mtime_ns: int) -> str:
    """
    ETag for a file modification time.

    Args:
        mtime_ns: Modification time in nanoseconds since the Unix epoch

    Returns:
        Lowercase hex of the time in 100ns ticks since 0001-01-01 UTC
    """
    return format(mtime_ns // 100 + EPOCH_TICKS, "x")
