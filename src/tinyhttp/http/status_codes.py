"""
=============================================================================
HTTP STATUS CODES
=============================================================================

Status codes used by the response variants, plus the reason phrases the
host writes on the status line.

    HTTP/1.1 404 Not Found
             ─┬─ ────┬────
              │      └── reason phrase (reason_phrase())
              └───────── status code  (Response.status_code)

A handler may put ANY integer into Response.status_code. Codes that are
not members of HTTPStatus still serialize; they just get a generic
phrase derived from their class (2xx → "Success", 4xx → "Client Error").
"""

from enum import IntEnum
from typing import Optional


class HTTPStatus(IntEnum):
    """
    HTTP status codes with reason phrases.

        >>> HTTPStatus.SEE_OTHER == 303
        True
        >>> HTTPStatus.SEE_OTHER.phrase
        'See Other'
    """

    # 2xx SUCCESS
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204

    # 3xx REDIRECTION
    MOVED_PERMANENTLY = 301     # RedirectType.PERMANENT
    FOUND = 302
    SEE_OTHER = 303             # RedirectType.SEE_OTHER (default)
    NOT_MODIFIED = 304
    TEMPORARY_REDIRECT = 307    # RedirectType.TEMPORARY
    PERMANENT_REDIRECT = 308

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404             # NotFoundResponse, failed FileResponse
    METHOD_NOT_ALLOWED = 405
    PAYLOAD_TOO_LARGE = 413

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    SERVICE_UNAVAILABLE = 503

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line."""
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.ACCEPTED: "Accepted",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.SEE_OTHER: "See Other",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.TEMPORARY_REDIRECT: "Temporary Redirect",
    HTTPStatus.PERMANENT_REDIRECT: "Permanent Redirect",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
}

# Fallback phrases keyed by status class (first digit)
_CLASS_PHRASES = {
    1: "Informational",
    2: "Success",
    3: "Redirection",
    4: "Client Error",
    5: "Server Error",
}


def reason_phrase(code: Optional[int]) -> str:
    """
    Get the reason phrase for any status code.

    Args:
        code: Status code; None is treated as 200

    Returns:
        The registered phrase, or a generic one for the code's class
    """
    if code is None:
        code = HTTPStatus.OK
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return _CLASS_PHRASES.get(int(code) // 100, "Unknown")
