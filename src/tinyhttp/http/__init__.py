"""
HTTP protocol components.

This module contains the request/response model and routing:
- request: Request decoding and the Headers mapping
- response: Response variants
- router: Route table and path templates
- dispatcher: RequestProcessor
- params: ParameterBag and typed conversions
- status_codes: HTTPStatus enum
- mime_types: Extension to content type registry
"""

from .dispatcher import RequestProcessor
from .mime_types import DEFAULT_MIME_TYPE, get_mime_type
from .params import ConversionError, ParameterBag, ParameterValue
from .request import Headers, HTTPParseError, Request, RequestParser
from .response import (
    FileResponse,
    HtmlResponse,
    NotFoundResponse,
    RedirectResponse,
    RedirectType,
    Response,
    TextResponse,
    format_http_date,
    write_string,
)
from .router import Route, RouteMatch, Router
from .status_codes import HTTPStatus, reason_phrase

__all__ = [
    # Requests
    "Request",
    "Headers",
    "RequestParser",
    "HTTPParseError",
    # Responses
    "Response",
    "TextResponse",
    "HtmlResponse",
    "FileResponse",
    "RedirectResponse",
    "RedirectType",
    "NotFoundResponse",
    "write_string",
    "format_http_date",
    # Routing
    "Router",
    "Route",
    "RouteMatch",
    "RequestProcessor",
    # Parameters
    "ParameterBag",
    "ParameterValue",
    "ConversionError",
    # Status / MIME
    "HTTPStatus",
    "reason_phrase",
    "get_mime_type",
    "DEFAULT_MIME_TYPE",
]
