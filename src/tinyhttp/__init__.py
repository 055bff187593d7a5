"""
=============================================================================
TINYHTTP - A Minimal Embedded HTTP Server
=============================================================================

Register handlers for (method, path template) pairs, start a host, and
every request is answered by the first matching handler.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   socket ──► Request ──► RequestProcessor ──► Router ──► handler    │
    │                                                            │         │
    │   socket ◄── write_response ◄───────────── Response ◄──────┘         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    tinyhttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # Demo app (python -m tinyhttp)
    ├── config.py            # HostConfig dataclass
    ├── host.py              # TinyHttpHost, write_response
    ├── core/
    │   ├── socket_server.py # Accept loop
    │   └── connection.py    # One client socket
    └── http/
        ├── request.py       # Request, Headers, RequestParser
        ├── response.py      # Response variants
        ├── router.py        # Route table, path templates
        ├── dispatcher.py    # RequestProcessor
        ├── params.py        # ParameterBag, ParameterValue
        ├── status_codes.py  # HTTPStatus
        └── mime_types.py    # Extension → content type

=============================================================================
QUICK START
=============================================================================

    from tinyhttp import HtmlResponse, RequestProcessor, TinyHttpHost

    app = RequestProcessor()

    @app.get("/")
    def home(params):
        return HtmlResponse("<h1>Welcome</h1>")

    @app.get("/hello/{name}")
    def hello(params):
        return HtmlResponse(f"<h1>Hello, {params['name']}</h1>")

    TinyHttpHost("http://localhost:9999/", app).run()
"""

__version__ = "1.0.0"

from .config import HostConfig
from .host import TinyHttpHost, write_response
from .http import (
    ConversionError,
    FileResponse,
    Headers,
    HtmlResponse,
    NotFoundResponse,
    ParameterBag,
    ParameterValue,
    RedirectResponse,
    RedirectType,
    Request,
    RequestProcessor,
    Response,
    Route,
    Router,
    TextResponse,
    get_mime_type,
    write_string,
)

__all__ = [
    "__version__",
    # Hosting
    "TinyHttpHost",
    "HostConfig",
    "write_response",
    # Routing
    "RequestProcessor",
    "Router",
    "Route",
    # Parameters
    "ParameterBag",
    "ParameterValue",
    "ConversionError",
    # Requests
    "Request",
    "Headers",
    # Responses
    "Response",
    "TextResponse",
    "HtmlResponse",
    "FileResponse",
    "RedirectResponse",
    "RedirectType",
    "NotFoundResponse",
    "write_string",
    "get_mime_type",
]
