"""
Request dispatcher: Request in, Response out.

    Request ──► Router.match(method, path)
                    │
          ┌─────────┴──────────┐
          ▼                    ▼
       RouteMatch             None
          │                    │
          ▼                    ▼
    handler(params)     NotFoundResponse()

Handler exceptions are NOT caught here. They propagate to the host,
which logs them and drops the connection.
"""

import logging
from typing import Optional

from .request import Request
from .response import NotFoundResponse, Response
from .router import Handler, Router


logger = logging.getLogger(__name__)


class RequestProcessor:
    """
    Dispatches requests to the routes of a Router.

    Routes can be registered on an instance:

        app = RequestProcessor()

        @app.get("/")
        def home(params):
            return HtmlResponse("<h1>Welcome</h1>")

    or from the __init__ of a subclass:

        class Site(RequestProcessor):
            def __init__(self):
                super().__init__()
                self.get("/", lambda params: HtmlResponse("<h1>Welcome</h1>"))
    """

    def __init__(self, router: Optional[Router] = None):
        self._router = router if router is not None else Router()

    @property
    def router(self) -> Router:
        return self._router

    # Registration shortcuts delegate to the router

    def add_route(self, method: str, path: str, handler: Handler):
        return self._router.add_route(method, path, handler)

    def route(self, path: str, method: str = "GET"):
        return self._router.route(path, method)

    def get(self, path: str, handler: Optional[Handler] = None):
        return self._router.get(path, handler)

    def post(self, path: str, handler: Optional[Handler] = None):
        return self._router.post(path, handler)

    def put(self, path: str, handler: Optional[Handler] = None):
        return self._router.put(path, handler)

    def delete(self, path: str, handler: Optional[Handler] = None):
        return self._router.delete(path, handler)

    def options(self, path: str, handler: Optional[Handler] = None):
        return self._router.options(path, handler)

    def patch(self, path: str, handler: Optional[Handler] = None):
        return self._router.patch(path, handler)

    def handle_request(self, request: Request) -> Response:
        """
        Produce the response for a request.

        Args:
            request: Decoded request

        Returns:
            The first matching route's response, or NotFoundResponse
        """
        match = self._router.match(request.method, request.path)
        if match is None:
            logger.debug(f"No route for {request.method} {request.path}")
            return NotFoundResponse()
        return match.invoke()
