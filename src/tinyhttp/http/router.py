"""
=============================================================================
ROUTE TABLE & PATH TEMPLATE MATCHING
=============================================================================

A route binds (method, path template) to a handler. The router keeps
routes in REGISTRATION ORDER and the first match wins.

=============================================================================
PATH TEMPLATES
=============================================================================

A template is literal text with {name} placeholders:

    "/hello/{name}"
    "/orders/{order-id}/items/{index}"
    "/files/{path}.txt"

Compilation:

    "/files/{path}.txt"
       │
       ├── literal "/files/"   → re.escape → "/files/"
       ├── {path}              → (?P<path>\\S+)
       └── literal ".txt"      → re.escape → "\\.txt"
       │
       ▼
    ^/files/(?P<path>\\S+)\\.txt\\Z

    ┌─────────────────────────────────────────────────────────────────────┐
    │  NOTE: a placeholder captures \\S+ (one or more NON-WHITESPACE       │
    │  characters), and "/" is non-whitespace. So                          │
    │                                                                      │
    │      "/hello/{name}"  matches  "/hello/a/b"  with name = "a/b"       │
    │                                                                      │
    │  Register narrower templates first if that matters.                  │
    └─────────────────────────────────────────────────────────────────────┘

The whole request path must match (the pattern is anchored with ^ and \\Z,
so a trailing newline is not forgiven).
The query string is never part of the match.

Placeholder names become regex group names, so after stripping hyphens
they must be valid, distinct Python identifiers: "{order-id}" is fine
(group "orderid"), "{1st}" or "{id}/{id}" raise ValueError when the route
is registered.

=============================================================================
HANDLERS
=============================================================================

A handler takes the ParameterBag built from the captured values and
returns a Response:

    @router.get("/hello/{name}")
    def hello(params):
        return HtmlResponse(f"<h1>Hello, {params['name']}</h1>")
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .params import ParameterBag, neutral_key
from .response import Response


logger = logging.getLogger(__name__)


Handler = Callable[[ParameterBag], Response]

PARAMETER_PATTERN = re.compile(r"\{(?P<param>[^{}\s]+)\}")


def compile_template(path: str) -> Tuple["re.Pattern[str]", Tuple[str, ...]]:
    """
    Compile a path template into an anchored regex.

    Args:
        path: Template such as "/users/{id}"

    Returns:
        Tuple of (compiled regex, parameter names in order)

    Raises:
        ValueError: A parameter name is not usable as a group name
    """
    param_names: List[str] = []
    group_names = set()
    regex_parts = ["^"]
    position = 0

    for token in PARAMETER_PATTERN.finditer(path):
        name = token.group("param")
        group = neutral_key(name)
        if not group.isidentifier():
            raise ValueError(f"Invalid parameter name {name!r} in {path!r}")
        if group in group_names:
            raise ValueError(f"Duplicate parameter name {name!r} in {path!r}")

        group_names.add(group)
        param_names.append(name)
        regex_parts.append(re.escape(path[position:token.start()]))
        regex_parts.append(f"(?P<{group}>\\S+)")
        position = token.end()

    regex_parts.append(re.escape(path[position:]))
    regex_parts.append(r"\Z")

    return re.compile("".join(regex_parts)), tuple(param_names)


@dataclass(frozen=True)
class Route:
    """
    A registered route.

        Route(
            method="GET",
            path="/hello/{name}",
            handler=hello,
            pattern=re.compile(r"^/hello/(?P<name>\\S+)\\Z"),
            param_names=("name",),
        )

    Build one with Route.create(); the pattern is derived from the path.
    """

    method: str
    path: str
    handler: Handler = field(compare=False)
    pattern: "re.Pattern[str]" = field(repr=False, compare=False)
    param_names: Tuple[str, ...] = field(default=(), repr=False, compare=False)

    @classmethod
    def create(cls, method: str, path: str, handler: Handler) -> "Route":
        pattern, param_names = compile_template(path)
        return cls(
            method=method,
            path=path,
            handler=handler,
            pattern=pattern,
            param_names=param_names,
        )

    def is_match(self, method: str, path: str) -> bool:
        """Method equal (case-sensitive) and the whole path matches."""
        return method == self.method and self.pattern.match(path) is not None

    def extract(self, path: str) -> ParameterBag:
        """
        Capture parameter values from a path.

        Raises:
            ValueError: The path does not match this route
        """
        match = self.pattern.match(path)
        if match is None:
            raise ValueError(f"Path {path!r} does not match {self.path!r}")
        return self.bind(match)

    def bind(self, match: "re.Match[str]") -> ParameterBag:
        """Build the ParameterBag for a successful pattern match."""
        return ParameterBag.create(
            {name: match.group(neutral_key(name)) for name in self.param_names}
        )

    def invoke(self, path: str) -> Response:
        """Capture the parameters from path and call the handler."""
        return self.handler(self.extract(path))


@dataclass
class RouteMatch:
    """
    Result of a successful lookup.

    Example:
        Template: /hello/{name}
        Path:     /hello/bob
        Result:   RouteMatch(route=<Route>, params=ParameterBag({"name": "bob"}))
    """

    route: Route
    params: ParameterBag

    def invoke(self) -> Response:
        return self.route.handler(self.params)


class Router:
    """
    Ordered route table.

    Registration happens during setup; once the host is serving, the table
    is only read, so lookups need no locking.

    Example:
        router = Router()

        @router.get("/")
        def home(params):
            return HtmlResponse("<h1>Welcome</h1>")

        router.post("/items", create_item)

        match = router.match("GET", "/")
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def add_route(self, method: str, path: str, handler: Handler) -> Route:
        """
        Append a route to the table.

        Duplicates are allowed; the earlier registration shadows the
        later one.

        Args:
            method: HTTP method, compared case-sensitively with requests
            path: Path template
            handler: Callable taking a ParameterBag, returning a Response

        Returns:
            The registered Route

        Raises:
            ValueError: The template has an unusable parameter name
        """
        route = Route.create(method, path, handler)
        self._routes.append(route)
        logger.debug(f"Registered route {method} {path}")
        return route

    def route(self, path: str, method: str = "GET") -> Callable[[Handler], Handler]:
        """
        Decorator registering a handler.

        Example:
            @router.route("/items/{id}", method="PUT")
            def update_item(params):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(method, path, handler)
            return handler
        return decorator

    def _register(self, method: str, path: str, handler: Optional[Handler]):
        if handler is None:
            return self.route(path, method)
        self.add_route(method, path, handler)
        return handler

    def get(self, path: str, handler: Optional[Handler] = None):
        """Register a GET route, directly or as a decorator."""
        return self._register("GET", path, handler)

    def post(self, path: str, handler: Optional[Handler] = None):
        return self._register("POST", path, handler)

    def put(self, path: str, handler: Optional[Handler] = None):
        return self._register("PUT", path, handler)

    def delete(self, path: str, handler: Optional[Handler] = None):
        return self._register("DELETE", path, handler)

    def options(self, path: str, handler: Optional[Handler] = None):
        return self._register("OPTIONS", path, handler)

    def patch(self, path: str, handler: Optional[Handler] = None):
        return self._register("PATCH", path, handler)

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching method and path.

        Args:
            method: Request method
            path: Absolute request path, without the query string

        Returns:
            RouteMatch, or None when nothing matches
        """
        for route in self._routes:
            if route.method != method:
                continue
            match = route.pattern.match(path)
            if match:
                return RouteMatch(route=route, params=route.bind(match))
        return None

    def routes(self) -> List[Route]:
        """Copy of the table, in registration order."""
        return list(self._routes)

    def __len__(self) -> int:
        return len(self._routes)
