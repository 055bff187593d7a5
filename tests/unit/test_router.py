"""
Unit tests for the route table and path templates.
"""

import pytest

from tinyhttp.http.params import ParameterBag
from tinyhttp.http.response import HtmlResponse, Response, TextResponse
from tinyhttp.http.router import Route, RouteMatch, Router, compile_template


def dummy_handler(params: ParameterBag) -> Response:
    """Dummy handler for testing."""
    return TextResponse(params["name"].as_str())


class TestCompileTemplate:
    """Tests for template compilation."""

    def test_root_template(self):
        """Root template compiles to an anchored slash."""
        pattern, names = compile_template("/")
        assert pattern.pattern == r"^/\Z"
        assert names == ()

    def test_single_parameter(self):
        """A placeholder becomes a named \\S+ group."""
        pattern, names = compile_template("/{name}")
        assert pattern.pattern == r"^/(?P<name>\S+)\Z"
        assert names == ("name",)

    def test_multiple_parameters(self):
        """Parameter names are recorded in order."""
        pattern, names = compile_template("/users/{user}/posts/{post}")
        assert names == ("user", "post")
        match = pattern.match("/users/7/posts/42")
        assert match.group("user") == "7"
        assert match.group("post") == "42"

    def test_literal_text_is_escaped(self):
        """Regex metacharacters in literal text match literally."""
        pattern, _ = compile_template("/files/{name}.txt")
        assert pattern.match("/files/a.txt")
        assert not pattern.match("/files/aXtxt")

    def test_hyphenated_name(self):
        """Hyphens are stripped from the group name."""
        pattern, names = compile_template("/orders/{order-id}")
        assert names == ("order-id",)
        assert pattern.match("/orders/A1").group("orderid") == "A1"

    def test_invalid_name_rejected(self):
        """Names that cannot be group names fail at registration."""
        with pytest.raises(ValueError):
            compile_template("/{1st}")

    def test_duplicate_name_rejected(self):
        with pytest.raises(ValueError):
            compile_template("/{id}/{id}")


class TestRoute:
    """Tests for Route."""

    def test_is_match_requires_method(self):
        route = Route.create("GET", "/users", dummy_handler)
        assert route.is_match("GET", "/users")
        assert not route.is_match("POST", "/users")

    def test_method_is_case_sensitive(self):
        route = Route.create("GET", "/users", dummy_handler)
        assert not route.is_match("get", "/users")

    def test_whole_path_must_match(self):
        route = Route.create("GET", "/users", dummy_handler)
        assert not route.is_match("GET", "/users/1")
        assert not route.is_match("GET", "/api/users")

    def test_trailing_newline_does_not_match(self):
        assert not Route.create("GET", "/users", dummy_handler).is_match("GET", "/users\n")
        assert not Route.create("GET", "/", dummy_handler).is_match("GET", "/\n")
        assert Route.create("GET", "/{id}", dummy_handler).extract("/7")["id"] == "7"

    def test_parameter_spans_slashes(self):
        """\\S+ captures across path separators."""
        route = Route.create("GET", "/hello/{name}", dummy_handler)
        assert route.is_match("GET", "/hello/a/b")
        assert route.extract("/hello/a/b")["name"].as_str() == "a/b"

    def test_invoke_passes_parameters(self):
        """Invoking binds captured values to the handler's bag."""
        route = Route.create("GET", "/hello/{name}", dummy_handler)
        response = route.invoke("/hello/bob")
        assert isinstance(response, TextResponse)
        assert response.text == "bob"

    def test_extract_non_matching_path(self):
        route = Route.create("GET", "/hello/{name}", dummy_handler)
        with pytest.raises(ValueError):
            route.extract("/bye/bob")


class TestRouter:
    """Tests for Router class."""

    def test_add_route(self):
        """Test adding routes."""
        router = Router()
        router.add_route("GET", "/users", dummy_handler)

        routes = router.routes()
        assert len(routes) == 1
        assert routes[0].path == "/users"
        assert routes[0].method == "GET"

    def test_match_returns_params(self):
        router = Router()
        router.add_route("GET", "/hello/{name}", dummy_handler)

        match = router.match("GET", "/hello/bob")
        assert isinstance(match, RouteMatch)
        assert match.params["name"] == "bob"

    def test_no_match(self):
        router = Router()
        router.add_route("GET", "/users", dummy_handler)

        assert router.match("GET", "/posts") is None
        assert router.match("DELETE", "/users") is None

    def test_first_registered_wins(self):
        """Earlier routes shadow later overlapping ones."""
        router = Router()
        first = lambda params: TextResponse("first")
        second = lambda params: TextResponse("second")
        router.add_route("GET", "/items/{id}", first)
        router.add_route("GET", "/items/special", second)

        match = router.match("GET", "/items/special")
        assert match.invoke().text == "first"

    def test_duplicates_are_kept(self):
        router = Router()
        router.add_route("GET", "/", dummy_handler)
        router.add_route("GET", "/", dummy_handler)
        assert len(router) == 2

    def test_decorator_registration(self):
        """Shortcuts work as decorators."""
        router = Router()

        @router.get("/")
        def index(params):
            return HtmlResponse("<h1>Welcome</h1>")

        @router.post("/items")
        def create(params):
            return TextResponse("created")

        assert router.match("GET", "/").route.handler is index
        assert router.match("POST", "/items").route.handler is create

    def test_direct_registration(self):
        """Shortcuts also accept the handler directly."""
        router = Router()
        router.put("/a", dummy_handler)
        router.delete("/a", dummy_handler)
        router.options("/a", dummy_handler)
        router.patch("/a", dummy_handler)

        methods = [route.method for route in router.routes()]
        assert methods == ["PUT", "DELETE", "OPTIONS", "PATCH"]

    def test_route_decorator_with_method(self):
        router = Router()

        @router.route("/items/{id}", method="PUT")
        def update(params):
            return TextResponse(params["id"].as_str())

        assert router.match("PUT", "/items/3").invoke().text == "3"

    def test_routes_returns_copy(self):
        router = Router()
        router.add_route("GET", "/", dummy_handler)
        router.routes().clear()
        assert len(router) == 1
