"""
Unit tests for RequestProcessor.
"""

from collections import Counter
from urllib.parse import urlsplit

import pytest

from tinyhttp.http.dispatcher import RequestProcessor
from tinyhttp.http.request import Request
from tinyhttp.http.response import HtmlResponse, NotFoundResponse, TextResponse
from tinyhttp.http.router import Router


def make_request(method: str, url: str) -> Request:
    """Helper to create a request for testing."""
    return Request(method=method, url=urlsplit(url))


class TestRequestProcessor:
    """Tests for RequestProcessor."""

    def test_dispatches_to_matching_route(self):
        processor = RequestProcessor()
        processor.get("/hello/{name}", lambda params: HtmlResponse(f"Hello, {params['name']}"))

        response = processor.handle_request(make_request("GET", "http://localhost/hello/bob"))
        assert isinstance(response, HtmlResponse)
        assert response.text == "Hello, bob"

    def test_query_string_ignored(self):
        processor = RequestProcessor()
        processor.get("/", lambda params: TextResponse("root"))

        response = processor.handle_request(make_request("GET", "http://localhost/?x=1"))
        assert response.text == "root"

    def test_not_found(self):
        processor = RequestProcessor()
        processor.get("/", lambda params: TextResponse("root"))

        response = processor.handle_request(make_request("GET", "http://localhost/other"))
        assert isinstance(response, NotFoundResponse)
        assert response.status_code == 404
        assert response.content_type == "text/html"
        assert response.body is None

    def test_method_mismatch_is_not_found(self):
        processor = RequestProcessor()
        processor.post("/items", lambda params: TextResponse("created"))

        response = processor.handle_request(make_request("GET", "http://localhost/items"))
        assert response.status_code == 404

    def test_empty_table(self):
        response = RequestProcessor().handle_request(make_request("GET", "http://localhost/"))
        assert isinstance(response, NotFoundResponse)

    def test_handler_exception_propagates(self):
        processor = RequestProcessor()

        @processor.get("/boom")
        def boom(params):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            processor.handle_request(make_request("GET", "http://localhost/boom"))

    def test_subclass_registration(self):
        """Routes can be registered from a subclass constructor."""

        class Site(RequestProcessor):
            def __init__(self):
                super().__init__()
                self.get("/", self.index)
                self.delete("/items/{id}", self.remove)

            def index(self, params):
                return HtmlResponse("<h1>Welcome</h1>")

            def remove(self, params):
                return TextResponse(f"removed {params['id']}")

        site = Site()
        assert site.handle_request(make_request("GET", "http://localhost/")).text == "<h1>Welcome</h1>"
        response = site.handle_request(make_request("DELETE", "http://localhost/items/4"))
        assert response.text == "removed 4"

    def test_shared_router(self):
        router = Router()
        router.get("/", lambda params: TextResponse("shared"))

        processor = RequestProcessor(router)
        assert processor.router is router
        assert processor.handle_request(make_request("GET", "http://localhost/")).text == "shared"

    def test_all_shortcuts(self):
        processor = RequestProcessor()
        for register in (processor.get, processor.post, processor.put,
                         processor.delete, processor.options, processor.patch):
            register("/x", lambda params: TextResponse("ok"))

        methods = [route.method for route in processor.router.routes()]
        assert methods == ["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"]

    @pytest.mark.parametrize("count", [1, 3, 12])
    def test_each_route_dispatched_once(self, count):
        """N routes, N uniquely matching requests: every handler runs exactly once."""
        calls = Counter()
        processor = RequestProcessor()
        methods = ["GET", "POST", "PUT", "DELETE"]

        def make_handler(index):
            def handler(params):
                calls[index] += 1
                return TextResponse(f"{index}:{params['value']}")
            return handler

        for i in range(count):
            processor.router.add_route(methods[i % len(methods)], f"/r{i}/{{value}}", make_handler(i))

        for i in reversed(range(count)):
            request = make_request(methods[i % len(methods)], f"http://localhost/r{i}/v{i}")
            assert processor.handle_request(request).text == f"{i}:v{i}"

        assert calls == Counter({i: 1 for i in range(count)})
