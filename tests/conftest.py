"""
pytest configuration and fixtures.
"""

import socket
from typing import Generator

import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tinyhttp import (
    FileResponse,
    HostConfig,
    HtmlResponse,
    RequestProcessor,
    TextResponse,
    TinyHttpHost,
)


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /hello/bob?lang=en HTTP/1.1\r\n"
        b"Host: localhost:9999\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a body."""
    body = b"name=bob&age=42"
    return (
        b"POST /users HTTP/1.1\r\n"
        b"Host: localhost:9999\r\n"
        b"Content-Type: application/x-www-form-urlencoded\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
        + body
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def html_dir(tmp_path: Path) -> Path:
    """Base directory holding one text file and one file without extension."""
    base = tmp_path / "html"
    base.mkdir()
    (base / "test.txt").write_text("Test")
    (base / "README").write_text("no extension")
    (base / "sub").mkdir()
    (base / "sub" / "page.html").write_text("<p>sub</p>")
    (tmp_path / "secret.txt").write_text("outside")
    return base


class RawResponse:
    """Parsed view of the raw bytes a server sent back."""

    def __init__(self, raw: bytes):
        self.raw = raw
        head, _, self.body = raw.partition(b"\r\n\r\n")
        lines = head.decode("latin-1").split("\r\n")
        self.status_line = lines[0]
        parts = self.status_line.split(" ", 2)
        self.status = int(parts[1]) if len(parts) > 1 and parts[1].isdigit() else None
        self.headers = {}
        for line in lines[1:]:
            name, _, value = line.partition(":")
            self.headers[name.strip().lower()] = value.strip()


class TestClient:
    """Minimal socket client: one request per connection, read until close."""

    __test__ = False

    def __init__(self, port: int, timeout: float = 5.0):
        self.port = port
        self.timeout = timeout

    def send(self, raw: bytes) -> RawResponse:
        with socket.create_connection(("127.0.0.1", self.port), timeout=self.timeout) as s:
            s.sendall(raw)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return RawResponse(b"".join(chunks))

    def request(self, method: str, path: str, body: bytes = b"") -> RawResponse:
        head = f"{method} {path} HTTP/1.1\r\nHost: 127.0.0.1:{self.port}\r\n"
        if body:
            head += f"Content-Length: {len(body)}\r\n"
        return self.send(head.encode() + b"\r\n" + body)

    def get(self, path: str) -> RawResponse:
        return self.request("GET", path)


@pytest.fixture
def app(html_dir: Path) -> RequestProcessor:
    """Processor with a few routes used by the integration tests."""
    processor = RequestProcessor()

    @processor.get("/")
    def index(params):
        return HtmlResponse("<h1>Welcome</h1>")

    @processor.get("/hello/{name}")
    def hello(params):
        return HtmlResponse(f"<h1>Hello, {params['name']}</h1>")

    @processor.post("/echo")
    def echo(params):
        return TextResponse("posted")

    @processor.get("/boom")
    def boom(params):
        raise RuntimeError("handler failure")

    @processor.get("/files/{path}")
    def files(params):
        return FileResponse(params["path"].as_str(), base_directory=html_dir)

    return processor


@pytest.fixture
def running_host(app: RequestProcessor, free_port: int) -> Generator[TinyHttpHost, None, None]:
    """A host serving the app fixture on a free port."""
    host = TinyHttpHost(
        HostConfig(base_uri=f"http://127.0.0.1:{free_port}/", timeout=5.0),
        app,
    )
    host.start()
    yield host
    host.stop()


@pytest.fixture
def client(running_host: TinyHttpHost) -> TestClient:
    """Client bound to the running host."""
    return TestClient(running_host.address[1])


@pytest.fixture
def make_client():
    """Factory for clients of hosts a test starts itself."""
    return TestClient
