"""
=============================================================================
HTTP REQUEST DECODING
=============================================================================

Turns the raw bytes of one HTTP/1.x request into an immutable Request.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET /hello/bob?lang=en HTTP/1.1\r\n        ◄── request line       │
    │   Host: localhost:9999\r\n                   ◄── headers            │
    │   Accept: text/html\r\n                                             │
    │   Accept: */*\r\n                            (repeats are kept)     │
    │   Content-Length: 5\r\n                                             │
    │   \r\n                                       ◄── separator          │
    │   hello                                      ◄── body               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

                         RequestParser.parse()
                                 │
                                 ▼
    Request(
        method  = "GET",
        url     = SplitResult(scheme="http", netloc="localhost:9999",
                              path="/hello/bob", query="lang=en"),
        length  = 5,
        body    = BytesIO(b"hello"),
        headers = Headers({"Host": ["localhost:9999"],
                           "Accept": ["text/html", "*/*"], ...}),
    )

=============================================================================
LENIENCY
=============================================================================

The decoder is forgiving about the parts a handler can live
without:

    - Content-Length missing or not a number      → length = 0
    - Body shorter than Content-Length            → body holds what arrived
    - Unknown method token ("PURGE")              → kept; it simply won't
                                                    match any route

Only a request line that cannot be split into METHOD / TARGET / VERSION
raises HTTPParseError.

The URL path is NOT percent-decoded. Route templates match the path
exactly as the client sent it.
"""

import io
import logging
import re
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple
from urllib.parse import SplitResult, parse_qs, urlsplit


logger = logging.getLogger(__name__)

_DIGITS_PATTERN = re.compile(r"^\s*[0-9]+\s*\Z")


class HTTPParseError(Exception):
    """
    Raised when raw bytes cannot be decoded as an HTTP request.

    Attributes:
        message: Human-readable description of the problem
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# =============================================================================
# HEADERS
# =============================================================================

class Headers(Mapping):
    """
    Read-only, case-insensitive multi-value header mapping.

    Each header name maps to the LIST of values it was sent with, in
    arrival order. The spelling of the first occurrence is kept for
    iteration.

    Example:
        >>> headers = Headers([("Accept", "text/html"), ("accept", "*/*")])
        >>> headers["ACCEPT"]
        ['text/html', '*/*']
        >>> headers.first("accept")
        'text/html'
        >>> list(headers)
        ['Accept']
    """

    def __init__(self, raw: Optional[Iterable[Tuple[str, str]]] = None):
        self._values: Dict[str, List[str]] = {}
        self._names: Dict[str, str] = {}
        for name, value in raw or ():
            key = name.lower()
            if key not in self._values:
                self._values[key] = []
                self._names[key] = name
            self._values[key].append(value)

    @classmethod
    def from_dict(cls, values: Mapping[str, Iterable[str]]) -> "Headers":
        """Build from a mapping of name → values (a str counts as one value)."""
        pairs = []
        for name, items in values.items():
            if isinstance(items, str):
                items = [items]
            pairs.extend((name, item) for item in items)
        return cls(pairs)

    def __getitem__(self, name: str) -> List[str]:
        return list(self._values[name.lower()])

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._names.values())

    def __len__(self) -> int:
        return len(self._values)

    def getlist(self, name: str) -> List[str]:
        """All values for a header (empty list when absent)."""
        return list(self._values.get(name.lower(), ()))

    def first(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value for a header, or default."""
        values = self._values.get(name.lower())
        return values[0] if values else default

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"


# =============================================================================
# REQUEST
# =============================================================================

@dataclass(frozen=True)
class Request:
    """
    One decoded HTTP request.

    Attributes:
        method: Request method as sent ("GET", "POST", ...)
        url: Absolute request URL (path not percent-decoded)
        length: Declared Content-Length, 0 when missing or malformed
        body: Readable binary stream over the received body
        headers: Case-insensitive header name → list of values
    """

    method: str
    url: SplitResult
    length: int = 0
    body: BinaryIO = field(default_factory=io.BytesIO, repr=False, compare=False)
    headers: Headers = field(default_factory=Headers)

    @property
    def path(self) -> str:
        """Absolute path of the URL, "/" when empty."""
        return self.url.path or "/"

    @property
    def query(self) -> Dict[str, List[str]]:
        return parse_qs(self.url.query, keep_blank_values=True)

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get the first value of a header (case-insensitive).

        Args:
            name: Header name
            default: Value returned if the header is absent
        """
        return self.headers.first(name, default)

    def read_body(self) -> bytes:
        return self.body.read()


def parse_content_length(values: Iterable[str]) -> int:
    """
    Leniently parse Content-Length.

    Returns the first value as an int; 0 when absent, malformed or negative.
    """
    for value in values:
        if not _DIGITS_PATTERN.match(value):
            return 0
        return int(value.strip())
    return 0


# =============================================================================
# PARSER
# =============================================================================

class RequestParser:
    """
    Decodes raw request bytes into Request objects.

        raw bytes
            │
            ├── split at \\r\\n\\r\\n ──────────► header text │ body bytes
            │
            ├── request line ──────────────► method, target, version
            │
            ├── header lines ──────────────► Headers (multi-value)
            │
            └── absolute URL ──────────────► target + Host header
                                             (or the default origin)
    """

    REQUEST_LINE_PATTERN = re.compile(r"^([A-Za-z]+) ([^ ]+) (HTTP/\d\.\d)$")
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    def __init__(self, scheme: str = "http", default_host: str = "localhost"):
        """
        Args:
            scheme: Scheme of the listening endpoint
            default_host: Authority used when the client sends no Host header
        """
        self.scheme = scheme
        self.default_host = default_host

    def parse(self, data: bytes) -> Request:
        """
        Parse one request.

        Args:
            data: Raw bytes (headers plus whatever body was received)

        Returns:
            The decoded Request

        Raises:
            HTTPParseError: The request line is missing or malformed
        """
        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            header_section = data.decode("latin-1")
            body = b""
        else:
            header_section = data[:header_end].decode("latin-1")
            body = data[header_end + 4:]

        lines = header_section.split("\r\n")
        if not lines or not lines[0]:
            raise HTTPParseError("Empty request")

        method, target, _version = self._parse_request_line(lines[0])
        headers = Headers(self._parse_headers(lines[1:]))

        length = parse_content_length(headers.getlist("content-length"))

        return Request(
            method=method,
            url=self._build_url(target, headers),
            length=length,
            body=io.BytesIO(body[:length]),
            headers=headers,
        )

    def _parse_request_line(self, line: str) -> Tuple[str, str, str]:
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line[:100]!r}")
        method, target, version = match.groups()
        return method, target, version

    def _parse_headers(self, lines: List[str]) -> List[Tuple[str, str]]:
        """
        Parse header lines into (name, value) pairs.

        Lines starting with whitespace continue the previous header
        (obsolete line folding). Lines without a colon are skipped.
        """
        pairs: List[Tuple[str, str]] = []
        for line in lines:
            if not line:
                continue

            if line[0] in " \t":
                if pairs:
                    name, value = pairs[-1]
                    pairs[-1] = (name, f"{value} {line.strip()}")
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                logger.debug(f"Skipping malformed header line: {line[:100]!r}")
                continue

            pairs.append((match.group(1).strip(), match.group(2).strip()))
        return pairs

    def _build_url(self, target: str, headers: Headers) -> SplitResult:
        # absolute-form: "GET http://host/path HTTP/1.1"
        if "://" in target:
            return urlsplit(target)

        if target == "*":
            target = "/"
        if not target.startswith("/"):
            target = "/" + target

        # Host fills netloc only; path and query come from the target
        host = headers.first("host") or self.default_host
        rest, _, fragment = target.partition("#")
        path, _, query = rest.partition("?")
        return SplitResult(self.scheme, host, path, query, fragment)
