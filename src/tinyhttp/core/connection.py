"""
=============================================================================
CLIENT CONNECTIONS
=============================================================================

Wraps one accepted socket: read exactly one request, hand out a stream
for the response, close.

=============================================================================
TCP IS A BYTE STREAM
=============================================================================

recv() returns whatever the kernel has buffered, not "one request". A
request can arrive split over many recv() calls, so reading is a loop:

    ┌─────────────────────────────────────────────────────────────────┐
    │   while "\\r\\n\\r\\n" not in buffer:     ◄── headers incomplete    │
    │       buffer += recv()                                          │
    │                                                                  │
    │   n = Content-Length (0 when absent or malformed)               │
    │                                                                  │
    │   while len(body) < n:                ◄── body incomplete       │
    │       buffer += recv()                                          │
    │       (client hung up? keep what we have)                       │
    └─────────────────────────────────────────────────────────────────┘

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

There is no keep-alive. Every response is written with
"Connection: close" and the socket is shut down afterwards, which is
also how the client knows the body is complete (no Content-Length is
sent).
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Optional, Tuple

from ..http.request import parse_content_length


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Lifecycle of a connection."""

    NEW = "new"
    READING = "reading"
    WRITING = "writing"
    CLOSED = "closed"


class RequestTooLarge(ValueError):
    """The request exceeded the configured size limit."""


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The accepted client socket
        address: Client (ip, port)
        id: Short identifier used in log lines
        state: Current lifecycle state
        created_at: When the connection was accepted
    """

    socket: socket.socket
    address: Tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 8192
    timeout: Optional[float] = 30.0
    max_request_size: int = 10 * 1024 * 1024

    _output: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    def read_request(self) -> Optional[bytes]:
        """
        Read one complete request: headers plus the declared body.

        Returns:
            Raw request bytes, or None if the client closed the connection
            before sending a full header section

        Raises:
            RequestTooLarge: The request exceeds max_request_size
            socket.timeout: The client stalled for longer than timeout
        """
        self.state = ConnectionState.READING
        buffer = b""

        while b"\r\n\r\n" not in buffer:
            chunk = self._recv()
            if not chunk:
                if buffer:
                    logger.debug(f"[{self.id}] Client closed mid-headers")
                return None
            buffer += chunk
            self._check_size(buffer)

        header_end = buffer.find(b"\r\n\r\n")
        body_start = header_end + 4
        content_length = self._content_length(buffer[:header_end])

        if body_start + content_length > self.max_request_size:
            raise RequestTooLarge(
                f"Declared body of {content_length} bytes exceeds limit"
            )

        while len(buffer) - body_start < content_length:
            chunk = self._recv()
            if not chunk:
                break
            buffer += chunk

        return buffer[:body_start + content_length]

    def _recv(self) -> bytes:
        try:
            return self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return b""

    def _check_size(self, buffer: bytes) -> None:
        if len(buffer) > self.max_request_size:
            raise RequestTooLarge(f"Request too large: {len(buffer)} bytes")

    @staticmethod
    def _content_length(header_section: bytes) -> int:
        values = []
        for line in header_section.decode("latin-1").split("\r\n")[1:]:
            name, sep, value = line.partition(":")
            if sep and name.strip().lower() == "content-length":
                values.append(value)
        return parse_content_length(values)

    def output_stream(self) -> BinaryIO:
        """
        Writable binary stream for the response.

        Closing the stream does not close the socket; close() does that.
        """
        if self._output is None:
            self.state = ConnectionState.WRITING
            self._output = self.socket.makefile("wb")
        return self._output

    def close(self):
        """
        Close the connection gracefully.

            1. shutdown(SHUT_WR)   client sees end of response
            2. drain               discard anything the client still sends
            3. close()             release the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        if self._output is not None:
            try:
                self._output.close()
            except OSError:
                pass

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
