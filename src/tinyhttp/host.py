"""
=============================================================================
TINYHTTP HOST
=============================================================================

The host ties the pieces together: it listens on the base URI, turns
every incoming connection into a Request, asks the RequestProcessor for
a Response and writes that Response back.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        REQUEST LIFECYCLE                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   listener thread                worker thread (one per connection) │
    │   ───────────────                ──────────────────────────────────  │
    │                                                                      │
    │   accept() ──► Connection ──────► read_request()                     │
    │      ▲                                 │                             │
    │      │                                 ▼                             │
    │      └── immediately           RequestParser.parse() ──► Request     │
    │          back to accept()              │                             │
    │                                        ▼                             │
    │                                outside base URI path? ──► 404        │
    │                                        │                             │
    │                                        ▼                             │
    │                                processor.handle_request()            │
    │                                        │                             │
    │                                        ▼                             │
    │                                write_response() ──► close            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
FAILURE ISOLATION
=============================================================================

Nothing that happens inside a worker can take the listener down. A parse
error, a handler exception or a client that hangs up mid-write is logged
and the connection is closed; whatever part of the response was already
written stays written. The listener keeps accepting.

=============================================================================
THREADING
=============================================================================

Every accepted connection gets its own daemon thread. There is no pool
and no bound on concurrency; a burst of N connections means N threads.
Handlers run concurrently and must not share mutable state without
their own locking.

Usage:
    processor = RequestProcessor()

    @processor.get("/hello/{name}")
    def hello(params):
        return HtmlResponse(f"<h1>Hello, {params['name']}</h1>")

    host = TinyHttpHost("http://localhost:9999/", processor)
    host.run()                    # blocks, Ctrl+C to stop

    # or, embedded:
    with TinyHttpHost("http://localhost:0/", processor) as host:
        print(host.address)
"""

import logging
import threading
from datetime import datetime, timezone
from typing import BinaryIO, Optional, Tuple, Union

from .config import HostConfig
from .core.connection import Connection, RequestTooLarge
from .core.socket_server import SocketServer
from .http.dispatcher import RequestProcessor
from .http.request import HTTPParseError, RequestParser
from .http.response import NotFoundResponse, Response, format_http_date
from .http.status_codes import reason_phrase


logger = logging.getLogger(__name__)


def write_response(
    response: Response,
    output: BinaryIO,
    server_name: Optional[str] = None,
) -> None:
    """
    Serialize a response onto an output stream.

        HTTP/1.1 <status> <phrase>      status None → 200
        <each response header>
        Content-Type: <type>            only when set
        Date: <now>
        Server: <server_name>           only when given
        Connection: close
        <blank line>
        <body writer output>            writer called exactly once

    The output is flushed and closed even when the body writer raises;
    the exception then propagates to the caller.

    Args:
        response: Response to write
        output: Writable binary stream (socket file or BytesIO)
        server_name: Value for the Server header
    """
    status = int(response.status_code) if response.status_code is not None else 200

    lines = [f"HTTP/1.1 {status} {reason_phrase(status)}"]
    for name, value in response.headers.items():
        lines.append(f"{name}: {value}")
    if response.content_type is not None:
        lines.append(f"Content-Type: {response.content_type}")
    lines.append(f"Date: {format_http_date(datetime.now(timezone.utc))}")
    if server_name:
        lines.append(f"Server: {server_name}")
    lines.append("Connection: close")

    head = "\r\n".join(lines) + "\r\n\r\n"

    try:
        output.write(head.encode("latin-1"))
        if response.body is not None:
            response.body(output)
    finally:
        try:
            output.flush()
        finally:
            output.close()


class TinyHttpHost:
    """
    Embedded HTTP host.

    Args:
        config: HostConfig, or a base URI string such as
            "http://localhost:9999/"
        processor: Anything with handle_request(request) -> Response,
            usually a RequestProcessor

    Raises:
        ValueError: The configuration is invalid
    """

    def __init__(
        self,
        config: Union[HostConfig, str, None] = None,
        processor: Optional[RequestProcessor] = None,
    ):
        if config is None:
            config = HostConfig()
        elif isinstance(config, str):
            config = HostConfig(base_uri=config)
        config.validate()

        self.config = config
        self.processor = processor if processor is not None else RequestProcessor()

        self._server = SocketServer(config)
        self._thread: Optional[threading.Thread] = None
        self._parser = RequestParser(
            scheme=config.scheme,
            default_host=f"{config.host or 'localhost'}:{config.port}",
        )

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port). Useful with port 0."""
        return self._server.address

    @property
    def is_running(self) -> bool:
        return self._server.is_running

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self) -> Tuple[str, int]:
        """
        Start listening and serve from a background thread.

        Returns once the socket is listening. Logging configuration is
        left to the embedding application.

        Returns:
            The bound (host, port)

        Raises:
            RuntimeError: Already started
            OSError: The address could not be bound
        """
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Host is already running")

        address = self._server.bind()
        self._thread = threading.Thread(
            target=self._server.serve,
            args=(self._handle_connection,),
            name="tinyhttp-listener",
            daemon=True,
        )
        self._thread.start()
        return address

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """
        Stop accepting connections.

        Idempotent and safe while accept() is pending. Requests already
        being processed finish on their own threads.
        """
        self._server.shutdown()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def run(self) -> None:
        """
        Configure logging and serve in the calling thread until SIGINT
        or SIGTERM.
        """
        self._setup_logging()
        logger.info(f"TinyHttp serving {self.config.base_uri}")
        try:
            self._server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Keyboard interrupt received")
        finally:
            self._server.shutdown()

    def _setup_logging(self):
        logging.basicConfig(
            level=getattr(logging, self.config.log_level.upper(), logging.INFO),
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def __enter__(self) -> "TinyHttpHost":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Hand the connection to its own worker thread and return at once."""
        worker = threading.Thread(
            target=self._process,
            args=(conn,),
            name=f"tinyhttp-{conn.id}",
            daemon=True,
        )
        worker.start()

    def _process(self, conn: Connection):
        """Read, dispatch and answer one request. Never raises."""
        with conn:
            try:
                raw = conn.read_request()
                if raw is None:
                    return

                request = self._parser.parse(raw)
                logger.debug(f"[{conn.id}] {request.method} {request.path}")

                if self._in_prefix(request.path):
                    response = self.processor.handle_request(request)
                else:
                    logger.warning(f"[{conn.id}] Path outside {self.config.path_prefix}: {request.path}")
                    response = NotFoundResponse()

                write_response(response, conn.output_stream(), self.config.server_name)

            except HTTPParseError as e:
                logger.warning(f"[{conn.id}] Bad request from {conn.client_ip}: {e.message}")
            except RequestTooLarge as e:
                logger.warning(f"[{conn.id}] Rejected request from {conn.client_ip}: {e}")
            except (ConnectionError, TimeoutError) as e:
                logger.debug(f"[{conn.id}] Connection dropped: {e}")
            except Exception:
                logger.exception(f"[{conn.id}] Error processing request")

    def _in_prefix(self, path: str) -> bool:
        prefix = self.config.path_prefix
        return prefix == "/" or path.startswith(prefix) or path == prefix[:-1]
