"""
=============================================================================
TCP ACCEPT LOOP
=============================================================================

Owns the listening socket. For every accepted client it builds a
Connection and hands it to a callback, then goes straight back to
accept(); the callback must not block.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   bind()        socket → SO_REUSEADDR → bind → listen               │
    │     │                                                                │
    │     ▼                                                                │
    │   serve(cb)     while running:                                       │
    │     │               accept()  ◄── wakes every second to check        │
    │     │               cb(Connection(...))      "running"               │
    │     │                                                                │
    │     ▼                                                                │
    │   shutdown()    running = False → loop exits → socket closed         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
SHUTDOWN WHILE ACCEPTING
=============================================================================

Stopping is always benign. accept() runs with a one-second timeout, so
the loop notices shutdown() within a second. If the socket is closed
underneath a pending accept(), the resulting OSError is expected and
only logged at debug level. Any other accept() failure, or a failure
handing a client to the callback, is logged and the loop keeps going.
"""

import logging
import signal
import socket
import time
from typing import Callable, Optional, Tuple

from ..config import HostConfig
from .connection import Connection


logger = logging.getLogger(__name__)


ACCEPT_TIMEOUT = 1.0
ACCEPT_ERROR_BACKOFF = 0.1


class SocketServer:
    """
    Low-level TCP server.

    Usage:
        server = SocketServer(config)
        server.bind()
        server.serve(handle_connection)  # Blocks until shutdown()
    """

    def __init__(self, config: HostConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port when 0 was requested."""
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Rebind immediately after a restart (skip TIME_WAIT)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        sock.settimeout(ACCEPT_TIMEOUT)
        return sock

    def bind(self) -> Tuple[str, int]:
        """
        Create the socket, bind it and start listening.

        Returns:
            The bound (host, port)

        Raises:
            OSError: The address could not be bound
        """
        self._socket = self._create_socket()
        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._running = True

        host, port = self.address
        logger.info(f"Listening on {host or '*'}:{port}")
        return host, port

    def serve(self, connection_handler: Callable[[Connection], None]):
        """
        Run the accept loop until shutdown(). Closes the socket on exit.

        Args:
            connection_handler: Called with each new Connection
        """
        if self._socket is None:
            raise RuntimeError("bind() must be called before serve()")
        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind and serve in the calling (main) thread, with SIGTERM/SIGINT
        triggering a graceful shutdown. Blocks until shutdown.
        """
        self.bind()
        self._setup_signals()
        self.serve(connection_handler)

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._running:
                    logger.debug(f"Accept interrupted by shutdown: {e}")
                    break
                # ECONNABORTED, EMFILE, ...: the listener itself is still fine
                logger.error(f"Accept error: {e}")
                time.sleep(ACCEPT_ERROR_BACKOFF)
                continue

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")
            try:
                conn = Connection(
                    socket=client_socket,
                    address=client_address,
                    buffer_size=self.config.buffer_size,
                    timeout=self.config.timeout,
                    max_request_size=self.config.max_request_size,
                )
                connection_handler(conn)
            except Exception:
                logger.exception(f"Failed to hand off connection from {client_address[0]}")
                try:
                    client_socket.close()
                except OSError:
                    pass

    def _setup_signals(self):
        def shutdown_handler(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, shutting down...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def shutdown(self):
        """Stop accepting. Safe to call repeatedly and from any thread."""
        if self._running:
            logger.info("Stopping listener...")
        self._running = False

    def _cleanup(self):
        self._restore_signals()
        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None
        logger.info("Listener stopped")
