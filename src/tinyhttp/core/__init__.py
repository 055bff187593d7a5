"""
Core networking components.

- socket_server: Listening socket and accept loop
- connection: One accepted client socket
"""

from .connection import Connection, ConnectionState, RequestTooLarge
from .socket_server import SocketServer

__all__ = ["SocketServer", "Connection", "ConnectionState", "RequestTooLarge"]
