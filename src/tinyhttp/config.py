"""
=============================================================================
HOST CONFIGURATION
=============================================================================

Everything the host needs to know before it binds a socket.

=============================================================================
THE BASE URI
=============================================================================

A host is addressed by ONE base URI, a listening prefix of the form:

    http://localhost:9999/app/
    ──┬─   ───┬───── ─┬── ─┬──
      │       │       │    └── path prefix: requests outside it get 404
      │       │       └─────── port (default 80)
      │       └─────────────── host to bind ("*" or "+" = all interfaces)
      └─────────────────────── scheme (only "http" is served)

Route templates are matched against the FULL request path, prefix
included. A handler for "/app/hello/{name}" is registered as such.

=============================================================================
SOURCES
=============================================================================

    HostConfig(base_uri="http://127.0.0.1:8080/")    from code
    HostConfig.from_env()                             from TINYHTTP_* variables

Both paths end in validate(), which the host calls before binding:
a bad config fails at startup, not on the first request.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit


DEFAULT_BASE_URI = "http://localhost:9999/"

# Hosts meaning "every interface"
WILDCARD_HOSTS = ("*", "+")


@dataclass
class HostConfig:
    """
    Configuration for a TinyHttpHost.

    Example:
        config = HostConfig(
            base_uri="http://*:8080/",
            base_directory="/srv/site",
            log_level="DEBUG",
        )
    """

    # ─────────────────────────────────────────────────────────────────────
    # ADDRESSING
    # ─────────────────────────────────────────────────────────────────────

    base_uri: str = DEFAULT_BASE_URI
    """Listening prefix, scheme://host:port/path-prefix."""

    base_directory: Optional[str] = None
    """
    Directory FileResponse serves from. None means "html" under the
    current working directory. Handlers pass it explicitly:

        FileResponse(path, base_directory=config.resolved_base_directory)
    """

    # ─────────────────────────────────────────────────────────────────────
    # SOCKET SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    backlog: int = 128
    """Pending connections the kernel queues before refusing new ones."""

    buffer_size: int = 8192
    """Bytes per recv() call."""

    timeout: Optional[float] = 30.0
    """Socket timeout for a client connection, in seconds."""

    max_request_size: int = 10 * 1024 * 1024  # 10 MB
    """Largest request (headers + body) that will be read."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING / IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Level passed to logging.basicConfig by TinyHttpHost.run()."""

    server_name: str = "TinyHttp/1.0"
    """Value of the Server response header."""

    @classmethod
    def from_env(cls) -> "HostConfig":
        """
        Create configuration from environment variables.

        Environment variables:
            TINYHTTP_BASE_URI: Listening prefix
            TINYHTTP_BASE_DIRECTORY: FileResponse base directory
            TINYHTTP_TIMEOUT: Client socket timeout (seconds)
            TINYHTTP_LOG_LEVEL: DEBUG, INFO, WARNING or ERROR
        """
        return cls(
            base_uri=os.getenv("TINYHTTP_BASE_URI", DEFAULT_BASE_URI),
            base_directory=os.getenv("TINYHTTP_BASE_DIRECTORY"),
            timeout=float(os.getenv("TINYHTTP_TIMEOUT", "30")),
            log_level=os.getenv("TINYHTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: If any value is invalid
        """
        parts = urlsplit(self.base_uri)
        if parts.scheme != "http":
            raise ValueError(f"Unsupported scheme in base URI: {self.base_uri!r}")
        if not parts.hostname:
            raise ValueError(f"Missing host in base URI: {self.base_uri!r}")
        port = self.port
        if not 0 <= port <= 65535:
            raise ValueError(f"Invalid port: {port}. Must be 0-65535.")
        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")
        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.max_request_size < 1024:
            raise ValueError("max_request_size must be >= 1024")

    # ─────────────────────────────────────────────────────────────────────
    # DERIVED VALUES
    # ─────────────────────────────────────────────────────────────────────

    @property
    def scheme(self) -> str:
        return urlsplit(self.base_uri).scheme

    @property
    def host(self) -> str:
        """Bind address: "" for the wildcard hosts, else the URI host."""
        hostname = urlsplit(self.base_uri).hostname or ""
        if hostname in WILDCARD_HOSTS:
            return ""
        return hostname

    @property
    def port(self) -> int:
        try:
            port = urlsplit(self.base_uri).port
        except ValueError:
            raise ValueError(f"Invalid port in base URI: {self.base_uri!r}") from None
        return 80 if port is None else port

    @property
    def path_prefix(self) -> str:
        """Path part of the base URI, always ending in "/"."""
        path = urlsplit(self.base_uri).path or "/"
        if not path.endswith("/"):
            path += "/"
        return path

    @property
    def resolved_base_directory(self) -> Path:
        if self.base_directory:
            return Path(self.base_directory)
        return Path.cwd() / "html"
