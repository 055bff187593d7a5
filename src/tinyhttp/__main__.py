"""
=============================================================================
TINYHTTP DEMO ENTRY POINT
=============================================================================

Runs a small demo site:

    GET /                  → <h1>Welcome</h1>
    GET /hello/{name}      → <h1>Hello, {name}</h1>
    GET /files/{path}      → file from --static (only when given)

=============================================================================
USAGE
=============================================================================

    # Defaults: http://localhost:9999/
    python -m tinyhttp

    # Another address, all interfaces
    python -m tinyhttp --base-uri "http://*:8080/"

    # Also serve ./public under /files/
    python -m tinyhttp --static ./public

Environment variables (TINYHTTP_BASE_URI, TINYHTTP_LOG_LEVEL, ...) are
read first; command-line flags override them.
"""

import argparse
import html
from typing import Optional

from . import __version__
from .config import HostConfig
from .host import TinyHttpHost
from .http.dispatcher import RequestProcessor
from .http.params import ParameterBag
from .http.response import FileResponse, HtmlResponse


def create_app(static_dir: Optional[str] = None) -> RequestProcessor:
    """
    Build the demo route table.

    Args:
        static_dir: Directory served under /files/, or None to skip
    """
    app = RequestProcessor()

    @app.get("/")
    def index(params: ParameterBag):
        return HtmlResponse("<h1>Welcome</h1>")

    @app.get("/hello/{name}")
    def hello(params: ParameterBag):
        return HtmlResponse(f"<h1>Hello, {html.escape(params['name'].as_str())}</h1>")

    if static_dir:
        @app.get("/files/{path}")
        def files(params: ParameterBag):
            return FileResponse(params["path"].as_str(), base_directory=static_dir)

    return app


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="tinyhttp",
        description="Minimal embedded HTTP server (demo site)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tinyhttp                               # http://localhost:9999/
  python -m tinyhttp --base-uri http://*:8080/     # All interfaces
  python -m tinyhttp --static ./public             # Files under /files/
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--base-uri", "-u",
        default=None,
        help="Listening prefix (default: http://localhost:9999/)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # FEATURE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--static", "-s",
        default=None,
        help="Directory served under /files/"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"TinyHttp {__version__}"
    )

    args = parser.parse_args(argv)

    config = HostConfig.from_env()
    if args.base_uri:
        config.base_uri = args.base_uri
    if args.static:
        config.base_directory = args.static
    if args.log_level:
        config.log_level = args.log_level

    host = TinyHttpHost(config, create_app(config.base_directory))
    host.run()


if __name__ == "__main__":
    main()
