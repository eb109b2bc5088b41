#!/usr/bin/env python3
"""
pdflens MCP Server

Exposes PDF reading tools (page count, text, page images) via Model Context
Protocol using FastMCP. Files are only read from the client's workspace
roots.

Usage:
    # Run with STDIO transport (for editor / agent integration)
    python -m pdflens.server --stdio

    # Run with HTTP transport on a custom port, reading from fixed roots
    python -m pdflens.server --port 8001 --root ~/Documents --root /srv/pdfs

Environment Variables:
    PDFLENS_PORT             - Server port (default: 4003)
    PDFLENS_HOST             - Server host (default: 0.0.0.0)
    PDFLENS_ROOTS            - Fixed root directories, os.pathsep separated
    PDFLENS_IMAGE_DIMENSION  - Default longer side of page images (default: 1024)
    LOG_LEVEL                - pdflens log level (default: INFO)
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from pdflens import config
from pdflens.roots import RootSet
from pdflens.tools import register_all_tools

logger = logging.getLogger("pdflens")


# --------------------------------------
# Logging Setup
# --------------------------------------

def setup_logger(use_stdio: bool) -> None:
    """Configure pdflens logging; third-party loggers stay at WARNING."""
    if logger.handlers:
        return

    # stdout carries the protocol in STDIO mode
    stream = sys.stderr if use_stdio else sys.stdout

    handler = logging.StreamHandler(stream)
    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] [pdflens] %(message)s",
        "%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.setLevel(config.LOG_LEVEL)


# --------------------------------------
# App Factory
# --------------------------------------

def create_app(roots: RootSet | None = None) -> FastMCP:
    """Create and configure MCP application."""
    if roots is None:
        roots = RootSet()

    mcp = FastMCP(config.SERVER_NAME, instructions=config.SERVER_INSTRUCTIONS)

    tools = register_all_tools(mcp, roots=roots)
    logger.info("Registered %d tools: %s", len(tools), tools)

    if roots.is_pinned:
        logger.info("Roots pinned to %s", [str(root) for root in roots.snapshot()])

    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        return PlainTextResponse("OK", status_code=200)

    @mcp.custom_route("/", methods=["GET"])
    async def index(request: Request) -> PlainTextResponse:
        return PlainTextResponse("pdflens MCP server")

    return mcp


# --------------------------------------
# Graceful Shutdown
# --------------------------------------

def register_shutdown_handlers() -> None:
    """Handle termination signals gracefully."""

    def shutdown_handler(signum, frame):
        logger.info("Received signal %s. Shutting down gracefully...", signum)
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown_handler)
    signal.signal(signal.SIGTERM, shutdown_handler)


# --------------------------------------
# Main Entry
# --------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="pdflens MCP Server")

    parser.add_argument(
        "--port",
        type=int,
        default=config.DEFAULT_PORT,
        help="HTTP server port",
    )

    parser.add_argument(
        "--host",
        default=config.DEFAULT_HOST,
        help="HTTP server host",
    )

    parser.add_argument(
        "--stdio",
        action="store_true",
        help="Use STDIO transport instead of HTTP",
    )

    parser.add_argument(
        "--root",
        dest="roots",
        action="append",
        default=None,
        metavar="DIR",
        help="Directory PDFs may be read from (repeatable). "
        "Pins the roots instead of asking the client.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    setup_logger(use_stdio=args.stdio)
    register_shutdown_handlers()

    pinned = args.roots or config.pinned_roots_from_env()
    roots = RootSet.pinned(pinned) if pinned else RootSet()

    mcp = create_app(roots)

    if args.stdio:
        logger.info("Starting MCP in STDIO mode")
        mcp.run(transport="stdio")
    else:
        logger.info("Starting HTTP server on %s:%d", args.host, args.port)
        mcp.run(
            transport="http",
            host=args.host,
            port=args.port,
        )


if __name__ == "__main__":
    main()
