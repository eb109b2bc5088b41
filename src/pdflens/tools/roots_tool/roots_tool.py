"""
Roots Tool - Show the caller which directories pdflens may read.

Also subscribes the root set to ``notifications/roots/list_changed`` so a
client that changes its workspace folders is picked up on the next call.
"""

import logging

from fastmcp import Context, FastMCP
from mcp import types

from pdflens.roots import RootSet, peer_roots_fetcher
from pdflens.security import path_to_uri

logger = logging.getLogger(__name__)


def register_roots_listener(mcp: FastMCP, roots: RootSet) -> None:
    """Invalidate ``roots`` whenever the client reports a changed root list."""

    async def on_roots_list_changed(notification: types.RootsListChangedNotification) -> None:
        logger.info("Client roots changed")
        roots.invalidate()

    mcp._mcp_server.notification_handlers[types.RootsListChangedNotification] = (
        on_roots_list_changed
    )


def register_tools(mcp: FastMCP, roots: RootSet) -> None:
    """Register root listing tools with the MCP server."""

    register_roots_listener(mcp, roots)

    @mcp.tool()
    async def pdflens_list_roots(ctx: Context | None = None) -> dict:
        """
        List the directories PDF files may be read from.

        Relative paths given to the other pdflens tools are looked up in these
        directories, in order. Absolute paths must lie inside one of them.

        Returns:
            Dict with the roots as file:// URIs
        """
        snapshot = await roots.current(peer_roots_fetcher(ctx))
        return {"roots": [path_to_uri(root) for root in snapshot]}
