"""
pdflens tools.

Usage:
    from fastmcp import FastMCP
    from pdflens.roots import RootSet
    from pdflens.tools import register_all_tools

    mcp = FastMCP("pdflens")
    register_all_tools(mcp, roots=RootSet())
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pdflens.tools.pdf_read_tool import register_tools as register_pdf_read
from pdflens.tools.roots_tool import register_tools as register_roots

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from pdflens.roots import RootSet


def register_all_tools(mcp: FastMCP, roots: RootSet) -> list[str]:
    """
    Register all pdflens tools with a FastMCP server.

    Args:
        mcp: FastMCP server instance
        roots: Shared root set every tool resolves paths against

    Returns:
        List of registered tool names
    """
    register_pdf_read(mcp, roots)
    register_roots(mcp, roots)

    return [name for name in mcp._tool_manager._tools.keys() if name.startswith("pdflens_")]


__all__ = ["register_all_tools"]
