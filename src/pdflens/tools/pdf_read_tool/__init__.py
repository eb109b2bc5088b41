"""PDF read tools: page count, text and page images."""

from .pdf_read_tool import register_tools

__all__ = ["register_tools"]
