"""Root directory listing tool."""

from .roots_tool import register_roots_listener, register_tools

__all__ = ["register_roots_listener", "register_tools"]
