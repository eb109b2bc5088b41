"""
Root Set Provider - the permitted directories a caller may read from.

The set is process-lifetime state shared by every tool call. Readers take an
immutable snapshot (a tuple); a refresh builds a complete new tuple and swaps
it in, so a resolve never observes a half-updated set.

Sources, in order of precedence:
- Pinned roots (``--root`` / PDFLENS_ROOTS): never refreshed.
- The MCP client's ``roots/list`` answer, re-read after every
  ``notifications/roots/list_changed``.
- The canonical current working directory, when the client has no roots
  capability, the listing fails on first load, or it yields no usable entry.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from pathlib import Path

from fastmcp import Context
from mcp import types

from pdflens.security import file_uri_to_path

logger = logging.getLogger(__name__)

RootsFetcher = Callable[[], Awaitable[Sequence[str]]]
"""Async callable returning the peer's current root URIs."""


def canonical_root(path: Path) -> Path:
    """Canonicalize a root directory, keeping the raw absolute path on failure."""
    try:
        return path.resolve(strict=True)
    except OSError as e:
        logger.warning("Could not canonicalize root %s: %s", path, e)
        return path.absolute()


def cwd_roots() -> tuple[Path, ...]:
    """The canonical working directory as a one-element root set, or empty."""
    try:
        return (Path.cwd().resolve(strict=True),)
    except OSError as e:
        logger.error("Cannot determine working directory: %s", e)
        return ()


def parse_root_uris(uris: Iterable[str]) -> tuple[Path, ...]:
    """Convert root URIs to canonical paths, dropping non-file entries and duplicates."""
    roots: dict[Path, None] = {}
    for uri in uris:
        path = file_uri_to_path(uri)
        if path is None:
            logger.warning("Ignoring root that is not a local file URI: %s", uri)
            continue
        roots.setdefault(canonical_root(path), None)
    return tuple(roots)


class RootSet:
    """Ordered, de-duplicated set of permitted root directories."""

    def __init__(self) -> None:
        self._roots: tuple[Path, ...] = ()
        self._loaded = False
        self._stale = True
        self._pinned = False
        self._lock = asyncio.Lock()

    @classmethod
    def pinned(cls, paths: Iterable[Path | str]) -> RootSet:
        """Create a root set fixed to ``paths`` that is never refreshed from the peer."""
        root_set = cls()
        roots = dict.fromkeys(canonical_root(Path(p).expanduser()) for p in paths)
        root_set._replace(tuple(roots))
        root_set._pinned = True
        return root_set

    @property
    def is_pinned(self) -> bool:
        return self._pinned

    @property
    def is_stale(self) -> bool:
        return self._stale and not self._pinned

    def snapshot(self) -> tuple[Path, ...]:
        """Current roots. The returned tuple never changes."""
        return self._roots

    def invalidate(self) -> None:
        """Mark the set for refresh on next use (roots-changed notification)."""
        if self._pinned:
            return
        self._stale = True

    async def current(self, fetch: RootsFetcher | None) -> tuple[Path, ...]:
        """Return the current roots, refreshing first if the set is stale."""
        if self.is_stale:
            async with self._lock:
                if self.is_stale:
                    await self.refresh(fetch)
        return self._roots

    async def refresh(self, fetch: RootsFetcher | None) -> None:
        """
        Reload the set from the peer.

        Args:
            fetch: Root listing call, or None when the peer does not support
                listing roots. In that case the working directory is loaded
                once and the set is pinned.
        """
        if self._pinned:
            return

        if fetch is None:
            logger.info("Client does not list roots; using working directory")
            if not self._loaded:
                self._replace(cwd_roots())
            self._pinned = True
            return

        logger.info("Updating roots")
        # A change notification during the fetch sets this again
        self._stale = False
        try:
            uris = await fetch()
        except Exception as e:
            logger.error("Failed to list roots: %s", e)
            if not self._loaded:
                self._replace(cwd_roots())
            return

        roots = parse_root_uris(uris)
        if not roots:
            logger.info("Client listed no usable roots; using working directory")
            roots = cwd_roots()
        self._replace(roots)
        logger.info("Roots: %s", [str(root) for root in roots])

    def _replace(self, roots: tuple[Path, ...]) -> None:
        self._roots = roots
        self._loaded = True


def peer_roots_fetcher(ctx: Context | None) -> RootsFetcher | None:
    """Build a root listing call for the client behind ``ctx``, if it supports one."""
    if ctx is None:
        return None

    capability = types.ClientCapabilities(roots=types.RootsCapability())
    if not ctx.session.check_client_capability(capability):
        return None

    async def fetch() -> list[str]:
        return [str(root.uri) for root in await ctx.list_roots()]

    return fetch
