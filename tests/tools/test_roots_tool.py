"""Tests for roots tools (FastMCP)."""

from pathlib import Path

import pytest
from fastmcp import FastMCP
from mcp import types

from pdflens.roots import RootSet
from pdflens.security import path_to_uri, resolve_reference
from pdflens.tools.roots_tool import register_tools


@pytest.fixture
def list_roots_fn(mcp: FastMCP, roots: RootSet):
    register_tools(mcp, roots)
    return mcp._tool_manager._tools["pdflens_list_roots"].fn


@pytest.mark.asyncio
async def test_lists_roots_as_uris(list_roots_fn, workspace: Path):
    result = await list_roots_fn()
    assert result == {"roots": [path_to_uri(workspace)]}


@pytest.mark.asyncio
async def test_uris_percent_encoded(mcp: FastMCP, tmp_path: Path):
    spaced = tmp_path / "my workspace"
    spaced.mkdir()
    register_tools(mcp, RootSet.pinned([spaced]))
    result = await mcp._tool_manager._tools["pdflens_list_roots"].fn()
    assert result["roots"][0].startswith("file://")
    assert result["roots"][0].endswith("my%20workspace")


@pytest.mark.asyncio
async def test_listed_roots_resolve_to_themselves(mcp: FastMCP, tmp_path: Path):
    a = tmp_path / "a"
    b = tmp_path / "b c"
    a.mkdir()
    b.mkdir()
    roots = RootSet.pinned([a, b])
    register_tools(mcp, roots)
    result = await mcp._tool_manager._tools["pdflens_list_roots"].fn()
    for uri, root in zip(result["roots"], roots.snapshot(), strict=True):
        assert resolve_reference(uri, roots.snapshot()) == root


@pytest.mark.asyncio
async def test_no_context_falls_back_to_cwd(mcp: FastMCP, tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    register_tools(mcp, RootSet())
    result = await mcp._tool_manager._tools["pdflens_list_roots"].fn()
    assert result == {"roots": [path_to_uri(tmp_path.resolve())]}


@pytest.mark.asyncio
async def test_roots_changed_notification_invalidates(mcp: FastMCP, tmp_path: Path):
    a = tmp_path / "a"
    a.mkdir()
    roots = RootSet()
    register_tools(mcp, roots)

    async def fetch() -> list[str]:
        return [path_to_uri(a)]

    await roots.current(fetch)
    assert not roots.is_stale

    handler = mcp._mcp_server.notification_handlers[types.RootsListChangedNotification]
    await handler(types.RootsListChangedNotification(method="notifications/roots/list_changed"))
    assert roots.is_stale
