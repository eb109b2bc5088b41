"""Pytest configuration and fixtures."""

from collections.abc import Callable, Sequence
from pathlib import Path

import fitz  # PyMuPDF
import pytest
from fastmcp import FastMCP

from pdflens.roots import RootSet

PageSpec = tuple[float, float, str]


def write_pdf(path: Path, pages: Sequence[PageSpec]) -> Path:
    """Write a PDF with one page per (width, height, text) entry."""
    doc = fitz.open()
    for width, height, text in pages:
        page = doc.new_page(width=width, height=height)
        if text:
            page.insert_text((20, 40), text, fontsize=12)
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def mcp() -> FastMCP:
    """Create a fresh FastMCP instance for testing."""
    return FastMCP("test-server")


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A canonical workspace directory used as the only root."""
    ws = tmp_path / "ws"
    ws.mkdir()
    return ws.resolve()


@pytest.fixture
def roots(workspace: Path) -> RootSet:
    """Root set pinned to the workspace."""
    return RootSet.pinned([workspace])


@pytest.fixture
def make_pdf(workspace: Path) -> Callable[..., Path]:
    """Factory writing a PDF into the workspace."""

    def _make(name: str = "doc.pdf", pages: Sequence[PageSpec] | None = None) -> Path:
        if pages is None:
            pages = [(612, 792, "Alpha"), (612, 792, "Bravo"), (612, 792, "Charlie")]
        target = workspace / name
        target.parent.mkdir(parents=True, exist_ok=True)
        return write_pdf(target, pages)

    return _make


class FakePage:
    def __init__(self, text: str) -> None:
        self._text = text

    def extract_text(self) -> str:
        return self._text


def fake_reader_factory(texts: Sequence[str]) -> type:
    """Build a PdfReader stand-in whose pages return ``texts``."""

    class FakePdfReader:
        def __init__(self, stream) -> None:  # noqa: ARG002
            self.pages = [FakePage(text) for text in texts]
            self.is_encrypted = False
            self.metadata = None

    return FakePdfReader


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture
def fake_pdf_reader() -> Callable[[Sequence[str]], type]:
    """Factory for PdfReader stand-ins with fixed page texts."""
    return fake_reader_factory
