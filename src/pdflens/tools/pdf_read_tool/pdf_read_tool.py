"""
PDF Read Tool - Page count, text extraction and page rendering for PDF files.

Every tool resolves its ``path`` argument through the sandboxed resolver
against the client's current roots, reads the file fresh, and opens its own
document. Multi-page tools walk a clamped page window with per-page
cancellation checks and progress notifications.
"""

import logging
from typing import Annotated

import anyio
from fastmcp import Context, FastMCP
from fastmcp.utilities.types import Image
from pydantic import Field

from pdflens import config
from pdflens.document import PdfDocument
from pdflens.errors import PdfLensError, TransportError
from pdflens.pages import ProgressSink, cancel_requested, iterate_pages, normalize_range
from pdflens.roots import RootSet, peer_roots_fetcher
from pdflens.security import read_secure_file

logger = logging.getLogger(__name__)

PATH_DESCRIPTION = (
    "Absolute paths should start with `file:///`. Relative paths are relative to "
    "any of the user's current workspace directories. "
    "Examples: file:///home/user/Documents/workspace/document.pdf, ./document.pdf"
)

PdfPath = Annotated[str, Field(description=PATH_DESCRIPTION)]


def clamp_image_dimension(image_dimension: int) -> int:
    return max(1, min(image_dimension, config.MAX_IMAGE_DIMENSION))


def progress_sink(ctx: Context | None) -> ProgressSink | None:
    """Progress callback for the current request, or None if none was requested."""
    if ctx is None:
        return None
    meta = ctx.request_context.meta
    if meta is None or meta.progressToken is None:
        return None

    async def report(progress: int, total: int) -> None:
        await ctx.report_progress(progress=progress, total=total)

    return report


def _error(e: Exception) -> dict:
    if isinstance(e, PdfLensError):
        return {"error": str(e)}
    logger.exception("Unexpected error reading PDF")
    return {"error": f"Unexpected error reading PDF: {str(e)[:100]}"}


def register_tools(mcp: FastMCP, roots: RootSet) -> None:
    """Register PDF read tools with the MCP server."""

    async def open_document(path: str, ctx: Context | None) -> PdfDocument:
        snapshot = await roots.current(peer_roots_fetcher(ctx))
        data = await anyio.to_thread.run_sync(read_secure_file, path, snapshot)
        return await anyio.to_thread.run_sync(PdfDocument, data)

    @mcp.tool()
    async def pdflens_get_pdf_num_pages(path: PdfPath, ctx: Context | None = None) -> dict:
        """
        Get the number of pages in a PDF file.

        Args:
            path: PDF file reference (file:/// URI, absolute path, or relative
                to one of the user's workspace directories)

        Returns:
            Dict with the resolved path and num_pages, or error dict
        """
        try:
            with await open_document(path, ctx) as document:
                return {"path": path, "num_pages": document.page_count}
        except Exception as e:
            return _error(e)

    @mcp.tool()
    async def pdflens_read_pdf_as_text(
        path: PdfPath,
        from_page: int = 1,
        to_page: int | None = None,
        ctx: Context | None = None,
    ) -> dict:
        """
        Read a PDF file as plain text.

        Page texts are joined with a form feed character (\\f). Out-of-range
        page bounds are clamped to the document.

        Args:
            path: PDF file reference (file:/// URI, absolute path, or relative
                to one of the user's workspace directories)
            from_page: First page to read, 1-based (default: 1)
            to_page: Last page to read, inclusive; null = last page

        Returns:
            Dict with the text content and the page window read, or error dict
        """
        try:
            with await open_document(path, ctx) as document:
                window = normalize_range(from_page, to_page, document.page_count)
                texts = await iterate_pages(
                    window,
                    document.page_text,
                    is_cancelled=cancel_requested,
                    progress=progress_sink(ctx),
                )
                return {
                    "path": path,
                    "total_pages": document.page_count,
                    "from_page": window.first_page,
                    "to_page": window.first_page + len(texts) - 1,
                    "pages_extracted": len(texts),
                    "content": config.PAGE_SEPARATOR.join(texts),
                    "cancelled": len(texts) < len(window),
                }
        except TransportError:
            raise
        except Exception as e:
            return _error(e)

    @mcp.tool()
    async def pdflens_read_pdf_page_as_image(
        path: PdfPath,
        page: int = 1,
        image_dimension: int = config.DEFAULT_IMAGE_DIMENSION,
        ctx: Context | None = None,
    ) -> Image | dict:
        """
        Render one page of a PDF file as a PNG image.

        Args:
            path: PDF file reference (file:/// URI, absolute path, or relative
                to one of the user's workspace directories)
            page: Page number, 1-based (default: 1)
            image_dimension: Number of pixels on the longer side of the output image

        Returns:
            PNG image, or error dict
        """
        try:
            with await open_document(path, ctx) as document:
                index = document.check_page(page)
                png = await anyio.to_thread.run_sync(
                    document.render_page, index, clamp_image_dimension(image_dimension)
                )
                return Image(data=png, format="png")
        except Exception as e:
            return _error(e)

    @mcp.tool()
    async def pdflens_read_pdf_as_images(
        path: PdfPath,
        from_page: int = 1,
        to_page: int | None = None,
        image_dimension: int = config.DEFAULT_IMAGE_DIMENSION,
        ctx: Context | None = None,
    ) -> list[Image] | dict:
        """
        Render a range of PDF pages as PNG images, one image per page.

        Reports progress per page. Out-of-range page bounds are clamped to
        the document.

        Args:
            path: PDF file reference (file:/// URI, absolute path, or relative
                to one of the user's workspace directories)
            from_page: First page to render, 1-based (default: 1)
            to_page: Last page to render, inclusive; null = last page
            image_dimension: Number of pixels on the longer side of each output image

        Returns:
            List of PNG images, or error dict
        """
        dimension = clamp_image_dimension(image_dimension)
        try:
            with await open_document(path, ctx) as document:
                window = normalize_range(from_page, to_page, document.page_count)
                pngs = await iterate_pages(
                    window,
                    lambda index: document.render_page(index, dimension),
                    is_cancelled=cancel_requested,
                    progress=progress_sink(ctx),
                )
                return [Image(data=png, format="png") for png in pngs]
        except TransportError:
            raise
        except Exception as e:
            return _error(e)

