"""
PDF document engine adapter.

Uses pypdf for page count and text extraction, PyMuPDF for rasterizing
pages and Pillow for PNG encoding. A PdfDocument owns handles opened from
one call's bytes and is never shared between calls.
"""

from __future__ import annotations

import io
import logging

import fitz  # PyMuPDF
from PIL import Image
from pypdf import PdfReader
from pypdf.errors import PdfReadError, PdfStreamError

from pdflens.errors import DocumentError, PageOutOfRangeError
from pdflens.geometry import RenderGeometry, compute_geometry

logger = logging.getLogger(__name__)


class PdfDocument:
    """An opened PDF, readable page by page."""

    def __init__(self, data: bytes):
        if not data:
            raise DocumentError("Empty PDF file (0 bytes)")

        self._data = data
        self._rasterizer: fitz.Document | None = None

        try:
            self._reader = PdfReader(io.BytesIO(data))
        except PdfReadError as e:
            raise DocumentError(f"Corrupted PDF structure: {str(e)[:100]}", original_error=e) from e
        except PdfStreamError as e:
            raise DocumentError(
                f"PDF stream error (malformed content): {str(e)[:100]}", original_error=e
            ) from e
        except Exception as e:
            raise DocumentError(f"Failed to open PDF: {str(e)[:100]}", original_error=e) from e

        if self._reader.is_encrypted:
            self._decrypt()

        try:
            self._page_count = len(self._reader.pages)
        except Exception as e:
            raise DocumentError(f"Failed to read page tree: {str(e)[:100]}", original_error=e) from e

    def _decrypt(self) -> None:
        # Only documents with an empty user password can be opened.
        try:
            decrypted = self._reader.decrypt("")
        except Exception as e:
            raise DocumentError(f"Encrypted PDF could not be opened: {e}", original_error=e) from e
        if not decrypted:
            raise DocumentError("Encrypted PDF detected. Password support not implemented.")

    @property
    def page_count(self) -> int:
        return self._page_count

    def check_page(self, page: int) -> int:
        """Validate a 1-based page number and return its 0-based index."""
        if page < 1 or page > self._page_count:
            raise PageOutOfRangeError(page, self._page_count)
        return page - 1

    def page_text(self, index: int) -> str:
        """Extracted text of the page at 0-based ``index``."""
        try:
            return self._reader.pages[index].extract_text() or ""
        except Exception as e:
            raise DocumentError(
                f"Failed to extract text from page {index + 1}: {str(e)[:100]}",
                original_error=e,
            ) from e

    def _fitz(self) -> fitz.Document:
        if self._rasterizer is None:
            try:
                self._rasterizer = fitz.open(stream=self._data, filetype="pdf")
            except Exception as e:
                raise DocumentError(f"Failed to open PDF for rendering: {e}", original_error=e) from e
            if self._rasterizer.needs_pass and not self._rasterizer.authenticate(""):
                raise DocumentError("Encrypted PDF detected. Password support not implemented.")
        return self._rasterizer

    def page_size(self, index: int) -> tuple[float, float]:
        """Displayed page size in points, rotation applied."""
        rect = self._fitz()[index].rect
        return rect.width, rect.height

    def render_page(self, index: int, max_dimension: int) -> bytes:
        """Render the page at 0-based ``index`` to PNG, longer side ``max_dimension`` px."""
        try:
            geometry = compute_geometry(*self.page_size(index), max_dimension)
            return self._render(index, geometry)
        except DocumentError:
            raise
        except Exception as e:
            raise DocumentError(
                f"Failed to render page {index + 1}: {str(e)[:100]}", original_error=e
            ) from e

    def _render(self, index: int, geometry: RenderGeometry) -> bytes:
        page = self._fitz()[index]
        pix = page.get_pixmap(matrix=fitz.Matrix(geometry.scale_x, geometry.scale_y), alpha=False)
        image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)

        size = (geometry.width, geometry.height)
        if image.size != size:
            logger.debug("Rasterized page %d at %s, resizing to %s", index + 1, image.size, size)
            image = image.resize(size, Image.Resampling.LANCZOS)

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def close(self) -> None:
        if self._rasterizer is not None:
            self._rasterizer.close()
            self._rasterizer = None

    def __enter__(self) -> PdfDocument:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
