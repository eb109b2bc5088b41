"""
pdflens Exceptions.

Every failure a tool can report to the caller derives from PdfLensError:
- NotFoundError: the reference does not name a readable file under any root
- PermissionDeniedError: the reference names a real file outside every root
- DocumentError: the PDF engine cannot open or read the document
- PageOutOfRangeError: an explicit page number is outside 1..=page_count
- TransportError: a required notification could not be delivered

Tool handlers turn these into ``{"error": ...}`` payloads, except
TransportError which is fatal to the call and propagates.
"""

from __future__ import annotations

from typing import Any


class PdfLensError(Exception):
    """
    Base exception for all pdflens errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error code for categorization
        context: Additional context dict for debugging
        original_error: The underlying exception if this wraps another error
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_code = error_code or "PDFLENS_ERROR"
        self.context = context or {}
        self.original_error = original_error

        super().__init__(message)

        if original_error:
            self.__cause__ = original_error


class NotFoundError(PdfLensError):
    """Raised when a path reference does not resolve to an existing file under any root."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(message, error_code="NOT_FOUND", **kwargs)


class PermissionDeniedError(PdfLensError):
    """Raised when a path reference resolves to a file outside every permitted root."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(message, error_code="PERMISSION_DENIED", **kwargs)


class DocumentError(PdfLensError):
    """Raised when the document engine cannot parse or read a file."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(message, error_code="DOCUMENT_ERROR", **kwargs)


class PageOutOfRangeError(PdfLensError):
    """Raised when a single-page request names a page outside the document."""

    def __init__(self, page: int, total_pages: int, **kwargs: Any):
        context = kwargs.pop("context", {})
        context.update({"page": page, "total_pages": total_pages})
        super().__init__(
            f"Page {page} out of range. PDF has {total_pages} pages.",
            error_code="PAGE_OUT_OF_RANGE",
            context=context,
            **kwargs,
        )
        self.page = page
        self.total_pages = total_pages


class TransportError(PdfLensError):
    """Raised when a progress notification cannot be delivered to the caller."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(message, error_code="TRANSPORT_ERROR", **kwargs)
