"""
Page windows and the page iteration loop shared by the multi-page tools.

Callers speak 1-based inclusive page numbers; everything below this module
works on a 0-based half-open Window over the document's pages.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import TypeVar

import anyio

from pdflens.errors import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProgressSink = Callable[[int, int], Awaitable[None]]
"""Async callable receiving (progress, total) notifications."""

CancelCheck = Callable[[], bool]


@dataclass(frozen=True)
class Window:
    """Half-open page index range [start, end), 0 <= start <= end <= total."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end))

    @property
    def first_page(self) -> int:
        """1-based number of the first page in the window."""
        return self.start + 1

    @property
    def last_page(self) -> int:
        """1-based number of the last page; first_page - 1 when empty."""
        return self.end


def normalize_range(from_page: int | None, to_page: int | None, total: int) -> Window:
    """
    Convert optional 1-based inclusive page bounds to a Window over ``total`` pages.

    Out-of-range bounds are clamped, never rejected: a missing or sub-1
    ``from_page`` starts at the first page, a missing ``to_page`` runs to the
    last, and ``to_page < from_page`` yields an empty window.
    """
    total = max(total, 0)
    first = 1 if from_page is None else from_page
    start = min(max(first - 1, 0), total)
    end = total if to_page is None else min(max(to_page, start), total)
    return Window(start, end)


def cancel_requested() -> bool:
    """True once the cancel scope around the current request has been cancelled."""
    return anyio.current_effective_deadline() == -math.inf


async def _notify(progress: ProgressSink, done: int, total: int) -> None:
    try:
        await progress(done, total)
    except Exception as e:
        raise TransportError(
            f"Failed to deliver progress notification: {e}", original_error=e
        ) from e


async def iterate_pages(
    window: Window,
    work: Callable[[int], T],
    *,
    is_cancelled: CancelCheck | None = None,
    progress: ProgressSink | None = None,
) -> list[T]:
    """
    Run ``work`` for every page index in ``window``, in ascending order.

    Each call runs on the worker thread pool. Before each page the loop polls
    ``is_cancelled`` and emits progress (pages done so far, window length);
    after the last page it emits a final progress equal to the total.

    Args:
        window: Pages to process
        work: Blocking per-page function taking a 0-based page index
        is_cancelled: Cancellation check; when it returns True the loop stops
            and the results gathered so far are returned
        progress: Progress sink, or None if the caller asked for no progress

    Returns:
        One result per processed page

    Raises:
        TransportError: A progress notification could not be delivered
    """
    total = len(window)
    results: list[T] = []

    for done, index in enumerate(window):
        if is_cancelled is not None and is_cancelled():
            logger.info("Cancelled after %d of %d pages", done, total)
            return results
        if progress is not None:
            await _notify(progress, done, total)
        results.append(await anyio.to_thread.run_sync(work, index))

    if progress is not None:
        await _notify(progress, total, total)
    return results
