"""Output pixel size for a rendered page."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class RenderGeometry:
    """Target pixel size plus the per-axis scale that produces it."""

    width: int
    height: int
    scale_x: float
    scale_y: float


def _round(value: float) -> int:
    # Half away from zero; built-in round() would send 2.5 to 2.
    return math.floor(value + 0.5)


def compute_geometry(
    source_width: float, source_height: float, max_dimension: int
) -> RenderGeometry:
    """
    Fit a page of ``source_width`` x ``source_height`` into ``max_dimension``.

    The longer side (width on a tie) becomes exactly ``max_dimension``
    (at least 1), the other side keeps the aspect ratio, rounded and at
    least 1 pixel.
    """
    if source_width <= 0 or source_height <= 0:
        raise ValueError(f"Page size must be positive, got {source_width}x{source_height}")

    target = max(int(max_dimension), 1)
    if source_width >= source_height:
        width = target
        height = max(_round(source_height * target / source_width), 1)
    else:
        height = target
        width = max(_round(source_width * target / source_height), 1)

    return RenderGeometry(
        width=width,
        height=height,
        scale_x=width / source_width,
        scale_y=height / source_height,
    )
