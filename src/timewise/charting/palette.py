"""Default series palette.

Fixed at import and never mutated, so it needs no synchronization. A series
without an explicit color gets ``PALETTE[index % len(PALETTE)]``: stable
across re-renders as long as series order is stable.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .types import Series

PALETTE: Tuple[str, ...] = (
    "#4285F4",
    "#34A853",
    "#FBBC05",
    "#EA4335",
    "#9C27B0",
    "#FF9800",
    "#607D8B",
    "#795548",
    "#E91E63",
    "#00BCD4",
    "#8BC34A",
    "#FFC107",
)


def color_for_index(index: int, palette: Sequence[str] = PALETTE) -> str:
    if not palette:
        raise ValueError("palette must not be empty")
    return palette[max(0, index) % len(palette)]


def assign_colors(series: Sequence[Series], palette: Sequence[str] = PALETTE) -> List[Series]:
    """Fill missing colors by series position; explicit colors are kept."""
    return [
        s if s.color else s.with_color(color_for_index(i, palette)) for i, s in enumerate(series)
    ]


__all__ = ["PALETTE", "color_for_index", "assign_colors"]
