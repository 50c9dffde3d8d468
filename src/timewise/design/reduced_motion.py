"""Reduced-motion preference.

Single source of truth for whether transitions should collapse to their end
state. When enabled, the animation sequencer zeroes every duration and delay:
tasks still run in order and still resolve their completions, they just jump
straight to the final frame.

``TIMEWISE_PREFER_REDUCED_MOTION=1`` (or true/yes/on) enables it at import
time; ``DashboardConfig.reduced_motion`` can enable it during bootstrap.
"""

from __future__ import annotations

import contextlib
import os
from typing import Iterator

__all__ = [
    "set_reduced_motion",
    "is_reduced_motion",
    "adjust_duration",
    "temporarily_reduced_motion",
]

_reduced_motion_enabled: bool = os.getenv(
    "TIMEWISE_PREFER_REDUCED_MOTION", ""
).strip().lower() in {"1", "true", "yes", "on"}


def set_reduced_motion(enabled: bool) -> None:
    global _reduced_motion_enabled
    _reduced_motion_enabled = bool(enabled)


def is_reduced_motion() -> bool:
    return _reduced_motion_enabled


def adjust_duration(ms: float, minimum_ms: float = 0) -> float:
    """Return ``ms`` (clamped to >= 0), or ``minimum_ms`` when motion is reduced."""
    ms = max(0.0, float(ms))
    minimum_ms = max(0.0, float(minimum_ms))
    return minimum_ms if _reduced_motion_enabled else ms


@contextlib.contextmanager
def temporarily_reduced_motion(force: bool = True) -> Iterator[None]:
    """Force the preference on (or off with ``force=False``) inside the block."""
    prev = _reduced_motion_enabled
    try:
        set_reduced_motion(force)
        yield
    finally:
        set_reduced_motion(prev)
