"""Motion tokens and easing functions.

Durations and easing curves are named tokens so transitions across the
dashboard share one vocabulary. Easing tokens are stored as CSS-like
``cubic-bezier(x1, y1, x2, y2)`` strings and compiled into plain
``progress -> eased progress`` callables; ``ease-out-quart`` and ``linear``
are provided as closed forms.

No Qt imports: the animation engine evaluates curves itself per frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, Dict, Mapping, Tuple

__all__ = [
    "CubicBezier",
    "Easing",
    "MotionSpec",
    "DEFAULT_MOTION",
    "parse_cubic_bezier",
    "cubic_bezier",
    "ease_out_quart",
    "linear",
    "get_easing",
    "get_duration_ms",
]

CubicBezier = Tuple[float, float, float, float]
Easing = Callable[[float], float]

DEFAULT_DURATIONS: Dict[str, int] = {
    "instant": 150,
    "subtle": 300,
    "notification": 400,
    "pronounced": 1000,
}

DEFAULT_EASINGS: Dict[str, str] = {
    "standard": "cubic-bezier(0.4, 0, 0.2, 1)",
    "decelerate": "cubic-bezier(0, 0, 0.2, 1)",
    "accelerate": "cubic-bezier(0.4, 0, 1, 1)",
    "emphasized": "cubic-bezier(0.175, 0.885, 0.32, 1.275)",
    "ease-out": "cubic-bezier(0, 0, 0.58, 1)",
}


def parse_cubic_bezier(spec: str) -> CubicBezier:
    """Parse ``'cubic-bezier(x1, y1, x2, y2)'`` into a float tuple.

    x control points must lie in [0, 1] so the curve stays a function of time.
    """
    s = spec.strip().lower()
    if not s.startswith("cubic-bezier(") or not s.endswith(")"):
        raise ValueError(f"Invalid cubic-bezier format: {spec}")
    parts = [p.strip() for p in s[len("cubic-bezier(") : -1].split(",")]
    if len(parts) != 4:
        raise ValueError(f"cubic-bezier requires 4 components, got {len(parts)}: {spec}")
    try:
        x1, y1, x2, y2 = (float(p) for p in parts)
    except ValueError as e:
        raise ValueError(f"Non-numeric cubic-bezier value in {spec}") from e
    if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
        raise ValueError(f"cubic-bezier x values must be within [0, 1]: {spec}")
    return x1, y1, x2, y2


def linear(x: float) -> float:
    return min(1.0, max(0.0, x))


def ease_out_quart(x: float) -> float:
    """Quartic ease-out: ``1 - (1 - x)^4``, monotonic on [0, 1]."""
    x = linear(x)
    return 1.0 - (1.0 - x) ** 4


def cubic_bezier(x1: float, y1: float, x2: float, y2: float) -> Easing:
    """Build an easing callable for the given control points.

    Solves ``x(t) = progress`` with a few Newton steps, falling back to
    bisection where the derivative flattens out, then returns ``y(t)``.
    """

    def _coord(t: float, p1: float, p2: float) -> float:
        u = 1.0 - t
        return 3 * u * u * t * p1 + 3 * u * t * t * p2 + t * t * t

    def _slope(t: float, p1: float, p2: float) -> float:
        u = 1.0 - t
        return 3 * u * u * p1 + 6 * u * t * (p2 - p1) + 3 * t * t * (1.0 - p2)

    def _solve_t(x: float) -> float:
        t = x
        for _ in range(8):
            err = _coord(t, x1, x2) - x
            if abs(err) < 1e-7:
                return t
            d = _slope(t, x1, x2)
            if abs(d) < 1e-6:
                break
            t -= err / d
        lo, hi = 0.0, 1.0
        t = min(1.0, max(0.0, t))
        for _ in range(40):
            value = _coord(t, x1, x2)
            if abs(value - x) < 1e-7:
                break
            if value < x:
                lo = t
            else:
                hi = t
            t = (lo + hi) / 2.0
        return t

    def ease(progress: float) -> float:
        if progress <= 0.0:
            return 0.0
        if progress >= 1.0:
            return 1.0
        return _coord(_solve_t(progress), y1, y2)

    return ease


@dataclass
class MotionSpec:
    durations: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_DURATIONS))
    easings: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_EASINGS))

    def duration(self, name: str) -> int:
        if name not in self.durations:
            raise KeyError(f"Unknown motion duration token: {name}")
        return self.durations[name]

    def easing(self, name: str) -> Easing:
        if name == "linear":
            return linear
        if name == "ease-out-quart":
            return ease_out_quart
        raw = self.easings.get(name)
        if raw is None:
            raise KeyError(f"Unknown easing token: {name}")
        return _compiled(raw)


@lru_cache(maxsize=32)
def _compiled(raw: str) -> Easing:
    return cubic_bezier(*parse_cubic_bezier(raw))


DEFAULT_MOTION = MotionSpec()


def get_easing(name: str) -> Easing:
    """Resolve an easing token or a literal ``cubic-bezier(...)`` string."""
    if name.strip().lower().startswith("cubic-bezier("):
        return _compiled(name)
    return DEFAULT_MOTION.easing(name)


def get_duration_ms(name: str) -> int:
    return DEFAULT_MOTION.duration(name)
