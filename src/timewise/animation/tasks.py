"""Animation tasks, completion signals and task factories.

A task describes one transition on one element: what kind, how long, after
what delay, with which easing. The sequencer owns scheduling; tasks are
plain data plus a ``Completion`` that resolves exactly once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..errors import AnimationAbandoned

__all__ = [
    "AnimationKind",
    "AnimationOutcome",
    "Completion",
    "GroupCompletion",
    "AnimationTask",
    "DEFAULT_DURATION_MS",
    "DEFAULT_EASING",
    "fade_in",
    "fade_out",
    "slide_up",
    "slide_down",
    "slide_left",
    "slide_right",
    "scale_in",
    "pulse",
    "bounce",
    "shake",
    "rotate",
    "numeric",
    "dimension",
]

log = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 300
DEFAULT_EASING = "standard"
SLIDE_DISTANCE_PX = 20.0
PULSE_INTENSITY = 1.05
DIMENSION_DURATION_MS = 1000


class AnimationKind(str, Enum):
    FADE_IN = "fade-in"
    FADE_OUT = "fade-out"
    SLIDE_UP = "slide-up"
    SLIDE_DOWN = "slide-down"
    SLIDE_LEFT = "slide-left"
    SLIDE_RIGHT = "slide-right"
    SCALE = "scale"
    PULSE = "pulse"
    BOUNCE = "bounce"
    SHAKE = "shake"
    ROTATE = "rotate"
    NUMERIC = "numeric-interpolate"
    DIMENSION = "dimension-interpolate"


class AnimationOutcome(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ABANDONED = "abandoned"


DoneCallback = Callable[["Completion"], None]


class Completion:
    """Resolves once with an ``AnimationOutcome``.

    Callbacks added after resolution run immediately. A failing callback is
    logged and does not stop the others. An abandoned completion carries the
    ``AnimationAbandoned`` describing why in ``reason``.
    """

    __slots__ = ("element_id", "reason", "_outcome", "_callbacks")

    def __init__(self, element_id: str | None = None) -> None:
        self.element_id = element_id
        self.reason: AnimationAbandoned | None = None
        self._outcome: AnimationOutcome | None = None
        self._callbacks: List[DoneCallback] = []

    @property
    def done(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> AnimationOutcome | None:
        return self._outcome

    @property
    def fully_completed(self) -> bool:
        return self._outcome is AnimationOutcome.COMPLETED

    def add_done_callback(self, callback: DoneCallback) -> None:
        if self._outcome is not None:
            self._invoke(callback)
        else:
            self._callbacks.append(callback)

    def resolve(self, outcome: AnimationOutcome, reason: AnimationAbandoned | None = None) -> bool:
        """Set the outcome. Returns False if already resolved."""
        if self._outcome is not None:
            return False
        self._outcome = outcome
        self.reason = reason
        callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            self._invoke(cb)
        return True

    def _invoke(self, callback: DoneCallback) -> None:
        try:
            callback(self)
        except Exception:  # noqa: BLE001
            log.exception("Completion callback failed for element '%s'", self.element_id)

    def __repr__(self) -> str:  # pragma: no cover - debug aid
        state = self._outcome.value if self._outcome else "pending"
        return f"Completion({self.element_id!r}, {state})"


class GroupCompletion:
    """Aggregate of member completions, in submission order."""

    def __init__(self, members: Sequence[Completion]) -> None:
        self.members: List[Completion] = list(members)
        self._callbacks: List[Callable[["GroupCompletion"], None]] = []
        self._fired = False
        if not self.members:
            self._fired = True
        for member in self.members:
            member.add_done_callback(self._on_member_done)

    @property
    def done(self) -> bool:
        return all(m.done for m in self.members)

    @property
    def outcomes(self) -> List[AnimationOutcome | None]:
        return [m.outcome for m in self.members]

    @property
    def fully_completed(self) -> bool:
        return self.done and all(m.fully_completed for m in self.members)

    def add_done_callback(self, callback: Callable[["GroupCompletion"], None]) -> None:
        if self.done:
            callback(self)
        else:
            self._callbacks.append(callback)

    def _on_member_done(self, _member: Completion) -> None:
        if self._fired or not self.done:
            return
        self._fired = True
        callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            try:
                cb(self)
            except Exception:  # noqa: BLE001
                log.exception("Group completion callback failed")


@dataclass
class AnimationTask:
    kind: AnimationKind
    duration_ms: float = DEFAULT_DURATION_MS
    delay_ms: float = 0.0
    easing: str = DEFAULT_EASING
    params: Dict[str, Any] = field(default_factory=dict)
    on_start: Optional[Callable[[], None]] = None

    def __post_init__(self) -> None:
        self.kind = AnimationKind(self.kind)
        if self.duration_ms < 0 or self.delay_ms < 0:
            raise ValueError("duration_ms and delay_ms must not be negative")

    def with_delay(self, extra_ms: float) -> "AnimationTask":
        """Copy with ``extra_ms`` added to the delay (group stagger)."""
        return AnimationTask(
            kind=self.kind,
            duration_ms=self.duration_ms,
            delay_ms=self.delay_ms + extra_ms,
            easing=self.easing,
            params=dict(self.params),
            on_start=self.on_start,
        )


# ---------------- Factories --------------------------------------------


def fade_in(duration_ms: float = DEFAULT_DURATION_MS, *, delay_ms: float = 0, easing: str = DEFAULT_EASING) -> AnimationTask:
    return AnimationTask(AnimationKind.FADE_IN, duration_ms, delay_ms, easing)


def fade_out(duration_ms: float = DEFAULT_DURATION_MS, *, delay_ms: float = 0, easing: str = DEFAULT_EASING) -> AnimationTask:
    return AnimationTask(AnimationKind.FADE_OUT, duration_ms, delay_ms, easing)


def _slide(kind: AnimationKind, duration_ms, delay_ms, easing, distance, fade) -> AnimationTask:
    return AnimationTask(kind, duration_ms, delay_ms, easing, {"distance": float(distance), "fade": fade})


def slide_up(duration_ms: float = DEFAULT_DURATION_MS, *, delay_ms: float = 0, easing: str = DEFAULT_EASING,
             distance: float = SLIDE_DISTANCE_PX, fade: bool = True) -> AnimationTask:
    return _slide(AnimationKind.SLIDE_UP, duration_ms, delay_ms, easing, distance, fade)


def slide_down(duration_ms: float = DEFAULT_DURATION_MS, *, delay_ms: float = 0, easing: str = DEFAULT_EASING,
               distance: float = SLIDE_DISTANCE_PX, fade: bool = True) -> AnimationTask:
    return _slide(AnimationKind.SLIDE_DOWN, duration_ms, delay_ms, easing, distance, fade)


def slide_left(duration_ms: float = DEFAULT_DURATION_MS, *, delay_ms: float = 0, easing: str = DEFAULT_EASING,
               distance: float = SLIDE_DISTANCE_PX, fade: bool = True) -> AnimationTask:
    return _slide(AnimationKind.SLIDE_LEFT, duration_ms, delay_ms, easing, distance, fade)


def slide_right(duration_ms: float = DEFAULT_DURATION_MS, *, delay_ms: float = 0, easing: str = DEFAULT_EASING,
                distance: float = SLIDE_DISTANCE_PX, fade: bool = True) -> AnimationTask:
    """Exit slide: moves right while fading out (toast removal)."""
    return _slide(AnimationKind.SLIDE_RIGHT, duration_ms, delay_ms, easing, distance, fade)


def scale_in(duration_ms: float = DEFAULT_DURATION_MS, *, delay_ms: float = 0, easing: str = DEFAULT_EASING) -> AnimationTask:
    return AnimationTask(AnimationKind.SCALE, duration_ms, delay_ms, easing, {"start": 0.8})


def pulse(duration_ms: float = DEFAULT_DURATION_MS, *, delay_ms: float = 0, easing: str = "ease-out",
          intensity: float = PULSE_INTENSITY) -> AnimationTask:
    return AnimationTask(AnimationKind.PULSE, duration_ms, delay_ms, easing, {"intensity": float(intensity)})


def bounce(duration_ms: float = 600, *, delay_ms: float = 0, height: float = 10.0) -> AnimationTask:
    return AnimationTask(AnimationKind.BOUNCE, duration_ms, delay_ms, "linear", {"height": float(height)})


def shake(duration_ms: float = 500, *, delay_ms: float = 0, distance: float = 10.0) -> AnimationTask:
    return AnimationTask(AnimationKind.SHAKE, duration_ms, delay_ms, "linear", {"distance": float(distance)})


def rotate(duration_ms: float = 1000, *, delay_ms: float = 0, degrees: float = 360.0,
           easing: str = "linear") -> AnimationTask:
    return AnimationTask(AnimationKind.ROTATE, duration_ms, delay_ms, easing, {"degrees": float(degrees)})


def numeric(target: Any, duration_ms: float = 1000, *, delay_ms: float = 0) -> AnimationTask:
    """Count the element's text toward ``target`` (quartic ease-out)."""
    return AnimationTask(AnimationKind.NUMERIC, duration_ms, delay_ms, "ease-out-quart", {"target": str(target)})


def dimension(target_pct: float, duration_ms: float = DIMENSION_DURATION_MS, *, delay_ms: float = 0,
              easing: str = DEFAULT_EASING, start_pct: float | None = 0.0) -> AnimationTask:
    """Fill the element's width to ``target_pct`` of its parent.

    Starts from 0% like a progress bar; ``start_pct=None`` continues from the
    current width instead.
    """
    return AnimationTask(AnimationKind.DIMENSION, duration_ms, delay_ms, easing, {"target": float(target_pct), "start": start_pct})
