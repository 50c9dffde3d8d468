"""Deterministic host adapters for driving the core without a display.

``ManualScheduler`` is a virtual clock: nothing fires until the caller
advances time. ``call_before_paint`` callbacks land on the next frame
boundary (``frame_interval_ms`` after the current time), mirroring the Qt
scheduler's pacing.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..animation.elements import neutral_value
from ..charting.types import ChartKind, Series

__all__ = [
    "ManualScheduler",
    "ManualTimer",
    "FakeElement",
    "FakeElementResolver",
    "RecordingBackend",
    "RecordingHandle",
    "RecordingPresenter",
]


class ManualTimer:
    def __init__(self, due_ms: float, callback: Callable[[], None], kind: str) -> None:
        self.due_ms = due_ms
        self.callback = callback
        self.kind = kind
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False


class ManualScheduler:
    def __init__(self, *, frame_interval_ms: float = 16, start_ms: float = 0.0) -> None:
        self.frame_interval_ms = frame_interval_ms
        self._now = float(start_ms)
        self._heap: List[Tuple[float, int, ManualTimer]] = []
        self._seq = itertools.count()

    # HostScheduler ---------------------------------------------------
    def now_ms(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ManualTimer:
        return self._push(self._now + max(0.0, float(delay_ms)), callback, "timer")

    def call_before_paint(self, callback: Callable[[], None]) -> ManualTimer:
        return self._push(self._now + self.frame_interval_ms, callback, "frame")

    # Driving ---------------------------------------------------------
    def advance(self, ms: float) -> int:
        """Move the clock forward by ``ms``, firing everything due on the way.

        Callbacks scheduled while advancing fire too when they fall inside
        the window. Returns the number of callbacks fired.
        """
        target = self._now + ms
        fired = 0
        while self._heap and self._heap[0][0] <= target:
            due, _, timer = heapq.heappop(self._heap)
            if not timer.active:
                continue
            self._now = max(self._now, due)
            timer.cancel()
            timer.callback()
            fired += 1
        self._now = target
        return fired

    def run_frames(self, count: int = 1) -> int:
        return sum(self.advance(self.frame_interval_ms) for _ in range(count))

    def run_until_idle(self, limit_ms: float = 60_000) -> int:
        """Fire callbacks in due order until nothing is pending (or ``limit_ms`` passes)."""
        deadline = self._now + limit_ms
        fired = 0
        while True:
            self._drop_cancelled()
            if not self._heap or self._heap[0][0] > deadline:
                break
            fired += self.advance(self._heap[0][0] - self._now)
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._heap if t.active)

    def _push(self, due_ms: float, callback: Callable[[], None], kind: str) -> ManualTimer:
        timer = ManualTimer(due_ms, callback, kind)
        heapq.heappush(self._heap, (due_ms, next(self._seq), timer))
        return timer

    def _drop_cancelled(self) -> None:
        while self._heap and not self._heap[0][2].active:
            heapq.heappop(self._heap)


class FakeElement:
    """In-memory animatable element recording every property write."""

    def __init__(self, **initial: Any) -> None:
        self.properties: Dict[str, Any] = dict(initial)
        self.attached = True
        self.history: List[Tuple[str, Any]] = []

    def is_attached(self) -> bool:
        return self.attached

    def get_property(self, name: str) -> Any:
        if name in self.properties:
            return self.properties[name]
        return neutral_value(name)

    def set_property(self, name: str, value: Any) -> None:
        self.properties[name] = value
        self.history.append((name, value))

    def values_of(self, name: str) -> List[Any]:
        return [v for n, v in self.history if n == name]


class FakeElementResolver:
    def __init__(self) -> None:
        self._elements: Dict[str, FakeElement] = {}

    def add(self, element_id: str, element: FakeElement | None = None, **initial: Any) -> FakeElement:
        element = element if element is not None else FakeElement(**initial)
        self._elements[element_id] = element
        return element

    def remove(self, element_id: str) -> None:
        self._elements.pop(element_id, None)

    def detach(self, element_id: str) -> None:
        self._elements[element_id].attached = False

    def resolve(self, element_id: str) -> Optional[FakeElement]:
        return self._elements.get(element_id)

    def __getitem__(self, element_id: str) -> FakeElement:
        return self._elements[element_id]


@dataclass
class RecordingHandle:
    surface_id: str
    serial: int
    disposed: bool = False
    kind: Optional[ChartKind] = None
    series: List[Series] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)


class RecordingBackend:
    """Render backend that records calls instead of drawing.

    Only surfaces passed to the constructor (or ``add_surface``) resolve.
    """

    def __init__(self, surfaces: Sequence[str] = (), *, fail_dispose: bool = False) -> None:
        self.surfaces = set(surfaces)
        self.fail_dispose = fail_dispose
        self.calls: List[Tuple[str, str]] = []
        self.handles: List[RecordingHandle] = []
        self._serial = itertools.count(1)

    def add_surface(self, surface_id: str) -> None:
        self.surfaces.add(surface_id)

    def remove_surface(self, surface_id: str) -> None:
        self.surfaces.discard(surface_id)

    def attach(self, surface_id: str) -> RecordingHandle | None:
        self.calls.append(("attach", surface_id))
        if surface_id not in self.surfaces:
            return None
        handle = RecordingHandle(surface_id, next(self._serial))
        self.handles.append(handle)
        return handle

    def draw(
        self,
        handle: RecordingHandle,
        kind: ChartKind,
        series: Sequence[Series],
        labels: Sequence[str],
        options: Mapping[str, Any],
    ) -> None:
        self.calls.append(("draw", handle.surface_id))
        handle.kind = kind
        handle.series = list(series)
        handle.labels = list(labels)
        handle.options = dict(options)

    def mutate(self, handle: RecordingHandle, series: Sequence[Series], labels: Sequence[str]) -> None:
        self.calls.append(("mutate", handle.surface_id))
        handle.series = list(series)
        handle.labels = list(labels)

    def dispose(self, handle: RecordingHandle) -> None:
        self.calls.append(("dispose", handle.surface_id))
        handle.disposed = True
        if self.fail_dispose:
            raise RuntimeError(f"dispose failed for {handle.surface_id}")

    def relayout(self, handle: RecordingHandle) -> None:
        self.calls.append(("relayout", handle.surface_id))

    def live_handles(self, surface_id: str | None = None) -> List[RecordingHandle]:
        return [
            h
            for h in self.handles
            if not h.disposed and h.kind is not None and (surface_id is None or h.surface_id == surface_id)
        ]

    def ops(self, name: str) -> List[str]:
        return [surface for op, surface in self.calls if op == name]


class RecordingPresenter:
    def __init__(self) -> None:
        self.shown: List[Any] = []
        self.removed: List[int] = []

    def show(self, notification) -> None:
        self.shown.append(notification)

    def remove(self, notification_id: int) -> None:
        self.removed.append(notification_id)

    @property
    def visible_ids(self) -> List[int]:
        return [n.id for n in self.shown if n.id not in self.removed]
