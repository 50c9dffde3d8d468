"""Per-element animation sequencing.

Each element id gets a FIFO queue, created on the first task and dropped as
soon as it empties. Only the head task of a queue touches the element; the
next task starts after the previous one's completion has resolved.

Timing comes from the host scheduler: ``call_later`` for the start delay,
``call_before_paint`` for each interpolation frame. Nothing here blocks or
polls.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional, Sequence

from ..design.reduced_motion import adjust_duration
from ..errors import AnimationAbandoned
from ..services.error_handling_service import ErrorHandlingService
from ..services.scheduler import HostScheduler, TimerHandle
from .effects import Frame, build_effect
from .elements import AnimatableElement, ElementResolver
from .tasks import (
    DIMENSION_DURATION_MS,
    AnimationOutcome,
    AnimationTask,
    Completion,
    GroupCompletion,
    dimension,
    numeric,
)

__all__ = ["AnimationSequencer"]

log = logging.getLogger(__name__)


@dataclass
class _Entry:
    task: AnimationTask
    completion: Completion
    started: bool = False
    timer: Optional[TimerHandle] = None
    frame: Optional[Frame] = None
    began_ms: float = 0.0
    duration_ms: float = 0.0


class AnimationSequencer:
    def __init__(
        self,
        scheduler: HostScheduler,
        resolver: ElementResolver,
        *,
        error_service: ErrorHandlingService | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._resolver = resolver
        self._errors = error_service
        self._queues: Dict[str, Deque[_Entry]] = {}

    # ---------------- Submission --------------------------------------
    def run(self, element_id: str, task: AnimationTask) -> Completion:
        entry = _Entry(task=task, completion=Completion(element_id))
        queue = self._queues.get(element_id)
        if queue is None:
            queue = self._queues[element_id] = deque()
        queue.append(entry)
        if len(queue) == 1:
            self._start(element_id, entry)
        return entry.completion

    def run_group(
        self,
        element_ids: Sequence[str],
        task_factory: Callable[[int], AnimationTask],
        stagger_ms: float = 100.0,
    ) -> GroupCompletion:
        """Submit ``task_factory(i)`` to the i-th element, offset by ``i * stagger_ms``."""
        members = [
            self.run(element_id, task_factory(i).with_delay(i * stagger_ms))
            for i, element_id in enumerate(element_ids)
        ]
        return GroupCompletion(members)

    def animate_value(self, element_id: str, new_text: object, duration_ms: float = 1000) -> Completion:
        return self.run(element_id, numeric(new_text, duration_ms))

    def animate_dimension(
        self, element_id: str, target_pct: float, duration_ms: float = DIMENSION_DURATION_MS
    ) -> Completion:
        return self.run(element_id, dimension(target_pct, duration_ms))

    # ---------------- Cancellation & introspection ---------------------
    def cancel(self, element_id: str) -> int:
        """Cancel every task queued for ``element_id``; returns how many."""
        queue = self._queues.pop(element_id, None)
        if not queue:
            return 0
        for entry in queue:
            if entry.timer is not None:
                entry.timer.cancel()
                entry.timer = None
        for entry in queue:
            entry.completion.resolve(AnimationOutcome.CANCELLED)
        log.debug("Cancelled %d animation(s) on '%s'", len(queue), element_id)
        return len(queue)

    def cancel_all(self) -> int:
        return sum(self.cancel(element_id) for element_id in list(self._queues))

    def is_busy(self, element_id: str) -> bool:
        return element_id in self._queues

    def busy_elements(self) -> List[str]:
        return list(self._queues)

    def pending(self, element_id: str) -> int:
        return len(self._queues.get(element_id, ()))

    # ---------------- Task lifecycle ----------------------------------
    def _start(self, element_id: str, entry: _Entry) -> None:
        entry.started = True
        delay = adjust_duration(entry.task.delay_ms)
        if delay > 0:
            entry.timer = self._scheduler.call_later(delay, lambda: self._begin(element_id, entry))
        else:
            self._begin(element_id, entry)

    def _resolve_element(self, element_id: str) -> AnimatableElement | None:
        element = self._resolver.resolve(element_id)
        if element is None or not element.is_attached():
            return None
        return element

    def _begin(self, element_id: str, entry: _Entry) -> None:
        entry.timer = None
        if entry.completion.done:
            return
        element = self._resolve_element(element_id)
        if element is None:
            log.debug("Element '%s' not available; %s abandoned", element_id, entry.task.kind.value)
            self._abandon(element_id, entry, "element not available")
            return
        try:
            if entry.task.on_start is not None:
                entry.task.on_start()
            entry.frame = build_effect(element, entry.task)
        except Exception as exc:  # noqa: BLE001
            self._report(exc, element_id, entry)
            return
        entry.began_ms = self._scheduler.now_ms()
        entry.duration_ms = adjust_duration(entry.task.duration_ms)
        entry.timer = self._scheduler.call_before_paint(lambda: self._tick(element_id, entry))

    def _tick(self, element_id: str, entry: _Entry) -> None:
        entry.timer = None
        if entry.completion.done:
            return
        element = self._resolve_element(element_id)
        if element is None:
            log.debug("Element '%s' detached mid-animation; abandoned", element_id)
            self._abandon(element_id, entry, "element detached mid-animation")
            return
        if entry.duration_ms <= 0:
            progress = 1.0
        else:
            progress = min(1.0, (self._scheduler.now_ms() - entry.began_ms) / entry.duration_ms)
        try:
            entry.frame(element, progress)  # type: ignore[misc]
        except Exception as exc:  # noqa: BLE001
            self._report(exc, element_id, entry)
            return
        if progress >= 1.0:
            self._finish(element_id, entry, AnimationOutcome.COMPLETED)
        else:
            entry.timer = self._scheduler.call_before_paint(lambda: self._tick(element_id, entry))

    def _report(self, exc: Exception, element_id: str, entry: _Entry) -> None:
        origin = f"animation:{entry.task.kind.value}:{element_id}"
        if self._errors is not None:
            self._errors.capture(exc, origin=origin)
        else:
            log.error("Animation effect failed (%s)", origin, exc_info=exc)
        self._abandon(element_id, entry, f"effect raised {type(exc).__name__}", cause=exc)

    def _abandon(
        self, element_id: str, entry: _Entry, why: str, *, cause: Exception | None = None
    ) -> None:
        reason = AnimationAbandoned(
            f"{entry.task.kind.value} on '{element_id}' abandoned: {why}",
            context={"element_id": element_id, "kind": entry.task.kind.value},
        )
        reason.__cause__ = cause
        self._finish(element_id, entry, AnimationOutcome.ABANDONED, reason)

    def _finish(
        self,
        element_id: str,
        entry: _Entry,
        outcome: AnimationOutcome,
        reason: AnimationAbandoned | None = None,
    ) -> None:
        queue = self._queues.get(element_id)
        if queue and queue[0] is entry:
            queue.popleft()
            if not queue:
                del self._queues[element_id]
        entry.completion.resolve(outcome, reason)
        # a done-callback may have enqueued onto (or cancelled) this element
        queue = self._queues.get(element_id)
        if queue and not queue[0].started:
            self._start(element_id, queue[0])
