"""Qt event-loop implementation of ``HostScheduler``.

Delays use single-shot ``QTimer``s; "before next paint" is approximated with
a single-shot timer at the frame interval (16 ms, ~60 FPS), which is how the
rest of the widget layer paces animation. The clock is a ``QElapsedTimer``
started with the scheduler.

Timers only fire while a ``QCoreApplication`` event loop is running.
Exceptions raised by callbacks are handed to the error service instead of
escaping into the event loop.
"""

from __future__ import annotations

from typing import Optional, Set

from PyQt6.QtCore import QElapsedTimer, QObject, QTimer

from .error_handling_service import ErrorHandlingService
from .scheduler import Callback

__all__ = ["QtHostScheduler", "QtTimerHandle"]

DEFAULT_FRAME_INTERVAL_MS = 16


class QtTimerHandle:
    def __init__(self, owner: "QtHostScheduler", timer: QTimer) -> None:
        self._owner = owner
        self._timer = timer
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._timer.stop()
        self._owner._release(self)

    def _fired(self) -> None:
        self._active = False
        self._owner._release(self)


class QtHostScheduler(QObject):
    def __init__(
        self,
        *,
        frame_interval_ms: int = DEFAULT_FRAME_INTERVAL_MS,
        error_service: ErrorHandlingService | None = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._frame_interval_ms = max(1, int(frame_interval_ms))
        self._errors = error_service
        self._clock = QElapsedTimer()
        self._clock.start()
        # Handles stay referenced until they fire or are cancelled
        self._pending: Set[QtTimerHandle] = set()

    def now_ms(self) -> float:
        return self._clock.nsecsElapsed() / 1_000_000.0

    def call_later(self, delay_ms: float, callback: Callback) -> QtTimerHandle:
        return self._schedule(max(0, int(round(delay_ms))), callback, origin="timer")

    def call_before_paint(self, callback: Callback) -> QtTimerHandle:
        return self._schedule(self._frame_interval_ms, callback, origin="frame")

    def pending_count(self) -> int:
        return len(self._pending)

    # Internal ---------------------------------------------------------
    def _schedule(self, interval: int, callback: Callback, *, origin: str) -> QtTimerHandle:
        timer = QTimer(self)
        timer.setSingleShot(True)
        handle = QtTimerHandle(self, timer)
        timer.timeout.connect(lambda: self._fire(handle, callback, origin))  # type: ignore[attr-defined]
        self._pending.add(handle)
        timer.start(interval)
        return handle

    def _fire(self, handle: QtTimerHandle, callback: Callback, origin: str) -> None:
        if not handle.active:
            return
        handle._fired()
        try:
            callback()
        except Exception as exc:  # noqa: BLE001 - keep the event loop alive
            if self._errors is None:
                raise
            self._errors.capture(exc, origin=origin)

    def _release(self, handle: QtTimerHandle) -> None:
        self._pending.discard(handle)
        handle._timer.deleteLater()
