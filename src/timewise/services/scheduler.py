"""Host scheduling contract.

The core never blocks. Everything time-based (task delays, notification ttl,
per-frame interpolation) is expressed as a continuation handed to a
``HostScheduler``:

 - ``now_ms()``: monotonic clock in milliseconds
 - ``call_later(delay_ms, callback)``: fire once after ``delay_ms``
 - ``call_before_paint(callback)``: fire once before the next frame is painted

Both return a ``TimerHandle`` whose ``cancel()`` is idempotent. The Qt
implementation lives in ``timewise.services.qt_scheduler``; a deterministic
virtual clock for tests lives in ``timewise.testing``.
"""

from __future__ import annotations

from typing import Callable, Protocol

__all__ = ["Callback", "TimerHandle", "HostScheduler"]

Callback = Callable[[], None]


class TimerHandle(Protocol):  # pragma: no cover - structural only
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class HostScheduler(Protocol):  # pragma: no cover - structural only
    def now_ms(self) -> float: ...

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle: ...

    def call_before_paint(self, callback: Callback) -> TimerHandle: ...
