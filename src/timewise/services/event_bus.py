"""Synchronous publish/subscribe bus for dashboard lifecycle events.

Chart creation/teardown, notification traffic, view changes and captured
errors are announced here so panels (log viewer, status bar, tests) can
observe the core without holding references into it.

 - No Qt dependency; handlers run inline on the publishing call stack
 - One failing handler never breaks the publish cycle (errors are kept)
 - ``once`` subscriptions and cancellable ``Subscription`` handles
 - Optional fixed-size trace ring buffer for diagnostics
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from threading import RLock
from time import perf_counter
from typing import Any, Deque, Dict, List, Protocol, Tuple

__all__ = [
    "DashboardEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "Subscription",
]


class DashboardEvent(str, Enum):
    STARTUP_COMPLETE = "startup_complete"
    VIEW_CHANGED = "view_changed"
    PERIOD_CHANGED = "period_changed"
    CHART_CREATED = "chart_created"
    CHART_DESTROYED = "chart_destroyed"
    SURFACE_UNRESOLVED = "surface_unresolved"
    NOTIFICATION_POSTED = "notification_posted"
    NOTIFICATION_DISMISSED = "notification_dismissed"
    NOTIFICATION_EVICTED = "notification_evicted"
    ERROR_OCCURRED = "error_occurred"
    LOG_RECORD_ADDED = "log_record_added"
    UNCAUGHT_EXCEPTION = "uncaught_exception"


@dataclass
class Event:
    name: str
    payload: Any
    timestamp: float


class EventHandler(Protocol):
    def __call__(self, event: Event) -> None: ...  # pragma: no cover - structural


@dataclass
class Subscription:
    event: str
    handler: EventHandler
    once: bool
    active: bool = True

    def cancel(self) -> None:
        self.active = False


def _key(name: str | DashboardEvent) -> str:
    return name.value if isinstance(name, DashboardEvent) else name


class EventBus:
    """Synchronous event dispatcher.

    Handlers are invoked outside the lock (subscribers are snapshotted first)
    so a handler may subscribe or unsubscribe without deadlocking.
    """

    DEFAULT_TRACE_CAPACITY = 50

    def __init__(self) -> None:
        self._lock = RLock()
        self._subs: Dict[str, List[Subscription]] = {}
        self._errors: List[tuple[Event, BaseException]] = []
        self._tracing_enabled = False
        self._traces: Deque[Tuple[str, float, str]] = deque(maxlen=self.DEFAULT_TRACE_CAPACITY)

    # Subscription management -----------------------------------------
    def subscribe(
        self, name: str | DashboardEvent, handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        sub = Subscription(event=_key(name), handler=handler, once=once)
        with self._lock:
            self._subs.setdefault(sub.event, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            bucket = self._subs.get(sub.event)
            if bucket and sub in bucket:
                bucket.remove(sub)
                if not bucket:
                    self._subs.pop(sub.event, None)
        sub.active = False

    def clear(self) -> None:
        with self._lock:
            self._subs.clear()
            self._errors.clear()

    # Publishing -------------------------------------------------------
    def publish(self, name: str | DashboardEvent, payload: Any = None) -> Event:
        key = _key(name)
        evt = Event(name=key, payload=payload, timestamp=perf_counter())
        with self._lock:
            subs = list(self._subs.get(key, ()))
            if self._tracing_enabled:
                text = "-" if payload is None else str(payload)
                summary = text if len(text) <= 40 else text[:37] + "..."
                self._traces.append((key, evt.timestamp, summary))
        finished: List[Subscription] = []
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(evt)
            except Exception as exc:  # noqa: BLE001 - isolate handler failures
                self._errors.append((evt, exc))
            else:
                if sub.once:
                    finished.append(sub)
        for sub in finished:
            self.unsubscribe(sub)
        return evt

    # Introspection ----------------------------------------------------
    def subscriber_count(self, name: str | DashboardEvent) -> int:
        with self._lock:
            return len(self._subs.get(_key(name), ()))

    @property
    def errors(self) -> list[tuple[Event, BaseException]]:
        with self._lock:
            return list(self._errors)

    # Tracing ----------------------------------------------------------
    def enable_tracing(self, enabled: bool = True, *, capacity: int | None = None) -> None:
        with self._lock:
            self._tracing_enabled = enabled
            if capacity is not None and capacity != self._traces.maxlen:
                self._traces = deque(self._traces, maxlen=capacity)

    def recent_traces(self) -> list[Tuple[str, float, str]]:
        with self._lock:
            return list(self._traces)

    @property
    def tracing_enabled(self) -> bool:
        return self._tracing_enabled
