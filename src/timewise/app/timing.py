"""Bootstrap phase timing.

Records named phase durations while ``create_app`` wires the core, so a slow
phase (Qt start-up, config I/O) shows up in the context metadata and logs.
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass
from time import perf_counter
from typing import Iterator, List

__all__ = ["TimingEvent", "TimingLogger"]


@dataclass(frozen=True)
class TimingEvent:
    name: str
    start: float
    end: float

    @property
    def duration(self) -> float:  # seconds
        return self.end - self.start


class TimingLogger:
    """Sequential phase recorder; phases may not nest.

    Usage:
        t = TimingLogger()
        with t.measure("load_config"):
            load_config()
        t.stop()
    """

    def __init__(self) -> None:
        self._started_at = perf_counter()
        self._stopped_at: float | None = None
        self._events: List[TimingEvent] = []
        self._active: str | None = None

    @contextlib.contextmanager
    def measure(self, name: str) -> Iterator[None]:
        if self._stopped_at is not None:
            raise RuntimeError("TimingLogger already stopped")
        if self._active is not None:
            raise RuntimeError(f"Phase '{name}' started while '{self._active}' is still active")
        self._active = name
        start = perf_counter()
        try:
            yield
        finally:
            # elapsed time is recorded even when the phase raised
            self._events.append(TimingEvent(name, start, perf_counter()))
            self._active = None

    def stop(self) -> None:
        if self._stopped_at is None:
            self._stopped_at = perf_counter()

    @property
    def events(self) -> List[TimingEvent]:
        return list(self._events)

    @property
    def total_duration(self) -> float:
        end = self._stopped_at if self._stopped_at is not None else perf_counter()
        return end - self._started_at

    def as_dict(self) -> dict:
        return {
            "total_duration": self.total_duration,
            "events": [{"name": e.name, "duration": e.duration} for e in self._events],
        }

    def __iter__(self) -> Iterator[TimingEvent]:
        return iter(self._events)
