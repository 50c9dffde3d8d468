"""In-process log capture for the dashboard.

A ``logging.Handler`` attached to the root logger copies recent records into
a bounded ring buffer so a log panel (or a crash report) can show what the
registry, sequencer and notification center were doing. Each record is also
announced as ``DashboardEvent.LOG_RECORD_ADDED`` when an event bus is wired.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import asdict, dataclass
from pathlib import Path
from threading import RLock
from typing import Deque, List, Optional

from .event_bus import DashboardEvent, EventBus

__all__ = ["LogEntry", "LoggingService"]


@dataclass(frozen=True)
class LogEntry:
    level: str
    name: str
    message: str
    created: float
    pathname: str
    lineno: int


class _RingBufferHandler(logging.Handler):
    def __init__(self, svc: "LoggingService") -> None:
        super().__init__(level=logging.DEBUG)
        self._svc = svc

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._svc._ingest(record)
        except Exception:  # noqa: BLE001 - logging must never raise into callers
            self.handleError(record)


class LoggingService:
    def __init__(
        self,
        capacity: int = 500,
        *,
        event_bus: EventBus | None = None,
        logger_name: str = "",
    ) -> None:
        self._lock = RLock()
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._handler = _RingBufferHandler(self)
        self._bus = event_bus
        self._logger_name = logger_name
        self._attached = False

    # Lifecycle --------------------------------------------------------
    def attach(self, level: int = logging.DEBUG) -> None:
        if self._attached:
            return
        target = logging.getLogger(self._logger_name)
        target.addHandler(self._handler)
        if target.level == logging.NOTSET or target.level > level:
            target.setLevel(level)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        logging.getLogger(self._logger_name).removeHandler(self._handler)
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    def _ingest(self, record: logging.LogRecord) -> None:
        entry = LogEntry(
            level=record.levelname,
            name=record.name,
            message=record.getMessage(),
            created=record.created,
            pathname=record.pathname,
            lineno=record.lineno,
        )
        with self._lock:
            self._entries.append(entry)
        if self._bus is not None:
            self._bus.publish(
                DashboardEvent.LOG_RECORD_ADDED,
                {"level": entry.level, "name": entry.name, "message": entry.message[:120]},
            )

    # Query ------------------------------------------------------------
    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        with self._lock:
            data = list(self._entries)
        return data[-limit:] if limit is not None else data

    def filter(self, *, level: str | None = None, name_contains: str | None = None) -> List[LogEntry]:
        return [
            e
            for e in self.recent()
            if (level is None or e.level == level)
            and (name_contains is None or name_contains in e.name)
        ]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def export_jsonl(
        self,
        path: str | Path,
        *,
        level: str | None = None,
        name_contains: str | None = None,
    ) -> int:
        """Write filtered entries as JSON Lines; returns the number written."""
        entries = self.filter(level=level, name_contains=name_contains)
        with open(path, "w", encoding="utf-8") as fh:
            for e in entries:
                fh.write(json.dumps(asdict(e), sort_keys=True) + "\n")
        return len(entries)
