"""Capture of exceptions raised inside scheduled callbacks and global hooks.

Timer and per-frame callbacks run from the Qt event loop, where an exception
would otherwise be printed and forgotten. The schedulers and the animation
sequencer hand such exceptions to ``ErrorHandlingService.handle_exception``,
which keeps a short ring buffer of ``ErrorRecord``s, groups repeats, logs them
and announces them on the event bus. ``install()`` additionally routes
``sys.excepthook`` through the same path.
"""

from __future__ import annotations

import logging
import sys
import traceback
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Deque, List

from .event_bus import DashboardEvent, EventBus

__all__ = ["ErrorRecord", "DedupEntry", "ErrorHandlingService"]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorRecord:
    """One captured exception.

    Attributes
    ----------
    exc_type: type
        Exception class.
    exc_value: BaseException
        Exception instance.
    traceback_str: str
        Formatted traceback text.
    origin: str
        Where it was caught (e.g. ``"timer"``, ``"frame"``, ``"excepthook"``).
    iso_time: str
        UTC timestamp of capture.
    """

    exc_type: type
    exc_value: BaseException
    traceback_str: str
    origin: str
    iso_time: str

    def summary(self, max_len: int = 120) -> str:
        msg = f"{self.exc_type.__name__}: {self.exc_value}"
        return msg if len(msg) <= max_len else msg[: max_len - 3] + "..."


@dataclass
class DedupEntry:
    key: str
    first: ErrorRecord
    count: int


class ErrorHandlingService:
    def __init__(self, *, capacity: int = 20, event_bus: EventBus | None = None) -> None:
        self._errors: Deque[ErrorRecord] = deque(maxlen=max(1, capacity))
        self._bus = event_bus
        self._dedup: dict[str, DedupEntry] = {}
        self._installed = False
        self._prev_hook = None

    # Installation -----------------------------------------------------
    def install(self) -> None:
        if self._installed:
            return
        self._prev_hook = sys.excepthook
        sys.excepthook = self._sys_hook
        self._installed = True

    def uninstall(self) -> None:
        if not self._installed:
            return
        sys.excepthook = self._prev_hook or sys.__excepthook__
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    def _sys_hook(self, exc_type, exc_value, tb):  # pragma: no cover - delegate
        self.handle_exception(exc_type, exc_value, tb, origin="excepthook")
        if self._prev_hook is not None:
            self._prev_hook(exc_type, exc_value, tb)

    # Core -------------------------------------------------------------
    def handle_exception(self, exc_type, exc_value, tb, *, origin: str = "callback") -> ErrorRecord:
        record = ErrorRecord(
            exc_type=exc_type,
            exc_value=exc_value,
            traceback_str="".join(traceback.format_exception(exc_type, exc_value, tb)),
            origin=origin,
            iso_time=datetime.now(timezone.utc).isoformat(),
        )
        self._errors.append(record)
        key = f"{exc_type.__name__}|{hash(record.traceback_str)}"
        entry = self._dedup.get(key)
        if entry is None:
            self._dedup[key] = DedupEntry(key=key, first=record, count=1)
        else:
            entry.count += 1
        log.error("Unhandled exception in %s: %s", origin, record.summary())
        if self._bus is not None:
            self._bus.publish(
                DashboardEvent.ERROR_OCCURRED,
                {"type": exc_type.__name__, "message": str(exc_value), "origin": origin},
            )
        return record

    def capture(self, exc: BaseException, *, origin: str = "callback") -> ErrorRecord:
        """Shorthand for ``handle_exception`` from inside an ``except`` block."""
        return self.handle_exception(type(exc), exc, exc.__traceback__, origin=origin)

    # Introspection ----------------------------------------------------
    def recent_errors(self) -> List[ErrorRecord]:
        return list(self._errors)

    def dedup_entries(self) -> List[DedupEntry]:
        return list(self._dedup.values())

    def clear(self) -> None:
        self._errors.clear()
        self._dedup.clear()
